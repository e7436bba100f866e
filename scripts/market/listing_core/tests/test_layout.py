from __future__ import annotations

import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from listing_core.layout import select_layout_mode, visible_columns  # noqa: E402
from listing_core.resources.users import BUYERS  # noqa: E402


class LayoutTests(unittest.TestCase):
    def test_narrow(self):
        self.assertEqual(select_layout_mode(80), "narrow")

    def test_medium(self):
        self.assertEqual(select_layout_mode(120), "medium")

    def test_wide(self):
        self.assertEqual(select_layout_mode(180), "wide")

    def test_wide_keeps_every_column(self):
        self.assertEqual(len(visible_columns(BUYERS.columns, 200)), len(BUYERS.columns))

    def test_narrow_trims_but_pins_status(self):
        columns = visible_columns(BUYERS.columns, 80, pinned="active")
        self.assertEqual(len(columns), 4)
        self.assertEqual(columns[-1].header, "Status")
        self.assertEqual(columns[0].header, "Name")


if __name__ == "__main__":
    unittest.main()
