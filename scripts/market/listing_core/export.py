"""CSV export of the currently visible rows."""

from __future__ import annotations

import csv
import io
from datetime import date
from pathlib import Path

from listing_core.resources.base import ResourceDescriptor


def export_filename(descriptor: ResourceDescriptor, today: date | None = None) -> str:
    stamp = (today or date.today()).isoformat()
    return f"{descriptor.key}-export-{stamp}.csv"


def rows_to_csv(rows: list[dict], descriptor: ResourceDescriptor) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([column.header for column in descriptor.columns])
    for row in rows:
        writer.writerow([column.render(row) for column in descriptor.columns])
    return buffer.getvalue()


def write_csv(rows: list[dict], descriptor: ResourceDescriptor, target: str | Path | None = None) -> Path:
    path = Path(target) if target else Path(export_filename(descriptor))
    if path.is_dir():
        path = path / export_filename(descriptor)
    path.write_text(rows_to_csv(rows, descriptor), encoding="utf-8")
    return path
