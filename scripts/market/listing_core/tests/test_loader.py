from __future__ import annotations

import unittest
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from listing_core.loader import CancelToken, CollectionLoader  # noqa: E402
from listing_core.models import LoadState  # noqa: E402
from listing_core.resources.orders import ORDERS  # noqa: E402
from listing_core.resources.users import BUYERS  # noqa: E402
from listing_core.resources.vendor import EARNINGS  # noqa: E402
from listing_core.session import SessionContext  # noqa: E402
from listing_core.tests.fakes import BUYER_ROWS, FakeClient, network_down, rejected  # noqa: E402


class LoaderStateTests(unittest.TestCase):
    def test_starts_idle(self):
        loader = CollectionLoader(BUYERS, FakeClient(BUYER_ROWS))
        self.assertIs(loader.state, LoadState.IDLE)
        self.assertEqual(loader.items, [])

    def test_success_replaces_collection(self):
        client = FakeClient(BUYER_ROWS)
        loader = CollectionLoader(BUYERS, client)
        self.assertTrue(loader.load())
        self.assertIs(loader.state, LoadState.LOADED)
        self.assertEqual([i["id"] for i in loader.items], ["u1", "u2", "u3", "u4"])
        self.assertEqual(loader.items[2]["phone"], "N/A")
        self.assertEqual(client.calls[0], ("GET", "/api/users", {"role": "BUYER", "limit": "100"}))

    def test_failure_keeps_stale_collection(self):
        client = FakeClient(BUYER_ROWS)
        loader = CollectionLoader(BUYERS, client)
        loader.load()
        client.fail_with = network_down()
        self.assertFalse(loader.load())
        self.assertIs(loader.state, LoadState.ERRORED)
        self.assertEqual(loader.error, "Failed to load buyers")
        self.assertEqual(len(loader.items), 4)

    def test_failure_before_any_load_leaves_empty(self):
        loader = CollectionLoader(BUYERS, FakeClient(fail_with=network_down()))
        loader.load()
        self.assertIs(loader.state, LoadState.ERRORED)
        self.assertEqual(loader.items, [])
        self.assertFalse(loader.loaded_once)

    def test_application_error_message_passes_through(self):
        loader = CollectionLoader(BUYERS, FakeClient(fail_with=rejected("Role filter not allowed")))
        loader.load()
        self.assertEqual(loader.error, "Role filter not allowed")

    def test_refresh_after_error_recovers(self):
        client = FakeClient(BUYER_ROWS, fail_with=network_down())
        loader = CollectionLoader(BUYERS, client)
        loader.load()
        client.fail_with = None
        self.assertTrue(loader.load())
        self.assertIs(loader.state, LoadState.LOADED)
        self.assertIsNone(loader.error)

    def test_duplicate_ids_keep_first(self):
        rows = BUYER_ROWS + [dict(BUYER_ROWS[0], name="Impostor")]
        loader = CollectionLoader(BUYERS, FakeClient(rows))
        loader.load()
        self.assertEqual(len(loader.items), 4)
        self.assertEqual(loader.items[0]["name"], "Rahul Sharma")
        self.assertEqual(loader.warnings, ["duplicate id dropped: u1"])


class CancellationTests(unittest.TestCase):
    def test_cancelled_token_discards_response(self):
        loader = CollectionLoader(BUYERS, FakeClient(BUYER_ROWS))
        token = CancelToken()
        token.cancel()
        self.assertFalse(loader.load(token))
        self.assertEqual(loader.items, [])
        self.assertIsNone(loader.error)

    def test_response_arriving_after_cancel_is_dropped(self):
        token = CancelToken()
        client = FakeClient(BUYER_ROWS)
        real_fetch = client.fetch

        def fetch_then_cancel(*args, **kwargs):
            rows = real_fetch(*args, **kwargs)
            token.cancel()
            return rows

        client.fetch = fetch_then_cancel
        loader = CollectionLoader(BUYERS, client)
        self.assertFalse(loader.load(token))
        self.assertEqual(loader.items, [])
        self.assertEqual(len(client.calls), 1)

    def test_cancel_during_fetch_does_not_leave_loading(self):
        token = CancelToken()
        client = FakeClient(BUYER_ROWS)
        real_fetch = client.fetch

        def fetch_then_cancel(*args, **kwargs):
            rows = real_fetch(*args, **kwargs)
            token.cancel()
            return rows

        loader = CollectionLoader(BUYERS, client)
        loader.load()
        client.fetch = fetch_then_cancel
        loader.load(token)
        self.assertIs(loader.state, LoadState.LOADED)

    def test_cancel_during_failed_fetch_restores_idle(self):
        token = CancelToken()
        client = FakeClient(BUYER_ROWS)

        def cancel_then_fail(*args, **kwargs):
            token.cancel()
            raise network_down()

        client.fetch = cancel_then_fail
        loader = CollectionLoader(BUYERS, client)
        loader.load(token)
        self.assertIs(loader.state, LoadState.IDLE)
        self.assertIsNone(loader.error)

    def test_overlapping_loads_last_response_wins(self):
        client = FakeClient(BUYER_ROWS)
        loader = CollectionLoader(BUYERS, client)
        loader.load()
        client.rows = BUYER_ROWS[:1]
        loader.load()
        self.assertEqual([i["id"] for i in loader.items], ["u1"])

    def test_cancelled_token_discards_failure(self):
        loader = CollectionLoader(BUYERS, FakeClient(fail_with=network_down()))
        token = CancelToken()
        token.cancel()
        loader.load(token)
        self.assertIsNone(loader.error)

    def test_background_load(self):
        loader = CollectionLoader(BUYERS, FakeClient(BUYER_ROWS))
        with ThreadPoolExecutor(max_workers=1) as pool:
            self.assertTrue(loader.load_in_background(pool, CancelToken()).result(timeout=5))
        self.assertEqual(len(loader.items), 4)


class ScopeTests(unittest.TestCase):
    def test_seller_orders_scoped_by_seller_id(self):
        client = FakeClient([])
        session = SessionContext(user_id="s-9", role="SELLER")
        CollectionLoader(ORDERS, client, session).load()
        self.assertEqual(client.calls[0][2]["sellerId"], "s-9")

    def test_admin_orders_unscoped(self):
        client = FakeClient([])
        CollectionLoader(ORDERS, client, SessionContext(user_id="a-1", role="ADMIN")).load()
        self.assertNotIn("sellerId", client.calls[0][2])
        self.assertNotIn("buyerId", client.calls[0][2])

    def test_session_required_screen_errors_without_session(self):
        client = FakeClient([])
        loader = CollectionLoader(EARNINGS, client)
        loader.load()
        self.assertIs(loader.state, LoadState.ERRORED)
        self.assertIn("signed-in user", loader.error)
        self.assertEqual(client.calls, [])


if __name__ == "__main__":
    unittest.main()
