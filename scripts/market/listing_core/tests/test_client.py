from __future__ import annotations

import unittest
from pathlib import Path
from unittest.mock import MagicMock
import sys

import requests

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from listing_core.client import ApiClient, item_from_envelope  # noqa: E402
from listing_core.errors import ApplicationError, TransportError  # noqa: E402


def response(payload, status=200, reason="OK"):
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status
    resp.reason = reason
    resp.ok = status < 400
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


def client_with(resp=None, error=None):
    session = MagicMock()
    session.headers = {}
    if error is not None:
        session.request.side_effect = error
    else:
        session.request.return_value = resp
    return ApiClient(base_url="http://api.test/", session=session, timeout=5), session


class EnvelopeTests(unittest.TestCase):
    def test_fetch_returns_list_and_drops_none_params(self):
        client, session = client_with(response({"success": True, "users": [{"id": "1"}, "junk"]}))
        rows = client.fetch("/api/users", "users", {"role": "BUYER", "page": None})
        self.assertEqual(rows, [{"id": "1"}])
        session.request.assert_called_once_with(
            "GET", "http://api.test/api/users", timeout=5, params={"role": "BUYER"}
        )

    def test_success_false_surfaces_message_verbatim(self):
        client, _ = client_with(response({"success": False, "message": "Review not found"}, 404, "Not Found"))
        with self.assertRaises(ApplicationError) as ctx:
            client.delete("/api/reviews", "r1", "reviewId")
        self.assertEqual(str(ctx.exception), "Review not found")
        self.assertEqual(ctx.exception.status_code, 404)

    def test_non_json_error_uses_http_status(self):
        client, _ = client_with(response(ValueError("no json"), 502, "Bad Gateway"))
        with self.assertRaises(ApplicationError) as ctx:
            client.fetch("/api/orders", "orders")
        self.assertEqual(str(ctx.exception), "HTTP 502: Bad Gateway")

    def test_missing_success_flag_on_200(self):
        client, _ = client_with(response({"orders": []}))
        with self.assertRaises(ApplicationError):
            client.fetch("/api/orders", "orders")

    def test_list_key_must_hold_a_list(self):
        client, _ = client_with(response({"success": True, "orders": {"id": "x"}}))
        with self.assertRaises(ApplicationError):
            client.fetch("/api/orders", "orders")

    def test_transport_errors_wrap_requests_exceptions(self):
        client, _ = client_with(error=requests.exceptions.ConnectionError("refused"))
        with self.assertRaises(TransportError) as ctx:
            client.fetch("/api/orders", "orders")
        self.assertIsInstance(ctx.exception.cause, requests.exceptions.ConnectionError)

    def test_timeout_is_transport_error(self):
        client, _ = client_with(error=requests.exceptions.Timeout())
        with self.assertRaises(TransportError):
            client.create("/api/jobs", {"title": "Chef"})


class WriteRoutingTests(unittest.TestCase):
    def test_update_with_id_in_url(self):
        client, session = client_with(response({"success": True}))
        client.update("/api/users", "u1", {"active": False})
        session.request.assert_called_once_with(
            "PUT", "http://api.test/api/users/u1", timeout=5, json={"active": False}
        )

    def test_update_with_id_in_body(self):
        client, session = client_with(response({"success": True}))
        client.update("/api/job-applications", "a1", {"status": "HIRED"}, method="PATCH", id_field="applicationId")
        session.request.assert_called_once_with(
            "PATCH",
            "http://api.test/api/job-applications",
            timeout=5,
            json={"applicationId": "a1", "status": "HIRED"},
        )

    def test_delete_uses_query_param(self):
        client, session = client_with(response({"success": True}))
        client.delete("/api/reviews", "r1", "reviewId")
        session.request.assert_called_once_with(
            "DELETE", "http://api.test/api/reviews", timeout=5, params={"reviewId": "r1"}
        )

    def test_item_from_envelope(self):
        payload = {"success": True, "message": "ok", "order": {"id": "o1"}}
        self.assertEqual(item_from_envelope(payload, ("booking", "order")), {"id": "o1"})
        self.assertIsNone(item_from_envelope(payload, ("user",)))


if __name__ == "__main__":
    unittest.main()
