"""REST client for the marketplace API.

Every endpoint answers with a JSON envelope carrying a ``success`` boolean.
``success: false`` responses carry a human-readable ``message`` that is
passed through to the user verbatim.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import requests

from listing_core.errors import ApplicationError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 10.0


def env_base_url() -> str:
    return os.environ.get("MARKET_API_URL", DEFAULT_BASE_URL).rstrip("/")


def env_timeout() -> float:
    raw = os.environ.get("MARKET_API_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return max(1.0, float(raw))
    except ValueError as exc:
        raise ValueError(f"invalid MARKET_API_TIMEOUT: {raw}") from exc


def read_envelope(response: requests.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if not isinstance(payload, dict) or "success" not in payload:
        if response.ok:
            raise ApplicationError("invalid response from server", response.status_code)
        reason = response.reason or "request failed"
        raise ApplicationError(f"HTTP {response.status_code}: {reason}", response.status_code)

    if not payload.get("success"):
        message = payload.get("message") or payload.get("error") or "request failed"
        raise ApplicationError(str(message), response.status_code)
    return payload


class ApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        session: requests.Session | None = None,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.base_url = (base_url or env_base_url()).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else env_timeout()
        self.session.headers.update({"Content-Type": "application/json"})
        if headers:
            self.session.headers.update(headers)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        url = self._url(path)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as exc:
            logger.warning("%s %s timed out after %ss", method, url, self.timeout)
            raise TransportError(f"request to {path} timed out", exc) from exc
        except requests.exceptions.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(f"cannot reach {path}", exc) from exc

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return read_envelope(response)

    def fetch(self, path: str, list_key: str, params: dict[str, Any] | None = None) -> list[dict]:
        payload = self._send("GET", path, params={k: v for k, v in (params or {}).items() if v is not None})
        rows = payload.get(list_key)
        if rows is None:
            rows = payload.get("data") or []
        if not isinstance(rows, list):
            raise ApplicationError(f"expected a list under '{list_key}'")
        return [row for row in rows if isinstance(row, dict)]

    def create(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        return self._send("POST", path, json=body)

    def update(self, path: str, item_id: str, patch: dict[str, Any], method: str = "PUT", id_field: str | None = None) -> dict[str, Any]:
        # Some endpoints take the id in the body instead of the URL.
        if id_field:
            return self._send(method, path, json={id_field: item_id, **patch})
        return self._send(method, f"{path.rstrip('/')}/{item_id}", json=patch)

    def delete(self, path: str, item_id: str, id_param: str = "id") -> dict[str, Any]:
        return self._send("DELETE", path, params={id_param: item_id})


def item_from_envelope(payload: dict[str, Any], keys: tuple[str, ...]) -> dict[str, Any] | None:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, dict):
            return value
    return None
