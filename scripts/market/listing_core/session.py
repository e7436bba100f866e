"""Explicit session context injected into screens."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

ROLES = {"ADMIN", "SELLER", "BUYER", "EMPLOYER"}

ROLE_ALIASES = {
    "VENDOR": "SELLER",
    "COMPANY": "EMPLOYER",
    "CUSTOMER": "BUYER",
    "JOB_SEEKER": "BUYER",
}


def normalize_role(value: str | None) -> str:
    raw = str(value or "").strip().upper().replace("-", "_")
    role = ROLE_ALIASES.get(raw, raw)
    if role not in ROLES:
        raise ValueError(f"unknown role: {value}")
    return role


@dataclass(frozen=True)
class SessionContext:
    user_id: str
    role: str
    name: str = ""
    email: str = ""
    token: str | None = None

    @classmethod
    def from_dict(cls, payload: dict) -> "SessionContext":
        user_id = payload.get("id") or payload.get("userId") or payload.get("user_id")
        if not user_id:
            raise ValueError("user payload has no id")
        return cls(
            user_id=str(user_id),
            role=normalize_role(payload.get("role")),
            name=str(payload.get("name") or ""),
            email=str(payload.get("email") or ""),
            token=payload.get("token"),
        )

    def auth_headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}


def load_session(path: str | None) -> SessionContext | None:
    """Read a serialized user object, as handed back by the auth service."""
    if not path:
        return None

    user_path = Path(path)
    if not user_path.exists():
        raise ValueError(f"user file not found: {user_path}")

    try:
        payload = json.loads(user_path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON user file: {exc}") from exc

    if isinstance(payload, dict) and isinstance(payload.get("user"), dict):
        payload = payload["user"]
    if not isinstance(payload, dict):
        raise ValueError("user file must contain a JSON object")
    return SessionContext.from_dict(payload)


def env_user_file() -> str | None:
    return os.environ.get("MARKET_USER_FILE") or None
