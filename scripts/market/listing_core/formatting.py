"""Shared text, money and time formatting helpers for human-facing screens."""

from __future__ import annotations

import re
from datetime import datetime, timezone

SPECIAL_STATUS_LABELS = {
    "IN_PROGRESS": "In Progress",
    "NO_SHOW": "No Show",
}

TOKEN_LABELS = {
    "api": "API",
    "id": "ID",
    "otp": "OTP",
    "upi": "UPI",
}

# Badge tones, keyed by lower-cased status label.
STATUS_TONES = {
    "active": "green",
    "approved": "green",
    "completed": "green",
    "confirmed": "green",
    "delivered": "green",
    "hired": "green",
    "paid": "green",
    "published": "green",
    "verified": "green",
    "available": "green",
    "pending": "yellow",
    "processing": "yellow",
    "reviewed": "yellow",
    "scheduled": "yellow",
    "shortlisted": "yellow",
    "in progress": "blue",
    "interviewed": "blue",
    "offered": "blue",
    "booked": "blue",
    "cancelled": "red",
    "canceled": "red",
    "failed": "red",
    "inactive": "red",
    "rejected": "red",
    "flagged": "red",
    "no show": "red",
    "withdrawn": "dim",
    "closed": "dim",
    "draft": "dim",
    "unverified": "dim",
}

DELIMITER_RE = re.compile(r"[._/\-\s]+")
DISPLAY_DATE_FORMATS = ("%Y-%m-%d", "%b %d, %Y", "%B %d, %Y", "%d %b %Y", "%m/%d/%Y")


def status_label(status: str | bool | None) -> str:
    if status is None:
        return "Unknown"
    if isinstance(status, bool):
        return "Active" if status else "Inactive"

    raw = str(status).strip()
    if not raw:
        return "Unknown"

    mapped = SPECIAL_STATUS_LABELS.get(raw.upper())
    if mapped:
        return mapped

    tokens = [t for t in DELIMITER_RE.split(raw) if t]
    parts: list[str] = []
    for token in tokens:
        lower = token.lower()
        if lower in TOKEN_LABELS:
            parts.append(TOKEN_LABELS[lower])
        else:
            parts.append(lower.capitalize())
    return " ".join(parts) or "Unknown"


def status_tone(status: str | bool | None) -> str:
    return STATUS_TONES.get(status_label(status).lower(), "default")


def format_money(amount: float | int | str | None, currency: str = "₹") -> str:
    if amount is None or amount == "":
        return "-"
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return str(amount)
    if value.is_integer():
        return f"{currency}{int(value):,}"
    return f"{currency}{value:,.2f}"


def parse_iso_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_date(value: object) -> datetime | None:
    """Parse API timestamps and the display dates used by mock screens."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if value is None:
        return None
    text = str(value).strip()
    parsed = parse_iso_timestamp(text)
    if parsed is not None:
        return parsed
    for fmt in DISPLAY_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return None


def display_date(value: object) -> str:
    parsed = parse_date(value)
    if parsed is None:
        return str(value) if value else "-"
    return parsed.strftime("%Y-%m-%d")


def initials(name: str | None) -> str:
    text = (name or "").strip()
    return text[:2].upper() if text else "--"


def same_day(value: object, day: object) -> bool:
    """Calendar-day equality across ISO timestamps and display dates."""
    left = parse_date(value)
    right = parse_date(day)
    if left is None or right is None:
        return False
    return left.date() == right.date()


def last_active(value: object, now: datetime | None = None) -> str:
    seen = parse_date(value)
    if seen is None:
        return "Never"
    seconds = int(((now or datetime.now(timezone.utc)) - seen).total_seconds())
    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    if seconds < 30 * 86400:
        return f"{seconds // 86400}d ago"
    return seen.strftime("%Y-%m-%d")
