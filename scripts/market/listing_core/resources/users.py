"""Buyer, seller and employer directories (``/api/users?role=...``)."""

from __future__ import annotations

from listing_core.formatting import display_date, format_money, initials, last_active
from listing_core.resources.base import CategoricalFilter, Column, ResourceDescriptor, SortOption

STATUS_FILTER = CategoricalFilter(
    name="status",
    field="active",
    options={"Active": True, "Inactive": False},
    all_label="All Status",
)

VERIFICATION_FILTER = CategoricalFilter(
    name="verification",
    field="verified",
    options={"Verified": True, "Unverified": False},
    all_label="All Verification",
)


def _location(user: dict) -> str:
    city = user.get("city")
    state = user.get("state")
    if city and state:
        return f"{city}, {state}"
    return user.get("location") or "Not Specified"


def normalize_user(user: dict) -> dict:
    name = str(user.get("name") or "")
    active = user.get("active")
    return {
        "id": str(user.get("id")),
        "name": name,
        "email": str(user.get("email") or ""),
        "phone": user.get("phone") or "N/A",
        "location": _location(user),
        "company": user.get("companyName") or user.get("company") or "",
        "industry": user.get("industry") or "",
        "verified": bool(user.get("verified") or False),
        "active": True if active is None else bool(active),
        "joinedDate": user.get("createdAt") or user.get("joinedDate"),
        "lastActivity": user.get("updatedAt") or user.get("lastActivity"),
        "totalSpent": float(user.get("totalSpent") or 0),
        "rating": float(user.get("rating") or 0),
        "avatar": initials(name),
    }


USER_SOURCES = {
    "location": ("city", "state", "location"),
    "company": ("companyName", "company"),
    "joinedDate": ("createdAt", "joinedDate"),
    "lastActivity": ("updatedAt", "lastActivity"),
    "avatar": ("name",),
}


def user_defaults(fields: dict) -> dict:
    return {
        "phone": "N/A",
        "location": "Not Specified",
        "company": "",
        "industry": "",
        "verified": False,
        "active": True,
        "totalSpent": 0.0,
        "rating": 0.0,
        "avatar": initials(fields.get("name")),
    }


def summarize_users(users: list[dict]) -> dict:
    rated = [u["rating"] for u in users if u.get("rating")]
    return {
        "total": len(users),
        "active": sum(1 for u in users if u.get("active")),
        "verified": sum(1 for u in users if u.get("verified")),
        "total_spent": sum(float(u.get("totalSpent") or 0) for u in users),
        "avg_rating": round(sum(rated) / len(rated), 2) if rated else 0.0,
    }


def _status_text(active: object) -> str:
    return "Active" if active else "Inactive"


USER_SORTS = (
    SortOption("Newest", "joinedDate", descending=True, kind="date"),
    SortOption("Oldest", "joinedDate", kind="date"),
    SortOption("Name", "name"),
    SortOption("Top Spenders", "totalSpent", descending=True, kind="number"),
)


def _user_descriptor(key: str, title: str, role: str, columns: tuple[Column, ...], search: tuple[str, ...]) -> ResourceDescriptor:
    return ResourceDescriptor(
        key=key,
        title=title,
        path="/api/users",
        list_key="users",
        scope_params={"role": role, "limit": "100"},
        columns=columns,
        search_fields=search,
        filters=(STATUS_FILTER, VERIFICATION_FILTER),
        sorts=USER_SORTS,
        normalize=normalize_user,
        field_sources=USER_SOURCES,
        item_keys=("user",),
        defaults=user_defaults,
        required_fields=("name", "email"),
        numeric_fields=("totalSpent", "rating"),
        status_field="active",
        # /api/users only serves reads; directory edits live until the next refresh
        write_mode="local",
        summarize=summarize_users,
    )


BUYERS = _user_descriptor(
    "buyers",
    "Buyers",
    "BUYER",
    (
        Column("Name", "name"),
        Column("Email", "email"),
        Column("Phone", "phone"),
        Column("Location", "location"),
        Column("Total Spent", "totalSpent", format_money),
        Column("Rating", "rating"),
        Column("Status", "active", _status_text),
        Column("Verified", "verified"),
        Column("Joined Date", "joinedDate", display_date),
        Column("Last Active", "lastActivity", last_active),
    ),
    ("name", "email", "phone"),
)

SELLERS = _user_descriptor(
    "sellers",
    "Sellers",
    "SELLER",
    (
        Column("Name", "name"),
        Column("Email", "email"),
        Column("Phone", "phone"),
        Column("Location", "location"),
        Column("Rating", "rating"),
        Column("Status", "active", _status_text),
        Column("Verified", "verified"),
        Column("Joined Date", "joinedDate", display_date),
        Column("Last Active", "lastActivity", last_active),
    ),
    ("name", "email", "phone", "location"),
)

EMPLOYERS = _user_descriptor(
    "employers",
    "Employers",
    "EMPLOYER",
    (
        Column("Company", "company"),
        Column("Contact Person", "name"),
        Column("Email", "email"),
        Column("Phone", "phone"),
        Column("Location", "location"),
        Column("Industry", "industry"),
        Column("Status", "active", _status_text),
    ),
    ("name", "company", "email", "phone"),
)
