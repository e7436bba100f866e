"""Vendor earnings and weekly schedule. Both screens are read-only."""

from __future__ import annotations

from listing_core.formatting import display_date, format_money
from listing_core.resources.base import CategoricalFilter, Column, ResourceDescriptor, SortOption


def normalize_earning(row: dict) -> dict:
    return {
        "id": str(row.get("id")),
        "product": row.get("product") or "",
        "customer": row.get("customer") or "Customer",
        "amount": float(row.get("amount") or 0),
        "date": row.get("date"),
        "status": str(row.get("status") or "Pending"),
    }


def summarize_earnings(rows: list[dict]) -> dict:
    delivered = [r for r in rows if r.get("status") == "Delivered"]
    total = sum(r["amount"] for r in rows)
    return {
        "orders": len(rows),
        "revenue": sum(r["amount"] for r in delivered),
        "pending_payout": sum(r["amount"] for r in rows if r.get("status") in ("Pending", "Processing")),
        "avg_order_value": round(total / len(rows), 2) if rows else 0.0,
    }


EARNINGS = ResourceDescriptor(
    key="earnings",
    title="Earnings",
    path="/api/vendor/earnings",
    list_key="recentOrders",
    role_scopes={"SELLER": {"sellerId": "user_id"}},
    requires_session=True,
    columns=(
        Column("Order", "id"),
        Column("Product", "product"),
        Column("Customer", "customer"),
        Column("Amount", "amount", format_money),
        Column("Date", "date", display_date),
        Column("Status", "status"),
    ),
    search_fields=("id", "product", "customer"),
    filters=(
        CategoricalFilter(
            "status",
            "status",
            {
                "Pending": "Pending",
                "Processing": "Processing",
                "Shipped": "Shipped",
                "Delivered": "Delivered",
                "Cancelled": "Cancelled",
                "Refunded": "Refunded",
            },
            all_label="All Status",
        ),
    ),
    sorts=(
        SortOption("Newest", "date", descending=True, kind="date"),
        SortOption("Amount: High to Low", "amount", descending=True, kind="number"),
        SortOption("Amount: Low to High", "amount", kind="number"),
    ),
    normalize=normalize_earning,
    writable=(),
    summarize=summarize_earnings,
)


def normalize_slot(slot: dict) -> dict:
    enabled = bool(slot.get("enabled"))
    return {
        "id": str(slot.get("day")),
        "day": str(slot.get("day")),
        "enabled": enabled,
        "startTime": slot.get("startTime") or "",
        "endTime": slot.get("endTime") or "",
        "status": "AVAILABLE" if enabled else "CLOSED",
    }


SCHEDULES = ResourceDescriptor(
    key="schedules",
    title="Weekly Schedule",
    path="/api/vendor/schedule",
    list_key="schedule",
    role_scopes={"SELLER": {"userId": "user_id"}, "ADMIN": {"userId": "user_id"}},
    requires_session=True,
    columns=(
        Column("Day", "day"),
        Column("Open", "enabled"),
        Column("Start", "startTime"),
        Column("End", "endTime"),
    ),
    search_fields=("day",),
    filters=(
        CategoricalFilter("status", "status", {"Available": "AVAILABLE", "Closed": "CLOSED"}, all_label="All"),
    ),
    normalize=normalize_slot,
    writable=(),
)
