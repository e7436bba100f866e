"""Orders and service bookings."""

from __future__ import annotations

from collections import Counter

from listing_core.formatting import display_date, format_money, status_label
from listing_core.resources.base import CategoricalFilter, Column, ResourceDescriptor, SortOption

ORDER_STATUSES = {
    "Pending": "PENDING",
    "Confirmed": "CONFIRMED",
    "In Progress": "IN_PROGRESS",
    "Completed": "COMPLETED",
    "Cancelled": "CANCELLED",
    "Refunded": "REFUNDED",
}

ORDER_TYPES = {"Service": "SERVICE", "Product": "PRODUCT"}

AMOUNT_SORTS = (
    SortOption("Newest", "createdAt", descending=True, kind="date"),
    SortOption("Oldest", "createdAt", kind="date"),
    SortOption("Amount: High to Low", "amount", descending=True, kind="number"),
    SortOption("Amount: Low to High", "amount", kind="number"),
)


def normalize_order(order: dict) -> dict:
    service = order.get("service") or {}
    buyer = order.get("buyer") or {}
    seller = order.get("seller") or {}
    return {
        "id": str(order.get("id")),
        "orderNumber": order.get("orderNumber") or str(order.get("id")),
        "item": service.get("title") or order.get("item") or "",
        "type": service.get("type") or order.get("type") or "SERVICE",
        "customer": {
            "name": order.get("customerName") or buyer.get("name") or "Customer",
            "email": buyer.get("email") or "",
            "phone": order.get("customerPhone") or buyer.get("phone") or "",
        },
        "seller": seller.get("name") or "",
        "amount": float(order.get("totalAmount") or order.get("amount") or 0),
        "status": str(order.get("status") or "PENDING").upper(),
        "createdAt": order.get("createdAt"),
        "bookingDate": order.get("bookingDate"),
        "notes": order.get("notes") or "",
    }


ORDER_SOURCES = {
    "item": ("service", "item"),
    "type": ("service", "type"),
    "customer": ("customerName", "customerPhone", "buyer"),
    "amount": ("totalAmount", "amount"),
}


def order_defaults(fields: dict) -> dict:
    return {
        "type": "SERVICE",
        "customer": {"name": "Customer", "email": "", "phone": ""},
        "seller": "",
        "amount": 0.0,
        "status": "PENDING",
        "notes": "",
    }


def summarize_orders(orders: list[dict]) -> dict:
    counts = Counter(o.get("status") for o in orders)
    completed = [o for o in orders if o.get("status") == "COMPLETED"]
    return {
        "total": len(orders),
        "pending": counts.get("PENDING", 0),
        "in_progress": counts.get("IN_PROGRESS", 0),
        "completed": counts.get("COMPLETED", 0),
        "cancelled": counts.get("CANCELLED", 0),
        "revenue": sum(float(o.get("amount") or 0) for o in completed),
    }


ORDERS = ResourceDescriptor(
    key="orders",
    title="Orders",
    path="/api/orders",
    list_key="orders",
    scope_params={"limit": "100"},
    role_scopes={"BUYER": {"buyerId": "user_id"}, "SELLER": {"sellerId": "user_id"}},
    columns=(
        Column("Order", "orderNumber"),
        Column("Item", "item"),
        Column("Customer", "customer.name"),
        Column("Amount", "amount", format_money),
        Column("Status", "status", status_label),
        Column("Date", "createdAt", display_date),
    ),
    search_fields=("orderNumber", "item", "customer.name", "customer.email"),
    filters=(
        CategoricalFilter("status", "status", ORDER_STATUSES, all_label="All Status"),
        CategoricalFilter("type", "type", ORDER_TYPES, all_label="All Types"),
    ),
    sorts=AMOUNT_SORTS,
    normalize=normalize_order,
    field_sources=ORDER_SOURCES,
    item_keys=("order",),
    defaults=order_defaults,
    required_fields=("item",),
    numeric_fields=("amount",),
    summarize=summarize_orders,
)

BOOKINGS = ResourceDescriptor(
    key="bookings",
    title="Service Bookings",
    path="/api/bookings",
    list_key="bookings",
    scope_params={"limit": "100", "type": "SERVICE"},
    role_scopes={"BUYER": {"buyerId": "user_id"}, "SELLER": {"sellerId": "user_id"}},
    columns=(
        Column("Booking", "orderNumber"),
        Column("Customer", "customer.name"),
        Column("Phone", "customer.phone"),
        Column("Service", "item"),
        Column("Date", "bookingDate", display_date),
        Column("Amount", "amount", format_money),
        Column("Status", "status", status_label),
    ),
    search_fields=("id", "orderNumber", "customer.name", "item"),
    filters=(CategoricalFilter("status", "status", ORDER_STATUSES, all_label="All"),),
    sorts=(
        SortOption("Upcoming", "bookingDate", kind="date"),
        SortOption("Latest", "bookingDate", descending=True, kind="date"),
        *AMOUNT_SORTS[2:],
    ),
    normalize=normalize_order,
    field_sources=ORDER_SOURCES,
    item_keys=("booking", "order"),
    defaults=order_defaults,
    required_fields=("item", "bookingDate"),
    numeric_fields=("amount",),
    summarize=summarize_orders,
)
