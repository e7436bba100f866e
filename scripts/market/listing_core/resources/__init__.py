"""Resource registry and package exports."""

from __future__ import annotations

from listing_core.resources.base import (
    CategoricalFilter,
    Column,
    ResourceDescriptor,
    SortOption,
    get_path,
)
from listing_core.resources.jobs import APPLICATIONS, INTERVIEWS, JOBS
from listing_core.resources.orders import BOOKINGS, ORDERS
from listing_core.resources.reviews import REVIEWS
from listing_core.resources.users import BUYERS, EMPLOYERS, SELLERS
from listing_core.resources.vendor import EARNINGS, SCHEDULES

REGISTRY: dict[str, ResourceDescriptor] = {
    d.key: d
    for d in (
        BUYERS,
        SELLERS,
        EMPLOYERS,
        ORDERS,
        BOOKINGS,
        REVIEWS,
        JOBS,
        APPLICATIONS,
        INTERVIEWS,
        EARNINGS,
        SCHEDULES,
    )
}


def descriptor_for(key: str) -> ResourceDescriptor:
    try:
        return REGISTRY[key]
    except KeyError:
        raise ValueError(f"unknown screen: {key}") from None


__all__ = [
    "CategoricalFilter",
    "Column",
    "REGISTRY",
    "ResourceDescriptor",
    "SortOption",
    "descriptor_for",
    "get_path",
]
