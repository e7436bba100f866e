"""Customer reviews."""

from __future__ import annotations

from collections import Counter

from listing_core.formatting import display_date
from listing_core.resources.base import CategoricalFilter, Column, ResourceDescriptor, SortOption


def normalize_review(review: dict) -> dict:
    user = review.get("user") or {}
    service = review.get("service") or {}
    order = review.get("order") or {}
    return {
        "id": str(review.get("id")),
        "reviewer": user.get("name") or review.get("reviewer") or "Anonymous",
        "service": service.get("title") or review.get("serviceTitle") or "",
        "seller": (service.get("seller") or {}).get("name") or "",
        "orderNumber": order.get("orderNumber") or "",
        "rating": int(review.get("rating") or 0),
        "comment": review.get("comment") or "",
        "helpful": int(review.get("helpful") or 0),
        "response": review.get("response") or "",
        "status": str(review.get("status") or "PUBLISHED").upper(),
        "createdAt": review.get("createdAt") or review.get("date"),
    }


def summarize_reviews(reviews: list[dict]) -> dict:
    ratings = [r["rating"] for r in reviews if r.get("rating")]
    distribution = Counter(ratings)
    return {
        "total": len(reviews),
        "avg_rating": round(sum(ratings) / len(ratings), 1) if ratings else 0.0,
        "distribution": {stars: distribution.get(stars, 0) for stars in range(5, 0, -1)},
        "awaiting_response": sum(1 for r in reviews if not r.get("response")),
    }


REVIEWS = ResourceDescriptor(
    key="reviews",
    title="Reviews",
    path="/api/reviews",
    list_key="reviews",
    role_scopes={"BUYER": {"userId": "user_id"}},
    columns=(
        Column("Reviewer", "reviewer"),
        Column("Service", "service"),
        Column("Rating", "rating"),
        Column("Comment", "comment"),
        Column("Helpful", "helpful"),
        Column("Date", "createdAt", display_date),
    ),
    search_fields=("reviewer", "service", "comment"),
    filters=(
        CategoricalFilter(
            "rating",
            "rating",
            {"5 Stars": 5, "4 Stars": 4, "3 Stars": 3, "2 Stars": 2, "1 Star": 1},
            all_label="All Ratings",
        ),
        CategoricalFilter(
            "status",
            "status",
            {"Published": "PUBLISHED", "Flagged": "FLAGGED", "Hidden": "HIDDEN"},
            all_label="All Status",
        ),
    ),
    sorts=(
        SortOption("Most Recent", "createdAt", descending=True, kind="date"),
        SortOption("Most Helpful", "helpful", descending=True, kind="number"),
        SortOption("Highest Rating", "rating", descending=True, kind="number"),
        SortOption("Lowest Rating", "rating", kind="number"),
    ),
    normalize=normalize_review,
    item_keys=("review",),
    required_fields=("rating", "comment"),
    numeric_fields=("rating", "helpful"),
    id_field="reviewId",
    delete_param="reviewId",
    # the list endpoint joins reviewer and service names the write endpoint omits
    refetch_after_write=True,
    summarize=summarize_reviews,
)
