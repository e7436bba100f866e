from __future__ import annotations

import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from listing_core.errors import ValidationError  # noqa: E402
from listing_core.models import FilterCriteria, RangeFilter  # noqa: E402
from listing_core.resources.jobs import INTERVIEWS, normalize_interview  # noqa: E402
from listing_core.resources.orders import BOOKINGS, ORDERS, normalize_order  # noqa: E402
from listing_core.resources.reviews import REVIEWS  # noqa: E402
from listing_core.resources.users import BUYERS, normalize_user  # noqa: E402
from listing_core.tests.fakes import BUYER_ROWS  # noqa: E402
from listing_core.view import compute_view, parse_range, summarize  # noqa: E402


def buyers():
    return [normalize_user(row) for row in BUYER_ROWS]


def orders():
    raw = [
        {"id": "o1", "orderNumber": "ORD-1", "service": {"title": "AC Repair", "type": "SERVICE"}, "buyer": {"name": "Rahul"}, "totalAmount": 499, "status": "PENDING", "createdAt": "2024-11-24T10:00:00Z"},
        {"id": "o2", "orderNumber": "ORD-2", "service": {"title": "Plumbing", "type": "SERVICE"}, "buyer": {"name": "Priya"}, "totalAmount": 349, "status": "COMPLETED", "createdAt": "2024-11-22T10:00:00Z"},
        {"id": "o3", "orderNumber": "ORD-3", "service": {"title": "Desk Lamp", "type": "PRODUCT"}, "buyer": {"name": "Amit"}, "totalAmount": 349, "status": "COMPLETED", "createdAt": "2024-11-25T10:00:00Z"},
        {"id": "o4", "orderNumber": "ORD-4", "service": {"title": "Deep Cleaning", "type": "SERVICE"}, "buyer": {"name": "Sneha"}, "totalAmount": 1299, "status": "CANCELLED", "createdAt": None},
    ]
    return [normalize_order(row) for row in raw]


class SearchAndFilterTests(unittest.TestCase):
    def test_inactive_status_filter_selects_single_buyer(self):
        criteria = FilterCriteria(categorical={"status": "Inactive"})
        rows = compute_view(buyers(), criteria, BUYERS)
        self.assertEqual([r["id"] for r in rows], ["u2"])
        self.assertFalse(rows[0]["active"])

    def test_all_label_disables_filter(self):
        criteria = FilterCriteria(categorical={"status": "All Status", "verification": "All Verification"})
        self.assertEqual(len(compute_view(buyers(), criteria, BUYERS)), 4)

    def test_search_is_case_insensitive_substring(self):
        rows = compute_view(buyers(), FilterCriteria(search_text="PATEL"), BUYERS)
        self.assertEqual([r["id"] for r in rows], ["u2"])
        rows = compute_view(buyers(), FilterCriteria(search_text="98765"), BUYERS)
        self.assertEqual([r["id"] for r in rows], ["u1"])

    def test_search_reaches_nested_fields(self):
        rows = compute_view(orders(), FilterCriteria(search_text="sneha"), ORDERS)
        self.assertEqual([r["id"] for r in rows], ["o4"])

    def test_filters_are_conjunctive(self):
        criteria = FilterCriteria(
            search_text="example.com",
            categorical={"status": "Active", "verification": "Verified"},
        )
        items = buyers()
        rows = compute_view(items, criteria, BUYERS)
        self.assertEqual([r["id"] for r in rows], ["u1", "u4"])
        for row in rows:
            self.assertIn(row, items)
            self.assertTrue(row["active"])
            self.assertTrue(row["verified"])

    def test_filter_label_matching_ignores_case(self):
        rows = compute_view(orders(), FilterCriteria(categorical={"status": "completed"}), ORDERS)
        self.assertEqual([r["id"] for r in rows], ["o2", "o3"])

    def test_numeric_range_is_inclusive(self):
        criteria = FilterCriteria(ranges=[RangeFilter("amount", 349, 499)])
        rows = compute_view(orders(), criteria, ORDERS)
        self.assertEqual([r["id"] for r in rows], ["o1", "o2", "o3"])

    def test_date_range_excludes_missing_dates(self):
        criteria = FilterCriteria(ranges=[RangeFilter("createdAt", "2024-11-23", None)])
        rows = compute_view(orders(), criteria, ORDERS)
        self.assertEqual([r["id"] for r in rows], ["o1", "o3"])

    def test_single_day_range_covers_the_whole_day(self):
        criteria = FilterCriteria(ranges=[parse_range("createdAt:2024-11-24:2024-11-24")])
        rows = compute_view(orders(), criteria, ORDERS)
        self.assertEqual([r["id"] for r in rows], ["o1"])

    def test_timed_upper_bound_is_exact(self):
        criteria = FilterCriteria(ranges=[RangeFilter("createdAt", "2024-11-24", "2024-11-24T09:00:00Z")])
        self.assertEqual(compute_view(orders(), criteria, ORDERS), [])

    def test_interview_date_filter_matches_calendar_day(self):
        items = [
            normalize_interview({"id": "i1", "candidateName": "Rahul", "date": "Nov 28, 2025", "status": "SCHEDULED"}),
            normalize_interview({"id": "i2", "candidateName": "Priya", "date": "2025-11-28T16:45:00Z"}),
            normalize_interview({"id": "i3", "candidateName": "Amit", "date": "Nov 29, 2025"}),
        ]
        rows = compute_view(items, FilterCriteria(categorical={"date": "2025-11-28"}), INTERVIEWS)
        self.assertEqual([r["id"] for r in rows], ["i1", "i2"])
        rows = compute_view(items, FilterCriteria(categorical={"date": "Any Date"}), INTERVIEWS)
        self.assertEqual(len(rows), 3)

    def test_unknown_filter_option_raises(self):
        with self.assertRaises(ValidationError) as ctx:
            compute_view(buyers(), FilterCriteria(categorical={"status": "Banned"}), BUYERS)
        self.assertIn("status", ctx.exception.field_errors)

    def test_unknown_filter_name_raises(self):
        with self.assertRaises(ValidationError):
            compute_view(buyers(), FilterCriteria(categorical={"colour": "Red"}), BUYERS)

    def test_same_criteria_twice_gives_same_rows(self):
        items = orders()
        criteria = FilterCriteria(categorical={"type": "Service"}, sort="Amount: High to Low")
        first = compute_view(items, criteria, ORDERS)
        second = compute_view(items, criteria, ORDERS)
        self.assertEqual(first, second)
        self.assertEqual(len(items), 4)


class SortTests(unittest.TestCase):
    def test_amount_ascending_keeps_ties_in_collection_order(self):
        rows = compute_view(orders(), FilterCriteria(sort="Amount: Low to High"), ORDERS)
        self.assertEqual([r["id"] for r in rows], ["o2", "o3", "o1", "o4"])

    def test_amount_descending_keeps_ties_in_collection_order(self):
        rows = compute_view(orders(), FilterCriteria(sort="Amount: High to Low"), ORDERS)
        self.assertEqual([r["id"] for r in rows], ["o4", "o1", "o2", "o3"])

    def test_date_descending_puts_missing_last(self):
        rows = compute_view(orders(), FilterCriteria(sort="Newest"), ORDERS)
        self.assertEqual([r["id"] for r in rows], ["o3", "o1", "o2", "o4"])

    def test_unknown_sort_raises(self):
        with self.assertRaises(ValidationError):
            compute_view(orders(), FilterCriteria(sort="Cheapest First"), ORDERS)

    def test_reviews_sort_by_helpful(self):
        items = [
            {"id": "r1", "helpful": 3, "rating": 5, "createdAt": "2024-11-20"},
            {"id": "r2", "helpful": 9, "rating": 4, "createdAt": "2024-11-21"},
            {"id": "r3", "helpful": 3, "rating": 2, "createdAt": "2024-11-22"},
        ]
        rows = compute_view(items, FilterCriteria(sort="Most Helpful"), REVIEWS)
        self.assertEqual([r["id"] for r in rows], ["r2", "r1", "r3"])

    def test_display_dates_sort_like_iso_dates(self):
        items = [
            {"id": "b1", "bookingDate": "Nov 24, 2024"},
            {"id": "b2", "bookingDate": "2024-11-20"},
            {"id": "b3", "bookingDate": "Nov 22, 2024"},
        ]
        rows = compute_view(items, FilterCriteria(sort="Upcoming"), BOOKINGS)
        self.assertEqual([r["id"] for r in rows], ["b2", "b3", "b1"])


class SummaryTests(unittest.TestCase):
    def test_buyer_stats(self):
        stats = summarize(buyers(), BUYERS)
        self.assertEqual(stats["total"], 4)
        self.assertEqual(stats["active"], 3)
        self.assertEqual(stats["verified"], 2)

    def test_order_revenue_counts_completed_only(self):
        stats = summarize(orders(), ORDERS)
        self.assertEqual(stats["completed"], 2)
        self.assertEqual(stats["revenue"], 698.0)


class ParseRangeTests(unittest.TestCase):
    def test_open_bounds(self):
        flt = parse_range("amount::500")
        self.assertEqual((flt.field, flt.low, flt.high), ("amount", None, "500"))

    def test_malformed(self):
        with self.assertRaises(ValidationError):
            parse_range("amount-500")


if __name__ == "__main__":
    unittest.main()
