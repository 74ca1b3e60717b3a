from datetime import datetime
from decimal import Decimal

import pytest

from madrasah.core.enums import WindowFilter
from madrasah.services.aggregation import (
    attendance_percentage,
    attendance_summary,
    calculate_grade,
    category_totals,
    filter_by_window,
    group_expense_batches,
    percentage_of,
    search_rows,
    sum_amounts,
    window_start,
)

NOW = datetime(2026, 10, 17, 15, 30)


# ---------------------------------------------------------------------------
# Grades
# ---------------------------------------------------------------------------
@pytest.mark.parametrize(
    "marks, grade",
    [
        (100, "A+"),
        (80, "A+"),
        (79.999, "A"),
        (70, "A"),
        (69.5, "A-"),
        (60, "A-"),
        (50, "B"),
        (40, "C"),
        (39.999, "D"),
        (33, "D"),
        (32.999, "F"),
        (0, "F"),
    ],
)
def test_grade_thresholds_are_inclusive_and_unrounded(marks, grade):
    assert calculate_grade(marks, 100) == grade


def test_grade_uses_the_exams_own_total():
    assert calculate_grade(40, 50) == "A+"
    assert calculate_grade(39, 50) == "A"


def test_absent_is_always_f():
    assert calculate_grade(100, 100, is_absent=True) == "F"


def test_grade_rejects_non_positive_total():
    with pytest.raises(ValueError):
        calculate_grade(10, 0)


# ---------------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------------
def test_late_counts_as_present():
    assert attendance_percentage(present_days=15, late_days=2, total_days=20) == 85.0


def test_attendance_percentage_of_nothing_is_zero():
    assert attendance_percentage(0, 0, 0) == 0.0


def test_attendance_summary_counts_each_status():
    rows = (
        [{"status": "উপস্থিত"}] * 15
        + [{"status": "বিলম্বে"}] * 2
        + [{"status": "অনুপস্থিত"}] * 2
        + [{"status": "ছুটি"}]
    )

    summary = attendance_summary(rows)

    assert summary == {
        "total_days": 20,
        "present_days": 15,
        "absent_days": 2,
        "leave_days": 1,
        "late_days": 2,
        "attendance_percentage": 85.0,
    }


# ---------------------------------------------------------------------------
# Windows
# ---------------------------------------------------------------------------
def test_window_starts():
    assert window_start(WindowFilter.DAILY, NOW) == datetime(2026, 10, 17)
    assert window_start(WindowFilter.WEEKLY, NOW) == datetime(2026, 10, 10, 15, 30)
    assert window_start(WindowFilter.MONTHLY, NOW) == datetime(2026, 10, 1)
    assert window_start(WindowFilter.YEARLY, NOW) == datetime(2026, 1, 1)


def test_unknown_window_falls_back_to_monthly():
    assert window_start("fortnightly", NOW) == datetime(2026, 10, 1)


def test_window_boundary_is_inclusive():
    rows = [
        {"expense_date": "2026-10-01", "amount": 10},
        {"expense_date": "2026-09-30", "amount": 20},
    ]

    kept = filter_by_window(rows, WindowFilter.MONTHLY, "expense_date", NOW)

    assert kept == [{"expense_date": "2026-10-01", "amount": 10}]


def test_weekly_window_is_rolling():
    # midnight of 10 Oct is before now - 7 days (10 Oct 15:30)
    rows = [{"d": "2026-10-10"}, {"d": "2026-10-11"}]
    assert filter_by_window(rows, WindowFilter.WEEKLY, "d", NOW) == [{"d": "2026-10-11"}]


# ---------------------------------------------------------------------------
# Sums and categories
# ---------------------------------------------------------------------------
def test_sums_are_exact():
    rows = [{"amount": 0.1}, {"amount": 0.2}, {"amount": None}, {"amount": "0.3"}]
    assert sum_amounts(rows) == Decimal("0.6")


def test_percentage_of_zero_total():
    assert percentage_of(10, 0) == 0.0


def test_category_totals_sorted_by_amount_with_stable_ties():
    rows = [
        {"category": "পানি", "amount": 50},
        {"category": "বাজার", "amount": 100},
        {"category": "গ্যাস", "amount": 50},
        {"category": "বাজার", "amount": 100},
    ]

    totals = category_totals(rows)

    assert [t["category"] for t in totals] == ["বাজার", "পানি", "গ্যাস"]
    assert totals[0]["amount"] == Decimal("200")
    assert totals[0]["count"] == 2
    assert totals[0]["percentage"] == pytest.approx(200 / 3)
    assert sum(t["percentage"] for t in totals) == pytest.approx(100)


def test_category_totals_of_nothing():
    assert category_totals([]) == []


# ---------------------------------------------------------------------------
# Batches
# ---------------------------------------------------------------------------
def test_batch_grouping_collapses_shared_batch_ids():
    rows = [
        {"id": "1", "batch_id": "B1", "batch_name": "Bazar", "amount": 100, "expense_date": "2026-10-05"},
        {"id": "2", "batch_id": "B1", "batch_name": "Bazar", "amount": 50, "expense_date": "2026-10-05"},
        {"id": "3", "batch_id": None, "amount": 30, "expense_date": "2026-10-04"},
    ]

    groups = group_expense_batches(rows)

    assert len(groups) == 2
    batch, single = groups
    assert (batch["batch_id"], batch["total"], batch["count"], batch["is_batch"]) == ("B1", 150, 2, True)
    assert (single["batch_id"], single["total"], single["count"], single["is_batch"]) == (None, 30, 1, False)


def test_batches_and_singles_interleave_by_date():
    rows = [
        {"batch_id": None, "amount": 1, "expense_date": "2026-10-01"},
        {"batch_id": "B1", "amount": 2, "expense_date": "2026-10-03"},
        {"batch_id": None, "amount": 3, "expense_date": "2026-10-05"},
    ]

    dates = [g["date"] for g in group_expense_batches(rows)]

    assert dates == ["2026-10-05", "2026-10-03", "2026-10-01"]


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
def test_search_is_case_insensitive_and_reaches_embedded_rows():
    rows = [
        {"payment_id": "SAL-1", "staff": {"name": "Abdul Karim"}},
        {"payment_id": "SAL-2", "staff": None},
    ]

    assert search_rows(rows, "karim", ("staff.name",)) == [rows[0]]
    assert search_rows(rows, "sal-2", ("payment_id", "staff.name")) == [rows[1]]
    assert search_rows(rows, "", ("payment_id",)) == rows
