"""
Pure reductions over already-fetched rows: time windows, category totals,
expense batch grouping, grades and attendance percentage.

Rows are plain dicts as returned by the data client. Dates are ISO strings
("2026-10-17") or date/datetime objects.
"""

from collections import Counter
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Iterable, Optional

from madrasah.core.enums import AttendanceStatus, WindowFilter

ZERO = Decimal("0")

# (minimum percentage, grade), checked top-down
GRADE_THRESHOLDS = [
    (80, "A+"),
    (70, "A"),
    (60, "A-"),
    (50, "B"),
    (40, "C"),
    (33, "D"),
]
FAIL_GRADE = "F"


def to_amount(value: Any) -> Decimal:
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_datetime(value: Any) -> datetime:
    """Row date → naive datetime. Bare dates become midnight."""
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value)
    if len(text) == 10:
        return datetime.strptime(text, "%Y-%m-%d")
    return datetime.fromisoformat(text.replace("Z", "+00:00")).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# Time windows
# ---------------------------------------------------------------------------
def window_start(window: str, now: Optional[datetime] = None) -> datetime:
    """
    Start boundary of a window filter. There is no end boundary: the window
    always runs from the boundary up to now.

    daily  : start of today
    weekly : now minus 7×24h (rolling, not calendar-aligned)
    monthly: first day of the current month
    yearly : 1 January of the current year

    Anything else is treated as monthly.
    """
    now = now or datetime.now()
    if window == WindowFilter.DAILY:
        return datetime(now.year, now.month, now.day)
    if window == WindowFilter.WEEKLY:
        return now - timedelta(days=7)
    if window == WindowFilter.YEARLY:
        return datetime(now.year, 1, 1)
    return datetime(now.year, now.month, 1)


def filter_by_window(
    rows: Iterable[dict],
    window: str,
    date_key: str,
    now: Optional[datetime] = None,
) -> list[dict]:
    boundary = window_start(window, now)
    return [r for r in rows if to_datetime(r[date_key]) >= boundary]


def sum_amounts(rows: Iterable[dict], amount_key: str = "amount") -> Decimal:
    return sum((to_amount(r.get(amount_key)) for r in rows), ZERO)


# ---------------------------------------------------------------------------
# Category totals
# ---------------------------------------------------------------------------
def percentage_of(part: Any, whole: Any) -> float:
    """part/whole as a percentage; 0.0 when there is nothing to divide by."""
    whole = to_amount(whole)
    if whole == ZERO:
        return 0.0
    return float(to_amount(part) / whole * 100)


def category_totals(
    rows: Iterable[dict],
    key: str = "category",
    amount_key: str = "amount",
) -> list[dict]:
    """
    Group rows by ``key``, summing ``amount_key`` per group.

    Groups are sorted by total, largest first; equal totals keep the order
    in which their category was first seen.
    """
    groups: dict[Any, dict] = {}
    for row in rows:
        category = row.get(key)
        group = groups.get(category)
        if group is None:
            group = groups[category] = {"category": category, "amount": ZERO, "count": 0}
        group["amount"] += to_amount(row.get(amount_key))
        group["count"] += 1

    ordered = sorted(groups.values(), key=lambda g: g["amount"], reverse=True)
    grand_total = sum((g["amount"] for g in ordered), ZERO)
    for group in ordered:
        group["percentage"] = percentage_of(group["amount"], grand_total)
    return ordered


# ---------------------------------------------------------------------------
# Expense batches
# ---------------------------------------------------------------------------
def group_expense_batches(rows: Iterable[dict], date_key: str = "expense_date") -> list[dict]:
    """
    Collapse rows sharing a ``batch_id`` into one group; rows without a batch
    are singleton groups. Groups come back newest first, batches and singles
    interleaved by date.
    """
    groups: list[dict] = []
    by_batch: dict[str, dict] = {}

    for row in rows:
        batch_id = row.get("batch_id")
        if batch_id:
            group = by_batch.get(batch_id)
            if group is None:
                group = by_batch[batch_id] = {
                    "batch_id": batch_id,
                    "batch_name": row.get("batch_name"),
                    "date": row.get(date_key),
                    "total": ZERO,
                    "count": 0,
                    "items": [],
                    "is_batch": True,
                }
                groups.append(group)
        else:
            group = {
                "batch_id": None,
                "batch_name": None,
                "date": row.get(date_key),
                "total": ZERO,
                "count": 0,
                "items": [],
                "is_batch": False,
            }
            groups.append(group)

        group["total"] += to_amount(row.get("amount"))
        group["count"] += 1
        group["items"].append(row)

    return sorted(groups, key=lambda g: to_datetime(g["date"]), reverse=True)


# ---------------------------------------------------------------------------
# Grades
# ---------------------------------------------------------------------------
def calculate_grade(marks_obtained: Any, total_marks: Any, is_absent: bool = False) -> str:
    """
    Letter grade for a mark. The real-valued percentage is compared against
    the thresholds without rounding; each threshold is inclusive, so exactly
    80% is A+ and 79.999% is A. Absence is always F.
    """
    if is_absent:
        return FAIL_GRADE
    if float(total_marks) <= 0:
        raise ValueError("total_marks must be positive")
    percentage = float(marks_obtained) / float(total_marks) * 100
    for minimum, grade in GRADE_THRESHOLDS:
        if percentage >= minimum:
            return grade
    return FAIL_GRADE


# ---------------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------------
def attendance_percentage(present_days: int, late_days: int, total_days: int) -> float:
    """Late days count as present; leave and absent days do not."""
    if total_days <= 0:
        return 0.0
    return (present_days + late_days) / total_days * 100


def attendance_summary(rows: Iterable[dict]) -> dict:
    counts = Counter(r.get("status") for r in rows)
    total = sum(counts.values())
    present = counts[AttendanceStatus.PRESENT.value]
    late = counts[AttendanceStatus.LATE.value]
    return {
        "total_days": total,
        "present_days": present,
        "absent_days": counts[AttendanceStatus.ABSENT.value],
        "leave_days": counts[AttendanceStatus.LEAVE.value],
        "late_days": late,
        "attendance_percentage": attendance_percentage(present, late, total),
    }


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
def _lookup(row: dict, path: str) -> Any:
    value: Any = row
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def search_rows(rows: Iterable[dict], term: Optional[str], fields: Iterable[str]) -> list[dict]:
    """Case-insensitive substring match over ``fields``; dotted names reach into embedded rows."""
    rows = list(rows)
    if not term:
        return rows
    needle = term.strip().lower()
    fields = list(fields)
    return [
        r for r in rows
        if any(needle in str(_lookup(r, f) or "").lower() for f in fields)
    ]
