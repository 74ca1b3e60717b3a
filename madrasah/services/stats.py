"""
Summary figures for each screen, built from the reductions in aggregation.py.
"""

from collections import Counter
from datetime import date, datetime
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from madrasah.core.enums import (
    DAYS_OF_WEEK,
    TEACHER_DESIGNATION_HINTS,
    Department,
    SalaryStatus,
    StaffRole,
    StudentStatus,
    TransactionType,
    WindowFilter,
)
from madrasah.services.aggregation import (
    ZERO,
    calculate_grade,
    category_totals,
    filter_by_window,
    sum_amounts,
    to_amount,
    to_datetime,
)


def infer_staff_role(designation: Optional[str]) -> StaffRole:
    designation = designation or ""
    if any(hint in designation for hint in TEACHER_DESIGNATION_HINTS):
        return StaffRole.TEACHER
    return StaffRole.NON_TEACHER


def staff_role(row: dict) -> StaffRole:
    """Stored role when present, designation guess for rows saved before roles existed."""
    if row.get("role"):
        return StaffRole(row["role"])
    return infer_staff_role(row.get("designation"))


def staff_stats(staff: Optional[list[dict]]) -> dict:
    if not staff:
        return {"total": 0, "teachers": 0, "non_teachers": 0, "total_salary": ZERO}
    teachers = sum(1 for s in staff if staff_role(s) == StaffRole.TEACHER)
    return {
        "total": len(staff),
        "teachers": teachers,
        "non_teachers": len(staff) - teachers,
        "total_salary": sum_amounts(staff, "salary"),
    }


def expense_stats(expenses: Optional[list[dict]], now: Optional[datetime] = None) -> dict:
    if not expenses:
        return {"total": ZERO, "daily": ZERO, "weekly": ZERO, "monthly": ZERO, "by_category": []}

    def in_window(window):
        return sum_amounts(filter_by_window(expenses, window, "expense_date", now))

    return {
        "total": sum_amounts(expenses),
        "daily": in_window(WindowFilter.DAILY),
        "weekly": in_window(WindowFilter.WEEKLY),
        "monthly": in_window(WindowFilter.MONTHLY),
        "by_category": category_totals(expenses),
    }


def transaction_stats(transactions: Optional[list[dict]]) -> dict:
    transactions = transactions or []
    income = [t for t in transactions if t.get("type") == TransactionType.INCOME.value]
    expense = [t for t in transactions if t.get("type") == TransactionType.EXPENSE.value]
    total_income = sum_amounts(income)
    total_expense = sum_amounts(expense)
    return {
        "total_income": total_income,
        "total_expense": total_expense,
        "net_balance": total_income - total_expense,
        "income_by_category": category_totals(income),
        "expense_by_category": category_totals(expense),
    }


def salary_stats(payments: Optional[list[dict]], month: str, year: int) -> dict:
    if not payments:
        return {
            "total_paid_this_month": ZERO,
            "total_paid_this_year": ZERO,
            "pending_payments": 0,
            "total_staff_paid": 0,
        }
    this_month = [p for p in payments if p.get("month") == month and p.get("year") == year]
    this_year = [p for p in payments if p.get("year") == year]
    return {
        "total_paid_this_month": sum_amounts(this_month),
        "total_paid_this_year": sum_amounts(this_year),
        "pending_payments": sum(1 for p in payments if p.get("status") == SalaryStatus.UNPAID.value),
        "total_staff_paid": len({p.get("staff_id") for p in this_month}),
    }


def student_fee_status(payments: Optional[list[dict]], structures: Optional[list[dict]]) -> Optional[dict]:
    if payments is None or structures is None:
        return None
    total_paid = sum_amounts(payments)
    total_due = sum_amounts(s for s in structures if s.get("is_active"))
    return {
        "total_paid": total_paid,
        "total_due": total_due,
        "balance": total_due - total_paid,
        "payments": len(payments),
    }


def dashboard_stats(
    students: list[dict],
    staff: list[dict],
    transactions: list[dict],
    expenses: list[dict],
) -> dict:
    """Transactions and expenses are expected to be this month's rows already."""
    active = [s for s in students if s.get("status") == StudentStatus.ACTIVE.value]
    per_department = Counter(s.get("department") for s in active)
    return {
        "students": {
            "total": len(active),
            "maktab": per_department[Department.MAKTAB.value],
            "hifz": per_department[Department.HIFZ.value],
            "kitab": per_department[Department.KITAB.value],
        },
        "staff": {"total": len(staff)},
        "finance": {
            "monthly_income": sum_amounts(
                t for t in transactions if t.get("type") == TransactionType.INCOME.value
            ),
            "monthly_expense": sum_amounts(expenses),
        },
    }


# ---------------------------------------------------------------------------
# Month series for reports
# ---------------------------------------------------------------------------
def last_months(today: Optional[date] = None, count: int = 6) -> list[date]:
    """First day of each of the last ``count`` months, oldest first, current month last."""
    today = today or date.today()
    current = date(today.year, today.month, 1)
    return [current - relativedelta(months=count - 1 - i) for i in range(count)]


def month_bounds(month_start: date) -> tuple[date, date]:
    return month_start, month_start + relativedelta(months=1) - relativedelta(days=1)


def bucket_by_month(rows: Iterable[dict], date_key: str, months: list[date]) -> dict[date, object]:
    totals = {m: ZERO for m in months}
    for row in rows:
        d = to_datetime(row[date_key])
        key = date(d.year, d.month, 1)
        if key in totals:
            totals[key] += to_amount(row.get("amount"))
    return totals


def monthly_series(
    transactions: list[dict],
    expenses: list[dict],
    fee_payments: list[dict],
    salary_payments: list[dict],
    today: Optional[date] = None,
) -> dict:
    """
    Six-month trend data: income (income transactions) vs expense (expense
    rows) with net, fee collections and salary payouts per month.
    """
    months = last_months(today)
    income = bucket_by_month(
        (t for t in transactions if t.get("type") == TransactionType.INCOME.value),
        "transaction_date",
        months,
    )
    spent = bucket_by_month(expenses, "expense_date", months)
    fees = bucket_by_month(fee_payments, "payment_date", months)
    salaries = bucket_by_month(salary_payments, "payment_date", months)

    def label(m: date) -> str:
        return m.strftime("%b")

    return {
        "monthly_trends": [
            {"month": label(m), "income": income[m], "expense": spent[m], "net": income[m] - spent[m]}
            for m in months
        ],
        "fee_collection": [{"month": label(m), "amount": fees[m]} for m in months],
        "salary_payments": [{"month": label(m), "amount": salaries[m]} for m in months],
    }


def group_timetable_by_day(entries: list[dict]) -> dict[str, list[dict]]:
    return {day: [e for e in entries if e.get("day_of_week") == day] for day in DAYS_OF_WEEK}


def exam_summary(exam: dict, results: list[dict]) -> dict:
    """Appeared/absent/pass counts, average marks and grade spread for one exam."""
    total_marks = exam["total_marks"]
    pass_marks = to_amount(exam.get("pass_marks"))
    appeared = [r for r in results if not r.get("is_absent")]
    marks = [to_amount(r.get("marks_obtained")) for r in appeared]
    grades = Counter(
        r.get("grade") or calculate_grade(r.get("marks_obtained") or 0, total_marks, bool(r.get("is_absent")))
        for r in results
    )
    return {
        "total": len(results),
        "appeared": len(appeared),
        "absent": len(results) - len(appeared),
        "passed": sum(1 for m in marks if m >= pass_marks),
        "average_marks": float(sum(marks, ZERO) / len(marks)) if marks else 0.0,
        "grade_distribution": dict(grades),
    }


def homework_stats(homework: list[dict], today: Optional[date] = None) -> dict:
    """Due soon means due today or within the next two days; overdue means the due date has passed."""
    today = today or date.today()
    due_soon = overdue = 0
    for hw in homework:
        days_left = (to_datetime(hw["due_date"]).date() - today).days
        if days_left < 0:
            overdue += 1
        elif days_left <= 2:
            due_soon += 1
    return {"total": len(homework), "due_soon": due_soon, "overdue": overdue}


def hostel_stats(rooms: list[dict]) -> dict:
    beds = sum(int(r.get("capacity") or 0) for r in rooms)
    occupied = sum(int(r.get("current_occupancy") or 0) for r in rooms)
    return {
        "total_rooms": len(rooms),
        "total_beds": beds,
        "occupied": occupied,
        "available": beds - occupied,
    }


def event_counts(events: list[dict], today: Optional[date] = None) -> dict:
    today_iso = (today or date.today()).isoformat()
    return {
        "total": len(events),
        "holidays": sum(1 for e in events if e.get("is_holiday")),
        "upcoming": sum(1 for e in events if str(e.get("start_date") or "") >= today_iso),
    }
