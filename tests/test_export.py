import json
from datetime import date
from decimal import Decimal

from madrasah.utils.export import (
    attendance_report_pdf,
    export_filename,
    report_card_pdf,
    salary_slip_pdf,
    to_csv,
    to_json,
)

COLUMNS = [("expense_id", "ID"), ("amount", "Amount"), ("description", "Note")]


def test_csv_has_bom_header_and_blank_for_none():
    text = to_csv([{"expense_id": "E1", "amount": Decimal("12.50"), "description": None}], COLUMNS)

    assert text.startswith("\ufeff")
    assert text.lstrip("\ufeff").splitlines() == ["ID,Amount,Note", "E1,12.50,"]


def test_csv_quotes_commas():
    text = to_csv([{"expense_id": "E1", "amount": 1, "description": "rice, oil"}], COLUMNS)
    assert '"rice, oil"' in text


def test_json_keeps_only_exported_columns_and_unicode():
    rows = [{"expense_id": "E1", "amount": 5, "description": "বাজার", "created_by": "u1"}]

    data = json.loads(to_json(rows, COLUMNS))

    assert data == [{"expense_id": "E1", "amount": 5, "description": "বাজার"}]
    assert "বাজার" in to_json(rows, COLUMNS)


def test_export_filename():
    assert export_filename("staff", "csv", date(2026, 10, 17)) == "staff_2026-10-17.csv"


def test_pdfs_render():
    slip = salary_slip_pdf({
        "payment_id": "SAL-1",
        "staff": {"name": "Karim", "staff_id": "T-1", "designation": "Teacher"},
        "month": "October",
        "year": 2026,
        "amount": 12000,
        "payment_method": "cash",
        "status": "paid",
        "payment_date": "2026-10-01",
    })
    card = report_card_pdf(
        {"name": "Abdullah", "student_id": "S-1"},
        [
            {"exam": {"exam_name": "Mid", "subject": "Arabic", "total_marks": 100}, "marks_obtained": 81, "grade": "A+"},
            {"exam": {"exam_name": "Mid", "subject": "Fiqh", "total_marks": 100}, "is_absent": True, "grade": "F"},
        ],
    )
    report = attendance_report_pdf(
        "Attendance",
        {"total_days": 2, "present_days": 1, "absent_days": 1, "leave_days": 0, "late_days": 0,
         "attendance_percentage": 50.0},
        [{"date": "2026-10-01", "status": "present"}, {"date": "2026-10-02", "status": "absent"}],
    )

    for content in (slip, card, report):
        assert content.startswith(b"%PDF")
