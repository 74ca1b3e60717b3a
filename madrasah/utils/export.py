"""
Export helpers: CSV and JSON downloads of in-memory lists, and PDF receipts,
slips and reports rendered with ReportLab.
"""

import csv
import io
import json
from datetime import date
from typing import Iterable, Optional, Sequence

from fastapi.responses import Response, StreamingResponse
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

# (row key, column heading)
Columns = Sequence[tuple[str, str]]

HEADER_BACKGROUND = colors.HexColor("#14532D")


def to_csv(rows: Iterable[dict], columns: Columns) -> str:
    output = io.StringIO()
    # BOM so spreadsheet apps open Bengali text as UTF-8
    output.write("\ufeff")
    writer = csv.writer(output)
    writer.writerow([label for _, label in columns])
    for row in rows:
        writer.writerow(["" if row.get(key) is None else row.get(key) for key, _ in columns])
    return output.getvalue()


def to_json(rows: Iterable[dict], columns: Optional[Columns] = None) -> str:
    if columns:
        rows = [{key: row.get(key) for key, _ in columns} for row in rows]
    return json.dumps(list(rows), ensure_ascii=False, indent=2, default=str)


def export_filename(stem: str, ext: str, today: Optional[date] = None) -> str:
    return f"{stem}_{(today or date.today()).isoformat()}.{ext}"


def export_response(rows: list[dict], columns: Columns, fmt: str, stem: str) -> Response:
    if fmt == "json":
        body, media_type, ext = to_json(rows, columns), "application/json", "json"
    else:
        body, media_type, ext = to_csv(rows, columns), "text/csv; charset=utf-8", "csv"
    return Response(
        content=body.encode("utf-8"),
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={export_filename(stem, ext)}"},
    )


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------
_registered_font: Optional[str] = None


def pdf_font(font_path: str = "") -> str:
    """Helvetica unless a TTF with Bengali glyphs is configured."""
    global _registered_font
    if not font_path:
        return "Helvetica"
    if _registered_font is None:
        pdfmetrics.registerFont(TTFont("Bangla", font_path))
        _registered_font = "Bangla"
    return _registered_font


def _table(data: list[list], font: str) -> Table:
    table = Table(data)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BACKGROUND),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, -1), font),
        ("FONTSIZE", (0, 0), (-1, 0), 10),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    return table


def render_pdf(title: str, sections: list[tuple[str, list[list]]], font_path: str = "") -> bytes:
    """Title plus one table per (heading, rows) section; the first row of each table is its header."""
    font = pdf_font(font_path)
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, title=title)
    styles = getSampleStyleSheet()
    styles["Title"].fontName = font
    styles["Heading2"].fontName = font

    elements = [Paragraph(title, styles["Title"]), Spacer(1, 16)]
    for heading, data in sections:
        if heading:
            elements.append(Paragraph(heading, styles["Heading2"]))
        elements.append(_table([[str(c) for c in row] for row in data], font))
        elements.append(Spacer(1, 12))

    doc.build(elements)
    return buffer.getvalue()


def fee_receipt_pdf(payment: dict, font_path: str = "") -> bytes:
    student = payment.get("students") or {}
    fee = payment.get("fee_structures") or {}
    rows = [
        ["Field", "Value"],
        ["Receipt", payment.get("receipt_number") or payment.get("id", "")],
        ["Student", f"{student.get('name', '')} ({student.get('student_id', '')})"],
        ["Class", f"{student.get('department', '')} / {student.get('class_name', '')}"],
        ["Fee type", fee.get("fee_type", "")],
        ["Period", f"{payment.get('month') or ''} {payment.get('year') or ''}".strip()],
        ["Amount", payment.get("amount", "")],
        ["Method", payment.get("payment_method", "")],
        ["Date", payment.get("payment_date", "")],
    ]
    return render_pdf("Fee Receipt", [("", rows)], font_path)


def salary_slip_pdf(payment: dict, font_path: str = "") -> bytes:
    staff = payment.get("staff") or {}
    rows = [
        ["Field", "Value"],
        ["Payment", payment.get("payment_id", "")],
        ["Staff", f"{staff.get('name', '')} ({staff.get('staff_id', '')})"],
        ["Designation", staff.get("designation", "")],
        ["Month", f"{payment.get('month', '')} {payment.get('year', '')}"],
        ["Amount", payment.get("amount", "")],
        ["Method", payment.get("payment_method", "")],
        ["Status", payment.get("status", "")],
        ["Date", payment.get("payment_date", "")],
    ]
    return render_pdf("Salary Slip", [("", rows)], font_path)


def report_card_pdf(student: dict, results: list[dict], font_path: str = "") -> bytes:
    rows = [["Exam", "Subject", "Marks", "Total", "Grade"]]
    for r in results:
        exam = r.get("exam") or {}
        marks = "Absent" if r.get("is_absent") else r.get("marks_obtained", "")
        rows.append([exam.get("exam_name", ""), exam.get("subject", ""), marks,
                     exam.get("total_marks", ""), r.get("grade") or ""])
    title = f"Report Card - {student.get('name', '')} ({student.get('student_id', '')})"
    return render_pdf(title, [("", rows)], font_path)


def attendance_report_pdf(title: str, summary: dict, rows: list[dict], font_path: str = "") -> bytes:
    totals = [
        ["Total", "Present", "Absent", "Leave", "Late", "%"],
        [summary["total_days"], summary["present_days"], summary["absent_days"],
         summary["leave_days"], summary["late_days"], f"{summary['attendance_percentage']:.1f}"],
    ]
    days = [["Date", "Status", "Remarks"]] + [
        [r.get("date", ""), r.get("status", ""), r.get("remarks") or ""] for r in rows
    ]
    return render_pdf(title, [("Summary", totals), ("Days", days)], font_path)


def pdf_response(content: bytes, filename: str) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(content),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
