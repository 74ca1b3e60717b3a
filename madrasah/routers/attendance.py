"""
Attendance router — daily register, single and bulk marks, per-person stats,
CSV and PDF reports.
"""

from datetime import date, timedelta
from typing import Literal, Optional

from fastapi import APIRouter, Depends

from madrasah.core.dependencies import first_row, repository
from madrasah.core.enums import SubjectType
from madrasah.repositories.attendance import AttendanceRepository
from madrasah.schemas.attendance import AttendanceMark, BulkAttendanceMark, DailyAttendanceSheet
from madrasah.services.aggregation import attendance_summary
from madrasah.utils.export import attendance_report_pdf, export_response, pdf_response
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/attendance", tags=["Attendance"])

EXPORT_COLUMNS = [
    ("date", "তারিখ"),
    ("user_id", "আইডি"),
    ("status", "অবস্থা"),
    ("remarks", "মন্তব্য"),
]


def _period(start: Optional[date], end: Optional[date]) -> tuple[date, date]:
    """Last 30 days unless given."""
    end = end or date.today()
    return start or end - timedelta(days=30), end


@router.get("")
async def list_attendance(
    user_type: SubjectType = SubjectType.STUDENT,
    on_date: Optional[date] = None,
    repo: AttendanceRepository = Depends(repository(AttendanceRepository)),
):
    rows = repo.list(user_type, on_date)
    return success_response(data={"records": rows, "summary": attendance_summary(rows)})


@router.get("/export")
async def export_attendance(
    user_type: SubjectType = SubjectType.STUDENT,
    on_date: Optional[date] = None,
    format: Literal["csv", "json"] = "csv",
    repo: AttendanceRepository = Depends(repository(AttendanceRepository)),
):
    return export_response(repo.list(user_type, on_date), EXPORT_COLUMNS, format, "attendance")


@router.post("")
async def mark_attendance(body: AttendanceMark, repo: AttendanceRepository = Depends(repository(AttendanceRepository))):
    row = first_row(repo.mark(body.to_record()), "Attendance")
    return success_response(data=row, message="উপস্থিতি রেকর্ড করা হয়েছে")


@router.post("/bulk")
async def bulk_mark_attendance(
    body: BulkAttendanceMark,
    repo: AttendanceRepository = Depends(repository(AttendanceRepository)),
):
    """All marks go in one upsert; the same person and day twice keeps the later mark."""
    rows = repo.bulk_mark([m.to_record() for m in body.records])
    return success_response(data={"count": len(rows)}, message=f"{len(rows)} জনের উপস্থিতি রেকর্ড করা হয়েছে")


@router.post("/daily")
async def save_daily_register(
    body: DailyAttendanceSheet,
    repo: AttendanceRepository = Depends(repository(AttendanceRepository)),
):
    rows = repo.bulk_mark([m.to_record() for m in body.to_marks()])
    return success_response(data={"count": len(rows)}, message=f"{len(rows)} জনের উপস্থিতি রেকর্ড করা হয়েছে")


@router.get("/{user_type}/{user_id}/stats")
async def person_attendance_stats(
    user_type: SubjectType,
    user_id: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
    repo: AttendanceRepository = Depends(repository(AttendanceRepository)),
):
    start, end = _period(start, end)
    return success_response(data={
        "start": start.isoformat(),
        "end": end.isoformat(),
        **repo.stats(user_id, user_type, start, end),
    })


@router.get("/{user_type}/{user_id}/report")
async def person_attendance_report(
    user_type: SubjectType,
    user_id: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
    repo: AttendanceRepository = Depends(repository(AttendanceRepository)),
):
    start, end = _period(start, end)
    rows = repo.for_person(user_id, user_type, start, end)
    title = f"Attendance {start.isoformat()} - {end.isoformat()}"
    content = attendance_report_pdf(title, attendance_summary(rows), rows, repo.ctx.settings.PDF_FONT_PATH)
    return pdf_response(content, f"attendance_{user_id}_{end.isoformat()}.pdf")
