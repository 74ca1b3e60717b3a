"""
Students router — list/search, CRUD, status toggle, fee status, report card, export.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends

from madrasah.core.dependencies import first_row, not_found, repository
from madrasah.core.enums import Department, StudentStatus
from madrasah.repositories.exams import ExamRepository
from madrasah.repositories.fees import FeeRepository
from madrasah.repositories.students import StudentRepository
from madrasah.schemas.students import StudentForm, StudentStatusUpdate
from madrasah.services.aggregation import search_rows
from madrasah.utils.export import export_response, pdf_response, report_card_pdf
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/students", tags=["Students"])

SEARCH_FIELDS = ("name", "student_id", "guardian_phone")
EXPORT_COLUMNS = [
    ("student_id", "আইডি"),
    ("name", "নাম"),
    ("department", "বিভাগ"),
    ("class_name", "ক্লাস"),
    ("phone", "ফোন"),
    ("guardian_phone", "অভিভাবকের ফোন"),
    ("address", "ঠিকানা"),
]


def _filtered(rows, search, department, status_filter):
    rows = search_rows(rows, search, SEARCH_FIELDS)
    if department:
        rows = [r for r in rows if r.get("department") == department.value]
    if status_filter:
        rows = [r for r in rows if r.get("status") == status_filter.value]
    return rows


@router.get("")
async def list_students(
    search: Optional[str] = None,
    department: Optional[Department] = None,
    status: Optional[StudentStatus] = None,
    repo: StudentRepository = Depends(repository(StudentRepository)),
):
    students = repo.list()
    counts = {d.name.lower(): sum(1 for s in students if s.get("department") == d.value) for d in Department}
    return success_response(data={
        "students": _filtered(students, search, department, status),
        "counts": {"total": len(students), **counts},
    })


@router.get("/export")
async def export_students(
    format: Literal["csv", "json"] = "csv",
    search: Optional[str] = None,
    department: Optional[Department] = None,
    repo: StudentRepository = Depends(repository(StudentRepository)),
):
    rows = _filtered(repo.list(), search, department, None)
    return export_response(rows, EXPORT_COLUMNS, format, "students")


@router.get("/{row_id}")
async def get_student(row_id: str, repo: StudentRepository = Depends(repository(StudentRepository))):
    student = repo.get(row_id)
    if not student:
        raise not_found("Student")
    return success_response(data=student)


@router.post("")
async def create_student(body: StudentForm, repo: StudentRepository = Depends(repository(StudentRepository))):
    student = first_row(repo.create(body.to_record()), "Student")
    return success_response(data=student, message="ছাত্র সফলভাবে যোগ করা হয়েছে")


@router.put("/{row_id}")
async def update_student(
    row_id: str,
    body: StudentForm,
    repo: StudentRepository = Depends(repository(StudentRepository)),
):
    student = first_row(repo.update(row_id, body.to_record()), "Student")
    return success_response(data=student, message="ছাত্রের তথ্য আপডেট করা হয়েছে")


@router.patch("/{row_id}/status")
async def set_student_status(
    row_id: str,
    body: StudentStatusUpdate,
    repo: StudentRepository = Depends(repository(StudentRepository)),
):
    student = first_row(repo.set_status(row_id, body.status), "Student")
    return success_response(data=student, message="অবস্থা পরিবর্তন করা হয়েছে")


@router.delete("/{row_id}")
async def delete_student(row_id: str, repo: StudentRepository = Depends(repository(StudentRepository))):
    first_row(repo.delete(row_id), "Student")
    return success_response(message="ছাত্র মুছে ফেলা হয়েছে")


@router.get("/{row_id}/fee-status")
async def student_fee_status(row_id: str, repo: FeeRepository = Depends(repository(FeeRepository))):
    return success_response(data=repo.student_status(row_id))


@router.get("/{row_id}/report-card")
async def student_report_card(
    row_id: str,
    academic_year: Optional[int] = None,
    repo: ExamRepository = Depends(repository(ExamRepository)),
):
    return success_response(data=repo.report_card(row_id, academic_year))


@router.get("/{row_id}/report-card/pdf")
async def student_report_card_pdf(
    row_id: str,
    academic_year: Optional[int] = None,
    students: StudentRepository = Depends(repository(StudentRepository)),
    exams: ExamRepository = Depends(repository(ExamRepository)),
):
    student = students.get(row_id)
    if not student:
        raise not_found("Student")
    content = report_card_pdf(student, exams.report_card(row_id, academic_year), students.ctx.settings.PDF_FONT_PATH)
    return pdf_response(content, f"report_card_{student.get('student_id', row_id)}.pdf")
