"""
Parent portal router — a guardian finds their child by phone number and sees
attendance, fees, results, hostel seat and upcoming homework in one place.
"""

from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException

from madrasah.core.dependencies import not_found, repository
from madrasah.core.enums import StudentStatus, SubjectType
from madrasah.repositories.attendance import AttendanceRepository
from madrasah.repositories.events import HomeworkRepository
from madrasah.repositories.exams import ExamRepository
from madrasah.repositories.fees import FeeRepository
from madrasah.repositories.hostel import HostelRepository
from madrasah.repositories.students import StudentRepository
from madrasah.schemas.common import BD_PHONE
from madrasah.services.aggregation import attendance_summary, sum_amounts
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/parent-portal", tags=["Parent Portal"])

ATTENDANCE_DAYS = 30


@router.get("/lookup")
async def find_children(phone: str, repo: StudentRepository = Depends(repository(StudentRepository))):
    """Active students whose guardian (or own) phone is ``phone``."""
    phone = phone.strip()
    if not BD_PHONE.match(phone):
        raise HTTPException(status_code=422, detail="সঠিক ফোন নম্বর দিন")

    children = [
        s for s in repo.list()
        if s.get("status") == StudentStatus.ACTIVE.value and phone in (s.get("guardian_phone"), s.get("phone"))
    ]
    if not children:
        raise HTTPException(status_code=404, detail="এই নম্বরে কোনো ছাত্র পাওয়া যায়নি")
    return success_response(data=children, message="ছাত্রের তথ্য পাওয়া গেছে")


@router.get("/students/{student_id}")
async def student_overview(
    student_id: str,
    students: StudentRepository = Depends(repository(StudentRepository)),
    attendance: AttendanceRepository = Depends(repository(AttendanceRepository)),
    fees: FeeRepository = Depends(repository(FeeRepository)),
    exams: ExamRepository = Depends(repository(ExamRepository)),
    hostel: HostelRepository = Depends(repository(HostelRepository)),
    homework: HomeworkRepository = Depends(repository(HomeworkRepository)),
):
    student = students.get(student_id)
    if not student:
        raise not_found("Student")

    today = date.today()
    marks = attendance.for_person(student_id, SubjectType.STUDENT, today - timedelta(days=ATTENDANCE_DAYS), today)
    payments = fees.list_payments(student_id)
    seats = hostel.allocations(student_id)

    return success_response(data={
        "student": student,
        "attendance": sorted(marks, key=lambda r: r["date"], reverse=True),
        "attendance_summary": attendance_summary(marks),
        "fee_payments": payments,
        "total_fees_paid": sum_amounts(payments),
        "results": exams.results(student_id=student_id),
        "hostel": seats[0] if seats else None,
        "homework": homework.for_class(student["department"], student["class_name"], today),
    })
