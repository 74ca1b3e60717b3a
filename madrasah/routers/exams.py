"""
Exams router — exams CRUD, result entry with grading, per-exam summary.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.exceptions import RequestValidationError

from madrasah.core.dependencies import first_row, not_found, repository
from madrasah.core.enums import Department
from madrasah.repositories.exams import ExamRepository
from madrasah.schemas.exams import PASS_ABOVE_TOTAL, ExamForm, ExamResultEntry, ExamResultsSubmit, ExamUpdate
from madrasah.services.aggregation import search_rows
from madrasah.services.stats import exam_summary
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/exams", tags=["Exams"])


def _exam_or_404(repo: ExamRepository, exam_id: str) -> dict:
    exam = repo.get(exam_id)
    if not exam:
        raise not_found("Exam")
    return exam


@router.get("")
async def list_exams(
    department: Optional[Department] = None,
    class_name: Optional[str] = None,
    academic_year: Optional[int] = None,
    exam_type: Optional[str] = None,
    search: Optional[str] = None,
    repo: ExamRepository = Depends(repository(ExamRepository)),
):
    exams = repo.list(department.value if department else None, class_name, academic_year)
    rows = search_rows(exams, search, ("exam_name", "subject"))
    if exam_type:
        rows = [e for e in rows if e.get("exam_type") == exam_type]
    this_year = date.today().year
    return success_response(data={
        "exams": rows,
        "counts": {
            "total": len(exams),
            "this_year": sum(1 for e in exams if e.get("academic_year") == this_year),
        },
    })


@router.post("")
async def create_exam(body: ExamForm, repo: ExamRepository = Depends(repository(ExamRepository))):
    exam = first_row(repo.create(body.to_record()), "Exam")
    return success_response(data=exam, message="পরীক্ষা সফলভাবে তৈরি হয়েছে")


@router.get("/{exam_id}")
async def get_exam(exam_id: str, repo: ExamRepository = Depends(repository(ExamRepository))):
    return success_response(data=_exam_or_404(repo, exam_id))


@router.patch("/{exam_id}")
async def update_exam(exam_id: str, body: ExamUpdate, repo: ExamRepository = Depends(repository(ExamRepository))):
    if body.pass_exceeds_total(_exam_or_404(repo, exam_id)):
        raise RequestValidationError([
            {"loc": ("body", "pass_marks"), "msg": PASS_ABOVE_TOTAL, "type": "pass_marks"},
        ])
    exam = first_row(repo.update(exam_id, body.changes()), "Exam")
    return success_response(data=exam, message="পরীক্ষা আপডেট করা হয়েছে")


@router.delete("/{exam_id}")
async def delete_exam(exam_id: str, repo: ExamRepository = Depends(repository(ExamRepository))):
    first_row(repo.delete(exam_id), "Exam")
    return success_response(message="পরীক্ষা মুছে ফেলা হয়েছে")


# ===== RESULTS =====

@router.get("/{exam_id}/results")
async def list_exam_results(exam_id: str, repo: ExamRepository = Depends(repository(ExamRepository))):
    exam = _exam_or_404(repo, exam_id)
    results = repo.results(exam_id=exam_id)
    return success_response(data={"exam": exam, "results": results, "summary": exam_summary(exam, results)})


@router.put("/{exam_id}/results")
async def save_exam_result(
    exam_id: str,
    body: ExamResultEntry,
    repo: ExamRepository = Depends(repository(ExamRepository)),
):
    exam = _exam_or_404(repo, exam_id)
    result = first_row(repo.save_result(body.to_record(exam_id, exam["total_marks"])), "Exam result")
    return success_response(data=result, message="ফলাফল সংরক্ষণ করা হয়েছে")


@router.post("/{exam_id}/results/bulk")
async def bulk_save_exam_results(
    exam_id: str,
    body: ExamResultsSubmit,
    repo: ExamRepository = Depends(repository(ExamRepository)),
):
    """Grades use this exam's own total marks; a student listed twice keeps the later entry."""
    exam = _exam_or_404(repo, exam_id)
    rows = repo.bulk_save_results([r.to_record(exam_id, exam["total_marks"]) for r in body.results])
    return success_response(data={"count": len(rows)}, message=f"{len(rows)} জনের ফলাফল সংরক্ষণ করা হয়েছে")
