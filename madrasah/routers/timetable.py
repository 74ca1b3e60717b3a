"""
Timetable router — class periods, grouped by weekday.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from madrasah.core.dependencies import first_row, repository
from madrasah.core.enums import Department
from madrasah.repositories.timetable import TimetableRepository
from madrasah.schemas.timetable import TimetableForm
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/timetable", tags=["Timetable"])


@router.get("")
async def list_timetable(
    department: Optional[Department] = None,
    class_name: Optional[str] = None,
    day_of_week: Optional[str] = None,
    repo: TimetableRepository = Depends(repository(TimetableRepository)),
):
    rows = repo.list(department.value if department else None, class_name, day_of_week)
    return success_response(data=rows)


@router.get("/week")
async def weekly_timetable(
    department: Department,
    class_name: str,
    repo: TimetableRepository = Depends(repository(TimetableRepository)),
):
    return success_response(data=repo.by_day(department.value, class_name))


@router.post("")
async def create_period(body: TimetableForm, repo: TimetableRepository = Depends(repository(TimetableRepository))):
    row = first_row(repo.create(body.to_record()), "Timetable entry")
    return success_response(data=row, message="রুটিন যোগ করা হয়েছে")


@router.put("/{row_id}")
async def update_period(
    row_id: str,
    body: TimetableForm,
    repo: TimetableRepository = Depends(repository(TimetableRepository)),
):
    row = first_row(repo.update(row_id, body.to_record()), "Timetable entry")
    return success_response(data=row, message="রুটিন আপডেট করা হয়েছে")


@router.delete("/{row_id}")
async def delete_period(row_id: str, repo: TimetableRepository = Depends(repository(TimetableRepository))):
    first_row(repo.delete(row_id), "Timetable entry")
    return success_response(message="রুটিন মুছে ফেলা হয়েছে")
