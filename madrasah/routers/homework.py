"""
Homework router — class assignments with due-soon / overdue counts.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from madrasah.core.dependencies import first_row, repository
from madrasah.repositories.events import HomeworkRepository
from madrasah.schemas.events import HomeworkForm
from madrasah.services.aggregation import search_rows
from madrasah.services.stats import homework_stats
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/homework", tags=["Homework"])


@router.get("")
async def list_homework(
    search: Optional[str] = None,
    repo: HomeworkRepository = Depends(repository(HomeworkRepository)),
):
    homework = repo.list()
    return success_response(data={
        "homework": search_rows(homework, search, ("title", "class_name", "subject")),
        "stats": homework_stats(homework),
    })


@router.post("")
async def create_homework(body: HomeworkForm, repo: HomeworkRepository = Depends(repository(HomeworkRepository))):
    row = first_row(repo.create(body.to_new_record()), "Homework")
    return success_response(data=row, message="হোমওয়ার্ক যোগ করা হয়েছে")


@router.put("/{row_id}")
async def update_homework(
    row_id: str,
    body: HomeworkForm,
    repo: HomeworkRepository = Depends(repository(HomeworkRepository)),
):
    row = first_row(repo.update(row_id, body.to_record()), "Homework")
    return success_response(data=row, message="হোমওয়ার্ক আপডেট হয়েছে")


@router.delete("/{row_id}")
async def delete_homework(row_id: str, repo: HomeworkRepository = Depends(repository(HomeworkRepository))):
    first_row(repo.delete(row_id), "Homework")
    return success_response(message="হোমওয়ার্ক মুছে ফেলা হয়েছে")
