"""
Notices router — notice board with urgency / this-month / active counts.
"""

from fastapi import APIRouter, Depends

from madrasah.core.dependencies import first_row, repository
from madrasah.core.enums import NoticePriority, WindowFilter
from madrasah.repositories.notices import NoticeRepository
from madrasah.schemas.notices import NoticeForm
from madrasah.services.aggregation import filter_by_window
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/notices", tags=["Notices"])


@router.get("")
async def list_notices(
    active_only: bool = True,
    repo: NoticeRepository = Depends(repository(NoticeRepository)),
):
    notices = repo.list(active_only)
    return success_response(data={
        "notices": notices,
        "counts": {
            "total": len(notices),
            "urgent": sum(1 for n in notices if n.get("priority") == NoticePriority.URGENT.value),
            "this_month": len(filter_by_window(notices, WindowFilter.MONTHLY, "publish_date")),
            "active": sum(1 for n in notices if n.get("is_active")),
        },
    })


@router.post("")
async def create_notice(body: NoticeForm, repo: NoticeRepository = Depends(repository(NoticeRepository))):
    notice = first_row(repo.create(body.to_record()), "Notice")
    return success_response(data=notice, message="নোটিশ প্রকাশ করা হয়েছে")


@router.delete("/{row_id}")
async def delete_notice(row_id: str, repo: NoticeRepository = Depends(repository(NoticeRepository))):
    first_row(repo.delete(row_id), "Notice")
    return success_response(message="নোটিশ মুছে ফেলা হয়েছে")
