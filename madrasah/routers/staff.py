"""
Staff router — list/search with teacher counts, CRUD, export.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends

from madrasah.core.dependencies import first_row, not_found, repository
from madrasah.core.enums import StaffRole
from madrasah.repositories.staff import StaffRepository
from madrasah.schemas.staff import StaffForm
from madrasah.services.aggregation import search_rows
from madrasah.services.stats import staff_role, staff_stats
from madrasah.utils.export import export_response
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/staff", tags=["Staff"])

SEARCH_FIELDS = ("name", "staff_id", "designation", "phone")
EXPORT_COLUMNS = [
    ("staff_id", "আইডি"),
    ("name", "নাম"),
    ("designation", "পদবী"),
    ("phone", "ফোন"),
    ("salary", "বেতন"),
    ("join_date", "যোগদানের তারিখ"),
]


def _filtered(rows, search, role):
    rows = search_rows(rows, search, SEARCH_FIELDS)
    if role:
        rows = [r for r in rows if staff_role(r) == role]
    return rows


@router.get("")
async def list_staff(
    search: Optional[str] = None,
    role: Optional[StaffRole] = None,
    repo: StaffRepository = Depends(repository(StaffRepository)),
):
    staff = repo.list()
    return success_response(data={
        "staff": _filtered(staff, search, role),
        "stats": staff_stats(staff),
    })


@router.get("/export")
async def export_staff(
    format: Literal["csv", "json"] = "csv",
    search: Optional[str] = None,
    repo: StaffRepository = Depends(repository(StaffRepository)),
):
    return export_response(_filtered(repo.list(), search, None), EXPORT_COLUMNS, format, "staff")


@router.get("/{row_id}")
async def get_staff(row_id: str, repo: StaffRepository = Depends(repository(StaffRepository))):
    member = repo.get(row_id)
    if not member:
        raise not_found("Staff member")
    return success_response(data=member)


@router.post("")
async def create_staff(body: StaffForm, repo: StaffRepository = Depends(repository(StaffRepository))):
    member = first_row(repo.create(body.to_record()), "Staff member")
    return success_response(data=member, message="কর্মচারী সফলভাবে যোগ করা হয়েছে")


@router.put("/{row_id}")
async def update_staff(row_id: str, body: StaffForm, repo: StaffRepository = Depends(repository(StaffRepository))):
    member = first_row(repo.update(row_id, body.to_record()), "Staff member")
    return success_response(data=member, message="কর্মচারীর তথ্য আপডেট করা হয়েছে")


@router.delete("/{row_id}")
async def delete_staff(row_id: str, repo: StaffRepository = Depends(repository(StaffRepository))):
    first_row(repo.delete(row_id), "Staff member")
    return success_response(message="কর্মচারী মুছে ফেলা হয়েছে")
