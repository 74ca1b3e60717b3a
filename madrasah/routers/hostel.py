"""
Hostel router — rooms, seat allocation and occupancy figures.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from madrasah.core.dependencies import first_row, not_found, repository
from madrasah.core.enums import AllocationStatus
from madrasah.repositories.hostel import HostelRepository
from madrasah.schemas.hostel import AllocationForm, RoomForm
from madrasah.services.aggregation import search_rows
from madrasah.services.stats import hostel_stats
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/hostel", tags=["Hostel"])


def _conflict(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=message)


def _active_room(repo: HostelRepository, room_id: str) -> dict:
    room = repo.get(room_id)
    if not room or not room.get("is_active", True):
        raise not_found("Room")
    return room


@router.get("")
async def hostel_overview(
    search: Optional[str] = None,
    repo: HostelRepository = Depends(repository(HostelRepository)),
):
    rooms = repo.rooms()
    allocations = repo.allocations()
    return success_response(data={
        "rooms": rooms,
        "allocations": search_rows(
            allocations, search, ("students.name", "students.student_id", "hostel_rooms.room_number")
        ),
        "available_rooms": [r for r in rooms if (r.get("current_occupancy") or 0) < r["capacity"]],
        "stats": hostel_stats(rooms),
    })


# ---------------------------------------------------------------------------
# Rooms
# ---------------------------------------------------------------------------
@router.post("/rooms")
async def create_room(body: RoomForm, repo: HostelRepository = Depends(repository(HostelRepository))):
    room = first_row(repo.create_room(body.to_record()), "Room")
    return success_response(data=room, message="রুম সফলভাবে যোগ করা হয়েছে")


@router.put("/rooms/{room_id}")
async def update_room(room_id: str, body: RoomForm, repo: HostelRepository = Depends(repository(HostelRepository))):
    room = _active_room(repo, room_id)
    if body.capacity < (room.get("current_occupancy") or 0):
        raise _conflict("রুমে বর্তমান ছাত্রসংখ্যার চেয়ে কম সিট রাখা যাবে না")
    updated = first_row(repo.update_room(room_id, body.to_record()), "Room")
    return success_response(data=updated, message="রুম আপডেট হয়েছে")


@router.delete("/rooms/{room_id}")
async def delete_room(room_id: str, repo: HostelRepository = Depends(repository(HostelRepository))):
    room = _active_room(repo, room_id)
    if room.get("current_occupancy"):
        raise _conflict("রুমে ছাত্র থাকা অবস্থায় মুছে ফেলা যাবে না")
    repo.delete_room(room_id)
    return success_response(message="রুম মুছে ফেলা হয়েছে")


# ---------------------------------------------------------------------------
# Allocations
# ---------------------------------------------------------------------------
@router.post("/allocations")
async def allocate_seat(body: AllocationForm, repo: HostelRepository = Depends(repository(HostelRepository))):
    room = _active_room(repo, body.room_id)
    if (room.get("current_occupancy") or 0) >= room["capacity"]:
        raise _conflict("এই রুমে কোনো খালি সিট নেই")
    if repo.allocations(body.student_id):
        raise _conflict("এই ছাত্র ইতিমধ্যে একটি রুমে বরাদ্দ আছে")

    allocation = first_row(repo.allocate(body.to_record(room), room), "Allocation")
    return success_response(data=allocation, message="ছাত্র রুমে বরাদ্দ হয়েছে")


@router.delete("/allocations/{allocation_id}")
async def release_seat(allocation_id: str, repo: HostelRepository = Depends(repository(HostelRepository))):
    allocation = repo.get_allocation(allocation_id)
    if not allocation:
        raise not_found("Allocation")
    if allocation.get("status") != AllocationStatus.ACTIVE.value:
        raise _conflict("বরাদ্দটি ইতিমধ্যে বাতিল হয়েছে")

    repo.release(allocation, repo.get(allocation["room_id"]))
    return success_response(message="বরাদ্দ বাতিল হয়েছে")
