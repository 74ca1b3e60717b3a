"""
Hostel rooms and seat allocations. A room's ``current_occupancy`` moves with
its allocations: +1 when a seat is given, -1 (never below zero) when released.
"""

import logging
from datetime import date
from typing import List

from madrasah.core.cache import HOSTEL_ALLOCATIONS, HOSTEL_ROOMS
from madrasah.core.enums import AllocationStatus
from madrasah.repositories.base import TableRepository

logger = logging.getLogger(__name__)

ALLOCATION_COLUMNS = "*, students(name, student_id), hostel_rooms(room_number, room_type)"


class HostelRepository(TableRepository):
    table = "hostel_rooms"
    read_key = HOSTEL_ROOMS

    # -- rooms -------------------------------------------------------------
    def rooms(self) -> List[dict]:
        return self._cached(
            (HOSTEL_ROOMS,),
            lambda: self._query().eq("is_active", True).order("room_number").execute().data,
        )

    def create_room(self, record: dict) -> List[dict]:
        return self._insert("hostel.create_room", {**record, "current_occupancy": 0, "is_active": True})

    def update_room(self, row_id: str, changes: dict) -> List[dict]:
        return self._update("hostel.update_room", row_id, changes)

    def delete_room(self, row_id: str) -> List[dict]:
        return self._update("hostel.delete_room", row_id, {"is_active": False})

    # -- allocations -------------------------------------------------------
    def allocations(self, student_id: str | None = None) -> List[dict]:
        def fetch():
            query = (
                self.db.table("hostel_allocations")
                .select(ALLOCATION_COLUMNS)
                .eq("status", AllocationStatus.ACTIVE.value)
                .order("allocation_date", desc=True)
            )
            if student_id:
                query = query.eq("student_id", student_id)
            return query.execute().data

        return self._cached((HOSTEL_ALLOCATIONS, student_id), fetch)

    def get_allocation(self, allocation_id: str) -> dict | None:
        result = (
            self.db.table("hostel_allocations")
            .select("*")
            .eq("id", allocation_id)
            .maybe_single()
            .execute()
        )
        return result.data if result else None

    def _set_occupancy(self, room: dict, occupancy: int) -> None:
        self.db.table("hostel_rooms").update({"current_occupancy": occupancy}).eq("id", room["id"]).execute()

    def allocate(self, record: dict, room: dict) -> List[dict]:
        rows = self.db.table("hostel_allocations").insert(record).execute().data
        self._set_occupancy(room, int(room.get("current_occupancy") or 0) + 1)
        return self._written("hostel.allocate", rows)

    def release(self, allocation: dict, room: dict | None, today: date | None = None) -> List[dict]:
        rows = (
            self.db.table("hostel_allocations")
            .update({
                "status": AllocationStatus.CANCELLED.value,
                "end_date": (today or date.today()).isoformat(),
            })
            .eq("id", allocation["id"])
            .execute()
            .data
        )
        if room is None:
            logger.warning("Allocation %s released but room %s is gone", allocation["id"], allocation["room_id"])
        elif int(room.get("current_occupancy") or 0) > 0:
            self._set_occupancy(room, int(room["current_occupancy"]) - 1)
        return self._written("hostel.release", rows)
