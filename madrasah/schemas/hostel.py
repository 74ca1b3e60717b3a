"""
Pydantic schemas for hostel rooms and seat allocations.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from madrasah.core.enums import AllocationStatus, RoomType
from madrasah.schemas.common import blank_to_none, today_iso


class RoomForm(BaseModel):
    room_number: str = Field(min_length=1, max_length=20)
    capacity: int = Field(4, ge=1, le=50)
    room_type: RoomType = RoomType.GENERAL
    monthly_fee: float = Field(0, ge=0, allow_inf_nan=False)
    description: Optional[str] = Field(None, max_length=500)

    def to_record(self) -> dict:
        return {
            "room_number": self.room_number,
            "capacity": self.capacity,
            "room_type": self.room_type.value,
            "monthly_fee": self.monthly_fee,
            "description": blank_to_none(self.description),
        }


class AllocationForm(BaseModel):
    student_id: str = Field(min_length=1)
    room_id: str = Field(min_length=1)
    monthly_fee: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    notes: Optional[str] = Field(None, max_length=500)

    def to_record(self, room: dict, today: Optional[date] = None) -> dict:
        """The room's own fee applies unless the form names one."""
        fee = self.monthly_fee if self.monthly_fee is not None else room.get("monthly_fee") or 0
        return {
            "student_id": self.student_id,
            "room_id": self.room_id,
            "monthly_fee": fee,
            "allocation_date": today_iso(today),
            "status": AllocationStatus.ACTIVE.value,
            "notes": blank_to_none(self.notes),
        }
