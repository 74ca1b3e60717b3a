"""
Pydantic schemas for daily attendance.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from madrasah.core.enums import AttendanceStatus, SubjectType


class AttendanceMark(BaseModel):
    user_id: str = Field(min_length=1)
    user_type: SubjectType
    date: date
    status: AttendanceStatus
    remarks: Optional[str] = Field(None, max_length=500)

    def to_record(self) -> dict:
        return {
            "user_id": self.user_id,
            "user_type": self.user_type.value,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "remarks": self.remarks or None,
        }


class BulkAttendanceMark(BaseModel):
    records: List[AttendanceMark] = Field(min_length=1)


class DailyAttendanceEntry(BaseModel):
    user_id: str = Field(min_length=1)
    status: AttendanceStatus
    remarks: Optional[str] = None


class DailyAttendanceSheet(BaseModel):
    """One register page: a date, a person type and everyone's status."""

    user_type: SubjectType
    date: date
    entries: List[DailyAttendanceEntry] = Field(min_length=1)

    def to_marks(self) -> list[AttendanceMark]:
        return [
            AttendanceMark(
                user_id=e.user_id,
                user_type=self.user_type,
                date=self.date,
                status=e.status,
                remarks=e.remarks,
            )
            for e in self.entries
        ]
