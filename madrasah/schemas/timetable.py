"""
Pydantic schemas for the class timetable.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from madrasah.core.enums import DAYS_OF_WEEK, Department
from madrasah.schemas.common import blank_to_none, clock_time


class TimetableForm(BaseModel):
    department: Department
    class_name: str = Field(min_length=1, max_length=50)
    day_of_week: str
    subject: str = Field(min_length=1, max_length=100)
    teacher_id: Optional[str] = None
    start_time: str = Field(min_length=1)
    end_time: str = Field(min_length=1)
    room_number: Optional[str] = Field(None, max_length=50)

    _times = field_validator("start_time", "end_time")(clock_time)

    @field_validator("day_of_week")
    @classmethod
    def _day(cls, value: str) -> str:
        if value not in DAYS_OF_WEEK:
            raise PydanticCustomError("day_of_week", "দিন নির্বাচন করুন")
        return value

    @model_validator(mode="after")
    def _ends_after_start(self):
        # zero-padded HH:MM compares correctly as text
        if self.end_time[:5] <= self.start_time[:5]:
            raise PydanticCustomError("end_time", "শেষের সময় শুরুর সময়ের পরে হতে হবে")
        return self

    def to_record(self) -> dict:
        return {
            "department": self.department.value,
            "class_name": self.class_name,
            "day_of_week": self.day_of_week,
            "subject": self.subject,
            "teacher_id": blank_to_none(self.teacher_id),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "room_number": blank_to_none(self.room_number),
            "is_active": True,
        }
