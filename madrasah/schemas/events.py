"""
Pydantic schemas for the event calendar and class homework.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from madrasah.core.enums import Department, EventType
from madrasah.schemas.common import blank_to_none, clock_time, iso_date, today_iso


class EventForm(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    event_type: EventType = EventType.GENERAL
    start_date: str = Field(min_length=1)
    end_date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    location: Optional[str] = Field(None, max_length=200)
    is_holiday: bool = False

    _dates = field_validator("start_date", "end_date")(iso_date)
    _times = field_validator("start_time", "end_time")(clock_time)

    @model_validator(mode="after")
    def _ends_after_start(self):
        if self.end_date and self.end_date < self.start_date:
            raise PydanticCustomError("end_date", "শেষের তারিখ শুরুর তারিখের আগে হতে পারে না")
        return self

    def to_record(self) -> dict:
        return {
            "title": self.title,
            "description": blank_to_none(self.description),
            "event_type": self.event_type.value,
            "start_date": self.start_date,
            "end_date": blank_to_none(self.end_date),
            "start_time": blank_to_none(self.start_time),
            "end_time": blank_to_none(self.end_time),
            "location": blank_to_none(self.location),
            "is_holiday": self.is_holiday,
        }


class HomeworkForm(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    department: Department
    class_name: str = Field(min_length=1, max_length=50)
    subject: str = Field(min_length=1, max_length=100)
    teacher_id: Optional[str] = None
    due_date: str = Field(min_length=1)

    _date = field_validator("due_date")(iso_date)

    def to_record(self) -> dict:
        return {
            "title": self.title,
            "description": blank_to_none(self.description),
            "department": self.department.value,
            "class_name": self.class_name,
            "subject": self.subject,
            "teacher_id": blank_to_none(self.teacher_id),
            "due_date": self.due_date,
        }

    def to_new_record(self, today: Optional[date] = None) -> dict:
        """A new assignment is given today; edits leave the assigned date alone."""
        return {**self.to_record(), "assigned_date": today_iso(today), "is_active": True}
