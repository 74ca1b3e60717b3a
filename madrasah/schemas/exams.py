"""
Pydantic schemas for exams and exam results.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from madrasah.core.enums import Department
from madrasah.schemas.common import blank_to_none, clock_time, iso_date
from madrasah.services.aggregation import calculate_grade

PASS_ABOVE_TOTAL = "পাশ নম্বর পূর্ণমানের বেশি হতে পারে না"


class ExamForm(BaseModel):
    exam_name: str = Field(min_length=1, max_length=200)
    exam_type: str = Field(min_length=1, max_length=50)
    department: Department
    class_name: str = Field(min_length=1, max_length=50)
    subject: str = Field(min_length=1, max_length=100)
    total_marks: int = Field(ge=1)
    pass_marks: int = Field(ge=1)
    exam_date: str = Field(min_length=1)
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    academic_year: int = Field(ge=2020)
    is_active: bool = True

    _date = field_validator("exam_date")(iso_date)
    _times = field_validator("start_time", "end_time")(clock_time)

    @model_validator(mode="after")
    def _pass_within_total(self):
        if self.pass_marks > self.total_marks:
            raise PydanticCustomError("pass_marks", PASS_ABOVE_TOTAL)
        return self

    def to_record(self) -> dict:
        return {
            "exam_name": self.exam_name,
            "exam_type": self.exam_type,
            "department": self.department.value,
            "class_name": self.class_name,
            "subject": self.subject,
            "total_marks": self.total_marks,
            "pass_marks": self.pass_marks,
            "exam_date": self.exam_date,
            "start_time": blank_to_none(self.start_time),
            "end_time": blank_to_none(self.end_time),
            "academic_year": self.academic_year,
            "is_active": self.is_active,
        }


class ExamUpdate(BaseModel):
    exam_name: Optional[str] = Field(None, min_length=1, max_length=200)
    exam_type: Optional[str] = Field(None, min_length=1, max_length=50)
    subject: Optional[str] = Field(None, min_length=1, max_length=100)
    total_marks: Optional[int] = Field(None, ge=1)
    pass_marks: Optional[int] = Field(None, ge=1)
    exam_date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    is_active: Optional[bool] = None

    _date = field_validator("exam_date")(iso_date)
    _times = field_validator("start_time", "end_time")(clock_time)

    @model_validator(mode="after")
    def _pass_within_total(self):
        if self.pass_marks is not None and self.total_marks is not None and self.pass_marks > self.total_marks:
            raise PydanticCustomError("pass_marks", PASS_ABOVE_TOTAL)
        return self

    def changes(self) -> dict:
        """Fields sent in the request. Only the clock times may be cleared."""
        changes = self.model_dump(exclude_unset=True)
        for field in ("start_time", "end_time"):
            if field in changes:
                changes[field] = blank_to_none(changes[field])
        return {k: v for k, v in changes.items() if v is not None or k in ("start_time", "end_time")}

    def pass_exceeds_total(self, exam: dict) -> bool:
        """Checks the marks against the stored exam when only one of the two is changing."""
        total = self.total_marks if self.total_marks is not None else exam.get("total_marks")
        passing = self.pass_marks if self.pass_marks is not None else exam.get("pass_marks")
        return total is not None and passing is not None and passing > total


class ExamResultEntry(BaseModel):
    student_id: str = Field(min_length=1)
    marks_obtained: float = Field(0, ge=0, allow_inf_nan=False)
    is_absent: bool = False
    remarks: Optional[str] = None

    def to_record(self, exam_id: str, total_marks: float) -> dict:
        """Marks are capped at the exam's total; an absent student scores 0 and grade F."""
        marks = 0 if self.is_absent else min(self.marks_obtained, total_marks)
        return {
            "exam_id": exam_id,
            "student_id": self.student_id,
            "marks_obtained": marks,
            "is_absent": self.is_absent,
            "grade": calculate_grade(marks, total_marks, self.is_absent),
            "remarks": blank_to_none(self.remarks),
        }


class ExamResultsSubmit(BaseModel):
    results: List[ExamResultEntry] = Field(min_length=1)
