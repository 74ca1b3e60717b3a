"""
Pydantic schemas for students.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from madrasah.core.enums import Department, StudentStatus
from madrasah.schemas.common import bd_phone, blank_to_none, iso_date, today_iso


class StudentForm(BaseModel):
    student_id: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=2, max_length=100)
    father_name: Optional[str] = Field(None, max_length=100)
    mother_name: Optional[str] = Field(None, max_length=100)
    date_of_birth: Optional[str] = None
    phone: Optional[str] = None
    guardian_phone: str
    address: Optional[str] = Field(None, max_length=500)
    department: Department
    class_name: str = Field(min_length=1, max_length=50)
    admission_date: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)

    _phones = field_validator("phone", "guardian_phone")(bd_phone)
    _dates = field_validator("date_of_birth", "admission_date")(iso_date)

    def to_record(self, today: Optional[date] = None) -> dict:
        return {
            "student_id": self.student_id,
            "name": self.name,
            "father_name": blank_to_none(self.father_name),
            "mother_name": blank_to_none(self.mother_name),
            "date_of_birth": blank_to_none(self.date_of_birth),
            "phone": blank_to_none(self.phone),
            "guardian_phone": self.guardian_phone,
            "address": blank_to_none(self.address),
            "department": self.department.value,
            "class_name": self.class_name,
            "admission_date": blank_to_none(self.admission_date) or today_iso(today),
            "notes": blank_to_none(self.notes),
        }


class StudentStatusUpdate(BaseModel):
    status: StudentStatus
