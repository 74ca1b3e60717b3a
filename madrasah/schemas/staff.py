"""
Pydantic schemas for staff.
"""

from datetime import date
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from madrasah.core.enums import StaffRole
from madrasah.schemas.common import (
    bd_phone,
    blank_to_none,
    iso_date,
    national_id,
    non_negative,
    to_number,
    today_iso,
)
from madrasah.services.stats import infer_staff_role


class StaffForm(BaseModel):
    staff_id: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=2, max_length=100)
    designation: str = Field(min_length=2, max_length=100)
    role: Optional[StaffRole] = None
    phone: str
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=500)
    salary: Optional[str] = None
    join_date: Optional[str] = None
    nid: Optional[str] = None
    education: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = Field(None, max_length=2000)

    _phone = field_validator("phone")(bd_phone)
    _nid = field_validator("nid")(national_id)
    _join_date = field_validator("join_date")(iso_date)

    @field_validator("email")
    @classmethod
    def _email(cls, value: Optional[str]) -> Optional[str]:
        if value:
            try:
                validate_email(value, check_deliverability=False)
            except EmailNotValidError:
                raise PydanticCustomError("email", "সঠিক ইমেইল দিন")
        return value

    @field_validator("salary")
    @classmethod
    def _salary(cls, value: Optional[str]) -> Optional[str]:
        if value and not non_negative(value):
            raise PydanticCustomError("salary", "সঠিক বেতন দিন")
        return value

    def to_record(self, today: Optional[date] = None) -> dict:
        return {
            "staff_id": self.staff_id,
            "name": self.name,
            "designation": self.designation,
            "role": (self.role or infer_staff_role(self.designation)).value,
            "phone": self.phone,
            "email": blank_to_none(self.email),
            "address": blank_to_none(self.address),
            "salary": to_number(self.salary),
            "join_date": blank_to_none(self.join_date) or today_iso(today),
            "nid": blank_to_none(self.nid),
            "education": blank_to_none(self.education),
            "notes": blank_to_none(self.notes),
        }
