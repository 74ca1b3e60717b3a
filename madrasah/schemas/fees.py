"""
Pydantic schemas for fee structures and fee payments.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from madrasah.core.enums import DEFAULT_PAYMENT_METHOD, Department
from madrasah.schemas.common import amount_text, blank_to_none, iso_date, to_int, to_number


class FeeStructureForm(BaseModel):
    fee_type: str = Field(min_length=1, max_length=100)
    amount: str
    frequency: str = Field(min_length=1, max_length=50)
    department: Optional[Department] = None
    class_name: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    is_active: bool = True

    _amount = field_validator("amount")(amount_text)

    @field_validator("department", mode="before")
    @classmethod
    def _blank_department(cls, value):
        return blank_to_none(value)

    def to_record(self) -> dict:
        return {
            "fee_type": self.fee_type,
            "amount": to_number(self.amount),
            "frequency": self.frequency,
            "department": self.department.value if self.department else None,
            "class_name": blank_to_none(self.class_name),
            "description": blank_to_none(self.description),
            "is_active": self.is_active,
        }


class FeeStructureUpdate(BaseModel):
    fee_type: Optional[str] = Field(None, min_length=1, max_length=100)
    amount: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    frequency: Optional[str] = None
    department: Optional[Department] = None
    class_name: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class FeePaymentForm(BaseModel):
    student_id: str = Field(min_length=1)
    fee_structure_id: str = Field(min_length=1)
    amount: str
    payment_date: str = Field(min_length=1)
    payment_method: str = DEFAULT_PAYMENT_METHOD
    month: Optional[str] = None
    year: Optional[str] = None
    receipt_number: Optional[str] = None
    remarks: Optional[str] = None

    _amount = field_validator("amount")(amount_text)
    _date = field_validator("payment_date")(iso_date)

    def to_record(self) -> dict:
        return {
            "student_id": self.student_id,
            "fee_structure_id": self.fee_structure_id,
            "amount": to_number(self.amount),
            "payment_date": self.payment_date,
            "payment_method": self.payment_method or DEFAULT_PAYMENT_METHOD,
            "month": blank_to_none(self.month),
            "year": to_int(self.year),
            "receipt_number": blank_to_none(self.receipt_number),
            "remarks": blank_to_none(self.remarks),
        }
