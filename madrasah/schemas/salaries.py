"""
Pydantic schemas for salary payments.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from madrasah.core.enums import DEFAULT_PAYMENT_METHOD, MONTHS, SalaryStatus
from madrasah.schemas.common import blank_to_none


class SalaryPaymentForm(BaseModel):
    staff_id: str = Field(min_length=1)
    month: str
    year: int = Field(ge=2020)
    amount: float = Field(ge=0, allow_inf_nan=False)
    payment_date: date
    payment_method: str = DEFAULT_PAYMENT_METHOD
    status: SalaryStatus = SalaryStatus.PAID
    notes: Optional[str] = None

    @field_validator("month")
    @classmethod
    def _month(cls, value: str) -> str:
        if value not in MONTHS:
            raise PydanticCustomError("value_error", "মাস নির্বাচন করুন")
        return value

    def to_record(self, payment_id: str) -> dict:
        return {
            "payment_id": payment_id,
            "staff_id": self.staff_id,
            "month": self.month,
            "year": self.year,
            "amount": self.amount,
            "payment_date": self.payment_date.isoformat(),
            "payment_method": self.payment_method or DEFAULT_PAYMENT_METHOD,
            "status": self.status.value,
            "notes": blank_to_none(self.notes),
        }
