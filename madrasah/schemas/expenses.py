"""
Pydantic schemas for expenses (single rows and shopping-trip batches).
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from madrasah.core.enums import ExpenseCategory
from madrasah.schemas.common import blank_to_none, generated_id, iso_date, non_negative, to_number, today_iso


class ExpenseForm(BaseModel):
    expense_id: str = Field(min_length=1, max_length=50)
    title: str = Field(min_length=2, max_length=100)
    category: ExpenseCategory
    amount: str = Field(min_length=1)
    description: Optional[str] = Field(None, max_length=2000)
    expense_date: Optional[str] = None

    _date = field_validator("expense_date")(iso_date)

    @field_validator("amount")
    @classmethod
    def _amount(cls, value: str) -> str:
        if not non_negative(value):
            raise PydanticCustomError("value_error", "পরিমাণ প্রয়োজন")
        return value

    def to_record(self, today: Optional[date] = None) -> dict:
        return {
            "expense_id": self.expense_id,
            "title": self.title,
            "category": self.category.value,
            "amount": to_number(self.amount),
            "description": blank_to_none(self.description),
            "expense_date": blank_to_none(self.expense_date) or today_iso(today),
        }


class BulkExpenseItem(BaseModel):
    title: str = Field(min_length=1)
    category: ExpenseCategory = ExpenseCategory.MARKET
    amount: float = Field(ge=1, allow_inf_nan=False)
    description: Optional[str] = None


class BulkExpenseForm(BaseModel):
    """Several line items bought on one trip, saved under one batch."""

    batch_name: str = Field(min_length=1, max_length=200)
    expense_date: str = Field(min_length=1)
    items: List[BulkExpenseItem] = Field(min_length=1)

    _date = field_validator("expense_date")(iso_date)

    @property
    def total(self) -> float:
        return sum(item.amount for item in self.items)

    def to_records(self, batch_id: str) -> list[dict]:
        return [
            {
                "expense_id": generated_id("EXP", index),
                "title": item.title,
                "category": item.category.value,
                "amount": item.amount,
                "description": blank_to_none(item.description),
                "expense_date": self.expense_date,
                "batch_id": batch_id,
                "batch_name": self.batch_name,
            }
            for index, item in enumerate(self.items)
        ]
