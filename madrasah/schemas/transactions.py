"""
Pydantic schemas for the income/expense ledger.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from madrasah.core.enums import TransactionType
from madrasah.schemas.common import amount_text, blank_to_none, iso_date, to_number


class TransactionForm(BaseModel):
    transaction_id: str = Field(min_length=1, max_length=50)
    title: str = Field(min_length=1, max_length=200)
    type: TransactionType
    category: str = Field(min_length=1, max_length=100)
    amount: str
    description: Optional[str] = None
    transaction_date: str = Field(min_length=1)

    _amount = field_validator("amount")(amount_text)
    _date = field_validator("transaction_date")(iso_date)

    def to_record(self) -> dict:
        return {
            "transaction_id": self.transaction_id,
            "title": self.title,
            "type": self.type.value,
            "category": self.category,
            "amount": to_number(self.amount),
            "description": blank_to_none(self.description),
            "transaction_date": self.transaction_date,
        }
