from typing import List

from madrasah.core.cache import SALARY_PAYMENTS
from madrasah.repositories.base import TableRepository
from madrasah.services.stats import salary_stats

COLUMNS = "*, staff:staff_id(name, staff_id, designation, phone)"


class SalaryRepository(TableRepository):
    table = "salary_payments"
    read_key = SALARY_PAYMENTS

    def list(self) -> List[dict]:
        return self._cached(
            (SALARY_PAYMENTS,),
            lambda: self._query(COLUMNS).order("payment_date", desc=True).execute().data,
        )

    def get_payment(self, payment_id: str) -> dict | None:
        return self.get(payment_id, COLUMNS)

    def create(self, record: dict) -> List[dict]:
        return self._insert("salaries.create", self._stamp(record))

    def stats(self, month: str, year: int) -> dict:
        return salary_stats(self.list(), month, year)
