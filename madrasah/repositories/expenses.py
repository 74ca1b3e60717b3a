import uuid
from datetime import datetime
from typing import List

from madrasah.core.cache import EXPENSES
from madrasah.core.enums import WindowFilter
from madrasah.repositories.base import TableRepository
from madrasah.services.aggregation import filter_by_window, group_expense_batches, window_start
from madrasah.services.stats import expense_stats


class ExpenseRepository(TableRepository):
    table = "expenses"
    read_key = EXPENSES

    def list(self, window: WindowFilter = WindowFilter.MONTHLY, now: datetime | None = None) -> List[dict]:
        """Rows from the window's start date on, newest first, trimmed to the exact boundary."""

        def fetch():
            since = window_start(window, now).date().isoformat()
            return (
                self._query()
                .gte("expense_date", since)
                .order("expense_date", desc=True)
                .execute()
                .data
            )

        rows = self._cached((EXPENSES, window.value), fetch)
        return filter_by_window(rows, window, "expense_date", now)

    def stats(self, window: WindowFilter = WindowFilter.MONTHLY, now: datetime | None = None) -> dict:
        return expense_stats(self.list(window, now), now)

    def grouped(self, window: WindowFilter = WindowFilter.MONTHLY, now: datetime | None = None) -> List[dict]:
        return group_expense_batches(self.list(window, now))

    def create(self, record: dict) -> List[dict]:
        return self._insert("expenses.create", self._stamp(record))

    def create_batch(self, build_records) -> tuple[str, List[dict]]:
        """``build_records(batch_id)`` returns the rows; all go in one insert."""
        batch_id = str(uuid.uuid4())
        rows = [self._stamp(r) for r in build_records(batch_id)]
        return batch_id, self._insert("expenses.create_batch", rows)

    def delete(self, row_id: str) -> List[dict]:
        return self._delete("expenses.delete", "id", row_id)

    def delete_batch(self, batch_id: str) -> List[dict]:
        return self._delete("expenses.delete_batch", "batch_id", batch_id)
