from datetime import datetime
from typing import List

from madrasah.core.cache import TRANSACTIONS
from madrasah.core.enums import WindowFilter
from madrasah.repositories.base import TableRepository
from madrasah.services.aggregation import filter_by_window, window_start
from madrasah.services.stats import transaction_stats


class TransactionRepository(TableRepository):
    table = "transactions"
    read_key = TRANSACTIONS

    def list(self, window: WindowFilter = WindowFilter.MONTHLY, now: datetime | None = None) -> List[dict]:
        def fetch():
            since = window_start(window, now).date().isoformat()
            return (
                self._query()
                .gte("transaction_date", since)
                .order("transaction_date", desc=True)
                .execute()
                .data
            )

        rows = self._cached((TRANSACTIONS, window.value), fetch)
        return filter_by_window(rows, window, "transaction_date", now)

    def stats(self, window: WindowFilter = WindowFilter.MONTHLY, now: datetime | None = None) -> dict:
        return transaction_stats(self.list(window, now))

    def create(self, record: dict) -> List[dict]:
        return self._insert("transactions.create", self._stamp(record))

    def delete(self, row_id: str) -> List[dict]:
        return self._delete("transactions.delete", "id", row_id)
