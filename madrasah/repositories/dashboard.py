"""
Cross-entity reads: the dashboard counters and the six-month report data.
"""

from datetime import date
from typing import List

from madrasah.core.cache import DASHBOARD_STATS, REPORTS_DATA
from madrasah.repositories.base import TableRepository
from madrasah.services.stats import dashboard_stats, last_months, month_bounds, monthly_series


class DashboardRepository(TableRepository):
    def _since(self, table: str, columns: str, date_key: str, start: str, end: str | None = None) -> List[dict]:
        query = self.db.table(table).select(columns).gte(date_key, start)
        if end:
            query = query.lte(date_key, end)
        return query.execute().data

    def stats(self, today: date | None = None) -> dict:
        today = today or date.today()
        month_start = date(today.year, today.month, 1).isoformat()

        def fetch():
            return dashboard_stats(
                students=self.db.table("students").select("id, department, status").execute().data,
                staff=self.db.table("staff").select("id, salary").execute().data,
                transactions=self._since("transactions", "amount, type, transaction_date",
                                         "transaction_date", month_start),
                expenses=self._since("expenses", "amount, expense_date", "expense_date", month_start),
            )

        return self._cached((DASHBOARD_STATS, month_start), fetch)

    def reports(self, today: date | None = None) -> dict:
        today = today or date.today()
        months = last_months(today)
        start = months[0].isoformat()
        end = month_bounds(months[-1])[1].isoformat()

        def fetch():
            return monthly_series(
                transactions=self._since("transactions", "amount, type, transaction_date",
                                         "transaction_date", start, end),
                expenses=self._since("expenses", "amount, expense_date", "expense_date", start, end),
                fee_payments=self._since("fee_payments", "amount, payment_date", "payment_date", start, end),
                salary_payments=self._since("salary_payments", "amount, payment_date",
                                            "payment_date", start, end),
                today=today,
            )

        return self._cached((REPORTS_DATA, start), fetch)
