"""
Attendance rows are keyed by (user_id, user_type, date): marking the same
person on the same day again overwrites the earlier mark.
"""

from datetime import date
from typing import List

from madrasah.core.cache import ATTENDANCE
from madrasah.core.enums import SubjectType
from madrasah.repositories.base import TableRepository, collapse_duplicates
from madrasah.services.aggregation import attendance_summary

CONFLICT_KEY = ("user_id", "user_type", "date")


class AttendanceRepository(TableRepository):
    table = "attendance"
    read_key = ATTENDANCE

    def list(self, user_type: SubjectType, on_date: date | None = None) -> List[dict]:
        def fetch():
            query = self._query().eq("user_type", user_type.value).order("date", desc=True)
            if on_date:
                query = query.eq("date", on_date.isoformat())
            return query.execute().data

        day = on_date.isoformat() if on_date else None
        return self._cached((ATTENDANCE, user_type.value, day), fetch)

    def for_person(self, user_id: str, user_type: SubjectType, start: date, end: date) -> List[dict]:
        def fetch():
            return (
                self._query()
                .eq("user_id", user_id)
                .eq("user_type", user_type.value)
                .gte("date", start.isoformat())
                .lte("date", end.isoformat())
                .order("date")
                .execute()
                .data
            )

        return self._cached(
            (ATTENDANCE, user_type.value, "person", user_id, start.isoformat(), end.isoformat()),
            fetch,
        )

    def stats(self, user_id: str, user_type: SubjectType, start: date, end: date) -> dict:
        return attendance_summary(self.for_person(user_id, user_type, start, end))

    def mark(self, record: dict) -> List[dict]:
        return self._upsert("attendance.mark", [self._stamp(record)], ",".join(CONFLICT_KEY))

    def bulk_mark(self, records: List[dict]) -> List[dict]:
        """One upsert for the whole register; it lands or fails as a unit."""
        rows = collapse_duplicates((self._stamp(r) for r in records), CONFLICT_KEY)
        return self._upsert("attendance.bulk_mark", rows, ",".join(CONFLICT_KEY))
