from typing import List

from madrasah.core.cache import TIMETABLE
from madrasah.repositories.base import TableRepository
from madrasah.services.stats import group_timetable_by_day

COLUMNS = "*, teacher:staff(id, name, designation)"


class TimetableRepository(TableRepository):
    table = "timetables"
    read_key = TIMETABLE

    def list(self, department: str | None = None, class_name: str | None = None,
             day_of_week: str | None = None) -> List[dict]:
        def fetch():
            query = self._query(COLUMNS).eq("is_active", True).order("start_time")
            if department:
                query = query.eq("department", department)
            if class_name:
                query = query.eq("class_name", class_name)
            if day_of_week:
                query = query.eq("day_of_week", day_of_week)
            return query.execute().data

        return self._cached((TIMETABLE, department, class_name, day_of_week), fetch)

    def by_day(self, department: str, class_name: str) -> dict[str, List[dict]]:
        return group_timetable_by_day(self.list(department, class_name))

    def create(self, record: dict) -> List[dict]:
        return self._insert("timetable.create", self._stamp(record))

    def update(self, row_id: str, changes: dict) -> List[dict]:
        return self._update("timetable.update", row_id, changes)

    def delete(self, row_id: str) -> List[dict]:
        return self._delete("timetable.delete", "id", row_id)
