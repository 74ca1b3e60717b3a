from datetime import date
from typing import List

from madrasah.core.cache import EVENTS, HOMEWORK
from madrasah.repositories.base import TableRepository

HOMEWORK_COLUMNS = "*, staff(name)"


class EventRepository(TableRepository):
    table = "events"
    read_key = EVENTS

    def list(self) -> List[dict]:
        return self._cached(
            (EVENTS,),
            lambda: self._query().eq("is_active", True).order("start_date").execute().data,
        )

    def create(self, record: dict) -> List[dict]:
        return self._insert("events.create", {**record, "is_active": True})

    def update(self, row_id: str, changes: dict) -> List[dict]:
        return self._update("events.update", row_id, changes)

    def delete(self, row_id: str) -> List[dict]:
        return self._delete("events.delete", "id", row_id)


class HomeworkRepository(TableRepository):
    """Deleting homework only hides it (``is_active = false``)."""

    table = "homework"
    read_key = HOMEWORK

    def list(self) -> List[dict]:
        return self._cached(
            (HOMEWORK,),
            lambda: self._query(HOMEWORK_COLUMNS).eq("is_active", True).order("due_date").execute().data,
        )

    def for_class(self, department: str, class_name: str, due_from: date) -> List[dict]:
        def fetch():
            return (
                self._query(HOMEWORK_COLUMNS)
                .eq("department", department)
                .eq("class_name", class_name)
                .eq("is_active", True)
                .gte("due_date", due_from.isoformat())
                .order("due_date")
                .execute()
                .data
            )

        return self._cached((HOMEWORK, department, class_name, due_from.isoformat()), fetch)

    def create(self, record: dict) -> List[dict]:
        return self._insert("homework.create", record)

    def update(self, row_id: str, changes: dict) -> List[dict]:
        return self._update("homework.update", row_id, changes)

    def delete(self, row_id: str) -> List[dict]:
        return self._update("homework.delete", row_id, {"is_active": False})
