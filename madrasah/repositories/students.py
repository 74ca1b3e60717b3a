from typing import List

from madrasah.core.cache import STUDENTS
from madrasah.core.enums import StudentStatus
from madrasah.repositories.base import TableRepository


class StudentRepository(TableRepository):
    table = "students"
    read_key = STUDENTS

    def list(self) -> List[dict]:
        return self._cached(
            (STUDENTS,),
            lambda: self._query().order("created_at", desc=True).execute().data,
        )

    def create(self, record: dict) -> List[dict]:
        return self._insert("students.create", self._stamp(record))

    def update(self, row_id: str, record: dict) -> List[dict]:
        return self._update("students.update", row_id, record)

    def set_status(self, row_id: str, status: StudentStatus) -> List[dict]:
        return self._update("students.update", row_id, {"status": status.value})

    def delete(self, row_id: str) -> List[dict]:
        return self._delete("students.delete", "id", row_id)
