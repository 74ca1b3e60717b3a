from typing import List

from madrasah.core.cache import STAFF
from madrasah.repositories.base import TableRepository


class StaffRepository(TableRepository):
    table = "staff"
    read_key = STAFF

    def list(self) -> List[dict]:
        return self._cached(
            (STAFF,),
            lambda: self._query().order("created_at", desc=True).execute().data,
        )

    def create(self, record: dict) -> List[dict]:
        return self._insert("staff.create", self._stamp(record))

    def update(self, row_id: str, record: dict) -> List[dict]:
        return self._update("staff.update", row_id, record)

    def delete(self, row_id: str) -> List[dict]:
        return self._delete("staff.delete", "id", row_id)
