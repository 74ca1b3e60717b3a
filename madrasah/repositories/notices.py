from typing import List

from madrasah.core.cache import NOTICES
from madrasah.repositories.base import TableRepository


class NoticeRepository(TableRepository):
    table = "notices"
    read_key = NOTICES

    def list(self, active_only: bool = True) -> List[dict]:
        def fetch():
            query = self._query().order("publish_date", desc=True)
            if active_only:
                query = query.eq("is_active", True)
            return query.execute().data

        return self._cached((NOTICES, active_only), fetch)

    def create(self, record: dict) -> List[dict]:
        return self._insert("notices.create", self._stamp(record))

    def delete(self, row_id: str) -> List[dict]:
        return self._delete("notices.delete", "id", row_id)
