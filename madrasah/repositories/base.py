"""
Base class for the per-entity data-access repositories.

A repository is built per request from the application context and the
signed-in user. Reads go through the query cache; every write names itself
so the cache can drop whatever the invalidation table says it affects.
"""

import logging
from typing import Any, Callable, Iterable, List, Sequence

from madrasah.core.context import AppContext

logger = logging.getLogger(__name__)


def collapse_duplicates(records: Iterable[dict], key_fields: Sequence[str]) -> List[dict]:
    """
    Keep only the last record for each conflict key, in first-seen key order.

    Postgres refuses an upsert that touches the same row twice in one
    statement, so a batch is reduced to what a sequence of single upserts
    would have left behind.
    """
    latest: dict[tuple, dict] = {}
    for record in records:
        latest[tuple(record[f] for f in key_fields)] = record
    return list(latest.values())


class TableRepository:
    table: str = ""
    read_key: str = ""

    def __init__(self, ctx: AppContext, user_id: str | None = None):
        self.ctx = ctx
        self.db = ctx.db
        self.user_id = user_id

    # -- reads -------------------------------------------------------------
    def _cached(self, key: tuple, fetch: Callable[[], Any]) -> Any:
        return self.ctx.cache.get_or_fetch(key, fetch)

    def _query(self, columns: str = "*"):
        return self.db.table(self.table).select(columns)

    def get(self, row_id: str, columns: str = "*") -> dict | None:
        result = self._query(columns).eq("id", row_id).maybe_single().execute()
        return result.data if result else None

    # -- writes ------------------------------------------------------------
    def _stamp(self, record: dict, field: str = "created_by") -> dict:
        return {**record, field: self.user_id}

    def _written(self, mutation: str, rows: List[dict] | None) -> List[dict]:
        rows = rows or []
        self.ctx.cache.invalidate_for(mutation)
        logger.info("%s: %d row(s) in %s", mutation, len(rows), self.table)
        return rows

    def _insert(self, mutation: str, record: dict | List[dict]) -> List[dict]:
        result = self.db.table(self.table).insert(record).execute()
        return self._written(mutation, result.data)

    def _update(self, mutation: str, row_id: str, changes: dict) -> List[dict]:
        result = self.db.table(self.table).update(changes).eq("id", row_id).execute()
        return self._written(mutation, result.data)

    def _delete(self, mutation: str, column: str, value: Any) -> List[dict]:
        result = self.db.table(self.table).delete().eq(column, value).execute()
        return self._written(mutation, result.data)

    def _upsert(self, mutation: str, records: List[dict], on_conflict: str) -> List[dict]:
        result = self.db.table(self.table).upsert(records, on_conflict=on_conflict).execute()
        return self._written(mutation, result.data)
