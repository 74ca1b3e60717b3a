"""
Documents: the file goes to object storage, the row keeps its public URL.
"""

import logging
import os
import secrets
import time
from typing import List

from madrasah.core.cache import DOCUMENTS
from madrasah.repositories.base import TableRepository

logger = logging.getLogger(__name__)


def storage_path(user_id: str, filename: str) -> str:
    """``<user id>/<millis>-<random>.<ext>`` so uploads never collide."""
    ext = os.path.splitext(filename)[1].lstrip(".").lower() or "bin"
    return f"{user_id}/{int(time.time() * 1000)}-{secrets.token_hex(4)}.{ext}"


class DocumentRepository(TableRepository):
    table = "documents"
    read_key = DOCUMENTS

    @property
    def bucket(self):
        return self.db.storage.from_(self.ctx.settings.STORAGE_BUCKET)

    def list(self) -> List[dict]:
        return self._cached(
            (DOCUMENTS,),
            lambda: self._query().order("created_at", desc=True).execute().data,
        )

    def upload(self, filename: str, content: bytes, content_type: str | None, build_record) -> List[dict]:
        """Store the file, then insert ``build_record(public_url, size, type)``."""
        path = storage_path(self.user_id or "anonymous", filename)
        self.bucket.upload(
            path=path,
            file=content,
            file_options={"content-type": content_type or "application/octet-stream"},
        )
        public_url = self.bucket.get_public_url(path)
        logger.info("Uploaded %s (%d bytes) to %s", filename, len(content), path)

        record = self._stamp(build_record(public_url, len(content), content_type), "uploaded_by")
        return self._insert("documents.upload", record)

    def delete(self, row_id: str) -> List[dict]:
        return self._delete("documents.delete", "id", row_id)
