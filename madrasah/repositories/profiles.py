from typing import List

from madrasah.core.cache import PROFILE
from madrasah.repositories.base import TableRepository


class ProfileRepository(TableRepository):
    table = "profiles"
    read_key = PROFILE

    def me(self) -> dict | None:
        return self._cached((PROFILE, self.user_id), lambda: self.get(self.user_id))

    def update(self, changes: dict) -> List[dict]:
        return self._update("profile.update", self.user_id, changes)
