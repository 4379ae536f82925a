"""InMemoryFlagStore 実装"""

from __future__ import annotations

import copy
import uuid

from .exceptions import FeatureFlagError, FeatureFlagErrorCodes, VersionConflictError
from .models import FeatureFlag
from .store import FlagStore


class InMemoryFlagStore(FlagStore):
    """テスト用インメモリフラグストア。"""

    def __init__(self) -> None:
        self._flags: dict[str, FeatureFlag] = {}
        self._index: dict[tuple[str, str], str] = {}  # (product_id, name) -> id

    async def load(self, product_id: str, name: str) -> FeatureFlag | None:
        flag_id = self._index.get((product_id, name))
        if flag_id is None:
            return None
        return await self.load_by_id(flag_id)

    async def load_by_id(self, flag_id: str) -> FeatureFlag | None:
        flag = self._flags.get(flag_id)
        return copy.deepcopy(flag) if flag is not None else None

    async def save(self, flag: FeatureFlag) -> None:
        if flag.id is None:
            self._insert(flag)
            return

        stored = self._flags.get(flag.id)
        if stored is None:
            raise FeatureFlagError(
                FeatureFlagErrorCodes.FLAG_NOT_FOUND,
                f"flag not found: {flag.id}",
            )
        if flag.version != stored.version:
            raise VersionConflictError(flag.id, expected=flag.version, actual=stored.version)

        old_key = (stored.product_id, stored.name)
        new_key = (flag.product_id, flag.name)
        if new_key != old_key:
            owner = self._index.get(new_key)
            if owner is not None and owner != flag.id:
                raise FeatureFlagError(
                    FeatureFlagErrorCodes.DUPLICATE_FLAG,
                    f"flag already exists: {flag.product_id}/{flag.name}",
                )
            del self._index[old_key]
            self._index[new_key] = flag.id

        flag.version += 1
        self._flags[flag.id] = copy.deepcopy(flag)

    def _insert(self, flag: FeatureFlag) -> None:
        key = (flag.product_id, flag.name)
        if key in self._index:
            raise FeatureFlagError(
                FeatureFlagErrorCodes.DUPLICATE_FLAG,
                f"flag already exists: {flag.product_id}/{flag.name}",
            )
        flag.id = str(uuid.uuid4())
        flag.version = 1
        self._flags[flag.id] = copy.deepcopy(flag)
        self._index[key] = flag.id
