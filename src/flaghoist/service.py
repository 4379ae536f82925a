"""FlagService: ストアと評価ロジックの結線"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

import structlog

from . import evaluator
from .config import FlagConfig, build_flags
from .exceptions import FeatureFlagError, FeatureFlagErrorCodes
from .logger import new_logger
from .models import FeatureFlag, FeatureFlagBuilder
from .store import FlagStore


class FlagService:
    """フラグの評価と更新を行うサービス。

    更新は load -> 変更 -> save の一連をフラグ ID ごとのロックで直列化する。
    ロックはプロセス内のみ有効で、プロセス間の競合はストアの version
    チェックで検出される。
    """

    def __init__(
        self,
        store: FlagStore,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._store = store
        self._logger = logger or structlog.stdlib.get_logger(__name__)
        # flag_id -> (ロック, 保持・待機中の呼び出し数)
        self._locks: dict[str, tuple[asyncio.Lock, int]] = {}

    @classmethod
    def from_config(cls, store: FlagStore, config: FlagConfig) -> FlagService:
        """設定の log セクションでロガーを構成したサービスを返す。"""
        return cls(store, logger=new_logger(config.log.level, config.log.format))

    async def get_flag(self, product_id: str, name: str) -> FeatureFlag:
        flag = await self._store.load(product_id, name)
        if flag is None:
            raise FeatureFlagError(
                FeatureFlagErrorCodes.FLAG_NOT_FOUND,
                f"flag not found: {product_id}/{name}",
            )
        return flag

    async def get_flag_by_id(self, flag_id: str) -> FeatureFlag:
        flag = await self._store.load_by_id(flag_id)
        if flag is None:
            raise FeatureFlagError(
                FeatureFlagErrorCodes.FLAG_NOT_FOUND,
                f"flag not found: {flag_id}",
            )
        return flag

    async def is_enabled(
        self, product_id: str, name: str, user_id: str | None = None
    ) -> bool:
        """フラグを評価する。存在しないフラグは無効として扱う。"""
        flag = await self._store.load(product_id, name)
        if flag is None:
            self._logger.warning(
                "flag_not_found", product_id=product_id, flag_name=name
            )
            return False
        return evaluator.evaluate(flag, user_id)

    async def create_flag(self, flag: FeatureFlag | FeatureFlagBuilder) -> FeatureFlag:
        if isinstance(flag, FeatureFlagBuilder):
            flag = flag.build()
        await self._store.save(flag)
        self._logger.info(
            "flag_created",
            flag_id=flag.id,
            product_id=flag.product_id,
            flag_name=flag.name,
        )
        return flag

    async def seed(self, config: FlagConfig) -> list[FeatureFlag]:
        """設定ファイルのフラグ定義をストアに投入する。"""
        return [await self.create_flag(flag) for flag in build_flags(config)]

    async def hoist(self, flag_id: str, user_id: str | None = None) -> FeatureFlag:
        flag = await self._update(flag_id, lambda f: evaluator.hoist(f, user_id))
        self._logger.info("flag_hoisted", flag_id=flag_id, user_id=user_id)
        return flag

    async def lower(self, flag_id: str, user_id: str | None = None) -> FeatureFlag:
        flag = await self._update(flag_id, lambda f: evaluator.lower(f, user_id))
        self._logger.info("flag_lowered", flag_id=flag_id, user_id=user_id)
        return flag

    async def toggle(self, flag_id: str, user_id: str, state: bool) -> FeatureFlag:
        """許可リスト上のユーザーの個別トグルを設定する。

        許可リストにいないユーザーや Global フラグでは保存しない。
        """
        async with self._flag_lock(flag_id):
            flag = await self.get_flag_by_id(flag_id)
            if not evaluator.toggle(flag, user_id, state):
                self._logger.info(
                    "flag_toggle_skipped", flag_id=flag_id, user_id=user_id
                )
                return flag
            await self._store.save(flag)
        self._logger.info(
            "flag_toggled", flag_id=flag_id, user_id=user_id, state=state
        )
        return flag

    async def _update(
        self, flag_id: str, mutate: Callable[[FeatureFlag], None]
    ) -> FeatureFlag:
        async with self._flag_lock(flag_id):
            flag = await self.get_flag_by_id(flag_id)
            mutate(flag)
            await self._store.save(flag)
            return flag

    @asynccontextmanager
    async def _flag_lock(self, flag_id: str) -> AsyncIterator[None]:
        lock, users = self._locks.get(flag_id, (asyncio.Lock(), 0))
        self._locks[flag_id] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[flag_id]
            if users == 1:
                del self._locks[flag_id]
            else:
                self._locks[flag_id] = (lock, users - 1)
