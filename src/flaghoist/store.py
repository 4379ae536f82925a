"""FlagStore 抽象基底クラス"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import FeatureFlag


class FlagStore(ABC):
    """フラグ永続化ストア抽象基底クラス。

    実装は同一フラグへの並行書き込みを直列化するか、version による
    楽観的排他制御を提供すること。
    """

    @abstractmethod
    async def load(self, product_id: str, name: str) -> FeatureFlag | None:
        """プロダクト ID とフラグ名でフラグを読み取る。"""
        ...

    @abstractmethod
    async def load_by_id(self, flag_id: str) -> FeatureFlag | None:
        """フラグ ID でフラグを読み取る。"""
        ...

    @abstractmethod
    async def save(self, flag: FeatureFlag) -> None:
        """フラグを保存する。未保存のフラグには id を採番する。"""
        ...
