"""フィーチャーフラグ データモデル"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Union


def _normalize_allow_list(users: Mapping[str, bool] | Iterable[str]) -> dict[str, bool]:
    # ID だけ渡された場合は個別トグル ON とみなす
    if isinstance(users, Mapping):
        return {str(k): bool(v) for k, v in users.items()}
    return {str(u): True for u in users}


@dataclass(frozen=True)
class GlobalRelease:
    """全ユーザー向けリリース。enabled と disabled_for のみで判定する。"""


@dataclass(frozen=True)
class LimitedRelease:
    """許可リストのユーザーに限定したリリース。

    allow_list はユーザー ID から個別トグル状態へのマップ。
    """

    allow_list: dict[str, bool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "allow_list", _normalize_allow_list(self.allow_list))


@dataclass(frozen=True)
class PercentageRelease:
    """割合指定リリース。

    fraction は保持するだけで評価には使わない。判定は allow_list のみ。
    """

    fraction: float = 0.0
    allow_list: dict[str, bool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "allow_list", _normalize_allow_list(self.allow_list))


ReleaseStrategy = Union[GlobalRelease, LimitedRelease, PercentageRelease]


class AccountType(str, Enum):
    """操作主体のアカウント種別。"""

    DEVELOPER = "developer"
    CLIENT = "client"


@dataclass
class FeatureFlag:
    """フィーチャーフラグ。

    id はストアへの初回保存時に採番される。未保存のフラグは id が None。
    """

    name: str
    product_id: str
    enabled: bool = False
    client_toggle: bool = False
    release_strategy: ReleaseStrategy = field(default_factory=GlobalRelease)
    disabled_for: set[str] = field(default_factory=set)
    id: str | None = None
    version: int = 0

    @property
    def persisted(self) -> bool:
        return self.id is not None

    @classmethod
    def builder(cls) -> FeatureFlagBuilder:
        return FeatureFlagBuilder()


class FeatureFlagBuilder:
    """FeatureFlag ビルダー。フィールドの組み合わせは検証しない。"""

    def __init__(self) -> None:
        self._name = "default_flag"
        self._product_id = ""
        self._enabled = False
        self._client_toggle = False
        self._release_strategy: ReleaseStrategy = GlobalRelease()

    def with_name(self, name: str) -> FeatureFlagBuilder:
        self._name = name
        return self

    def with_product_id(self, product_id: str) -> FeatureFlagBuilder:
        self._product_id = product_id
        return self

    def with_enabled(self, enabled: bool) -> FeatureFlagBuilder:
        self._enabled = enabled
        return self

    def with_client_toggle(self, client_toggle: bool) -> FeatureFlagBuilder:
        self._client_toggle = client_toggle
        return self

    def with_release_strategy(self, release_strategy: ReleaseStrategy) -> FeatureFlagBuilder:
        self._release_strategy = release_strategy
        return self

    def build(self) -> FeatureFlag:
        """未保存の FeatureFlag を生成する。ビルダーは再利用できる。"""
        return FeatureFlag(
            name=self._name,
            product_id=self._product_id,
            enabled=self._enabled,
            client_toggle=self._client_toggle,
            release_strategy=self._release_strategy,
        )
