"""設定ファイル読み込みと設定型定義（pydantic BaseModel）"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import FeatureFlagError, FeatureFlagErrorCodes
from .models import (
    FeatureFlag,
    GlobalRelease,
    LimitedRelease,
    PercentageRelease,
    ReleaseStrategy,
)


class LogSection(BaseModel):
    """ログ設定。"""

    level: str = "INFO"
    format: Literal["json", "text"] = "json"


class StrategySection(BaseModel):
    """リリース種別設定。"""

    type: Literal["global", "limited", "percentage"] = "global"
    users: list[str] = Field(default_factory=list)
    fraction: float = Field(default=0.0, ge=0.0, le=1.0)

    def to_strategy(self) -> ReleaseStrategy:
        if self.type == "limited":
            return LimitedRelease(allow_list=self.users)
        if self.type == "percentage":
            return PercentageRelease(fraction=self.fraction, allow_list=self.users)
        return GlobalRelease()


class FlagDefinition(BaseModel):
    """初期投入するフラグ定義。"""

    name: str
    product_id: str
    enabled: bool = False
    client_toggle: bool = False
    strategy: StrategySection = Field(default_factory=StrategySection)


class FlagConfig(BaseModel):
    """flaghoist 設定全体。"""

    log: LogSection = Field(default_factory=LogSection)
    flags: list[FlagDefinition] = Field(default_factory=list)


def load_config(path: Path) -> FlagConfig:
    """YAML 設定ファイルを読み込んで FlagConfig を返す。"""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FeatureFlagError(
            FeatureFlagErrorCodes.CONFIG_ERROR,
            f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data: dict[str, Any] = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise FeatureFlagError(
            FeatureFlagErrorCodes.CONFIG_ERROR,
            f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    try:
        return FlagConfig.model_validate(data)
    except ValidationError as e:
        raise FeatureFlagError(
            FeatureFlagErrorCodes.CONFIG_ERROR,
            f"Config validation failed: {e}",
            cause=e,
        ) from e


def build_flags(config: FlagConfig) -> list[FeatureFlag]:
    """設定のフラグ定義から未保存の FeatureFlag を生成する。"""
    return [
        FeatureFlag.builder()
        .with_name(d.name)
        .with_product_id(d.product_id)
        .with_enabled(d.enabled)
        .with_client_toggle(d.client_toggle)
        .with_release_strategy(d.strategy.to_strategy())
        .build()
        for d in config.flags
    ]
