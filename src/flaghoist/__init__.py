"""flaghoist feature flag library."""

from .config import FlagConfig, FlagDefinition, LogSection, StrategySection, build_flags, load_config
from .evaluator import evaluate, hoist, lower, rollout_scope, toggle
from .exceptions import FeatureFlagError, FeatureFlagErrorCodes, VersionConflictError
from .logger import new_logger
from .memory import InMemoryFlagStore
from .models import (
    AccountType,
    FeatureFlag,
    FeatureFlagBuilder,
    GlobalRelease,
    LimitedRelease,
    PercentageRelease,
    ReleaseStrategy,
)
from .service import FlagService
from .store import FlagStore

__all__ = [
    "AccountType",
    "FeatureFlag",
    "FeatureFlagBuilder",
    "FeatureFlagError",
    "FeatureFlagErrorCodes",
    "FlagConfig",
    "FlagDefinition",
    "FlagService",
    "FlagStore",
    "GlobalRelease",
    "InMemoryFlagStore",
    "LimitedRelease",
    "LogSection",
    "PercentageRelease",
    "ReleaseStrategy",
    "StrategySection",
    "VersionConflictError",
    "build_flags",
    "evaluate",
    "hoist",
    "load_config",
    "lower",
    "new_logger",
    "rollout_scope",
    "toggle",
]
