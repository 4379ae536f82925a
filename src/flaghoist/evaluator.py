"""フラグ評価とロールアウト操作

すべて同期の純粋関数。I/O もロックも持たない。hoist / lower / toggle は
呼び出し元が所有する FeatureFlag をその場で書き換える。ストアへの書き戻しと
同一フラグへの並行更新の直列化は呼び出し側 (FlagService / FlagStore) の責務。
"""

from __future__ import annotations

import dataclasses

from .models import (
    AccountType,
    FeatureFlag,
    GlobalRelease,
    LimitedRelease,
    PercentageRelease,
)


def _admits(allow_list: dict[str, bool], user_id: str | None, client_toggle: bool) -> bool:
    if user_id is None or user_id not in allow_list:
        return False
    if not client_toggle:
        return True
    return allow_list[user_id]


def evaluate(flag: FeatureFlag, user_id: str | None = None) -> bool:
    """フラグが user_id に対して有効かを判定する。例外は送出しない。"""
    if not flag.enabled:
        return False
    if user_id is not None and user_id in flag.disabled_for:
        return False

    strategy = flag.release_strategy
    if isinstance(strategy, GlobalRelease):
        return True
    if isinstance(strategy, (LimitedRelease, PercentageRelease)):
        return _admits(strategy.allow_list, user_id, flag.client_toggle)
    return False


def hoist(flag: FeatureFlag, user_id: str | None = None) -> None:
    """フラグを有効化する。

    user_id が None なら全体スイッチを ON にする。指定時はそのユーザーを
    disabled_for から外すだけで、全体スイッチと許可リストには触れない。
    """
    if user_id is None:
        flag.enabled = True
    else:
        flag.disabled_for.discard(user_id)


def lower(flag: FeatureFlag, user_id: str | None = None) -> None:
    """フラグを無効化する。user_id 指定時は disabled_for に追加する。"""
    if user_id is None:
        flag.enabled = False
    else:
        flag.disabled_for.add(user_id)


def toggle(flag: FeatureFlag, user_id: str, state: bool) -> bool:
    """許可リスト上のユーザーの個別トグル状態を設定する。

    client_toggle が有効なフラグでのみ評価結果に影響する。リリース種別は
    変えない。ユーザーが許可リストにいなければ何もせず False を返す。
    """
    strategy = flag.release_strategy
    if not isinstance(strategy, (LimitedRelease, PercentageRelease)):
        return False
    if user_id not in strategy.allow_list:
        return False
    allow_list = dict(strategy.allow_list)
    allow_list[user_id] = state
    flag.release_strategy = dataclasses.replace(strategy, allow_list=allow_list)
    return True


def rollout_scope(account_type: AccountType, user_id: str) -> str | None:
    """hoist / lower に渡すスコープを決める。開発者は組織全体 (None)。"""
    if account_type is AccountType.DEVELOPER:
        return None
    return user_id
