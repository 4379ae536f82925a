"""flaghoist ライブラリの例外型定義"""

from __future__ import annotations


class FeatureFlagError(Exception):
    """flaghoist ライブラリのエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class FeatureFlagErrorCodes:
    """エラーコード定数。"""

    FLAG_NOT_FOUND: str = "FLAG_NOT_FOUND"
    DUPLICATE_FLAG: str = "DUPLICATE_FLAG"
    VERSION_CONFLICT: str = "VERSION_CONFLICT"
    CONFIG_ERROR: str = "CONFIG_ERROR"


class VersionConflictError(FeatureFlagError):
    """楽観的排他制御の競合エラー。"""

    def __init__(self, flag_id: str, expected: int, actual: int) -> None:
        self.flag_id = flag_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            FeatureFlagErrorCodes.VERSION_CONFLICT,
            f"version conflict on {flag_id}: expected={expected}, actual={actual}",
        )
