"""テスト共通フィクスチャ"""

import logging
from collections.abc import Iterator

import pytest
import structlog
from flaghoist.logger import LOGGER_NAME


@pytest.fixture
def reset_logging() -> Iterator[None]:
    """structlog と flaghoist ロガーのレベルをテスト後に戻す。"""
    yield
    structlog.reset_defaults()
    logging.getLogger(LOGGER_NAME).setLevel(logging.NOTSET)
