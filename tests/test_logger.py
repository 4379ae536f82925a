"""ロガー設定のユニットテスト"""

import json
import logging

import pytest
from flaghoist.logger import LOGGER_NAME, new_logger

pytestmark = pytest.mark.usefixtures("reset_logging")


def test_json_format_renders_event(caplog: pytest.LogCaptureFixture) -> None:
    """json 形式ではイベントとコンテキストが JSON で出力されること。"""
    logger = new_logger(level="INFO", format="json")
    logger.info("flag_hoisted", flag_id="f1")
    record = next(r for r in caplog.records if r.name == LOGGER_NAME)
    payload = json.loads(record.getMessage())
    assert payload["event"] == "flag_hoisted"
    assert payload["flag_id"] == "f1"
    assert payload["level"] == "info"
    assert payload["logger"] == LOGGER_NAME


def test_text_format_is_not_json(caplog: pytest.LogCaptureFixture) -> None:
    logger = new_logger(level="INFO", format="text")
    logger.info("flag_lowered")
    record = next(r for r in caplog.records if r.name == LOGGER_NAME)
    assert "flag_lowered" in record.getMessage()
    assert not record.getMessage().startswith("{")


def test_level_filters_lower_events(caplog: pytest.LogCaptureFixture) -> None:
    """WARNING 設定では info が出力されないこと。"""
    logger = new_logger(level="WARNING")
    logger.info("flag_hoisted")
    logger.warning("flag_not_found")
    messages = [r.getMessage() for r in caplog.records if r.name == LOGGER_NAME]
    assert len(messages) == 1
    assert "flag_not_found" in messages[0]


def test_level_applies_to_child_loggers() -> None:
    new_logger(level="DEBUG")
    assert logging.getLogger(f"{LOGGER_NAME}.service").getEffectiveLevel() == logging.DEBUG


def test_unknown_level_falls_back_to_info() -> None:
    new_logger(level="verbose")
    assert logging.getLogger(LOGGER_NAME).level == logging.INFO
