"""structlog ベースのロガー設定"""

from __future__ import annotations

import logging
import sys

import structlog

LOGGER_NAME = "flaghoist"


def _renderer(format: str) -> structlog.types.Processor:
    if format == "text":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def new_logger(level: str = "INFO", format: str = "json") -> structlog.stdlib.BoundLogger:
    """flaghoist 用に structlog を設定し、ロガーを返す。

    レベルは標準ライブラリの "flaghoist" ロガーに設定するので、
    flaghoist.* 配下のロガーすべてに効く。

    Args:
        level: ログレベル ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        format: 出力形式 ("json" or "text")
    """
    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    logging.getLogger(LOGGER_NAME).setLevel(getattr(logging, level.upper(), logging.INFO))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _renderer(format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.stdlib.get_logger(LOGGER_NAME)
