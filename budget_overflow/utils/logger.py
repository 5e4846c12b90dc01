"""구조화 로깅 설정 모듈.

Structured logging configuration.
All modules log through the "budget_overflow" logger hierarchy; the format
(json or text) and level come from the settings handed to create_app().
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

LOGGER_NAME: str = "budget_overflow"

# 로그에 포함할 추가 필드 — Extra fields copied into the JSON payload when present
_EXTRA_FIELDS: tuple[str, ...] = ("user_id", "path", "method", "client_ip", "event")


class JSONFormatter(logging.Formatter):
    """JSON 포맷터 — 한 줄에 하나의 JSON 객체 (One JSON object per line)."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> logging.Logger:
    """애플리케이션 로거를 설정하고 반환합니다.

    Configure and return the application logger. Safe to call more than once;
    existing handlers are replaced.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level.upper())
    logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """하위 모듈 로거를 반환합니다 (e.g. get_logger("auth") → budget_overflow.auth)."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
