"""Structured JSON logging for Outfit Advisor."""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Dict

_RECORD_ATTRIBUTES = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}
_REDACT_KEYS = {"api_key", "image", "image_base64", "data", "raw_response"}

# Long unbroken base64 runs are image payloads
_BASE64_PATTERN = re.compile(r"[A-Za-z0-9+/]{200,}={0,2}")
_API_KEY_PATTERN = re.compile(r"AIza[0-9A-Za-z\-_]{20,}")


class JsonFormatter(logging.Formatter):
    """Emit one JSON object per record, including ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = redact_for_log(super().format(record))
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "event": getattr(record, "event", record.getMessage()),
        }

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRIBUTES or key in payload:
                continue
            payload[key] = "[redacted]" if key in _REDACT_KEYS else redact_for_log(value)
        return json.dumps(payload, default=str)


def redact_for_log(value: Any) -> Any:
    """Strip image payloads, API keys and URLs from strings and containers."""

    if isinstance(value, str):
        value = _BASE64_PATTERN.sub("[base64-image]", value)
        value = _API_KEY_PATTERN.sub("[redacted-key]", value)
        if value.lower().startswith(("http://", "https://")):
            return "[redacted-url]"
        return value
    if value is None or isinstance(value, (int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item) for item in value]
    if isinstance(value, dict):
        return {
            key: "[redacted]" if key in _REDACT_KEYS else redact_for_log(item)
            for key, item in value.items()
        }
    return redact_for_log(str(value))


def configure_logging(level: int | str | None = None) -> None:
    """Configure root logging with JSON output."""

    desired_level = level or os.getenv("LOG_LEVEL", "INFO")
    if isinstance(desired_level, str):
        desired_level = desired_level.upper()
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=desired_level, handlers=[handler], force=True)
