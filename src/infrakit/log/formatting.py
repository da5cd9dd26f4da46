"""Line formatters and secret masking for session log output."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, UTC
from typing import Any

from pydantic import BaseModel, SecretStr, field_validator

DEFAULT_PATTERN = "%(asctime)s %(levelname)-5s %(threadName)s | %(message)s"

_LEVEL_NAMES = {
    logging.WARNING: "WARN",
    logging.CRITICAL: "FATAL",
}


class _SanitizedText(BaseModel):
    """Model that normalises sensitive fragments in log text."""

    text: SecretStr

    @field_validator("text", mode="before")
    @classmethod
    def _mask_sensitive_data(cls, value: Any) -> str:
        text = str(value)
        patterns = [
            (r"https://[^:/\s]+:[^@\s]+@", "https://***:***@"),
            (r"token[=:]\s*\S+", "token=***"),
        ]
        for pattern, replacement in patterns:
            text = re.sub(pattern, replacement, text, flags=re.IGNORECASE)
        return text


def mask_secrets(text: str) -> str:
    """Mask credentials embedded in URLs and ``token=`` fragments."""
    sanitized = _SanitizedText.model_validate({"text": text})
    return sanitized.text.get_secret_value()


class SecretMaskingFilter(logging.Filter):
    """Rewrite each record's message with secrets masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Replace the record message in place and keep the record."""
        record.msg = mask_secrets(record.getMessage())
        record.args = None
        return True


class LineFormatter(logging.Formatter):
    """Render records as pattern-based text or as JSON lines."""

    def __init__(self, *, pattern: str = DEFAULT_PATTERN, json_mode: bool = False) -> None:
        """Create a formatter for ``pattern`` or JSON output."""
        super().__init__(fmt=pattern)
        self._json_mode = json_mode

    @property
    def json_mode(self) -> bool:
        """Return whether JSON mode is enabled."""
        return self._json_mode

    def format(self, record: logging.LogRecord) -> str:
        """Format ``record`` with log4net-style level names."""
        record.levelname = _LEVEL_NAMES.get(record.levelno, record.levelname)
        if not self._json_mode:
            return super().format(record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        return json.dumps(payload, ensure_ascii=False)


__all__ = ["DEFAULT_PATTERN", "LineFormatter", "SecretMaskingFilter", "mask_secrets"]
