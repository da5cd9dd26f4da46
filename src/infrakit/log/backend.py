"""Session configuration files and the handlers they describe."""

from __future__ import annotations

import logging
import logging.handlers
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from infrakit.log.formatting import DEFAULT_PATTERN, LineFormatter, SecretMaskingFilter
from infrakit.log.levels import Severity


class Layout(str, Enum):
    """Output layout of an appender."""

    text = "text"
    json = "json"


class Rolling(str, Enum):
    """Rotation policy of an appender."""

    none = "none"
    size = "size"
    date = "date"


class AppenderConfig(BaseModel):
    """A single file destination for session output."""

    file: Path
    pattern: str = DEFAULT_PATTERN
    layout: Layout = Layout.text
    append: bool = True
    rolling: Rolling = Rolling.none
    max_bytes: int = Field(default=100 * 1024, ge=0)
    backup_count: int = Field(default=2, ge=0)
    when: str = "midnight"
    mask_secrets: bool = False
    encoding: str = "utf-8"

    model_config = ConfigDict(frozen=True, extra="forbid")


def _empty_appenders() -> list[AppenderConfig]:
    return []


class BackendConfig(BaseModel):
    """Contents of a ``<name>.config`` session file."""

    level: Severity = Severity.debug
    appenders: list[AppenderConfig] = Field(default_factory=_empty_appenders, alias="appender")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("level", mode="before")
    @classmethod
    def _coerce_level(cls, value: Any) -> Severity:
        return Severity.coerce(value)


def load_backend_config(path: Path | str) -> BackendConfig:
    """Read and validate the TOML session configuration at ``path``."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    if not path.is_file():
        msg = f"Session configuration path is not a file: {path}"
        raise ValueError(msg)
    try:
        raw_content: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        msg = f"Unable to read session configuration {path}: {exc}"
        raise ValueError(msg) from exc
    return BackendConfig.model_validate(raw_content)


def resolve_log_file(appender: AppenderConfig, base_dir: Path) -> Path:
    """Return the absolute log file path, relative to ``base_dir`` if needed."""
    file_path = appender.file.expanduser()
    if not file_path.is_absolute():
        file_path = base_dir / file_path
    return file_path.resolve()


def build_handler(appender: AppenderConfig, base_dir: Path) -> logging.FileHandler:
    """Create the file handler described by ``appender``."""
    log_file = resolve_log_file(appender, base_dir)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    mode = "a" if appender.append else "w"

    handler: logging.FileHandler
    if appender.rolling is Rolling.size:
        handler = logging.handlers.RotatingFileHandler(
            log_file,
            mode=mode,
            maxBytes=appender.max_bytes,
            backupCount=appender.backup_count,
            encoding=appender.encoding,
        )
    elif appender.rolling is Rolling.date:
        handler = logging.handlers.TimedRotatingFileHandler(
            log_file,
            when=appender.when,
            backupCount=appender.backup_count,
            encoding=appender.encoding,
        )
    else:
        handler = logging.FileHandler(log_file, mode=mode, encoding=appender.encoding)

    handler.setFormatter(
        LineFormatter(pattern=appender.pattern, json_mode=appender.layout is Layout.json),
    )
    if appender.mask_secrets:
        handler.addFilter(SecretMaskingFilter())
    return handler


def build_handlers(config: BackendConfig, base_dir: Path) -> list[logging.FileHandler]:
    """Create one handler per configured appender."""
    handlers: list[logging.FileHandler] = []
    try:
        for appender in config.appenders:
            handlers.append(build_handler(appender, base_dir))
    except Exception:
        for handler in handlers:
            handler.close()
        raise
    return handlers


__all__ = [
    "AppenderConfig",
    "BackendConfig",
    "Layout",
    "Rolling",
    "build_handler",
    "build_handlers",
    "load_backend_config",
    "resolve_log_file",
]
