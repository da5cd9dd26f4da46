"""Severity levels and routing onto stdlib loggers."""

from __future__ import annotations

import logging
from enum import Enum


class Severity(str, Enum):
    """Closed set of severities accepted by a log session."""

    debug = "debug"
    info = "info"
    warn = "warn"
    error = "error"
    fatal = "fatal"

    @classmethod
    def coerce(cls, value: Severity | str | None) -> Severity:
        """Resolve ``value`` to a severity, defaulting to ``info``.

        Unknown names fall back to ``info``. Anything that is not a string
        (numeric masks included) raises ``TypeError``.
        """
        if value is None:
            return cls.info
        if isinstance(value, cls):
            return value
        if isinstance(value, bool) or not isinstance(value, str):
            msg = f"Severity must be a Severity or str, not {type(value).__name__}."
            raise TypeError(msg)
        name = value.strip().lower()
        return _ALIASES.get(name) or cls.__members__.get(name, cls.info)


_ALIASES: dict[str, Severity] = {
    "warning": Severity.warn,
    "critical": Severity.fatal,
}

_LEVELS: dict[Severity, int] = {
    Severity.debug: logging.DEBUG,
    Severity.info: logging.INFO,
    Severity.warn: logging.WARNING,
    Severity.error: logging.ERROR,
    Severity.fatal: logging.CRITICAL,
}


def to_logging_level(severity: Severity | str | None) -> int:
    """Return the stdlib level number for ``severity``."""
    return _LEVELS[Severity.coerce(severity)]


def dispatch(logger: logging.Logger, severity: Severity | str | None, message: str) -> None:
    """Send ``message`` to the ``logger`` method matching ``severity``."""
    resolved = Severity.coerce(severity)
    if resolved is Severity.debug:
        logger.debug(message)
    elif resolved is Severity.warn:
        logger.warning(message)
    elif resolved is Severity.error:
        logger.error(message)
    elif resolved is Severity.fatal:
        logger.critical(message)
    else:
        logger.info(message)


__all__ = ["Severity", "dispatch", "to_logging_level"]
