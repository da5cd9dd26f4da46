"""Leveled log sessions bound to a ``<name>.config`` file."""

from __future__ import annotations

import logging
import traceback
import weakref
from pathlib import Path
from typing import TYPE_CHECKING, Any

from infrakit.errors import (
    ConfigNotFound,
    DirectoryNotFound,
    DuplicateSessionError,
    LogBackendError,
    SessionStateError,
)
from infrakit.log.backend import build_handlers, load_backend_config
from infrakit.log.levels import Severity, dispatch, to_logging_level

if TYPE_CHECKING:
    from types import TracebackType

CONFIG_SUFFIX = ".config"
START_MARKER = "-" * 41
END_MARKER = "=" * 41
_LOGGER_PREFIX = "infrakit.session"

_OPEN_SESSIONS: weakref.WeakValueDictionary[str, LogSession] = weakref.WeakValueDictionary()


class LogSession:
    """Own one log destination and expose leveled append operations.

    The session reads ``<directory>/<name>.config``, a TOML file standing in
    for the XML appender wiring of log4net-style backends (see
    :mod:`infrakit.log.backend` for its keys). The handlers it describes are
    attached to a dedicated logger that does not propagate to the root
    logger. Handlers stay attached until :meth:`close` is called, and only one
    open session may hold a given name.
    """

    def __init__(self, name: str, directory: Path | str | None = None) -> None:
        """Validate the session paths and apply the configuration."""
        if not name:
            msg = "Log session name must be a non-empty string."
            raise ValueError(msg)
        base_dir = Path(directory) if directory is not None else Path.cwd()
        if not base_dir.is_dir():
            raise DirectoryNotFound(base_dir.resolve())
        config_file = base_dir.resolve() / f"{name}{CONFIG_SUFFIX}"
        if not config_file.is_file():
            raise ConfigNotFound(config_file)

        if name in _OPEN_SESSIONS:
            raise DuplicateSessionError(name)

        self._name = name
        self._config_file = config_file
        self._logger = logging.getLogger(f"{_LOGGER_PREFIX}.{name}")
        self._logger.propagate = False
        self._initialised = False
        self._apply_configuration()
        _OPEN_SESSIONS[name] = self

    @classmethod
    def open(cls, name: str, directory: Path | str | None = None) -> LogSession:
        """Create a session, raising a typed error when validation fails."""
        return cls(name, directory)

    @property
    def name(self) -> str:
        """Return the session name."""
        return self._name

    @property
    def config_file(self) -> Path:
        """Return the session configuration path."""
        return self._config_file

    @property
    def initialised(self) -> bool:
        """Return whether the session can accept entries."""
        return self._initialised

    @property
    def logger(self) -> logging.Logger:
        """Return the logger owned by this session."""
        return self._logger

    @property
    def log_file(self) -> Path | None:
        """Return the file written by the first handler, if any."""
        for handler in self._logger.handlers:
            if isinstance(handler, logging.FileHandler):
                return Path(handler.baseFilename)
        return None

    def __enter__(self) -> LogSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def log(self, severity: Severity | str | None, message: str, *args: Any) -> None:
        """Format ``message`` with ``args`` and append it at ``severity``."""
        self._require_initialised()
        text = message.format(*args) if args else message
        dispatch(self._logger, severity, text)

    def debug(self, message: str, *args: Any) -> None:
        """Append a DEBUG entry."""
        self.log(Severity.debug, message, *args)

    def info(self, message: str, *args: Any) -> None:
        """Append an INFO entry."""
        self.log(Severity.info, message, *args)

    def warn(self, message: str, *args: Any) -> None:
        """Append a WARN entry."""
        self.log(Severity.warn, message, *args)

    def fatal(self, message: str, *args: Any) -> None:
        """Append a FATAL entry."""
        self.log(Severity.fatal, message, *args)

    def error(self, message: str, *args: Any, exception: BaseException | None = None) -> None:
        """Append an ERROR entry, followed by a dump of ``exception`` if given.

        The dump is four further ERROR entries: the root-cause message, the
        exception's own message, the name of the function that raised it and
        the formatted traceback.
        """
        self.log(Severity.error, message, *args)
        if exception is None:
            return
        for entry in describe_exception(exception):
            self.log(Severity.error, entry)

    def log_start_marker(self, marker: str = START_MARKER) -> None:
        """Append a start marker as an INFO entry."""
        self.info(marker)

    def log_end_marker(self, marker: str | None = None) -> None:
        """Append an end marker.

        Without ``marker`` this writes a blank line, ``Stopping: <name>`` and
        the default rule of equals signs.
        """
        if marker is not None:
            self.info(marker)
            return
        self.info("")
        self.info(f"Stopping: {self._name}")
        self.info(END_MARKER)

    def clear(self) -> None:
        """Delete the log file, re-apply the configuration and mark a new start."""
        self._require_initialised()
        handlers = list(self._logger.handlers)
        if len(handlers) != 1 or not isinstance(handlers[0], logging.FileHandler):
            msg = (
                "Clearing requires exactly one file appender; "
                f"found {len(handlers)} handler(s) for session {self._name!r}."
            )
            raise LogBackendError(msg)

        log_file = Path(handlers[0].baseFilename)
        self._initialised = False
        try:
            self._detach_handlers()
            log_file.unlink(missing_ok=True)
            self._apply_configuration()
        except Exception as exc:
            msg = f"Error while clearing the log file of session {self._name!r}."
            raise LogBackendError(msg) from exc
        self.log_start_marker()

    def close(self) -> None:
        """Flush and detach all handlers; further appends are rejected."""
        self._initialised = False
        if _OPEN_SESSIONS.get(self._name) is self:
            del _OPEN_SESSIONS[self._name]
            self._detach_handlers()

    def _apply_configuration(self) -> None:
        self._initialised = False
        try:
            config = load_backend_config(self._config_file)
            handlers = build_handlers(config, self._config_file.parent)
        except Exception as exc:
            msg = f"Unable to apply log configuration {self._config_file}."
            raise LogBackendError(msg) from exc

        self._detach_handlers()
        self._logger.setLevel(to_logging_level(config.level))
        for handler in handlers:
            self._logger.addHandler(handler)
        self._initialised = True

    def _detach_handlers(self) -> None:
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.flush()
            handler.close()

    def _require_initialised(self) -> None:
        if not self._initialised:
            msg = f"Log session {self._name!r} is not initialised."
            raise SessionStateError(msg)


def root_cause(exception: BaseException) -> BaseException:
    """Follow ``__cause__``/``__context__`` links to the innermost exception.

    A context hidden with ``raise ... from None`` is not followed.
    """
    current = exception
    seen = {id(current)}
    while True:
        nested = current.__cause__
        if nested is None and not current.__suppress_context__:
            nested = current.__context__
        if nested is None or id(nested) in seen:
            return current
        seen.add(id(nested))
        current = nested


def describe_exception(exception: BaseException) -> list[str]:
    """Return root-cause message, message, origin routine and traceback text."""
    frames = traceback.extract_tb(exception.__traceback__)
    origin = frames[-1].name if frames else ""
    trace = "".join(traceback.format_list(frames)).rstrip("\n")
    return [str(root_cause(exception)), str(exception), origin, trace]


__all__ = [
    "CONFIG_SUFFIX",
    "END_MARKER",
    "LogSession",
    "START_MARKER",
    "describe_exception",
    "root_cause",
]
