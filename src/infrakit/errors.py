"""Error taxonomy shared by the configuration store and log sessions."""

from __future__ import annotations

from pathlib import Path


class InfrakitError(Exception):
    """Base class for all errors raised by infrakit."""


class SerializationError(InfrakitError, ValueError):
    """Raised when a document cannot be read from or written to a file."""

    prefix = "Exception while attempting an XML serialization operation: "

    def __init__(self, offending_file: Path | str, cause: BaseException) -> None:
        """Record the file being processed and the underlying failure."""
        self._offending_file = Path(offending_file)
        self.cause = cause
        super().__init__(f"{self.prefix}{cause}")

    @property
    def offending_file(self) -> Path:
        """Return the path that was being read or written."""
        return self._offending_file


class ConflictError(InfrakitError, FileExistsError):
    """Raised when a save would replace a file without overwrite permission."""

    def __init__(self, path: Path | str) -> None:
        """Initialise the error for the conflicting ``path``."""
        self.path = Path(path)
        super().__init__(f"refusing to overwrite existing file: {self.path}")


class DirectoryNotFound(InfrakitError, FileNotFoundError):
    """Raised when a log session directory does not exist."""

    def __init__(self, directory: Path | str) -> None:
        """Initialise the error for the missing ``directory``."""
        self.directory = Path(directory)
        super().__init__(
            "Specified directory does not exist for the configuration file: "
            f"{self.directory}",
        )


class ConfigNotFound(InfrakitError, FileNotFoundError):
    """Raised when ``<name>.config`` is missing from the session directory."""

    def __init__(self, config_file: Path | str) -> None:
        """Initialise the error for the missing ``config_file``."""
        self.config_file = Path(config_file)
        super().__init__(f"Specified configuration file cannot be found: {self.config_file}")


class LogBackendError(InfrakitError, RuntimeError):
    """Raised when the logging backend cannot be configured or cleared."""


class SessionStateError(InfrakitError, RuntimeError):
    """Raised when a log session is used outside its initialised state."""


class DuplicateSessionError(SessionStateError):
    """Raised when a session name is already held by an open session."""

    def __init__(self, name: str) -> None:
        """Initialise the error for the session ``name``."""
        self.name = name
        super().__init__(f"Log session {name!r} is already open; close it before reopening.")


__all__ = [
    "ConfigNotFound",
    "ConflictError",
    "DirectoryNotFound",
    "DuplicateSessionError",
    "InfrakitError",
    "LogBackendError",
    "SerializationError",
    "SessionStateError",
]
