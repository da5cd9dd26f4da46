"""infrakit: typed XML configuration documents and leveled log sessions."""

from .config import ConfigDocument, load_document, save_document
from .errors import (
    ConfigNotFound,
    ConflictError,
    DirectoryNotFound,
    DuplicateSessionError,
    InfrakitError,
    LogBackendError,
    SerializationError,
    SessionStateError,
)
from .log import LogSession, Severity

__all__ = [
    "ConfigDocument",
    "ConfigNotFound",
    "ConflictError",
    "DirectoryNotFound",
    "DuplicateSessionError",
    "InfrakitError",
    "LogBackendError",
    "LogSession",
    "SerializationError",
    "SessionStateError",
    "Severity",
    "load_document",
    "save_document",
]
