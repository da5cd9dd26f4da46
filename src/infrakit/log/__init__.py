"""Leveled log sessions for infrakit."""

from .backend import AppenderConfig, BackendConfig, load_backend_config
from .levels import Severity, dispatch
from .session import END_MARKER, START_MARKER, LogSession

__all__ = [
    "END_MARKER",
    "START_MARKER",
    "AppenderConfig",
    "BackendConfig",
    "LogSession",
    "Severity",
    "dispatch",
    "load_backend_config",
]
