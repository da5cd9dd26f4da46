"""Shared fixtures for the infrakit test suite."""
from __future__ import annotations

import json
import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

import pytest

from infrakit.log.session import LogSession

TEST_PATTERN = "%(levelname)s|%(message)s"


@dataclass(frozen=True)
class SessionFiles:
    """Paths created for a scripted log session."""

    directory: Path
    config_file: Path
    log_file: Path


def write_session_config(
    directory: Path,
    name: str,
    *,
    body: str | None = None,
    layout: str = "text",
    level: str = "debug",
    log_name: str = "Log/output.log",
    mask_secrets: bool = False,
) -> SessionFiles:
    """Write a ``<name>.config`` file with a single file appender."""
    if body is None:
        body = textwrap.dedent(
            f"""
            level = "{level}"

            [[appender]]
            file = "{log_name}"
            pattern = "{TEST_PATTERN}"
            layout = "{layout}"
            mask_secrets = {str(mask_secrets).lower()}
            """,
        )
    config_file = directory / f"{name}.config"
    config_file.write_text(body)
    return SessionFiles(directory=directory, config_file=config_file, log_file=directory / log_name)


def read_entries(log_file: Path) -> list[tuple[str, str]]:
    """Return ``(level, message)`` pairs from a text-layout log file."""
    entries: list[tuple[str, str]] = []
    for line in log_file.read_text().splitlines():
        level, _, message = line.partition("|")
        entries.append((level, message))
    return entries


def read_json_entries(log_file: Path) -> list[dict[str, Any]]:
    """Parse a JSON-layout log file into one dict per entry."""
    return [json.loads(line) for line in log_file.read_text().splitlines() if line]


@pytest.fixture
def session_factory(tmp_path: Path) -> Iterator[Callable[..., tuple[LogSession, SessionFiles]]]:
    """Build log sessions in ``tmp_path`` and close them after the test."""
    sessions: list[LogSession] = []

    def factory(name: str = "app", **kwargs: Any) -> tuple[LogSession, SessionFiles]:
        files = write_session_config(tmp_path, name, **kwargs)
        session = LogSession(name, tmp_path)
        sessions.append(session)
        return session, files

    yield factory
    for session in sessions:
        session.close()


__all__ = ["TEST_PATTERN", "SessionFiles", "read_entries", "read_json_entries", "write_session_config"]
