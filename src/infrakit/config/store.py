"""Load and save typed configuration documents on the file system."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ConfigDict

from infrakit.config.codec import decode_document, encode_document
from infrakit.errors import ConflictError, SerializationError

LOGGER = logging.getLogger(__name__)

DocumentT = TypeVar("DocumentT", bound=BaseModel)


class ConfigDocument(BaseModel):
    """Base class for documents persisted as XML.

    Subclasses must be default-constructible: every field needs a default so a
    missing file can be represented by ``cls()``.
    """

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def load(cls: type[DocumentT], path: Path | str) -> DocumentT:
        """Load an instance of the calling class from ``path``."""
        return load_document(cls, path)

    def save(self, path: Path | str, *, force_overwrite: bool = True) -> None:
        """Persist this document to ``path``."""
        save_document(path, self, force_overwrite=force_overwrite)


def load_document(document_type: type[DocumentT], path: Path | str) -> DocumentT:
    """Load ``document_type`` from ``path``.

    A missing file yields ``document_type()``. Any read, parse or validation
    failure is raised as :class:`SerializationError` carrying ``path``.
    """
    path = Path(path)
    if not path.exists():
        LOGGER.debug("document file missing; using defaults: %s", path)
        return document_type()

    try:
        with path.open("rb") as stream:
            payload = stream.read()
        document = decode_document(document_type, payload)
    except Exception as exc:
        raise SerializationError(path, exc) from exc

    LOGGER.debug("loaded %s from %s", document_type.__name__, path)
    return document


def save_document(
    path: Path | str,
    document: BaseModel,
    *,
    force_overwrite: bool = True,
) -> None:
    """Write ``document`` to a newly created file at ``path``.

    When ``force_overwrite`` is true an existing file is deleted first,
    otherwise an existing file raises :class:`ConflictError` and is left
    untouched. The file is always opened in exclusive-create mode.
    """
    path = Path(path)
    if path.exists() and not force_overwrite:
        raise ConflictError(path)

    try:
        payload = encode_document(document)
        if path.exists():
            path.unlink()
        with path.open("xb") as stream:
            stream.write(payload)
    except FileExistsError as exc:
        raise ConflictError(path) from exc
    except Exception as exc:
        raise SerializationError(path, exc) from exc

    LOGGER.debug("saved %s to %s", type(document).__name__, path)


__all__ = ["ConfigDocument", "load_document", "save_document"]
