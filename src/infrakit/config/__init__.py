"""Typed configuration persistence for infrakit."""

from .codec import decode_document, encode_document
from .store import ConfigDocument, load_document, save_document

__all__ = [
    "ConfigDocument",
    "decode_document",
    "encode_document",
    "load_document",
    "save_document",
]
