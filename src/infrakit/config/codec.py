"""XML codec for pydantic configuration documents."""

from __future__ import annotations

import base64
import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from typing import Any, TypeVar, cast

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)

_KIND = "kind"
_TYPE = "type"
_NIL = "nil"
_KEY = "key"
_ITEM_TAG = "item"
_ENTRY_TAG = "entry"

# Code points XML 1.0 cannot carry, even as character references.
_INVALID_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def encode_document(document: BaseModel) -> bytes:
    """Serialise ``document`` to an XML payload rooted at its class name.

    Scalars carry a ``type`` attribute so union and ``Any`` fields decode to
    the same Python type. Strings containing ``\\r`` are stored base64
    encoded because XML parsers normalise line endings. Raises ``ValueError``
    for text XML cannot represent.
    """
    root = ET.Element(type(document).__name__)
    payload = document.model_dump(mode="json", by_alias=True)
    for name, value in payload.items():
        root.append(_encode_value(name, value))
    ET.indent(root)
    return ET.tostring(root, encoding="utf-8", xml_declaration=True) + b"\n"


def decode_document(document_type: type[ModelT], payload: bytes | str) -> ModelT:
    """Parse an XML payload and validate it as ``document_type``.

    Raises ``xml.etree.ElementTree.ParseError`` for malformed markup,
    ``ValueError`` when the root element does not name ``document_type`` or a
    typed scalar cannot be read, and ``pydantic.ValidationError`` when the
    content does not fit the model.
    """
    root = ET.fromstring(payload)
    expected = document_type.__name__
    if root.tag != expected:
        msg = f"Expected root element <{expected}> but found <{root.tag}>."
        raise ValueError(msg)
    raw = {child.tag: _decode_element(child) for child in root}
    return document_type.model_validate(raw)


def _checked_text(text: str) -> str:
    match = _INVALID_XML_CHARS.search(text)
    if match is not None:
        msg = f"Character {match.group()!r} at index {match.start()} cannot be stored in XML."
        raise ValueError(msg)
    return text


def _encode_value(tag: str, value: Any) -> ET.Element:
    element = ET.Element(tag)
    if value is None:
        element.set(_NIL, "true")
    elif isinstance(value, Mapping):
        typed_mapping = cast("Mapping[str, Any]", value)
        if not _is_model_shaped(typed_mapping):
            element.set(_KIND, "map")
            for key, item in typed_mapping.items():
                entry = _encode_value(_ENTRY_TAG, item)
                entry.set(_KEY, _checked_text(str(key)))
                element.append(entry)
        else:
            for key, item in typed_mapping.items():
                element.append(_encode_value(key, item))
    elif isinstance(value, list):
        element.set(_KIND, "list")
        for item in cast("list[Any]", value):
            element.append(_encode_value(_ITEM_TAG, item))
    elif isinstance(value, bool):
        element.set(_TYPE, "bool")
        element.text = "true" if value else "false"
    elif isinstance(value, int | float):
        element.set(_TYPE, type(value).__name__)
        element.text = str(value)
    else:
        text = _checked_text(str(value))
        if "\r" in text:
            element.set(_TYPE, "b64")
            element.text = base64.b64encode(text.encode("utf-8")).decode("ascii")
        else:
            element.set(_TYPE, "str")
            element.text = text
    return element


def _is_model_shaped(mapping: Mapping[str, Any]) -> bool:
    """Return whether every key can be used directly as an element name."""
    if not mapping:
        return False
    return all(_is_xml_name(key) for key in mapping)


def _is_xml_name(key: object) -> bool:
    if not isinstance(key, str) or not key:
        return False
    if key.lower().startswith("xml"):
        return False
    first = key[0]
    if not (first.isalpha() or first == "_"):
        return False
    return all(char.isalnum() or char in "_-." for char in key)


def _decode_element(element: ET.Element) -> Any:
    if element.get(_NIL) == "true":
        return None
    kind = element.get(_KIND)
    if kind == "list":
        return [_decode_element(child) for child in element]
    if kind == "map":
        return {child.get(_KEY, ""): _decode_element(child) for child in element}
    if len(element):
        return {child.tag: _decode_element(child) for child in element}
    return _decode_scalar(element.get(_TYPE), element.text or "")


def _decode_scalar(scalar_type: str | None, text: str) -> Any:
    if scalar_type == "int":
        return int(text)
    if scalar_type == "float":
        return float(text)
    if scalar_type == "bool":
        return text == "true"
    if scalar_type == "b64":
        return base64.b64decode(text).decode("utf-8")
    return text


__all__ = ["decode_document", "encode_document"]
