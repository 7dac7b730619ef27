"""Decode the array encoding of a mobiledoc into typed records.

A raw mobiledoc is a JSON object::

    {
      "version": "0.3.1",
      "atoms":    [[name, text, payload], ...],
      "cards":    [[name, payload], ...],
      "markups":  [[tag], [tag, [attr_name, attr_value]], ...],
      "sections": [[1, tag, markers], [3, tag, items], [10, card_index], [2, src]]
    }

with markers encoded as ``[type, open_types, close_count, value]``.

Decoding is shape-only: indices are not checked against their tables here
(the renderer does that lazily), and unknown section or marker type codes
are preserved rather than rejected.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import orjson

from mobiledoc_tree.errors import MobiledocFormatError
from mobiledoc_tree.types import (
    ATOM_MARKER_TYPE,
    CARD_SECTION_TYPE,
    IMAGE_SECTION_TYPE,
    LIST_SECTION_TYPE,
    MARKUP_MARKER_TYPE,
    MARKUP_SECTION_TYPE,
    MOBILEDOC_VERSION,
    Atom,
    Card,
    CardSection,
    ImageSection,
    ListSection,
    Marker,
    MarkerKind,
    Markup,
    MarkupSection,
    Mobiledoc,
    Section,
    UnknownSection,
)

log = logging.getLogger(__name__)

_SUPPORTED_VERSION_PREFIX = "0.3."

_MARKER_KINDS: dict[int, MarkerKind] = {
    MARKUP_MARKER_TYPE: "text",
    ATOM_MARKER_TYPE: "atom",
}


# ---------------------------------------------------------------------------
# Shape helpers
# ---------------------------------------------------------------------------

def _require_list(value: object, where: str) -> list[Any]:
    if not isinstance(value, list | tuple):
        raise MobiledocFormatError(f"{where}: expected array, got {type(value).__name__}")
    return list(value)


def _require_arity(row: Sequence[Any], minimum: int, where: str) -> None:
    if len(row) < minimum:
        raise MobiledocFormatError(f"{where}: expected at least {minimum} fields, got {len(row)}")


def _require_int(value: object, where: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise MobiledocFormatError(f"{where}: expected integer, got {value!r}")
    return value


def _require_str(value: object, where: str) -> str:
    if not isinstance(value, str):
        raise MobiledocFormatError(f"{where}: expected string, got {value!r}")
    return value


def _require_payload(value: object, where: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise MobiledocFormatError(f"{where}: expected object payload, got {type(value).__name__}")
    return dict(value)


# ---------------------------------------------------------------------------
# Table rows
# ---------------------------------------------------------------------------

def parse_markup(raw: object, where: str = "markup") -> Markup:
    row = _require_list(raw, where)
    _require_arity(row, 1, where)
    tag = row[0] or ""
    if not isinstance(tag, str):
        raise MobiledocFormatError(f"{where}: expected tag string, got {tag!r}")
    attribute: tuple[str, Any] | None = None
    if len(row) > 1 and row[1]:
        attrs = _require_list(row[1], f"{where}.attributes")
        _require_arity(attrs, 2, f"{where}.attributes")
        attribute = (_require_str(attrs[0], f"{where}.attributes[0]"), attrs[1])
        if len(attrs) > 2:
            log.debug("%s: keeping first attribute pair of %d values", where, len(attrs))
    return Markup(tag=tag, attribute=attribute)


def parse_atom(raw: object, where: str = "atom") -> Atom:
    row = _require_list(raw, where)
    _require_arity(row, 2, where)
    return Atom(
        name=_require_str(row[0], f"{where}.name"),
        text=_require_str(row[1], f"{where}.text"),
        payload=_require_payload(row[2] if len(row) > 2 else None, f"{where}.payload"),
    )


def parse_card(raw: object, where: str = "card") -> Card:
    row = _require_list(raw, where)
    _require_arity(row, 1, where)
    return Card(
        name=_require_str(row[0], f"{where}.name"),
        payload=_require_payload(row[1] if len(row) > 1 else None, f"{where}.payload"),
    )


def parse_marker(raw: object, where: str = "marker") -> Marker:
    row = _require_list(raw, where)
    _require_arity(row, 4, where)
    marker_type = _require_int(row[0], f"{where}.type")
    kind = _MARKER_KINDS.get(marker_type, "unknown")
    open_types = tuple(
        _require_int(value, f"{where}.open_types[{i}]")
        for i, value in enumerate(_require_list(row[1] or [], f"{where}.open_types"))
    )
    close_count = _require_int(row[2], f"{where}.close_count")
    if close_count < 0:
        raise MobiledocFormatError(f"{where}: close_count must be >= 0, got {close_count}")
    value = row[3]
    if kind == "text":
        value = _require_str(value, f"{where}.value")
    elif kind == "atom":
        value = _require_int(value, f"{where}.value")
    elif not isinstance(value, str | int):
        value = repr(value)
    return Marker(kind=kind, open_types=open_types, close_count=close_count, value=value)


def _parse_markers(raw: object, where: str) -> tuple[Marker, ...]:
    return tuple(
        parse_marker(marker, f"{where}[{i}]")
        for i, marker in enumerate(_require_list(raw, where))
    )


def parse_section(raw: object, where: str = "section") -> Section:
    row = _require_list(raw, where)
    _require_arity(row, 1, where)
    type_code = row[0]

    if type_code == MARKUP_SECTION_TYPE:
        _require_arity(row, 3, where)
        return MarkupSection(
            tag=_require_str(row[1], f"{where}.tag"),
            markers=_parse_markers(row[2], f"{where}.markers"),
        )
    if type_code == LIST_SECTION_TYPE:
        _require_arity(row, 3, where)
        items = _require_list(row[2], f"{where}.items")
        return ListSection(
            tag=_require_str(row[1], f"{where}.tag"),
            items=tuple(_parse_markers(item, f"{where}.items[{i}]") for i, item in enumerate(items)),
        )
    if type_code == CARD_SECTION_TYPE:
        _require_arity(row, 2, where)
        return CardSection(card_index=_require_int(row[1], f"{where}.card_index"))
    if type_code == IMAGE_SECTION_TYPE:
        _require_arity(row, 2, where)
        return ImageSection(src=_require_str(row[1], f"{where}.src"))

    log.debug("%s: unrecognized section type %r kept as unknown", where, type_code)
    return UnknownSection(type_code=type_code, raw=tuple(row))


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

def parse_mobiledoc(raw: object) -> Mobiledoc:
    """Decode a JSON-compatible mapping into a ``Mobiledoc``."""
    if not isinstance(raw, Mapping):
        raise MobiledocFormatError(f"mobiledoc: expected object, got {type(raw).__name__}")

    version = raw.get("version", MOBILEDOC_VERSION)
    if not isinstance(version, str):
        raise MobiledocFormatError(f"mobiledoc.version: expected string, got {version!r}")
    if not version.startswith(_SUPPORTED_VERSION_PREFIX):
        log.warning("mobiledoc version %s is not %s; decoding anyway", version, MOBILEDOC_VERSION)

    def table(name: str) -> list[Any]:
        return _require_list(raw.get(name) or [], name)

    return Mobiledoc(
        version=version,
        markups=tuple(parse_markup(row, f"markups[{i}]") for i, row in enumerate(table("markups"))),
        atoms=tuple(parse_atom(row, f"atoms[{i}]") for i, row in enumerate(table("atoms"))),
        cards=tuple(parse_card(row, f"cards[{i}]") for i, row in enumerate(table("cards"))),
        sections=tuple(
            parse_section(row, f"sections[{i}]") for i, row in enumerate(table("sections"))
        ),
    )


def loads_mobiledoc(data: bytes | str) -> Mobiledoc:
    """Decode a mobiledoc from JSON text."""
    try:
        raw = orjson.loads(data)
    except orjson.JSONDecodeError as exc:
        raise MobiledocFormatError(f"mobiledoc: invalid JSON ({exc})") from exc
    return parse_mobiledoc(raw)


def load_mobiledoc(path: Path) -> Mobiledoc:
    """Load and decode a mobiledoc JSON file."""
    return loads_mobiledoc(path.read_bytes())
