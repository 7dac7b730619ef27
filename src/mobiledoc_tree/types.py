"""Core types for mobiledoc decoding and tree building.

Input records mirror the four index-addressed tables of a mobiledoc
(sections, markups, atoms, cards). Output is a tree of ``Node`` records
whose ``type`` is either a plain tag name or an override component.

Type hierarchy:
  Mobiledoc      — decoded document (read-only during a render pass)
  Section        — MarkupSection | ListSection | CardSection | ImageSection | UnknownSection
  Marker         — one text/atom run with its open types and close count
  Markup/Atom/Card — table rows referenced by index
  Node           — output fragment (mutable while a pass builds it)
  RenderEnv / AtomContext / CardContext — extension invocation contexts
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, Literal


MOBILEDOC_VERSION = "0.3.1"

MARKUP_SECTION_TYPE = 1
IMAGE_SECTION_TYPE = 2
LIST_SECTION_TYPE = 3
CARD_SECTION_TYPE = 10

MARKUP_MARKER_TYPE = 0
ATOM_MARKER_TYPE = 1


type MarkerKind = Literal["text", "atom", "unknown"]
type Payload = dict[str, Any]
type RenderCallback = Callable[..., Any]
type ElementComponent = Callable[[dict[str, Any], list[Any]], Any]


# ---------------------------------------------------------------------------
# Document tables
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Markup:
    """Inline formatting definition. An empty tag marks a no-op open slot."""

    tag: str
    attribute: tuple[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class Atom:
    """Named inline embed with display text and payload."""

    name: str
    text: str
    payload: Payload = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Card:
    """Named block-level embed with payload."""

    name: str
    payload: Payload = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Marker:
    """Content unit plus the markups it opens and how many it closes."""

    kind: MarkerKind
    open_types: tuple[int, ...]
    close_count: int
    value: str | int

    def __post_init__(self) -> None:
        if self.close_count < 0:
            raise ValueError(f"close_count must be >= 0, got {self.close_count}")
        if self.kind == "text" and not isinstance(self.value, str):
            raise ValueError(f"text marker value must be str, got {type(self.value).__name__}")
        if self.kind == "atom" and (
            not isinstance(self.value, int) or isinstance(self.value, bool)
        ):
            raise ValueError(f"atom marker value must be int, got {type(self.value).__name__}")


@dataclass(frozen=True, slots=True)
class MarkupSection:
    tag: str
    markers: tuple[Marker, ...] = ()


@dataclass(frozen=True, slots=True)
class ListSection:
    """Ordered (``ol``) or unordered (``ul``) list; each item is a marker run."""

    tag: str
    items: tuple[tuple[Marker, ...], ...] = ()


@dataclass(frozen=True, slots=True)
class CardSection:
    card_index: int


@dataclass(frozen=True, slots=True)
class ImageSection:
    """Decoded for fidelity; the renderer produces no output for it."""

    src: str


@dataclass(frozen=True, slots=True)
class UnknownSection:
    """Section with an unrecognized type code, kept verbatim."""

    type_code: object
    raw: tuple[Any, ...] = ()


type Section = MarkupSection | ListSection | CardSection | ImageSection | UnknownSection


@dataclass(frozen=True, slots=True)
class Mobiledoc:
    """Decoded document. Never mutated by a render pass."""

    sections: tuple[Section, ...] = ()
    markups: tuple[Markup, ...] = ()
    atoms: tuple[Atom, ...] = ()
    cards: tuple[Card, ...] = ()
    version: str = MOBILEDOC_VERSION


# ---------------------------------------------------------------------------
# Output tree
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Node:
    """One rendered element.

    ``type`` is a tag name for generic elements, or the override component
    for registered markups/sections. Override components are called by the
    consumer of the tree as ``component(props, children)``.
    """

    type: str | ElementComponent
    props: dict[str, Any] = field(default_factory=dict)
    children: list[Any] = field(default_factory=list)
    key: str | int | None = None

    @property
    def is_component(self) -> bool:
        return not isinstance(self.type, str)

    @property
    def type_name(self) -> str:
        if isinstance(self.type, str):
            return self.type
        return getattr(self.type, "__name__", repr(self.type))


@dataclass(slots=True)
class RenderResult:
    """Output of one render pass: top-level fragments plus collected callbacks."""

    nodes: list[Any] = field(default_factory=list)
    render_callbacks: list[RenderCallback] = field(default_factory=list)

    def __iter__(self) -> Iterator[Any]:
        yield self.nodes
        yield self.render_callbacks


# ---------------------------------------------------------------------------
# Extension invocation contexts
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RenderEnv:
    """Environment handed to atom and card components.

    ``did_render`` and ``on_teardown`` are only bound for cards; both append
    to the same per-pass callback list.
    """

    name: str
    is_in_editor: bool = False
    dom: str = "dom"
    did_render: Callable[[RenderCallback], None] | None = None
    on_teardown: Callable[[RenderCallback], None] | None = None


@dataclass(frozen=True, slots=True)
class AtomContext:
    env: RenderEnv
    key: str
    payload: Payload
    text: str
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class CardContext:
    env: RenderEnv
    key: int
    payload: Payload
    options: dict[str, Any] = field(default_factory=dict)
