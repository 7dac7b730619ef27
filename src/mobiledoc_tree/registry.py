"""Name-keyed extension registries for atoms, cards, markups and sections.

Atom and card components receive an ``AtomContext`` / ``CardContext`` and
return a fragment. Markup and section components become the ``type`` of a
``Node`` and are called later as ``component(props, children)``.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import orjson


type Component = Callable[..., Any]

_REGISTRY_KINDS = ("atoms", "cards", "markups", "sections")


@dataclass(frozen=True, slots=True)
class Extension:
    """One registered component."""

    name: str
    component: Component

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("extension name cannot be empty")
        if not callable(self.component):
            raise ValueError(f"extension {self.name!r} component must be callable")


def find_by_name(items: Iterable[Extension], name: str) -> Extension | None:
    """Return the first extension whose name matches, or None."""
    for item in items:
        if item.name == name:
            return item
    return None


@dataclass(frozen=True, slots=True)
class ExtensionRegistry:
    """The four registries consulted during a render pass. Read-only."""

    atoms: tuple[Extension, ...] = ()
    cards: tuple[Extension, ...] = ()
    markups: tuple[Extension, ...] = ()
    sections: tuple[Extension, ...] = ()

    @classmethod
    def from_components(
        cls,
        *,
        atoms: Mapping[str, Component] | None = None,
        cards: Mapping[str, Component] | None = None,
        markups: Mapping[str, Component] | None = None,
        sections: Mapping[str, Component] | None = None,
    ) -> ExtensionRegistry:
        """Build a registry from ``{name: component}`` mappings."""

        def build(mapping: Mapping[str, Component] | None) -> tuple[Extension, ...]:
            return tuple(Extension(name, component) for name, component in (mapping or {}).items())

        return cls(
            atoms=build(atoms),
            cards=build(cards),
            markups=build(markups),
            sections=build(sections),
        )

    def find_atom(self, name: str) -> Extension | None:
        return find_by_name(self.atoms, name)

    def find_card(self, name: str) -> Extension | None:
        return find_by_name(self.cards, name)

    def find_markup(self, name: str) -> Extension | None:
        return find_by_name(self.markups, name)

    def find_section(self, name: str) -> Extension | None:
        return find_by_name(self.sections, name)


# ---------------------------------------------------------------------------
# ExtensionConfig — registry loaded from JSON
# ---------------------------------------------------------------------------

def import_component(path: str) -> Component:
    """Resolve ``"package.module:attribute"`` to a callable."""
    module_name, sep, attr_path = path.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"component path must look like 'module:attribute', got {path!r}")
    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ValueError(f"cannot import module {module_name!r} for {path!r}") from exc
    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ValueError(f"{module_name!r} has no attribute {attr_path!r}") from exc
    if not callable(target):
        raise ValueError(f"{path!r} does not resolve to a callable")
    return target


@dataclass(slots=True)
class ExtensionConfig:
    """Component import paths per registry kind, loaded from JSON.

    Adding an extension means adding a ``name -> "module:attribute"`` entry
    to the config file, not editing the renderer.
    """

    atoms: dict[str, str] = field(default_factory=dict[str, str])
    cards: dict[str, str] = field(default_factory=dict[str, str])
    markups: dict[str, str] = field(default_factory=dict[str, str])
    sections: dict[str, str] = field(default_factory=dict[str, str])

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ExtensionConfig:
        if not isinstance(data, Mapping):
            raise ValueError(f"extension config must be an object, got {type(data).__name__}")
        unknown = sorted(set(data) - set(_REGISTRY_KINDS))
        if unknown:
            raise ValueError(f"unknown extension kinds: {', '.join(unknown)}")
        kinds: dict[str, dict[str, str]] = {}
        for kind in _REGISTRY_KINDS:
            entries = data.get(kind) or {}
            if not isinstance(entries, Mapping):
                raise ValueError(f"{kind}: expected object of name -> 'module:attribute'")
            kinds[kind] = {str(name): str(path) for name, path in entries.items()}
        return cls(**kinds)

    @classmethod
    def from_json(cls, path: Path) -> ExtensionConfig:
        """Load from an extensions.json file."""
        return cls.from_dict(orjson.loads(path.read_bytes()))

    def to_registry(self) -> ExtensionRegistry:
        """Import every configured component."""

        def resolve(entries: dict[str, str]) -> dict[str, Component]:
            return {name: import_component(path) for name, path in entries.items()}

        return ExtensionRegistry.from_components(
            atoms=resolve(self.atoms),
            cards=resolve(self.cards),
            markups=resolve(self.markups),
            sections=resolve(self.sections),
        )
