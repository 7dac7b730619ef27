"""Render a decoded mobiledoc into a sequence of ``Node`` fragments.

One call to ``render_mobiledoc`` is one render pass. All per-pass state
(the callback list, the stacks built by the marker machine) lives on a
``_RenderPass`` created for that call, so passes over distinct inputs never
share mutable state. The document and registry are only read.

Dispatch by section type:
  MarkupSection -> generic tag node (or a registered section override)
  ListSection   -> list node wrapping one ``li`` node per item
  CardSection   -> registered card component, or nothing
  anything else -> nothing
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from mobiledoc_tree.markers import render_markers_on_node, table_row
from mobiledoc_tree.registry import ExtensionRegistry
from mobiledoc_tree.types import (
    AtomContext,
    CardContext,
    CardSection,
    ListSection,
    Marker,
    MarkupSection,
    Mobiledoc,
    Node,
    RenderCallback,
    RenderEnv,
    RenderResult,
    Section,
)

log = logging.getLogger(__name__)

_EMPTY_REGISTRY = ExtensionRegistry()


@dataclass(slots=True)
class _RenderPass:
    document: Mobiledoc
    registry: ExtensionRegistry
    additional_props: dict[str, Any]
    render_callbacks: list[RenderCallback] = field(default_factory=list[RenderCallback])

    # -- callbacks ---------------------------------------------------------

    def register_render_callback(self, callback: RenderCallback) -> None:
        self.render_callbacks.append(callback)

    def _merged_payload(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        return {**payload, **self.additional_props}

    # -- markers -----------------------------------------------------------

    def _render_markers(self, root: Node, markers: tuple[Marker, ...], parent_key: str | int) -> Node:
        return render_markers_on_node(
            root,
            markers,
            markups=self.document.markups,
            registry=self.registry,
            render_atom=self.render_atom,
            parent_key=parent_key,
        )

    # -- embeds ------------------------------------------------------------

    def render_atom(self, atom_index: int) -> Any:
        atom = table_row(self.document.atoms, atom_index, "atoms")
        extension = self.registry.find_atom(atom.name)
        if extension is None:
            log.debug("atoms[%d]: no atom registered as %r", atom_index, atom.name)
            return None
        context = AtomContext(
            env=RenderEnv(name=atom.name),
            key=f"{atom.name}-{len(atom.text)}",
            payload=self._merged_payload(atom.payload),
            text=atom.text,
        )
        return extension.component(context)

    def render_card_section(self, section: CardSection, node_key: int) -> Any:
        card = table_row(self.document.cards, section.card_index, "cards")
        extension = self.registry.find_card(card.name)
        if extension is None:
            log.debug("sections[%d]: no card registered as %r", node_key, card.name)
            return None
        context = CardContext(
            env=RenderEnv(
                name=card.name,
                did_render=self.register_render_callback,
                on_teardown=self.register_render_callback,
            ),
            key=node_key,
            payload=self._merged_payload(card.payload),
        )
        return extension.component(context)

    # -- sections ----------------------------------------------------------

    def render_markup_section(self, section: MarkupSection, node_key: int) -> Node:
        override = self.registry.find_section(section.tag)
        if override is not None:
            root = Node(type=override.component, props=dict(self.additional_props), key=node_key)
        else:
            root = Node(type=section.tag, key=node_key)
        return self._render_markers(root, section.markers, node_key)

    def render_list_section(self, section: ListSection, node_key: int) -> Node:
        items = [
            self._render_markers(Node(type="li", key=index), item, index)
            for index, item in enumerate(section.items)
        ]
        return Node(type=section.tag, children=items, key=node_key)

    def render_section(self, section: Section, node_key: int) -> Any:
        match section:
            case MarkupSection():
                return self.render_markup_section(section, node_key)
            case ListSection():
                return self.render_list_section(section, node_key)
            case CardSection():
                return self.render_card_section(section, node_key)
            case _:
                log.debug("sections[%d]: no renderer for %s", node_key, type(section).__name__)
                return None

    def run(self) -> RenderResult:
        nodes: list[Any] = []
        for node_key, section in enumerate(self.document.sections):
            fragment = self.render_section(section, node_key)
            if fragment is not None:
                nodes.append(fragment)
        return RenderResult(nodes=nodes, render_callbacks=self.render_callbacks)


def render_section(
    section: Section,
    node_key: int,
    document: Mobiledoc,
    registry: ExtensionRegistry | None = None,
    additional_props: Mapping[str, Any] | None = None,
) -> Any:
    """Render a single section of ``document``; returns None when it has no output.

    Callbacks registered by a card are discarded; use ``render_mobiledoc``
    to collect them.
    """
    render_pass = _RenderPass(
        document=document,
        registry=registry or _EMPTY_REGISTRY,
        additional_props=dict(additional_props or {}),
    )
    return render_pass.render_section(section, node_key)


def render_mobiledoc(
    document: Mobiledoc,
    registry: ExtensionRegistry | None = None,
    additional_props: Mapping[str, Any] | None = None,
) -> RenderResult:
    """Render every section of ``document`` in order.

    Sections with no output (unknown types, unregistered cards) are dropped.
    Returns the fragments plus the card callbacks registered during the pass,
    uninvoked and in registration order.
    """
    render_pass = _RenderPass(
        document=document,
        registry=registry or _EMPTY_REGISTRY,
        additional_props=dict(additional_props or {}),
    )
    result = render_pass.run()
    log.debug(
        "rendered %d of %d sections, %d callbacks",
        len(result.nodes),
        len(document.sections),
        len(result.render_callbacks),
    )
    return result
