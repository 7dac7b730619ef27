"""Marker stack machine: rebuild nested inline markup from a flat marker run.

Each marker opens zero or more markups (by index into the markup table),
appends its content to the innermost open node, then closes ``close_count``
open nodes. Markup rows with an empty tag open nothing and instead cancel
one pending close, since encoders count a close for every open type.

The stack always keeps the root at the bottom: over-closing is clamped there
rather than raising.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from mobiledoc_tree.errors import MobiledocIndexError
from mobiledoc_tree.registry import ExtensionRegistry
from mobiledoc_tree.types import Marker, Markup, Node


def table_row[T](table: Sequence[T], index: int, table_name: str) -> T:
    """Index a document table, rejecting negative and out-of-range indices."""
    if index < 0 or index >= len(table):
        raise MobiledocIndexError(table_name, index, len(table))
    return table[index]


def markup_props(markup: Markup) -> dict[str, Any]:
    """Map the markup's single attribute pair to node props."""
    if markup.attribute is None:
        return {}
    name, value = markup.attribute
    return {name: value}


def _open_markup(
    markup: Markup,
    registry: ExtensionRegistry,
    key: str,
) -> Node:
    override = registry.find_markup(markup.tag)
    element_type = override.component if override is not None else markup.tag
    return Node(type=element_type, props=markup_props(markup), key=key)


def render_markers_on_node(
    root: Node,
    markers: Sequence[Marker],
    *,
    markups: Sequence[Markup],
    registry: ExtensionRegistry,
    render_atom: Callable[[int], Any],
    parent_key: str | int,
) -> Node:
    """Append the nested content of ``markers`` under ``root`` and return root.

    ``render_atom`` maps an atom table index to its fragment, or None when the
    atom is not registered (nothing is appended in that case).
    """
    stack: list[Node] = [root]

    for marker_index, marker in enumerate(markers):
        close_count = marker.close_count

        for open_index, markup_index in enumerate(marker.open_types):
            markup = table_row(markups, markup_index, "markups")
            if markup.tag:
                node = _open_markup(markup, registry, f"{parent_key}-{marker_index}-{open_index}")
                stack[-1].children.append(node)
                stack.append(node)
            else:
                close_count -= 1

        if marker.kind == "text":
            stack[-1].children.append(marker.value)
        elif marker.kind == "atom":
            fragment = render_atom(int(marker.value))
            if fragment is not None:
                stack[-1].children.append(fragment)

        # Never pop the root.
        for _ in range(min(close_count, len(stack) - 1)):
            stack.pop()

    return root
