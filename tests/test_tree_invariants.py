"""Invariant checks for rendered trees.

These tests validate tree-shape guarantees across a spread of documents
rather than exact output for each one.
"""
from __future__ import annotations

from typing import Any

import pytest

from mobiledoc_tree.codec import parse_mobiledoc
from mobiledoc_tree.registry import ExtensionRegistry
from mobiledoc_tree.renderer import render_mobiledoc
from mobiledoc_tree.types import AtomContext, CardContext, Node


def _atom(context: AtomContext) -> Node:
    return Node(type="span", children=[context.text], key=context.key)


def _card(context: CardContext) -> Node:
    return Node(type="figure", key=context.key)


REGISTRY = ExtensionRegistry.from_components(atoms={"mention": _atom}, cards={"figure": _card})

MARKUPS = [["b"], ["i"], [""], ["a", ["href", "/x"]]]

TEST_DOCS: list[dict[str, Any]] = [
    # Plain paragraphs.
    {"sections": [[1, "p", [[0, [], 0, "one"]]], [1, "h1", [[0, [], 0, "two"]]]]},
    # Deep nesting closed in a single marker.
    {"sections": [[1, "p", [[0, [0, 1, 3], 3, "deep"], [0, [], 0, "flat"]]]]},
    # Over-closing and null markups mixed.
    {"sections": [[1, "p", [[0, [2], 7, "a"], [0, [0, 2], 2, "b"], [0, [], 9, "c"]]]]},
    # Unclosed markup at the end of a section followed by another section.
    {"sections": [[1, "p", [[0, [1], 0, "open"]]], [1, "p", [[0, [], 0, "next"]]]]},
    # Lists, atoms, cards, unknown and image sections.
    {
        "sections": [
            [3, "ul", [[[0, [0], 0, "x"]], [[1, [1], 1, 0]], []]],
            [10, 0],
            [10, 1],
            [2, "/img.png"],
            [77],
        ],
        "atoms": [["mention", "@a", {}]],
        "cards": [["figure", {}], ["missing", {}]],
    },
]


def _assert_well_nested(node: Node, seen: set[int]) -> None:
    assert id(node) not in seen, "node appears twice in the tree"
    seen.add(id(node))
    for child in node.children:
        assert child is not None
        if isinstance(child, Node):
            assert child is not node
            _assert_well_nested(child, seen)


def _text_of(node: Any) -> str:
    if isinstance(node, str):
        return node
    if isinstance(node, Node):
        return "".join(_text_of(child) for child in node.children)
    return ""


@pytest.mark.parametrize("raw", TEST_DOCS)
def test_tree_invariants_hold(raw: dict[str, Any]) -> None:
    doc = parse_mobiledoc({"version": "0.3.1", "markups": MARKUPS, **raw})
    result = render_mobiledoc(doc, REGISTRY)

    # 1) Never more fragments than sections.
    assert len(result.nodes) <= len(doc.sections)

    # 2) Every fragment is a proper tree.
    seen: set[int] = set()
    for node in result.nodes:
        assert isinstance(node, Node)
        _assert_well_nested(node, seen)

    # 3) Section keys are strictly increasing (document order preserved).
    keys = [node.key for node in result.nodes]
    assert keys == sorted(keys)
    assert len(set(keys)) == len(keys)


@pytest.mark.parametrize("raw", TEST_DOCS[:4])
def test_text_content_preserved_in_order(raw: dict[str, Any]) -> None:
    doc = parse_mobiledoc({"version": "0.3.1", "markups": MARKUPS, **raw})
    result = render_mobiledoc(doc, REGISTRY)
    expected = [
        "".join(marker[3] for marker in section[2])
        for section in raw["sections"]
    ]
    assert [_text_of(node) for node in result.nodes] == expected


def test_fragment_count_equals_sections_when_all_resolve() -> None:
    doc = parse_mobiledoc({"version": "0.3.1", "markups": MARKUPS, **TEST_DOCS[0]})
    assert len(render_mobiledoc(doc).nodes) == len(doc.sections)
