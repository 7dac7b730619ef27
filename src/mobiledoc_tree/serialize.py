"""Deterministic JSON-safe snapshots of rendered trees."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import orjson

from mobiledoc_tree.types import Node, RenderResult


def _json_safe(value: Any) -> Any:
    if value is None or isinstance(value, str | int | float | bool):
        return value
    if isinstance(value, Node):
        return node_to_dict(value)
    if isinstance(value, Mapping):
        return {str(k): _json_safe(v) for k, v in sorted(value.items(), key=lambda kv: str(kv[0]))}
    if isinstance(value, list | tuple):
        return [_json_safe(v) for v in value]
    if callable(value):
        return getattr(value, "__name__", repr(value))
    return repr(value)


def node_to_dict(node: Node) -> dict[str, object]:
    """Serialize one node (recursively) for snapshots."""

    return {
        "type": node.type_name,
        "component": node.is_component,
        "key": node.key,
        "props": _json_safe(node.props),
        "children": [_json_safe(child) for child in node.children],
    }


def render_result_to_dict(result: RenderResult) -> dict[str, object]:
    return {
        "nodes": [_json_safe(node) for node in result.nodes],
        "render_callback_count": len(result.render_callbacks),
    }


def dumps_render_result(result: RenderResult, *, pretty: bool = True) -> bytes:
    """Encode a render result snapshot as JSON bytes."""
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    return orjson.dumps(render_result_to_dict(result), option=opts)
