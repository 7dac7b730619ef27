"""Mobiledoc decoding: array-encoded documents to nested render trees."""

from mobiledoc_tree.codec import load_mobiledoc, loads_mobiledoc, parse_mobiledoc
from mobiledoc_tree.errors import MobiledocFormatError, MobiledocIndexError
from mobiledoc_tree.html_output import render_html
from mobiledoc_tree.markers import render_markers_on_node
from mobiledoc_tree.registry import (
    Extension,
    ExtensionConfig,
    ExtensionRegistry,
    find_by_name,
)
from mobiledoc_tree.renderer import render_mobiledoc, render_section
from mobiledoc_tree.serialize import dumps_render_result, node_to_dict, render_result_to_dict
from mobiledoc_tree.types import (
    MOBILEDOC_VERSION,
    Atom,
    AtomContext,
    Card,
    CardContext,
    CardSection,
    ImageSection,
    ListSection,
    Marker,
    Markup,
    MarkupSection,
    Mobiledoc,
    Node,
    RenderEnv,
    RenderResult,
    UnknownSection,
)

__all__ = [
    "MOBILEDOC_VERSION",
    "Atom",
    "AtomContext",
    "Card",
    "CardContext",
    "CardSection",
    "Extension",
    "ExtensionConfig",
    "ExtensionRegistry",
    "ImageSection",
    "ListSection",
    "Marker",
    "Markup",
    "MarkupSection",
    "Mobiledoc",
    "MobiledocFormatError",
    "MobiledocIndexError",
    "Node",
    "RenderEnv",
    "RenderResult",
    "UnknownSection",
    "dumps_render_result",
    "find_by_name",
    "load_mobiledoc",
    "loads_mobiledoc",
    "node_to_dict",
    "parse_mobiledoc",
    "render_html",
    "render_markers_on_node",
    "render_mobiledoc",
    "render_result_to_dict",
    "render_section",
]
