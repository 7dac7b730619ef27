"""HTML output for rendered trees.

Builds markup with BeautifulSoup so escaping and void elements follow the
``html.parser`` tree builder. Override components on ``Node.type`` are
invoked here as ``component(props, children)`` and their result is rendered
in place of the node.

Supported fragment kinds:
  Node             — element (or override component)
  str / int / float — text
  bs4 Tag          — appended as-is
  list / tuple     — rendered in order
  None             — nothing
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from bs4 import BeautifulSoup
from bs4.element import NavigableString, Tag

from mobiledoc_tree.types import Node


def _attrs(props: dict[str, Any]) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for name, value in props.items():
        if value is None or value is False:
            continue
        attrs[name] = name if value is True else str(value)
    return attrs


def _append(soup: BeautifulSoup, parent: Tag, fragment: Any) -> None:
    if fragment is None:
        return
    if isinstance(fragment, Node):
        if fragment.is_component:
            component: Any = fragment.type
            _append(soup, parent, component(dict(fragment.props), list(fragment.children)))
            return
        tag = soup.new_tag(str(fragment.type), attrs=_attrs(fragment.props))
        parent.append(tag)
        for child in fragment.children:
            _append(soup, tag, child)
        return
    if isinstance(fragment, Tag):
        parent.append(fragment)
        return
    if isinstance(fragment, list | tuple):
        for child in fragment:
            _append(soup, parent, child)
        return
    parent.append(NavigableString(str(fragment)))


def render_html(fragments: Iterable[Any]) -> str:
    """Render top-level fragments into an HTML string."""
    soup = BeautifulSoup("", "html.parser")
    for fragment in fragments:
        _append(soup, soup, fragment)
    return soup.decode()
