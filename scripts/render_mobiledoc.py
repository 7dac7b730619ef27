#!/usr/bin/env python3
"""Render a mobiledoc JSON file to HTML or to a JSON tree snapshot.

Extensions (atoms, cards, markup and section overrides) are loaded from an
optional JSON config mapping names to ``module:attribute`` import paths.

Usage:
    # HTML to stdout
    python3 scripts/render_mobiledoc.py post.mobiledoc.json

    # JSON snapshot of the rendered tree, with card/atom extensions
    python3 scripts/render_mobiledoc.py post.mobiledoc.json \
      --extensions extensions.json --format json

    # Extra props merged into every card/atom payload
    python3 scripts/render_mobiledoc.py post.mobiledoc.json \
      --additional-props '{"theme": "dark"}'
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from mobiledoc_tree.codec import load_mobiledoc
from mobiledoc_tree.errors import MobiledocFormatError, MobiledocIndexError
from mobiledoc_tree.html_output import render_html
from mobiledoc_tree.registry import ExtensionConfig, ExtensionRegistry
from mobiledoc_tree.renderer import render_mobiledoc
from mobiledoc_tree.serialize import dumps_render_result

log = logging.getLogger("render_mobiledoc")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render a mobiledoc JSON file into HTML or a JSON tree snapshot."
    )
    parser.add_argument("input", type=Path, help="Path to the mobiledoc JSON file")
    parser.add_argument(
        "--extensions",
        type=Path,
        default=None,
        help="JSON config of atoms/cards/markups/sections -> 'module:attribute'",
    )
    parser.add_argument(
        "--additional-props",
        default=None,
        help="JSON object merged into every card/atom payload and custom section",
    )
    parser.add_argument(
        "--format",
        choices=("html", "json"),
        default="html",
        help="Output format (default: html)",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    registry = ExtensionRegistry()
    if args.extensions is not None:
        try:
            registry = ExtensionConfig.from_json(args.extensions).to_registry()
        except (OSError, ValueError) as exc:
            log.error("Failed to load extensions from %s: %s", args.extensions, exc)
            return 2

    additional_props: dict[str, object] = {}
    if args.additional_props:
        try:
            additional_props = orjson.loads(args.additional_props)
        except orjson.JSONDecodeError as exc:
            log.error("--additional-props is not valid JSON: %s", exc)
            return 2
        if not isinstance(additional_props, dict):
            log.error("--additional-props must be a JSON object")
            return 2

    try:
        document = load_mobiledoc(args.input)
        result = render_mobiledoc(document, registry, additional_props)
    except OSError as exc:
        log.error("Failed to read %s: %s", args.input, exc)
        return 2
    except (MobiledocFormatError, MobiledocIndexError) as exc:
        log.error("Cannot render %s: %s", args.input, exc)
        return 2

    log.info(
        "Rendered %d of %d sections from %s",
        len(result.nodes),
        len(document.sections),
        args.input.name,
    )

    if args.format == "json":
        sys.stdout.buffer.write(dumps_render_result(result))
        sys.stdout.buffer.write(b"\n")
    else:
        sys.stdout.write(render_html(result.nodes))
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
