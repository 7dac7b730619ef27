"""Tests for extension registries and JSON-configured extensions."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest

from mobiledoc_tree.registry import (
    Extension,
    ExtensionConfig,
    ExtensionRegistry,
    find_by_name,
    import_component,
)


def _one(_context: object) -> str:
    return "one"


def _two(_context: object) -> str:
    return "two"


def test_find_by_name_first_match_wins() -> None:
    items = (Extension("x", _one), Extension("x", _two))
    found = find_by_name(items, "x")
    assert found is not None
    assert found.component is _one


def test_find_by_name_missing() -> None:
    assert find_by_name((Extension("x", _one),), "y") is None


def test_extension_rejects_non_callable() -> None:
    with pytest.raises(ValueError):
        Extension("x", "not callable")  # type: ignore[arg-type]


def test_registry_lookups_are_per_kind() -> None:
    registry = ExtensionRegistry.from_components(atoms={"x": _one}, cards={"x": _two})
    atom = registry.find_atom("x")
    card = registry.find_card("x")
    assert atom is not None and atom.component is _one
    assert card is not None and card.component is _two
    assert registry.find_markup("x") is None
    assert registry.find_section("x") is None


class TestExtensionConfig:
    @pytest.fixture
    def plugin_module(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
        (tmp_path / "blog_cards.py").write_text(
            textwrap.dedent(
                """
                def image(context):
                    return "img:" + context.payload["src"]

                class Widgets:
                    @staticmethod
                    def mention(context):
                        return context.text
                """
            ),
            encoding="utf-8",
        )
        monkeypatch.syspath_prepend(str(tmp_path))
        return "blog_cards"

    def test_from_json_resolves_components(self, tmp_path: Path, plugin_module: str) -> None:
        config_path = tmp_path / "extensions.json"
        config_path.write_text(
            json.dumps(
                {
                    "cards": {"image": f"{plugin_module}:image"},
                    "atoms": {"mention": f"{plugin_module}:Widgets.mention"},
                }
            ),
            encoding="utf-8",
        )
        registry = ExtensionConfig.from_json(config_path).to_registry()
        card = registry.find_card("image")
        atom = registry.find_atom("mention")
        assert card is not None and callable(card.component)
        assert atom is not None and callable(atom.component)

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(ValueError, match="widgets"):
            ExtensionConfig.from_dict({"widgets": {}})

    def test_non_object_config_rejected(self, tmp_path: Path) -> None:
        config_path = tmp_path / "extensions.json"
        config_path.write_text(json.dumps([1, 2]), encoding="utf-8")
        with pytest.raises(ValueError, match="must be an object"):
            ExtensionConfig.from_json(config_path)

    def test_missing_attribute_rejected(self, plugin_module: str) -> None:
        config = ExtensionConfig.from_dict({"cards": {"x": f"{plugin_module}:nope"}})
        with pytest.raises(ValueError):
            config.to_registry()


def test_import_component_requires_colon() -> None:
    with pytest.raises(ValueError):
        import_component("json.dumps")


def test_import_component_missing_module() -> None:
    with pytest.raises(ValueError):
        import_component("definitely_not_a_module_xyz:thing")


def test_import_component_resolves_stdlib_callable() -> None:
    assert import_component("json:dumps") is json.dumps
