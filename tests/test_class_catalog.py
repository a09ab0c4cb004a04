import json

import pytest

from scenegen.class_catalog import GODOT_NATIVE_CLASSES, ClassCatalog
from scenegen.errors import ConfigError


def test_default_catalog_knows_engine_nodes():
    catalog = ClassCatalog()

    for name in ["Node", "Node2D", "Node3D", "Control", "AnimationPlayer", "CharacterBody2D"]:
        assert catalog.is_native(name), name
    assert not catalog.is_native("PlayerController")
    assert catalog.names == GODOT_NATIVE_CLASSES


def test_extended_catalog_adds_names_without_mutating():
    catalog = ClassCatalog({"Node"})

    extended = catalog.extended(["GDExtensionBase"])

    assert extended.is_native("GDExtensionBase")
    assert extended.is_native("Node")
    assert not catalog.is_native("GDExtensionBase")


def test_from_extension_api_reads_classes(tmp_path):
    path = tmp_path / "extension_api.json"
    path.write_text(
        json.dumps(
            {
                "header": {"version_major": 4},
                "builtin_classes": [{"name": "Vector2"}],
                "classes": [{"name": "Node"}, {"name": "Sprite2D"}, {"inherits": "Node"}],
            }
        ),
        encoding="utf-8",
    )

    catalog = ClassCatalog.from_extension_api(path)

    assert catalog.names == {"Node", "Sprite2D", "Vector2"}


def test_from_extension_api_errors(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        ClassCatalog.from_extension_api(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    with pytest.raises(ConfigError, match="not valid JSON"):
        ClassCatalog.from_extension_api(broken)

    empty = tmp_path / "empty.json"
    empty.write_text('{"classes": []}', encoding="utf-8")
    with pytest.raises(ConfigError, match="No classes found"):
        ClassCatalog.from_extension_api(empty)


def test_from_extension_api_requires_an_object(tmp_path):
    path = tmp_path / "extension_api.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(ConfigError, match="must contain a JSON object"):
        ClassCatalog.from_extension_api(path)
