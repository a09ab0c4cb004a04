import pytest

from scenegen.class_catalog import ClassCatalog
from scenegen.errors import (
    InheritedSceneError,
    NoNodesError,
    NoStateError,
    NotACustomNodeError,
    SceneDescriptionError,
)
from scenegen.model import Outlet
from scenegen.provider import PackedScene, StaticNode, StaticSceneGraph
from scenegen.scene import describe_scene


def _packed(*nodes, path="res://player.tscn"):
    return PackedScene(path, StaticSceneGraph(list(nodes), resource_path=path))


def test_describe_scene_collects_root_and_outlets():
    scene = _packed(
        StaticNode("Player", "PlayerNode"),
        StaticNode("Sprite", "Sprite2D", parent="."),
    )

    description = describe_scene(scene)

    assert description.name == "Player"
    assert description.root_type_name == "PlayerNode"
    assert description.source_path == "res://player.tscn"
    assert description.outlets == (Outlet(("Sprite",), "sprite", "Sprite2D"),)


def test_scene_without_state_is_an_error():
    with pytest.raises(NoStateError, match="no state") as info:
        describe_scene(PackedScene("res://empty.tscn", None))

    assert not info.value.is_skip
    assert "Scene: res://empty.tscn" in str(info.value)


def test_scene_without_nodes_is_an_error():
    with pytest.raises(NoNodesError, match="no nodes"):
        describe_scene(_packed())


def test_inherited_scene_is_skipped():
    scene = _packed(StaticNode("Enemy"), StaticNode("Extra", "Node2D", parent="."))

    with pytest.raises(InheritedSceneError) as info:
        describe_scene(scene)

    assert info.value.is_skip


def test_native_root_is_skipped():
    scene = _packed(StaticNode("Level", "Node2D"))

    with pytest.raises(NotACustomNodeError, match="native class 'Node2D'") as info:
        describe_scene(scene)

    assert info.value.is_skip
    assert isinstance(info.value, SceneDescriptionError)


def test_custom_catalog_decides_what_is_native():
    scene = _packed(StaticNode("Level", "Node2D"))
    catalog = ClassCatalog({"Node"})

    assert describe_scene(scene, catalog).root_type_name == "Node2D"

    with pytest.raises(NotACustomNodeError):
        describe_scene(_packed(StaticNode("Level", "Node")), catalog)
