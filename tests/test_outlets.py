import warnings

import pytest

from scenegen.errors import SceneLoadError
from scenegen.model import Outlet
from scenegen.outlets import extract_outlets, own_path_segments
from scenegen.provider import AnimationLibrary, SceneGraph, StaticNode, StaticSceneGraph


def _graph(*nodes, path="res://scene.tscn"):
    return StaticSceneGraph(list(nodes), resource_path=path)


def test_own_path_segments_strips_self_reference():
    assert own_path_segments(".") == ()
    assert own_path_segments("./Body") == ("Body",)
    assert own_path_segments("./Body/Sprite") == ("Body", "Sprite")


def test_empty_graph_yields_no_outlets():
    assert extract_outlets(_graph()) == []


def test_root_is_never_emitted():
    graph = _graph(StaticNode("Main", "MainScene"))

    assert extract_outlets(graph) == []


def test_outlets_follow_index_order_with_structural_paths():
    graph = _graph(
        StaticNode("Main", "MainScene"),
        StaticNode("HUD", "CanvasLayer", parent="."),
        StaticNode("HealthBar", "ProgressBar", parent="HUD"),
        StaticNode("Camera", "Camera2D", parent="."),
    )

    assert extract_outlets(graph) == [
        Outlet(("HUD",), "hud", "CanvasLayer"),
        Outlet(("HUD", "HealthBar"), "hud_healthBar", "ProgressBar"),
        Outlet(("Camera",), "camera", "Camera2D"),
    ]


def test_unique_name_ignores_intra_scene_depth():
    graph = _graph(
        StaticNode("Main", "MainScene"),
        StaticNode("UI", "Control", parent="."),
        StaticNode(
            "ScoreLabel",
            "Label",
            parent="UI/Panel/Box",
            properties={"unique_name_in_owner": True},
        ),
    )

    outlets = extract_outlets(graph)
    assert outlets[1] == Outlet(("UI", "Panel", "Box", "ScoreLabel"), "scoreLabel", "Label")


def test_nested_instances_compose_paths_and_emit_nested_root():
    bullet = _graph(
        StaticNode("Bullet", "Area2D"),
        StaticNode("Shape", "CollisionShape2D", parent="."),
        path="res://bullet.tscn",
    )
    gun = _graph(
        StaticNode("Gun", "Node2D"),
        StaticNode("Barrel", "Marker2D", parent="."),
        StaticNode("Round", parent="Barrel", instance=bullet),
        StaticNode(
            "Trigger",
            "Area2D",
            parent="Barrel/Grip",
            properties={"unique_name_in_owner": True},
        ),
        path="res://gun.tscn",
    )
    player = _graph(
        StaticNode("Player", "PlayerNode"),
        StaticNode("Gun", parent=".", instance=gun),
        StaticNode("Sprite", "Sprite2D", parent="."),
    )

    assert extract_outlets(player) == [
        Outlet(("Gun",), "gun", "Node2D"),
        Outlet(("Gun", "Barrel"), "gun_barrel", "Marker2D"),
        Outlet(("Gun", "Barrel", "Round"), "gun_barrel_round", "Area2D"),
        Outlet(("Gun", "Barrel", "Round", "Shape"), "gun_barrel_round_shape", "CollisionShape2D"),
        Outlet(("Gun", "Barrel", "Grip", "Trigger"), "gun_trigger", "Area2D"),
        Outlet(("Sprite",), "sprite", "Sprite2D"),
    ]


def test_missing_nested_graph_warns_and_continues():
    graph = _graph(
        StaticNode("Main", "MainScene"),
        StaticNode("Broken", parent="."),
        StaticNode("After", "Node2D", parent="."),
    )

    with pytest.warns(UserWarning, match="Couldn't get type at path") as record:
        outlets = extract_outlets(graph)

    assert "Node: Broken" in str(record[0].message)
    assert outlets == [Outlet(("After",), "after", "Node2D")]


def test_failing_nested_load_warns_and_continues():
    class FailingGraph(StaticSceneGraph):
        def nested_graph(self, index):
            raise SceneLoadError("Resource file not found.", scene_path="res://gone.tscn")

    graph = FailingGraph(
        [
            StaticNode("Main", "MainScene"),
            StaticNode("Gone", parent="."),
            StaticNode("Kept", "Node2D", parent="."),
        ]
    )

    with pytest.warns(UserWarning, match="Couldn't load instanced scene"):
        outlets = extract_outlets(graph)

    assert [outlet.identifier for outlet in outlets] == ["kept"]


def test_self_instancing_scene_is_skipped():
    nodes = [StaticNode("Loop", "LoopNode"), StaticNode("Again", parent=".")]
    graph = StaticSceneGraph(nodes, resource_path="res://loop.tscn")
    nodes[1].instance = graph

    with pytest.warns(UserWarning, match="instances itself"):
        assert extract_outlets(graph) == []


def test_animation_player_uses_first_library_only():
    graph = _graph(
        StaticNode("Main", "MainScene"),
        StaticNode(
            "AnimationPlayer",
            "AnimationPlayer",
            parent=".",
            properties={
                "libraries": {
                    "": AnimationLibrary(("idle", "run")),
                    "extra": AnimationLibrary(("dance",)),
                }
            },
        ),
    )

    [outlet] = extract_outlets(graph)
    assert outlet.options == ("idle", "run")


def test_animation_player_without_libraries_has_no_options():
    graph = _graph(
        StaticNode("Main", "MainScene"),
        StaticNode("Anim", "AnimationPlayer", parent="."),
        StaticNode("Other", "AnimationPlayer", parent=".", properties={"libraries": {}}),
    )

    assert [outlet.options for outlet in extract_outlets(graph)] == [(), ()]


def test_options_only_collected_for_animation_players():
    graph = _graph(
        StaticNode("Main", "MainScene"),
        StaticNode(
            "Tree",
            "AnimationTree",
            parent=".",
            properties={"libraries": {"": AnimationLibrary(("idle",))}},
        ),
    )

    assert extract_outlets(graph)[0].options == ()


def test_extraction_does_not_need_static_graphs():
    class TwoNodeGraph(SceneGraph):
        resource_path = "res://custom.tscn"

        def node_count(self):
            return 2

        def node_name(self, index):
            return ["Root", "Child"][index]

        def node_type(self, index):
            return ["RootNode", "Label"][index]

        def node_path(self, index):
            return [".", "./Child"][index]

        def node_property(self, index, name):
            return None

        def nested_graph(self, index):
            return None

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert extract_outlets(TwoNodeGraph()) == [Outlet(("Child",), "child", "Label")]


def test_node_resolving_to_scene_root_is_rejected():
    graph = _graph(
        StaticNode("Main", "MainScene"),
        StaticNode("Orphan", "Node"),
        path="res://orphan.tscn",
    )

    with pytest.raises(SceneLoadError, match="Node 'Orphan' at index 1 resolves to the scene root"):
        extract_outlets(graph)
