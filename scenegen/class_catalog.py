"""Catalog of engine-native class names.

A scene whose root is a native class has no user subclass to extend, so no
bindings are generated for it. The bundled list covers the Godot 4 node
classes and their common bases; a project can load the exact list from the
``extension_api.json`` produced by ``godot --dump-extension-api``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import AbstractSet, Iterable

from scenegen.errors import ConfigError

GODOT_CORE_CLASSES = frozenset(
    {
        "Object",
        "RefCounted",
        "Resource",
        "Node",
        "Window",
        "Viewport",
        "SubViewport",
        "AcceptDialog",
        "ConfirmationDialog",
        "FileDialog",
        "Popup",
        "PopupMenu",
        "PopupPanel",
        "CanvasLayer",
        "ParallaxBackground",
        "CanvasItem",
        "Timer",
        "HTTPRequest",
        "ResourcePreloader",
        "AnimationPlayer",
        "AnimationTree",
        "AnimationMixer",
        "AudioStreamPlayer",
        "MultiplayerSpawner",
        "MultiplayerSynchronizer",
        "NavigationAgent2D",
        "NavigationAgent3D",
        "NavigationObstacle2D",
        "NavigationObstacle3D",
        "ShaderGlobalsOverride",
        "SkeletonIK3D",
        "StatusIndicator",
        "WorldEnvironment",
        "InstancePlaceholder",
        "MissingNode",
        "Tween",
        "SceneTree",
        "PackedScene",
        "AnimationLibrary",
        "Animation",
    }
)

GODOT_2D_CLASSES = frozenset(
    {
        "Node2D",
        "AnimatableBody2D",
        "AnimatedSprite2D",
        "Area2D",
        "AudioListener2D",
        "AudioStreamPlayer2D",
        "BackBufferCopy",
        "Bone2D",
        "Camera2D",
        "CanvasGroup",
        "CanvasModulate",
        "CharacterBody2D",
        "CollisionObject2D",
        "CollisionPolygon2D",
        "CollisionShape2D",
        "CPUParticles2D",
        "DampedSpringJoint2D",
        "DirectionalLight2D",
        "GPUParticles2D",
        "GrooveJoint2D",
        "Joint2D",
        "Light2D",
        "LightOccluder2D",
        "Line2D",
        "Marker2D",
        "MeshInstance2D",
        "MultiMeshInstance2D",
        "NavigationLink2D",
        "NavigationRegion2D",
        "Parallax2D",
        "ParallaxLayer",
        "Path2D",
        "PathFollow2D",
        "PhysicalBone2D",
        "PhysicsBody2D",
        "PinJoint2D",
        "PointLight2D",
        "Polygon2D",
        "RayCast2D",
        "RemoteTransform2D",
        "RigidBody2D",
        "ShapeCast2D",
        "Skeleton2D",
        "Sprite2D",
        "StaticBody2D",
        "TileMap",
        "TileMapLayer",
        "TouchScreenButton",
        "VisibleOnScreenEnabler2D",
        "VisibleOnScreenNotifier2D",
    }
)

GODOT_3D_CLASSES = frozenset(
    {
        "Node3D",
        "AnimatableBody3D",
        "AnimatedSprite3D",
        "Area3D",
        "AudioListener3D",
        "AudioStreamPlayer3D",
        "BoneAttachment3D",
        "Camera3D",
        "CharacterBody3D",
        "CollisionObject3D",
        "CollisionPolygon3D",
        "CollisionShape3D",
        "ConeTwistJoint3D",
        "CPUParticles3D",
        "CSGBox3D",
        "CSGCombiner3D",
        "CSGCylinder3D",
        "CSGMesh3D",
        "CSGPolygon3D",
        "CSGPrimitive3D",
        "CSGShape3D",
        "CSGSphere3D",
        "CSGTorus3D",
        "Decal",
        "DirectionalLight3D",
        "FogVolume",
        "Generic6DOFJoint3D",
        "GeometryInstance3D",
        "GPUParticles3D",
        "GPUParticlesAttractor3D",
        "GPUParticlesCollision3D",
        "GridMap",
        "HingeJoint3D",
        "ImporterMeshInstance3D",
        "Joint3D",
        "Label3D",
        "Light3D",
        "LightmapGI",
        "LightmapProbe",
        "Marker3D",
        "MeshInstance3D",
        "MultiMeshInstance3D",
        "NavigationLink3D",
        "NavigationRegion3D",
        "OccluderInstance3D",
        "OmniLight3D",
        "Path3D",
        "PathFollow3D",
        "PhysicalBone3D",
        "PhysicsBody3D",
        "PinJoint3D",
        "RayCast3D",
        "ReflectionProbe",
        "RemoteTransform3D",
        "RigidBody3D",
        "Skeleton3D",
        "SliderJoint3D",
        "SoftBody3D",
        "SpotLight3D",
        "SpringArm3D",
        "Sprite3D",
        "SpriteBase3D",
        "StaticBody3D",
        "VehicleBody3D",
        "VehicleWheel3D",
        "VisibleOnScreenEnabler3D",
        "VisibleOnScreenNotifier3D",
        "VisualInstance3D",
        "VoxelGI",
        "XRAnchor3D",
        "XRCamera3D",
        "XRController3D",
        "XRNode3D",
        "XROrigin3D",
    }
)

GODOT_CONTROL_CLASSES = frozenset(
    {
        "Control",
        "AspectRatioContainer",
        "BaseButton",
        "BoxContainer",
        "Button",
        "CenterContainer",
        "CheckBox",
        "CheckButton",
        "CodeEdit",
        "ColorPicker",
        "ColorPickerButton",
        "ColorRect",
        "Container",
        "FlowContainer",
        "FoldableContainer",
        "GraphEdit",
        "GraphElement",
        "GraphFrame",
        "GraphNode",
        "GridContainer",
        "HBoxContainer",
        "HFlowContainer",
        "HScrollBar",
        "HSeparator",
        "HSlider",
        "HSplitContainer",
        "ItemList",
        "Label",
        "LineEdit",
        "LinkButton",
        "MarginContainer",
        "MenuBar",
        "MenuButton",
        "NinePatchRect",
        "OptionButton",
        "Panel",
        "PanelContainer",
        "ProgressBar",
        "Range",
        "ReferenceRect",
        "RichTextLabel",
        "ScrollBar",
        "ScrollContainer",
        "Separator",
        "Slider",
        "SpinBox",
        "SplitContainer",
        "SubViewportContainer",
        "TabBar",
        "TabContainer",
        "TextEdit",
        "TextureButton",
        "TextureProgressBar",
        "TextureRect",
        "Tree",
        "VBoxContainer",
        "VFlowContainer",
        "VideoStreamPlayer",
        "VScrollBar",
        "VSeparator",
        "VSlider",
        "VSplitContainer",
    }
)

GODOT_NATIVE_CLASSES = (
    GODOT_CORE_CLASSES | GODOT_2D_CLASSES | GODOT_3D_CLASSES | GODOT_CONTROL_CLASSES
)


class ClassCatalog:
    """Answers whether a class name is defined by the engine itself."""

    def __init__(self, names: Iterable[str] = GODOT_NATIVE_CLASSES):
        self._names = frozenset(names)

    @property
    def names(self) -> AbstractSet[str]:
        return self._names

    def is_native(self, type_name: str) -> bool:
        return type_name in self._names

    def extended(self, names: Iterable[str]) -> "ClassCatalog":
        return ClassCatalog(self._names | frozenset(names))

    @classmethod
    def from_extension_api(cls, path: "str | Path") -> "ClassCatalog":
        """Build a catalog from the classes listed in an ``extension_api.json`` dump."""
        api_path = Path(path)
        if not api_path.exists():
            raise ConfigError(f"Extension API file not found: {api_path}")
        try:
            data = json.loads(api_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Extension API file is not valid JSON: {api_path}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Extension API file must contain a JSON object: {api_path}")

        names = set()
        for key in ("classes", "builtin_classes"):
            for entry in data.get(key, []):
                name = entry.get("name") if isinstance(entry, dict) else None
                if isinstance(name, str) and name:
                    names.add(name)
        if not names:
            raise ConfigError(f"No classes found in extension API file: {api_path}")
        return cls(names)
