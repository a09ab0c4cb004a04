from typing import Optional

from scenegen.class_catalog import ClassCatalog
from scenegen.errors import (
    InheritedSceneError,
    NoNodesError,
    NoStateError,
    NotACustomNodeError,
    scene_context,
)
from scenegen.model import SceneDescription
from scenegen.outlets import extract_outlets
from scenegen.provider import PackedScene

ROOT_INDEX = 0


def describe_scene(
    scene: PackedScene,
    catalog: Optional[ClassCatalog] = None,
) -> SceneDescription:
    """Build the :class:`SceneDescription` of a loaded scene.

    Raises:
        NoStateError: The scene carries no node graph.
        NoNodesError: The graph is empty.
        InheritedSceneError: The root only overrides another scene, so there is
            no type of its own to extend.
        NotACustomNodeError: The root is a native engine class.
    """
    catalog = catalog or ClassCatalog()
    with scene_context(scene.resource_path):
        graph = scene.state
        if graph is None:
            raise NoStateError()
        if graph.node_count() == 0:
            raise NoNodesError()

        name = graph.node_name(ROOT_INDEX)
        root_type = graph.node_type(ROOT_INDEX)
        if not root_type:
            raise InheritedSceneError()
        if catalog.is_native(root_type):
            raise NotACustomNodeError(
                f"Scene root '{name}' is the native class '{root_type}', not a custom node."
            )

        return SceneDescription(
            name=name,
            root_type_name=root_type,
            source_path=scene.resource_path,
            outlets=tuple(extract_outlets(graph)),
        )
