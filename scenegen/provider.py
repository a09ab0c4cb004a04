"""Scene graph provider boundary.

The core pipeline only talks to scene data through :class:`SceneGraph`. A graph
is one loaded scene file; nodes are addressed by index, index 0 being the root.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

UNIQUE_NAME_IN_OWNER = "unique_name_in_owner"
LIBRARIES = "libraries"


@dataclass(frozen=True)
class AnimationLibrary:
    """A named collection of animation clips, as attached to an AnimationPlayer."""

    animation_names: Tuple[str, ...] = ()
    resource_path: Optional[str] = None


class SceneGraph:
    """Read-only view over the nodes of one loaded scene."""

    resource_path: str = ""

    def node_count(self) -> int:
        raise NotImplementedError

    def node_name(self, index: int) -> str:
        raise NotImplementedError

    def node_type(self, index: int) -> str:
        """Return the node's class name; an empty string marks a scene instance."""
        raise NotImplementedError

    def node_path(self, index: int) -> str:
        """Return the engine node path, ``"."`` for the root and ``"./A/B"`` below it."""
        raise NotImplementedError

    def node_property(self, index: int, name: str) -> Any:
        """Return a stored property value, or ``None`` when the node does not set it."""
        raise NotImplementedError

    def nested_graph(self, index: int) -> Optional["SceneGraph"]:
        """Return the graph of the scene instanced at ``index``, if it can be obtained."""
        raise NotImplementedError

    def is_unique_name_in_owner(self, index: int) -> bool:
        return self.node_property(index, UNIQUE_NAME_IN_OWNER) is True

    def first_animation_library(self, index: int) -> Optional[AnimationLibrary]:
        """Return the first library of the node's ``libraries`` property.

        Only that library is looked at; the others are never loaded.
        """
        return first_library(self.node_property(index, LIBRARIES))


@dataclass(frozen=True)
class PackedScene:
    resource_path: str
    state: Optional[SceneGraph]


class SceneLoader:
    """Loads scene files; one loader is shared by every scene of a run."""

    def load_scene(self, path: str) -> PackedScene:
        raise NotImplementedError


@dataclass
class StaticNode:
    name: str
    type_name: str = ""
    parent: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict)
    instance: Optional[SceneGraph] = None


class StaticSceneGraph(SceneGraph):
    """In-memory scene graph built from :class:`StaticNode` records.

    ``parent`` follows the text scene convention: ``None`` for the root,
    ``"."`` for direct children of the root, ``"A/B"`` deeper down.
    """

    def __init__(self, nodes: Sequence[StaticNode], resource_path: str = ""):
        self.nodes = list(nodes)
        self.resource_path = resource_path

    def node_count(self) -> int:
        return len(self.nodes)

    def node_name(self, index: int) -> str:
        return self.nodes[index].name

    def node_type(self, index: int) -> str:
        return self.nodes[index].type_name

    def node_path(self, index: int) -> str:
        return engine_node_path(self.nodes[index].name, self.nodes[index].parent)

    def node_property(self, index: int, name: str) -> Any:
        return self.nodes[index].properties.get(name)

    def nested_graph(self, index: int) -> Optional[SceneGraph]:
        return self.nodes[index].instance


def engine_node_path(name: str, parent: Optional[str]) -> str:
    if parent is None:
        return "."
    if parent in ("", "."):
        return f"./{name}"
    return f"./{parent}/{name}"


def first_library(libraries: Any) -> Optional[AnimationLibrary]:
    """Return the first library of a ``libraries`` property value."""
    if not isinstance(libraries, Mapping) or not libraries:
        return None
    library = next(iter(libraries.values()))
    if isinstance(library, AnimationLibrary):
        return library
    return None
