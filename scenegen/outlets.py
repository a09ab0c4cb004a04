import warnings
from dataclasses import dataclass, field
from typing import List, Tuple

from scenegen.errors import SceneLoadError, format_scene_diagnostic
from scenegen.model import ANIMATION_PLAYER_TYPE, Outlet
from scenegen.naming import path_to_symbol
from scenegen.provider import SceneGraph


@dataclass
class _Frame:
    graph: SceneGraph
    path_prefix: Tuple[str, ...]
    next_index: int = 0
    ancestors: Tuple[str, ...] = field(default_factory=tuple)


def own_path_segments(node_path: str) -> Tuple[str, ...]:
    """Split an engine node path such as ``"./A/B"`` into ``("A", "B")``."""
    if node_path == ".":
        return ()
    if node_path.startswith("./"):
        node_path = node_path[2:]
    return tuple(segment for segment in node_path.split("/") if segment)


def extract_outlets(graph: SceneGraph) -> List[Outlet]:
    """Collect the outlets below the root of ``graph``.

    Nodes are visited depth first in index order. Scene instances are expanded
    in place: their nodes are addressed through the instance's own path, and the
    instanced scene's root becomes an outlet at that path.
    """
    results: List[Outlet] = []
    if graph.node_count() == 0:
        return results

    stack = [_Frame(graph, (), next_index=1, ancestors=(graph.resource_path,))]
    while stack:
        frame = stack[-1]
        if frame.next_index >= frame.graph.node_count():
            stack.pop()
            continue
        index = frame.next_index
        frame.next_index += 1

        nested = _visit_node(frame, index, results)
        if nested is not None:
            stack.append(nested)
    return results


def _visit_node(frame: _Frame, index: int, results: List[Outlet]) -> "_Frame | None":
    graph = frame.graph
    path = frame.path_prefix + own_path_segments(graph.node_path(index))
    if not path:
        raise SceneLoadError(
            f"Node '{graph.node_name(index)}' at index {index} resolves to the scene root."
        )
    type_name = graph.node_type(index)

    if graph.is_unique_name_in_owner(index):
        naming_path = frame.path_prefix + (graph.node_name(index),)
    else:
        naming_path = path

    if not type_name:
        return _nested_frame(frame, index, path)

    options: Tuple[str, ...] = ()
    if type_name == ANIMATION_PLAYER_TYPE:
        options = _animation_names(graph, index, path)
    results.append(
        Outlet(
            node_path=path,
            identifier=path_to_symbol(naming_path),
            type_name=type_name,
            options=options,
        )
    )
    return None


def _nested_frame(frame: _Frame, index: int, path: Tuple[str, ...]) -> "_Frame | None":
    try:
        nested = frame.graph.nested_graph(index)
    except SceneLoadError as exc:
        warnings.warn(
            format_scene_diagnostic(f"Couldn't load instanced scene: {exc}", node_path=path)
        )
        return None
    if nested is None:
        warnings.warn(format_scene_diagnostic("Couldn't get type at path.", node_path=path))
        return None
    if nested.resource_path and nested.resource_path in frame.ancestors:
        warnings.warn(
            format_scene_diagnostic(
                f"Scene '{nested.resource_path}' instances itself; skipping.",
                node_path=path,
            )
        )
        return None
    return _Frame(nested, path, ancestors=frame.ancestors + (nested.resource_path,))


def _animation_names(graph: SceneGraph, index: int, path: Tuple[str, ...]) -> Tuple[str, ...]:
    # Only the first library is exposed.
    try:
        library = graph.first_animation_library(index)
    except SceneLoadError as exc:
        warnings.warn(
            format_scene_diagnostic(f"Couldn't load animation library: {exc}", node_path=path)
        )
        return ()
    if library is None:
        return ()
    return tuple(library.animation_names)
