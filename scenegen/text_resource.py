"""Godot text resource reader and the text-format scene graph provider.

Handles ``.tscn``/``.escn`` scenes, ``.tres`` resources and the INI-like
``project.godot`` file. All of them are a sequence of ``[tag attr=value ...]``
sections followed by ``key = value`` entries whose values use the variant
grammar from :mod:`scenegen.variant`.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from scenegen.errors import SceneLoadError
from scenegen.provider import (
    LIBRARIES,
    AnimationLibrary,
    PackedScene,
    SceneGraph,
    SceneLoader,
    engine_node_path,
    first_library,
)
from scenegen.variant import ResourceRef, VariantReader

RESOURCE_PREFIX = "res://"
BINARY_SUFFIXES = (".scn", ".res")
ANIMATION_LIBRARY_TYPE = "AnimationLibrary"


@dataclass
class Section:
    tag: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    entries: Dict[str, Any] = field(default_factory=dict)
    line: int = 1


def parse_sections(text: str, *, source: Optional[str] = None) -> List[Section]:
    """Split Godot text into sections; entries before any header go to tag ``""``."""
    reader = VariantReader(text, source=source)
    sections: List[Section] = []
    current: Optional[Section] = None

    while True:
        reader.skip_whitespace()
        if reader.at_end():
            return sections
        ch = reader.peek()
        if ch in ";#":
            reader.skip_line()
            continue
        if ch == "[":
            current = _read_header(reader)
            sections.append(current)
            continue

        key = _read_key(reader)
        reader.expect("=")
        value = reader.read_value()
        if current is None:
            current = Section("")
            sections.append(current)
        current.entries[key] = value


def _read_header(reader: VariantReader) -> Section:
    line = reader.location()[0]
    reader.expect("[")
    reader.skip_whitespace()
    section = Section(reader.read_identifier(), line=line)
    while True:
        reader.skip_whitespace()
        if reader.peek() == "]":
            reader.pos += 1
            return section
        if reader.at_end():
            raise reader.error("Unterminated section header.")
        name = reader.read_identifier()
        reader.expect("=")
        section.attributes[name] = reader.read_value()


def _read_key(reader: VariantReader) -> str:
    if reader.peek() == '"':
        return reader.read_string()
    start = reader.pos
    text = reader.text
    while reader.pos < len(text) and text[reader.pos] not in "=\n":
        reader.pos += 1
    key = text[start : reader.pos].strip()
    if not key or reader.peek() != "=":
        raise reader.error("Expected 'key = value'.", start)
    return key


@dataclass(frozen=True)
class ExternalResource:
    id: str
    type_name: str
    path: str
    uid: Optional[str] = None


@dataclass
class InternalResource:
    id: str
    type_name: str
    properties: Dict[str, Any] = field(default_factory=dict)


@dataclass
class NodeRecord:
    name: str
    type_name: str = ""
    parent: Optional[str] = None
    instance: Optional[ResourceRef] = None
    properties: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TextResource:
    tag: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    ext_resources: Dict[str, ExternalResource] = field(default_factory=dict)
    sub_resources: Dict[str, InternalResource] = field(default_factory=dict)
    nodes: List[NodeRecord] = field(default_factory=list)
    resource: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_scene(self) -> bool:
        return self.tag == "gd_scene"

    @property
    def resource_type(self) -> str:
        return str(self.attributes.get("type", ""))


def read_text_resource(text: str, *, source: Optional[str] = None) -> TextResource:
    sections = parse_sections(text, source=source)
    if not sections or sections[0].tag not in ("gd_scene", "gd_resource"):
        raise SceneLoadError("Not a Godot text scene or resource.", scene_path=source)

    header = sections[0]
    result = TextResource(tag=header.tag, attributes=dict(header.attributes))
    for section in sections[1:]:
        attrs = section.attributes
        if section.tag == "ext_resource":
            rid = str(attrs.get("id", ""))
            result.ext_resources[rid] = ExternalResource(
                id=rid,
                type_name=str(attrs.get("type", "")),
                path=str(attrs.get("path", "")),
                uid=attrs.get("uid"),
            )
        elif section.tag == "sub_resource":
            rid = str(attrs.get("id", ""))
            result.sub_resources[rid] = InternalResource(
                id=rid,
                type_name=str(attrs.get("type", "")),
                properties=dict(section.entries),
            )
        elif section.tag == "node":
            name = attrs.get("name")
            if not isinstance(name, str) or not name:
                raise SceneLoadError(
                    f"Node section on line {section.line} has no name.",
                    scene_path=source,
                )
            parent = attrs.get("parent")
            if result.nodes and parent is None:
                raise SceneLoadError(
                    f"Node '{name}' on line {section.line} has no parent; only the "
                    "scene root may omit it.",
                    scene_path=source,
                )
            instance = attrs.get("instance")
            result.nodes.append(
                NodeRecord(
                    name=name,
                    type_name=str(attrs.get("type", "")),
                    parent=parent,
                    instance=instance if isinstance(instance, ResourceRef) else None,
                    properties=dict(section.entries),
                )
            )
        elif section.tag == "resource":
            result.resource.update(section.entries)
    return result


def library_animation_names(properties: Dict[str, Any]) -> tuple[str, ...]:
    # The engine lists library clips alphabetically.
    data = properties.get("_data")
    if not isinstance(data, dict):
        return ()
    return tuple(sorted(str(name) for name in data))


class TextSceneGraph(SceneGraph):
    def __init__(self, resource: TextResource, resource_path: str, loader: "TextSceneLoader"):
        self.resource = resource
        self.resource_path = resource_path
        self._loader = loader

    def node_count(self) -> int:
        return len(self.resource.nodes)

    def node_name(self, index: int) -> str:
        return self.resource.nodes[index].name

    def node_type(self, index: int) -> str:
        return self.resource.nodes[index].type_name

    def node_path(self, index: int) -> str:
        record = self.resource.nodes[index]
        return engine_node_path(record.name, record.parent)

    def node_property(self, index: int, name: str) -> Any:
        return self._resolve(self.resource.nodes[index].properties.get(name))

    def first_animation_library(self, index: int) -> Optional[AnimationLibrary]:
        libraries = self.resource.nodes[index].properties.get(LIBRARIES)
        if not isinstance(libraries, dict) or not libraries:
            return None
        return first_library({"": self._resolve(next(iter(libraries.values())))})

    def nested_graph(self, index: int) -> Optional[SceneGraph]:
        ref = self.resource.nodes[index].instance
        if ref is None or not ref.is_external:
            return None
        entry = self._external(ref)
        return self._loader.load_scene(entry.path, relative_to=self.resource_path).state

    def _external(self, ref: ResourceRef) -> ExternalResource:
        entry = self.resource.ext_resources.get(ref.id)
        if entry is None:
            raise SceneLoadError(
                f"Unknown ExtResource id '{ref.id}'.", scene_path=self.resource_path
            )
        return entry

    def _resolve(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {key: self._resolve(item) for key, item in value.items()}
        if isinstance(value, list):
            return [self._resolve(item) for item in value]
        if isinstance(value, ResourceRef):
            return self._resolve_reference(value)
        return value

    def _resolve_reference(self, ref: ResourceRef) -> Any:
        if ref.is_external:
            entry = self._external(ref)
            if entry.type_name == ANIMATION_LIBRARY_TYPE:
                return self._loader.load_animation_library(
                    entry.path, relative_to=self.resource_path
                )
            return entry

        sub = self.resource.sub_resources.get(ref.id)
        if sub is None:
            raise SceneLoadError(
                f"Unknown SubResource id '{ref.id}'.", scene_path=self.resource_path
            )
        if sub.type_name == ANIMATION_LIBRARY_TYPE:
            return AnimationLibrary(
                animation_names=library_animation_names(sub.properties),
                resource_path=f"{self.resource_path}::{sub.id}",
            )
        return sub


class TextSceneLoader(SceneLoader):
    """Loads text scenes and resources from a project folder.

    Loads are cached by resource path, so one loader plays the role of the
    engine session for a whole generation run.
    """

    def __init__(self, project_root: "str | Path"):
        self.project_root = Path(project_root).resolve()
        self._scenes: Dict[str, PackedScene] = {}
        self._libraries: Dict[str, AnimationLibrary] = {}

    def to_resource_path(self, path: str, *, relative_to: Optional[str] = None) -> str:
        if path.startswith("uid://"):
            raise SceneLoadError(
                f"Cannot resolve '{path}' without a path.", scene_path=relative_to
            )
        if path.startswith(RESOURCE_PREFIX):
            tail = path[len(RESOURCE_PREFIX) :]
        elif Path(path).is_absolute():
            try:
                tail = Path(path).resolve().relative_to(self.project_root).as_posix()
            except ValueError as exc:
                raise SceneLoadError(
                    f"'{path}' is outside the project at {self.project_root}."
                ) from exc
        else:
            base_dir = ""
            if relative_to is not None:
                base_dir = posixpath.dirname(relative_to[len(RESOURCE_PREFIX) :])
            tail = posixpath.join(base_dir, path)

        tail = posixpath.normpath(tail.lstrip("/"))
        if tail == ".." or tail.startswith("../"):
            raise SceneLoadError(f"'{path}' is outside the project.", scene_path=relative_to)
        return RESOURCE_PREFIX + ("" if tail == "." else tail)

    def file_path(self, resource_path: str) -> Path:
        return self.project_root / resource_path[len(RESOURCE_PREFIX) :]

    def load_scene(self, path: str, *, relative_to: Optional[str] = None) -> PackedScene:
        resource_path = self.to_resource_path(path, relative_to=relative_to)
        cached = self._scenes.get(resource_path)
        if cached is not None:
            return cached
        resource = self._read(resource_path)
        state = TextSceneGraph(resource, resource_path, self) if resource.is_scene else None
        packed = PackedScene(resource_path=resource_path, state=state)
        self._scenes[resource_path] = packed
        return packed

    def load_animation_library(
        self, path: str, *, relative_to: Optional[str] = None
    ) -> AnimationLibrary:
        resource_path = self.to_resource_path(path, relative_to=relative_to)
        cached = self._libraries.get(resource_path)
        if cached is not None:
            return cached
        resource = self._read(resource_path)
        if resource.resource_type != ANIMATION_LIBRARY_TYPE:
            raise SceneLoadError(
                f"Expected an {ANIMATION_LIBRARY_TYPE} resource, found "
                f"'{resource.resource_type or resource.tag}'.",
                scene_path=resource_path,
            )
        library = AnimationLibrary(
            animation_names=library_animation_names(resource.resource),
            resource_path=resource_path,
        )
        self._libraries[resource_path] = library
        return library

    def _read(self, resource_path: str) -> TextResource:
        file_path = self.file_path(resource_path)
        if file_path.suffix in BINARY_SUFFIXES:
            raise SceneLoadError(
                "Binary resources are not supported; save it in text format.",
                scene_path=resource_path,
            )
        try:
            text = file_path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise SceneLoadError("Resource file not found.", scene_path=resource_path) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise SceneLoadError(
                f"Could not read resource: {exc}", scene_path=resource_path
            ) from exc
        return read_text_resource(text, source=resource_path)
