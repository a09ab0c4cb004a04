import contextvars
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence


_CURRENT_SCENE_PATH: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "scenegen_current_scene_path", default=None
)


def _format_with_context(
    message: str,
    *,
    scene_path: Optional[str] = None,
    node_path: Optional[Sequence[str]] = None,
) -> str:
    scene_path = scene_path if scene_path is not None else _CURRENT_SCENE_PATH.get()
    details = []
    if scene_path:
        details.append(f"Scene: {scene_path}")
    if node_path:
        details.append(f"Node: {'/'.join(node_path)}")
    if not details:
        return message
    return f"{message}\n" + "\n".join(details)


def format_scene_diagnostic(
    message: str,
    *,
    node_path: Optional[Sequence[str]] = None,
) -> str:
    """Attach the scene being processed (and optionally a node path) to a diagnostic."""
    return _format_with_context(message, node_path=node_path)


@contextmanager
def scene_context(scene_path: Optional[str]) -> Iterator[None]:
    token = _CURRENT_SCENE_PATH.set(scene_path)
    try:
        yield
    finally:
        _CURRENT_SCENE_PATH.reset(token)


class SceneGenError(Exception):
    """Base SceneGen error."""


class SceneLoadError(SceneGenError):
    """Raised when a scene or resource file cannot be loaded."""

    def __init__(self, message: str, *, scene_path: Optional[str] = None):
        super().__init__(_format_with_context(message, scene_path=scene_path))


class SceneParseError(SceneLoadError):
    """Raised when a Godot text resource is malformed."""

    def __init__(
        self,
        message: str,
        *,
        line: int,
        column: int,
        code: Optional[str] = None,
        scene_path: Optional[str] = None,
    ):
        details = [f"Location: line {line}, column {column}"]
        if code:
            details.append(f"Code: {code}")
        super().__init__(f"{message}\n" + "\n".join(details), scene_path=scene_path)
        self.line = line
        self.column = column


class SceneDescriptionError(SceneGenError):
    """Raised when a loaded scene cannot be turned into a scene description.

    ``is_skip`` marks outcomes that are expected for scenes SceneGen does not
    generate code for, as opposed to malformed input.
    """

    is_skip = False
    reason = "invalid scene"

    def __init__(self, message: Optional[str] = None, *, scene_path: Optional[str] = None):
        super().__init__(_format_with_context(message or self.reason, scene_path=scene_path))


class NoStateError(SceneDescriptionError):
    reason = "Scene has no state."


class NoNodesError(SceneDescriptionError):
    reason = "Scene has no nodes."


class InheritedSceneError(SceneDescriptionError):
    is_skip = True
    reason = "Scene inherits from another scene and has no type of its own to extend."


class NotACustomNodeError(SceneDescriptionError):
    is_skip = True
    reason = "Scene root is a native engine class, not a custom node."


class ProjectSettingsError(SceneGenError):
    """Raised when project settings cannot be read."""


class ConfigError(SceneGenError):
    """Raised when the SceneGen configuration is invalid."""


class RenderError(SceneGenError):
    """Raised when a code model cannot be rendered."""


class DuplicateSymbolError(RenderError):
    """Raised when two generated constants in one scope share a symbol."""

    def __init__(self, scope: str, symbols: Sequence[str]):
        joined = ", ".join(sorted(symbols))
        super().__init__(
            _format_with_context(f"Duplicate symbols in {scope}: {joined}.")
        )
        self.scope = scope
        self.symbols = tuple(symbols)


class FatalGenerationError(SceneGenError):
    """Raised when output shared by every generated scene cannot be produced."""
