"""Public Python API for SceneGen.

The package exposes a small stable surface for turning Godot scenes into
typed SwiftGodot bindings. Text-format scene loading lives in
``scenegen.text_resource``; the batch driver and CLI live in ``scenegen.build``.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from scenegen.build import GenerationReport, generate, main
from scenegen.class_catalog import ClassCatalog
from scenegen.code_model import build_code_model, build_input_actions
from scenegen.config import SceneGenConfig, build_config
from scenegen.errors import (
    InheritedSceneError,
    NoStateError,
    NotACustomNodeError,
    SceneDescriptionError,
    SceneGenError,
)
from scenegen.model import CodeModel, InputActionName, Outlet, SceneDescription
from scenegen.naming import path_to_symbol, snake_to_symbol, token_name
from scenegen.outlets import extract_outlets
from scenegen.renderer import SwiftRenderer
from scenegen.scene import describe_scene
from scenegen.text_resource import TextSceneLoader

try:
    __version__: str = version("scenegen")
except PackageNotFoundError:  # pragma: no cover - editable local fallback
    __version__ = "0.1.0"


def about(*, print_output: bool = True) -> str:
    """Return and optionally print the naming and ordering contract.

    Args:
        print_output: Whether to print the returned summary.

    Returns:
        Human-readable summary string.

    Example:
        >>> from scenegen import about
        >>> "Node accessors" in about(print_output=False)
        True
    """
    text = (
        f"SceneGen {__version__}\n"
        "Node accessors: path segments are lower-camel-cased one by one and joined "
        "with '_' (Player/HealthBar -> player_healthBar).\n"
        "Unique names: %Name nodes are named after the node alone, qualified only by "
        "the instanced scenes around them.\n"
        "Input actions and animations: snake_case becomes camelCase (move_left -> moveLeft).\n"
        "Ordering: accessor groups are sorted by node type; nodes keep scene order.\n"
        "Skipped scenes: inherited scenes and scenes whose root is a native engine class."
    )
    if print_output:
        print(text)
    return text


__all__ = [
    "__version__",
    "about",
    "ClassCatalog",
    "CodeModel",
    "GenerationReport",
    "InheritedSceneError",
    "InputActionName",
    "NoStateError",
    "NotACustomNodeError",
    "Outlet",
    "SceneDescription",
    "SceneDescriptionError",
    "SceneGenConfig",
    "SceneGenError",
    "SwiftRenderer",
    "TextSceneLoader",
    "build_code_model",
    "build_config",
    "build_input_actions",
    "describe_scene",
    "extract_outlets",
    "generate",
    "main",
    "path_to_symbol",
    "snake_to_symbol",
    "token_name",
]
