"""Configuration utilities."""

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from scenegen.errors import ConfigError
from scenegen.files import DEFAULT_IGNORE_MARKER, DEFAULT_SCENE_EXTENSIONS

CONFIG_FILE_NAMES = ("scenegen.yaml", "scenegen.yml", "scenegen.json")
ENV_EXTENSION_API = "SCENEGEN_EXTENSION_API"


@dataclass(frozen=True)
class SceneGenConfig:
    project_path: Path
    output_path: Path
    scene_extensions: Tuple[str, ...] = DEFAULT_SCENE_EXTENSIONS
    ignore_marker: str = DEFAULT_IGNORE_MARKER
    extension_api: Optional[Path] = None
    native_classes: Tuple[str, ...] = ()
    include_builtin_actions: bool = True
    clean_output: bool = True
    dump_models: bool = False


_FILE_KEYS = {
    "scene_extensions",
    "ignore_marker",
    "extension_api",
    "native_classes",
    "include_builtin_actions",
    "clean_output",
    "dump_models",
}


def load_config(path: "str | Path") -> Dict[str, Any]:
    """
    Load configuration from JSON or YAML file.

    Args:
        path: Path to configuration file

    Returns:
        Configuration dictionary
    """
    path = Path(path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            if path.suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            elif path.suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigError(f"Unsupported config format: {path.suffix}")
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Could not parse config file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping.")
    return data


def find_project_config(project_path: "str | Path") -> Optional[Path]:
    for name in CONFIG_FILE_NAMES:
        candidate = Path(project_path) / name
        if candidate.is_file():
            return candidate
    return None


def get_env_config() -> Dict[str, Any]:
    """Get configuration from environment variables."""
    env: Dict[str, Any] = {}
    extension_api = os.environ.get(ENV_EXTENSION_API)
    if extension_api:
        env["extension_api"] = extension_api
    return env


def apply_overrides(config: SceneGenConfig, overrides: Mapping[str, Any]) -> SceneGenConfig:
    unknown = sorted(set(overrides) - _FILE_KEYS)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    for key, value in overrides.items():
        if key in ("scene_extensions", "native_classes"):
            if isinstance(value, str) or not isinstance(value, (list, tuple)):
                raise ConfigError(f"Config key '{key}' must be a list of strings.")
            values[key] = tuple(str(item) for item in value)
        elif key == "extension_api":
            values[key] = None if value is None else _resolve(config.project_path, value)
        elif key in ("include_builtin_actions", "clean_output", "dump_models"):
            if not isinstance(value, bool):
                raise ConfigError(f"Config key '{key}' must be true or false.")
            values[key] = value
        else:
            values[key] = str(value)
    return replace(config, **values)


def _resolve(base: Path, value: Any) -> Path:
    path = Path(str(value)).expanduser()
    return path if path.is_absolute() else base / path


def build_config(
    project_path: "str | Path",
    output_path: "str | Path",
    *,
    config_path: "str | Path | None" = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> SceneGenConfig:
    """Assemble the run configuration.

    Precedence, lowest first: defaults, the config file (``config_path`` or a
    ``scenegen.yaml``/``scenegen.yml``/``scenegen.json`` in the project root),
    environment variables, then ``overrides`` (command line flags).
    """
    config = SceneGenConfig(
        project_path=Path(project_path).resolve(),
        output_path=Path(output_path).resolve(),
    )
    file_path = Path(config_path) if config_path is not None else find_project_config(
        config.project_path
    )
    if file_path is not None:
        config = apply_overrides(config, load_config(file_path))
    config = apply_overrides(config, get_env_config())
    if overrides:
        config = apply_overrides(config, overrides)
    return config
