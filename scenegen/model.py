import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from scenegen.naming import drop_prefix, snake_to_symbol

ANIMATION_PLAYER_TYPE = "AnimationPlayer"
INPUT_PROPERTY_PREFIX = "input/"


@dataclass(frozen=True)
class Outlet:
    node_path: Tuple[str, ...]
    identifier: str
    type_name: str
    options: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.node_path:
            raise ValueError("Outlet node path must not be empty.")
        if not self.type_name:
            raise ValueError("Outlet type name must not be empty.")

    @property
    def joined_path(self) -> str:
        return "/".join(self.node_path)


@dataclass(frozen=True)
class AnimationPlayerDescription:
    player_path_key: str
    player_identifier: str
    animation_names: Tuple[str, ...] = ()

    @classmethod
    def from_outlet(cls, outlet: Outlet) -> "AnimationPlayerDescription":
        return cls(
            player_path_key="".join(outlet.node_path),
            player_identifier=outlet.identifier,
            animation_names=outlet.options,
        )


@dataclass(frozen=True)
class SceneDescription:
    name: str
    root_type_name: str
    source_path: str
    outlets: Tuple[Outlet, ...] = ()


@dataclass(frozen=True)
class OutletGroup:
    type_name: str
    outlets: Tuple[Outlet, ...]


@dataclass(frozen=True)
class CodeModel:
    root_type_name: str
    resource_path: str
    groups: Tuple[OutletGroup, ...] = ()
    animation_players: Tuple[AnimationPlayerDescription, ...] = ()


@dataclass(frozen=True)
class PropertyName:
    """A project settings property name such as ``input/jump``."""

    raw_value: str

    @property
    def is_input(self) -> bool:
        return self.raw_value.startswith(INPUT_PROPERTY_PREFIX)

    @property
    def has_platform_specifier(self) -> bool:
        # Platform variants like ``input/jump.macos`` only trigger the root action.
        return "." in self.raw_value


@dataclass(frozen=True)
class InputActionName:
    raw_value: str
    symbol: str = field(default="")

    def __post_init__(self):
        if not self.symbol:
            object.__setattr__(self, "symbol", snake_to_symbol(self.raw_value))

    @classmethod
    def from_property(cls, name: "PropertyName | str") -> Optional["InputActionName"]:
        prop = name if isinstance(name, PropertyName) else PropertyName(name)
        if not prop.is_input or prop.has_platform_specifier:
            return None
        return cls(drop_prefix(prop.raw_value, INPUT_PROPERTY_PREFIX))


@dataclass(frozen=True)
class SourceFile:
    text: str
    file_name: str

    def write_to(self, folder: "str | Path") -> Path:
        """Atomically write the file into ``folder`` and return its path."""
        out_dir = Path(folder)
        out_dir.mkdir(parents=True, exist_ok=True)
        target = out_dir / self.file_name
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.file_name}.", dir=out_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                handle.write(self.text)
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        return target
