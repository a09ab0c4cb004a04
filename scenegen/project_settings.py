from pathlib import Path
from typing import List

from scenegen.errors import ProjectSettingsError, SceneLoadError
from scenegen.text_resource import parse_sections

PROJECT_FILE_NAME = "project.godot"

# Actions the engine defines for every project; project.godot only lists them
# when they are overridden.
BUILTIN_INPUT_ACTIONS = (
    "input/ui_accept",
    "input/ui_select",
    "input/ui_cancel",
    "input/ui_focus_next",
    "input/ui_focus_prev",
    "input/ui_left",
    "input/ui_right",
    "input/ui_up",
    "input/ui_down",
    "input/ui_page_up",
    "input/ui_page_down",
    "input/ui_home",
    "input/ui_end",
    "input/ui_cut",
    "input/ui_copy",
    "input/ui_paste",
    "input/ui_undo",
    "input/ui_redo",
)


def parse_property_names(text: str, *, source: str = PROJECT_FILE_NAME) -> List[str]:
    names: List[str] = []
    for section in parse_sections(text, source=source):
        for key in section.entries:
            names.append(f"{section.tag}/{key}" if section.tag else key)
    return names


def read_property_names(
    project_root: "str | Path",
    *,
    include_builtin_actions: bool = False,
) -> List[str]:
    """Return the project settings property names declared in ``project.godot``.

    Names are ``section/key`` in file order. With ``include_builtin_actions`` the
    engine's default ``ui_*`` actions come first.
    """
    project_file = Path(project_root) / PROJECT_FILE_NAME
    try:
        text = project_file.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ProjectSettingsError(f"Project file not found: {project_file}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ProjectSettingsError(f"Could not read {project_file}: {exc}") from exc

    try:
        names = parse_property_names(text, source=str(project_file))
    except SceneLoadError as exc:
        raise ProjectSettingsError(str(exc)) from exc

    if include_builtin_actions:
        return list(BUILTIN_INPUT_ACTIONS) + names
    return names
