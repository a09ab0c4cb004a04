import json
from pathlib import Path
from typing import Any, Dict, Iterable, List

from scenegen.model import CodeModel, InputActionName, Outlet

MODELS_FILE_NAME = "scene_models.json"


def outlet_to_dict(outlet: Outlet) -> Dict[str, Any]:
    return {
        "node_path": list(outlet.node_path),
        "identifier": outlet.identifier,
        "type": outlet.type_name,
        "options": list(outlet.options),
    }


def code_model_to_dict(model: CodeModel) -> Dict[str, Any]:
    """Serialize a :class:`CodeModel` into the JSON debug payload."""
    return {
        "type": model.root_type_name,
        "resource_path": model.resource_path,
        "groups": [
            {
                "type": group.type_name,
                "outlets": [outlet_to_dict(outlet) for outlet in group.outlets],
            }
            for group in model.groups
        ],
        "animation_players": [
            {
                "path_key": player.player_path_key,
                "identifier": player.player_identifier,
                "animations": list(player.animation_names),
            }
            for player in model.animation_players
        ],
    }


def export_models(
    models: Iterable[CodeModel],
    actions: Iterable[InputActionName],
    output_dir: "str | Path",
) -> Path:
    """Write every code model and the input actions to ``scene_models.json``."""
    payload: Dict[str, List[Any]] = {
        "scenes": [code_model_to_dict(model) for model in models],
        "input_actions": [
            {"name": action.raw_value, "symbol": action.symbol} for action in actions
        ],
    }
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / MODELS_FILE_NAME
    path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    return path
