from typing import Dict, Iterable, List

from scenegen.model import (
    ANIMATION_PLAYER_TYPE,
    AnimationPlayerDescription,
    CodeModel,
    InputActionName,
    Outlet,
    OutletGroup,
    PropertyName,
    SceneDescription,
)


def group_outlets(outlets: Iterable[Outlet]) -> List[OutletGroup]:
    """Group outlets by type name.

    Groups are ordered by type name (code point order); outlets keep their
    discovery order inside a group.
    """
    grouped: Dict[str, List[Outlet]] = {}
    for outlet in outlets:
        grouped.setdefault(outlet.type_name, []).append(outlet)
    return [
        OutletGroup(type_name=type_name, outlets=tuple(grouped[type_name]))
        for type_name in sorted(grouped)
    ]


def build_code_model(description: SceneDescription) -> CodeModel:
    animation_players = tuple(
        AnimationPlayerDescription.from_outlet(outlet)
        for outlet in description.outlets
        if outlet.type_name == ANIMATION_PLAYER_TYPE
    )
    return CodeModel(
        root_type_name=description.root_type_name,
        resource_path=description.source_path,
        groups=tuple(group_outlets(description.outlets)),
        animation_players=animation_players,
    )


def build_input_actions(property_names: Iterable["str | PropertyName"]) -> List[InputActionName]:
    """Turn project settings property names into input actions.

    Only ``input/`` properties without a platform suffix are kept. Actions whose
    symbols collide keep the first occurrence.
    """
    actions: List[InputActionName] = []
    seen = set()
    for name in property_names:
        action = InputActionName.from_property(name)
        if action is None or not action.symbol or action.symbol in seen:
            continue
        seen.add(action.symbol)
        actions.append(action)
    return actions
