"""Identifier normalization for engine-native names.

Two grammars live here and are kept apart on purpose:

* :func:`snake_to_symbol` turns one engine name such as ``move_left`` into a
  camel-cased symbol (``moveLeft``). Used for input actions and clip names.
* :func:`path_to_symbol` turns a node path such as ``["Player", "HealthBar"]``
  into ``player_healthBar``: every segment is normalized on its own and the
  segments stay separated by ``_``.
"""

from typing import Iterable


def token_name(value: str) -> str:
    """Lower-case an all-caps token, otherwise lower-case its first letter.

    >>> token_name("HEALTH"), token_name("HealthBar"), token_name("health")
    ('health', 'healthBar', 'health')
    """
    if value == value.upper():
        return value.lower()
    return value[:1].lower() + value[1:]


def _upper_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def snake_to_symbol(value: str) -> str:
    parts = [part for part in value.split("_") if part]
    if not parts:
        return ""
    return token_name(parts[0]) + "".join(_upper_first(part) for part in parts[1:])


def path_to_symbol(segments: Iterable[str]) -> str:
    return "_".join(token_name(segment) for segment in segments)


def drop_prefix(value: str, prefix: str) -> str:
    if prefix and value.startswith(prefix):
        return value[len(prefix) :]
    return value
