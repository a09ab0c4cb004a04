"""Reader for the variant value grammar used by Godot text files.

Values appear in ``.tscn``/``.tres`` section headers and entries and in
``project.godot``. Parsed values map onto Python types:

* strings -> ``str``; ``&"name"`` -> :class:`StringName`; ``^"a/b"`` and
  ``NodePath("a/b")`` -> :class:`NodePath`
* ints, floats (``inf``, ``nan``), booleans and ``null``
* ``[...]`` -> ``list``; ``{k: v}`` -> ``dict``; ``Array[T]([...])`` and
  ``Packed*Array(...)`` -> ``list``; ``Dictionary[K, V]({...})`` -> ``dict``
* ``ExtResource("id")`` / ``SubResource("id")`` -> :class:`ResourceRef`
* ``Object(Class, "key": value, ...)`` -> :class:`ObjectValue`
* any other ``Name(args)`` -> :class:`Constructor`
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from scenegen.errors import SceneParseError


class StringName(str):
    pass


class NodePath(str):
    pass


@dataclass(frozen=True)
class ResourceRef:
    kind: str
    id: str

    @property
    def is_external(self) -> bool:
        return self.kind == "ExtResource"


@dataclass(frozen=True)
class Constructor:
    name: str
    args: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class ObjectValue:
    class_name: str
    properties: Dict[str, Any] = field(default_factory=dict, hash=False)


_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_HEX_RE = re.compile(r"[0-9A-Fa-f]+")
_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "a": "\a",
    "v": "\v",
    "0": "\0",
    '"': '"',
    "'": "'",
    "\\": "\\",
}
_FLOAT_WORDS = {
    "inf": math.inf,
    "inf_neg": -math.inf,
    "nan": math.nan,
}
_KEYWORDS = {"true": True, "false": False, "null": None, "nil": None}


class VariantReader:
    """Cursor over Godot text that reads variant values and punctuation."""

    def __init__(self, text: str, *, source: Optional[str] = None, pos: int = 0):
        self.text = text
        self.source = source
        self.pos = pos

    # Cursor helpers

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        if index < len(self.text):
            return self.text[index]
        return ""

    def skip_whitespace(self, *, newlines: bool = True) -> None:
        blanks = " \t\r\n" if newlines else " \t\r"
        while self.pos < len(self.text) and self.text[self.pos] in blanks:
            self.pos += 1

    def skip_line(self) -> None:
        end = self.text.find("\n", self.pos)
        self.pos = len(self.text) if end < 0 else end + 1

    def expect(self, char: str) -> None:
        self.skip_whitespace()
        if self.peek() != char:
            found = self.peek() or "end of input"
            raise self.error(f"Expected '{char}' but found '{found}'.")
        self.pos += 1

    def location(self, pos: Optional[int] = None) -> Tuple[int, int, str]:
        pos = self.pos if pos is None else pos
        line_start = self.text.rfind("\n", 0, pos) + 1
        line_end = self.text.find("\n", pos)
        if line_end < 0:
            line_end = len(self.text)
        line = self.text.count("\n", 0, pos) + 1
        return line, pos - line_start + 1, self.text[line_start:line_end].strip()

    def error(self, message: str, pos: Optional[int] = None) -> SceneParseError:
        line, column, code = self.location(pos)
        return SceneParseError(
            message,
            line=line,
            column=column,
            code=code or None,
            scene_path=self.source,
        )

    def read_identifier(self) -> str:
        match = _IDENT_RE.match(self.text, self.pos)
        if match is None:
            raise self.error("Expected an identifier.")
        self.pos = match.end()
        return match.group(0)

    # Values

    def read_value(self) -> Any:
        self.skip_whitespace()
        ch = self.peek()
        if not ch:
            raise self.error("Expected a value but reached end of input.")
        if ch == '"':
            return self.read_string()
        if ch == "&" and self.peek(1) == '"':
            self.pos += 1
            return StringName(self.read_string())
        if ch == "^" and self.peek(1) == '"':
            self.pos += 1
            return NodePath(self.read_string())
        if ch == "[":
            return self._read_array()
        if ch == "{":
            return self._read_dict()
        if ch in "-+" and self.text.startswith("inf", self.pos + 1):
            self.pos += 4
            return -math.inf if ch == "-" else math.inf
        if ch.isdigit() or (ch in "-+." and self.peek(1)[:1].isdigit()) or (
            ch in "-+" and self.peek(1) == "."
        ):
            return self._read_number()
        if ch == "_" or ch.isalpha():
            return self._read_word()
        raise self.error(f"Unexpected character '{ch}'.")

    def read_string(self) -> str:
        start = self.pos
        self.expect('"')
        out: List[str] = []
        while True:
            if self.at_end():
                raise self.error("Unterminated string literal.", start)
            ch = self.text[self.pos]
            self.pos += 1
            if ch == '"':
                return "".join(out)
            if ch != "\\":
                out.append(ch)
                continue
            escape = self.peek()
            self.pos += 1
            if escape in ("u", "U"):
                out.append(self._read_unicode_escape(4 if escape == "u" else 6))
                continue
            out.append(_ESCAPES.get(escape, escape))

    def _read_unicode_escape(self, width: int) -> str:
        # UTF-16 surrogate pairs arrive as two consecutive \u escapes.
        escape_pos = self.pos - 2
        code = self._read_hex(width, escape_pos)
        if 0xDC00 <= code <= 0xDFFF:
            raise self.error("Unpaired low surrogate in unicode escape.", escape_pos)
        if 0xD800 <= code <= 0xDBFF:
            if self.text[self.pos : self.pos + 2] != "\\u":
                raise self.error("Unpaired high surrogate in unicode escape.", escape_pos)
            self.pos += 2
            low = self._read_hex(4, self.pos - 2)
            if not 0xDC00 <= low <= 0xDFFF:
                raise self.error("Unpaired high surrogate in unicode escape.", escape_pos)
            code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
        try:
            return chr(code)
        except ValueError as exc:
            raise self.error("Invalid unicode escape.", escape_pos) from exc

    def _read_hex(self, width: int, escape_pos: int) -> int:
        digits = self.text[self.pos : self.pos + width]
        if _HEX_RE.fullmatch(digits) is None or len(digits) != width:
            raise self.error("Invalid unicode escape.", escape_pos)
        self.pos += width
        return int(digits, 16)

    def _read_number(self) -> Any:
        match = _NUMBER_RE.match(self.text, self.pos)
        if match is None:
            raise self.error("Invalid number literal.")
        self.pos = match.end()
        literal = match.group(0)
        if any(marker in literal for marker in ".eE"):
            return float(literal)
        return int(literal)

    def _read_array(self) -> List[Any]:
        items: List[Any] = []
        self.expect("[")
        while True:
            self.skip_whitespace()
            if self.peek() == "]":
                self.pos += 1
                return items
            items.append(self.read_value())
            self.skip_whitespace()
            if self.peek() == ",":
                self.pos += 1
                continue
            self.expect("]")
            return items

    def _read_dict(self) -> Dict[Any, Any]:
        items: Dict[Any, Any] = {}
        self.expect("{")
        while True:
            self.skip_whitespace()
            if self.peek() == "}":
                self.pos += 1
                return items
            key_pos = self.pos
            key = self.read_value()
            self.expect(":")
            value = self.read_value()
            try:
                items[key] = value
            except TypeError as exc:
                raise self.error("Dictionary key is not hashable.", key_pos) from exc
            self.skip_whitespace()
            if self.peek() == ",":
                self.pos += 1
                continue
            self.expect("}")
            return items

    def _read_word(self) -> Any:
        start = self.pos
        word = self.read_identifier()
        if word in _KEYWORDS:
            return _KEYWORDS[word]
        if word in _FLOAT_WORDS:
            return _FLOAT_WORDS[word]

        type_params: List[str] = []
        if self.peek() == "[":
            type_params = self._read_type_params()
        self.skip_whitespace()
        if self.peek() != "(":
            raise self.error(f"Unexpected identifier '{word}'.", start)

        if word == "Object":
            return self._read_object()

        args = self._read_call_args()
        if word in ("ExtResource", "SubResource"):
            if len(args) != 1:
                raise self.error(f"{word} takes exactly one id.", start)
            return ResourceRef(word, str(args[0]))
        if word == "NodePath":
            return NodePath(args[0] if args else "")
        if word == "StringName":
            return StringName(args[0] if args else "")
        if word in ("Array", "Dictionary") and type_params:
            if len(args) != 1:
                raise self.error(f"Typed {word} takes exactly one literal.", start)
            return args[0]
        if word.startswith("Packed") and word.endswith("Array"):
            return list(args)
        return Constructor(word, tuple(args))

    def _read_type_params(self) -> List[str]:
        params: List[str] = []
        self.expect("[")
        while True:
            self.skip_whitespace()
            params.append(self.read_identifier())
            self.skip_whitespace()
            if self.peek() == ",":
                self.pos += 1
                continue
            self.expect("]")
            return params

    def _read_call_args(self) -> List[Any]:
        args: List[Any] = []
        self.expect("(")
        while True:
            self.skip_whitespace()
            if self.peek() == ")":
                self.pos += 1
                return args
            args.append(self.read_value())
            self.skip_whitespace()
            if self.peek() == ",":
                self.pos += 1
                continue
            self.expect(")")
            return args

    def _read_object(self) -> ObjectValue:
        self.expect("(")
        self.skip_whitespace()
        class_name = self.read_identifier()
        properties: Dict[str, Any] = {}
        while True:
            self.skip_whitespace()
            if self.peek() == ")":
                self.pos += 1
                return ObjectValue(class_name, properties)
            self.expect(",")
            self.skip_whitespace()
            if self.peek() == ")":
                continue
            key = self.read_string()
            self.expect(":")
            properties[key] = self.read_value()


def parse_variant(text: str, *, source: Optional[str] = None) -> Any:
    """Parse exactly one variant value from ``text``."""
    reader = VariantReader(text, source=source)
    value = reader.read_value()
    reader.skip_whitespace()
    if not reader.at_end():
        raise reader.error("Unexpected trailing characters after value.")
    return value
