from collections import Counter
from typing import Iterable, List, Sequence

from scenegen.errors import DuplicateSymbolError, RenderError
from scenegen.model import (
    AnimationPlayerDescription,
    CodeModel,
    InputActionName,
    OutletGroup,
    SourceFile,
)
from scenegen.naming import snake_to_symbol

SHARED_FILE_NAME = "SceneGenShared.swift"
INPUT_ACTIONS_FILE_NAME = "InputMapHelpers.swift"
SCENE_FILE_SUFFIX = "+SceneInterface.swift"

INDENT = "    "

SWIFT_KEYWORDS = frozenset(
    {
        "associatedtype", "class", "deinit", "enum", "extension", "fileprivate",
        "func", "import", "init", "inout", "internal", "let", "open", "operator",
        "private", "precedencegroup", "protocol", "public", "rethrows", "static",
        "struct", "subscript", "typealias", "var", "break", "case", "catch",
        "continue", "default", "defer", "do", "else", "fallthrough", "for",
        "guard", "if", "in", "repeat", "return", "throw", "switch", "where",
        "while", "Any", "as", "await", "false", "is", "nil", "self", "Self",
        "super", "throws", "true", "try",
    }
)

_NODE_LOOKUP = """\
func node<NodeType: NodeProtocol>(_ nodeAccessor: NodeAccessor<NodeType>) -> NodeType {
    guard let node = getNodeOrNull(path: .init(stringLiteral: nodeAccessor.path)) else {
        GD.pushError("Tried to access \\(nodeAccessor.path) on \\(description) but no node was found at that path.")
        return NodeType()
    }

    guard let node = node as? NodeType else {
        GD.pushError("Tried to access \\(nodeAccessor.path) on \\(description) but the item at that path is a \\(node), not a \\(NodeType.self)")
        return NodeType()
    }

    return node
}"""

_INPUT_HELPERS = """\
extension Input {
    static func isActionPressed(_ action: InputActionName) -> Bool {
        isActionPressed(action: action.rawValue)
    }

    static func isActionJustPressed(_ action: InputActionName) -> Bool {
        isActionJustPressed(action: action.rawValue)
    }

    static func getAxis(negative: InputActionName, positive: InputActionName) -> Double {
        getAxis(negativeAction: negative.rawValue, positiveAction: positive.rawValue)
    }
}

extension InputEvent {
    func isActionPressed(_ action: InputActionName) -> Bool {
        isActionPressed(action: action.rawValue)
    }
}"""


class SwiftRenderer:
    """Renders code models into SwiftGodot source files."""

    def render_scene(self, model: CodeModel) -> SourceFile:
        if not model.root_type_name:
            raise RenderError("Cannot render a scene without a root type.")
        root = model.root_type_name
        _check_unique(
            f"{root} animation name types",
            [_animation_type(player) for player in model.animation_players],
        )
        out = [self._emit_header(f"from {model.resource_path}")]
        out.append(self._emit_scene_extension(model))
        for group in model.groups:
            out.append(self._emit_accessor_group(root, group))
        for player in model.animation_players:
            out.extend(self._emit_animation_player(root, player))
        return SourceFile(
            text="\n\n".join(out) + "\n",
            file_name=f"{root}{SCENE_FILE_SUFFIX}",
        )

    def render_shared(self) -> SourceFile:
        out = [
            self._emit_header(),
            _block("protocol NodeProtocol", ["init()"]),
            _conformance("Node", "NodeProtocol"),
        ]
        return SourceFile(text="\n\n".join(out) + "\n", file_name=SHARED_FILE_NAME)

    def render_input_actions(self, actions: Sequence[InputActionName]) -> SourceFile:
        symbols = [swift_identifier(action.symbol) for action in actions]
        _check_unique("InputActionName", symbols)
        constants = [
            f"static let {symbol} = Self({swift_string(action.raw_value)})"
            for symbol, action in zip(symbols, actions)
        ]
        out = [
            self._emit_header(),
            _block("extension InputActionName", constants),
            _raw_value_struct("struct InputActionName"),
            _conformance("InputActionName", "Equatable"),
            _INPUT_HELPERS,
        ]
        return SourceFile(text="\n\n".join(out) + "\n", file_name=INPUT_ACTIONS_FILE_NAME)

    def _emit_header(self, origin: str = "") -> str:
        origin_text = f" {origin}" if origin else ""
        return (
            f"// generated by SceneGen{origin_text} - do not edit directly\n\n"
            "import SwiftGodot"
        )

    def _emit_scene_extension(self, model: CodeModel) -> str:
        accessor = _block(
            "struct NodeAccessor<NodeType: NodeProtocol>",
            ["let path: String", "", *_block("init(_ path: String)", ["self.path = path"]).splitlines()],
        )
        body: List[str] = []
        body.extend(accessor.splitlines())
        body.append("")
        body.extend(_NODE_LOOKUP.splitlines())
        body.append("")
        body.append(f"public static let resourcePath = {swift_string(model.resource_path)}")
        for player in model.animation_players:
            body.append("")
            body.extend(_raw_value_struct(f"struct {_animation_type(player)}").splitlines())
        return _block(f"extension {model.root_type_name}", body)

    def _emit_accessor_group(self, root: str, group: OutletGroup) -> str:
        symbols = [swift_identifier(outlet.identifier) for outlet in group.outlets]
        _check_unique(f"{root}.NodeAccessor<{group.type_name}>", symbols)
        constants = [
            f"static let {symbol} = Self({swift_string(outlet.joined_path)})"
            for symbol, outlet in zip(symbols, group.outlets)
        ]
        return _block(f"extension {root}.NodeAccessor<{group.type_name}>", constants)

    def _emit_animation_player(self, root: str, player: AnimationPlayerDescription) -> List[str]:
        animation_type = f"{root}.{_animation_type(player)}"
        symbols = [swift_identifier(snake_to_symbol(name)) for name in player.animation_names]
        _check_unique(animation_type, symbols)
        constants = [
            f"static let {symbol} = Self({swift_string(name)})"
            for symbol, name in zip(symbols, player.animation_names)
        ]
        play = _block(
            f"func playAnimation(_ named: {animation_type})",
            [f"node(.{swift_identifier(player.player_identifier)}).play(name: named.rawValue)"],
        )
        return [
            _conformance(animation_type, "Equatable"),
            _block(f"extension {animation_type}", constants),
            _block(f"extension {root}", play.splitlines()),
        ]


def swift_identifier(name: str) -> str:
    """Make ``name`` usable as a Swift identifier."""
    chars = [ch if ch.isalnum() or ch == "_" else "_" for ch in name]
    identifier = "".join(chars) or "_"
    if identifier[0].isdigit():
        identifier = f"_{identifier}"
    if identifier in SWIFT_KEYWORDS:
        return f"`{identifier}`"
    return identifier


def swift_string(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def _animation_type(player: AnimationPlayerDescription) -> str:
    return swift_identifier(f"{player.player_path_key}AnimationName").strip("`")


def _block(header: str, body: Iterable[str]) -> str:
    lines = list(body)
    if not lines:
        return f"{header} {{}}"
    indented = [f"{INDENT}{line}" if line else "" for line in lines]
    return "\n".join([f"{header} {{", *indented, "}"])


def _raw_value_struct(header: str) -> str:
    init = _block("init(_ rawValue: StringName)", ["self.rawValue = rawValue"])
    return _block(header, ["let rawValue: StringName", "", *init.splitlines()])


def _conformance(type_name: str, protocol: str) -> str:
    return f"extension {type_name}: {protocol} {{}}"


def _check_unique(scope: str, symbols: Sequence[str]) -> None:
    repeated = [symbol for symbol, count in Counter(symbols).items() if count > 1]
    if repeated:
        raise DuplicateSymbolError(scope, repeated)
