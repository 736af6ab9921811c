"""tree-sitter backed parsing into the :mod:`sfcbridge.syntax` node model."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from .nodes import Kind, Node, ScriptKind, SourceFile

__all__ = [
    "MissingParserError",
    "SyntaxParseError",
    "SyntaxParser",
    "byte_offsets",
    "grammar_for",
]

_GRAMMARS: dict[ScriptKind, str] = {
    ScriptKind.TS: "typescript",
    ScriptKind.TSX: "tsx",
}
# Older grammar releases name function expressions ``function``.
_KIND_ALIASES = {"function": Kind.FUNCTION_EXPRESSION.value}
_COLLAPSED = frozenset({"string", "regex", "jsx_text"})
_DROPPED = frozenset({"comment", "html_comment"})
_GAP_FILLED = frozenset({Kind.TEMPLATE_STRING.value})
_MODULE_INDICATORS = frozenset({Kind.IMPORT_STATEMENT, Kind.EXPORT_STATEMENT})


class MissingParserError(RuntimeError):
    """Raised when tree-sitter grammars are unavailable."""


class SyntaxParseError(ValueError):
    """Raised when a standalone expression or statement list is malformed."""

    def __init__(self, message: str, *, offset: int = 0) -> None:
        super().__init__(message)
        self.offset = offset


def grammar_for(script_kind: ScriptKind | None) -> str:
    return _GRAMMARS.get(script_kind or ScriptKind.JS, "javascript")


def byte_offsets(text: str) -> Sequence[int]:
    """Return the UTF-8 byte offset at which each character starts."""

    offsets = [0]
    total = 0
    for char in text:
        total += len(char.encode("utf-8"))
        offsets.append(total)
    return offsets


def _default_parser_factory(language: str) -> Any:
    try:
        from tree_sitter_language_pack import get_parser
    except ImportError as exc:  # pragma: no cover - dependency missing
        raise MissingParserError(
            "sfcbridge requires tree-sitter-language-pack for parsing."
        ) from exc

    try:
        return get_parser(language)
    except Exception as exc:  # pragma: no cover - grammar load failure
        raise MissingParserError(
            f"tree-sitter parser for {language!r} is unavailable: {exc}"
        ) from exc


@dataclass(slots=True)
class _Converter:
    """Translate a tree-sitter tree into :class:`Node` objects."""

    source: bytes
    offsets: Sequence[int]
    shift: int = 0
    synthesized: bool = False

    def char_index(self, byte_offset: int) -> int:
        return max(0, bisect_right(self.offsets, byte_offset) - 1) + self.shift

    def slice(self, start: int, end: int) -> str:
        return self.source[start:end].decode("utf-8", errors="replace")

    def convert(self, ts_node: Any) -> Node | None:
        kind = ts_node.type
        if kind in _DROPPED:
            return None
        if ts_node.is_named:
            kind = _KIND_ALIASES.get(kind, kind)

        node = Node(
            kind=kind,
            pos=self.char_index(ts_node.start_byte),
            end=self.char_index(ts_node.end_byte),
            named=ts_node.is_named,
            synthesized=self.synthesized,
        )
        if ts_node.child_count == 0 or kind in _COLLAPSED:
            node.text = self.slice(ts_node.start_byte, ts_node.end_byte)
            return node

        cursor = ts_node.start_byte
        for child in ts_node.children:
            if kind in _GAP_FILLED and child.start_byte > cursor:
                node.children.append(self._gap(cursor, child.start_byte))
            converted = self.convert(child)
            if converted is not None:
                node.children.append(converted)
            cursor = max(cursor, child.end_byte)
        if kind in _GAP_FILLED and ts_node.end_byte > cursor:
            node.children.append(self._gap(cursor, ts_node.end_byte))
        return node

    def _gap(self, start: int, end: int) -> Node:
        return Node(
            kind="string_fragment",
            pos=self.char_index(start),
            end=self.char_index(end),
            text=self.slice(start, end),
            named=False,
            synthesized=self.synthesized,
        )


class SyntaxParser:
    """Parse JavaScript-family text with cached tree-sitter parsers."""

    def __init__(
        self, parser_factory: Callable[[str], Any] | None = None
    ) -> None:
        self._factory = parser_factory or _default_parser_factory
        self._parsers: dict[str, Any] = {}

    def parser(self, language: str) -> Any:
        if language not in self._parsers:
            self._parsers[language] = self._factory(language)
        return self._parsers[language]

    def parse_tree(
        self,
        source: bytes,
        script_kind: ScriptKind | None = None,
        old_tree: Any = None,
    ) -> Any:
        parser = self.parser(grammar_for(script_kind))
        if old_tree is None:
            return parser.parse(source)
        return parser.parse(source, old_tree)

    def build_source_file(
        self,
        file_name: str,
        text: str,
        tree: Any,
        *,
        version: str = "0",
        script_kind: ScriptKind = ScriptKind.JS,
    ) -> SourceFile:
        converter = _Converter(
            source=text.encode("utf-8"), offsets=byte_offsets(text)
        )
        statements: list[Node] = []
        for child in tree.root_node.children:
            converted = converter.convert(child)
            if converted is not None:
                statements.append(converted)
        indicator = next(
            (st for st in statements if st.kind in _MODULE_INDICATORS), None
        )
        return SourceFile(
            file_name=file_name,
            text=text,
            version=version,
            script_kind=script_kind,
            statements=statements,
            external_module_indicator=indicator,
            tree=tree,
        )

    def parse_source_file(
        self,
        file_name: str,
        text: str,
        *,
        version: str = "0",
        script_kind: ScriptKind = ScriptKind.JS,
    ) -> SourceFile:
        """Parse ``text`` into a fresh :class:`SourceFile`."""

        tree = self.parse_tree(text.encode("utf-8"), script_kind)
        return self.build_source_file(
            file_name,
            text,
            tree,
            version=version,
            script_kind=script_kind,
        )

    def parse_expression(self, text: str, offset: int = 0) -> Node:
        """Parse one expression whose first character sits at ``offset``.

        The returned nodes are flagged synthesized: their positions point into
        the text the expression was lifted from, not into any source file.

        Raises:
            SyntaxParseError: If ``text`` is not exactly one expression.
        """

        statements = self._parse_fragment(f"({text})", shift=offset - 1)
        if (
            len(statements) != 1
            or statements[0].kind != Kind.EXPRESSION_STATEMENT
        ):
            raise SyntaxParseError(
                f"Not an expression: {text!r}", offset=offset
            )
        inner = statements[0].named_children
        if len(inner) != 1 or inner[0].kind != Kind.PARENTHESIZED_EXPRESSION:
            raise SyntaxParseError(
                f"Not an expression: {text!r}", offset=offset
            )
        expressions = inner[0].named_children
        if len(expressions) != 1:
            raise SyntaxParseError(
                f"Not an expression: {text!r}", offset=offset
            )
        return expressions[0]

    def parse_statements(self, text: str, offset: int = 0) -> list[Node]:
        """Parse a statement list whose first character sits at ``offset``.

        Raises:
            SyntaxParseError: If ``text`` contains syntax errors.
        """

        return self._parse_fragment(text, shift=offset)

    def _parse_fragment(self, text: str, *, shift: int) -> list[Node]:
        source = text.encode("utf-8")
        tree = self.parse_tree(source)
        if tree.root_node.has_error:
            raise SyntaxParseError(f"Syntax error in {text!r}", offset=shift)
        converter = _Converter(
            source=source,
            offsets=byte_offsets(text),
            shift=shift,
            synthesized=True,
        )
        statements: list[Node] = []
        for child in tree.root_node.named_children:
            converted = converter.convert(child)
            if converted is not None and converted.kind != "empty_statement":
                statements.append(converted)
        return statements
