"""Mutable JavaScript syntax tree used for synthesis and printing.

Node kinds follow the tree-sitter JavaScript grammar so trees built by the
factory and trees produced by re-parsing printed text share one vocabulary.
Unnamed leaves are punctuation and keyword tokens; they are kept so printing
needs no per-kind knowledge.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Iterator

__all__ = [
    "NO_POSITION",
    "Kind",
    "Node",
    "ScriptKind",
    "SourceFile",
    "TextRange",
]

NO_POSITION = -1


class Kind(StrEnum):
    """Node kinds the bridge creates or inspects."""

    PROGRAM = "program"
    IMPORT_STATEMENT = "import_statement"
    IMPORT_CLAUSE = "import_clause"
    NAMED_IMPORTS = "named_imports"
    IMPORT_SPECIFIER = "import_specifier"
    EXPORT_STATEMENT = "export_statement"
    EXPRESSION_STATEMENT = "expression_statement"
    STATEMENT_BLOCK = "statement_block"
    IDENTIFIER = "identifier"
    PROPERTY_IDENTIFIER = "property_identifier"
    SHORTHAND_PROPERTY_IDENTIFIER = "shorthand_property_identifier"
    SHORTHAND_PROPERTY_IDENTIFIER_PATTERN = (
        "shorthand_property_identifier_pattern"
    )
    STRING = "string"
    TEMPLATE_STRING = "template_string"
    THIS = "this"
    OBJECT = "object"
    PAIR = "pair"
    ARRAY = "array"
    CALL_EXPRESSION = "call_expression"
    ARGUMENTS = "arguments"
    MEMBER_EXPRESSION = "member_expression"
    PARENTHESIZED_EXPRESSION = "parenthesized_expression"
    SEQUENCE_EXPRESSION = "sequence_expression"
    FUNCTION_EXPRESSION = "function_expression"
    ARROW_FUNCTION = "arrow_function"
    FORMAL_PARAMETERS = "formal_parameters"
    CLASS = "class"
    ERROR = "ERROR"


class ScriptKind(StrEnum):
    """Classification of a script document's language."""

    UNKNOWN = "unknown"
    JS = "js"
    JSX = "jsx"
    TS = "ts"
    TSX = "tsx"
    JSON = "json"

    @property
    def is_ts_like(self) -> bool:
        return self in (ScriptKind.TS, ScriptKind.TSX)


@dataclass(frozen=True, slots=True)
class TextRange:
    """Half-open character range ``[pos, end)``."""

    pos: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.pos

    def contains(self, offset: int) -> bool:
        return self.pos <= offset <= self.end

    def covers(self, other: "TextRange") -> bool:
        return self.pos <= other.pos and other.end <= self.end


@dataclass(eq=False)
class Node:
    """A syntax node; leaves carry ``text``."""

    kind: str
    pos: int = NO_POSITION
    end: int = NO_POSITION
    children: list["Node"] = field(default_factory=list)
    text: str | None = None
    named: bool = True
    synthesized: bool = False

    @property
    def has_position(self) -> bool:
        return self.pos >= 0

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def range(self) -> TextRange:
        return TextRange(self.pos, self.end)

    @property
    def named_children(self) -> list["Node"]:
        return [child for child in self.children if child.named]

    def first_named(self, kind: str) -> "Node | None":
        for child in self.children:
            if child.named and child.kind == kind:
                return child
        return None

    def walk(self) -> Iterator["Node"]:
        """Yield this node and its descendants in pre-order."""

        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def replace_child(self, old: "Node", new: "Node") -> None:
        for index, child in enumerate(self.children):
            if child is old:
                self.children[index] = new
                return
        raise ValueError(f"{old.kind} is not a child of {self.kind}")


@dataclass(eq=False)
class SourceFile:
    """One analyzable document.

    Instances hash by identity and accept weak references, so per-document
    bookkeeping can live in weak side tables.
    """

    file_name: str
    text: str
    version: str = "0"
    script_kind: ScriptKind = ScriptKind.JS
    statements: list[Node] = field(default_factory=list)
    external_module_indicator: Node | None = None
    tree: Any = field(default=None, repr=False)

    @property
    def is_external_module(self) -> bool:
        return self.external_module_indicator is not None

    def walk(self) -> Iterator[Node]:
        for statement in self.statements:
            yield from statement.walk()
