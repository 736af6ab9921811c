"""Render syntax trees back to JavaScript text."""

from __future__ import annotations

from .nodes import Kind, Node, SourceFile

__all__ = ["Printer", "print_file", "print_node"]

_STATEMENT_LISTS = frozenset({Kind.PROGRAM, "class_body", "switch_body"})
_OPEN_TIGHT = ("(", "[", ".", "?.", "...", "${")
_CLOSE_TIGHT = (")", "]", ".", "?.", ",", ";")
_TIGHT_PAREN_PARENTS = frozenset(
    {
        Kind.CALL_EXPRESSION,
        Kind.FUNCTION_EXPRESSION,
        "new_expression",
        "generator_function",
        "method_definition",
    }
)
_UNARY_PREFIXES = frozenset({"!", "~"})
_UPDATE_OPERATORS = frozenset({"++", "--"})


class Printer:
    """Structural printer with verbatim output for untouched subtrees.

    A subtree that came from parsing ``source_text`` and contains no
    synthesized node is emitted exactly as written, comments included.
    Everything else is rendered from its tokens.
    """

    def __init__(self, source_text: str | None = None) -> None:
        self._source_text = source_text

    def print_file(self, source_file: SourceFile) -> str:
        self._source_text = source_file.text
        body = "\n".join(
            self._print(statement)[0] for statement in source_file.statements
        )
        return f"{body}\n" if body else ""

    def print_node(self, node: Node) -> str:
        return self._print(node)[0]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _print(self, node: Node) -> tuple[str, bool]:
        if node.is_leaf:
            text = node.text or ""
            return text, not node.synthesized

        printed = [self._print(child) for child in node.children]
        pristine = not node.synthesized and all(flag for _, flag in printed)
        if pristine and self._source_text is not None and node.has_position:
            return self._source_text[node.pos : node.end], True

        pieces = [text for text, _ in printed]
        if node.kind in _STATEMENT_LISTS:
            return "\n".join(piece for piece in pieces if piece), pristine
        if node.kind == Kind.STATEMENT_BLOCK:
            return self._block(node, pieces), pristine
        if node.kind == Kind.TEMPLATE_STRING:
            return "".join(pieces), pristine
        text = self._join(node, pieces)
        if node.kind == Kind.EXPRESSION_STATEMENT and not text.endswith(";"):
            text += ";"
        return text, pristine

    @staticmethod
    def _block(node: Node, pieces: list[str]) -> str:
        inner = [
            piece
            for child, piece in zip(node.children, pieces)
            if child.named and piece
        ]
        if not inner:
            return "{}"
        return "{\n" + "\n".join(inner) + "\n}"

    @staticmethod
    def _join(node: Node, pieces: list[str]) -> str:
        out = ""
        for piece in pieces:
            if not piece:
                continue
            if out and Printer._needs_space(node, out, piece):
                out += " "
            out += piece
        return out

    @staticmethod
    def _needs_space(node: Node, before: str, after: str) -> bool:
        if before.endswith(_OPEN_TIGHT) or before in _UNARY_PREFIXES:
            return False
        if after.startswith(_CLOSE_TIGHT):
            return False
        if node.kind == "update_expression" and (
            before in _UPDATE_OPERATORS or after in _UPDATE_OPERATORS
        ):
            return False
        if after.startswith(":") and node.kind == Kind.PAIR:
            return False
        if after.startswith("(") and node.kind in _TIGHT_PAREN_PARENTS:
            return False
        if after.startswith("[") and node.kind == "subscript_expression":
            return False
        return True


def print_file(source_file: SourceFile) -> str:
    """Render ``source_file`` to text."""

    return Printer().print_file(source_file)


def print_node(node: Node, source_text: str | None = None) -> str:
    """Render a single node, slicing untouched subtrees from ``source_text``."""

    return Printer(source_text).print_node(node)
