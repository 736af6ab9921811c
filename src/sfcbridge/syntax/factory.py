"""Constructors for synthesized syntax nodes.

Every constructor returns nodes flagged ``synthesized`` with no position;
callers attach provenance with :func:`set_text_range` where a node stands in
for original text.
"""

from __future__ import annotations

from typing import Iterable, Sequence, TypeVar

from .nodes import Kind, Node, TextRange

__all__ = [
    "create_array",
    "create_arrow_function",
    "create_block",
    "create_call",
    "create_expression_statement",
    "create_formal_parameters",
    "create_function_expression",
    "create_identifier",
    "create_import_declaration",
    "create_object",
    "create_pair",
    "create_parenthesized",
    "create_property_access",
    "create_property_identifier",
    "create_string_literal",
    "create_this",
    "set_text_range",
    "token",
]

_N = TypeVar("_N", bound=Node)

# Leading tokens that turn an expression statement into something else.
_STATEMENT_AMBIGUOUS = frozenset({"{", "function", "class"})


def token(text: str) -> Node:
    return Node(kind=text, text=text, named=False, synthesized=True)


def set_text_range(node: _N, pos: int | TextRange, end: int | None = None) -> _N:
    """Assign a source range to ``node`` and return it.

    Example:
        >>> set_text_range(create_identifier("x"), 4, 5).range
        TextRange(pos=4, end=5)
    """

    if isinstance(pos, TextRange):
        node.pos, node.end = pos.pos, pos.end
    else:
        node.pos = pos
        node.end = pos if end is None else end
    return node


def create_identifier(name: str) -> Node:
    return Node(kind=Kind.IDENTIFIER, text=name, synthesized=True)


def create_property_identifier(name: str) -> Node:
    return Node(kind=Kind.PROPERTY_IDENTIFIER, text=name, synthesized=True)


def create_this() -> Node:
    return Node(kind=Kind.THIS, text="this", synthesized=True)


def create_string_literal(value: str) -> Node:
    """Return a single-quoted string literal for ``value``.

    Example:
        >>> create_string_literal("it's").text
        "'it\\\\'s'"
    """

    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return Node(kind=Kind.STRING, text=f"'{escaped}'", synthesized=True)


def create_parenthesized(expression: Node) -> Node:
    return Node(
        kind=Kind.PARENTHESIZED_EXPRESSION,
        children=[token("("), expression, token(")")],
        synthesized=True,
    )


def create_property_access(expression: Node, name: str | Node) -> Node:
    """Return ``expression.name``."""

    prop = create_property_identifier(name) if isinstance(name, str) else name
    return Node(
        kind=Kind.MEMBER_EXPRESSION,
        children=[expression, token("."), prop],
        synthesized=True,
    )


def _comma_separated(
    items: Iterable[Node], opening: str, closing: str
) -> list[Node]:
    children = [token(opening)]
    for index, item in enumerate(items):
        if index:
            children.append(token(","))
        children.append(item)
    children.append(token(closing))
    return children


def _as_list_element(expression: Node) -> Node:
    if expression.kind == Kind.SEQUENCE_EXPRESSION:
        return create_parenthesized(expression)
    return expression


def create_import_declaration(
    module: str,
    *,
    default: str | Node | None = None,
    named: Sequence[str | Node] = (),
) -> Node:
    """Return ``import default from 'module'`` or ``import {a, b} from ...``."""

    if default is None and not named:
        raise ValueError("An import needs a default binding or named specifiers")

    clause_children: list[Node] = []
    if default is not None:
        clause_children.append(
            create_identifier(default) if isinstance(default, str) else default
        )
    if named:
        if clause_children:
            clause_children.append(token(","))
        specifiers = [
            Node(
                kind=Kind.IMPORT_SPECIFIER,
                children=[
                    create_identifier(item) if isinstance(item, str) else item
                ],
                synthesized=True,
            )
            for item in named
        ]
        clause_children.append(
            Node(
                kind=Kind.NAMED_IMPORTS,
                children=_comma_separated(specifiers, "{", "}"),
                synthesized=True,
            )
        )

    clause = Node(
        kind=Kind.IMPORT_CLAUSE, children=clause_children, synthesized=True
    )
    return Node(
        kind=Kind.IMPORT_STATEMENT,
        children=[
            token("import"),
            clause,
            token("from"),
            create_string_literal(module),
            token(";"),
        ],
        synthesized=True,
    )


def create_arguments(arguments: Iterable[Node]) -> Node:
    return Node(
        kind=Kind.ARGUMENTS,
        children=_comma_separated(
            (_as_list_element(arg) for arg in arguments), "(", ")"
        ),
        synthesized=True,
    )


def create_call(callee: Node, arguments: Iterable[Node]) -> Node:
    return Node(
        kind=Kind.CALL_EXPRESSION,
        children=[callee, create_arguments(arguments)],
        synthesized=True,
    )


def create_formal_parameters(parameters: Iterable[Node]) -> Node:
    return Node(
        kind=Kind.FORMAL_PARAMETERS,
        children=_comma_separated(parameters, "(", ")"),
        synthesized=True,
    )


def create_block(statements: Iterable[Node]) -> Node:
    return Node(
        kind=Kind.STATEMENT_BLOCK,
        children=[token("{"), *statements, token("}")],
        synthesized=True,
    )


def create_function_expression(
    parameters: Iterable[Node], statements: Iterable[Node]
) -> Node:
    """Return an anonymous ``function (...) { ... }`` expression."""

    return Node(
        kind=Kind.FUNCTION_EXPRESSION,
        children=[
            token("function"),
            create_formal_parameters(parameters),
            create_block(statements),
        ],
        synthesized=True,
    )


def create_arrow_function(parameters: Iterable[Node], body: Node) -> Node:
    if body.kind == Kind.OBJECT or body.kind == Kind.SEQUENCE_EXPRESSION:
        body = create_parenthesized(body)
    return Node(
        kind=Kind.ARROW_FUNCTION,
        children=[create_formal_parameters(parameters), token("=>"), body],
        synthesized=True,
    )


def create_array(elements: Iterable[Node]) -> Node:
    return Node(
        kind=Kind.ARRAY,
        children=_comma_separated(
            (_as_list_element(element) for element in elements), "[", "]"
        ),
        synthesized=True,
    )


def create_pair(key: Node, value: Node) -> Node:
    return Node(
        kind=Kind.PAIR,
        children=[key, token(":"), _as_list_element(value)],
        synthesized=True,
    )


def create_object(pairs: Iterable[Node]) -> Node:
    return Node(
        kind=Kind.OBJECT,
        children=_comma_separated(pairs, "{", "}"),
        synthesized=True,
    )


def _leftmost_token(node: Node) -> str | None:
    current = node
    while current.children:
        current = current.children[0]
    return current.text


def create_expression_statement(expression: Node) -> Node:
    """Return ``expression;``, parenthesized where a statement would misread it.

    Example:
        >>> stmt = create_expression_statement(create_object([]))
        >>> stmt.children[0].kind
        'parenthesized_expression'
    """

    if _leftmost_token(expression) in _STATEMENT_AMBIGUOUS:
        expression = create_parenthesized(expression)
    return Node(
        kind=Kind.EXPRESSION_STATEMENT,
        children=[expression, token(";")],
        synthesized=True,
    )
