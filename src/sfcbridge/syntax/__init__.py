"""JavaScript syntax model, node factory, printer and tree-sitter parser."""

from __future__ import annotations

from .factory import (
    create_array,
    create_arrow_function,
    create_block,
    create_call,
    create_expression_statement,
    create_formal_parameters,
    create_function_expression,
    create_identifier,
    create_import_declaration,
    create_object,
    create_pair,
    create_parenthesized,
    create_property_access,
    create_property_identifier,
    create_string_literal,
    create_this,
    set_text_range,
    token,
)
from .nodes import NO_POSITION, Kind, Node, ScriptKind, SourceFile, TextRange
from .parser import (
    MissingParserError,
    SyntaxParseError,
    SyntaxParser,
    byte_offsets,
    grammar_for,
)
from .printer import Printer, print_file, print_node

__all__ = [
    "NO_POSITION",
    "Kind",
    "MissingParserError",
    "Node",
    "Printer",
    "ScriptKind",
    "SourceFile",
    "SyntaxParseError",
    "SyntaxParser",
    "TextRange",
    "byte_offsets",
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
    "grammar_for",
    "print_file",
    "print_node",
    "set_text_range",
    "token",
]
