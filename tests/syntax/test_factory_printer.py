"""Tests for node construction and structural printing."""

from __future__ import annotations

from sfcbridge.syntax import (
    NO_POSITION,
    Kind,
    SourceFile,
    TextRange,
    create_array,
    create_arrow_function,
    create_block,
    create_call,
    create_expression_statement,
    create_function_expression,
    create_identifier,
    create_import_declaration,
    create_object,
    create_pair,
    create_property_access,
    create_property_identifier,
    create_string_literal,
    create_this,
    print_file,
    print_node,
    set_text_range,
)


def test_factory_nodes_are_synthesized_without_position() -> None:
    node = create_identifier("value")

    assert node.synthesized
    assert node.pos == NO_POSITION
    assert not node.has_position


def test_set_text_range_accepts_offsets_and_ranges() -> None:
    node = set_text_range(create_identifier("a"), 3, 4)
    assert node.range == TextRange(3, 4)

    other = set_text_range(create_identifier("b"), TextRange(7, 9))
    assert (other.pos, other.end) == (7, 9)

    empty = set_text_range(create_identifier("c"), 0)
    assert empty.range == TextRange(0, 0)


def test_default_import_prints_module_specifier() -> None:
    node = create_import_declaration("./Hello.vue", default="__Component")

    assert print_node(node) == "import __Component from './Hello.vue';"


def test_named_import_prints_specifier_list() -> None:
    node = create_import_declaration("bridge", named=["a", "b"])

    assert print_node(node) == "import { a, b } from 'bridge';"


def test_string_literal_escapes_quotes() -> None:
    assert create_string_literal("it's").text == "'it\\'s'"


def test_call_with_function_expression() -> None:
    call = create_call(
        create_identifier("render"),
        [
            create_identifier("__Component"),
            create_function_expression(
                [],
                [
                    create_expression_statement(
                        create_property_access(create_this(), "msg")
                    )
                ],
            ),
        ],
    )

    assert print_node(call) == (
        "render(__Component, function() {\nthis.msg;\n})"
    )


def test_expression_statement_parenthesizes_object_literal() -> None:
    statement = create_expression_statement(create_object([]))

    assert statement.children[0].kind == Kind.PARENTHESIZED_EXPRESSION
    assert print_node(statement) == "({ });"


def test_arrow_function_over_array_and_object() -> None:
    over_array = create_arrow_function(
        [create_identifier("item")], create_array([create_identifier("item")])
    )
    pair = create_pair(
        create_property_identifier("title"), create_identifier("t")
    )
    over_object = create_arrow_function([], create_object([pair]))

    assert print_node(over_array) == "(item) => [item]"
    assert print_node(over_object) == "() => ({ title: t })"


def test_empty_block_prints_braces() -> None:
    assert print_node(create_block([])) == "{}"


def test_print_file_joins_statements_with_newlines() -> None:
    source_file = SourceFile(file_name="a.js", text="")
    source_file.statements = [
        create_import_declaration("m", default="x"),
        create_expression_statement(
            create_call(create_identifier("x"), [])
        ),
    ]

    assert print_file(source_file) == "import x from 'm';\nx();\n"


def test_print_file_of_empty_document_is_empty() -> None:
    assert print_file(SourceFile(file_name="a.js", text="")) == ""
