"""Tests for default-export rewriting in component scripts."""

from __future__ import annotations

import pytest

from sfcbridge.bridge import find_default_export_object, rewrite_script
from sfcbridge.syntax import Kind, Printer, SyntaxParser


@pytest.fixture()
def parser() -> SyntaxParser:
    pytest.importorskip("tree_sitter_language_pack")
    return SyntaxParser()


def test_find_default_export_object(parser: SyntaxParser) -> None:
    source_file = parser.parse_source_file(
        "A.vue", "const x = 1;\nexport default { x }\n"
    )

    statement, literal = find_default_export_object(source_file)

    assert statement is source_file.statements[1]
    assert literal.kind == Kind.OBJECT


@pytest.mark.parametrize(
    "text",
    [
        "export default function () {}\n",
        "export const a = {};\n",
        "const a = {};\n",
    ],
)
def test_find_default_export_object_ignores_other_exports(
    parser: SyntaxParser, text: str
) -> None:
    assert find_default_export_object(parser.parse_source_file("A.vue", text)) is None


def test_rewrite_wraps_literal_and_imports_bridge(parser: SyntaxParser) -> None:
    text = "export default { data() {} }\n"
    source_file = parser.parse_source_file("A.vue", text)
    _, literal = find_default_export_object(source_file)
    literal_range = literal.range

    assert rewrite_script(source_file)

    assert Printer().print_file(source_file) == (
        "import __vueEditorBridge from 'vue-editor-bridge';\n"
        "export default __vueEditorBridge({ data() {} })\n"
    )
    bridge_import = source_file.statements[0]
    assert all((node.pos, node.end) == (0, 0) for node in bridge_import.walk())
    call = source_file.statements[1].first_named(Kind.CALL_EXPRESSION)
    assert call.range == literal_range
    assert literal.range == literal_range
    callee = call.children[0]
    assert (callee.pos, callee.end) == (literal_range.pos, literal_range.pos + 1)


def test_rewrite_without_default_object_is_a_no_op(
    parser: SyntaxParser,
) -> None:
    source_file = parser.parse_source_file("A.vue", "foo();\n")

    assert not rewrite_script(source_file)
    assert len(source_file.statements) == 1
