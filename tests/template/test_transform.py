"""Tests for :class:`sfcbridge.template.VueTemplateTransformer`."""

from __future__ import annotations

from typing import Protocol

import pytest

from sfcbridge.errors import TemplateTransformError
from sfcbridge.syntax import Kind, TextRange, print_node
from sfcbridge.template import (
    MarkupParser,
    TemplateTransformer,
    VueTemplateTransformer,
    render_statements,
)


@pytest.fixture()
def transform(host):
    """Return a callable transforming template markup into printed text."""

    markup = MarkupParser(host.parser)
    transformer = VueTemplateTransformer(host)

    def run(body: str) -> list[str]:
        text = f"<template>{body}</template>"
        document = markup.parse(text)
        expressions = transformer.transform_template(document, text)
        return [print_node(expression) for expression in expressions]

    return run


def test_interpolation_reads_from_component_instance(transform) -> None:
    assert transform("<div>{{ msg }}</div>") == ["this.msg"]


def test_this_access_keeps_identifier_range(host) -> None:
    text = "<template><p>{{ msg }}</p></template>"
    document = MarkupParser(host.parser).parse(text)

    (expression,) = VueTemplateTransformer(host).transform_template(
        document, text
    )

    offset = text.index("msg")
    assert expression.kind == Kind.MEMBER_EXPRESSION
    assert expression.range == TextRange(offset, offset + 3)
    assert expression.children[2].range == TextRange(offset, offset + 3)


def test_globals_stay_unqualified(transform) -> None:
    assert transform("<p>{{ Math.max(a, 1) }}</p>") == ["Math.max(this.a, 1)"]


def test_inline_arrow_parameters_stay_local(transform) -> None:
    assert transform("<p>{{ items.map(x => x.id) }}</p>") == [
        "this.items.map(x => x.id)"
    ]


def test_v_for_wraps_body_in_iteration_helper(transform) -> None:
    body = (
        '<ul><li v-for="(item, index) in items" :key="item.id">'
        "{{ item.name }} {{ label }}</li></ul>"
    )

    assert transform(body) == [
        "__vlsIterationHelper(this.items, (item, index) => "
        "[item.id, item.name, this.label])"
    ]


def test_listener_becomes_event_callback(transform) -> None:
    assert transform('<button @click="count++">+</button>') == [
        "__vlsListenerHelper(this, ($event) => {\nthis.count++;\n})"
    ]


def test_listener_sees_event_parameter(transform) -> None:
    assert transform('<input v-on:input="update($event)">') == [
        "__vlsListenerHelper(this, ($event) => {\nthis.update($event);\n})"
    ]


def test_component_props_precede_listeners(transform) -> None:
    body = '<my-comp :title="heading" @close="onClose"></my-comp>'

    assert transform(body) == [
        "__vlsComponentHelper(this, 'my-comp', { title: this.heading })",
        "__vlsListenerHelper(this, ($event) => {\nthis.onClose;\n})",
    ]


def test_slot_scope_binds_destructured_names(transform) -> None:
    body = '<div slot-scope="{ row }">{{ row.name }}</div>'

    assert transform(body) == ["({ row }) => [row.name]"]


def test_directives_become_expressions(transform) -> None:
    body = '<p v-if="visible" v-show="shown" class="static">x</p>'

    assert transform(body) == ["this.visible", "this.shown"]


def test_v_pre_skips_children(transform) -> None:
    assert transform("<p v-pre>{{ raw }}</p>") == []


def test_failure_carries_partial_expressions(host) -> None:
    text = "<template><p>{{ ok }}</p><p>{{ a b }}</p></template>"
    document = MarkupParser(host.parser).parse(text)

    with pytest.raises(TemplateTransformError) as excinfo:
        VueTemplateTransformer(host).transform_template(document, text)

    assert len(excinfo.value.partial) == 1
    assert print_node(excinfo.value.partial[0]) == "this.ok"


def test_render_statements_wraps_expressions(host) -> None:
    text = "<template><p>{{ a }}{{ b }}</p></template>"
    document = MarkupParser(host.parser).parse(text)
    expressions = VueTemplateTransformer(host).transform_template(
        document, text
    )

    statements = render_statements(expressions)

    assert [print_node(st) for st in statements] == ["this.a;", "this.b;"]


def test_transformer_interface_is_a_protocol() -> None:
    assert Protocol in TemplateTransformer.__mro__
    assert issubclass(VueTemplateTransformer, TemplateTransformer)
