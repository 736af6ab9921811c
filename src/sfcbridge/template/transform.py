"""Turn Vue template markup into JavaScript expressions.

Each expression, interpolation and directive of a template becomes one
expression node whose identifiers point back at the template text, so
diagnostics raised against the synthesized render function can be mapped
onto the component file.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, AbstractSet, Iterable, Protocol

from sfcbridge.core.config import BridgeSettings
from sfcbridge.errors import MarkupParseError, TemplateTransformError
from sfcbridge.syntax import (
    Kind,
    Node,
    SyntaxParseError,
    TextRange,
    create_array,
    create_arrow_function,
    create_block,
    create_call,
    create_expression_statement,
    create_identifier,
    create_object,
    create_pair,
    create_property_access,
    create_property_identifier,
    create_string_literal,
    create_this,
    set_text_range,
)

from .markup import MarkupAttribute, MarkupDocument, MarkupElement, MarkupText

if TYPE_CHECKING:
    from sfcbridge.host import HostEngine

__all__ = [
    "GLOBAL_NAMES",
    "TemplateTransformer",
    "VueTemplateTransformer",
    "render_statements",
]

GLOBAL_NAMES = frozenset(
    {
        "Infinity",
        "undefined",
        "NaN",
        "isFinite",
        "isNaN",
        "parseFloat",
        "parseInt",
        "decodeURI",
        "decodeURIComponent",
        "encodeURI",
        "encodeURIComponent",
        "Math",
        "Number",
        "Date",
        "Array",
        "Object",
        "Boolean",
        "String",
        "RegExp",
        "Map",
        "Set",
        "JSON",
        "Intl",
        "BigInt",
        "require",
    }
)
EVENT_PARAMETER = "$event"

_INTERPOLATION = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
_FOR_EXPRESSION = re.compile(r"^\s*(.*?)\s+(?:in|of)\s+(.*?)\s*$", re.DOTALL)
_IDENTIFIER_NAME = re.compile(r"^[A-Za-z_$][\w$]*$")

_EXPRESSION_DIRECTIVES = frozenset(
    {"v-if", "v-else-if", "v-show", "v-model", "v-html", "v-text"}
)
_NON_EXPRESSION_DIRECTIVES = frozenset(
    {"v-for", "v-else", "v-pre", "v-cloak", "v-once", "v-slot"}
)
_BUILTIN_TAGS = frozenset(
    {
        "component",
        "keep-alive",
        "slot",
        "suspense",
        "teleport",
        "template",
        "transition",
        "transition-group",
    }
)
_SCOPE_OPENERS = frozenset({Kind.ARROW_FUNCTION, Kind.FUNCTION_EXPRESSION})
_PATTERN_LEAVES = frozenset(
    {Kind.IDENTIFIER, Kind.SHORTHAND_PROPERTY_IDENTIFIER_PATTERN}
)


class TemplateTransformer(Protocol):
    """Protocol that template-to-expression visitors must follow."""

    def transform_template(
        self, tree: MarkupDocument, text: str
    ) -> list[Node]:
        """Return one expression per template construct, in template order."""


def _directive_argument(name: str, prefix: str) -> str:
    argument = name[len(prefix) :]
    return argument.split(".", 1)[0]


def _is_component_tag(tag: str) -> bool:
    if not tag or tag.lower() in _BUILTIN_TAGS:
        return False
    return "-" in tag or tag[0].isupper()


def _is_slot_scope(attribute: MarkupAttribute) -> bool:
    name = attribute.name
    return (
        name == "slot-scope"
        or name == "scope"
        or name == "v-slot"
        or name.startswith(("v-slot:", "#"))
    )


class VueTemplateTransformer(TemplateTransformer):
    """Default visitor producing render-function expressions.

    Free identifiers become ``this.<name>`` member accesses carrying the
    identifier's template range. Names bound by ``v-for`` aliases, slot
    scopes and inline function parameters stay local, as do
    ``$event`` inside listeners and the JavaScript globals templates may
    reference.
    """

    def __init__(
        self,
        host: "HostEngine",
        settings: BridgeSettings | None = None,
    ) -> None:
        self._host = host
        self._settings = settings or BridgeSettings()

    def transform_template(
        self, tree: MarkupDocument, text: str
    ) -> list[Node]:
        """Return one expression per template construct, in template order.

        Raises:
            TemplateTransformError: With the expressions produced before the
                failing construct attached as ``partial``.
        """

        expressions: list[Node] = []
        try:
            for node in tree.children:
                if isinstance(node, MarkupElement) and node.tag == "template":
                    self._visit_children(node, frozenset(), expressions)
                else:
                    self._visit(node, frozenset(), expressions)
        except SyntaxParseError as exc:
            raise TemplateTransformError(
                str(exc), partial=expressions, offset=exc.offset
            ) from exc
        except (MarkupParseError, TemplateTransformError) as exc:
            raise TemplateTransformError(
                str(exc), partial=expressions, offset=exc.offset
            ) from exc
        return expressions

    # ------------------------------------------------------------------
    # Markup visitors
    # ------------------------------------------------------------------
    def _visit(
        self,
        node: MarkupElement | MarkupText,
        scope: AbstractSet[str],
        out: list[Node],
    ) -> None:
        if isinstance(node, MarkupText):
            self._visit_text(node, scope, out)
        else:
            self._visit_element(node, scope, out)

    def _visit_children(
        self,
        element: MarkupElement,
        scope: AbstractSet[str],
        out: list[Node],
    ) -> None:
        if element.attribute("v-pre") is not None:
            return
        for child in element.children:
            self._visit(child, scope, out)

    def _visit_text(
        self, node: MarkupText, scope: AbstractSet[str], out: list[Node]
    ) -> None:
        for match in _INTERPOLATION.finditer(node.text):
            offset = node.range.pos + match.start(1)
            out.append(self._expression(match.group(1), offset, scope))

    def _visit_element(
        self,
        element: MarkupElement,
        scope: AbstractSet[str],
        out: list[Node],
        *,
        handled: frozenset[str] = frozenset(),
    ) -> None:
        loop = element.attribute("v-for")
        if loop is not None and "v-for" not in handled:
            out.append(self._iteration(element, loop, scope, handled))
            return

        slot = next(
            (a for a in element.attributes if _is_slot_scope(a)), None
        )
        if (
            slot is not None
            and slot.value is not None
            and "slot" not in handled
        ):
            parameters, names = self._parameters(slot)
            body: list[Node] = []
            self._visit_element(
                element, scope | names, body, handled=handled | {"slot"}
            )
            out.append(create_arrow_function(parameters, create_array(body)))
            return

        self._visit_attributes(element, scope, out)
        self._visit_children(element, scope, out)

    def _iteration(
        self,
        element: MarkupElement,
        loop: MarkupAttribute,
        scope: AbstractSet[str],
        handled: frozenset[str],
    ) -> Node:
        value, value_range = self._attribute_value(loop)
        match = _FOR_EXPRESSION.match(value)
        if match is None:
            raise TemplateTransformError(
                f"Malformed v-for expression: {value!r}",
                offset=value_range.pos,
            )
        source = self._expression(
            match.group(2), value_range.pos + match.start(2), scope
        )
        parameters, names = self._alias_parameters(
            match.group(1), value_range.pos + match.start(1)
        )
        body: list[Node] = []
        self._visit_element(
            element, scope | names, body, handled=handled | {"v-for"}
        )
        callback = create_arrow_function(parameters, create_array(body))
        helper = create_identifier(self._settings.iteration_helper)
        return create_call(helper, [source, callback])

    def _visit_attributes(
        self,
        element: MarkupElement,
        scope: AbstractSet[str],
        out: list[Node],
    ) -> None:
        component = _is_component_tag(element.tag)
        props: list[Node] = []
        expressions: list[Node] = []

        for attribute in element.attributes:
            name = attribute.name
            if attribute.value is None or _is_slot_scope(attribute):
                continue
            if name.startswith(("v-on:", "@")):
                expressions.append(self._listener(attribute, scope))
                continue
            if name.startswith(("v-bind:", ":")):
                prefix = ":" if name.startswith(":") else "v-bind:"
                expression = self._attribute_expression(attribute, scope)
                if component:
                    props.append(
                        self._prop(attribute, prefix, expression)
                    )
                else:
                    expressions.append(expression)
                continue
            directive = name.split(":", 1)[0].split(".", 1)[0]
            if directive in _NON_EXPRESSION_DIRECTIVES:
                continue
            if (
                directive in _EXPRESSION_DIRECTIVES
                or directive == "v-bind"
                or directive.startswith("v-")
            ):
                expressions.append(
                    self._attribute_expression(attribute, scope)
                )

        if component:
            out.append(self._component(element, props))
        out.extend(expressions)

    # ------------------------------------------------------------------
    # Expression builders
    # ------------------------------------------------------------------
    def _component(self, element: MarkupElement, props: Iterable[Node]) -> Node:
        tag = set_text_range(
            create_string_literal(element.tag), element.tag_range
        )
        helper = create_identifier(self._settings.component_helper)
        return create_call(helper, [create_this(), tag, create_object(props)])

    @staticmethod
    def _prop(
        attribute: MarkupAttribute, prefix: str, value: Node
    ) -> Node:
        argument = _directive_argument(attribute.name, prefix)
        start = attribute.name_range.pos + len(prefix)
        key_range = TextRange(start, start + len(argument))
        if _IDENTIFIER_NAME.match(argument):
            key = create_property_identifier(argument)
        else:
            key = create_string_literal(argument)
        return create_pair(set_text_range(key, key_range), value)

    def _listener(
        self, attribute: MarkupAttribute, scope: AbstractSet[str]
    ) -> Node:
        value, value_range = self._attribute_value(attribute)
        inner = scope | {EVENT_PARAMETER}
        statements = [
            self._bind(statement, inner)
            for statement in self._host.parse_statements(
                value, value_range.pos
            )
        ]
        callback = create_arrow_function(
            [create_identifier(EVENT_PARAMETER)], create_block(statements)
        )
        helper = create_identifier(self._settings.listener_helper)
        return create_call(helper, [create_this(), callback])

    def _attribute_expression(
        self, attribute: MarkupAttribute, scope: AbstractSet[str]
    ) -> Node:
        value, value_range = self._attribute_value(attribute)
        return self._expression(value, value_range.pos, scope)

    def _expression(
        self, text: str, offset: int, scope: AbstractSet[str]
    ) -> Node:
        return self._bind(self._host.parse_expression(text, offset), scope)

    @staticmethod
    def _attribute_value(attribute: MarkupAttribute) -> tuple[str, TextRange]:
        if attribute.value is None or attribute.value_range is None:
            raise TemplateTransformError(
                f"Attribute {attribute.name!r} has no value",
                offset=attribute.name_range.pos,
            )
        return attribute.value, attribute.value_range

    def _parameters(
        self, attribute: MarkupAttribute
    ) -> tuple[list[Node], frozenset[str]]:
        value, value_range = self._attribute_value(attribute)
        return self._alias_parameters(value, value_range.pos)

    def _alias_parameters(
        self, alias: str, offset: int
    ) -> tuple[list[Node], frozenset[str]]:
        stripped = alias.strip()
        offset += alias.find(stripped) if stripped else 0
        if stripped.startswith("(") and stripped.endswith(")"):
            stripped = stripped[1:-1]
            offset += 1
        if not stripped.strip():
            return [], frozenset()
        arrow = self._host.parse_expression(f"({stripped}) => 0", offset - 1)
        formal = arrow.first_named(Kind.FORMAL_PARAMETERS)
        if formal is None:
            raise TemplateTransformError(
                f"Malformed alias list: {alias!r}", offset=offset
            )
        parameters = formal.named_children
        return parameters, _pattern_names(formal)

    # ------------------------------------------------------------------
    # Identifier binding
    # ------------------------------------------------------------------
    def _bind(self, node: Node, scope: AbstractSet[str]) -> Node:
        if node.kind == Kind.IDENTIFIER:
            if node.text in scope or node.text in GLOBAL_NAMES:
                return node
            return self._this_access(node)

        if node.kind == Kind.SHORTHAND_PROPERTY_IDENTIFIER:
            name = node.text or ""
            key = set_text_range(create_property_identifier(name), node.range)
            if name in scope or name in GLOBAL_NAMES:
                value = set_text_range(create_identifier(name), node.range)
            else:
                value = self._this_access(node)
            return set_text_range(create_pair(key, value), node.range)

        if node.kind in _SCOPE_OPENERS:
            return self._bind_function(node, scope)

        if node.kind == Kind.MEMBER_EXPRESSION and node.children:
            node.children[0] = self._bind(node.children[0], scope)
            return node

        node.children = [self._bind(child, scope) for child in node.children]
        return node

    def _bind_function(self, node: Node, scope: AbstractSet[str]) -> Node:
        named = node.named_children
        parameters: Node | None = None
        name: Node | None = None
        for child in named:
            if child.kind == Kind.FORMAL_PARAMETERS:
                parameters = child
                break
            if child.kind == Kind.IDENTIFIER:
                if node.kind == Kind.ARROW_FUNCTION:
                    parameters = child
                    break
                name = child
        inner = set(scope)
        if parameters is not None:
            inner |= _pattern_names(parameters)
        if name is not None and name.text:
            inner.add(name.text)
        node.children = [
            child
            if child is parameters or child is name
            else self._bind(child, inner)
            for child in node.children
        ]
        return node

    @staticmethod
    def _this_access(node: Node) -> Node:
        name = set_text_range(
            create_property_identifier(node.text or ""), node.range
        )
        return set_text_range(
            create_property_access(create_this(), name), node.range
        )


def _pattern_names(node: Node) -> frozenset[str]:
    """Return the names a parameter list or binding pattern introduces."""

    if node.kind in _PATTERN_LEAVES:
        return frozenset({node.text}) if node.text else frozenset()
    if node.kind == "assignment_pattern" and node.named_children:
        return _pattern_names(node.named_children[0])
    if node.kind == "pair_pattern" and node.named_children:
        return _pattern_names(node.named_children[-1])
    names: set[str] = set()
    for child in node.named_children:
        names |= _pattern_names(child)
    return frozenset(names)


def render_statements(expressions: Iterable[Node]) -> list[Node]:
    """Wrap template expressions as statements for a render function body."""

    return [create_expression_statement(expr) for expr in expressions]

