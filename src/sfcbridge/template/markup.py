"""Markup tree for component templates, parsed with tree-sitter's HTML grammar."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
import re
from typing import Any, Iterator, Sequence, Union

from sfcbridge.errors import MarkupParseError
from sfcbridge.syntax import SyntaxParser, TextRange, byte_offsets

__all__ = [
    "MarkupAttribute",
    "MarkupDocument",
    "MarkupElement",
    "MarkupNode",
    "MarkupParser",
    "MarkupText",
    "parse_markup",
]

HTML_GRAMMAR = "html"

_INTERPOLATION_BODY = re.compile(r"(?<=\{\{).*?(?=\}\})", re.DOTALL)
_NOT_NEWLINE = re.compile(r"[^\r\n]")
_TEXT_KINDS = frozenset({"text", "entity"})
_ELEMENT_KINDS = frozenset({"element", "script_element", "style_element"})
_TAG_KINDS = frozenset({"start_tag", "self_closing_tag"})


@dataclass(frozen=True, slots=True)
class MarkupAttribute:
    """One attribute; ``value`` is ``None`` for bare attributes."""

    name: str
    name_range: TextRange
    value: str | None = None
    value_range: TextRange | None = None


@dataclass(frozen=True, slots=True)
class MarkupText:
    """A run of character data between tags."""

    text: str
    range: TextRange


@dataclass(slots=True)
class MarkupElement:
    tag: str
    range: TextRange
    tag_range: TextRange
    attributes: tuple[MarkupAttribute, ...] = ()
    children: list["MarkupNode"] = field(default_factory=list)

    def attribute(self, name: str) -> MarkupAttribute | None:
        return next((a for a in self.attributes if a.name == name), None)


MarkupNode = Union[MarkupElement, MarkupText]


@dataclass(slots=True)
class MarkupDocument:
    """Parsed template markup with offsets into the component file."""

    text: str
    children: list[MarkupNode] = field(default_factory=list)

    def iter_elements(self) -> Iterator[MarkupElement]:
        stack: list[MarkupNode] = list(reversed(self.children))
        while stack:
            node = stack.pop()
            if isinstance(node, MarkupElement):
                yield node
                stack.extend(reversed(node.children))


def _mask_interpolations(text: str) -> str:
    """Blank interpolation bodies so expression operators never read as tags."""

    return _INTERPOLATION_BODY.sub(
        lambda match: _NOT_NEWLINE.sub(" ", match.group(0)), text
    )


def _first_error(ts_node: Any) -> Any | None:
    if ts_node.type == "ERROR" or ts_node.is_missing:
        return ts_node
    for child in ts_node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


@dataclass(slots=True)
class _Builder:
    text: str
    offsets: Sequence[int]

    def char_index(self, byte_offset: int) -> int:
        return max(0, bisect_right(self.offsets, byte_offset) - 1)

    def span(self, ts_node: Any) -> TextRange:
        return TextRange(
            self.char_index(ts_node.start_byte),
            self.char_index(ts_node.end_byte),
        )

    def slice(self, span: TextRange) -> str:
        return self.text[span.pos : span.end]

    def nodes(self, ts_children: Sequence[Any]) -> list[MarkupNode]:
        nodes: list[MarkupNode] = []
        run: TextRange | None = None
        for child in ts_children:
            if child.type in _TEXT_KINDS:
                span = self.span(child)
                run = span if run is None else TextRange(run.pos, span.end)
                continue
            if run is not None:
                nodes.append(MarkupText(self.slice(run), run))
                run = None
            if child.type in _ELEMENT_KINDS:
                nodes.append(self.element(child))
        if run is not None:
            nodes.append(MarkupText(self.slice(run), run))
        return nodes

    def element(self, ts_node: Any) -> MarkupElement:
        tag_node = next(
            (c for c in ts_node.children if c.type in _TAG_KINDS), None
        )
        if tag_node is None:
            raise MarkupParseError(
                "Element without a start tag",
                offset=self.char_index(ts_node.start_byte),
            )
        name_node = next(
            (c for c in tag_node.children if c.type == "tag_name"), None
        )
        tag_range = self.span(name_node or tag_node)
        attributes = tuple(
            self.attribute(c)
            for c in tag_node.children
            if c.type == "attribute"
        )
        content = [
            c
            for c in ts_node.children
            if c.type not in _TAG_KINDS and c.type != "end_tag"
        ]
        return MarkupElement(
            tag=self.slice(tag_range) if name_node is not None else "",
            range=self.span(ts_node),
            tag_range=tag_range,
            attributes=attributes,
            children=self.nodes(content),
        )

    def attribute(self, ts_node: Any) -> MarkupAttribute:
        name_range = TextRange(0, 0)
        value_range: TextRange | None = None
        for child in ts_node.children:
            if child.type == "attribute_name":
                name_range = self.span(child)
            elif child.type == "attribute_value":
                value_range = self.span(child)
            elif child.type == "quoted_attribute_value":
                quoted = self.span(child)
                inner_start = quoted.pos + 1
                value_range = TextRange(
                    inner_start, max(inner_start, quoted.end - 1)
                )
        return MarkupAttribute(
            name=self.slice(name_range),
            name_range=name_range,
            value=None if value_range is None else self.slice(value_range),
            value_range=value_range,
        )


class MarkupParser:
    """Parse template markup; grammars come from a :class:`SyntaxParser`."""

    def __init__(self, parser: SyntaxParser | None = None) -> None:
        self._parser = parser or SyntaxParser()

    def parse(self, text: str) -> MarkupDocument:
        """Return the markup tree of ``text``.

        Raises:
            MarkupParseError: If the markup is malformed.
        """

        masked = _mask_interpolations(text)
        source = masked.encode("utf-8")
        tree = self._parser.parser(HTML_GRAMMAR).parse(source)
        builder = _Builder(text=text, offsets=byte_offsets(masked))
        root = tree.root_node
        if root.has_error:
            error = _first_error(root)
            offset = builder.char_index(error.start_byte) if error else 0
            raise MarkupParseError(
                f"Malformed template markup near offset {offset}",
                offset=offset,
            )
        return MarkupDocument(text=text, children=builder.nodes(root.children))


def parse_markup(text: str, parser: SyntaxParser | None = None) -> MarkupDocument:
    """Parse ``text`` with a throwaway :class:`MarkupParser`."""

    return MarkupParser(parser).parse(text)
