"""Split component files into template, script and style regions."""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Iterator, Mapping

from sfcbridge.syntax import ScriptKind

__all__ = [
    "ComponentRegions",
    "DEFAULT_SCRIPT",
    "Region",
    "component_script_text",
    "component_template_text",
    "extract_regions",
    "script_kind_for_language",
]

DEFAULT_SCRIPT = "export default {};"
TEMPLATE_LANGUAGE = "vue-html"

_BLOCK_OPEN = re.compile(
    r"<(?P<tag>template|script|style)(?P<attrs>(?:\s[^>]*?)?)(?P<close>/?)>",
    re.IGNORECASE,
)
_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_TEMPLATE_TAG = re.compile(
    r"<(?P<end>/?)template(?:\s[^>]*?)?(?P<self>/?)>", re.IGNORECASE
)
_ATTRIBUTE = re.compile(
    r"""(?P<name>[^\s=/>"']+)"""
    r"""(?:\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s>]+)))?"""
)
_NOT_NEWLINE = re.compile(r"[^\r\n]")

_DEFAULT_LANGUAGES = {
    "template": TEMPLATE_LANGUAGE,
    "script": "javascript",
    "style": "css",
}
_LANG_ALIASES = {
    "template": {"html": TEMPLATE_LANGUAGE, "jade": "pug"},
    "script": {
        "js": "javascript",
        "ts": "typescript",
        "tsx": "tsx",
        "jsx": "javascriptreact",
    },
    "style": {},
}
_SCRIPT_KINDS = {
    "javascript": ScriptKind.JS,
    "javascriptreact": ScriptKind.JSX,
    "typescript": ScriptKind.TS,
    "tsx": ScriptKind.TSX,
}


@dataclass(frozen=True, slots=True)
class Region:
    """Content span of one top-level block, excluding its tags."""

    type: str
    language: str
    start: int
    end: int
    attributes: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ComponentRegions:
    """All top-level regions of one component file."""

    text: str
    regions: tuple[Region, ...] = ()

    def get(self, region_type: str) -> Region | None:
        return next((r for r in self.regions if r.type == region_type), None)

    def iter_type(self, region_type: str) -> Iterator[Region]:
        return (r for r in self.regions if r.type == region_type)

    def language(self, region_type: str) -> str:
        region = self.get(region_type)
        if region is None:
            return _DEFAULT_LANGUAGES.get(region_type, "plaintext")
        return region.language

    def single_type_text(self, region_type: str) -> str:
        """Return the file text with everything but ``region_type`` blanked.

        Newlines survive blanking so offsets and line numbers in the result
        match the component file.
        """

        content = _NOT_NEWLINE.sub(" ", self.text)
        for region in self.iter_type(region_type):
            content = (
                content[: region.start]
                + self.text[region.start : region.end]
                + content[region.end :]
            )
        return content


def _parse_attributes(raw: str) -> dict[str, str]:
    attributes: dict[str, str] = {}
    for match in _ATTRIBUTE.finditer(raw):
        value = match.group("dq")
        if value is None:
            value = match.group("sq")
        if value is None:
            value = match.group("bare")
        attributes[match.group("name").lower()] = value or ""
    return attributes


def _language(region_type: str, attributes: Mapping[str, str]) -> str:
    lang = attributes.get("lang", "").strip().lower()
    if not lang:
        return _DEFAULT_LANGUAGES[region_type]
    return _LANG_ALIASES[region_type].get(lang, lang)


def _template_end(text: str, start: int) -> tuple[int, int]:
    """Return ``(content_end, resume_at)`` for a template opened before ``start``."""

    depth = 1
    for match in _TEMPLATE_TAG.finditer(text, start):
        if match.group("end"):
            depth -= 1
            if depth == 0:
                return match.start(), match.end()
        elif not match.group("self"):
            depth += 1
    return len(text), len(text)


def _raw_end(text: str, tag: str, start: int) -> tuple[int, int]:
    closing = re.compile(rf"</{tag}\s*>", re.IGNORECASE)
    match = closing.search(text, start)
    if match is None:
        return len(text), len(text)
    return match.start(), match.end()


def extract_regions(text: str) -> ComponentRegions:
    """Locate the top-level ``template``/``script``/``style`` blocks of ``text``.

    Example:
        >>> regions = extract_regions("<template><p/></template>")
        >>> regions.get("template").start, regions.get("template").end
        (10, 14)
    """

    regions: list[Region] = []
    cursor = 0
    comments = [(m.start(), m.end()) for m in _COMMENT.finditer(text)]

    while True:
        match = _BLOCK_OPEN.search(text, cursor)
        if match is None:
            break
        inside_comment = next(
            (end for start, end in comments if start <= match.start() < end),
            None,
        )
        if inside_comment is not None:
            cursor = inside_comment
            continue

        tag = match.group("tag").lower()
        attributes = _parse_attributes(match.group("attrs"))
        content_start = match.end()
        if match.group("close"):
            content_end = resume = content_start
        elif tag == "template":
            content_end, resume = _template_end(text, content_start)
        else:
            content_end, resume = _raw_end(text, tag, content_start)

        regions.append(
            Region(
                type=tag,
                language=_language(tag, attributes),
                start=content_start,
                end=content_end,
                attributes=attributes,
            )
        )
        cursor = resume

    return ComponentRegions(text=text, regions=tuple(regions))


def script_kind_for_language(language: str) -> ScriptKind:
    """Map a region language id to the host's script kind.

    Example:
        >>> script_kind_for_language("typescript")
        <ScriptKind.TS: 'ts'>
    """

    return _SCRIPT_KINDS.get(language, ScriptKind.JS)


def component_script_text(text: str) -> str:
    """Return the script region of ``text`` with offsets preserved.

    Falls back to an empty default export when the file has no content to
    analyze at all.
    """

    script = extract_regions(text).single_type_text("script")
    return script or DEFAULT_SCRIPT


def component_template_text(text: str) -> str:
    """Return the template region of ``text`` as parseable markup.

    The blanked text keeps the component's offsets; the first run of ten
    spaces (the blanked opening tag) becomes ``<template>`` and a closing
    tag is appended so the markup has a single root. Non-HTML templates and
    whitespace-only templates yield ``''``.
    """

    regions = extract_regions(text)
    if regions.language("template") != TEMPLATE_LANGUAGE:
        return ""
    raw = regions.single_type_text("template")
    if not raw.strip():
        return ""
    return raw.replace(" " * 10, "<template>", 1) + "</template>"
