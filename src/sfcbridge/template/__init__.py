"""Component region extraction and template-to-expression transformation."""

from __future__ import annotations

from .markup import (
    MarkupAttribute,
    MarkupDocument,
    MarkupElement,
    MarkupNode,
    MarkupParser,
    MarkupText,
    parse_markup,
)
from .regions import (
    DEFAULT_SCRIPT,
    ComponentRegions,
    Region,
    component_script_text,
    component_template_text,
    extract_regions,
    script_kind_for_language,
)
from .transform import (
    GLOBAL_NAMES,
    TemplateTransformer,
    VueTemplateTransformer,
    render_statements,
)

__all__ = [
    "DEFAULT_SCRIPT",
    "GLOBAL_NAMES",
    "ComponentRegions",
    "MarkupAttribute",
    "MarkupDocument",
    "MarkupElement",
    "MarkupNode",
    "MarkupParser",
    "MarkupText",
    "Region",
    "TemplateTransformer",
    "VueTemplateTransformer",
    "component_script_text",
    "component_template_text",
    "extract_regions",
    "parse_markup",
    "render_statements",
    "script_kind_for_language",
]
