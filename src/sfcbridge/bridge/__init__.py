"""Synthetic document lifecycle, template injection and position maps."""

from __future__ import annotations

from .injector import inject_template
from .lifecycle import SourceFileUpdater
from .paths import (
    component_file_name,
    component_module_specifier,
    is_component_file,
    is_virtual_template_file,
    template_file_name,
)
from .rewriter import find_default_export_object, rewrite_script
from .source_map import (
    MappingEntry,
    PositionMap,
    PositionMapStore,
    build_map,
    default_store,
)

__all__ = [
    "MappingEntry",
    "PositionMap",
    "PositionMapStore",
    "SourceFileUpdater",
    "build_map",
    "component_file_name",
    "component_module_specifier",
    "default_store",
    "find_default_export_object",
    "inject_template",
    "is_component_file",
    "is_virtual_template_file",
    "rewrite_script",
    "template_file_name",
]
