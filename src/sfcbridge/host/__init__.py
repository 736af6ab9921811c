"""Host engine seam: snapshots, change ranges and the default host."""

from __future__ import annotations

from .engine import (
    HostEngine,
    TreeSitterHost,
    parse_script_kind,
    script_kind_from_path,
)
from .snapshot import ScriptSnapshot, TextChangeRange

__all__ = [
    "HostEngine",
    "ScriptSnapshot",
    "TextChangeRange",
    "TreeSitterHost",
    "parse_script_kind",
    "script_kind_from_path",
]
