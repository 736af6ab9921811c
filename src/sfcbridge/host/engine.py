"""Host engine contract and the default tree-sitter implementation."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Protocol

from sfcbridge.core.logging import Logger, get_logger
from sfcbridge.errors import UnsupportedScriptKindError
from sfcbridge.syntax import Node, ScriptKind, SourceFile, SyntaxParser

from .snapshot import ScriptSnapshot, TextChangeRange

__all__ = [
    "HostEngine",
    "TreeSitterHost",
    "parse_script_kind",
    "script_kind_from_path",
]

_EXTENSION_KINDS: dict[str, ScriptKind] = {
    ".js": ScriptKind.JS,
    ".mjs": ScriptKind.JS,
    ".cjs": ScriptKind.JS,
    ".jsx": ScriptKind.JSX,
    ".ts": ScriptKind.TS,
    ".mts": ScriptKind.TS,
    ".cts": ScriptKind.TS,
    ".tsx": ScriptKind.TSX,
    ".json": ScriptKind.JSON,
}


def script_kind_from_path(file_name: str) -> ScriptKind:
    """Guess a script kind from ``file_name``'s extension.

    Example:
        >>> script_kind_from_path("src/App.tsx")
        <ScriptKind.TSX: 'tsx'>
    """

    suffix = PurePosixPath(file_name).suffix.lower()
    return _EXTENSION_KINDS.get(suffix, ScriptKind.JS)


def parse_script_kind(name: str) -> ScriptKind:
    """Return the :class:`ScriptKind` called ``name`` (case-insensitive).

    Raises:
        UnsupportedScriptKindError: If ``name`` is not a known kind.
    """

    try:
        return ScriptKind(name.strip().lower())
    except ValueError as exc:
        choices = ", ".join(kind.value for kind in ScriptKind)
        raise UnsupportedScriptKindError(
            f"Unknown script kind {name!r}; expected one of: {choices}"
        ) from exc


class HostEngine(Protocol):
    """Source-file operations the bridge wraps or calls into."""

    def create_source_file(
        self,
        file_name: str,
        snapshot: ScriptSnapshot,
        version: str,
        script_kind: ScriptKind | None = None,
    ) -> SourceFile:
        """Parse a new document from ``snapshot``."""

    def update_source_file(
        self,
        source_file: SourceFile,
        snapshot: ScriptSnapshot,
        version: str,
        change_range: TextChangeRange | None,
    ) -> SourceFile:
        """Return a new document reflecting ``snapshot``."""

    def parse_source_file(
        self,
        file_name: str,
        text: str,
        version: str,
        script_kind: ScriptKind,
    ) -> SourceFile:
        """Parse ``text`` from scratch without any cache involvement."""

    def parse_expression(self, text: str, offset: int = 0) -> Node:
        """Parse a standalone expression positioned at ``offset``."""

    def parse_statements(self, text: str, offset: int = 0) -> list[Node]:
        """Parse a statement list positioned at ``offset``."""


def _point(text: str, offset: int) -> tuple[int, int]:
    """Return the tree-sitter ``(row, byte column)`` of character ``offset``."""

    prefix = text[:offset]
    row = prefix.count("\n")
    line_start = prefix.rfind("\n") + 1
    return row, len(prefix[line_start:].encode("utf-8"))


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


class TreeSitterHost:
    """Default host: full parses plus tree-sitter incremental re-parsing."""

    def __init__(
        self,
        parser: SyntaxParser | None = None,
        *,
        logger: Logger | None = None,
    ) -> None:
        self._parser = parser or SyntaxParser()
        self._logger = logger or get_logger(__name__, component="host")

    @property
    def parser(self) -> SyntaxParser:
        return self._parser

    def create_source_file(
        self,
        file_name: str,
        snapshot: ScriptSnapshot,
        version: str,
        script_kind: ScriptKind | None = None,
    ) -> SourceFile:
        kind = script_kind or script_kind_from_path(file_name)
        return self._parser.parse_source_file(
            file_name,
            snapshot.get_text(),
            version=version,
            script_kind=kind,
        )

    def update_source_file(
        self,
        source_file: SourceFile,
        snapshot: ScriptSnapshot,
        version: str,
        change_range: TextChangeRange | None,
    ) -> SourceFile:
        """Re-parse ``source_file`` for ``snapshot``.

        The previous tree-sitter tree is reused when ``change_range`` is
        consistent with the previous text; otherwise the document is parsed
        from scratch. The previous document's tree is handed over to the new
        document and must not be reused afterwards.
        """

        new_text = snapshot.get_text()
        kind = source_file.script_kind
        if change_range is not None and self._can_reuse(
            source_file, new_text, change_range
        ):
            old_tree = source_file.tree
            self._apply_edit(old_tree, source_file.text, new_text, change_range)
            source_file.tree = None
            tree = self._parser.parse_tree(
                new_text.encode("utf-8"), kind, old_tree=old_tree
            )
            self._logger.debug(
                "incremental-reparse",
                file_name=source_file.file_name,
                span_start=change_range.span_start,
            )
            return self._parser.build_source_file(
                source_file.file_name,
                new_text,
                tree,
                version=version,
                script_kind=kind,
            )

        return self._parser.parse_source_file(
            source_file.file_name,
            new_text,
            version=version,
            script_kind=kind,
        )

    def parse_source_file(
        self,
        file_name: str,
        text: str,
        version: str,
        script_kind: ScriptKind,
    ) -> SourceFile:
        return self._parser.parse_source_file(
            file_name, text, version=version, script_kind=script_kind
        )

    def parse_expression(self, text: str, offset: int = 0) -> Node:
        return self._parser.parse_expression(text, offset)

    def parse_statements(self, text: str, offset: int = 0) -> list[Node]:
        return self._parser.parse_statements(text, offset)

    # ------------------------------------------------------------------
    # Incremental helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _can_reuse(
        source_file: SourceFile,
        new_text: str,
        change: TextChangeRange,
    ) -> bool:
        old_text = source_file.text
        if source_file.tree is None:
            return False
        if not 0 <= change.span_start <= change.old_end <= len(old_text):
            return False
        if change.new_end > len(new_text):
            return False
        if len(old_text) - change.old_end != len(new_text) - change.new_end:
            return False
        start = change.span_start
        return (
            old_text[:start] == new_text[:start]
            and old_text[change.old_end :] == new_text[change.new_end :]
        )

    @staticmethod
    def _apply_edit(
        tree: object,
        old_text: str,
        new_text: str,
        change: TextChangeRange,
    ) -> None:
        start = change.span_start
        tree.edit(  # type: ignore[attr-defined]
            start_byte=_byte_len(old_text[:start]),
            old_end_byte=_byte_len(old_text[: change.old_end]),
            new_end_byte=_byte_len(new_text[: change.new_end]),
            start_point=_point(old_text, start),
            old_end_point=_point(old_text, change.old_end),
            new_end_point=_point(new_text, change.new_end),
        )
