"""Drop-in replacements for the host's create/update source-file operations."""

from __future__ import annotations

from typing import TYPE_CHECKING
import weakref

from sfcbridge.core.config import BridgeSettings
from sfcbridge.core.logging import Logger, get_logger
from sfcbridge.errors import MarkupParseError, TemplateTransformError
from sfcbridge.syntax import Node, Printer, ScriptKind, SourceFile
from sfcbridge.template import (
    MarkupParser,
    TemplateTransformer,
    VueTemplateTransformer,
    component_template_text,
)

from .injector import inject_template
from .paths import (
    component_file_name,
    is_component_file,
    is_virtual_template_file,
)
from .rewriter import rewrite_script
from .source_map import PositionMapStore, build_map, default_store

if TYPE_CHECKING:
    from sfcbridge.host import HostEngine, ScriptSnapshot, TextChangeRange

__all__ = ["SourceFileUpdater"]


class SourceFileUpdater:
    """Layer synthetic documents over a host engine's source-file cache.

    Virtual template documents are re-derived from scratch on every call:
    the template is transformed, injected, printed and re-parsed, and the
    resulting position map replaces the stored one. Component script
    documents get their default export wrapped once per document object.
    Every other document passes through untouched.

    Processed documents and the script kind each document was created with
    are tracked in weak tables, so entries vanish with the documents the
    host discards.
    """

    def __init__(
        self,
        host: "HostEngine",
        *,
        settings: BridgeSettings | None = None,
        transformer: TemplateTransformer | None = None,
        markup_parser: MarkupParser | None = None,
        source_maps: PositionMapStore | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._host = host
        self._settings = settings or BridgeSettings()
        self._transformer = transformer or VueTemplateTransformer(
            host, self._settings
        )
        self._markup_parser = markup_parser or MarkupParser(
            getattr(host, "parser", None)
        )
        self._source_maps = (
            source_maps if source_maps is not None else default_store
        )
        self._logger = logger or get_logger(__name__, component="updater")
        self._processed: weakref.WeakSet[SourceFile] = weakref.WeakSet()
        self._script_kinds: weakref.WeakKeyDictionary[
            SourceFile, ScriptKind | None
        ] = weakref.WeakKeyDictionary()

    @property
    def source_maps(self) -> PositionMapStore:
        return self._source_maps

    def is_processed(self, source_file: SourceFile) -> bool:
        return source_file in self._processed

    def script_kind_of(self, source_file: SourceFile) -> ScriptKind | None:
        """Return the script kind recorded when ``source_file`` was produced."""

        return self._script_kinds.get(source_file)

    # ------------------------------------------------------------------
    # Host operations
    # ------------------------------------------------------------------
    def materialize(
        self,
        file_name: str,
        snapshot: "ScriptSnapshot",
        version: str,
        script_kind: ScriptKind | None = None,
    ) -> SourceFile:
        """Create the document for ``file_name`` and apply synthesis."""

        source_file = self._host.create_source_file(
            file_name, snapshot, version, script_kind
        )
        return self.apply(source_file, snapshot, script_kind)

    def reapply(
        self,
        source_file: SourceFile,
        snapshot: "ScriptSnapshot",
        version: str,
        change_range: "TextChangeRange | None",
    ) -> SourceFile:
        """Update ``source_file`` through the host, then apply synthesis.

        The script kind recorded for the previous document decides routing,
        since the host's update does not carry it.
        """

        script_kind = self._script_kinds.get(source_file)
        updated = self._host.update_source_file(
            source_file, snapshot, version, change_range
        )
        return self.apply(updated, snapshot, script_kind)

    def apply(
        self,
        source_file: SourceFile,
        snapshot: "ScriptSnapshot",
        script_kind: ScriptKind | None = None,
    ) -> SourceFile:
        """Route ``source_file`` to template synthesis or script rewriting."""

        file_name = source_file.file_name
        ts_like = script_kind is not None and script_kind.is_ts_like
        result = source_file
        if source_file not in self._processed:
            if is_virtual_template_file(file_name, self._settings):
                result = self._synthesize_template(source_file, snapshot)
                self._processed.add(result)
            elif is_component_file(file_name, self._settings) and not ts_like:
                rewrite_script(
                    source_file, settings=self._settings, logger=self._logger
                )
                self._processed.add(source_file)

        self._script_kinds[result] = script_kind
        return result

    # ------------------------------------------------------------------
    # Template synthesis
    # ------------------------------------------------------------------
    def _synthesize_template(
        self, source_file: SourceFile, snapshot: "ScriptSnapshot"
    ) -> SourceFile:
        file_name = source_file.file_name
        template_text = component_template_text(snapshot.get_text())
        expressions = self._transform(file_name, template_text)

        inject_template(source_file, expressions, settings=self._settings)
        printed = Printer(source_file.text).print_file(source_file)
        synthetic = self._host.parse_source_file(
            file_name, printed, source_file.version, ScriptKind.JS
        )

        position_map = build_map(source_file, synthetic)
        self._source_maps.set(
            file_name,
            position_map,
            alias=component_file_name(file_name, self._settings),
        )
        self._logger.debug(
            "template-synthesized",
            file_name=file_name,
            expressions=len(expressions),
            mappings=len(position_map),
        )
        return synthetic

    def _transform(self, file_name: str, template_text: str) -> list[Node]:
        if not template_text:
            return []
        try:
            tree = self._markup_parser.parse(template_text)
            return self._transformer.transform_template(tree, template_text)
        except TemplateTransformError as exc:
            self._logger.warning(
                "template-transform-failed",
                file_name=file_name,
                error=str(exc),
                offset=exc.offset,
                partial=len(exc.partial),
            )
            return list(exc.partial)
        except MarkupParseError as exc:
            self._logger.warning(
                "template-transform-failed",
                file_name=file_name,
                error=str(exc),
                offset=exc.offset,
                partial=0,
            )
            return []
        except Exception as exc:  # noqa: BLE001
            self._logger.exception(
                "template-transform-failed",
                file_name=file_name,
                error=str(exc),
            )
            return []
