"""Wrap a component's default-exported options object in the bridge call."""

from __future__ import annotations

from sfcbridge.core.config import BridgeSettings
from sfcbridge.core.logging import Logger, get_logger
from sfcbridge.syntax import (
    Kind,
    Node,
    SourceFile,
    create_call,
    create_identifier,
    create_import_declaration,
    set_text_range,
)

__all__ = ["find_default_export_object", "rewrite_script"]


def find_default_export_object(
    source_file: SourceFile,
) -> tuple[Node, Node] | None:
    """Return ``(export_statement, object_literal)`` for ``export default {}``.

    Only a top-level default export whose value is an object literal
    qualifies.
    """

    for statement in source_file.statements:
        if statement.kind != Kind.EXPORT_STATEMENT:
            continue
        children = statement.children
        for index, child in enumerate(children):
            if child.named or child.text != "default":
                continue
            value = next((c for c in children[index + 1 :] if c.named), None)
            if value is not None and value.kind == Kind.OBJECT:
                return statement, value
            return None
    return None


def rewrite_script(
    source_file: SourceFile,
    *,
    settings: BridgeSettings | None = None,
    logger: Logger | None = None,
) -> bool:
    """Rewrite ``export default {...}`` into ``export default bridge({...})``.

    A default import of the bridge identifier is inserted first with a
    zero-width range at offset 0. The call and its argument list take the
    object literal's exact range and the callee takes its first character,
    so range-based consumers see the literal where it always was. Returns
    ``False`` without touching the document when there is nothing to wrap.
    """

    found = find_default_export_object(source_file)
    if found is None:
        return False

    config = settings or BridgeSettings()
    statement, literal = found

    bridge_import = create_import_declaration(
        config.bridge_module, default=config.bridge_identifier
    )
    for node in bridge_import.walk():
        set_text_range(node, 0, 0)

    callee = set_text_range(
        create_identifier(config.bridge_identifier),
        literal.pos,
        literal.pos + 1,
    )
    call = set_text_range(create_call(callee, [literal]), literal.range)
    set_text_range(call.children[1], literal.range)

    statement.replace_child(literal, call)
    source_file.statements.insert(0, bridge_import)
    if source_file.external_module_indicator is None:
        source_file.external_module_indicator = bridge_import

    log = logger or get_logger(__name__, component="rewriter")
    log.debug(
        "script-rewritten",
        file_name=source_file.file_name,
        pos=literal.pos,
        end=literal.end,
    )
    return True
