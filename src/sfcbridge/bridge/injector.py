"""Replace a template document's body with a type-checkable render call."""

from __future__ import annotations

from typing import Sequence

from sfcbridge.core.config import BridgeSettings
from sfcbridge.syntax import (
    Node,
    SourceFile,
    create_call,
    create_expression_statement,
    create_function_expression,
    create_identifier,
    create_import_declaration,
)
from sfcbridge.template import render_statements

from .paths import component_module_specifier

__all__ = ["inject_template"]


def inject_template(
    source_file: SourceFile,
    expressions: Sequence[Node],
    *,
    settings: BridgeSettings | None = None,
) -> None:
    """Rewrite ``source_file`` in place into the synthetic render module.

    The resulting statements are, in order: a default import of the sibling
    component bound to the component placeholder, a named import of the four
    bridge helpers, and a render-helper call receiving the placeholder and an
    anonymous function whose body holds one statement per expression. The
    component import becomes the document's module indicator so names in the
    synthetic body stay module scoped.

    Example:
        >>> sf = SourceFile(file_name="/a/Hello.vue.template", text="")
        >>> inject_template(sf, [])
        >>> [str(st.kind) for st in sf.statements]
        ['import_statement', 'import_statement', 'expression_statement']
    """

    config = settings or BridgeSettings()
    component_import = create_import_declaration(
        component_module_specifier(source_file.file_name, config),
        default=config.component_identifier,
    )
    helper_import = create_import_declaration(
        config.bridge_module, named=config.helper_names
    )
    render = create_call(
        create_identifier(config.render_helper),
        [
            create_identifier(config.component_identifier),
            create_function_expression([], render_statements(expressions)),
        ],
    )

    source_file.statements = [
        component_import,
        helper_import,
        create_expression_statement(render),
    ]
    source_file.external_module_indicator = component_import
