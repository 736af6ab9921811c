"""Command-line interface for :mod:`sfcbridge`.

The ``sfcbridge`` console script prints the synthetic documents the bridge
hands to a host engine, which makes template transformation and position
maps easy to inspect.

Example:
    >>> import typer
    >>> from sfcbridge.cli import create_app
    >>> app = create_app()
    >>> isinstance(app, typer.Typer)
    True
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from sfcbridge.bridge import (
    PositionMap,
    PositionMapStore,
    SourceFileUpdater,
    is_component_file,
    template_file_name,
)
from sfcbridge.core.config import (
    USER_CONFIG_FILENAME,
    AppConfig,
    ConfigError,
    env_overrides,
    load_config,
    read_user_config,
    render_user_config,
)
from sfcbridge.core.logging import configure_logging, get_logger
from sfcbridge.errors import UnsupportedScriptKindError
from sfcbridge.host import ScriptSnapshot, TreeSitterHost, parse_script_kind
from sfcbridge.syntax import MissingParserError, Printer
from sfcbridge.template import (
    component_script_text,
    extract_regions,
    script_kind_for_language,
)

_app_help = (
    "Inspect the synthetic documents generated for single-file components."
    "\n\n"
    "Use `sfcbridge template` to print a component's render module and "
    "`sfcbridge script` to print its rewritten script."
)
_SNIPPET_WIDTH = 32


def _resolve_user_config(config_path: Path | None) -> dict[str, Any] | None:
    if config_path is not None:
        return read_user_config(config_path)
    candidate = Path.cwd() / USER_CONFIG_FILENAME
    if candidate.is_file():
        return read_user_config(candidate)
    return None


def _app_config(ctx: typer.Context) -> AppConfig:
    config = ctx.obj
    if isinstance(config, AppConfig):
        return config
    return load_config()


def _read_component(path: Path, config: AppConfig) -> str:
    if not is_component_file(str(path), config.bridge):
        raise typer.BadParameter(
            f"Expected a {config.bridge.component_extension} file: {path}",
            param_hint="PATH",
        )
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise typer.BadParameter(
            f"Unable to read {path}: {exc}", param_hint="PATH"
        ) from exc


def _updater(config: AppConfig) -> SourceFileUpdater:
    return SourceFileUpdater(
        TreeSitterHost(),
        settings=config.bridge,
        source_maps=PositionMapStore(config.bridge),
    )


def _snippet(text: str, start: int, end: int) -> str:
    snippet = text[start:end]
    if len(snippet) > _SNIPPET_WIDTH:
        return snippet[: _SNIPPET_WIDTH - 3] + "..."
    return snippet


def _echo_map(
    position_map: PositionMap,
    *,
    original_text: str,
    synthetic_text: str,
) -> None:
    typer.secho("Position map:", fg=typer.colors.CYAN, bold=True)
    if not len(position_map):
        typer.echo("  (no mappings)")
        return
    for entry in position_map:
        original, synthetic = entry.original, entry.synthetic
        typer.echo(
            f"  {original.pos}-{original.end} "
            f"{_snippet(original_text, original.pos, original.end)!r} -> "
            f"{synthetic.pos}-{synthetic.end} "
            f"{_snippet(synthetic_text, synthetic.pos, synthetic.end)!r}"
        )


def _fail(message: str, exc: Exception) -> typer.Exit:
    typer.secho(f"{message}: {exc}", fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


def create_app() -> "typer.Typer":
    """Return the Typer application powering the ``sfcbridge`` CLI.

    Example:
        >>> from typer.testing import CliRunner
        >>> result = CliRunner().invoke(create_app(), ["--help"])
        >>> result.exit_code
        0
    """

    app = typer.Typer(
        help=_app_help,
        no_args_is_help=True,
        rich_markup_mode="rich",
    )

    @app.callback()
    def main_callback(
        ctx: typer.Context,
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            "-l",
            help="Override the logging level (DEBUG/INFO/WARNING/ERROR).",
        ),
        config_path: Path | None = typer.Option(
            None,
            "--config",
            "-c",
            dir_okay=False,
            help=(
                "Read settings from this TOML file instead of "
                f"./{USER_CONFIG_FILENAME}."
            ),
        ),
    ) -> None:
        """Resolve configuration and logging for every subcommand."""

        try:
            config = load_config(
                user_config=_resolve_user_config(config_path),
                env_config=env_overrides(),
                cli_overrides={"log_level": log_level} if log_level else None,
            )
        except ConfigError as exc:
            raise _fail("Configuration error", exc) from exc

        try:
            configure_logging(level=config.log_level, log_dir=config.log_dir)
        except ValueError as exc:
            raise typer.BadParameter(
                str(exc), param_hint="--log-level"
            ) from exc

        ctx.obj = config

    @app.command(
        "template",
        help="Print the synthetic render module of a component's template.",
    )
    def template_command(
        ctx: typer.Context,
        path: Path = typer.Argument(
            ...,
            exists=True,
            dir_okay=False,
            help="Component file to synthesize.",
        ),
        show_map: bool = typer.Option(
            False,
            "--map",
            help="Also print the position map.",
        ),
    ) -> None:
        config = _app_config(ctx)
        text = _read_component(path, config)
        updater = _updater(config)
        file_name = template_file_name(str(path), config.bridge)
        logger = get_logger(__name__, command="template")

        try:
            source_file = updater.materialize(
                file_name, ScriptSnapshot(text), "0"
            )
        except MissingParserError as exc:
            raise _fail("Parser unavailable", exc) from exc

        logger.info(
            "template-printed",
            file_name=file_name,
            statements=len(source_file.statements),
        )
        typer.echo(source_file.text, nl=False)

        if show_map:
            position_map = updater.source_maps.get(file_name) or PositionMap()
            _echo_map(
                position_map,
                original_text=text,
                synthetic_text=source_file.text,
            )

    @app.command(
        "script",
        help="Print a component's script with its default export wrapped.",
    )
    def script_command(
        ctx: typer.Context,
        path: Path = typer.Argument(
            ...,
            exists=True,
            dir_okay=False,
            help="Component file whose script should be rewritten.",
        ),
        kind: str | None = typer.Option(
            None,
            "--script-kind",
            "-k",
            help="Override the script kind detected from the lang attribute.",
        ),
    ) -> None:
        config = _app_config(ctx)
        text = _read_component(path, config)
        if kind is not None:
            try:
                script_kind = parse_script_kind(kind)
            except UnsupportedScriptKindError as exc:
                raise typer.BadParameter(
                    str(exc), param_hint="--script-kind"
                ) from exc
        else:
            script_kind = script_kind_for_language(
                extract_regions(text).language("script")
            )
        logger = get_logger(__name__, command="script")

        try:
            source_file = _updater(config).materialize(
                str(path),
                ScriptSnapshot(component_script_text(text)),
                "0",
                script_kind,
            )
        except MissingParserError as exc:
            raise _fail("Parser unavailable", exc) from exc

        logger.info(
            "script-printed",
            file_name=str(path),
            script_kind=str(script_kind),
        )
        typer.echo(Printer().print_file(source_file), nl=False)

    @app.command(
        "config",
        help="Print the effective configuration as TOML.",
    )
    def config_command(
        ctx: typer.Context,
        bare: bool = typer.Option(
            False,
            "--bare",
            help="Omit the explanatory header comments.",
        ),
    ) -> None:
        config = _app_config(ctx)
        typer.echo(
            render_user_config(config, include_defaults=not bare), nl=False
        )

    return app


__all__ = ["create_app"]
