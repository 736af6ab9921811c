"""Integration tests for the Typer application exposed by :mod:`sfcbridge.cli`."""

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest
from typer.testing import CliRunner

from sfcbridge.cli import create_app


@pytest.fixture()
def runner() -> CliRunner:
    """Return a Typer CLI runner for invoking the application."""

    return CliRunner()


@pytest.fixture()
def workdir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SFCBRIDGE_LOG_LEVEL", raising=False)
    return tmp_path


@pytest.fixture()
def component(workdir: Path, component_text: str) -> Path:
    path = workdir / "Hello.vue"
    path.write_text(component_text, encoding="utf-8")
    return path


def test_cli_help_lists_commands(runner: CliRunner) -> None:
    result = runner.invoke(create_app(), ["--help"])

    assert result.exit_code == 0
    for command in ("template", "script", "config"):
        assert command in result.stdout


def test_cli_template_prints_render_module(
    runner: CliRunner, component: Path
) -> None:
    pytest.importorskip("tree_sitter_language_pack")

    result = runner.invoke(
        create_app(),
        ["-l", "WARNING", "template", str(component)],
        catch_exceptions=False,
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.startswith("import __Component from './Hello.vue';\n")
    assert "__vlsRenderHelper(__Component, function() {\nthis.msg;\n});" in (
        result.stdout
    )


def test_cli_template_map_prints_mapping_lines(
    runner: CliRunner, component: Path
) -> None:
    pytest.importorskip("tree_sitter_language_pack")

    result = runner.invoke(
        create_app(),
        ["-l", "WARNING", "template", str(component), "--map"],
        catch_exceptions=False,
    )

    assert result.exit_code == 0, result.output
    assert "Position map" in result.stdout
    assert "this.msg" in result.stdout
    assert "'msg' -> " in result.stdout


def test_cli_script_wraps_default_export(
    runner: CliRunner, component: Path
) -> None:
    pytest.importorskip("tree_sitter_language_pack")

    result = runner.invoke(
        create_app(),
        ["-l", "WARNING", "script", str(component)],
        catch_exceptions=False,
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.startswith(
        "import __vueEditorBridge from 'vue-editor-bridge';\n"
    )
    assert "export default __vueEditorBridge({" in result.stdout


def test_cli_script_respects_typescript_kind(
    runner: CliRunner, component: Path
) -> None:
    pytest.importorskip("tree_sitter_language_pack")

    result = runner.invoke(
        create_app(),
        ["-l", "WARNING", "script", str(component), "--script-kind", "ts"],
        catch_exceptions=False,
    )

    assert result.exit_code == 0, result.output
    assert "__vueEditorBridge" not in result.stdout
    assert "export default {" in result.stdout


def test_cli_script_rejects_unknown_kind(
    runner: CliRunner, component: Path
) -> None:
    result = runner.invoke(
        create_app(),
        ["-l", "WARNING", "script", str(component), "-k", "coffee"],
    )

    assert result.exit_code != 0
    assert "--script-kind" in result.output


def test_cli_rejects_non_component_files(
    runner: CliRunner, workdir: Path
) -> None:
    path = workdir / "main.js"
    path.write_text("export default {}\n", encoding="utf-8")

    result = runner.invoke(
        create_app(), ["-l", "WARNING", "template", str(path)]
    )

    assert result.exit_code != 0
    assert "Expected a .vue file" in result.output


def test_cli_config_reflects_user_file(
    runner: CliRunner, workdir: Path
) -> None:
    (workdir / "sfcbridge.toml").write_text(
        '[bridge]\nbridge_module = "my-bridge"\n', encoding="utf-8"
    )

    result = runner.invoke(
        create_app(), ["-l", "WARNING", "config"], catch_exceptions=False
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.startswith("# Generated by sfcbridge config")
    rendered = tomllib.loads(result.stdout)
    assert rendered["log_level"] == "WARNING"
    assert rendered["bridge"]["bridge_module"] == "my-bridge"


def test_cli_config_bare_omits_header(
    runner: CliRunner, workdir: Path
) -> None:
    result = runner.invoke(
        create_app(), ["-l", "WARNING", "config", "--bare"]
    )

    assert result.exit_code == 0, result.output
    assert not result.stdout.startswith("#")


def test_cli_reports_invalid_config(
    runner: CliRunner, workdir: Path
) -> None:
    bad = workdir / "bad.toml"
    bad.write_text("log_level = [", encoding="utf-8")

    result = runner.invoke(
        create_app(), ["--config", str(bad), "config"]
    )

    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_cli_rejects_unknown_log_level(
    runner: CliRunner, workdir: Path
) -> None:
    result = runner.invoke(create_app(), ["-l", "LOUD", "config"])

    assert result.exit_code != 0
    assert "--log-level" in result.output
