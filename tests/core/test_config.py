"""Tests for :mod:`sfcbridge.core.config`."""

from __future__ import annotations

from pathlib import Path
import tomllib

import pytest

from sfcbridge.core.config import (
    ENV_LOG_LEVEL,
    AppConfig,
    BridgeSettings,
    ConfigError,
    env_overrides,
    load_config,
    load_packaged_defaults,
    read_user_config,
    render_user_config,
)


def test_packaged_defaults_match_model_defaults() -> None:
    defaults = load_packaged_defaults()

    assert defaults["log_level"] == "INFO"
    assert defaults["bridge"] == BridgeSettings().model_dump()


def test_load_config_applies_precedence() -> None:
    config = load_config(
        user_config={
            "log_level": "warning",
            "bridge": {"bridge_module": "my-bridge"},
        },
        env_config={"log_level": "error"},
        cli_overrides={"log_level": "debug"},
    )

    assert config.log_level == "DEBUG"
    assert config.bridge.bridge_module == "my-bridge"
    assert config.bridge.render_helper == "__vlsRenderHelper"


def test_load_config_user_layer_merges_nested_tables() -> None:
    config = load_config(user_config={"bridge": {"template_suffix": ".tpl"}})

    assert config.bridge.template_suffix == ".tpl"
    assert config.bridge.component_extension == ".vue"


def test_load_config_rejects_invalid_bridge_payload() -> None:
    with pytest.raises(ConfigError):
        load_config(user_config={"bridge": "nope"})


def test_load_config_wraps_validation_errors() -> None:
    with pytest.raises(ConfigError):
        load_config(user_config={"bridge": {"template_suffix": "template"}})


def test_env_overrides_reads_log_level() -> None:
    assert env_overrides({ENV_LOG_LEVEL: "warning"}) == {
        "log_level": "warning"
    }
    assert env_overrides({}) == {}


def test_read_user_config_reports_invalid_toml(tmp_path: Path) -> None:
    path = tmp_path / "sfcbridge.toml"
    path.write_text("log_level = [", encoding="utf-8")

    with pytest.raises(ConfigError):
        read_user_config(path)


def test_read_user_config_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        read_user_config(tmp_path / "missing.toml")


def test_bridge_settings_helper_names_in_import_order() -> None:
    assert BridgeSettings().helper_names == (
        "__vlsRenderHelper",
        "__vlsComponentHelper",
        "__vlsIterationHelper",
        "__vlsListenerHelper",
    )


def test_render_user_config_round_trips(tmp_path: Path) -> None:
    config = AppConfig(
        log_level="warning",
        log_dir=tmp_path,
        bridge=BridgeSettings(bridge_module="other-bridge"),
    )

    rendered = render_user_config(config)
    parsed = tomllib.loads(rendered)

    assert rendered.startswith("# Generated by sfcbridge config")
    assert parsed["log_level"] == "WARNING"
    assert parsed["log_dir"] == str(tmp_path)
    assert parsed["bridge"]["bridge_module"] == "other-bridge"
    assert load_config(user_config=parsed) == config


def test_render_user_config_without_header() -> None:
    rendered = render_user_config(AppConfig(), include_defaults=False)

    assert not rendered.startswith("#")
    assert "[bridge]" in rendered
