"""Configuration models and loaders for :mod:`sfcbridge`."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
import os
from pathlib import Path
from typing import Any, Mapping

import tomllib
import tomlkit
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from sfcbridge.resources import get_resource

DEFAULTS_RESOURCE_NAME = "sfcbridge.defaults.toml"
USER_CONFIG_FILENAME = "sfcbridge.toml"
ENV_LOG_LEVEL = "SFCBRIDGE_LOG_LEVEL"


class ConfigError(RuntimeError):
    """Raised when a configuration payload cannot be loaded or validated."""


class BridgeSettings(BaseModel):
    """Names and file conventions used when synthesizing documents."""

    bridge_module: str = Field(
        default="vue-editor-bridge",
        description="Module supplying the typed bridge helpers.",
    )
    bridge_identifier: str = Field(
        default="__vueEditorBridge",
        description="Identifier wrapping a component's exported options.",
    )
    component_identifier: str = Field(
        default="__Component",
        description="Placeholder bound to the sibling component import.",
    )
    render_helper: str = Field(
        default="__vlsRenderHelper",
        description="Helper receiving the component and the render body.",
    )
    component_helper: str = Field(
        default="__vlsComponentHelper",
        description="Helper type-checking child component usage.",
    )
    iteration_helper: str = Field(
        default="__vlsIterationHelper",
        description="Helper type-checking ``v-for`` sources and aliases.",
    )
    listener_helper: str = Field(
        default="__vlsListenerHelper",
        description="Helper type-checking event listener callbacks.",
    )
    component_extension: str = Field(
        default=".vue",
        description="File extension identifying component files.",
    )
    template_suffix: str = Field(
        default=".template",
        description="Suffix appended to a component path for its template.",
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
        "frozen": True,
    }

    @field_validator("component_extension", "template_suffix")
    @classmethod
    def _require_dot(cls, value: str) -> str:
        if not value.startswith("."):
            raise ValueError(f"Suffix must start with '.': {value!r}")
        return value

    @property
    def helper_names(self) -> tuple[str, str, str, str]:
        """Return the helper identifiers in import order."""

        return (
            self.render_helper,
            self.component_helper,
            self.iteration_helper,
            self.listener_helper,
        )


class AppConfig(BaseModel):
    """Root configuration for the :mod:`sfcbridge` application."""

    log_level: str = Field(
        default="INFO",
        description="Default logging level for the application runtime.",
    )
    log_dir: Path | None = Field(
        default=None,
        description="Optional directory receiving rotating JSON logs.",
    )
    bridge: BridgeSettings = Field(
        default_factory=BridgeSettings,
        description="Synthesis naming conventions.",
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @model_validator(mode="after")
    def _post_process(self) -> "AppConfig":
        object.__setattr__(self, "log_level", self.log_level.upper())
        return self


def read_packaged_defaults_text() -> str:
    """Return the raw packaged defaults TOML content."""

    resource = get_resource(DEFAULTS_RESOURCE_NAME)
    return resource.read_text(encoding="utf-8")


def load_packaged_defaults() -> dict[str, Any]:
    """Load the packaged defaults as a plain dictionary.

    Example:
        >>> load_packaged_defaults()["bridge"]["bridge_module"]
        'vue-editor-bridge'
    """

    return tomllib.loads(read_packaged_defaults_text())


def read_user_config(path: Path) -> dict[str, Any]:
    """Parse a user ``sfcbridge.toml`` file.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"Unable to read config {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Collect configuration overrides from environment variables."""

    source = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    level = source.get(ENV_LOG_LEVEL)
    if level:
        overrides["log_level"] = level
    return overrides


def _deep_merge(
    base: Mapping[str, Any],
    overlay: Mapping[str, Any],
) -> dict[str, Any]:
    """Recursively merge ``overlay`` into ``base`` returning a new dict."""

    merged: dict[str, Any] = dict(base)
    for key, value in overlay.items():
        if (
            key in merged
            and isinstance(merged[key], MappingABC)
            and isinstance(value, MappingABC)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    *,
    defaults: Mapping[str, Any] | None = None,
    user_config: Mapping[str, Any] | None = None,
    env_config: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Load configuration according to the precedence stack.

    Args:
        defaults: Packaged defaults; loaded from the package when omitted.
        user_config: Parsed user ``sfcbridge.toml`` content.
        env_config: Settings derived from environment variables.
        cli_overrides: Settings supplied via CLI flags.

    Returns:
        A validated :class:`AppConfig` instance.

    Raises:
        ConfigError: If the merged payload fails validation.
    """

    stack = dict(load_packaged_defaults() if defaults is None else defaults)
    for layer in (user_config, env_config, cli_overrides):
        if layer:
            stack = _deep_merge(stack, layer)

    bridge_raw = stack.get("bridge")
    if bridge_raw is not None and not isinstance(
        bridge_raw, (MappingABC, BridgeSettings)
    ):
        raise ConfigError(f"Unsupported bridge configuration: {bridge_raw!r}")

    try:
        return AppConfig(**stack)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def render_user_config(
    config: AppConfig,
    *,
    include_defaults: bool = True,
) -> str:
    """Render ``config`` as an ``sfcbridge.toml`` document."""

    document = tomlkit.document()

    if include_defaults:
        document.add(tomlkit.comment("Generated by sfcbridge config"))
        document.add(
            tomlkit.comment(
                "Precedence: CLI flags > env vars > sfcbridge.toml > defaults"
            )
        )
        document.add(tomlkit.comment(f"  {ENV_LOG_LEVEL}=info"))
        document.add(tomlkit.nl())

    document["log_level"] = config.log_level
    if config.log_dir is not None:
        document["log_dir"] = str(config.log_dir)

    bridge_table = tomlkit.table()
    for name, value in config.bridge.model_dump().items():
        bridge_table[name] = value
    document["bridge"] = bridge_table

    return tomlkit.dumps(document)


__all__ = [
    "AppConfig",
    "BridgeSettings",
    "ConfigError",
    "DEFAULTS_RESOURCE_NAME",
    "ENV_LOG_LEVEL",
    "USER_CONFIG_FILENAME",
    "env_overrides",
    "load_config",
    "load_packaged_defaults",
    "read_packaged_defaults_text",
    "read_user_config",
    "render_user_config",
]
