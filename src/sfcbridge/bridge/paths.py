"""File identity helpers for component and virtual template documents."""

from __future__ import annotations

from pathlib import PurePosixPath

from sfcbridge.core.config import BridgeSettings

__all__ = [
    "component_file_name",
    "component_module_specifier",
    "is_component_file",
    "is_virtual_template_file",
    "template_file_name",
]

_DEFAULT_SETTINGS = BridgeSettings()


def _settings(settings: BridgeSettings | None) -> BridgeSettings:
    return settings or _DEFAULT_SETTINGS


def is_component_file(
    file_name: str, settings: BridgeSettings | None = None
) -> bool:
    return file_name.endswith(_settings(settings).component_extension)


def is_virtual_template_file(
    file_name: str, settings: BridgeSettings | None = None
) -> bool:
    """Return whether ``file_name`` names a component's virtual template.

    Example:
        >>> is_virtual_template_file("src/App.vue.template")
        True
        >>> is_virtual_template_file("src/App.vue")
        False
    """

    config = _settings(settings)
    return file_name.endswith(
        config.component_extension + config.template_suffix
    )


def template_file_name(
    component_file: str, settings: BridgeSettings | None = None
) -> str:
    return component_file + _settings(settings).template_suffix


def component_file_name(
    template_file: str, settings: BridgeSettings | None = None
) -> str:
    """Strip the template suffix from ``template_file`` when present."""

    suffix = _settings(settings).template_suffix
    if template_file.endswith(suffix):
        return template_file[: -len(suffix)]
    return template_file


def component_module_specifier(
    template_file: str, settings: BridgeSettings | None = None
) -> str:
    """Return the relative import specifier of a template's component.

    Example:
        >>> component_module_specifier("/src/components/Hello.vue.template")
        './Hello.vue'
    """

    component = component_file_name(template_file, settings)
    return "./" + PurePosixPath(component.replace("\\", "/")).name
