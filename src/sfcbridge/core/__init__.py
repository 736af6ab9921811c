"""Core utilities shared across :mod:`sfcbridge` modules.

The core namespace provides configuration loading and logging setup so the
synthesis modules stay focused on document transformation.

Example:
    >>> from sfcbridge.core import BridgeSettings
    >>> BridgeSettings().template_suffix
    '.template'
"""

from __future__ import annotations

from .config import AppConfig, BridgeSettings, ConfigError, load_config
from .logging import Logger, configure_logging, get_logger

__all__ = [
    "AppConfig",
    "BridgeSettings",
    "ConfigError",
    "Logger",
    "configure_logging",
    "get_logger",
    "load_config",
]
