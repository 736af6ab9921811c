"""Synthetic single-file-component documents for static-analysis engines.

The package turns the template and script sections of a component file into
documents a JavaScript analysis engine can type-check, and keeps the position
maps needed to translate results back into the original template text.

Example:
    >>> from sfcbridge import __version__
    >>> __version__.split(".")[0]
    '0'
"""

from importlib import metadata

try:
    __version__ = metadata.version("sfcbridge")
except metadata.PackageNotFoundError:  # pragma: no cover - source checkout
    __version__ = "0.0.0"

__all__ = ["__version__"]
