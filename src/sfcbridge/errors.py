"""Domain-specific exceptions for document synthesis."""

from __future__ import annotations

from typing import Sequence

from sfcbridge.syntax import Node


class BridgeError(RuntimeError):
    """Base error for synthesis failures."""


class MarkupParseError(BridgeError):
    """Raised when template markup cannot be parsed into a tree."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset


class TemplateTransformError(BridgeError):
    """Raised when template constructs cannot be turned into expressions.

    ``partial`` holds the expressions completed before the failure, in
    template order, so callers can still synthesize a usable document.
    """

    def __init__(
        self,
        message: str,
        *,
        partial: Sequence[Node] = (),
        offset: int | None = None,
    ) -> None:
        super().__init__(message)
        self.partial: tuple[Node, ...] = tuple(partial)
        self.offset = offset


class UnsupportedScriptKindError(BridgeError, ValueError):
    """Raised when a script kind name is not recognized."""


__all__ = [
    "BridgeError",
    "MarkupParseError",
    "TemplateTransformError",
    "UnsupportedScriptKindError",
]
