"""Text snapshots and change ranges exchanged with the host engine."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["ScriptSnapshot", "TextChangeRange"]


@dataclass(frozen=True, slots=True)
class ScriptSnapshot:
    """Immutable text of one document version."""

    text: str

    def get_text(self, start: int = 0, end: int | None = None) -> str:
        return self.text[start:end]

    def get_length(self) -> int:
        return len(self.text)


@dataclass(frozen=True, slots=True)
class TextChangeRange:
    """Replacement of ``span_length`` characters at ``span_start``.

    ``new_length`` is the length of the text that replaced the span.
    """

    span_start: int
    span_length: int
    new_length: int

    @property
    def old_end(self) -> int:
        return self.span_start + self.span_length

    @property
    def new_end(self) -> int:
        return self.span_start + self.new_length

    @classmethod
    def between(cls, old_text: str, new_text: str) -> "TextChangeRange":
        """Return the smallest range turning ``old_text`` into ``new_text``.

        Example:
            >>> TextChangeRange.between("abc", "aXc")
            TextChangeRange(span_start=1, span_length=1, new_length=1)
        """

        limit = min(len(old_text), len(new_text))
        start = 0
        while start < limit and old_text[start] == new_text[start]:
            start += 1
        old_end, new_end = len(old_text), len(new_text)
        while (
            old_end > start
            and new_end > start
            and old_text[old_end - 1] == new_text[new_end - 1]
        ):
            old_end -= 1
            new_end -= 1
        return cls(
            span_start=start,
            span_length=old_end - start,
            new_length=new_end - start,
        )
