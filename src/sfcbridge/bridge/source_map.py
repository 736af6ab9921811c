"""Range correspondences between template text and synthetic documents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Sequence

from sfcbridge.core.config import BridgeSettings
from sfcbridge.syntax import Node, SourceFile, TextRange

from .paths import component_file_name

__all__ = [
    "MappingEntry",
    "PositionMap",
    "PositionMapStore",
    "build_map",
    "default_store",
]


@dataclass(frozen=True, slots=True)
class MappingEntry:
    """One ``original -> synthetic`` range correspondence."""

    original: TextRange
    synthetic: TextRange

    @property
    def same_length(self) -> bool:
        return self.original.length == self.synthetic.length


@dataclass(frozen=True, slots=True)
class PositionMap:
    """Entries ordered by original start, then synthetic start.

    A lookup that finds no covering entry returns ``None``; callers treat
    that as "no mapping available".
    """

    entries: tuple[MappingEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[MappingEntry]:
        return iter(self.entries)

    def to_synthetic(self, offset: int) -> int | None:
        """Translate an original offset to the synthetic document."""

        entry = _innermost(
            (e for e in self.entries if e.original.contains(offset)),
            lambda e: e.original.length,
        )
        if entry is None:
            return None
        if entry.same_length:
            return entry.synthetic.pos + (offset - entry.original.pos)
        return entry.synthetic.pos

    def to_original(
        self, start: int, end: int | None = None
    ) -> TextRange | None:
        """Translate a synthetic range back to the original text.

        Example:
            >>> entry = MappingEntry(TextRange(5, 8), TextRange(90, 93))
            >>> pm = PositionMap((entry,))
            >>> pm.to_original(91, 92)
            TextRange(pos=6, end=7)
            >>> pm.to_original(10) is None
            True
        """

        target = TextRange(start, start if end is None else end)
        entry = _innermost(
            (e for e in self.entries if e.synthetic.covers(target)),
            lambda e: e.synthetic.length,
        )
        if entry is None:
            return None
        if entry.same_length:
            shift = entry.original.pos - entry.synthetic.pos
            return TextRange(target.pos + shift, target.end + shift)
        return entry.original


def _innermost(
    candidates: Iterable[MappingEntry],
    length: Callable[[MappingEntry], int],
) -> MappingEntry | None:
    best: MappingEntry | None = None
    for entry in candidates:
        if best is None or length(entry) <= length(best):
            best = entry
    return best


def _collect(
    original: Node, synthetic: Node, entries: list[MappingEntry]
) -> None:
    if original.kind != synthetic.kind:
        return
    if original.has_position and synthetic.has_position:
        entries.append(MappingEntry(original.range, synthetic.range))
    original_children = original.named_children
    synthetic_children = synthetic.named_children
    if len(original_children) != len(synthetic_children):
        return
    for left, right in zip(original_children, synthetic_children):
        _collect(left, right, entries)


def build_map(original: SourceFile, synthetic: SourceFile) -> PositionMap:
    """Pair ranges of ``original`` (pre-print) and ``synthetic`` (re-parsed).

    Both statement lists are walked in lockstep over named children. A node
    whose kind differs from its counterpart, or whose children cannot be
    paired one to one, ends the walk of that branch; constructs under it
    stay unmapped.
    """

    entries: list[MappingEntry] = []
    if len(original.statements) == len(synthetic.statements):
        for left, right in zip(original.statements, synthetic.statements):
            _collect(left, right, entries)
    entries.sort(key=lambda e: (e.original.pos, e.synthetic.pos))
    return PositionMap(tuple(entries))


class PositionMapStore:
    """Process-wide ``file name -> PositionMap`` table.

    Maps for a virtual template document are stored under both the template
    name and its component name; a new map replaces the previous one.
    """

    def __init__(self, settings: BridgeSettings | None = None) -> None:
        self._settings = settings or BridgeSettings()
        self._maps: dict[str, PositionMap] = {}

    def set(
        self,
        file_name: str,
        position_map: PositionMap,
        *,
        alias: str | None = None,
    ) -> None:
        """Store ``position_map`` under ``file_name`` and its component name.

        ``alias`` overrides the component name derived from the store's own
        settings.
        """

        self._maps[file_name] = position_map
        if alias is None:
            alias = component_file_name(file_name, self._settings)
        self._maps[alias] = position_map

    def get(self, file_name: str) -> PositionMap | None:
        return self._maps.get(file_name)

    def keys(self) -> Sequence[str]:
        return sorted(self._maps)

    def clear(self) -> None:
        self._maps.clear()

    def __contains__(self, file_name: object) -> bool:
        return file_name in self._maps

    def __len__(self) -> int:
        return len(self._maps)


default_store = PositionMapStore()
