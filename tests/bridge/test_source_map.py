"""Tests for position maps and the map store."""

from __future__ import annotations

import pytest

from sfcbridge.bridge import (
    MappingEntry,
    PositionMap,
    PositionMapStore,
    build_map,
    inject_template,
)
from sfcbridge.syntax import (
    Printer,
    SyntaxParser,
    SourceFile,
    TextRange,
    create_property_access,
    create_property_identifier,
    create_this,
    set_text_range,
)


def _entry(original: tuple[int, int], synthetic: tuple[int, int]) -> MappingEntry:
    return MappingEntry(TextRange(*original), TextRange(*synthetic))


def test_to_synthetic_shifts_within_equal_length_entries() -> None:
    position_map = PositionMap((_entry((10, 13), (100, 103)),))

    assert position_map.to_synthetic(11) == 101
    assert position_map.to_synthetic(13) == 103
    assert position_map.to_synthetic(9) is None


def test_to_synthetic_prefers_innermost_entry() -> None:
    position_map = PositionMap(
        (
            _entry((10, 13), (95, 103)),
            _entry((10, 13), (100, 103)),
        )
    )

    assert position_map.to_synthetic(12) == 102


def test_to_synthetic_snaps_to_start_of_unequal_entries() -> None:
    position_map = PositionMap((_entry((10, 13), (95, 103)),))

    assert position_map.to_synthetic(12) == 95


def test_to_original_returns_whole_range_for_unequal_entries() -> None:
    position_map = PositionMap((_entry((10, 13), (95, 103)),))

    assert position_map.to_original(96, 99) == TextRange(10, 13)
    assert position_map.to_original(90, 99) is None


def test_build_map_pairs_matching_nodes() -> None:
    pytest.importorskip("tree_sitter_language_pack")
    template = "<template><p>{{ msg }}</p></template>"
    offset = template.index("msg")
    name = set_text_range(create_property_identifier("msg"), offset, offset + 3)
    expression = set_text_range(
        create_property_access(create_this(), name), offset, offset + 3
    )
    original = SourceFile(file_name="Hello.vue.template", text=template)
    inject_template(original, [expression])
    printed = Printer().print_file(original)
    synthetic = SyntaxParser().parse_source_file("Hello.vue.template", printed)

    position_map = build_map(original, synthetic)

    assert len(position_map) == 2
    access = printed.index("this.msg")
    assert position_map.to_synthetic(offset) == access + 5
    assert position_map.to_original(access + 5, access + 8) == TextRange(
        offset, offset + 3
    )
    starts = [(e.original.pos, e.synthetic.pos) for e in position_map]
    assert starts == sorted(starts)


def test_build_map_stops_at_mismatched_statements() -> None:
    original = SourceFile(file_name="a.js", text="")
    synthetic = SourceFile(file_name="a.js", text="")
    synthetic.statements = [create_this()]

    assert len(build_map(original, synthetic)) == 0


def test_store_registers_template_and_component_names() -> None:
    store = PositionMapStore()
    position_map = PositionMap()

    store.set("/src/App.vue.template", position_map)

    assert store.get("/src/App.vue.template") is position_map
    assert store.get("/src/App.vue") is position_map
    assert "/src/App.vue" in store
    assert store.keys() == ["/src/App.vue", "/src/App.vue.template"]


def test_store_replaces_previous_maps() -> None:
    store = PositionMapStore()
    store.set("A.vue.template", PositionMap())
    replacement = PositionMap((_entry((0, 1), (0, 1)),))

    store.set("A.vue.template", replacement)

    assert store.get("A.vue") is replacement
    assert len(store) == 2
    store.clear()
    assert len(store) == 0
