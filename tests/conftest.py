"""Shared pytest fixtures for sfcbridge tests."""

from __future__ import annotations

import logging
from textwrap import dedent

import pytest

from sfcbridge.bridge import PositionMapStore, SourceFileUpdater
from sfcbridge.core.config import BridgeSettings


@pytest.fixture(autouse=True)
def reset_root_handlers():
    """Leave the root logger as each test found it."""

    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()


@pytest.fixture()
def settings() -> BridgeSettings:
    return BridgeSettings()


@pytest.fixture()
def host():
    """Return a tree-sitter host, skipping when grammars are unavailable."""

    pytest.importorskip("tree_sitter_language_pack")
    from sfcbridge.host import TreeSitterHost

    return TreeSitterHost()


@pytest.fixture()
def store(settings: BridgeSettings) -> PositionMapStore:
    return PositionMapStore(settings)


@pytest.fixture()
def updater(host, settings: BridgeSettings, store) -> SourceFileUpdater:
    return SourceFileUpdater(host, settings=settings, source_maps=store)


@pytest.fixture()
def component_text() -> str:
    """Return a small component with template, script and style blocks."""

    return dedent(
        """\
        <template>
          <div class="greeting">{{ msg }}</div>
        </template>

        <script>
        export default {
          data() {
            return { msg: 'hi' };
          }
        }
        </script>

        <style scoped>
        .greeting { color: red; }
        </style>
        """
    )
