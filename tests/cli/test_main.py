"""Tests for the :mod:`sfcbridge.__main__` entrypoint."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from sfcbridge.__main__ import main


def test_main_invokes_cli(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SFCBRIDGE_LOG_LEVEL", "warning")
    monkeypatch.setattr(sys, "argv", ["sfcbridge", "config", "--bare"])

    configured: dict[str, object] = {}

    def fake_configure_logging(*, level: str, log_dir=None, console=None) -> None:
        configured["level"] = level
        configured["log_dir"] = log_dir

    monkeypatch.setattr("sfcbridge.cli.configure_logging", fake_configure_logging)

    with pytest.raises(SystemExit) as exc:
        main()

    assert exc.value.code == 0
    assert configured == {"level": "WARNING", "log_dir": None}
    assert 'log_level = "WARNING"' in capsys.readouterr().out
