"""Tests for CLI commands."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from types import TracebackType

import pytest
from typer.testing import CliRunner

from pomoterm.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in list(os.environ):
        if key.startswith("POMOTERM_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("POMOTERM_SESSIONS_DIR", str(tmp_path / "sessions"))
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    monkeypatch.chdir(tmp_path)


class ScriptedKeyReader:
    """Stand-in for the terminal key reader that types a fixed script."""

    script = "sq"

    def __init__(self) -> None:
        self._keys = list(self.script)

    def __enter__(self) -> ScriptedKeyReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        return None

    def read_key(self) -> str | None:
        return self._keys.pop(0) if self._keys else None


class TestDoctorCommand:
    def test_doctor_runs(self) -> None:
        result = runner.invoke(app, ["doctor"])
        assert result.exit_code == 0
        assert "pomoterm Doctor" in result.output
        assert "Python" in result.output
        assert "Interactive terminal" in result.output

    def test_doctor_without_pygame(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(sys.modules, "pygame", None)
        monkeypatch.delitem(sys.modules, "pomoterm.audio.player", raising=False)
        result = runner.invoke(app, ["doctor"])
        assert result.exit_code == 0
        assert "✗ audio (optional)" in result.output
        assert "pygame not importable" in result.output


class TestPresetsCommand:
    def test_lists_presets(self) -> None:
        result = runner.invoke(app, ["presets"])
        assert result.exit_code == 0
        assert "classic (default)" in result.output
        assert "standard" in result.output
        assert "Long Break" in result.output
        assert "30m 00s" in result.output


class TestRunCommand:
    def test_unknown_preset(self) -> None:
        result = runner.invoke(app, ["run", "--preset", "nope", "--mute"])
        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_requires_terminal(self) -> None:
        result = runner.invoke(app, ["run", "--mute"])
        assert result.exit_code == 1
        assert "Terminal error" in result.output

    def test_session_reports_statistics(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("pomoterm.ui.keyboard.KeyReader", ScriptedKeyReader)
        result = runner.invoke(app, ["run", "--mute", "--preset", "standard"])
        assert result.exit_code == 0
        assert "Session Statistics" in result.output
        assert "Completed cycles" in result.output

    def test_event_log_written(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setattr("pomoterm.ui.keyboard.KeyReader", ScriptedKeyReader)
        result = runner.invoke(app, ["run", "--mute", "--log-events"])
        assert result.exit_code == 0

        logs = list((tmp_path / "sessions").glob("*/events.jsonl"))
        assert len(logs) == 1
        events = [json.loads(line) for line in logs[0].read_text().strip().split("\n")]
        types = [e["type"] for e in events]
        assert types[0] == "session.start"
        assert "timer.start" in types
        assert types[-2:] == ["timer.quit", "session.complete"]
        assert "focus_time" in events[-1]["data"]

        stats = json.loads((logs[0].parent / "statistics.json").read_text())
        assert stats == events[-1]["data"]
        assert events[1]["state"] == "running"
        assert events[1]["phase"] == "Focus"

    def test_audio_without_pygame(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(sys.modules, "pygame", None)
        monkeypatch.delitem(sys.modules, "pomoterm.audio.player", raising=False)
        result = runner.invoke(app, ["run"])
        assert result.exit_code == 1
        assert "Audio error" in result.output
        assert "--mute" in result.output
