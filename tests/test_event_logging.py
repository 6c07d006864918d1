"""Tests for the per-session event journal."""

from __future__ import annotations

import json
import os
from datetime import UTC, datetime
from pathlib import Path

from pomoterm.cycle import PhaseKind
from pomoterm.engine import RenderSnapshot, TimerState
from pomoterm.logging.events import EventLog, SessionDir, new_session_id
from pomoterm.stats import Statistics


def _read_events(session_dir: SessionDir) -> list[dict]:
    lines = session_dir.events_path.read_text(encoding="utf-8").strip().split("\n")
    return [json.loads(line) for line in lines]


class TestSessionDir:
    def test_creates_directory(self, tmp_path: Path) -> None:
        sd = SessionDir(base=tmp_path / "sessions")
        assert sd.path.is_dir()
        assert sd.events_path.name == "events.jsonl"
        assert sd.statistics_path.name == "statistics.json"

    def test_session_id_format(self) -> None:
        session_id = new_session_id(datetime(2026, 3, 1, 9, 5, tzinfo=UTC))
        stamp, suffix = session_id.split("_")
        assert stamp == "20260301T0905Z"
        assert len(suffix) == 8
        assert set(suffix) <= set("0123456789abcdef")

    def test_explicit_session_id(self, tmp_path: Path) -> None:
        sd = SessionDir(base=tmp_path, session_id="fixed")
        assert sd.path == tmp_path / "fixed"

    def test_write_statistics(self, session_dir: SessionDir) -> None:
        path = session_dir.write_statistics(Statistics(focus_time=1_500, completed_cycles=2))
        record = json.loads(path.read_text(encoding="utf-8"))
        assert record["focus_time"] == 1_500
        assert record["completed_cycles"] == 2
        if os.name == "posix":
            assert path.stat().st_mode & 0o077 == 0

    def test_write_statistics_replaces_previous(self, session_dir: SessionDir) -> None:
        session_dir.write_statistics(Statistics(focus_time=123_456_789))
        path = session_dir.write_statistics(Statistics(focus_time=1))
        assert json.loads(path.read_text(encoding="utf-8"))["focus_time"] == 1


class TestEventLog:
    def test_session_milestone_has_no_timer_fields(self, session_dir: SessionDir) -> None:
        with EventLog(session_dir) as log:
            log.emit("session.start", "Starting session", {"preset": "classic"})
        assert log.closed

        (event,) = _read_events(session_dir)
        assert event["type"] == "session.start"
        assert event["summary"] == "Starting session"
        assert event["data"] == {"preset": "classic"}
        assert event["session_id"] == session_dir.session_id
        assert event["seq"] == 1
        assert "state" not in event
        assert "phase" not in event

    def test_timer_snapshot_is_top_level(self, event_log: EventLog) -> None:
        snapshot = RenderSnapshot(
            state=TimerState.PAUSED,
            phase_index=2,
            phase_label="Focus",
            phase_kind=PhaseKind.FOCUS,
            remaining_ms=4_200,
            instruction_key=TimerState.PAUSED.value,
            completed_cycles=0,
        )
        event = event_log.emit("timer.pause", "Paused Focus", timer=snapshot)
        assert event["state"] == "paused"
        assert event["phase"] == "Focus"
        assert event["phase_index"] == 2
        assert event["remaining_ms"] == 4_200
        assert event["data"] == {}

    def test_sequential_seq(self, event_log: EventLog) -> None:
        event_log.emit("e1", "First")
        event_log.emit("e2", "Second")
        last = event_log.emit("e3", "Third")
        assert last["seq"] == 3
        assert [e["seq"] for e in _read_events(event_log.session_dir)] == [1, 2, 3]

    def test_close_twice(self, session_dir: SessionDir) -> None:
        log = EventLog(session_dir)
        log.close()
        log.close()
        assert log.closed

    def test_event_log_permissions_owner_only(self, event_log: EventLog) -> None:
        event_log.emit("timer.start", "hello")
        if os.name == "posix":
            mode = event_log.session_dir.events_path.stat().st_mode & 0o777
            assert mode & 0o077 == 0
