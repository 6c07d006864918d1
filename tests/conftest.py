"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from pomoterm.audio.base import AudioCueDispatcher
from pomoterm.cycle import Phase, PhaseCycle, PhaseKind
from pomoterm.engine import TimerEngine
from pomoterm.logging.events import EventLog, SessionDir


class RecordingCues(AudioCueDispatcher):
    """Cue dispatcher that records every call in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, PhaseKind | None]] = []

    def cancel_pending(self) -> None:
        self.calls.append(("cancel", None))

    def enqueue(self, kind: PhaseKind) -> None:
        self.calls.append(("enqueue", kind))

    @property
    def enqueued(self) -> list[PhaseKind]:
        return [kind for op, kind in self.calls if op == "enqueue" and kind is not None]


@pytest.fixture
def two_phase_cycle() -> PhaseCycle:
    """Focus 30s followed by a 10s short break."""
    return PhaseCycle(
        [
            Phase(label="Focus", kind=PhaseKind.FOCUS, nominal_duration=30_000),
            Phase(label="Short Break", kind=PhaseKind.BREAK, nominal_duration=10_000),
        ]
    )


@pytest.fixture
def recording_cues() -> RecordingCues:
    return RecordingCues()


@pytest.fixture
def engine(two_phase_cycle: PhaseCycle, recording_cues: RecordingCues) -> TimerEngine:
    return TimerEngine(two_phase_cycle, recording_cues)


@pytest.fixture
def session_dir(tmp_path: Path) -> SessionDir:
    """Create a temporary session directory."""
    return SessionDir(base=tmp_path / "sessions")


@pytest.fixture
def event_log(session_dir: SessionDir) -> Iterator[EventLog]:
    """Create an event log in a temporary session directory."""
    log = EventLog(session_dir)
    yield log
    log.close()
