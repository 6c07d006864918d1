"""Timer state machine: commands, per-tick time accounting and cue triggering."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pomoterm.audio.base import AudioCueDispatcher
from pomoterm.cycle import Phase, PhaseCycle, PhaseKind
from pomoterm.logging.events import EventLog
from pomoterm.stats import Statistics


class TimerState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    PENDING_CONTINUE = "pending_continue"


class Command(StrEnum):
    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    SKIP = "skip"
    END = "end"
    CONTINUE = "continue"
    QUIT = "quit"


@dataclass(frozen=True)
class RenderSnapshot:
    """Everything a renderer needs for one frame."""

    state: TimerState
    phase_index: int
    phase_label: str
    phase_kind: PhaseKind
    remaining_ms: int  # negative while overrunning
    instruction_key: str
    completed_cycles: int

    @property
    def overrun(self) -> bool:
        return self.remaining_ms < 0


class TimerEngine:
    """Owns the timer state and drives statistics and audio cues.

    The driver calls ``handle_command`` at most once per loop iteration and
    then ``tick`` with the monotonic time elapsed since the previous tick.
    Commands that are not valid in the current state are ignored.
    """

    def __init__(
        self,
        cycle: PhaseCycle,
        cues: AudioCueDispatcher,
        stats: Statistics | None = None,
        event_log: EventLog | None = None,
    ) -> None:
        self.cycle = cycle
        self.cues = cues
        self.event_log = event_log
        self._stats = stats or Statistics()
        self._state = TimerState.IDLE
        self._phase_index = 0
        self._remaining_ms = cycle.current(0).nominal_duration
        self._stopped = False

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def phase_index(self) -> int:
        return self._phase_index

    @property
    def phase(self) -> Phase:
        return self.cycle.current(self._phase_index)

    @property
    def remaining_ms(self) -> int:
        return self._remaining_ms

    @property
    def stats(self) -> Statistics:
        """A copy of the accumulated statistics; only the engine updates them."""
        return self._stats.model_copy()

    @property
    def stopped(self) -> bool:
        return self._stopped

    def snapshot(self) -> RenderSnapshot:
        phase = self.phase
        return RenderSnapshot(
            state=self._state,
            phase_index=self._phase_index,
            phase_label=phase.label,
            phase_kind=phase.kind,
            remaining_ms=self._remaining_ms,
            instruction_key=self._state.value,
            completed_cycles=self._stats.completed_cycles,
        )

    # ----- Commands -----

    def handle_command(self, command: Command | None) -> bool:
        """Apply a command. Returns True if it caused a transition."""
        if command is None:
            return False
        if command is Command.QUIT:
            self._stopped = True
            self._emit("timer.quit", "Quit requested")
            return True

        transition = _TRANSITIONS.get((self._state, command))
        if transition is None:
            return False
        transition(self)
        return True

    def _start(self) -> None:
        self._state = TimerState.RUNNING
        self._remaining_ms = self.phase.nominal_duration
        self.cues.cancel_pending()
        self._emit("timer.start", f"Started {self.phase.label}")

    def _skip(self) -> None:
        outgoing = self.phase
        if self._remaining_ms > 0:
            self._stats.add_skipped(outgoing.kind, self._remaining_ms)
        skipped = max(self._remaining_ms, 0)
        self.cues.cancel_pending()
        self._advance()
        self._emit(
            "phase.skip",
            f"Skipped {outgoing.label}",
            skipped_ms=skipped,
            next_phase=self.phase.label,
        )

    def _pause(self) -> None:
        self.cues.cancel_pending()
        self._state = TimerState.PAUSED
        self._emit("timer.pause", f"Paused {self.phase.label}", remaining_ms=self._remaining_ms)

    def _resume(self) -> None:
        # An already expired phase goes back to waiting for continue; the cue
        # belongs to the expiry event and is not replayed.
        if self._remaining_ms > 0:
            self._state = TimerState.RUNNING
        else:
            self._state = TimerState.PENDING_CONTINUE
        self._emit("timer.resume", f"Resumed {self.phase.label}", state=self._state.value)

    def _end(self) -> None:
        self._state = TimerState.IDLE
        self._phase_index = 0
        self._remaining_ms = self.phase.nominal_duration
        self.cues.cancel_pending()
        self._emit("timer.end", "Ended session")

    def _continue(self) -> None:
        finished = self.phase
        self.cues.cancel_pending()
        self._advance()
        self._emit(
            "phase.continue",
            f"Finished {finished.label}",
            next_phase=self.phase.label,
        )

    def _advance(self) -> None:
        self._phase_index, wrapped = self.cycle.advance(self._phase_index)
        if wrapped:
            self._stats.complete_cycle()
        self._remaining_ms = self.phase.nominal_duration
        self._state = TimerState.RUNNING

    # ----- Time -----

    def tick(self, elapsed_ms: int) -> None:
        """Account ``elapsed_ms`` of wall-clock time to the current state."""
        if elapsed_ms < 0:
            raise ValueError(f"Elapsed time must not be negative: {elapsed_ms}ms")

        if self._state is TimerState.PAUSED:
            self._stats.add_paused(elapsed_ms)
            return
        if self._state not in (TimerState.RUNNING, TimerState.PENDING_CONTINUE):
            return

        kind = self.phase.kind
        before = self._remaining_ms
        self._remaining_ms -= elapsed_ms

        # Time up to the zero crossing is nominal, the rest is overrun.
        nominal = min(elapsed_ms, max(before, 0))
        if nominal:
            self._stats.add_elapsed(kind, nominal)
        if elapsed_ms > nominal:
            self._stats.add_overrun(kind, elapsed_ms - nominal)

        if self._state is TimerState.RUNNING and before >= 0 > self._remaining_ms:
            self._state = TimerState.PENDING_CONTINUE
            self.cues.enqueue(kind)
            self._emit("phase.expired", f"{self.phase.label} time is up", kind=kind.value)

    def _emit(self, event_type: str, summary: str, **data: Any) -> None:
        if self.event_log is None:
            return
        self.event_log.emit(event_type, summary, data, timer=self.snapshot())


_TRANSITIONS: dict[tuple[TimerState, Command], Callable[[TimerEngine], None]] = {
    (TimerState.IDLE, Command.START): TimerEngine._start,
    (TimerState.RUNNING, Command.SKIP): TimerEngine._skip,
    (TimerState.RUNNING, Command.PAUSE): TimerEngine._pause,
    (TimerState.RUNNING, Command.END): TimerEngine._end,
    (TimerState.PAUSED, Command.RESUME): TimerEngine._resume,
    (TimerState.PAUSED, Command.END): TimerEngine._end,
    (TimerState.PENDING_CONTINUE, Command.PAUSE): TimerEngine._pause,
    (TimerState.PENDING_CONTINUE, Command.CONTINUE): TimerEngine._continue,
}
