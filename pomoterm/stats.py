"""Session statistics accumulator."""

from __future__ import annotations

from pydantic import BaseModel

from pomoterm.cycle import PhaseKind


class Statistics(BaseModel):
    """Monotonic time buckets for one process lifetime. All times in milliseconds."""

    focus_time: int = 0
    break_time: int = 0
    skipped_focus_time: int = 0
    skipped_break_time: int = 0
    paused_time: int = 0
    extra_focus_time: int = 0
    extra_break_time: int = 0
    completed_cycles: int = 0

    def add_elapsed(self, kind: PhaseKind, ms: int) -> None:
        _check_amount(ms)
        if kind is PhaseKind.FOCUS:
            self.focus_time += ms
        else:
            self.break_time += ms

    def add_overrun(self, kind: PhaseKind, ms: int) -> None:
        _check_amount(ms)
        if kind is PhaseKind.FOCUS:
            self.extra_focus_time += ms
        else:
            self.extra_break_time += ms

    def add_skipped(self, kind: PhaseKind, ms: int) -> None:
        _check_amount(ms)
        if kind is PhaseKind.FOCUS:
            self.skipped_focus_time += ms
        else:
            self.skipped_break_time += ms

    def add_paused(self, ms: int) -> None:
        _check_amount(ms)
        self.paused_time += ms

    def complete_cycle(self) -> None:
        self.completed_cycles += 1

    def total_tracked(self) -> int:
        """Every ticked millisecond: nominal, overrun and paused."""
        return (
            self.focus_time
            + self.extra_focus_time
            + self.break_time
            + self.extra_break_time
            + self.paused_time
        )


def _check_amount(ms: int) -> None:
    if ms < 0:
        raise ValueError(f"Statistics only accumulate non-negative time: {ms}ms")
