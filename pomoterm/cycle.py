"""Phase model: the fixed, cyclic sequence of focus and break intervals."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from enum import StrEnum

from pydantic import BaseModel, field_validator

MINUTE_MS = 60_000


class PhaseKind(StrEnum):
    FOCUS = "focus"
    BREAK = "break"


class Phase(BaseModel):
    """One labeled segment of the cycle."""

    model_config = {"frozen": True}

    label: str
    kind: PhaseKind
    nominal_duration: int  # milliseconds

    @field_validator("nominal_duration")
    @classmethod
    def check_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"Phase duration must be positive: {v}ms")
        return v


class PhaseCycle:
    """Immutable ordered sequence of phases with wrap-around navigation."""

    def __init__(self, phases: Sequence[Phase]) -> None:
        if not phases:
            raise ValueError("A phase cycle needs at least one phase")
        self._phases: tuple[Phase, ...] = tuple(phases)

    def __len__(self) -> int:
        return len(self._phases)

    def __iter__(self) -> Iterator[Phase]:
        return iter(self._phases)

    def current(self, index: int) -> Phase:
        return self._phases[index % len(self._phases)]

    def advance(self, index: int) -> tuple[int, bool]:
        """Return the next index and whether the cycle wrapped back to the start."""
        new_index = (index + 1) % len(self._phases)
        return new_index, new_index == 0

    def total_duration(self) -> int:
        return sum(p.nominal_duration for p in self._phases)


def focus(minutes: int, label: str = "Focus") -> Phase:
    return Phase(label=label, kind=PhaseKind.FOCUS, nominal_duration=minutes * MINUTE_MS)


def rest(minutes: int, label: str) -> Phase:
    return Phase(label=label, kind=PhaseKind.BREAK, nominal_duration=minutes * MINUTE_MS)


def _pomodoro(focus_min: int, short_min: int, long_min: int, rounds: int = 4) -> PhaseCycle:
    phases: list[Phase] = []
    for i in range(rounds):
        phases.append(focus(focus_min))
        if i < rounds - 1:
            phases.append(rest(short_min, "Short Break"))
        else:
            phases.append(rest(long_min, "Long Break"))
    return PhaseCycle(phases)


PRESETS: dict[str, PhaseCycle] = {
    "classic": _pomodoro(30, 5, 30),
    "standard": _pomodoro(25, 5, 15),
}

DEFAULT_PRESET = "classic"


def get_preset(name: str) -> PhaseCycle:
    """Look up a named cycle preset."""
    try:
        return PRESETS[name]
    except KeyError:
        available = ", ".join(sorted(PRESETS))
        raise ValueError(f"Unknown preset: {name} (available: {available})") from None
