"""Audio cue interface consumed by the timer engine."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pomoterm.cycle import PhaseKind


class AudioUnavailableError(RuntimeError):
    """The audio subsystem could not be initialised."""


class AudioCueDispatcher(ABC):
    """Fire-and-forget requests for the looping phase-expiry cue.

    At most one cue is pending at a time: ``enqueue`` replaces whatever is
    playing, ``cancel_pending`` silences it. ``pending`` names the kind of
    the cue currently requested so the console can mirror it on screen.
    """

    pending: PhaseKind | None = None

    @abstractmethod
    def cancel_pending(self) -> None:
        """Stop the pending cue. Must be a no-op when nothing is pending."""
        ...

    @abstractmethod
    def enqueue(self, kind: PhaseKind) -> None:
        """Loop the cue for the phase kind that just expired until cancelled."""
        ...

    def close(self) -> None:
        """Release audio resources."""
        self.cancel_pending()


class SilentCueDispatcher(AudioCueDispatcher):
    """Cue dispatcher for muted sessions; the on-screen marker is the only cue."""

    def __init__(self) -> None:
        self.pending = None

    def cancel_pending(self) -> None:
        self.pending = None

    def enqueue(self, kind: PhaseKind) -> None:
        self.pending = kind
