"""pygame mixer backend for the looping phase-expiry cues."""

from __future__ import annotations

import math
import os
from array import array
from pathlib import Path

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from pomoterm.audio.base import AudioCueDispatcher, AudioUnavailableError  # noqa: E402
from pomoterm.cycle import PhaseKind  # noqa: E402

SAMPLE_RATE = 44_100
AMPLITUDE = 0.4

# (tone Hz, beeps per loop) keyed by the kind of the phase that expired
CUE_PATTERNS: dict[PhaseKind, tuple[float, int]] = {
    PhaseKind.FOCUS: (880.0, 2),
    PhaseKind.BREAK: (523.25, 3),
}
BEEP_MS = 150
GAP_MS = 100
LOOP_MS = 1_200


def synthesize_cue(kind: PhaseKind, sample_rate: int = SAMPLE_RATE, channels: int = 1) -> bytes:
    """Render one loop of the beep pattern for ``kind`` as signed 16-bit PCM."""
    freq, beeps = CUE_PATTERNS[kind]
    beep_len = sample_rate * BEEP_MS // 1000
    gap_len = sample_rate * GAP_MS // 1000
    loop_len = sample_rate * LOOP_MS // 1000
    peak = int(32767 * AMPLITUDE)

    samples = array("h")
    for _ in range(beeps):
        for n in range(beep_len):
            # short linear fade at both ends avoids clicks
            envelope = min(1.0, n / 200, (beep_len - n) / 200)
            value = int(peak * envelope * math.sin(2 * math.pi * freq * n / sample_rate))
            samples.extend([value] * channels)
        samples.extend([0] * (gap_len * channels))

    padding = loop_len - len(samples) // channels
    if padding > 0:
        samples.extend([0] * (padding * channels))
    return samples.tobytes()


class PygameCuePlayer(AudioCueDispatcher):
    """Plays one looping cue at a time on a pygame mixer channel."""

    def __init__(self, cue_paths: dict[PhaseKind, Path | None] | None = None) -> None:
        try:
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
        except pygame.error as e:
            raise AudioUnavailableError(f"Cannot open audio device: {e}") from e

        init = pygame.mixer.get_init()
        if init is None:
            raise AudioUnavailableError("Audio mixer failed to initialise")
        self._sample_rate, _, self._channels = init

        paths = cue_paths or {}
        try:
            self._sounds: dict[PhaseKind, pygame.mixer.Sound] = {
                kind: self._load(kind, paths.get(kind)) for kind in PhaseKind
            }
        except AudioUnavailableError:
            pygame.mixer.quit()
            raise
        self._channel: pygame.mixer.Channel | None = None
        self.pending = None

    def _load(self, kind: PhaseKind, path: Path | None) -> pygame.mixer.Sound:
        if path is None:
            return pygame.mixer.Sound(
                buffer=synthesize_cue(kind, self._sample_rate, self._channels)
            )
        try:
            return pygame.mixer.Sound(str(path))
        except (pygame.error, FileNotFoundError) as e:
            raise AudioUnavailableError(f"Cannot load {kind} cue from {path}: {e}") from e

    def enqueue(self, kind: PhaseKind) -> None:
        self.cancel_pending()
        self._channel = self._sounds[kind].play(loops=-1)
        self.pending = kind

    def cancel_pending(self) -> None:
        if self._channel is not None:
            self._channel.stop()
            self._channel = None
        self.pending = None

    def close(self) -> None:
        self.cancel_pending()
        pygame.mixer.quit()
