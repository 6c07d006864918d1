"""Audio cue backends and factory."""

from pomoterm.audio.base import AudioCueDispatcher, AudioUnavailableError, SilentCueDispatcher
from pomoterm.config.settings import PomotermSettings
from pomoterm.cycle import PhaseKind

__all__ = [
    "AudioCueDispatcher",
    "AudioUnavailableError",
    "SilentCueDispatcher",
    "create_cue_dispatcher",
]


def create_cue_dispatcher(settings: PomotermSettings) -> AudioCueDispatcher:
    """Create the cue dispatcher selected by settings."""
    if not settings.audio_enabled:
        return SilentCueDispatcher()

    try:
        from pomoterm.audio.player import PygameCuePlayer
    except ImportError as e:
        raise AudioUnavailableError(f"pygame is not importable: {e}") from e

    return PygameCuePlayer(
        {
            PhaseKind.FOCUS: settings.focus_cue_path,
            PhaseKind.BREAK: settings.break_cue_path,
        }
    )
