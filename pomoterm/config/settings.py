"""Application settings via Pydantic BaseSettings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from pomoterm.cycle import DEFAULT_PRESET, PRESETS


class PomotermSettings(BaseSettings):
    """pomoterm configuration from environment variables and .env files."""

    model_config = {"env_prefix": "POMOTERM_", "env_file": ".env", "extra": "ignore"}

    preset: str = DEFAULT_PRESET
    tick_interval_ms: int = Field(default=10, ge=1, le=1000)
    audio_enabled: bool = True
    focus_cue_path: Path | None = None
    break_cue_path: Path | None = None
    event_log: bool = False
    sessions_dir: Path = Path(".pomoterm/sessions")

    @field_validator("preset")
    @classmethod
    def check_preset(cls, v: str) -> str:
        if v not in PRESETS:
            available = ", ".join(sorted(PRESETS))
            raise ValueError(f"Unknown preset '{v}' (available: {available})")
        return v

    @model_validator(mode="after")
    def check_cue_files(self) -> PomotermSettings:
        # Sound files only matter when audio is on
        if self.audio_enabled:
            for path in (self.focus_cue_path, self.break_cue_path):
                if path is not None and not path.is_file():
                    raise ValueError(f"Cue file not found: {path}")
        return self


def load_settings(**overrides: object) -> PomotermSettings:
    """Load settings with optional overrides (useful for CLI args)."""
    return PomotermSettings(**{k: v for k, v in overrides.items() if v is not None})  # type: ignore[arg-type]
