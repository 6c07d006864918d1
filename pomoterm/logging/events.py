"""Per-session event journal.

Every timer session gets its own directory under ``sessions_dir`` holding
``events.jsonl`` and, once the session ends, ``statistics.json`` with the
final buckets. Events raised while the timer is live carry its state, phase
label, position and remaining time at the top level, so the journal reads
without replaying it.
"""

from __future__ import annotations

import json
import os
import secrets
from contextlib import suppress
from datetime import UTC, datetime
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Any, TextIO

if TYPE_CHECKING:
    from pomoterm.engine import RenderSnapshot
    from pomoterm.stats import Statistics

SESSION_ID_TIME_FORMAT = "%Y%m%dT%H%MZ"
PRIVATE_MODE = 0o600


def new_session_id(now: datetime | None = None) -> str:
    """Session IDs sort by start time: ``YYYYMMDDTHHMMZ_<8hex>``."""
    now = now or datetime.now(UTC)
    return f"{now.strftime(SESSION_ID_TIME_FORMAT)}_{secrets.token_hex(4)}"


def _open_private(path: Path, flags: int) -> TextIO:
    fd = os.open(path, flags | os.O_CREAT | os.O_WRONLY, PRIVATE_MODE)
    # os.open is subject to the umask and an existing file keeps its mode
    with suppress(OSError):
        os.chmod(path, PRIVATE_MODE)
    return os.fdopen(fd, "a" if flags & os.O_APPEND else "w", encoding="utf-8")


class SessionDir:
    """``<sessions_dir>/<session_id>/`` for one timer session."""

    EVENTS_FILE = "events.jsonl"
    STATISTICS_FILE = "statistics.json"

    def __init__(self, base: Path, session_id: str | None = None) -> None:
        self.session_id = session_id or new_session_id()
        self.path = base / self.session_id
        self.path.mkdir(parents=True, exist_ok=True)

    @property
    def events_path(self) -> Path:
        return self.path / self.EVENTS_FILE

    @property
    def statistics_path(self) -> Path:
        return self.path / self.STATISTICS_FILE

    def write_statistics(self, stats: Statistics) -> Path:
        """Write the final statistics record, replacing any earlier one."""
        with _open_private(self.statistics_path, os.O_TRUNC) as f:
            f.write(stats.model_dump_json(indent=2) + "\n")
        return self.statistics_path


class EventLog:
    """Append-only JSONL journal of timer transitions and session milestones."""

    def __init__(self, session_dir: SessionDir) -> None:
        self.session_dir = session_dir
        self._seq = 0
        self._file = _open_private(session_dir.events_path, os.O_APPEND)

    def __enter__(self) -> EventLog:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._file.closed

    def emit(
        self,
        event_type: str,
        summary: str,
        data: dict[str, Any] | None = None,
        *,
        timer: RenderSnapshot | None = None,
    ) -> dict[str, Any]:
        """Append one event and return it.

        ``timer`` is the engine snapshot taken after the transition; session
        milestones logged outside the engine leave it out.
        """
        self._seq += 1
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "session_id": self.session_dir.session_id,
            "seq": self._seq,
            "type": event_type,
            "summary": summary,
        }
        if timer is not None:
            event.update(
                state=timer.state.value,
                phase=timer.phase_label,
                phase_index=timer.phase_index,
                remaining_ms=timer.remaining_ms,
            )
        event["data"] = data or {}

        self._file.write(json.dumps(event) + "\n")
        self._file.flush()
        return event

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()
