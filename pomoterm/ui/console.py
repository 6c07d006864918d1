"""Rich console output for pomoterm."""

from __future__ import annotations

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pomoterm import __version__
from pomoterm.audio.base import AudioCueDispatcher
from pomoterm.cycle import PhaseCycle, PhaseKind
from pomoterm.engine import RenderSnapshot, TimerState
from pomoterm.stats import Statistics

INSTRUCTIONS: dict[str, str] = {
    TimerState.IDLE.value: "Press ([green]S[/green]) to start focusing, ([red]Q[/red]) to quit.",
    TimerState.RUNNING.value: (
        "Press ([green]P[/green]) to pause, ([cyan]N[/cyan]) to skip, "
        "([yellow]E[/yellow]) to end, ([red]Q[/red]) to quit."
    ),
    TimerState.PAUSED.value: (
        "Press ([green]R[/green]) to resume, ([yellow]E[/yellow]) to end, ([red]Q[/red]) to quit."
    ),
    TimerState.PENDING_CONTINUE.value: (
        "Press ([blue]C[/blue]) to continue, ([green]P[/green]) to pause, ([red]Q[/red]) to quit."
    ),
}


def format_time(ms: int) -> str:
    """Format a magnitude as MM:SS.cc, or SS.ccs under a minute."""
    ms = abs(ms)
    seconds = ms // 1000
    centis = (ms % 1000) // 10
    mins = seconds // 60
    if mins > 0:
        return f"{mins:02d}:{seconds % 60:02d}.{centis:02d}"
    return f"{seconds:02d}.{centis:02d}s"


def format_remaining(ms: int) -> str:
    """Signed countdown: '-' while time is left, '+' once overrunning."""
    sign = "+" if ms < 0 else "-"
    return f"{sign}{format_time(ms)}"


def format_duration(ms: int) -> str:
    """Human-readable duration for reports, e.g. '1h 05m 07s'."""
    total = ms // 1000
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}h {minutes:02d}m {seconds:02d}s"
    if minutes:
        return f"{minutes}m {seconds:02d}s"
    return f"{seconds}s"


class ConsoleUI:
    """Rich-powered terminal output for a timer session."""

    def __init__(
        self, console: Console | None = None, cues: AudioCueDispatcher | None = None
    ) -> None:
        self.console = console or Console()
        # read each frame so a muted session still shows when time is up
        self.cues = cues
        self._live: Live | None = None
        self._cycle_len = 0

    def header(self, preset: str, cycle: PhaseCycle) -> None:
        self._cycle_len = len(cycle)
        phases = " → ".join(p.label for p in cycle)
        self.console.print(
            Panel(
                f"Preset: [cyan]{preset}[/cyan] "
                f"([cyan]{format_duration(cycle.total_duration())}[/cyan] per cycle)\n"
                f"[dim]{phases}[/dim]",
                title=f"[bold red]pomoterm[/bold red] v{__version__}",
                border_style="red",
            )
        )

    def frame(self, snapshot: RenderSnapshot) -> Panel:
        """Build the live panel for one snapshot."""
        lines: list[Text] = [Text.from_markup(INSTRUCTIONS[snapshot.instruction_key])]

        if snapshot.state is not TimerState.IDLE:
            color = "red" if snapshot.overrun else "green"
            timer = Text(format_remaining(snapshot.remaining_ms), style=f"bold {color}")
            timer.append(f" {snapshot.phase_label}", style="bold")
            if snapshot.state is TimerState.PAUSED:
                timer.append("  PAUSED", style="yellow")
            lines.append(timer)

        pending = self.cues.pending if self.cues is not None else None
        if pending is not None:
            lines.append(Text(f"⏰ {pending} time's up", style=f"bold {_KIND_COLORS[pending]}"))

        position = f"Phase {snapshot.phase_index + 1}"
        if self._cycle_len:
            position += f"/{self._cycle_len}"
        lines.append(
            Text(f"{position} · cycles completed: {snapshot.completed_cycles}", style="dim")
        )

        border = "red" if snapshot.overrun else _KIND_COLORS[snapshot.phase_kind]
        return Panel(Group(*lines), border_style=border)

    def render(self, snapshot: RenderSnapshot) -> None:
        if self._live is None:
            self._live = Live(console=self.console, auto_refresh=False)
            self._live.start()
        self._live.update(self.frame(snapshot), refresh=True)

    def stop(self) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None

    def statistics_report(self, stats: Statistics) -> None:
        table = Table(title="Session Statistics", show_header=True, header_style="bold")
        table.add_column("Bucket", style="cyan")
        table.add_column("Time", justify="right")

        rows = [
            ("Focus", stats.focus_time),
            ("Focus overrun", stats.extra_focus_time),
            ("Focus skipped", stats.skipped_focus_time),
            ("Break", stats.break_time),
            ("Break overrun", stats.extra_break_time),
            ("Break skipped", stats.skipped_break_time),
            ("Paused", stats.paused_time),
        ]
        for name, ms in rows:
            table.add_row(name, format_duration(ms))
        table.add_section()
        table.add_row("Completed cycles", str(stats.completed_cycles))

        self.console.print(table)

    def audio_warning(self, message: str) -> None:
        self.console.print(
            Panel(
                f"[bold]{message}[/bold]\n"
                "Run with [cyan]--mute[/cyan] or set [cyan]POMOTERM_AUDIO_ENABLED=false[/cyan] "
                "to use the timer without sound.",
                title="[bold red]Audio error[/bold red]",
                border_style="red",
            )
        )


_KIND_COLORS: dict[PhaseKind, str] = {
    PhaseKind.FOCUS: "green",
    PhaseKind.BREAK: "blue",
}
