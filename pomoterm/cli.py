"""CLI entry point using Typer."""

from __future__ import annotations

import sys

import typer
from rich.console import Console
from rich.table import Table

from pomoterm import __version__

app = typer.Typer(
    name="pomoterm",
    help="Pomodoro countdown timer for the terminal",
    no_args_is_help=True,
)
console = Console()


@app.command()
def run(
    preset: str = typer.Option(None, "--preset", "-p", help="Phase cycle preset (see `presets`)"),
    mute: bool = typer.Option(False, "--mute", help="Disable audio cues"),
    tick: int = typer.Option(None, "--tick", help="Polling interval in milliseconds"),
    log_events: bool = typer.Option(False, "--log-events", help="Write a JSONL event log"),
) -> None:
    """Start a timer session. Keys: S start, P pause, R resume, N skip, E end, C continue, Q quit."""
    from pomoterm.audio import AudioUnavailableError, create_cue_dispatcher
    from pomoterm.config.settings import load_settings
    from pomoterm.cycle import get_preset
    from pomoterm.engine import TimerEngine
    from pomoterm.logging.events import EventLog, SessionDir
    from pomoterm.session import Session
    from pomoterm.ui.console import ConsoleUI
    from pomoterm.ui.keyboard import KeyReader, TerminalUnavailableError

    ui = ConsoleUI(console)

    try:
        settings = load_settings(
            preset=preset,
            tick_interval_ms=tick,
            audio_enabled=False if mute else None,
            event_log=True if log_events else None,
        )
        cycle = get_preset(settings.preset)
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1) from None

    try:
        cues = create_cue_dispatcher(settings)
    except AudioUnavailableError as e:
        ui.audio_warning(str(e))
        raise typer.Exit(1) from None
    ui.cues = cues

    event_log = EventLog(SessionDir(base=settings.sessions_dir)) if settings.event_log else None
    if event_log is not None:
        event_log.emit(
            "session.start",
            f"Starting session with preset {settings.preset}",
            data={"preset": settings.preset, "phases": len(cycle)},
        )

    engine = TimerEngine(cycle, cues, event_log=event_log)
    ui.header(settings.preset, cycle)

    stats = None
    try:
        with KeyReader() as keys:
            session = Session(engine, keys, ui, tick_interval_ms=settings.tick_interval_ms)
            stats = session.run()
    except TerminalUnavailableError as e:
        console.print(f"[red]Terminal error:[/red] {e}")
        raise typer.Exit(1) from None
    finally:
        ui.stop()
        cues.close()
        if event_log is not None:
            if stats is not None:
                event_log.emit("session.complete", "Session complete", data=stats.model_dump())
                event_log.session_dir.write_statistics(stats)
            event_log.close()

    ui.statistics_report(stats)
    if event_log is not None:
        console.print(f"  [dim]Session log: {event_log.session_dir.path}[/dim]")


@app.command()
def presets() -> None:
    """List the available phase cycle presets."""
    from pomoterm.cycle import DEFAULT_PRESET, PRESETS
    from pomoterm.ui.console import format_duration

    for name, cycle in PRESETS.items():
        title = f"{name} (default)" if name == DEFAULT_PRESET else name
        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Phase", style="cyan")
        table.add_column("Kind")
        table.add_column("Duration", justify="right")
        for i, phase in enumerate(cycle, start=1):
            table.add_row(str(i), phase.label, phase.kind.value, format_duration(phase.nominal_duration))
        console.print(table)


@app.command()
def doctor() -> None:
    """Check the environment for pomoterm requirements."""
    console.print(f"[bold]pomoterm Doctor[/bold] v{__version__}\n")

    checks = []

    # Python version
    v = sys.version_info
    ok = v >= (3, 12)
    checks.append(("Python ≥ 3.12", ok, f"{v.major}.{v.minor}.{v.micro}"))

    # Interactive terminal for key input
    tty_ok = sys.stdin.isatty()
    checks.append(("Interactive terminal", tty_ok, "stdin is a TTY" if tty_ok else "stdin is not a TTY"))

    # Settings and cue files
    from pomoterm.config.settings import load_settings

    settings_ok = True
    detail = ""
    try:
        settings = load_settings()
        detail = f"preset {settings.preset}"
    except ValueError as e:
        settings_ok = False
        detail = str(e).splitlines()[0]
    checks.append(("Configuration", settings_ok, detail))

    # Audio device
    from pomoterm.audio import AudioUnavailableError

    try:
        from pomoterm.audio.player import PygameCuePlayer

        PygameCuePlayer().close()
        audio_ok, audio_detail = True, "mixer ready"
    except ImportError as e:
        audio_ok, audio_detail = False, f"pygame not importable: {e}"
    except AudioUnavailableError as e:
        audio_ok, audio_detail = False, str(e)
    checks.append(("audio (optional)", audio_ok, audio_detail))

    for name, ok, detail in checks:
        icon = "[green]✓[/green]" if ok else "[red]✗[/red]"
        detail_str = f" ({detail})" if detail else ""
        console.print(f"  {icon} {name}{detail_str}")

    all_ok = all(ok for name, ok, _ in checks if "optional" not in name)
    console.print()
    if all_ok:
        console.print("[green]All checks passed![/green]")
    else:
        console.print("[yellow]Some checks failed. Fix the issues above.[/yellow]")


def main() -> None:
    app()
