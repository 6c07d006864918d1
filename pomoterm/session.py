"""Driver loop: polls keys, feeds the engine, renders, sleeps."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Protocol

from pomoterm.engine import Command, RenderSnapshot, TimerEngine
from pomoterm.stats import Statistics
from pomoterm.ui.keyboard import bind_key

NS_PER_MS = 1_000_000


class KeySource(Protocol):
    def read_key(self) -> str | None: ...


class Renderer(Protocol):
    def render(self, snapshot: RenderSnapshot) -> None: ...


class Session:
    """Cooperative polling loop around a TimerEngine.

    Each iteration honours at most one key press, then ticks the engine by
    the monotonic time since the previous iteration.
    """

    def __init__(
        self,
        engine: TimerEngine,
        keys: KeySource,
        ui: Renderer,
        clock: Callable[[], int] = time.monotonic_ns,
        sleep: Callable[[float], None] = time.sleep,
        tick_interval_ms: int = 10,
    ) -> None:
        self.engine = engine
        self.keys = keys
        self.ui = ui
        self.clock = clock
        self.sleep = sleep
        self.tick_interval_ms = tick_interval_ms
        self.iterations = 0

    def run(self) -> Statistics:
        """Run until the engine is stopped. Returns the final statistics."""
        last = self.clock()
        carry_ns = 0

        while not self.engine.stopped:
            try:
                self.engine.handle_command(bind_key(self.keys.read_key()))

                now = self.clock()
                # Keep the sub-millisecond remainder so rounding never loses time
                elapsed_ms, carry_ns = divmod(now - last + carry_ns, NS_PER_MS)
                last = now
                self.engine.tick(elapsed_ms)

                self.ui.render(self.engine.snapshot())
                self.iterations += 1
                if not self.engine.stopped:
                    self.sleep(self.tick_interval_ms / 1000)
            except KeyboardInterrupt:
                self.engine.handle_command(Command.QUIT)

        return self.engine.stats
