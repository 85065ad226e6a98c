"""
Tick driver connecting a front-end to the experiment controller.

External requests (add atom, clear, regime or mode changes) are queued with
`submit` and applied strictly between ticks, never while a step is running.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from atomsim.guided import ExperimentController
    from atomsim.sim import Bounds, SimulationSnapshot

TICK_INTERVAL_SECONDS = 0.1

Command = Callable[[], None]


@dataclass
class SimulationController:
    controller: "ExperimentController"
    bounds: "Bounds"
    is_running: bool = True
    speed_multiplier: float = 1.0
    tick_interval: float = TICK_INTERVAL_SECONDS
    _elapsed: float = 0.0
    _pending: Deque[Command] = field(default_factory=deque)

    def toggle_running(self) -> None:
        self.is_running = not self.is_running

    def submit(self, command: Command) -> None:
        self._pending.append(command)

    def step_once(self) -> None:
        self._drain()
        self.controller.step(self.bounds)

    def resize(self, bounds: "Bounds") -> None:
        self.submit(lambda: setattr(self, "bounds", bounds))

    def update(self, dt_seconds: float) -> int:
        """Advance by whole ticks covered by the elapsed time; returns ticks run."""
        if not self.is_running:
            self._drain()
            return 0
        self._elapsed += dt_seconds * self.speed_multiplier
        ticks = 0
        while self._elapsed >= self.tick_interval:
            self._elapsed -= self.tick_interval
            self.step_once()
            ticks += 1
        if ticks == 0:
            self._drain()
        return ticks

    def snapshot(self) -> "SimulationSnapshot":
        return self.controller.simulation.snapshot()

    def _drain(self) -> None:
        while self._pending:
            self._pending.popleft()()
