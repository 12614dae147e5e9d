"""Wall-clock pacing for interactive runs.

The engine has no timers. PacedDriver advances one day every
``base_interval_ms / speed`` milliseconds (100 ms per day at 1.0x), hands
each StepResult to ``on_step``, and stops on extinction, on stop(), or
after ``max_days``. Speed changes only how often a day is advanced.

Usage:
    sim = Simulation(config)
    driver = PacedDriver(sim, speed=2.0, on_step=render)
    driver.run(max_days=600)
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from behavioral_sink.engine import Simulation
from behavioral_sink.types import StepResult


class PacedDriver:
    """Cooperative stepping loop around a Simulation."""

    def __init__(
        self,
        simulation: Simulation,
        speed: float = 1.0,
        base_interval_ms: float = 100.0,
        on_step: Optional[Callable[[StepResult], None]] = None,
        on_extinct: Optional[Callable[[StepResult], None]] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if base_interval_ms < 0:
            raise ValueError(f"base_interval_ms must be >= 0, got {base_interval_ms}")
        self.simulation = simulation
        self.base_interval_ms = base_interval_ms
        self.on_step = on_step
        self.on_extinct = on_extinct
        self._clock = clock
        self._sleep = sleep
        self._stop = threading.Event()
        self._running = False
        self.speed = 1.0
        self.set_speed(speed)

    @property
    def interval_s(self) -> float:
        """Seconds between days at the current speed."""
        return self.base_interval_ms / self.speed / 1000.0

    def set_speed(self, speed: float) -> None:
        if speed <= 0:
            raise ValueError(f"speed must be positive, got {speed}")
        self.speed = float(speed)

    def stop(self) -> None:
        """Request the loop to exit before its next day."""
        self._stop.set()

    @property
    def running(self) -> bool:
        return self._running

    def run(self, max_days: Optional[int] = None) -> int:
        """Advance until extinction, stop(), or max_days. Returns days advanced."""
        self._stop.clear()
        self._running = True
        advanced = 0
        last = self._clock() - self.interval_s
        while not self._stop.is_set():
            if max_days is not None and advanced >= max_days:
                break
            wait = last + self.interval_s - self._clock()
            if wait > 0:
                self._sleep(wait)
            last = self._clock()

            result = self.simulation.advance_one_day()
            if result.is_extinct:
                if self.on_extinct is not None:
                    self.on_extinct(result)
                break
            advanced += 1
            if self.on_step is not None:
                self.on_step(result)
        self._running = False
        return advanced
