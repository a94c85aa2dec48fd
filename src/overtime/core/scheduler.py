"""Tick schedulers — periodic drivers for :meth:`CountdownEngine.tick`.

A scheduler follows the engine's phase: it arms when the engine enters
RUNNING and disarms as soon as it leaves it (pause, reset or halt).  The
interval only trades responsiveness against CPU; accuracy comes from the
engine's anchored end time.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from overtime.core.engine import CountdownEngine
from overtime.core.events import Event, Phase, PhaseChanged

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 50


class TickScheduler(ABC):
    """Base scheduler tracking only whether a tick is currently scheduled.

    Subclasses provide the primitive: :meth:`_arm` schedules one call to
    :meth:`_fire` after the interval, :meth:`_disarm` drops it.
    """

    def __init__(self, engine: CountdownEngine, interval_ms: int = DEFAULT_INTERVAL_MS) -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self._engine = engine
        self._interval_ms = interval_ms
        self._scheduled = False
        engine.subscribe(self.handle)

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def is_scheduled(self) -> bool:
        return self._scheduled

    def handle(self, event: Event) -> None:
        """Arm on entering RUNNING, disarm on entering any other phase."""
        if not isinstance(event, PhaseChanged):
            return
        if event.phase == Phase.RUNNING:
            if not self._scheduled:
                self._scheduled = True
                self._arm()
        elif self._scheduled:
            self._scheduled = False
            self._disarm()
            logger.debug("ticks cancelled (%s)", event.phase.value)

    def _fire(self) -> None:
        # A tick that slipped past a cancel does nothing.
        if not self._scheduled:
            return
        self._engine.tick()
        if self._scheduled:
            self._arm()

    @abstractmethod
    def _arm(self) -> None:
        ...

    @abstractmethod
    def _disarm(self) -> None:
        ...


class TkTickScheduler(TickScheduler):
    """Drives ticks from a tkinter event loop via ``after``/``after_cancel``."""

    def __init__(
        self, widget: Any, engine: CountdownEngine, interval_ms: int = DEFAULT_INTERVAL_MS
    ) -> None:
        self._widget = widget
        self._after_id: Optional[str] = None
        super().__init__(engine, interval_ms)

    def _arm(self) -> None:
        self._after_id = self._widget.after(self._interval_ms, self._on_timeout)

    def _disarm(self) -> None:
        if self._after_id is not None:
            self._widget.after_cancel(self._after_id)
            self._after_id = None

    def _on_timeout(self) -> None:
        self._after_id = None
        self._fire()


class BlockingTickScheduler(TickScheduler):
    """Drives ticks from a sleep loop on the calling thread."""

    def __init__(
        self,
        engine: CountdownEngine,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._sleep = sleep
        super().__init__(engine, interval_ms)

    def run(self) -> None:
        """Tick until the engine stops running."""
        while self._scheduled:
            self._sleep(self._interval_ms / 1000.0)
            self._fire()

    def _arm(self) -> None:
        pass

    def _disarm(self) -> None:
        pass
