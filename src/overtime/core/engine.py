"""Countdown engine — a state machine that counts past zero down to a limit."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from overtime.core.config import TimerConfig
from overtime.core.events import (
    DisplayUpdate,
    Event,
    LimitReached,
    Listener,
    Phase,
    PhaseChanged,
    ZeroReached,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], int]

_VALID_START_PHASES = frozenset({Phase.IDLE, Phase.PAUSED})
_VALID_PAUSE_PHASES = frozenset({Phase.RUNNING})


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


@dataclass
class CountdownState:
    """Mutable state of a single countdown, owned by :class:`CountdownEngine`."""

    phase: Phase
    remaining_ms: int
    limit_ms: int
    anchor_end_ms: Optional[int] = None
    zero_event_fired: bool = False

    @classmethod
    def initial(cls, config: TimerConfig) -> "CountdownState":
        return cls(
            phase=Phase.IDLE,
            remaining_ms=config.start_ms,
            limit_ms=-config.limit_ms,
        )

    def restore(self, config: TimerConfig) -> None:
        """Discard run-derived fields and return to the configured start, in place."""
        self.phase = Phase.IDLE
        self.remaining_ms = config.start_ms
        self.limit_ms = -config.limit_ms
        self.anchor_end_ms = None
        self.zero_event_fired = False


class CountdownEngine:
    """Counts down from the configured start, through zero, to a negative limit.

    Remaining time is always derived from an anchored end time
    (``anchor_end_ms - now``), never accumulated per tick, so a late or
    jittery tick only delays when the value is sampled, not its accuracy.

    Invalid transitions are ignored rather than raised: ``start()`` while
    running or halted and ``pause()`` while not running are no-ops.
    """

    def __init__(self, config: TimerConfig, clock: Clock | None = None) -> None:
        self._config = config
        self._clock: Clock = clock if clock is not None else _monotonic_ms
        self._listeners: list[Listener] = []
        self._state = CountdownState.initial(config)

    # -- listeners -----------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Deliver every future event to *listener*."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    # -- public interface ----------------------------------------------------

    @property
    def config(self) -> TimerConfig:
        return self._config

    @property
    def state(self) -> CountdownState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def remaining_ms(self) -> int:
        return self._state.remaining_ms

    def start(self) -> bool:
        """Anchor the end time and enter RUNNING.

        Valid only from IDLE or PAUSED.  Returns whether the timer started.
        """
        if not self._allowed("start", _VALID_START_PHASES):
            return False
        state = self._state
        state.anchor_end_ms = self._clock() + state.remaining_ms
        self._set_phase(Phase.RUNNING)
        return True

    def pause(self) -> bool:
        """Freeze the remaining time and enter PAUSED.

        Valid only from RUNNING.  Returns whether the timer paused.
        """
        if not self._allowed("pause", _VALID_PAUSE_PHASES):
            return False
        state = self._state
        state.remaining_ms = max(self._sample(), state.limit_ms)
        state.anchor_end_ms = None
        self._set_phase(Phase.PAUSED)
        self._emit(DisplayUpdate(state.remaining_ms))
        return True

    def reset(self) -> None:
        """Return to IDLE with the configured start and limit, from any phase."""
        self._state.restore(self._config)
        self._set_phase(Phase.IDLE)
        self._emit(DisplayUpdate(self._state.remaining_ms))

    def tick(self) -> bool:
        """Recompute the remaining time and fire threshold events.

        A no-op unless RUNNING.  Returns whether the timer is still running.
        """
        state = self._state
        if state.phase != Phase.RUNNING:
            return False

        state.remaining_ms = max(self._sample(), state.limit_ms)
        self._emit(DisplayUpdate(state.remaining_ms))

        # Zero is checked before the limit so both fire when they coincide.
        if state.remaining_ms <= 0 and not state.zero_event_fired:
            state.zero_event_fired = True
            self._emit(ZeroReached())

        if state.remaining_ms <= state.limit_ms:
            state.remaining_ms = state.limit_ms
            state.anchor_end_ms = None
            self._emit(DisplayUpdate(state.remaining_ms))
            self._emit(LimitReached())
            self._set_phase(Phase.HALTED)
            return False
        return True

    # -- private helpers -----------------------------------------------------

    def _sample(self) -> int:
        return self._state.anchor_end_ms - self._clock()

    def _allowed(self, method: str, valid: frozenset[Phase]) -> bool:
        if self._state.phase in valid:
            return True
        logger.debug("%s() ignored in %s phase", method, self._state.phase.value)
        return False

    def _set_phase(self, phase: Phase) -> None:
        self._state.phase = phase
        logger.debug("phase -> %s (remaining %d ms)", phase.value, self._state.remaining_ms)
        self._emit(PhaseChanged(phase))

    def _emit(self, event: Event) -> None:
        for listener in list(self._listeners):
            listener(event)
