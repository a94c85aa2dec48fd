"""Events emitted by the countdown engine, and remaining-time formatting."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union


class Phase(Enum):
    """Possible phases of the countdown."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    HALTED = "halted"


@dataclass(frozen=True)
class DisplayUpdate:
    """The remaining time changed (or was re-sampled)."""

    remaining_ms: int


@dataclass(frozen=True)
class ZeroReached:
    """The countdown crossed zero and entered overtime."""


@dataclass(frozen=True)
class LimitReached:
    """The countdown hit its negative limit and halted."""


@dataclass(frozen=True)
class PhaseChanged:
    """The engine moved to *phase*."""

    phase: Phase


Event = Union[DisplayUpdate, ZeroReached, LimitReached, PhaseChanged]
Listener = Callable[[Event], None]


def format_remaining(ms: int) -> str:
    """Format *ms* as ``MM:SS``, prefixed with ``-`` when negative.

    The digits come from the truncated magnitude, so ``-1`` renders as
    ``-00:00`` rather than losing its sign.
    """
    total = abs(ms) // 1000
    sign = "-" if ms < 0 else ""
    return f"{sign}{total // 60:02d}:{total % 60:02d}"
