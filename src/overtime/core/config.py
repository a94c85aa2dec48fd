"""Timer configuration — loaded once from a line-oriented text file.

The file holds six values, one per line, in this order::

    0        # start minutes
    10       # start seconds
    0        # limit minutes
    10       # limit seconds
    zero.wav # sound played when the countdown crosses zero
    end.wav  # sound played when the countdown reaches its limit

Anything after ``#`` is a comment and blank lines are skipped.  Missing or
malformed values fall back to the defaults below; a bad file never stops the
timer from running.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("config.txt")

_DEFAULT_START_MIN = 0
_DEFAULT_START_SEC = 10
_DEFAULT_LIMIT_MIN = 0
_DEFAULT_LIMIT_SEC = 10


def _to_ms(minutes: int, seconds: int) -> int:
    return (minutes * 60 + seconds) * 1000


@dataclass(frozen=True)
class TimerConfig:
    """Immutable per-session settings.

    ``limit_ms`` is the magnitude of the negative floor; the engine stores it
    negated.  Empty sound paths mean "use the fallback alert".
    """

    start_ms: int = _to_ms(_DEFAULT_START_MIN, _DEFAULT_START_SEC)
    limit_ms: int = _to_ms(_DEFAULT_LIMIT_MIN, _DEFAULT_LIMIT_SEC)
    zero_sound: str = ""
    limit_sound: str = ""


def _tokens(lines: Iterator[str]) -> Iterator[str]:
    """Yield the comment-stripped, non-empty content of each line."""
    for line in lines:
        clean = line.split("#", 1)[0].strip()
        if clean:
            yield clean


def _parse_count(token: str | None, default: int, name: str) -> int:
    if token is None:
        return default
    try:
        value = int(token)
    except ValueError:
        logger.warning("Ignoring malformed %s %r, using %d", name, token, default)
        return default
    if value < 0:
        logger.warning("Ignoring negative %s %d, using %d", name, value, default)
        return default
    return value


def _resolve_sound(token: str | None, base_dir: Path) -> str:
    if not token:
        return ""
    path = Path(token).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return str(path)


def parse_config(text: str, base_dir: Path | None = None) -> TimerConfig:
    """Build a :class:`TimerConfig` from the contents of a config file.

    Relative sound paths are resolved against *base_dir* (the current
    directory when omitted).
    """
    tokens = _tokens(iter(text.splitlines()))
    base = base_dir if base_dir is not None else Path.cwd()

    start_min = _parse_count(next(tokens, None), _DEFAULT_START_MIN, "start minutes")
    start_sec = _parse_count(next(tokens, None), _DEFAULT_START_SEC, "start seconds")
    limit_min = _parse_count(next(tokens, None), _DEFAULT_LIMIT_MIN, "limit minutes")
    limit_sec = _parse_count(next(tokens, None), _DEFAULT_LIMIT_SEC, "limit seconds")
    zero_sound = _resolve_sound(next(tokens, None), base)
    limit_sound = _resolve_sound(next(tokens, None), base)

    return TimerConfig(
        start_ms=_to_ms(start_min, start_sec),
        limit_ms=_to_ms(limit_min, limit_sec),
        zero_sound=zero_sound,
        limit_sound=limit_sound,
    )


def load_config(path: Path | None = None) -> TimerConfig:
    """Load the configuration at *path*, or the defaults if it cannot be read."""
    path = path if path is not None else DEFAULT_CONFIG_FILE
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Using default configuration, cannot read %s: %s", path, exc)
        return TimerConfig()
    return parse_config(text, base_dir=path.resolve().parent)
