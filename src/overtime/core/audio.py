"""Audio cues — plays sound files with pygame, beeping when it cannot."""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Callable

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from overtime.core.config import TimerConfig
from overtime.core.events import Event, LimitReached, Phase, PhaseChanged, ZeroReached

logger = logging.getLogger(__name__)


class AudioPlayer:
    """Fire-and-forget cue player.

    ``play_cue`` never blocks and never raises: an empty reference, a missing
    file or any mixer failure falls back to *beep*.
    """

    def __init__(self, beep: Callable[[], None]) -> None:
        self._beep = beep
        self._mixer_ready = False

    def play_cue(self, reference: str) -> None:
        """Stop the current cue and play *reference*, or beep."""
        if not reference:
            self._beep()
            return
        path = Path(reference)
        if not path.is_file():
            logger.warning("Sound file not found: %s", path)
            self._beep()
            return
        if not self._ensure_mixer():
            self._beep()
            return
        try:
            pygame.mixer.music.stop()
            pygame.mixer.music.load(str(path))
            pygame.mixer.music.play()
        except pygame.error as exc:
            logger.warning("Unable to play %s: %s", path, exc)
            self._beep()

    def stop(self) -> None:
        """Stop the current cue, if any."""
        if self._mixer_ready:
            pygame.mixer.music.stop()

    def is_busy(self) -> bool:
        """Return whether a cue is still playing."""
        return self._mixer_ready and bool(pygame.mixer.music.get_busy())

    def wait(self, poll_interval: float = 0.05) -> None:
        """Block until the current cue finishes.

        Playback itself never waits; this is for callers about to exit.
        """
        while self.is_busy():
            time.sleep(poll_interval)

    def _ensure_mixer(self) -> bool:
        if self._mixer_ready:
            return True
        try:
            pygame.mixer.init()
        except pygame.error as exc:
            logger.warning("Audio unavailable: %s", exc)
            return False
        self._mixer_ready = True
        return True


class CueDispatcher:
    """Engine listener that maps threshold events to configured cues."""

    def __init__(self, config: TimerConfig, player: AudioPlayer) -> None:
        self._config = config
        self._player = player

    def __call__(self, event: Event) -> None:
        if isinstance(event, ZeroReached):
            self._player.play_cue(self._config.zero_sound)
        elif isinstance(event, LimitReached):
            self._player.play_cue(self._config.limit_sound)
        elif isinstance(event, PhaseChanged) and event.phase == Phase.IDLE:
            self._player.stop()
