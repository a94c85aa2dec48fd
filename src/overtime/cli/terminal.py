"""Single-line terminal rendering of the countdown."""

from __future__ import annotations

import click

from overtime.core.events import DisplayUpdate, Event, Phase, PhaseChanged, format_remaining


def terminal_bell() -> None:
    """Ring the terminal bell."""
    click.echo("\a", nl=False)


class TerminalDisplay:
    """Engine listener that rewrites the current terminal line on each update."""

    def __init__(self) -> None:
        self._last = ""

    @property
    def last_text(self) -> str:
        return self._last

    def __call__(self, event: Event) -> None:
        if isinstance(event, DisplayUpdate):
            text = format_remaining(event.remaining_ms)
            if text == self._last:
                return
            self._last = text
            color = "red" if event.remaining_ms < 0 else None
            click.echo("\r" + click.style(text, fg=color, bold=True), nl=False)
        elif isinstance(event, PhaseChanged) and event.phase == Phase.HALTED:
            click.echo()
