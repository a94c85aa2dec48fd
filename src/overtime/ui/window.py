"""Desktop window for the countdown, built on tkinter."""

from __future__ import annotations

import tkinter as tk
from tkinter import font as tkfont

from overtime.core.audio import AudioPlayer, CueDispatcher
from overtime.core.engine import CountdownEngine
from overtime.core.events import DisplayUpdate, Event, Phase, PhaseChanged, format_remaining
from overtime.core.scheduler import DEFAULT_INTERVAL_MS, TkTickScheduler

_TITLE = "Negative Countdown Timer"
_GEOMETRY = "600x400"
_MIN_FONT_SIZE = 20


def fit_font_size(width: int, height: int) -> int:
    """Return a point size that keeps ``-MM:SS`` inside a *width* x *height* window.

    Half the height or the width over 4.5, whichever is smaller, and never
    less than 20 points.
    """
    by_height = int(height * 0.5)
    by_width = int(width / 4.5)
    return max(_MIN_FONT_SIZE, min(by_height, by_width))


class TimerWindow:
    """Label plus Start/Pause and Reset buttons, driven by a :class:`CountdownEngine`."""

    def __init__(
        self, root: tk.Tk, engine: CountdownEngine, interval_ms: int = DEFAULT_INTERVAL_MS
    ) -> None:
        self._root = root
        self._engine = engine

        root.title(_TITLE)
        root.geometry(_GEOMETRY)

        self._font = tkfont.Font(root=root, weight="bold", size=_MIN_FONT_SIZE)
        self._label = tk.Label(root, text=format_remaining(engine.remaining_ms), font=self._font)
        self._label.pack(fill=tk.BOTH, expand=True)

        buttons = tk.Frame(root)
        buttons.pack(fill=tk.X)
        self._start_pause = tk.Button(buttons, text="Start", command=self.toggle, height=2)
        self._start_pause.pack(side=tk.LEFT, fill=tk.X, expand=True)
        self._reset = tk.Button(buttons, text="Reset", command=engine.reset, height=2)
        self._reset.pack(side=tk.LEFT, fill=tk.X, expand=True)

        root.bind("<Configure>", self._on_resize)
        root.bind("<Alt-Return>", self._toggle_fullscreen)
        root.bind("<Alt-KP_Enter>", self._toggle_fullscreen)

        self._player = AudioPlayer(beep=root.bell)
        self._scheduler = TkTickScheduler(root, engine, interval_ms)
        engine.subscribe(self.handle)
        engine.subscribe(CueDispatcher(engine.config, self._player))

    @property
    def text(self) -> str:
        return self._label.cget("text")

    @property
    def start_pause_visible(self) -> bool:
        return bool(self._start_pause.winfo_manager())

    def toggle(self) -> None:
        """Pause when running, start otherwise."""
        if self._engine.phase == Phase.RUNNING:
            self._engine.pause()
        else:
            self._engine.start()

    def handle(self, event: Event) -> None:
        if isinstance(event, DisplayUpdate):
            self._label.configure(
                text=format_remaining(event.remaining_ms),
                fg="red" if event.remaining_ms < 0 else "black",
            )
        elif isinstance(event, PhaseChanged):
            self._show_phase(event.phase)

    def _show_phase(self, phase: Phase) -> None:
        if phase == Phase.HALTED:
            self._start_pause.pack_forget()
            return
        self._start_pause.configure(text="Pause" if phase == Phase.RUNNING else "Start")
        if not self.start_pause_visible:
            self._start_pause.pack(side=tk.LEFT, fill=tk.X, expand=True, before=self._reset)

    def _on_resize(self, event: tk.Event) -> None:
        if event.widget is self._root:
            self._font.configure(size=fit_font_size(event.width, event.height))

    def _toggle_fullscreen(self, _event: tk.Event) -> None:
        fullscreen = bool(self._root.attributes("-fullscreen"))
        self._root.attributes("-fullscreen", not fullscreen)


def run_window(engine: CountdownEngine, interval_ms: int = DEFAULT_INTERVAL_MS) -> None:
    """Open the window and block in the tkinter main loop."""
    root = tk.Tk()
    TimerWindow(root, engine, interval_ms)
    root.mainloop()
