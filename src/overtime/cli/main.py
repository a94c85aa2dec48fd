"""CLI entry point for overtime.

Uses Click to expose the ``overtime`` command group: ``run`` opens the
countdown window (or runs it in the terminal with ``--headless``) and
``config`` shows the settings a run would use.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

import overtime
from overtime.cli.terminal import TerminalDisplay, terminal_bell
from overtime.core.audio import AudioPlayer, CueDispatcher
from overtime.core.config import DEFAULT_CONFIG_FILE, load_config
from overtime.core.engine import CountdownEngine
from overtime.core.events import Phase, format_remaining
from overtime.core.scheduler import DEFAULT_INTERVAL_MS, BlockingTickScheduler

_INTERRUPTED_EXIT_CODE = 130

_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="Configuration file (missing values use defaults).",
)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _run_headless(engine: CountdownEngine, interval_ms: int) -> int:
    """Run the countdown in the terminal and return the exit code."""
    engine.subscribe(TerminalDisplay())
    player = AudioPlayer(beep=terminal_bell)
    engine.subscribe(CueDispatcher(engine.config, player))
    scheduler = BlockingTickScheduler(engine, interval_ms)

    engine.start()
    try:
        scheduler.run()
    except KeyboardInterrupt:
        engine.pause()
        click.echo()
        click.echo(f"Paused at {format_remaining(engine.remaining_ms)}")
        return _INTERRUPTED_EXIT_CODE
    if engine.phase != Phase.HALTED:
        return 1

    # Let the limit cue finish before the process (and the mixer) goes away.
    try:
        player.wait()
    except KeyboardInterrupt:
        player.stop()
    return 0


@click.group()
@click.version_option(version=overtime.__version__, prog_name="overtime")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """overtime: a countdown timer that keeps counting past zero."""
    _setup_logging(verbose)


@cli.command()
@_config_option
@click.option(
    "--interval",
    "interval_ms",
    type=click.IntRange(min=1),
    default=DEFAULT_INTERVAL_MS,
    show_default=True,
    help="Tick interval in milliseconds.",
)
@click.option("--headless", is_flag=True, help="Run in the terminal instead of a window.")
def run(config_path: Path, interval_ms: int, headless: bool) -> None:
    """Run the countdown."""
    engine = CountdownEngine(load_config(config_path))
    if headless:
        sys.exit(_run_headless(engine, interval_ms))

    from overtime.ui.window import run_window

    run_window(engine, interval_ms)


@cli.command("config")
@_config_option
def show_config(config_path: Path) -> None:
    """Show the effective configuration."""
    config = load_config(config_path)
    click.echo(f"Start: {format_remaining(config.start_ms)}")
    click.echo(f"Limit: {format_remaining(-config.limit_ms)}")
    click.echo(f"Zero sound: {config.zero_sound or '(beep)'}")
    click.echo(f"Limit sound: {config.limit_sound or '(beep)'}")
