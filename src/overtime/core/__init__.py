"""Countdown engine, tick scheduling, events, configuration and audio."""
