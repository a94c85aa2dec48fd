"""overtime: a countdown timer that keeps counting past zero."""

__version__ = "0.1.0"
