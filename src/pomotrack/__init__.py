"""Pomodoro tracker: session accounting, statistics and a persisted timer."""

__version__ = "0.1.0"
