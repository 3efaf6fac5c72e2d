"""Pomo CLI - ultra-low resource Pomodoro timer."""

__version__ = "0.3.0"
