"""Pomodoro: a focus timer with crash-safe state and desktop integration."""

__version__ = "0.1.0"
