"""Habit tracker backend: habits, daily completions, streaks and statistics."""

__version__ = "0.1.0"
