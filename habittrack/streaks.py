"""Per-habit streak calculation."""

from datetime import date, timedelta
from typing import Dict, Iterable

from .dates import day_key, format_day


def completions_by_day(completions: Iterable) -> Dict[str, bool]:
    """Map each day to its completed flag. The first record for a day wins."""
    by_day: Dict[str, bool] = {}
    for completion in completions:
        by_day.setdefault(day_key(completion.date), bool(completion.completed))
    return by_day


def calculate_streak(completions: Iterable, today: date) -> int:
    """Count consecutive completed days walking backward from ``today``.

    A missing record for today does not break the streak, the count simply
    starts from yesterday. An explicit incomplete record for today does: the
    result is 0 even if earlier days were completed.

    ``completions`` holds objects with ``date`` (a date or ``yyyy-MM-dd``
    string) and ``completed`` attributes.
    """
    by_day = completions_by_day(completions)
    if not by_day:
        return 0

    streak = 0
    todays = by_day.get(format_day(today))
    if todays is not None:
        if not todays:
            return 0
        streak = 1

    cursor = today - timedelta(days=1)
    while by_day.get(format_day(cursor)):
        streak += 1
        cursor -= timedelta(days=1)
    return streak
