"""Aggregate statistics over the completion ledger.

Every function here is a pure view over a flat list of ``LedgerEntry``
rows (habit id, habit category, day, completed flag), so calling a report
twice on an unchanged ledger gives the same result.
"""

import datetime as dt
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from loguru import logger

from .dates import format_day, month_days, percent, trailing_days
from .schemas import (
    CalendarReport,
    CategoryCompletion,
    ChartsReport,
    HabitRead,
    HabitStatistics,
    ProgressPoint,
    RatePoint,
    StatisticsReport,
    StatsSummary,
    StreakPoint,
)

WINDOW_DAYS = 30


@dataclass(frozen=True)
class LedgerEntry:
    habit_id: int
    category: str
    date: dt.date
    completed: bool


def _rate(entries: Iterable[LedgerEntry]) -> int:
    entries = list(entries)
    return percent(sum(1 for e in entries if e.completed), len(entries))


def group_by_day(entries: Iterable[LedgerEntry]) -> Dict[dt.date, List[bool]]:
    by_day: Dict[dt.date, List[bool]] = defaultdict(list)
    for entry in entries:
        by_day[entry.date].append(entry.completed)
    return by_day


def _rolling_streak(by_day: Dict[dt.date, List[bool]], today: dt.date, window: int) -> int:
    streak = 0
    for offset in range(1, window + 1):
        flags = by_day.get(today - dt.timedelta(days=offset))
        if not flags or not all(flags):
            break
        streak += 1
    return streak


def rolling_streak(entries: Iterable[LedgerEntry], today: dt.date, window: int = WINDOW_DAYS) -> int:
    """Days in a row, ending yesterday, on which every recorded completion succeeded.

    Today is not counted. A day with no records at all ends the run, as does
    any single incomplete record. At most ``window`` days are inspected.
    """
    return _rolling_streak(group_by_day(entries), today, window)


def completion_rate(entries: Iterable[LedgerEntry], today: dt.date, window: int = WINDOW_DAYS) -> int:
    """Percent completed among records dated within ``[today - window, today]``."""
    start = today - dt.timedelta(days=window)
    return _rate(e for e in entries if start <= e.date <= today)


def overall_rate(entries: Iterable[LedgerEntry]) -> int:
    return _rate(entries)


def category_completions(habits: Iterable, entries: Iterable[LedgerEntry]) -> List[CategoryCompletion]:
    """Completion rate and habit count per category, in order of first use.

    Only categories that at least one habit belongs to are reported.
    """
    counts: Dict[str, int] = {}
    for habit in habits:
        counts[habit.category] = counts.get(habit.category, 0) + 1

    by_category: Dict[str, List[LedgerEntry]] = defaultdict(list)
    for entry in entries:
        by_category[entry.category].append(entry)

    return [
        CategoryCompletion(category=category, completion_rate=_rate(by_category[category]), count=count)
        for category, count in counts.items()
    ]


def daily_rates(entries: Iterable[LedgerEntry], days: Sequence[dt.date]) -> List[RatePoint]:
    """One point per requested day, in the order given. Empty days rate 0."""
    by_day = group_by_day(entries)
    return [
        RatePoint(date=format_day(day), rate=percent(sum(by_day.get(day, [])), len(by_day.get(day, []))))
        for day in days
    ]


def trailing_rates(entries: Iterable[LedgerEntry], today: dt.date, window: int = WINDOW_DAYS) -> List[RatePoint]:
    return daily_rates(entries, trailing_days(today, window))


def month_rates(entries: Iterable[LedgerEntry], year: int, month: int) -> List[RatePoint]:
    return daily_rates(entries, month_days(year, month))


def streak_history(entries: Iterable[LedgerEntry], today: dt.date, window: int = WINDOW_DAYS) -> List[StreakPoint]:
    """The rolling streak as it stood on each of the trailing ``window`` days."""
    by_day = group_by_day(entries)
    return [
        StreakPoint(date=format_day(day), streak=_rolling_streak(by_day, day, window))
        for day in trailing_days(today, window)
    ]


def habit_statistics(habits: Iterable[HabitRead]) -> List[HabitStatistics]:
    return [
        HabitStatistics(
            id=habit.id,
            name=habit.name,
            category=habit.category,
            frequency=habit.frequency,
            streak=habit.streak,
            completion_rate=_rate(habit.completions),
        )
        for habit in habits
    ]


# ----- Report bundles served by the API -----
def build_stats(habits: Sequence[HabitRead], entries: Sequence[LedgerEntry], today: dt.date,
                window: int = WINDOW_DAYS) -> StatsSummary:
    current = rolling_streak(entries, today, window)
    logger.debug("Built stats for {} habits, {} ledger entries", len(habits), len(entries))
    return StatsSummary(
        current_streak=current,
        completion_rate=completion_rate(entries, today, window),
        total_habits=len(habits),
        # no historical maximum is kept, so the best streak is the current one
        best_streak=current,
    )


def build_charts(habits: Sequence[HabitRead], entries: Sequence[LedgerEntry], today: dt.date,
                 window: int = WINDOW_DAYS) -> ChartsReport:
    progress = [
        ProgressPoint(date=point.date, completion_rate=point.rate)
        for point in trailing_rates(entries, today, window)
    ]
    return ChartsReport(
        category_completions=category_completions(habits, entries),
        monthly_progress=progress,
        overall_completion_rate=overall_rate(entries),
    )


def build_statistics(habits: Sequence[HabitRead], entries: Sequence[LedgerEntry], today: dt.date,
                     window: int = WINDOW_DAYS) -> StatisticsReport:
    return StatisticsReport(
        habits=habit_statistics(habits),
        category_data=category_completions(habits, entries),
        streak_history=streak_history(entries, today, window),
        completion_history=trailing_rates(entries, today, window),
    )


def build_calendar(entries: Sequence[LedgerEntry], year: int, month: int) -> CalendarReport:
    return CalendarReport(month=f"{year:04d}-{month:02d}", days=month_rates(entries, year, month))
