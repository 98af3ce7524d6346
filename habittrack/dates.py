"""Calendar-day helpers shared by the streak and report code.

All dates are naive calendar dates. No timezone is applied anywhere, so
callers must normalize to the user's local day before passing dates in.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import List, Union

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

DayLike = Union[date, str]


def format_day(day: date) -> str:
    return day.strftime(DATE_FORMAT)


def parse_day(value: str) -> date:
    return datetime.strptime(value, DATE_FORMAT).date()


def day_key(value: DayLike) -> str:
    """Normalize a date or ``yyyy-MM-dd`` string to the string form."""
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return format_day(value)
    return value


def parse_month(value: str) -> date:
    """Return the first day of a ``yyyy-MM`` month. Raises ValueError."""
    return datetime.strptime(value, MONTH_FORMAT).date()


def trailing_days(today: date, count: int) -> List[date]:
    """The ``count`` days ending at ``today``, oldest first."""
    return [today - timedelta(days=offset) for offset in range(count - 1, -1, -1)]


def month_days(year: int, month: int) -> List[date]:
    _, length = calendar.monthrange(year, month)
    return [date(year, month, day) for day in range(1, length + 1)]


def percent(completed: int, total: int) -> int:
    """round(completed / total * 100), halves rounded up, 0 for an empty total."""
    if total <= 0:
        return 0
    # integer form of floor(x + 0.5) avoids float error on exact halves
    return (completed * 200 + total) // (2 * total)
