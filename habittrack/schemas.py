import datetime as dt
import re
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

TIME_OF_DAY = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _check_time_of_day(value: str) -> str:
    if not TIME_OF_DAY.match(value):
        raise ValueError("must be a time of day in HH:MM format")
    return value


TimeOfDay = Annotated[str, AfterValidator(_check_time_of_day)]


def _reject_null(value):
    if value is None:
        raise ValueError("may be omitted but not set to null")
    return value


class Frequency(str, Enum):
    daily = "daily"
    weekly = "weekly"
    custom = "custom"

class Category(str, Enum):
    health = "health"
    fitness = "fitness"
    education = "education"
    wellness = "wellness"
    work = "work"
    personal = "personal"

class Theme(str, Enum):
    light = "light"
    dark = "dark"
    system = "system"


# ----- Pydantic schemas -----
class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, also accepts snake_case on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )

class HabitCreate(CamelModel):
    name: str = Field(min_length=1)
    frequency: Frequency = Frequency.daily
    category: Category = Category.personal
    goal: Optional[str] = None
    reminder: Optional[TimeOfDay] = None

class HabitUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    frequency: Optional[Frequency] = None
    category: Optional[Category] = None
    goal: Optional[str] = None
    reminder: Optional[TimeOfDay] = None

    @field_validator("name", "frequency", "category")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)

class CompletionCreate(CamelModel):
    habit_id: int
    date: dt.date
    completed: bool = False

class CompletionUpdate(CamelModel):
    completed: bool

class ToggleRequest(CamelModel):
    date: Optional[dt.date] = None

class CompletionRead(CamelModel):
    id: int
    habit_id: int
    date: dt.date
    completed: bool

class HabitRead(CamelModel):
    id: int
    name: str
    frequency: str
    category: str
    goal: Optional[str]
    reminder: Optional[str]
    created_at: dt.datetime
    completions: List[CompletionRead] = []
    streak: int = 0

class SettingsRead(CamelModel):
    id: int
    theme: str
    notifications_enabled: bool
    reminder_time: str
    sync_data: bool
    last_sync_date: Optional[dt.datetime]

class SettingsUpdate(CamelModel):
    theme: Optional[Theme] = None
    notifications_enabled: Optional[bool] = None
    reminder_time: Optional[TimeOfDay] = None
    sync_data: Optional[bool] = None

    @field_validator("theme", "notifications_enabled", "reminder_time", "sync_data")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)


# ----- Report schemas -----
class StatsSummary(CamelModel):
    current_streak: int
    completion_rate: int
    total_habits: int
    best_streak: int

class CategoryCompletion(CamelModel):
    category: str
    completion_rate: int
    count: int

class RatePoint(CamelModel):
    date: str
    rate: int

class ProgressPoint(CamelModel):
    date: str
    completion_rate: int

class StreakPoint(CamelModel):
    date: str
    streak: int

class HabitStatistics(CamelModel):
    id: int
    name: str
    category: str
    frequency: str
    streak: int
    completion_rate: int

class ChartsReport(CamelModel):
    category_completions: List[CategoryCompletion]
    monthly_progress: List[ProgressPoint]
    overall_completion_rate: int

class StatisticsReport(CamelModel):
    habits: List[HabitStatistics]
    category_data: List[CategoryCompletion]
    streak_history: List[StreakPoint]
    completion_history: List[RatePoint]

class CalendarReport(CamelModel):
    month: str
    days: List[RatePoint]

class ExportBundle(CamelModel):
    habits: List[HabitRead]
    settings: SettingsRead
