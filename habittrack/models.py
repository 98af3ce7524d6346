import datetime as dt
from typing import Optional

from pydantic import NaiveDatetime
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

# ----- Models -----
# Timestamps are naive local times; an explicit DateTime keeps newer sqlmodel
# releases from mapping them to a timezone-aware column.
class Habit(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    frequency: str = Field(default="daily")  # daily/weekly/custom
    category: str = Field(default="personal", index=True)
    goal: Optional[str] = None
    reminder: Optional[str] = None  # HH:MM
    created_at: NaiveDatetime = Field(default_factory=dt.datetime.now, sa_type=DateTime)

class Completion(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: int = Field(foreign_key="habit.id", index=True)
    date: dt.date = Field(index=True)
    completed: bool = Field(default=False)

class Settings(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    theme: str = Field(default="light")  # light/dark/system
    notifications_enabled: bool = Field(default=False)
    reminder_time: str = Field(default="08:00")
    sync_data: bool = Field(default=True)
    last_sync_date: Optional[NaiveDatetime] = Field(default=None, sa_type=DateTime)
