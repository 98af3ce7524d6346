"""Habit, completion and settings storage with computed streaks."""

import datetime as dt
from typing import Callable, Dict, List, Optional, Tuple

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from .errors import HabitNotFound
from .models import Completion, Habit, Settings
from .reports import LedgerEntry
from .schemas import (
    CompletionCreate,
    CompletionRead,
    ExportBundle,
    HabitCreate,
    HabitRead,
    HabitUpdate,
    SettingsRead,
    SettingsUpdate,
)
from .streaks import calculate_streak


class HabitStore:
    """Owns habits, their completion ledger and the settings record.

    Every write commits before returning, so any report built afterwards
    sees it. ``clock`` supplies "today" for streak calculation.
    """

    def __init__(self, engine: Engine, clock: Callable[[], dt.date] = dt.date.today):
        self.engine = engine
        self.clock = clock

    def _join(self, habit: Habit, completions: List[Completion], today: dt.date) -> HabitRead:
        return HabitRead(
            **habit.model_dump(),
            completions=[CompletionRead(**c.model_dump()) for c in completions],
            streak=calculate_streak(completions, today),
        )

    def _completions_for(self, session: Session, habit_id: int) -> List[Completion]:
        return list(session.exec(
            select(Completion).where(Completion.habit_id == habit_id).order_by(Completion.id)
        ).all())

    # ----- Habits -----
    def snapshot(self, today: Optional[dt.date] = None) -> Tuple[List[HabitRead], List[LedgerEntry]]:
        """Joined habits plus the flat ledger, read in one session.

        Streaks are computed against ``today``, read from the clock once when omitted.
        """
        today = today or self.clock()
        with Session(self.engine) as session:
            habits = session.exec(select(Habit).order_by(Habit.id)).all()
            completions = session.exec(select(Completion).order_by(Completion.id)).all()

            by_habit: Dict[int, List[Completion]] = {h.id: [] for h in habits}
            for completion in completions:
                if completion.habit_id in by_habit:
                    by_habit[completion.habit_id].append(completion)

            joined = [self._join(h, by_habit[h.id], today) for h in habits]
            entries = [
                LedgerEntry(habit_id=h.id, category=h.category, date=c.date, completed=c.completed)
                for h in habits
                for c in by_habit[h.id]
            ]
            return joined, entries

    def list_habits(self) -> List[HabitRead]:
        return self.snapshot()[0]

    def ledger(self) -> List[LedgerEntry]:
        return self.snapshot()[1]

    def get_habit(self, habit_id: int) -> Optional[HabitRead]:
        with Session(self.engine) as session:
            habit = session.get(Habit, habit_id)
            if not habit:
                return None
            return self._join(habit, self._completions_for(session, habit_id), self.clock())

    def create_habit(self, habit_in: HabitCreate) -> HabitRead:
        with Session(self.engine) as session:
            habit = Habit(**habit_in.model_dump())
            session.add(habit)
            session.commit()
            session.refresh(habit)
            logger.info("Created habit {} ({})", habit.id, habit.name)
            return self._join(habit, [], self.clock())

    def update_habit(self, habit_id: int, habit_in: HabitUpdate) -> Optional[HabitRead]:
        with Session(self.engine) as session:
            habit = session.get(Habit, habit_id)
            if not habit:
                logger.warning("Update of missing habit {}", habit_id)
                return None
            for key, value in habit_in.model_dump(exclude_unset=True).items():
                setattr(habit, key, value)
            session.add(habit)
            session.commit()
            session.refresh(habit)
            logger.info("Updated habit {}", habit_id)
            return self._join(habit, self._completions_for(session, habit_id), self.clock())

    def delete_habit(self, habit_id: int) -> bool:
        with Session(self.engine) as session:
            habit = session.get(Habit, habit_id)
            if not habit:
                logger.warning("Delete of missing habit {}", habit_id)
                return False
            completions = self._completions_for(session, habit_id)
            for completion in completions:
                session.delete(completion)
            session.delete(habit)
            session.commit()
            logger.info("Deleted habit {} with {} completions", habit_id, len(completions))
            return True

    # ----- Completions -----
    def create_completion(self, completion_in: CompletionCreate) -> CompletionRead:
        with Session(self.engine) as session:
            if not session.get(Habit, completion_in.habit_id):
                logger.warning("Completion for missing habit {}", completion_in.habit_id)
                raise HabitNotFound(completion_in.habit_id)
            completion = Completion(**completion_in.model_dump())
            session.add(completion)
            session.commit()
            session.refresh(completion)
            logger.info("Recorded completion {} for habit {} on {}", completion.id, completion.habit_id, completion.date)
            return CompletionRead(**completion.model_dump())

    def update_completion(self, completion_id: int, completed: bool) -> Optional[CompletionRead]:
        with Session(self.engine) as session:
            completion = session.get(Completion, completion_id)
            if not completion:
                logger.warning("Update of missing completion {}", completion_id)
                return None
            completion.completed = completed
            session.add(completion)
            session.commit()
            session.refresh(completion)
            return CompletionRead(**completion.model_dump())

    def toggle_completion(self, habit_id: int, day: Optional[dt.date] = None) -> CompletionRead:
        """Mark ``day`` (default today) done, or flip the record already there."""
        day = day or self.clock()
        with Session(self.engine) as session:
            if not session.get(Habit, habit_id):
                raise HabitNotFound(habit_id)
            completion = session.exec(
                select(Completion)
                .where(Completion.habit_id == habit_id, Completion.date == day)
                .order_by(Completion.id)
            ).first()
            if completion:
                completion.completed = not completion.completed
            else:
                completion = Completion(habit_id=habit_id, date=day, completed=True)
            session.add(completion)
            session.commit()
            session.refresh(completion)
            logger.info("Habit {} on {} marked {}", habit_id, day, "done" if completion.completed else "not done")
            return CompletionRead(**completion.model_dump())

    # ----- Settings -----
    def _settings_row(self, session: Session) -> Settings:
        settings = session.exec(select(Settings)).first()
        if settings is None:
            settings = Settings()
            session.add(settings)
            session.commit()
            session.refresh(settings)
        return settings

    def get_settings(self) -> SettingsRead:
        with Session(self.engine) as session:
            return SettingsRead(**self._settings_row(session).model_dump())

    def update_settings(self, settings_in: SettingsUpdate) -> SettingsRead:
        with Session(self.engine) as session:
            settings = self._settings_row(session)
            for key, value in settings_in.model_dump(exclude_unset=True).items():
                setattr(settings, key, value)
            settings.last_sync_date = dt.datetime.now()
            session.add(settings)
            session.commit()
            session.refresh(settings)
            return SettingsRead(**settings.model_dump())

    # ----- Data management -----
    def export(self) -> ExportBundle:
        return ExportBundle(habits=self.list_habits(), settings=self.get_settings())

    def reset(self) -> None:
        """Remove every habit and completion and restore default settings."""
        with Session(self.engine) as session:
            for completion in session.exec(select(Completion)).all():
                session.delete(completion)
            for habit in session.exec(select(Habit)).all():
                session.delete(habit)
            settings = self._settings_row(session)
            defaults = Settings()
            for key in ("theme", "notifications_enabled", "reminder_time", "sync_data", "last_sync_date"):
                setattr(settings, key, getattr(defaults, key))
            session.add(settings)
            session.commit()
        logger.info("All habit data reset")
