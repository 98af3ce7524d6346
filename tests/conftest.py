from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from habittrack.db import create_db_and_tables, create_db_engine
from habittrack.main import create_app
from habittrack.reports import LedgerEntry
from habittrack.store import HabitStore

TODAY = date(2024, 5, 15)


def days_ago(n):
    return TODAY - timedelta(days=n)


def entry(day, completed, habit_id=1, category="health"):
    return LedgerEntry(habit_id=habit_id, category=category, date=day, completed=completed)


@pytest.fixture
def engine():
    """Isolated in-memory database per test."""
    engine = create_db_engine("sqlite://")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return HabitStore(engine, clock=lambda: TODAY)


@pytest.fixture
def client(store):
    with TestClient(create_app(store)) as client:
        yield client
