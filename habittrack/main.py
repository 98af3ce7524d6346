# Habit Tracker Backend (FastAPI + SQLModel)

"""
Endpoints (high-level), all under /api:
- GET /habits -> list habits with completions and current streak
- POST /habits -> create habit
- GET /habits/{id} -> get single habit
- PATCH /habits/{id} -> update habit
- DELETE /habits/{id} -> delete habit and its completions
- POST /habits/{id}/toggle -> flip a habit's completion for a date (default today)
- POST /completions -> record a completion
- PATCH /completions/{id} -> set a completion's completed flag
- GET /stats -> current streak, 30-day completion rate, habit count
- GET /charts -> category rates, 30-day progress, overall rate
- GET /statistics -> per-habit stats, category rates, streak and completion history
- GET /calendar?month=yyyy-MM -> daily completion rates for one month
- GET /settings, PATCH /settings -> app settings
- GET /export -> JSON download of habits and settings
- DELETE /reset -> wipe all data

Run:
1. pip install -e .
2. uvicorn habittrack.main:create_app --factory --reload   # or: habittrack
"""

import sys
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse
from loguru import logger

from .config import DATABASE_URL, HOST, LOG_LEVEL, PORT, STATS_WINDOW_DAYS
from .dates import format_day, parse_month
from .db import create_db_and_tables, create_db_engine
from .errors import HabitNotFound, HabitTrackerError
from . import reports
from .schemas import (
    CalendarReport,
    ChartsReport,
    CompletionCreate,
    CompletionRead,
    CompletionUpdate,
    HabitCreate,
    HabitRead,
    HabitUpdate,
    SettingsRead,
    SettingsUpdate,
    StatisticsReport,
    StatsSummary,
    ToggleRequest,
)
from .store import HabitStore

router = APIRouter(prefix="/api")

def get_store(request: Request) -> HabitStore:
    return request.app.state.store

# ----- Habit endpoints -----
@router.get("/habits", response_model=List[HabitRead])
def list_habits(store: HabitStore = Depends(get_store)):
    return store.list_habits()

@router.post("/habits", response_model=HabitRead, status_code=201)
def create_habit(habit_in: HabitCreate, store: HabitStore = Depends(get_store)):
    return store.create_habit(habit_in)

@router.get("/habits/{habit_id}", response_model=HabitRead)
def get_habit(habit_id: int, store: HabitStore = Depends(get_store)):
    habit = store.get_habit(habit_id)
    if not habit:
        raise HTTPException(404, "Habit not found")
    return habit

@router.patch("/habits/{habit_id}", response_model=HabitRead)
def update_habit(habit_id: int, habit_in: HabitUpdate, store: HabitStore = Depends(get_store)):
    habit = store.update_habit(habit_id, habit_in)
    if not habit:
        raise HTTPException(404, "Habit not found")
    return habit

@router.delete("/habits/{habit_id}", status_code=204)
def delete_habit(habit_id: int, store: HabitStore = Depends(get_store)):
    if not store.delete_habit(habit_id):
        raise HTTPException(404, "Habit not found")
    return Response(status_code=204)

@router.post("/habits/{habit_id}/toggle", response_model=CompletionRead)
def toggle_habit(habit_id: int, toggle_in: Optional[ToggleRequest] = None, store: HabitStore = Depends(get_store)):
    day = toggle_in.date if toggle_in else None
    return store.toggle_completion(habit_id, day)

# ----- Habit completion endpoints -----
@router.post("/completions", response_model=CompletionRead, status_code=201)
def create_completion(completion_in: CompletionCreate, store: HabitStore = Depends(get_store)):
    return store.create_completion(completion_in)

@router.patch("/completions/{completion_id}", response_model=CompletionRead)
def update_completion(completion_id: int, completion_in: CompletionUpdate, store: HabitStore = Depends(get_store)):
    completion = store.update_completion(completion_id, completion_in.completed)
    if not completion:
        raise HTTPException(404, "Completion not found")
    return completion

# ----- Stats -----
@router.get("/stats", response_model=StatsSummary)
def stats(store: HabitStore = Depends(get_store)):
    today = store.clock()
    habits, entries = store.snapshot(today)
    return reports.build_stats(habits, entries, today, STATS_WINDOW_DAYS)

@router.get("/charts", response_model=ChartsReport)
def charts(store: HabitStore = Depends(get_store)):
    today = store.clock()
    habits, entries = store.snapshot(today)
    return reports.build_charts(habits, entries, today, STATS_WINDOW_DAYS)

@router.get("/statistics", response_model=StatisticsReport)
def statistics(store: HabitStore = Depends(get_store)):
    today = store.clock()
    habits, entries = store.snapshot(today)
    return reports.build_statistics(habits, entries, today, STATS_WINDOW_DAYS)

@router.get("/calendar", response_model=CalendarReport)
def calendar(month: Optional[str] = Query(None, description="yyyy-MM, defaults to the current month"),
             store: HabitStore = Depends(get_store)):
    if month is None:
        first = store.clock().replace(day=1)
    else:
        try:
            first = parse_month(month)
        except ValueError:
            raise HTTPException(422, "month must be in yyyy-MM format")
    return reports.build_calendar(store.ledger(), first.year, first.month)

# ----- Settings -----
@router.get("/settings", response_model=SettingsRead)
def get_settings(store: HabitStore = Depends(get_store)):
    return store.get_settings()

@router.patch("/settings", response_model=SettingsRead)
def update_settings(settings_in: SettingsUpdate, store: HabitStore = Depends(get_store)):
    return store.update_settings(settings_in)

# ----- Data management -----
@router.get("/export")
def export_data(store: HabitStore = Depends(get_store)):
    bundle = store.export()
    filename = f"habittrack-export-{format_day(store.clock())}.json"
    return JSONResponse(
        content=bundle.model_dump(mode="json", by_alias=True),
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )

@router.delete("/reset", status_code=204)
def reset_data(store: HabitStore = Depends(get_store)):
    store.reset()
    return Response(status_code=204)

# ----- App -----
def configure_logging(level: str = LOG_LEVEL) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)

async def habit_tracker_error_handler(request: Request, exc: HabitTrackerError):
    status_code = 404 if isinstance(exc, HabitNotFound) else 400
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})

def create_app(store: Optional[HabitStore] = None) -> FastAPI:
    configure_logging()
    if store is None:
        engine = create_db_engine(DATABASE_URL)
        create_db_and_tables(engine)
        store = HabitStore(engine)
    app = FastAPI(title="Habit Tracker API")
    app.state.store = store
    app.include_router(router)
    app.add_exception_handler(HabitTrackerError, habit_tracker_error_handler)
    logger.info("Habit Tracker API ready ({})", DATABASE_URL)
    return app

def run() -> None:
    import uvicorn

    uvicorn.run("habittrack.main:create_app", factory=True, host=HOST, port=PORT)
