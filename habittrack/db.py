from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from .config import DATABASE_URL


# ----- DB setup -----
def create_db_engine(url: str = DATABASE_URL) -> Engine:
    if url.startswith("sqlite"):
        # an in-memory database lives in one connection, share it between sessions
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=False, **kwargs)
    return create_engine(url, echo=False)

def create_db_and_tables(engine: Engine) -> None:
    from . import models  # noqa: F401  registers the tables

    SQLModel.metadata.create_all(engine)
