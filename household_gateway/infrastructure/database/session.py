"""Database engine and per-request session management"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from household_gateway.config import settings


def build_engine(database_url: str) -> Engine:
    """
    Create an engine for the configured database.

    Server databases get a bounded pool (10 + 10 overflow) recycled hourly;
    SQLite is used for local runs and tests and must allow cross-thread use
    because TestClient serves requests from a worker thread.
    """
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Yield one session per request; routes commit or roll back explicitly"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
