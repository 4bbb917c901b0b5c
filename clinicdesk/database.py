"""
SQLAlchemy wiring: engine, session factory and the model base class.
"""
from typing import Iterator
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from .config import settings


def _connect_args(url: str) -> dict:
    # Sync routes run in a threadpool; SQLite connections must be shareable across it
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(settings.database_url, connect_args=_connect_args(settings.database_url))

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

Base = declarative_base()


def get_db() -> Iterator[Session]:
    """
    Request-scoped database session.

    Yields:
        Session: Closed once the request has been handled
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
