"""Database engine and session dependency helpers."""

from __future__ import annotations

from collections.abc import Generator

from sqlalchemy.engine import Engine
from sqlmodel import Session, create_engine

from clubhouse.core.config import get_settings


def build_engine(database_url: str) -> Engine:
    """Create an engine that hands each thread its own connection."""

    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args, echo=False)


settings = get_settings()
engine = build_engine(settings.database_url)


def get_session() -> Generator[Session, None, None]:
    """Yield a database session."""

    with Session(engine) as session:
        yield session
