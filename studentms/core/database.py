"""SQLAlchemy engine and request-scoped sessions (PostgreSQL, or SQLite for local runs)."""

import logging
from collections.abc import Iterator
from typing import Any

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from studentms.core.config import settings

logger = logging.getLogger(__name__)


def build_engine(url: str, *, echo: bool = False, **kwargs: Any) -> Engine:
    """Engine for url. SQLite connections are allowed to cross FastAPI's worker threads."""
    if url.startswith("sqlite://"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True, echo=echo, **kwargs)


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

SessionLocal = sessionmaker(bind=engine, autoflush=False)


def get_db() -> Iterator[Session]:
    """Request-scoped session, closed once the response has been produced."""
    with SessionLocal() as db:
        yield db


def ping(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Database ping failed", exc_info=True)
        return False
    return True
