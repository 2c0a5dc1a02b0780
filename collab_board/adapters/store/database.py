from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from collab_board.core.errors import StoreAppError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def build_engine(url: str, *, echo: bool = False) -> Engine:
    """Create the engine for ``url``.

    SQLite connections are shared with FastAPI's worker threads, and an
    in-memory SQLite database is pinned to a single connection so every
    session sees the same data.
    """
    kwargs: dict = {"echo": echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    # Import for side effect: registers ORM mappings with Base.metadata
    from collab_board.adapters.store import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


@contextmanager
def db_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Context-manager style session with automatic commit/rollback.

    A failed commit is rolled back and raised as ``StoreAppError``.
    """
    session = session_factory()
    try:
        yield session
        try:
            session.commit()
        except SQLAlchemyError as exc:
            logger.error("store.commit_failed", extra={"error_type": type(exc).__name__})
            raise StoreAppError(
                code="store_error",
                message="The request could not be completed. Please try again later.",
            ) from exc
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
