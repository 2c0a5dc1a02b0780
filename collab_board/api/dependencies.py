"""Per-request wiring of sessions, repositories and services."""

from __future__ import annotations

from typing import Annotated, Iterator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from collab_board.adapters.rate_limit.base import AbstractAttemptLimiter
from collab_board.adapters.store.database import db_session
from collab_board.adapters.store.repository import AdminCredentialRepository, PostRepository
from collab_board.core.rate_limit import get_attempt_limiter
from collab_board.services.admin_service import AdminService
from collab_board.services.post_service import PostService


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a session that commits when the request succeeds."""
    with db_session(request.app.state.session_factory) as session:
        yield session


def get_post_service(
    session: Annotated[Session, Depends(get_db_session)],
    limiter: Annotated[AbstractAttemptLimiter, Depends(get_attempt_limiter)],
) -> PostService:
    return PostService(PostRepository(session), limiter)


def get_admin_service(
    session: Annotated[Session, Depends(get_db_session)],
) -> AdminService:
    return AdminService(AdminCredentialRepository(session), PostRepository(session))
