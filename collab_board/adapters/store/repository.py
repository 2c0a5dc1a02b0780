"""Row-level persistence for posts and the admin credential.

Repositories wrap a single SQLAlchemy session; the caller owns the
transaction (see ``db_session``). Driver errors are re-raised as
``StoreAppError`` so the API layer never leaks SQL details.
"""

from __future__ import annotations

import logging
from datetime import datetime
from functools import wraps
from typing import Any, Callable, TypeVar

from sqlalchemy import ColumnElement, and_, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from collab_board.adapters.store.models import ADMIN_CREDENTIAL_NAME, Activist, AdminCredential
from collab_board.core.errors import StoreAppError
from collab_board.services.query_parser import AllOf, AnyOf, Condition, Contains, KeywordFilter

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _store_errors(func: Callable[..., T]) -> Callable[..., T]:
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as exc:
            logger.error(
                "store.error",
                extra={"operation": func.__name__, "error_type": type(exc).__name__},
            )
            raise StoreAppError(
                code="store_error",
                message="The request could not be completed. Please try again later.",
            ) from exc

    return wrapper


def keyword_clause(keyword_filter: KeywordFilter, column: Any) -> ColumnElement[bool]:
    """Render a parsed keyword filter as a SQLAlchemy boolean expression.

    Each leaf becomes a case-insensitive ``LIKE`` with ``%``/``_`` in the
    user's text escaped, bound in the same order as ``keyword_filter.patterns``.
    """

    def render(condition: Condition) -> ColumnElement[bool]:
        if isinstance(condition, Contains):
            return column.icontains(condition.text, autoescape=True)
        parts = [render(item) for item in condition.items]
        if isinstance(condition, AllOf):
            return and_(*parts)
        if isinstance(condition, AnyOf):
            return or_(*parts)
        raise TypeError(f"unsupported condition: {condition!r}")

    return render(keyword_filter.root)


class PostRepository:
    """CRUD and search over the ``activists`` table."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @_store_errors
    def add(
        self,
        *,
        interest: str,
        location: str,
        signal_username: str,
        alias: str | None,
        password_hash: str | None,
        created_at: datetime | None = None,
    ) -> Activist:
        post = Activist(
            interest=interest,
            location=location,
            signal_username=signal_username,
            alias=alias,
            password_hash=password_hash,
        )
        if created_at is not None:
            post.created_at = created_at
        self._session.add(post)
        self._session.flush()
        return post

    @_store_errors
    def get(self, post_id: int) -> Activist | None:
        return self._session.get(Activist, post_id)

    @_store_errors
    def search(
        self,
        *,
        created_after: datetime,
        keyword_filter: KeywordFilter | None = None,
        location: str | None = None,
    ) -> list[Activist]:
        """Posts newer than ``created_after`` matching the filters, newest first."""
        stmt = select(Activist).where(Activist.created_at >= created_after)
        if keyword_filter is not None:
            stmt = stmt.where(keyword_clause(keyword_filter, Activist.interest))
        if location:
            stmt = stmt.where(Activist.location.icontains(location, autoescape=True))
        stmt = stmt.order_by(Activist.created_at.desc(), Activist.id.desc())
        return list(self._session.scalars(stmt))

    @_store_errors
    def update_fields(
        self,
        post: Activist,
        *,
        interest: str,
        location: str,
        signal_username: str,
        alias: str | None,
    ) -> Activist:
        # password_hash and created_at never change after creation
        post.interest = interest
        post.location = location
        post.signal_username = signal_username
        post.alias = alias
        self._session.flush()
        return post

    @_store_errors
    def delete(self, post_id: int) -> bool:
        """Delete a post by id; returns whether a row was removed."""
        post = self._session.get(Activist, post_id)
        if post is None:
            return False
        self._session.delete(post)
        self._session.flush()
        return True


class AdminCredentialRepository:
    """Access to the single named admin credential record."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @_store_errors
    def get(self) -> AdminCredential | None:
        return self._session.get(AdminCredential, ADMIN_CREDENTIAL_NAME)

    @_store_errors
    def create(self, password_hash: str) -> AdminCredential:
        credential = AdminCredential(name=ADMIN_CREDENTIAL_NAME, password_hash=password_hash, version=1)
        self._session.add(credential)
        self._session.flush()
        return credential

    @_store_errors
    def compare_and_swap(self, *, expected_version: int, password_hash: str) -> bool:
        """Replace the hash only if nobody changed it since ``expected_version``."""
        result = self._session.execute(
            update(AdminCredential)
            .where(
                AdminCredential.name == ADMIN_CREDENTIAL_NAME,
                AdminCredential.version == expected_version,
            )
            .values(password_hash=password_hash, version=expected_version + 1)
            .execution_options(synchronize_session=False)
        )
        # Reload so an already-loaded credential reflects the stored row
        self._session.get(AdminCredential, ADMIN_CREDENTIAL_NAME, populate_existing=True)
        return result.rowcount == 1
