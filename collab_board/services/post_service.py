"""Post lifecycle and the password gate.

A post is *protected* when it was created with a non-blank secret (only its
bcrypt hash is stored) and *unprotected* otherwise. Verify, edit and delete
all go through the same gate:

1. required fields present            -> ValidationAppError
2. the post exists                    -> NotFoundAppError
3. the post is protected              -> ForbiddenAppError (limiter untouched)
4. the post is not rate limited       -> RateLimitedAppError
5. the secret matches the stored hash -> CredentialAppError, failure recorded

Admin moderation does not use this gate; see ``AdminService``.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timedelta
from typing import Callable, Literal

from collab_board.adapters.rate_limit.base import AbstractAttemptLimiter
from collab_board.adapters.store.models import Activist, utcnow
from collab_board.adapters.store.repository import PostRepository
from collab_board.core.auth import hash_password, normalize_secret, verify_password
from collab_board.core.config import AppSettings, settings
from collab_board.core.errors import (
    CredentialAppError,
    ForbiddenAppError,
    NotFoundAppError,
    RateLimitedAppError,
)
from collab_board.schemas.posts import PostView
from collab_board.services.query_parser import parse_keyword_query
from collab_board.utils.field_validators import (
    check_max_length,
    clean_optional,
    require_fields,
)

logger = logging.getLogger(__name__)

GatedAction = Literal["verify", "edit", "delete"]

_UNPROTECTED_MESSAGES: dict[str, str] = {
    "verify": "This post does not have a password",
    "edit": "This post cannot be edited",
    "delete": "This post cannot be deleted",
}


def _keyword_digest(keyword: str) -> str:
    return hashlib.sha256(keyword.encode()).hexdigest()[:16]


class PostService:
    """Create, search, verify, edit and delete posts."""

    def __init__(
        self,
        posts: PostRepository,
        limiter: AbstractAttemptLimiter,
        *,
        app_settings: AppSettings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._posts = posts
        self._limiter = limiter
        self._settings = app_settings or settings.app
        self._clock = clock

    def _clean_fields(
        self,
        interest: str | None,
        location: str | None,
        signal_username: str | None,
        alias: str | None,
    ) -> dict[str, str | None]:
        require_fields({"interest": interest, "signal_username": signal_username})

        fields: dict[str, str | None] = {
            "interest": interest.strip(),
            "location": clean_optional(location) or self._settings.default_location,
            "signal_username": signal_username.strip(),
            "alias": clean_optional(alias),
        }
        check_max_length("interest", fields["interest"], self._settings.interest_max_chars)
        check_max_length("signal_username", fields["signal_username"], self._settings.handle_max_chars)
        check_max_length("alias", fields["alias"], self._settings.handle_max_chars)
        return fields

    def create(
        self,
        *,
        interest: str | None,
        location: str | None,
        signal_username: str | None,
        alias: str | None = None,
        password: str | None = None,
    ) -> PostView:
        """Store a new post; a non-blank password makes it protected."""
        fields = self._clean_fields(interest, location, signal_username, alias)
        secret = normalize_secret(password)
        password_hash = hash_password(secret, self._settings.bcrypt_rounds) if secret else None

        post = self._posts.add(password_hash=password_hash, **fields)
        logger.info(
            "post.created",
            extra={"post_id": post.id, "protected": post.has_password},
        )
        return PostView.model_validate(post)

    def search(self, *, keyword: str | None = None, location: str | None = None) -> list[PostView]:
        """List recent posts, optionally filtered by keyword query and location."""
        keyword_filter = parse_keyword_query(keyword)
        created_after = self._clock() - timedelta(days=self._settings.listing_max_age_days)

        posts = self._posts.search(
            created_after=created_after,
            keyword_filter=keyword_filter,
            location=clean_optional(location),
        )
        logger.info(
            "post.search",
            extra={
                "keyword_hash": _keyword_digest(keyword) if keyword else None,
                "keyword_terms": len(keyword_filter.patterns) if keyword_filter else 0,
                "disjunctive": keyword_filter.disjunctive if keyword_filter else False,
                "has_location": bool(location),
                "results": len(posts),
            },
        )
        return [PostView.model_validate(post) for post in posts]

    def _authorize(self, post_id: int, password: str, action: GatedAction) -> Activist:
        post = self._posts.get(post_id)
        if post is None:
            raise NotFoundAppError(code="post_not_found", message="Post not found")

        if not post.password_hash:
            logger.info("post.unprotected", extra={"post_id": post_id, "action": action})
            raise ForbiddenAppError(
                code="post_not_protected",
                message=_UNPROTECTED_MESSAGES[action],
            )

        if not self._limiter.check_allowed(post_id):
            retry_after = self._limiter.retry_after_seconds(post_id)
            logger.warning(
                "rate_limit.blocked",
                extra={"post_id": post_id, "action": action, "retry_after_s": retry_after},
            )
            raise RateLimitedAppError(
                code="too_many_attempts",
                message="Too many failed attempts. Please wait an hour before trying again.",
                details={"retry_after": retry_after} if retry_after is not None else None,
            )

        if not verify_password(password, post.password_hash):
            self._limiter.record_failure(post_id)
            logger.warning("post.password_mismatch", extra={"post_id": post_id, "action": action})
            raise CredentialAppError(code="incorrect_password", message="Incorrect password")

        if self._settings.reset_attempts_on_success:
            self._limiter.reset(post_id)
        return post

    def verify(self, *, post_id: int | None, password: str | None) -> PostView:
        """Check a post's secret and return the post's editable fields."""
        require_fields({"id": post_id, "password": password})

        post = self._authorize(post_id, password, "verify")
        logger.info("post.verified", extra={"post_id": post_id})
        return PostView.model_validate(post)

    def update(
        self,
        post_id: int,
        *,
        interest: str | None,
        location: str | None,
        signal_username: str | None,
        alias: str | None = None,
        password: str | None = None,
    ) -> PostView:
        """Replace a protected post's fields; the secret itself never changes."""
        require_fields({"password": password})
        fields = self._clean_fields(interest, location, signal_username, alias)

        post = self._authorize(post_id, password, "edit")
        post = self._posts.update_fields(post, **fields)
        logger.info("post.updated", extra={"post_id": post_id})
        return PostView.model_validate(post)

    def delete(self, post_id: int, *, password: str | None) -> None:
        """Delete a protected post after checking its secret."""
        require_fields({"password": password})

        self._authorize(post_id, password, "delete")
        self._posts.delete(post_id)
        logger.info("post.deleted", extra={"post_id": post_id, "by": "author"})
