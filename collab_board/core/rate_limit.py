"""Failed-attempt limiter wiring for the HTTP layer.

The limiter is owned by the application object (``app.state``) rather than
by this module, so each app instance (and each test) gets its own table and
handlers receive it through dependency injection.
"""

from __future__ import annotations

import logging

from fastapi import Request

from collab_board.adapters.rate_limit.base import AbstractAttemptLimiter
from collab_board.adapters.rate_limit.in_memory import InMemorySlidingWindowAttemptLimiter
from collab_board.core.config import AppSettings, settings

logger = logging.getLogger(__name__)


def build_attempt_limiter(app_settings: AppSettings | None = None) -> AbstractAttemptLimiter:
    """Create the attempt limiter configured by ``APP_MAX_FAILED_ATTEMPTS`` and
    ``APP_FAILED_ATTEMPT_WINDOW_SECONDS``."""

    cfg = app_settings or settings.app
    limiter = InMemorySlidingWindowAttemptLimiter(
        max_failures=cfg.max_failed_attempts,
        window_seconds=cfg.failed_attempt_window_seconds,
    )
    logger.info(
        "rate_limit.configured",
        extra={
            "max_failures": cfg.max_failed_attempts,
            "window_s": cfg.failed_attempt_window_seconds,
            "reset_on_success": cfg.reset_attempts_on_success,
        },
    )
    return limiter


def get_attempt_limiter(request: Request) -> AbstractAttemptLimiter:
    """FastAPI dependency returning the application's attempt limiter."""

    return request.app.state.attempt_limiter
