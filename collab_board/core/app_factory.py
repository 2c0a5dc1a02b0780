from __future__ import annotations

"""Application factory for FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers,
store and attempt limiter) so tests can build isolated instances.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from collab_board.adapters.store.database import (
    build_engine,
    build_session_factory,
    create_schema,
    db_session,
)
from collab_board.adapters.store.repository import AdminCredentialRepository, PostRepository
from collab_board.api.routes import admin_router, health_router, posts_router
from collab_board.core.config import settings
from collab_board.core.exception_handlers import setup_exception_handlers
from collab_board.core.logging import configure_logging
from collab_board.core.middleware import request_id_middleware
from collab_board.core.openapi import apply_openapi_customizations
from collab_board.core.rate_limit import build_attempt_limiter
from collab_board.services.admin_service import AdminService

logger = logging.getLogger(__name__)


def create_app(database_url: str | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        database_url: Override for ``DB_URL`` (tests use in-memory SQLite).

    Returns:
        Configured FastAPI app with store, limiter, middleware, handlers,
        routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Collab Board API",
        description=(
            "Community bulletin board for collaboration ideas: post an idea with a "
            "Signal handle, search with quoted phrases, AND and OR, and edit or "
            "delete your own post with its password."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )

    engine = build_engine(database_url or settings.db.url, echo=settings.db.echo)
    create_schema(engine)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.attempt_limiter = build_attempt_limiter(settings.app)

    with db_session(app.state.session_factory) as session:
        AdminService(AdminCredentialRepository(session), PostRepository(session)).ensure_initialized()

    # Middleware
    app.middleware("http")(request_id_middleware)
    origins = [origin.strip() for origin in settings.app.cors_allow_origins.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[settings.log.request_id_header, "Retry-After"],
    )

    setup_exception_handlers(app)

    app.include_router(posts_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    logger.info("app.created", extra={"app_env": settings.app_env, "database": engine.url.get_backend_name()})
    return app
