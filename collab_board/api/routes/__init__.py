from __future__ import annotations

from collab_board.api.routes.admin import router as admin_router
from collab_board.api.routes.health import router as health_router
from collab_board.api.routes.posts import router as posts_router

__all__ = ["admin_router", "health_router", "posts_router"]
