"""OpenAPI metadata customization.

Adds tag descriptions and documents the password-carrying request bodies,
keeping documentation concerns out of the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {
        "name": "Posts",
        "description": (
            "Browse, search and publish collaboration ideas. Posts created with a "
            "password can later be edited or deleted with it; failed attempts are "
            "limited per post."
        ),
    },
    {
        "name": "Admin",
        "description": "Moderation endpoints gated by the single admin password.",
    },
    {
        "name": "Health",
        "description": "Liveness checks.",
    },
]


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tag metadata.

    Also records the rate-limit response (429) on every endpoint that checks
    a post password.
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for path, methods in schema.get("paths", {}).items():
            if not path.startswith("/api/activists/"):
                continue
            for method, operation in methods.items():
                if method in {"post", "put", "delete"} and isinstance(operation, dict):
                    operation.setdefault("responses", {}).setdefault(
                        "429",
                        {"description": "Too many failed password attempts for this post"},
                    )

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
