"""Admin credential management and moderation."""

from __future__ import annotations

import logging

from collab_board.adapters.store.models import AdminCredential
from collab_board.adapters.store.repository import AdminCredentialRepository, PostRepository
from collab_board.core.auth import hash_password, verify_password
from collab_board.core.config import AppSettings, settings
from collab_board.core.errors import (
    ConflictAppError,
    CredentialAppError,
    NotFoundAppError,
    StoreAppError,
)
from collab_board.utils.field_validators import require_fields

logger = logging.getLogger(__name__)


class AdminService:
    """Single-admin operations gated by the admin password."""

    def __init__(
        self,
        credentials: AdminCredentialRepository,
        posts: PostRepository,
        *,
        app_settings: AppSettings | None = None,
    ) -> None:
        self._credentials = credentials
        self._posts = posts
        self._settings = app_settings or settings.app

    def ensure_initialized(self) -> bool:
        """Seed the admin credential with the default password if none exists.

        Returns:
            True if a credential was created.
        """
        if self._credentials.get() is not None:
            return False

        self._credentials.create(
            hash_password(self._settings.default_admin_password, self._settings.bcrypt_rounds)
        )
        logger.warning(
            "admin.default_credential_created",
            extra={"hint": "change the admin password via /api/admin/change-password"},
        )
        return True

    def _authenticate(self, password: str) -> AdminCredential:
        credential = self._credentials.get()
        if credential is None:
            logger.error("admin.not_configured")
            raise StoreAppError(code="admin_not_configured", message="Admin not configured")

        if not verify_password(password, credential.password_hash):
            logger.warning("admin.password_mismatch")
            raise CredentialAppError(code="invalid_admin_password", message="Invalid admin password")
        return credential

    def login(self, password: str | None) -> None:
        require_fields({"password": password})
        self._authenticate(password)
        logger.info("admin.login")

    def change_password(self, current_password: str | None, new_password: str | None) -> None:
        """Replace the admin password after checking the current one.

        Raises:
            ConflictAppError: The credential changed between the check and the
                write, e.g. two concurrent password changes.
        """
        require_fields({"current_password": current_password, "new_password": new_password})
        credential = self._authenticate(current_password)
        expected_version = credential.version

        swapped = self._credentials.compare_and_swap(
            expected_version=expected_version,
            password_hash=hash_password(new_password, self._settings.bcrypt_rounds),
        )
        if not swapped:
            logger.warning("admin.password_change_conflict", extra={"expected_version": expected_version})
            raise ConflictAppError(
                code="admin_credential_changed",
                message="The admin password was changed concurrently; try again",
            )
        logger.info("admin.password_changed", extra={"version": expected_version + 1})

    def delete_post(self, post_id: int, admin_password: str | None) -> None:
        """Remove any post, protected or not."""
        require_fields({"admin_password": admin_password})
        self._authenticate(admin_password)

        if not self._posts.delete(post_id):
            raise NotFoundAppError(code="post_not_found", message="Post not found")
        logger.info("post.deleted", extra={"post_id": post_id, "by": "admin"})
