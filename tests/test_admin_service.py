"""Tests for AdminService: seeding, login, password change and moderation."""

import pytest

from collab_board.adapters.store.repository import AdminCredentialRepository, PostRepository
from collab_board.core.auth import hash_password
from collab_board.core.config import AppSettings
from collab_board.core.errors import (
    ConflictAppError,
    CredentialAppError,
    NotFoundAppError,
    StoreAppError,
    ValidationAppError,
)
from collab_board.services.admin_service import AdminService


@pytest.fixture
def credentials(session) -> AdminCredentialRepository:
    return AdminCredentialRepository(session)


@pytest.fixture
def posts(session) -> PostRepository:
    return PostRepository(session)


@pytest.fixture
def service(credentials, posts) -> AdminService:
    admin = AdminService(
        credentials,
        posts,
        app_settings=AppSettings(bcrypt_rounds=4, default_admin_password="4141"),
    )
    admin.ensure_initialized()
    return admin


def test_initialization_seeds_default_password_once(credentials, posts) -> None:
    admin = AdminService(credentials, posts, app_settings=AppSettings(bcrypt_rounds=4))

    assert admin.ensure_initialized() is True
    first_hash = credentials.get().password_hash
    assert admin.ensure_initialized() is False
    assert credentials.get().password_hash == first_hash

    admin.login("4141")


def test_login_rejects_wrong_password(service: AdminService) -> None:
    with pytest.raises(CredentialAppError) as exc_info:
        service.login("1234")

    assert exc_info.value.code == "invalid_admin_password"


def test_login_requires_password(service: AdminService) -> None:
    with pytest.raises(ValidationAppError):
        service.login("")


def test_login_without_credential_is_a_store_error(credentials, posts) -> None:
    admin = AdminService(credentials, posts, app_settings=AppSettings(bcrypt_rounds=4))

    with pytest.raises(StoreAppError):
        admin.login("4141")


def test_change_password_replaces_credential(service: AdminService, credentials) -> None:
    service.change_password("4141", "new-admin-secret")

    assert credentials.get().version == 2
    service.login("new-admin-secret")
    with pytest.raises(CredentialAppError):
        service.login("4141")


def test_change_password_requires_current_password(service: AdminService) -> None:
    with pytest.raises(CredentialAppError):
        service.change_password("wrong", "new-admin-secret")

    service.login("4141")


def test_change_password_requires_both_fields(service: AdminService) -> None:
    with pytest.raises(ValidationAppError):
        service.change_password("4141", "  ")


def test_concurrent_change_is_a_conflict(service: AdminService, credentials, monkeypatch) -> None:
    original = credentials.compare_and_swap

    def racing_swap(*, expected_version: int, password_hash: str) -> bool:
        # Another request wins the race with the same expected version
        original(expected_version=expected_version, password_hash=hash_password("winner", rounds=4))
        return original(expected_version=expected_version, password_hash=password_hash)

    monkeypatch.setattr(credentials, "compare_and_swap", racing_swap)

    with pytest.raises(ConflictAppError):
        service.change_password("4141", "loser")

    service.login("winner")


def test_admin_deletes_unprotected_post(service: AdminService, posts: PostRepository) -> None:
    post = posts.add(interest="spam", location="Online", signal_username="spammer", alias=None, password_hash=None)

    service.delete_post(post.id, "4141")

    assert posts.get(post.id) is None


def test_admin_delete_needs_admin_password(service: AdminService, posts: PostRepository) -> None:
    post = posts.add(
        interest="protected",
        location="Online",
        signal_username="owner",
        alias=None,
        password_hash=hash_password("owner-secret", rounds=4),
    )

    # The post's own password is not an admin credential
    with pytest.raises(CredentialAppError):
        service.delete_post(post.id, "owner-secret")
    with pytest.raises(ValidationAppError):
        service.delete_post(post.id, None)

    assert posts.get(post.id) is not None


def test_admin_delete_unknown_post(service: AdminService) -> None:
    with pytest.raises(NotFoundAppError):
        service.delete_post(12345, "4141")
