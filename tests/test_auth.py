"""Unit tests for password hashing helpers."""

import pytest

from collab_board.core.auth import hash_password, normalize_secret, verify_password


class TestHashPassword:
    """bcrypt hashing of post and admin secrets."""

    def test_hash_is_not_the_plain_secret(self) -> None:
        hashed = hash_password("secret123", rounds=4)

        assert hashed != "secret123"
        assert hashed.startswith("$2")

    def test_hashes_are_salted(self) -> None:
        assert hash_password("secret123", rounds=4) != hash_password("secret123", rounds=4)

    def test_rounds_default_to_settings(self) -> None:
        # conftest sets APP_BCRYPT_ROUNDS=4
        assert hash_password("secret123").split("$")[2] == "04"

    def test_explicit_rounds_are_encoded_in_hash(self) -> None:
        assert hash_password("secret123", rounds=5).split("$")[2] == "05"


class TestVerifyPassword:
    """Constant-time comparison against stored hashes."""

    def test_matching_secret(self) -> None:
        assert verify_password("secret123", hash_password("secret123", rounds=4)) is True

    def test_wrong_secret(self) -> None:
        assert verify_password("secret124", hash_password("secret123", rounds=4)) is False

    def test_unicode_secret(self) -> None:
        hashed = hash_password("pässwörd ✓", rounds=4)

        assert verify_password("pässwörd ✓", hashed) is True

    def test_long_secret_is_accepted(self) -> None:
        secret = "x" * 200
        hashed = hash_password(secret, rounds=4)

        assert verify_password(secret, hashed) is True

    def test_malformed_hash_is_a_mismatch(self) -> None:
        assert verify_password("secret123", "not-a-bcrypt-hash") is False


class TestNormalizeSecret:

    @pytest.mark.parametrize("value", [None, "", "   ", "\t"])
    def test_blank_secrets_mean_no_password(self, value) -> None:
        assert normalize_secret(value) is None

    def test_secret_is_kept_verbatim(self) -> None:
        assert normalize_secret(" s3cret ") == " s3cret "
