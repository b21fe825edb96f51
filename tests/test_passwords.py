"""Tests for quire.security.passwords — argon2id hashing."""

import pytest

from quire.security import hash_password, is_hashed, verify_password


class TestPasswords:
    def test_hash_and_verify(self) -> None:
        hashed = hash_password("secret123")
        assert hashed != "secret123"
        assert verify_password("secret123", hashed)

    def test_wrong_password(self) -> None:
        hashed = hash_password("secret123")
        assert not verify_password("secret124", hashed)

    def test_hashes_are_salted(self) -> None:
        assert hash_password("same") != hash_password("same")

    def test_is_hashed(self) -> None:
        assert is_hashed(hash_password("secret123"))
        assert not is_hashed("secret123")

    def test_empty_password_rejected(self) -> None:
        with pytest.raises(ValueError):
            hash_password("")

    def test_verify_against_plain_text_is_false(self) -> None:
        assert not verify_password("secret123", "secret123")

    def test_verify_against_garbage_hash_is_false(self) -> None:
        assert not verify_password("secret123", "$argon2id$garbage")

    def test_verify_empty_password_is_false(self) -> None:
        assert not verify_password("", hash_password("secret123"))
