"""
Tests for Argon2 password hashing utilities.
"""

import pytest

from charforge.auth.argon2_utils import (
    create_hasher_with_params,
    hash_password,
    is_argon2_hash,
    needs_rehash,
    verify_password,
)
from charforge.auth.users import Argon2PasswordHelper
from charforge.exceptions import AuthenticationError


class TestHashPassword:
    """Test hash_password and verify_password."""

    def test_hash_and_verify(self):
        hashed = hash_password("correct horse battery")
        assert is_argon2_hash(hashed)
        assert verify_password("correct horse battery", hashed)
        assert not verify_password("wrong", hashed)

    def test_hashes_are_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_non_string_rejected(self):
        with pytest.raises(AuthenticationError):
            hash_password(12345)  # type: ignore[arg-type]

    def test_verify_handles_bad_input(self):
        assert verify_password("anything", "") is False
        assert verify_password("anything", "not-a-hash") is False
        assert verify_password(None, hash_password("x")) is False  # type: ignore[arg-type]

    def test_is_argon2_hash(self):
        assert not is_argon2_hash("plaintext")
        assert not is_argon2_hash("")


class TestRehash:
    """Hashes made with parameters other than the current ones need rehashing."""

    def test_other_parameters_need_rehash(self):
        other = create_hasher_with_params(time_cost=2, memory_cost=2048, parallelism=1)
        old_hash = other.hash("password")
        assert needs_rehash(old_hash)

    def test_password_helper_upgrades_old_hash(self):
        other = create_hasher_with_params(time_cost=2, memory_cost=2048, parallelism=1)
        helper = Argon2PasswordHelper()
        verified, updated = helper.verify_and_update("password", other.hash("password"))
        assert verified
        assert updated is not None
        assert verify_password("password", updated)

    def test_password_helper_current_hash_not_updated(self):
        helper = Argon2PasswordHelper()
        verified, updated = helper.verify_and_update("password", helper.hash("password"))
        assert verified
        assert updated is None

    def test_generate(self):
        assert len(Argon2PasswordHelper().generate()) >= 16
