from __future__ import annotations

import asyncio

import pytest
from argon2 import PasswordHasher

from app.models.user import User
from app.repos.user_repo import InMemoryUserRepo
from app.services.auth_service import authenticate_user, hash_password, verify_password


def test_hash_password_rejects_empty() -> None:
    with pytest.raises(ValueError, match="non-empty"):
        hash_password("")


def test_verify_password_round_trip() -> None:
    hashed = hash_password("pw123456")
    assert verify_password("pw123456", hashed) is True
    assert verify_password("wrong", hashed) is False


def test_verify_password_handles_missing_or_garbage_hash() -> None:
    assert verify_password("pw", None) is False
    assert verify_password("pw", "not-an-argon2-hash") is False


def test_authenticate_user_unknown_email() -> None:
    repo = InMemoryUserRepo()
    assert asyncio.run(authenticate_user(repo, "nobody@example.com", "pw")) is None


def test_authenticate_user_rehashes_when_needed() -> None:
    # A deliberately weak Argon2 configuration the service hasher will upgrade.
    old_ph = PasswordHasher(time_cost=1, memory_cost=8 * 1024, parallelism=1)
    password = "pw123456"
    old_hash = old_ph.hash(password)

    repo = InMemoryUserRepo()
    asyncio.run(repo.add(User.new(email="tee@example.com", password_hash=old_hash)))

    authed = asyncio.run(authenticate_user(repo, "TEE@example.com ", password))
    assert authed is not None

    stored = asyncio.run(repo.get_by_email("tee@example.com"))
    assert stored is not None
    assert stored.password_hash != old_hash
    assert verify_password(password, stored.password_hash)
