from __future__ import annotations

import asyncio

import pytest
from prometheus_client import REGISTRY

from app.repos.registry import Repos
from app.services import account_service
from app.services.auth_service import verify_password
from app.services.errors import (
    AccountValidationError,
    EmailAlreadyRegisteredError,
    InvalidResetTokenError,
    UserNotFoundError,
)
from app.services.reset_token_store import InMemoryResetTokenStore


def _register(repos: Repos, email="new@example.com", password="secret1", name=None):
    return asyncio.run(
        account_service.register(repos, email=email, password=password, name=name)
    )


# ---- register ----


def test_register_normalizes_email_and_hashes_password(repos: Repos) -> None:
    user = _register(repos, email="  New@Example.COM ", name="  Ada  ")
    assert user.id > 0
    assert user.email == "new@example.com"
    assert user.name == "Ada"
    assert user.role == "STUDENT"
    assert user.password_hash != "secret1"
    assert verify_password("secret1", user.password_hash)


@pytest.mark.parametrize(
    ("email", "password", "name", "message"),
    [
        ("not-an-email", "secret1", None, "Invalid email address"),
        ("a@b.co", "12345", None, "at least 6 characters"),
        ("a@b.co", "secret1", "A", "Name must be at least 2 characters"),
    ],
)
def test_register_validation(
    repos: Repos, email: str, password: str, name: str | None, message: str
) -> None:
    with pytest.raises(AccountValidationError, match=message):
        _register(repos, email=email, password=password, name=name)


def test_register_blank_name_is_stored_as_none(repos: Repos) -> None:
    assert _register(repos, name="   ").name is None


def test_register_duplicate_email(repos: Repos) -> None:
    _register(repos)
    with pytest.raises(EmailAlreadyRegisteredError):
        _register(repos, email="NEW@example.com")


# ---- profile ----


def test_update_profile_sets_and_clears_name(repos: Repos) -> None:
    user = _register(repos)
    updated = asyncio.run(account_service.update_profile(repos, user.id, name="Grace"))
    assert updated.name == "Grace"

    cleared = asyncio.run(account_service.update_profile(repos, user.id, name=""))
    assert cleared.name is None


def test_update_profile_rejects_short_name(repos: Repos) -> None:
    user = _register(repos)
    with pytest.raises(AccountValidationError):
        asyncio.run(account_service.update_profile(repos, user.id, name="G"))


def test_get_profile_unknown_user(repos: Repos) -> None:
    with pytest.raises(UserNotFoundError):
        asyncio.run(account_service.get_profile(repos, 404))


# ---- password reset ----


def test_password_reset_flow(repos: Repos) -> None:
    tokens = InMemoryResetTokenStore()
    user = _register(repos)

    link = asyncio.run(
        account_service.request_password_reset(repos, tokens, "new@example.com")
    )
    assert link is not None
    assert "/auth/reset-password?token=" in link
    token = link.split("token=", 1)[1]

    before = REGISTRY.get_sample_value(
        "password_reset_events_total", {"event": "completed"}
    ) or 0.0
    asyncio.run(
        account_service.reset_password(repos, tokens, token=token, password="newpass1")
    )
    after = REGISTRY.get_sample_value(
        "password_reset_events_total", {"event": "completed"}
    )

    stored = asyncio.run(repos.users.get_by_id(user.id))
    assert verify_password("newpass1", stored.password_hash)
    assert after - before == 1

    # single use
    with pytest.raises(InvalidResetTokenError):
        asyncio.run(
            account_service.reset_password(
                repos, tokens, token=token, password="another1"
            )
        )


def test_password_reset_unknown_email_returns_none(repos: Repos) -> None:
    tokens = InMemoryResetTokenStore()
    link = asyncio.run(
        account_service.request_password_reset(repos, tokens, "ghost@example.com")
    )
    assert link is None


def test_reset_password_rejects_short_password_before_consuming(
    repos: Repos,
) -> None:
    tokens = InMemoryResetTokenStore()
    user = _register(repos)
    token = asyncio.run(tokens.issue(user.id))

    with pytest.raises(AccountValidationError):
        asyncio.run(
            account_service.reset_password(repos, tokens, token=token, password="123")
        )
    # token is still usable
    asyncio.run(
        account_service.reset_password(repos, tokens, token=token, password="123456")
    )
