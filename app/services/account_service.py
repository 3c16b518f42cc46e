"""Registration, profile updates and password reset."""

from __future__ import annotations

import logging
import re

from app.core.config import SETTINGS
from app.core.metrics import PASSWORD_RESETS
from app.models.user import User
from app.repos.registry import Repos
from app.services import auth_service
from app.services.errors import (
    AccountValidationError,
    EmailAlreadyRegisteredError,
    InvalidResetTokenError,
    UserNotFoundError,
)
from app.services.reset_token_store import ResetTokenStore

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2

FORGOT_PASSWORD_MESSAGE = "If that email exists, a reset link has been sent"


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise AccountValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )


def _clean_name(name: str | None) -> str | None:
    """Strip a display name; blank means no name."""
    if name is None:
        return None
    name = name.strip()
    if not name:
        return None
    if len(name) < MIN_NAME_LENGTH:
        raise AccountValidationError(
            f"Name must be at least {MIN_NAME_LENGTH} characters"
        )
    return name


async def register(
    repos: Repos, *, email: str, password: str, name: str | None = None
) -> User:
    email = email.strip().lower()
    if not _EMAIL_RE.match(email):
        raise AccountValidationError("Invalid email address")
    _check_password(password)
    name = _clean_name(name)

    if await repos.users.get_by_email(email) is not None:
        logger.warning("Rejected duplicate email=%s", email)
        raise EmailAlreadyRegisteredError()

    user = User.new(
        email=email,
        password_hash=auth_service.hash_password(password),
        name=name,
    )
    try:
        stored = await repos.users.add(user)
    except ValueError:
        # another request registered the same email first
        raise EmailAlreadyRegisteredError() from None

    logger.info("User registered  user_id=%d email=%s", stored.id, email)
    return stored


async def get_profile(repos: Repos, user_id: int) -> User:
    user = await repos.users.get_by_id(user_id)
    if user is None:
        raise UserNotFoundError()
    return user


async def update_profile(repos: Repos, user_id: int, *, name: str | None) -> User:
    updated = await repos.users.update_name(user_id, _clean_name(name))
    if updated is None:
        raise UserNotFoundError()
    logger.info("Profile updated  user_id=%d", user_id)
    return updated


async def request_password_reset(
    repos: Repos, tokens: ResetTokenStore, email: str
) -> str | None:
    """Issue a reset token when the email belongs to a user.

    Returns the reset link, or None for an unknown address.  Callers answer
    the same way in both cases so the endpoint does not reveal which
    addresses are registered.
    """
    user = await repos.users.get_by_email(email)
    if user is None:
        logger.info("Password reset requested for unknown email")
        return None

    token = await tokens.issue(user.id)
    link = f"{SETTINGS.app_base_url}/auth/reset-password?token={token}"
    PASSWORD_RESETS.labels(event="requested").inc()
    # No mail transport; the link goes to the log.
    logger.info("Password reset link  user_id=%d link=%s", user.id, link)
    return link


async def reset_password(
    repos: Repos, tokens: ResetTokenStore, *, token: str, password: str
) -> None:
    _check_password(password)

    user_id = await tokens.consume(token)
    if user_id is None:
        PASSWORD_RESETS.labels(event="rejected").inc()
        logger.warning("Password reset rejected: unknown or expired token")
        raise InvalidResetTokenError()

    try:
        await repos.users.update_password_hash(
            user_id, auth_service.hash_password(password)
        )
    except KeyError:
        PASSWORD_RESETS.labels(event="rejected").inc()
        raise InvalidResetTokenError() from None

    PASSWORD_RESETS.labels(event="completed").inc()
    logger.info("Password reset  user_id=%d", user_id)
