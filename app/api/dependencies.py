from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from app.db import engine as db_engine
from app.models.principal import Principal
from app.repos import registry
from app.repos.registry import Repos
from app.services import token_service

logger = logging.getLogger(__name__)

# auto_error=False so a missing header answers with our own 401 body
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_repos() -> AsyncGenerator[Repos, None]:
    """Request-scoped repositories.

    With a database, one session (one transaction) backs every repo for the
    request; it commits when the handler returns and rolls back if it raises.
    """
    if db_engine.async_session_factory is None:
        yield registry.memory_repos
        return
    async with db_engine.session_scope() as session:
        yield Repos.postgres(session)


def require_user(
    raw_token: Annotated[str | None, Depends(oauth2_scheme)],
) -> Principal:
    """Validate the bearer token and return the Principal it names."""
    if not raw_token:
        raise _unauthorized("Unauthorized")
    try:
        claims = token_service.decode_access_token(raw_token)
    except jwt.ExpiredSignatureError:
        logger.warning("Expired token rejected")
        raise _unauthorized("Token expired") from None
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token rejected: %s", e)
        raise _unauthorized("Invalid token") from None

    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError):
        logger.warning("Token rejected: non-numeric sub=%r", claims["sub"])
        raise _unauthorized("Unauthorized") from None

    principal = Principal(
        user_id=user_id,
        roles=frozenset(claims.get("roles", [])),
    )
    logger.debug(
        "Token validated for user=%d roles=%s",
        principal.user_id,
        sorted(principal.roles),
    )
    return principal


def require_role(role: str):
    """Dependency factory: demand a specific role.

    Usage: Depends(require_role("ADMIN"))
    Returns the Principal if the role is present, else 403.
    """

    def _guard(
        principal: Annotated[Principal, Depends(require_user)],
    ) -> Principal:
        if not principal.has_role(role):
            logger.warning(
                "Access denied: user=%d missing role=%s",
                principal.user_id,
                role,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return principal

    return _guard


CurrentUser = Annotated[Principal, Depends(require_user)]
RequestRepos = Annotated[Repos, Depends(get_repos)]
