"""Profile of the signed-in user.

GET   /auth/me   load own profile
PATCH /auth/me   change display name (an empty string clears it)
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from app.api.dependencies import CurrentUser, RequestRepos
from app.api.register import UserOut, user_out
from app.services import account_service
from app.services.errors import ServiceError

router = APIRouter(prefix="/auth/me", tags=["profile"])


class UpdateProfileIn(BaseModel):
    name: str | None = None


@router.get("", response_model=UserOut)
async def get_my_profile(principal: CurrentUser, repos: RequestRepos) -> UserOut:
    try:
        user = await account_service.get_profile(repos, principal.user_id)
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from None
    return user_out(user)


@router.patch("", response_model=UserOut)
async def update_my_profile(
    body: UpdateProfileIn,
    principal: CurrentUser,
    repos: RequestRepos,
) -> UserOut:
    try:
        if "name" not in body.model_fields_set:
            # nothing to change; an absent field never clears the name
            user = await account_service.get_profile(repos, principal.user_id)
        else:
            user = await account_service.update_profile(
                repos, principal.user_id, name=body.name
            )
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from None
    return user_out(user)
