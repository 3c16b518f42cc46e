"""JSON account endpoints.

POST /auth/register         create a STUDENT account, answer with a token
POST /auth/login            exchange email + password for a token
POST /auth/forgot-password  issue a reset link (always the same answer)
POST /auth/reset-password   consume a reset token and set a new password

Register and login both return { accessToken, user } so a client can keep
the token and go straight to the dashboard.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from app.api.dependencies import RequestRepos
from app.models.user import User
from app.services import account_service, auth_service, token_service
from app.services.errors import ServiceError
from app.services.reset_token_store import reset_token_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# --- Request / Response schemas -------------------------------------------


class LoginIn(BaseModel):
    email: str
    password: str


class RegisterIn(BaseModel):
    email: str
    password: str
    name: str | None = None


class ForgotPasswordIn(BaseModel):
    email: str


class ResetPasswordIn(BaseModel):
    token: str
    password: str


class UserOut(BaseModel):
    id: int
    email: str
    name: str | None
    role: str
    avatar: str | None


class AuthResponse(BaseModel):
    accessToken: str
    user: UserOut


class MessageOut(BaseModel):
    message: str


def user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        avatar=user.avatar,
    )


def _auth_response(user: User) -> AuthResponse:
    access_token = token_service.create_access_token(
        sub=str(user.id), roles=[user.role]
    )
    return AuthResponse(accessToken=access_token, user=user_out(user))


# --- POST /auth/login -----------------------------------------------------


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginIn, repos: RequestRepos) -> AuthResponse:
    email = payload.email.lower().strip()

    user = await auth_service.authenticate_user(repos.users, email, payload.password)
    if user is None:
        logger.warning("Login failed  email=%s", email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    logger.info("Login succeeded  user_id=%d email=%s", user.id, email)
    return _auth_response(user)


# --- POST /auth/register --------------------------------------------------


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(payload: RegisterIn, repos: RequestRepos) -> AuthResponse:
    try:
        user = await account_service.register(
            repos, email=payload.email, password=payload.password, name=payload.name
        )
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from None
    return _auth_response(user)


# --- Password reset -------------------------------------------------------


@router.post("/forgot-password", response_model=MessageOut)
async def forgot_password(payload: ForgotPasswordIn, repos: RequestRepos) -> MessageOut:
    await account_service.request_password_reset(
        repos, reset_token_store, payload.email
    )
    return MessageOut(message=account_service.FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageOut)
async def reset_password(payload: ResetPasswordIn, repos: RequestRepos) -> MessageOut:
    try:
        await account_service.reset_password(
            repos, reset_token_store, token=payload.token, password=payload.password
        )
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from None
    return MessageOut(message="Password has been reset")
