"""Lesson progress submission.

POST /api/progress records the lesson flag, recomputes the course
percentage and issues a certificate on the transition to COMPLETED.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, StrictBool, StrictInt

from app.api.dependencies import CurrentUser, RequestRepos
from app.services import progress_service
from app.services.errors import ServiceError

router = APIRouter(prefix="/api/progress", tags=["progress"])


class ProgressIn(BaseModel):
    lessonId: StrictInt
    completed: StrictBool


class ProgressOut(BaseModel):
    id: int
    userId: int
    lessonId: int
    completed: bool
    completedAt: datetime | None


@router.post("", response_model=ProgressOut)
async def submit_progress(
    body: ProgressIn,
    principal: CurrentUser,
    repos: RequestRepos,
) -> ProgressOut:
    try:
        progress = await progress_service.submit_lesson_progress(
            repos, principal.user_id, body.lessonId, body.completed
        )
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from None

    return ProgressOut(
        id=progress.id,
        userId=progress.user_id,
        lessonId=progress.lesson_id,
        completed=progress.completed,
        completedAt=progress.completed_at,
    )
