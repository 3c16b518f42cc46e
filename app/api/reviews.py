from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, HTTPException, Response, status
from pydantic import BaseModel, StrictInt

from app.api.dependencies import CurrentUser, RequestRepos
from app.services import review_service
from app.services.errors import ServiceError

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


class ReviewIn(BaseModel):
    courseId: StrictInt
    rating: StrictInt
    comment: str | None = None


class ReviewOut(BaseModel):
    id: int
    userId: int
    courseId: int
    rating: int
    comment: str | None
    createdAt: datetime | None
    updatedAt: datetime | None


@router.post("", response_model=ReviewOut)
async def submit_review(
    body: ReviewIn,
    response: Response,
    principal: CurrentUser,
    repos: RequestRepos,
) -> ReviewOut:
    """Create the caller's review (201) or replace their existing one (200)."""
    try:
        review, created = await review_service.submit_review(
            repos, principal.user_id, body.courseId, body.rating, body.comment
        )
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from None

    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return ReviewOut(
        id=review.id,
        userId=review.user_id,
        courseId=review.course_id,
        rating=review.rating,
        comment=review.comment,
        createdAt=review.created_at,
        updatedAt=review.updated_at,
    )
