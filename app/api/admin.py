from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.courses import CourseListItem, course_list_item
from app.api.dependencies import RequestRepos, require_role
from app.models.principal import Principal
from app.models.user import ROLE_ADMIN
from app.services import admin_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

AdminUser = Annotated[Principal, Depends(require_role(ROLE_ADMIN))]


class StatsOut(BaseModel):
    users: int
    courses: int
    enrollments: int
    certificates: int


@router.get("/stats", response_model=StatsOut)
async def admin_stats(principal: AdminUser, repos: RequestRepos) -> StatsOut:
    logger.info("Admin stats requested by user=%d", principal.user_id)
    stats = await admin_service.platform_stats(repos)
    return StatsOut(
        users=stats.users,
        courses=stats.courses,
        enrollments=stats.enrollments,
        certificates=stats.certificates,
    )


@router.get("/courses", response_model=list[CourseListItem])
async def admin_list_courses(
    principal: AdminUser, repos: RequestRepos
) -> list[CourseListItem]:
    logger.info("Admin course list requested by user=%d", principal.user_id)
    return [course_list_item(c) for c in await admin_service.all_courses(repos)]
