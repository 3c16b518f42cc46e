from __future__ import annotations

from dataclasses import dataclass

from app.models.course import CourseSummary
from app.repos.registry import Repos
from app.services.catalog_service import with_enrollment_counts


@dataclass(frozen=True, slots=True)
class PlatformStats:
    users: int
    courses: int
    enrollments: int
    certificates: int


async def platform_stats(repos: Repos) -> PlatformStats:
    return PlatformStats(
        users=await repos.users.count(),
        courses=await repos.courses.count(),
        enrollments=await repos.enrollments.count(),
        certificates=await repos.certificates.count(),
    )


async def all_courses(repos: Repos) -> list[CourseSummary]:
    """Every course, newest first, with its reference names and enrollment count."""
    return await with_enrollment_counts(repos, await repos.courses.list_all())
