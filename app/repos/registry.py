"""Bundle of repositories handed to services for one request.

With DATABASE_URL set, every request gets Pg repos bound to one session
(one transaction).  Without it, all requests share the process-wide
in-memory repos below.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.repos.certificate_repo import CertificateRepo, InMemoryCertificateRepo
from app.repos.course_repo import CourseRepo, InMemoryCourseRepo
from app.repos.enrollment_repo import EnrollmentRepo, InMemoryEnrollmentRepo
from app.repos.pg_certificate_repo import PgCertificateRepo
from app.repos.pg_course_repo import PgCourseRepo
from app.repos.pg_enrollment_repo import PgEnrollmentRepo
from app.repos.pg_progress_repo import PgProgressRepo
from app.repos.pg_review_repo import PgReviewRepo
from app.repos.pg_user_repo import PgUserRepo
from app.repos.progress_repo import InMemoryProgressRepo, ProgressRepo
from app.repos.review_repo import InMemoryReviewRepo, ReviewRepo
from app.repos.user_repo import InMemoryUserRepo, UserRepo


@dataclass(frozen=True, slots=True)
class Repos:
    users: UserRepo
    courses: CourseRepo
    enrollments: EnrollmentRepo
    progress: ProgressRepo
    certificates: CertificateRepo
    reviews: ReviewRepo

    @staticmethod
    def in_memory() -> Repos:
        return Repos(
            users=InMemoryUserRepo(),
            courses=InMemoryCourseRepo(),
            enrollments=InMemoryEnrollmentRepo(),
            progress=InMemoryProgressRepo(),
            certificates=InMemoryCertificateRepo(),
            reviews=InMemoryReviewRepo(),
        )

    @staticmethod
    def postgres(session: AsyncSession) -> Repos:
        return Repos(
            users=PgUserRepo(session),
            courses=PgCourseRepo(session),
            enrollments=PgEnrollmentRepo(session),
            progress=PgProgressRepo(session),
            certificates=PgCertificateRepo(session),
            reviews=PgReviewRepo(session),
        )


# ---------------------------------------------------------------------------
# Module-level singleton (used when DATABASE_URL is not configured)
# ---------------------------------------------------------------------------
memory_repos = Repos.in_memory()
