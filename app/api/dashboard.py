from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel

from app.api.courses import EnrollmentOut, enrollment_out
from app.api.dependencies import CurrentUser, RequestRepos
from app.services import learner_service

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


class DashboardEnrollmentOut(EnrollmentOut):
    courseTitle: str


class CertificateOut(BaseModel):
    id: int
    courseId: int
    courseTitle: str
    certificateNumber: str
    issuedAt: datetime | None


class StatsOut(BaseModel):
    total: int
    completed: int
    inProgress: int


class DashboardOut(BaseModel):
    enrollments: list[DashboardEnrollmentOut]
    certificates: list[CertificateOut]
    stats: StatsOut


@router.get("", response_model=DashboardOut)
async def get_dashboard(principal: CurrentUser, repos: RequestRepos) -> DashboardOut:
    view = await learner_service.dashboard(repos, principal.user_id)
    return DashboardOut(
        enrollments=[
            DashboardEnrollmentOut(
                **enrollment_out(enrollment).model_dump(), courseTitle=title
            )
            for enrollment, title in view.enrollments
        ],
        certificates=[
            CertificateOut(
                id=cert.id,
                courseId=cert.course_id,
                courseTitle=title,
                certificateNumber=cert.certificate_number,
                issuedAt=cert.issued_at,
            )
            for cert, title in view.certificates
        ],
        stats=StatsOut(
            total=view.stats.total,
            completed=view.stats.completed,
            inProgress=view.stats.in_progress,
        ),
    )
