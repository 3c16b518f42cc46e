from __future__ import annotations

import asyncio
import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.models.course import Course, Lesson
from app.models.progress import Enrollment
from app.models.user import ROLE_ADMIN, ROLE_STUDENT, User
from app.repos import registry
from app.repos.registry import Repos
from app.services import token_service
from app.services.reset_token_store import InMemoryResetTokenStore, reset_token_store

# Ensure repo root is on sys.path so `import app` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def repos(monkeypatch: pytest.MonkeyPatch) -> Repos:
    """Fresh in-memory repositories for every test, shared with the app."""
    fresh = Repos.in_memory()
    monkeypatch.setattr(registry, "memory_repos", fresh)
    return fresh


@pytest.fixture(autouse=True)
def reset_reset_tokens() -> None:
    """Clear issued password reset tokens between tests."""
    if isinstance(reset_token_store, InMemoryResetTokenStore):
        reset_token_store.clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def mint_token(user_id: int | str = 1, roles: list[str] | None = None) -> str:
    """Create a valid ES256 JWT for testing."""
    return token_service.create_access_token(
        sub=str(user_id), roles=roles or [ROLE_STUDENT]
    )


def auth(token: str | None) -> dict[str, str]:
    if token is None:
        return {}
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Seeding helpers (the repos are async; tests drive them with asyncio.run)
# ---------------------------------------------------------------------------


def seed_user(
    repos: Repos,
    email: str = "learner@example.com",
    *,
    role: str = ROLE_STUDENT,
    name: str | None = None,
    password_hash: str | None = "x",
) -> User:
    return asyncio.run(
        repos.users.add(
            User.new(email=email, password_hash=password_hash, name=name, role=role)
        )
    )


def seed_course(
    repos: Repos, title: str = "Python Basics", *, lessons: int = 0, **fields
) -> tuple[Course, list[Lesson]]:
    async def _seed() -> tuple[Course, list[Lesson]]:
        course = await repos.courses.add(Course.new(title=title, **fields))
        added = [
            await repos.courses.add_lesson(
                Lesson.new(course_id=course.id, title=f"Lesson {n}", order=n)
            )
            for n in range(1, lessons + 1)
        ]
        return course, added

    return asyncio.run(_seed())


def seed_enrollment(repos: Repos, user_id: int, course_id: int) -> Enrollment:
    return asyncio.run(
        repos.enrollments.add(
            Enrollment.new(
                user_id=user_id, course_id=course_id, enrolled_at=datetime.now(UTC)
            )
        )
    )


@pytest.fixture
def student(repos: Repos) -> User:
    return seed_user(repos, "student@example.com", name="Student")


@pytest.fixture
def student_token(student: User) -> str:
    return mint_token(student.id)


@pytest.fixture
def admin_token(repos: Repos) -> str:
    admin = seed_user(repos, "admin@example.com", role=ROLE_ADMIN)
    return mint_token(admin.id, roles=[ROLE_ADMIN])
