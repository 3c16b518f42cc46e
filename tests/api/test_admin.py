"""Admin overview: role checks and response payloads."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from app.models.course import Category, Institution, Instructor
from app.repos.registry import Repos
from tests.conftest import auth, mint_token, seed_course, seed_enrollment, seed_user

_ADMIN_CASES = [
    # (endpoint, roles, expected_status)
    ("/admin/stats", ["ADMIN"], 200),
    ("/admin/stats", ["STUDENT"], 403),
    ("/admin/stats", None, 401),
    ("/admin/courses", ["ADMIN"], 200),
    ("/admin/courses", ["STUDENT"], 403),
    ("/admin/courses", None, 401),
]


@pytest.mark.parametrize(("endpoint", "roles", "expected"), _ADMIN_CASES)
def test_admin_access(
    client: TestClient, endpoint: str, roles: list[str] | None, expected: int
) -> None:
    token = mint_token(1, roles=roles) if roles is not None else None
    resp = client.get(endpoint, headers=auth(token))
    assert resp.status_code == expected


def test_forbidden_body(client: TestClient, student_token: str) -> None:
    resp = client.get("/admin/stats", headers=auth(student_token))
    assert resp.json() == {"error": "Insufficient permissions"}


def test_admin_stats_counts(
    client: TestClient, repos: Repos, admin_token: str
) -> None:
    learner = seed_user(repos, "learner@example.com")
    course, _ = seed_course(repos, lessons=1)
    seed_course(repos, "Second")
    seed_enrollment(repos, learner.id, course.id)

    resp = client.get("/admin/stats", headers=auth(admin_token))
    assert resp.json() == {
        "users": 2,
        "courses": 2,
        "enrollments": 1,
        "certificates": 0,
    }


def test_admin_courses_newest_first(
    client: TestClient, repos: Repos, admin_token: str
) -> None:
    seed_course(repos, "Old", created_at=datetime(2025, 1, 1, tzinfo=UTC))
    seed_course(repos, "New", created_at=datetime(2026, 1, 1, tzinfo=UTC))

    resp = client.get("/admin/courses", headers=auth(admin_token))
    assert [c["title"] for c in resp.json()] == ["New", "Old"]


def test_admin_courses_include_references(
    client: TestClient, repos: Repos, admin_token: str
) -> None:
    category = asyncio.run(
        repos.courses.add_category(Category.new(name="Data", slug="data"))
    )
    institution = asyncio.run(
        repos.courses.add_institution(Institution.new(name="Open Univ"))
    )
    instructor = asyncio.run(repos.courses.add_instructor(Instructor.new(name="Ada")))
    learner = seed_user(repos, "learner@example.com")
    course, _ = seed_course(
        repos,
        category_id=category.id,
        institution_id=institution.id,
        instructor_id=instructor.id,
    )
    seed_enrollment(repos, learner.id, course.id)

    [item] = client.get("/admin/courses", headers=auth(admin_token)).json()
    assert item["categoryName"] == "Data"
    assert item["institutionName"] == "Open Univ"
    assert item["instructorName"] == "Ada"
    assert item["enrollmentsCount"] == 1
