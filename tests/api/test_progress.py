from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from app.models.user import User
from app.repos.registry import Repos
from tests.conftest import auth, mint_token, seed_course, seed_enrollment


def _post(client: TestClient, token: str | None, body: dict):
    return client.post("/api/progress", json=body, headers=auth(token))


def test_progress_requires_authentication(client: TestClient) -> None:
    resp = _post(client, None, {"lessonId": 1, "completed": True})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized"}


def test_progress_rejects_garbage_token(client: TestClient) -> None:
    resp = _post(client, "not-a-jwt", {"lessonId": 1, "completed": True})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid token"}


def test_progress_rejects_non_numeric_subject(client: TestClient) -> None:
    resp = _post(client, mint_token("alice"), {"lessonId": 1, "completed": True})
    assert resp.status_code == 401


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"lessonId": 1},
        {"lessonId": "1", "completed": True},
        {"lessonId": 1, "completed": "yes"},
    ],
)
def test_progress_rejects_invalid_body(
    client: TestClient, student_token: str, body: dict
) -> None:
    resp = _post(client, student_token, body)
    assert resp.status_code == 400
    assert isinstance(resp.json()["error"], str)


def test_progress_unknown_lesson(client: TestClient, student_token: str) -> None:
    resp = _post(client, student_token, {"lessonId": 999, "completed": True})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Lesson not found"}


def test_progress_returns_record(
    client: TestClient, repos: Repos, student: User, student_token: str
) -> None:
    _, lessons = seed_course(repos, lessons=2)
    resp = _post(client, student_token, {"lessonId": lessons[0].id, "completed": True})
    assert resp.status_code == 200
    body = resp.json()
    assert body["userId"] == student.id
    assert body["lessonId"] == lessons[0].id
    assert body["completed"] is True
    assert body["completedAt"] is not None


def test_completing_all_lessons_completes_course(
    client: TestClient, repos: Repos, student: User, student_token: str
) -> None:
    course, lessons = seed_course(repos, lessons=4)
    seed_enrollment(repos, student.id, course.id)

    for lesson in lessons:
        resp = _post(client, student_token, {"lessonId": lesson.id, "completed": True})
        assert resp.status_code == 200

    learn = client.get(f"/api/courses/{course.id}/learn", headers=auth(student_token))
    assert learn.json()["enrollment"]["status"] == "COMPLETED"
    assert learn.json()["enrollment"]["progress"] == 100

    dashboard = client.get("/api/dashboard", headers=auth(student_token)).json()
    assert len(dashboard["certificates"]) == 1
    assert dashboard["certificates"][0]["courseTitle"] == course.title


def test_repeated_submission_is_idempotent(
    client: TestClient, repos: Repos, student: User, student_token: str
) -> None:
    course, lessons = seed_course(repos, lessons=1)
    seed_enrollment(repos, student.id, course.id)
    body = {"lessonId": lessons[0].id, "completed": True}

    first = _post(client, student_token, body).json()
    second = _post(client, student_token, body).json()

    assert first == second
    assert asyncio.run(repos.certificates.count()) == 1
