"""Demo: register, enroll, complete every lesson and read the dashboard.

Runs in-process against the in-memory repositories (leave DATABASE_URL unset):
    python scripts/demo_learning_flow.py
"""

from __future__ import annotations

import asyncio

from fastapi.testclient import TestClient

from app.main import app
from app.models.course import Course, Lesson
from app.repos import registry

LESSON_TITLES = ("Variables", "Control flow", "Functions", "Modules")


async def _seed_course() -> tuple[int, list[int]]:
    repos = registry.memory_repos
    course = await repos.courses.add(
        Course.new(title="Python Basics", level="BEGINNER", format="ONLINE")
    )
    lesson_ids = []
    for order, title in enumerate(LESSON_TITLES, start=1):
        lesson = await repos.courses.add_lesson(
            Lesson.new(course_id=course.id, title=title, order=order)
        )
        lesson_ids.append(lesson.id)
    return course.id, lesson_ids


def main() -> None:
    client = TestClient(app)
    course_id, lesson_ids = asyncio.run(_seed_course())

    # ── Step 1: register ────────────────────────────────────────────
    r = client.post(
        "/auth/register",
        json={"email": "demo@example.com", "password": "demo-pass", "name": "Demo"},
    )
    token = r.json()["accessToken"]
    headers = {"Authorization": f"Bearer {token}"}
    print(f"1. POST /auth/register        → {r.status_code}")

    # ── Step 2: enroll ──────────────────────────────────────────────
    r = client.post(f"/api/courses/{course_id}/enroll", headers=headers)
    print(f"2. POST /api/courses/{course_id}/enroll → {r.status_code}")

    # ── Step 3: complete lessons one by one ─────────────────────────
    for n, lesson_id in enumerate(lesson_ids, start=3):
        r = client.post(
            "/api/progress",
            json={"lessonId": lesson_id, "completed": True},
            headers=headers,
        )
        learn = client.get(f"/api/courses/{course_id}/learn", headers=headers).json()
        enrollment = learn["enrollment"]
        print(
            f"{n}. POST /api/progress lesson={lesson_id} → {r.status_code}  "
            f"progress={enrollment['progress']}% status={enrollment['status']}"
        )

    # ── Step 4: dashboard ───────────────────────────────────────────
    r = client.get("/api/dashboard", headers=headers)
    body = r.json()
    numbers = [c["certificateNumber"] for c in body["certificates"]]
    print(f"   GET  /api/dashboard          → {r.status_code}  stats={body['stats']}")
    print(f"   certificates: {numbers}")


if __name__ == "__main__":
    main()
