"""Catalog repository: courses, lessons and the reference data around them."""

from __future__ import annotations

import itertools
from dataclasses import replace
from typing import Protocol

from app.models.course import (
    Category,
    Course,
    CourseQuery,
    CourseSummary,
    Institution,
    Instructor,
    Lesson,
)


class CourseRepo(Protocol):
    async def get(self, course_id: int) -> Course | None: ...
    async def add(self, course: Course) -> Course: ...
    async def search(
        self, query: CourseQuery, *, limit: int, offset: int
    ) -> tuple[list[CourseSummary], int]: ...
    async def list_all(self) -> list[CourseSummary]: ...
    async def count(self) -> int: ...

    async def get_lesson(self, lesson_id: int) -> Lesson | None: ...
    async def add_lesson(self, lesson: Lesson) -> Lesson: ...
    async def list_lessons(self, course_id: int) -> list[Lesson]: ...
    async def lesson_ids(self, course_id: int) -> list[int]: ...

    async def get_category(self, category_id: int) -> Category | None: ...
    async def add_category(self, category: Category) -> Category: ...
    async def get_institution(self, institution_id: int) -> Institution | None: ...
    async def add_institution(self, institution: Institution) -> Institution: ...
    async def get_instructor(self, instructor_id: int) -> Instructor | None: ...
    async def add_instructor(self, instructor: Instructor) -> Instructor: ...


class InMemoryCourseRepo:
    def __init__(self) -> None:
        self._courses: dict[int, Course] = {}
        self._lessons: dict[int, Lesson] = {}
        self._categories: dict[int, Category] = {}
        self._institutions: dict[int, Institution] = {}
        self._instructors: dict[int, Instructor] = {}
        self._ids = itertools.count(1)

    # --- courses ---

    async def get(self, course_id: int) -> Course | None:
        return self._courses.get(course_id)

    async def add(self, course: Course) -> Course:
        stored = replace(course, id=next(self._ids))
        self._courses[stored.id] = stored
        return stored

    async def search(
        self, query: CourseQuery, *, limit: int, offset: int
    ) -> tuple[list[CourseSummary], int]:
        matches = [c for c in self._courses.values() if self._matches(c, query)]
        # newest first; id breaks ties for courses created in the same instant
        matches.sort(key=lambda c: (c.created_at, c.id), reverse=True)
        page = matches[offset : offset + limit]
        return [self._summary(c) for c in page], len(matches)

    async def list_all(self) -> list[CourseSummary]:
        ordered = sorted(
            self._courses.values(), key=lambda c: (c.created_at, c.id), reverse=True
        )
        return [self._summary(c) for c in ordered]

    async def count(self) -> int:
        return len(self._courses)

    # --- lessons ---

    async def get_lesson(self, lesson_id: int) -> Lesson | None:
        return self._lessons.get(lesson_id)

    async def add_lesson(self, lesson: Lesson) -> Lesson:
        if lesson.course_id not in self._courses:
            raise KeyError("course not found")
        if any(
            existing.course_id == lesson.course_id and existing.order == lesson.order
            for existing in self._lessons.values()
        ):
            raise ValueError("lesson order already taken in this course")
        stored = replace(lesson, id=next(self._ids))
        self._lessons[stored.id] = stored
        return stored

    async def list_lessons(self, course_id: int) -> list[Lesson]:
        return sorted(
            (les for les in self._lessons.values() if les.course_id == course_id),
            key=lambda les: les.order,
        )

    async def lesson_ids(self, course_id: int) -> list[int]:
        return [les.id for les in await self.list_lessons(course_id)]

    # --- reference data ---

    async def get_category(self, category_id: int) -> Category | None:
        return self._categories.get(category_id)

    async def add_category(self, category: Category) -> Category:
        if any(c.slug == category.slug for c in self._categories.values()):
            raise ValueError("category slug already exists")
        stored = replace(category, id=next(self._ids))
        self._categories[stored.id] = stored
        return stored

    async def get_institution(self, institution_id: int) -> Institution | None:
        return self._institutions.get(institution_id)

    async def add_institution(self, institution: Institution) -> Institution:
        stored = replace(institution, id=next(self._ids))
        self._institutions[stored.id] = stored
        return stored

    async def get_instructor(self, instructor_id: int) -> Instructor | None:
        return self._instructors.get(instructor_id)

    async def add_instructor(self, instructor: Instructor) -> Instructor:
        stored = replace(instructor, id=next(self._ids))
        self._instructors[stored.id] = stored
        return stored

    # --- helpers ---

    def _summary(self, course: Course) -> CourseSummary:
        def name(table: dict, ref_id: int | None) -> str | None:
            ref = table.get(ref_id) if ref_id is not None else None
            return ref.name if ref is not None else None

        return CourseSummary(
            course=course,
            category_name=name(self._categories, course.category_id),
            institution_name=name(self._institutions, course.institution_id),
            instructor_name=name(self._instructors, course.instructor_id),
        )

    def _matches(self, course: Course, query: CourseQuery) -> bool:
        if query.category_slug is not None:
            category = (
                self._categories.get(course.category_id)
                if course.category_id is not None
                else None
            )
            if category is None or category.slug != query.category_slug:
                return False
        if query.level is not None and course.level != query.level:
            return False
        if query.format is not None and course.format != query.format:
            return False
        if query.search:
            needle = query.search.lower()
            haystacks = (course.title, course.description or "")
            if not any(needle in h.lower() for h in haystacks):
                return False
        return True
