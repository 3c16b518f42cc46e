"""PostgreSQL implementation of CourseRepo."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import ColumnElement, Select, and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import (
    CategoryRow,
    CourseRow,
    InstitutionRow,
    InstructorRow,
    LessonRow,
)
from app.models.course import (
    Category,
    Course,
    CourseQuery,
    CourseSummary,
    Institution,
    Instructor,
    Lesson,
)


class PgCourseRepo:
    """Satisfies the CourseRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # --- courses ---

    async def get(self, course_id: int) -> Course | None:
        row = await self._session.get(CourseRow, course_id)
        return _row_to_course(row) if row is not None else None

    async def add(self, course: Course) -> Course:
        row = CourseRow(
            title=course.title,
            description=course.description,
            image=course.image,
            duration=course.duration,
            level=course.level,
            format=course.format,
            price=course.price,
            category_id=course.category_id,
            institution_id=course.institution_id,
            instructor_id=course.instructor_id,
            rating=course.rating,
            created_at=course.created_at or datetime.now(UTC),
        )
        self._session.add(row)
        await self._session.flush()
        return _row_to_course(row)

    def _summary_select(self) -> Select:
        return (
            select(
                CourseRow,
                CategoryRow.name,
                InstitutionRow.name,
                InstructorRow.name,
            )
            .outerjoin(CategoryRow, CourseRow.category_id == CategoryRow.id)
            .outerjoin(InstitutionRow, CourseRow.institution_id == InstitutionRow.id)
            .outerjoin(InstructorRow, CourseRow.instructor_id == InstructorRow.id)
        )

    async def search(
        self, query: CourseQuery, *, limit: int, offset: int
    ) -> tuple[list[CourseSummary], int]:
        conditions = []
        if query.category_slug is not None:
            conditions.append(CategoryRow.slug == query.category_slug)
        if query.level is not None:
            conditions.append(CourseRow.level == query.level)
        if query.format is not None:
            conditions.append(CourseRow.format == query.format)
        if query.search:
            conditions.append(search_condition(query.search))
        where = and_(*conditions) if conditions else None

        stmt = self._summary_select()
        count_stmt = (
            select(func.count())
            .select_from(CourseRow)
            .outerjoin(CategoryRow, CourseRow.category_id == CategoryRow.id)
        )
        if where is not None:
            stmt = stmt.where(where)
            count_stmt = count_stmt.where(where)

        stmt = (
            stmt.order_by(CourseRow.created_at.desc(), CourseRow.id.desc())
            .limit(limit)
            .offset(offset)
        )
        rows = (await self._session.execute(stmt)).all()
        total = (await self._session.execute(count_stmt)).scalar_one()
        return [_row_to_summary(*row) for row in rows], total

    async def list_all(self) -> list[CourseSummary]:
        stmt = self._summary_select().order_by(
            CourseRow.created_at.desc(), CourseRow.id.desc()
        )
        rows = (await self._session.execute(stmt)).all()
        return [_row_to_summary(*row) for row in rows]

    async def count(self) -> int:
        stmt = select(func.count()).select_from(CourseRow)
        return (await self._session.execute(stmt)).scalar_one()

    # --- lessons ---

    async def get_lesson(self, lesson_id: int) -> Lesson | None:
        row = await self._session.get(LessonRow, lesson_id)
        return _row_to_lesson(row) if row is not None else None

    async def add_lesson(self, lesson: Lesson) -> Lesson:
        row = LessonRow(
            course_id=lesson.course_id,
            title=lesson.title,
            order=lesson.order,
            content=lesson.content,
            video_url=lesson.video_url,
        )
        self._session.add(row)
        await self._session.flush()
        return _row_to_lesson(row)

    async def list_lessons(self, course_id: int) -> list[Lesson]:
        stmt = (
            select(LessonRow)
            .where(LessonRow.course_id == course_id)
            .order_by(LessonRow.order)
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_lesson(r) for r in rows]

    async def lesson_ids(self, course_id: int) -> list[int]:
        stmt = select(LessonRow.id).where(LessonRow.course_id == course_id)
        return list((await self._session.execute(stmt)).scalars().all())

    # --- reference data ---

    async def get_category(self, category_id: int) -> Category | None:
        row = await self._session.get(CategoryRow, category_id)
        if row is None:
            return None
        return Category(
            id=row.id, name=row.name, slug=row.slug, description=row.description
        )

    async def add_category(self, category: Category) -> Category:
        row = CategoryRow(
            name=category.name, slug=category.slug, description=category.description
        )
        self._session.add(row)
        await self._session.flush()
        return Category(
            id=row.id, name=row.name, slug=row.slug, description=row.description
        )

    async def get_institution(self, institution_id: int) -> Institution | None:
        row = await self._session.get(InstitutionRow, institution_id)
        return _row_to_institution(row) if row is not None else None

    async def add_institution(self, institution: Institution) -> Institution:
        row = InstitutionRow(
            name=institution.name,
            description=institution.description,
            website=institution.website,
            rating=institution.rating,
        )
        self._session.add(row)
        await self._session.flush()
        return _row_to_institution(row)

    async def get_instructor(self, instructor_id: int) -> Instructor | None:
        row = await self._session.get(InstructorRow, instructor_id)
        return _row_to_instructor(row) if row is not None else None

    async def add_instructor(self, instructor: Instructor) -> Instructor:
        row = InstructorRow(
            name=instructor.name,
            email=instructor.email,
            bio=instructor.bio,
            institution_id=instructor.institution_id,
        )
        self._session.add(row)
        await self._session.flush()
        return _row_to_instructor(row)


def search_condition(text: str) -> ColumnElement[bool]:
    """Case-insensitive substring match on title or description.

    autoescape makes % and _ in the text match literally.
    """
    return or_(
        CourseRow.title.icontains(text, autoescape=True),
        CourseRow.description.icontains(text, autoescape=True),
    )

def _row_to_course(row: CourseRow) -> Course:
    return Course(
        id=row.id,
        title=row.title,
        description=row.description,
        image=row.image,
        duration=row.duration,
        level=row.level,
        format=row.format,
        price=row.price,
        category_id=row.category_id,
        institution_id=row.institution_id,
        instructor_id=row.instructor_id,
        rating=row.rating,
        created_at=row.created_at,
    )


def _row_to_lesson(row: LessonRow) -> Lesson:
    return Lesson(
        id=row.id,
        course_id=row.course_id,
        title=row.title,
        order=row.order,
        content=row.content,
        video_url=row.video_url,
    )


def _row_to_institution(row: InstitutionRow) -> Institution:
    return Institution(
        id=row.id,
        name=row.name,
        description=row.description,
        website=row.website,
        rating=row.rating,
    )


def _row_to_instructor(row: InstructorRow) -> Instructor:
    return Instructor(
        id=row.id,
        name=row.name,
        email=row.email,
        bio=row.bio,
        institution_id=row.institution_id,
    )


def _row_to_summary(
    row: CourseRow,
    category_name: str | None,
    institution_name: str | None,
    instructor_name: str | None,
) -> CourseSummary:
    return CourseSummary(
        course=_row_to_course(row),
        category_name=category_name,
        institution_name=institution_name,
        instructor_name=instructor_name,
    )
