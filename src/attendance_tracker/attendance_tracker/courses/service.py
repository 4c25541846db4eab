from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from ..common import validators as v
from ..core.constants import MIN_CODE_LENGTH, MIN_NAME_LENGTH
from ..core.exceptions import NotFoundError, ValidationError
from ..students.repository import StudentRepository
from .model import Course, NewCourse
from .repository import CourseRepository

logger = logging.getLogger(__name__)


def _non_negative_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    n = v.require_int(value, "totalStudents")
    if n < 0:
        raise ValidationError("totalStudents cannot be negative", errors={"totalStudents": "cannot be negative"})
    return n


def clean_course_fields(fields: Mapping[str, Any], *, partial: bool) -> dict:
    out: dict = {}
    errors: dict[str, str] = {}

    def check(key: str, fn) -> None:
        if partial and key not in fields:
            return
        try:
            out[key] = fn(fields.get(key))
        except ValidationError as e:
            errors.update(e.errors or {key: e.message})

    check("code", lambda x: v.require_min_length(x, "code", MIN_CODE_LENGTH))
    check("name", lambda x: v.require_min_length(x, "name", MIN_NAME_LENGTH))
    check("room", v.optional_text)
    check("schedule", v.optional_text)
    check("total_students", _non_negative_int)

    if errors:
        raise ValidationError("Invalid course data", errors=errors)
    return out


class CourseService:
    """Use case: course CRUD for the signed-in instructor.

    Only listing is scoped to the instructor; single-course reads and writes
    go by id.
    """

    def __init__(self, courses: CourseRepository, students: StudentRepository):
        self._courses = courses
        self._students = students

    def create(self, instructor_id: int, fields: Mapping[str, Any]) -> Course:
        data = clean_course_fields(fields, partial=False)
        course = self._courses.create(NewCourse(instructor_id=int(instructor_id), **data))
        logger.info("Created course %s (id=%s) for instructor %s", course.code, course.id, instructor_id)
        return course

    def get(self, course_id: int) -> Course:
        course = self._courses.get_by_id(int(course_id))
        if not course:
            raise NotFoundError("Course not found")
        return course

    def update(self, course_id: int, fields: Mapping[str, Any]) -> Course:
        data = clean_course_fields(fields, partial=True)
        course = self._courses.update(int(course_id), data)
        if not course:
            raise NotFoundError("Course not found")
        return course

    def delete(self, course_id: int) -> None:
        if not self._courses.delete(int(course_id)):
            raise NotFoundError("Course not found")
        logger.info("Deleted course id=%s", course_id)

    def list_for_instructor(self, instructor_id: int) -> Sequence[Course]:
        return self._courses.list_by_instructor(int(instructor_id))

    def resync_totals(self) -> dict[str, int]:
        """Recompute every cached ``total_students`` from the rosters.

        Returns the codes whose counter changed, mapped to the new value.
        """

        changed: dict[str, int] = {}
        for course in self._courses.list_all():
            actual = len(self._students.list_by_course_code(course.code))
            if actual != course.total_students:
                self._courses.update(course.id, {"total_students": actual})
                changed[course.code] = actual

        if changed:
            logger.warning("Resynced course totals: %s", changed)
        return changed
