from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common import validators as v
from ..core.constants import MIN_NAME_LENGTH
from ..core.exceptions import NotFoundError, ValidationError
from ..courses.repository import CourseRepository
from .model import NewStudent, Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


def clean_student_fields(fields: Mapping[str, Any], *, partial: bool) -> dict:
    """Validate student input; every failing field is reported at once.

    With ``partial`` only the keys present in ``fields`` are checked and returned.
    """

    out: dict = {}
    errors: dict[str, str] = {}

    def check(key: str, fn) -> None:
        if partial and key not in fields:
            return
        try:
            out[key] = fn(fields.get(key))
        except ValidationError as e:
            errors.update(e.errors or {key: e.message})

    check("name", lambda x: v.require_min_length(x, "name", MIN_NAME_LENGTH))
    check("student_id", lambda x: v.require_non_empty(x, "studentId"))
    check("email", v.optional_email)
    check("courses", lambda x: tuple(v.code_list(x)))
    check("face_descriptor", lambda x: _as_tuple(v.descriptor(x)))

    if errors:
        raise ValidationError("Invalid student data", errors=errors)
    return out


def _as_tuple(values: Optional[list[float]]) -> Optional[tuple[float, ...]]:
    return tuple(values) if values is not None else None


class StudentService:
    """Use case: roster CRUD."""

    def __init__(self, students: StudentRepository, courses: CourseRepository):
        self._students = students
        self._courses = courses

    def create(self, fields: Mapping[str, Any]) -> Student:
        data = clean_student_fields(fields, partial=False)
        student = self._students.create(NewStudent(**data))
        logger.info("Created student %s (id=%s, courses=%s)", student.student_id, student.id, list(student.courses))
        return student

    def get(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def update(self, student_id: int, fields: Mapping[str, Any]) -> Student:
        data = clean_student_fields(fields, partial=True)
        student = self._students.update(int(student_id), data)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def delete(self, student_id: int) -> None:
        if not self._students.delete(int(student_id)):
            raise NotFoundError("Student not found")
        logger.info("Deleted student id=%s", student_id)

    def list_all(self) -> Sequence[Student]:
        return self._students.list_all()

    def list_by_course(self, course_id: int) -> Sequence[Student]:
        """Roster of a course; an unknown course has an empty roster."""

        course = self._courses.get_by_id(int(course_id))
        if not course:
            return []
        return self._students.list_by_course_code(course.code)
