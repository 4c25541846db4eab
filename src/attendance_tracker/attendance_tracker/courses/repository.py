from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Course, NewCourse


class CourseRepository(Protocol):
    def get_by_id(self, course_id: int) -> Optional[Course]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[Course]:
        raise NotImplementedError

    def create(self, new: NewCourse) -> Course:
        """Raises ConflictError when the code is taken."""

        raise NotImplementedError

    def update(self, course_id: int, fields: Mapping[str, Any]) -> Optional[Course]:
        raise NotImplementedError

    def delete(self, course_id: int) -> bool:
        """Remove the course and its attendance rows; False if absent."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Course]:
        raise NotImplementedError

    def list_by_instructor(self, instructor_id: int) -> Sequence[Course]:
        raise NotImplementedError
