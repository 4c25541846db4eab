from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import NewStudent, Student


class StudentRepository(Protocol):
    """Repository contract for Student.

    Enrollment bookkeeping lives here: writes that change a student's course
    codes adjust the matching ``courses.total_students`` counters in the same
    transaction. Codes without a matching course are kept on the student and
    otherwise ignored.
    """

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_student_id(self, external_id: str) -> Optional[Student]:
        raise NotImplementedError

    def create(self, new: NewStudent) -> Student:
        """Raises ConflictError when ``student_id`` is taken."""

        raise NotImplementedError

    def update(self, student_id: int, fields: Mapping[str, Any]) -> Optional[Student]:
        raise NotImplementedError

    def delete(self, student_id: int) -> bool:
        """Remove the student and their attendance rows; False if absent."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def list_by_course_code(self, code: str) -> Sequence[Student]:
        raise NotImplementedError
