from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.exceptions import ConflictError
from ..database.memory_store import MemoryStore
from .model import STUDENT_MUTABLE_FIELDS, NewStudent, Student
from .repository import StudentRepository


def _shift_course_totals(store: MemoryStore, codes: Iterable[str], delta: int) -> None:
    """Adjust ``total_students`` by ``delta`` on each course whose code is listed."""

    wanted = set(codes)
    if not wanted:
        return
    for course in list(store.courses.rows.values()):
        if course.code in wanted:
            total = max(0, (course.total_students or 0) + delta)
            store.courses.rows[course.id] = replace(course, total_students=total)


class MemoryStudentRepository(StudentRepository):
    def __init__(self, store: MemoryStore):
        self._store = store

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with self._store.read() as s:
            return s.students.rows.get(int(student_id))

    def get_by_student_id(self, external_id: str) -> Optional[Student]:
        with self._store.read() as s:
            return self._find_external(s, external_id)

    def create(self, new: NewStudent) -> Student:
        with self._store.transaction() as s:
            if self._find_external(s, new.student_id):
                raise ConflictError("Student ID already exists", errors={"studentId": "already exists"})

            student = Student(
                id=s.students.allocate_id(),
                name=new.name,
                student_id=new.student_id,
                email=new.email,
                face_descriptor=new.face_descriptor,
                courses=tuple(new.courses),
                created_at=now_local(),
            )
            s.students.rows[student.id] = student
            _shift_course_totals(s, student.courses, +1)
            return student

    def update(self, student_id: int, fields: Mapping[str, Any]) -> Optional[Student]:
        changes = {k: v for k, v in fields.items() if k in STUDENT_MUTABLE_FIELDS}
        with self._store.transaction() as s:
            existing = s.students.rows.get(int(student_id))
            if existing is None:
                return None
            if not changes:
                return existing

            new_external = changes.get("student_id")
            if new_external is not None and new_external != existing.student_id:
                if self._find_external(s, new_external):
                    raise ConflictError("Student ID already exists", errors={"studentId": "already exists"})

            if "courses" in changes:
                changes["courses"] = tuple(changes["courses"] or ())
                old_codes, new_codes = set(existing.courses), set(changes["courses"])
                _shift_course_totals(s, new_codes - old_codes, +1)
                _shift_course_totals(s, old_codes - new_codes, -1)

            updated = replace(existing, **changes)
            s.students.rows[existing.id] = updated
            return updated

    def delete(self, student_id: int) -> bool:
        with self._store.transaction() as s:
            existing = s.students.rows.pop(int(student_id), None)
            if existing is None:
                return False
            _shift_course_totals(s, existing.courses, -1)
            for attendance_id in [a.id for a in s.attendances.rows.values() if a.student_id == existing.id]:
                del s.attendances.rows[attendance_id]
            return True

    def list_all(self) -> Sequence[Student]:
        with self._store.read() as s:
            return list(s.students.rows.values())

    def list_by_course_code(self, code: str) -> Sequence[Student]:
        with self._store.read() as s:
            return [st for st in s.students.rows.values() if code in st.courses]

    @staticmethod
    def _find_external(store: MemoryStore, external_id: str) -> Optional[Student]:
        return next((st for st in store.students.rows.values() if st.student_id == external_id), None)
