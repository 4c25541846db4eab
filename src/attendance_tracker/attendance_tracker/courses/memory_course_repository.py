from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.exceptions import ConflictError
from ..database.memory_store import MemoryStore
from .model import COURSE_MUTABLE_FIELDS, Course, NewCourse
from .repository import CourseRepository


class MemoryCourseRepository(CourseRepository):
    def __init__(self, store: MemoryStore):
        self._store = store

    def get_by_id(self, course_id: int) -> Optional[Course]:
        with self._store.read() as s:
            return s.courses.rows.get(int(course_id))

    def get_by_code(self, code: str) -> Optional[Course]:
        with self._store.read() as s:
            return self._find_code(s, code)

    def create(self, new: NewCourse) -> Course:
        with self._store.transaction() as s:
            if self._find_code(s, new.code):
                raise ConflictError("Course code already exists", errors={"code": "already exists"})

            course = Course(
                id=s.courses.allocate_id(),
                code=new.code,
                name=new.name,
                instructor_id=int(new.instructor_id),
                room=new.room,
                schedule=new.schedule,
                total_students=int(new.total_students or 0),
                created_at=now_local(),
            )
            s.courses.rows[course.id] = course
            return course

    def update(self, course_id: int, fields: Mapping[str, Any]) -> Optional[Course]:
        changes = {k: v for k, v in fields.items() if k in COURSE_MUTABLE_FIELDS}
        with self._store.transaction() as s:
            existing = s.courses.rows.get(int(course_id))
            if existing is None:
                return None
            if not changes:
                return existing

            new_code = changes.get("code")
            if new_code is not None and new_code != existing.code and self._find_code(s, new_code):
                raise ConflictError("Course code already exists", errors={"code": "already exists"})

            updated = replace(existing, **changes)
            s.courses.rows[existing.id] = updated
            return updated

    def delete(self, course_id: int) -> bool:
        with self._store.transaction() as s:
            existing = s.courses.rows.pop(int(course_id), None)
            if existing is None:
                return False
            for attendance_id in [a.id for a in s.attendances.rows.values() if a.course_id == existing.id]:
                del s.attendances.rows[attendance_id]
            return True

    def list_all(self) -> Sequence[Course]:
        with self._store.read() as s:
            return list(s.courses.rows.values())

    def list_by_instructor(self, instructor_id: int) -> Sequence[Course]:
        with self._store.read() as s:
            return [c for c in s.courses.rows.values() if c.instructor_id == int(instructor_id)]

    @staticmethod
    def _find_code(store: MemoryStore, code: str) -> Optional[Course]:
        return next((c for c in store.courses.rows.values() if c.code == code), None)
