from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import day_bounds, now_local
from ..core.exceptions import InternalError
from ..database.memory_store import MemoryStore
from .model import AttendanceRecord, NewAttendance, RecentAttendance
from .repository import AttendanceRepository


def _newest_first(rows):
    return sorted(rows, key=lambda a: (a.date, a.id), reverse=True)


class MemoryAttendanceRepository(AttendanceRepository):
    def __init__(self, store: MemoryStore):
        self._store = store

    def create(self, new: NewAttendance) -> AttendanceRecord:
        with self._store.transaction() as s:
            record = AttendanceRecord(
                id=s.attendances.allocate_id(),
                student_id=int(new.student_id),
                course_id=int(new.course_id),
                date=new.date or now_local(),
                status=new.status,
                verification_method=new.verification_method,
            )
            s.attendances.rows[record.id] = record
            return record

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with self._store.read() as s:
            return s.attendances.rows.get(int(attendance_id))

    def list_by_course(self, course_id: int) -> Sequence[AttendanceRecord]:
        with self._store.read() as s:
            return [a for a in s.attendances.rows.values() if a.course_id == int(course_id)]

    def list_by_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        with self._store.read() as s:
            return [a for a in s.attendances.rows.values() if a.student_id == int(student_id)]

    def list_by_date(self, course_id: int, day: date | datetime) -> Sequence[AttendanceRecord]:
        start, end = day_bounds(day)
        return self.list_between([course_id], start, end)

    def list_between(self, course_ids: Sequence[int], start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        wanted = {int(c) for c in course_ids}
        with self._store.read() as s:
            return [
                a
                for a in s.attendances.rows.values()
                if a.course_id in wanted and start <= a.date <= end
            ]

    def list_recent(self, limit: int) -> Sequence[RecentAttendance]:
        with self._store.read() as s:
            rows = _newest_first(s.attendances.rows.values())[: max(0, int(limit))]

            out: list[RecentAttendance] = []
            for a in rows:
                student = s.students.rows.get(a.student_id)
                course = s.courses.rows.get(a.course_id)
                if not student or not course:
                    raise InternalError(f"Attendance {a.id} references a missing student or course")
                out.append(RecentAttendance(record=a, student=student, course=course))
            return out
