from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, NewAttendance, RecentAttendance


class AttendanceRepository(Protocol):
    """Append-only attendance log."""

    def create(self, new: NewAttendance) -> AttendanceRecord:
        """Persist one row; ``new.date`` defaults to the creation time."""

        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_by_course(self, course_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_by_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_by_date(self, course_id: int, day: date | datetime) -> Sequence[AttendanceRecord]:
        """Rows of ``course_id`` dated within the local day of ``day`` (inclusive bounds)."""

        raise NotImplementedError

    def list_between(self, course_ids: Sequence[int], start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[RecentAttendance]:
        """Most recent rows first, joined with student and course.

        Raises InternalError when a referenced student or course is missing.
        """

        raise NotImplementedError
