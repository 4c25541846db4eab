from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus, VerificationMethod
from ..courses.model import Course
from ..students.model import Student


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one check-in event. Append-only, never updated."""

    id: int
    student_id: int
    course_id: int
    date: datetime
    status: AttendanceStatus
    verification_method: VerificationMethod


@dataclass(frozen=True)
class NewAttendance:
    student_id: int
    course_id: int
    status: AttendanceStatus
    verification_method: VerificationMethod
    date: Optional[datetime] = None


@dataclass(frozen=True)
class RecentAttendance:
    """Read-model for the dashboard feed: a record joined with its student and course."""

    record: AttendanceRecord
    student: Student
    course: Course


@dataclass(frozen=True)
class TodayStats:
    present_today: int
    total_today: int
    today_percentage: int
    weekly_average: int
    total_students: int
    course_count: int

    @property
    def today_attendance(self) -> str:
        return f"{self.present_today}/{self.total_today}"


@dataclass(frozen=True)
class CourseStats:
    id: int
    name: str
    code: str
    present: int
    total: int
    percentage: int


@dataclass(frozen=True)
class ExportRow:
    """One CSV line of a course attendance export."""

    date: str
    student_id: str
    student_name: str
    course: str
    status: str
    verification_method: str


@dataclass(frozen=True)
class StudentTodayStatus:
    """Latest status of a rostered student for today (None when not yet seen)."""

    student: Student
    record: Optional[AttendanceRecord]
