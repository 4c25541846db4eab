from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence, Union

from ..common.datetime_utils import day_bounds, last_n_days, now_local, percentage
from ..core.constants import DEFAULT_WEEK_DAYS, EXPORT_DATE_FORMAT, UNKNOWN_PLACEHOLDER
from ..core.enums import AttendanceStatus, VerificationMethod
from ..core.exceptions import NotFoundError, ValidationError
from ..courses.repository import CourseRepository
from ..students.repository import StudentRepository
from .model import (
    AttendanceRecord,
    CourseStats,
    ExportRow,
    NewAttendance,
    RecentAttendance,
    StudentTodayStatus,
    TodayStats,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def parse_status(value: Union[str, AttendanceStatus, None]) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise ValidationError(f"Status must be one of {allowed}", errors={"status": f"must be one of {allowed}"})


def parse_method(value: Union[str, VerificationMethod, None]) -> VerificationMethod:
    try:
        return VerificationMethod(value)
    except ValueError:
        allowed = ", ".join(m.value for m in VerificationMethod)
        raise ValidationError(
            f"Verification method must be one of {allowed}",
            errors={"verificationMethod": f"must be one of {allowed}"},
        )


class AttendanceRecorder:
    """Write path and aggregate read path for attendance.

    The log is append-only: a second check-in for the same student, course and
    day adds a row, and "today's status" is the newest row since midnight.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        courses: CourseRepository,
        *,
        week_days: int = DEFAULT_WEEK_DAYS,
    ):
        self._attendance = attendance
        self._students = students
        self._courses = courses
        self._week_days = int(week_days)

    # --- write path ---------------------------------------------------------

    def record_attendance(
        self,
        student_id: int,
        course_id: int,
        status: Union[str, AttendanceStatus],
        method: Union[str, VerificationMethod],
        *,
        occurred_at: Optional[datetime] = None,
    ) -> AttendanceRecord:
        status = parse_status(status)
        method = parse_method(method)

        if not self._students.get_by_id(int(student_id)):
            raise NotFoundError("Student not found")
        if not self._courses.get_by_id(int(course_id)):
            raise NotFoundError("Course not found")

        record = self._attendance.create(
            NewAttendance(
                student_id=int(student_id),
                course_id=int(course_id),
                status=status,
                verification_method=method,
                date=occurred_at,
            )
        )
        logger.info(
            "Attendance %s recorded: student=%s course=%s status=%s method=%s",
            record.id,
            record.student_id,
            record.course_id,
            record.status.value,
            record.verification_method.value,
        )
        return record

    # --- plain reads --------------------------------------------------------

    def list_by_course(self, course_id: int) -> Sequence[AttendanceRecord]:
        return self._attendance.list_by_course(int(course_id))

    def list_by_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        return self._attendance.list_by_student(int(student_id))

    def list_recent(self, limit: int) -> Sequence[RecentAttendance]:
        if int(limit) < 0:
            raise ValidationError("limit cannot be negative", errors={"limit": "cannot be negative"})
        return self._attendance.list_recent(int(limit))

    def today_statuses(self, course_id: int, *, today: Optional[date] = None) -> Sequence[StudentTodayStatus]:
        """Latest record since local midnight for every student on the roster."""

        course = self._courses.get_by_id(int(course_id))
        if not course:
            raise NotFoundError("Course not found")

        rows = self._attendance.list_by_date(course.id, today or now_local())
        latest: dict[int, AttendanceRecord] = {}
        for r in rows:
            current = latest.get(r.student_id)
            if current is None or (r.date, r.id) > (current.date, current.id):
                latest[r.student_id] = r

        return [
            StudentTodayStatus(student=s, record=latest.get(s.id))
            for s in self._students.list_by_course_code(course.code)
        ]

    # --- aggregates ---------------------------------------------------------

    def compute_today_stats(self, instructor_id: int, *, today: Optional[date] = None) -> TodayStats:
        """Dashboard figures, every one scoped to the instructor's own courses."""

        today = today or now_local().date()
        courses = self._courses.list_by_instructor(int(instructor_id))

        present_today = 0
        total_today = 0
        for course in courses:
            rows = self._attendance.list_by_date(course.id, today)
            total_today += len(rows)
            present_today += sum(1 for r in rows if r.status == AttendanceStatus.PRESENT)

        enrolled: set[int] = set()
        for course in courses:
            enrolled.update(s.id for s in self._students.list_by_course_code(course.code))

        return TodayStats(
            present_today=present_today,
            total_today=total_today,
            today_percentage=percentage(present_today, total_today),
            weekly_average=self.compute_weekly_average(instructor_id, today=today),
            total_students=len(enrolled),
            course_count=len(courses),
        )

    def compute_weekly_average(self, instructor_id: int, *, today: Optional[date] = None) -> int:
        """Mean daily present-percentage over the last week, skipping days without rows."""

        today = today or now_local().date()
        course_ids = [c.id for c in self._courses.list_by_instructor(int(instructor_id))]
        if not course_ids:
            return 0

        days = last_n_days(today, self._week_days)
        start, _ = day_bounds(days[0])
        _, end = day_bounds(days[-1])

        per_day: dict[date, list[int]] = {}
        for r in self._attendance.list_between(course_ids, start, end):
            counts = per_day.setdefault(r.date.date(), [0, 0])
            counts[1] += 1
            if r.status == AttendanceStatus.PRESENT:
                counts[0] += 1

        daily = [percentage(present, total) for present, total in per_day.values()]
        if not daily:
            return 0
        return percentage(sum(daily), len(daily) * 100)

    def compute_course_stats(self, instructor_id: int) -> Sequence[CourseStats]:
        """All-time present percentage per owned course."""

        out: list[CourseStats] = []
        for course in self._courses.list_by_instructor(int(instructor_id)):
            rows = self._attendance.list_by_course(course.id)
            present = sum(1 for r in rows if r.status == AttendanceStatus.PRESENT)
            out.append(
                CourseStats(
                    id=course.id,
                    name=course.name,
                    code=course.code,
                    present=present,
                    total=len(rows),
                    percentage=percentage(present, len(rows)),
                )
            )
        return out

    # --- export -------------------------------------------------------------

    def export_course_attendance(self, course_id: int) -> tuple[str, Sequence[ExportRow]]:
        """Rows for the CSV export, plus the course code for the file name.

        Students are resolved through one lookup map built from the roster;
        anything not on it is rendered as ``Unknown``.
        """

        course = self._courses.get_by_id(int(course_id))
        if not course:
            raise NotFoundError("Course not found")

        rows = self._attendance.list_by_course(course.id)
        roster = {s.id: s for s in self._students.list_by_course_code(course.code)}

        out: list[ExportRow] = []
        for r in rows:
            student = roster.get(r.student_id)
            out.append(
                ExportRow(
                    date=r.date.strftime(EXPORT_DATE_FORMAT),
                    student_id=student.student_id if student else UNKNOWN_PLACEHOLDER,
                    student_name=student.name if student else UNKNOWN_PLACEHOLDER,
                    course=course.name,
                    status=r.status.value,
                    verification_method=r.verification_method.value,
                )
            )
        return course.code, out
