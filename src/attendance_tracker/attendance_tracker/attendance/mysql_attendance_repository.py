from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import day_bounds, now_local
from ..core.enums import AttendanceStatus, VerificationMethod
from ..core.exceptions import InternalError
from ..courses.mysql_course_repository import row_to_course
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..students.mysql_student_repository import row_to_student
from .model import AttendanceRecord, NewAttendance, RecentAttendance
from .repository import AttendanceRepository

_COLUMNS = "id, student_id, course_id, date, status, verification_method"


def _row_to_record(row: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=int(row["id"]),
        student_id=int(row["student_id"]),
        course_id=int(row["course_id"]),
        date=row["date"],
        status=AttendanceStatus(row["status"]),
        verification_method=VerificationMethod(row["verification_method"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, new: NewAttendance) -> AttendanceRecord:
        occurred_at = new.date or now_local()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendances(student_id, course_id, date, status, verification_method)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    int(new.student_id),
                    int(new.course_id),
                    occurred_at,
                    new.status.value,
                    new.verification_method.value,
                ),
            )
            attendance_id = int(cur.lastrowid)

        return AttendanceRecord(
            id=attendance_id,
            student_id=int(new.student_id),
            course_id=int(new.course_id),
            date=occurred_at,
            status=new.status,
            verification_method=new.verification_method,
        )

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendances WHERE id=%s", (int(attendance_id),))
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def list_by_course(self, course_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendances WHERE course_id=%s ORDER BY id ASC",
                (int(course_id),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_by_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendances WHERE student_id=%s ORDER BY id ASC",
                (int(student_id),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_by_date(self, course_id: int, day: date | datetime) -> Sequence[AttendanceRecord]:
        start, end = day_bounds(day)
        return self.list_between([course_id], start, end)

    def list_between(self, course_ids: Sequence[int], start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        ids = [int(c) for c in course_ids]
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendances
                WHERE course_id IN ({placeholders}) AND date BETWEEN %s AND %s
                ORDER BY id ASC
                """,
                (*ids, start, end),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_recent(self, limit: int) -> Sequence[RecentAttendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    a.id, a.student_id, a.course_id, a.date, a.status, a.verification_method,
                    s.id AS s_id, s.name AS s_name, s.student_id AS s_student_id, s.email AS s_email,
                    s.face_descriptor AS s_face_descriptor, s.courses AS s_courses, s.created_at AS s_created_at,
                    c.id AS c_id, c.code AS c_code, c.name AS c_name, c.instructor_id AS c_instructor_id,
                    c.room AS c_room, c.schedule AS c_schedule, c.total_students AS c_total_students,
                    c.created_at AS c_created_at
                FROM attendances a
                LEFT JOIN students s ON s.id = a.student_id
                LEFT JOIN courses c ON c.id = a.course_id
                ORDER BY a.date DESC, a.id DESC
                LIMIT %s
                """,
                (max(0, int(limit)),),
            )
            rows = fetchall(cur)

        out: list[RecentAttendance] = []
        for r in rows:
            if r.get("s_id") is None or r.get("c_id") is None:
                raise InternalError(f"Attendance {r['id']} references a missing student or course")
            student = row_to_student({k[2:]: v for k, v in r.items() if k.startswith("s_")})
            course = row_to_course({k[2:]: v for k, v in r.items() if k.startswith("c_")})
            out.append(RecentAttendance(record=_row_to_record(r), student=student, course=course))
        return out
