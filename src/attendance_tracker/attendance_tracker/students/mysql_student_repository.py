from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, execute_unique, fetchall, fetchone, load_json
from .model import STUDENT_MUTABLE_FIELDS, NewStudent, Student
from .repository import StudentRepository

_COLUMNS = "id, name, student_id, email, face_descriptor, courses, created_at"
_JSON_FIELDS = {"face_descriptor", "courses"}


def row_to_student(row: dict) -> Student:
    descriptor = load_json(row.get("face_descriptor"))
    return Student(
        id=int(row["id"]),
        name=row["name"],
        student_id=row["student_id"],
        email=row.get("email"),
        face_descriptor=tuple(float(x) for x in descriptor) if descriptor is not None else None,
        courses=tuple(load_json(row.get("courses"), default=[]) or []),
        created_at=row["created_at"],
    )


def _shift_course_totals(cur, codes: Iterable[str], delta: int) -> None:
    codes = list(codes)
    if not codes:
        return
    placeholders = ",".join(["%s"] * len(codes))
    cur.execute(
        f"""
        UPDATE courses
        SET total_students = GREATEST(0, COALESCE(total_students, 0) + %s)
        WHERE code IN ({placeholders})
        """,
        (int(delta), *codes),
    )


class MySQLStudentRepository(StudentRepository):
    """MySQL-backed students.

    Each write that touches course counters runs inside a single ``db_cursor``
    block, so the student row and the counters commit or roll back together.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (int(student_id),))
            row = fetchone(cur)
            return row_to_student(row) if row else None

    def get_by_student_id(self, external_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (external_id,))
            row = fetchone(cur)
            return row_to_student(row) if row else None

    def create(self, new: NewStudent) -> Student:
        created_at = now_local().replace(microsecond=0)
        courses = list(new.courses)
        with db_cursor(self._conn_factory) as (_, cur):
            execute_unique(
                cur,
                """
                INSERT INTO students(name, student_id, email, face_descriptor, courses, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    new.name,
                    new.student_id,
                    new.email,
                    dump_json(list(new.face_descriptor) if new.face_descriptor is not None else None),
                    dump_json(courses),
                    created_at,
                ),
                conflict_message="Student ID already exists",
            )
            student_id = int(cur.lastrowid)
            _shift_course_totals(cur, courses, +1)

        return Student(
            id=student_id,
            name=new.name,
            student_id=new.student_id,
            email=new.email,
            face_descriptor=new.face_descriptor,
            courses=tuple(courses),
            created_at=created_at,
        )

    def update(self, student_id: int, fields: Mapping[str, Any]) -> Optional[Student]:
        changes = {k: v for k, v in fields.items() if k in STUDENT_MUTABLE_FIELDS}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s FOR UPDATE", (int(student_id),))
            row = fetchone(cur)
            if not row:
                return None
            existing = row_to_student(row)
            if not changes:
                return existing

            params: list[object] = []
            for column, value in changes.items():
                if column in _JSON_FIELDS:
                    value = dump_json(list(value) if value is not None else None)
                params.append(value)

            assignments = ", ".join(f"{column}=%s" for column in changes)
            execute_unique(
                cur,
                f"UPDATE students SET {assignments} WHERE id=%s",
                (*params, int(student_id)),
                conflict_message="Student ID already exists",
            )

            if "courses" in changes:
                old_codes, new_codes = set(existing.courses), set(changes["courses"] or ())
                _shift_course_totals(cur, sorted(new_codes - old_codes), +1)
                _shift_course_totals(cur, sorted(old_codes - new_codes), -1)

            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (int(student_id),))
            return row_to_student(fetchone(cur))

    def delete(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s FOR UPDATE", (int(student_id),))
            row = fetchone(cur)
            if not row:
                return False
            existing = row_to_student(row)
            # attendances go with the student through ON DELETE CASCADE
            cur.execute("DELETE FROM students WHERE id=%s", (int(student_id),))
            deleted = cur.rowcount > 0
            if deleted:
                _shift_course_totals(cur, existing.courses, -1)
            return deleted

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY id ASC")
            return [row_to_student(r) for r in fetchall(cur)]

    def list_by_course_code(self, code: str) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM students
                WHERE JSON_CONTAINS(courses, JSON_QUOTE(%s))
                ORDER BY id ASC
                """,
                (code,),
            )
            return [row_to_student(r) for r in fetchall(cur)]
