from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, execute_unique, fetchall, fetchone
from .model import COURSE_MUTABLE_FIELDS, Course, NewCourse
from .repository import CourseRepository

_COLUMNS = "id, code, name, instructor_id, room, schedule, total_students, created_at"


def row_to_course(row: dict) -> Course:
    return Course(
        id=int(row["id"]),
        code=row["code"],
        name=row["name"],
        instructor_id=int(row["instructor_id"]),
        room=row.get("room"),
        schedule=row.get("schedule"),
        total_students=int(row.get("total_students") or 0),
        created_at=row["created_at"],
    )


class MySQLCourseRepository(CourseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, course_id: int) -> Optional[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM courses WHERE id=%s", (int(course_id),))
            row = fetchone(cur)
            return row_to_course(row) if row else None

    def get_by_code(self, code: str) -> Optional[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM courses WHERE code=%s", (code,))
            row = fetchone(cur)
            return row_to_course(row) if row else None

    def create(self, new: NewCourse) -> Course:
        created_at = now_local().replace(microsecond=0)
        with db_cursor(self._conn_factory) as (_, cur):
            execute_unique(
                cur,
                """
                INSERT INTO courses(code, name, instructor_id, room, schedule, total_students, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    new.code,
                    new.name,
                    int(new.instructor_id),
                    new.room,
                    new.schedule,
                    int(new.total_students or 0),
                    created_at,
                ),
                conflict_message="Course code already exists",
            )
            course_id = int(cur.lastrowid)

        return Course(
            id=course_id,
            code=new.code,
            name=new.name,
            instructor_id=int(new.instructor_id),
            room=new.room,
            schedule=new.schedule,
            total_students=int(new.total_students or 0),
            created_at=created_at,
        )

    def update(self, course_id: int, fields: Mapping[str, Any]) -> Optional[Course]:
        changes = {k: v for k, v in fields.items() if k in COURSE_MUTABLE_FIELDS}
        with db_cursor(self._conn_factory) as (_, cur):
            if changes:
                assignments = ", ".join(f"{column}=%s" for column in changes)
                execute_unique(
                    cur,
                    f"UPDATE courses SET {assignments} WHERE id=%s",
                    (*changes.values(), int(course_id)),
                    conflict_message="Course code already exists",
                )
            cur.execute(f"SELECT {_COLUMNS} FROM courses WHERE id=%s", (int(course_id),))
            row = fetchone(cur)
            return row_to_course(row) if row else None

    def delete(self, course_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM courses WHERE id=%s", (int(course_id),))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM courses ORDER BY id ASC")
            return [row_to_course(r) for r in fetchall(cur)]

    def list_by_instructor(self, instructor_id: int) -> Sequence[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM courses WHERE instructor_id=%s ORDER BY id ASC",
                (int(instructor_id),),
            )
            return [row_to_course(r) for r in fetchall(cur)]
