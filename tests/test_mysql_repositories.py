from __future__ import annotations

from datetime import datetime

import pytest

from src.attendance_tracker.attendance_tracker.courses import mysql_course_repository
from src.attendance_tracker.attendance_tracker.courses.model import NewCourse
from src.attendance_tracker.attendance_tracker.students import mysql_student_repository
from src.attendance_tracker.attendance_tracker.students.model import NewStudent
from src.attendance_tracker.attendance_tracker.users import mysql_user_repository
from src.attendance_tracker.attendance_tracker.users.model import NewUser


class FakeCursor:
    def __init__(self):
        self.executed = []
        self.lastrowid = 7
        self.rowcount = 1

    def execute(self, sql, params=None):
        self.executed.append((sql, params))

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        pass

    def close(self):
        pass


class FakeConnectionFactory:
    def __init__(self):
        self.cursor = FakeCursor()
        self.conn = FakeConnection(self.cursor)

    def connect(self):
        return self.conn


NOW_WITH_MICROS = datetime(2025, 3, 12, 10, 0, 0, 654321)


@pytest.mark.parametrize(
    "module, repo_class, new",
    [
        (mysql_student_repository, "MySQLStudentRepository", NewStudent(name="Ana Lima", student_id="S1")),
        (mysql_course_repository, "MySQLCourseRepository", NewCourse(code="CS101", name="Intro", instructor_id=1)),
        (mysql_user_repository, "MySQLUserRepository", NewUser(username="prof", password_hash="x", name="Prof. Ada")),
    ],
)
def test_create_returns_the_stored_second_precision_timestamp(monkeypatch, module, repo_class, new):
    monkeypatch.setattr(module, "now_local", lambda: NOW_WITH_MICROS)
    factory = FakeConnectionFactory()

    created = getattr(module, repo_class)(factory).create(new)

    assert created.id == 7
    assert created.created_at == datetime(2025, 3, 12, 10, 0, 0)
    _, params = factory.cursor.executed[0]
    assert params[-1] == created.created_at
    assert factory.conn.committed
