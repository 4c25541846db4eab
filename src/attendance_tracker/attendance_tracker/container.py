from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.memory_attendance_repository import MemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceRecorder
from .core.constants import FACE_MATCH_THRESHOLD, MAX_UPLOAD_BYTES
from .core.enums import MatchPolicyName, StorageBackend
from .courses.memory_course_repository import MemoryCourseRepository
from .courses.mysql_course_repository import MySQLCourseRepository
from .courses.repository import CourseRepository
from .courses.service import CourseService
from .database.connection import DBConfig, DatabaseConnection
from .database.memory_store import MemoryStore
from .students.memory_student_repository import MemoryStudentRepository
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.memory_user_repository import MemoryUserRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .verification.factory import MatchPolicyFactory
from .verification.service import FaceVerificationService


@dataclass(frozen=True)
class Container:
    backend: StorageBackend

    users_repo: UserRepository
    students_repo: StudentRepository
    courses_repo: CourseRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    user_service: UserService
    student_service: StudentService
    course_service: CourseService
    attendance_recorder: AttendanceRecorder
    verification_service: FaceVerificationService


def build_container(
    *,
    backend: str = StorageBackend.MYSQL.value,
    db_config: Optional[dict] = None,
    store: Optional[MemoryStore] = None,
    face_match_policy: str = MatchPolicyName.ALWAYS_ACCEPT.value,
    face_match_threshold: float = FACE_MATCH_THRESHOLD,
    max_upload_bytes: int = MAX_UPLOAD_BYTES,
) -> Container:
    kind = StorageBackend(str(backend).strip().lower())

    if kind == StorageBackend.MEMORY:
        store = store or MemoryStore()
        users_repo = MemoryUserRepository(store)
        students_repo = MemoryStudentRepository(store)
        courses_repo = MemoryCourseRepository(store)
        attendance_repo = MemoryAttendanceRepository(store)
    else:
        if not db_config:
            raise ValueError("db_config is required for the mysql backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        users_repo = MySQLUserRepository(conn)
        students_repo = MySQLStudentRepository(conn)
        courses_repo = MySQLCourseRepository(conn)
        attendance_repo = MySQLAttendanceRepository(conn)

    attendance_recorder = AttendanceRecorder(attendance_repo, students_repo, courses_repo)
    policy = MatchPolicyFactory(threshold=face_match_threshold).create(face_match_policy)

    return Container(
        backend=kind,
        users_repo=users_repo,
        students_repo=students_repo,
        courses_repo=courses_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        student_service=StudentService(students_repo, courses_repo),
        course_service=CourseService(courses_repo, students_repo),
        attendance_recorder=attendance_recorder,
        verification_service=FaceVerificationService(
            students_repo,
            attendance_recorder,
            policy,
            max_upload_bytes=max_upload_bytes,
        ),
    )
