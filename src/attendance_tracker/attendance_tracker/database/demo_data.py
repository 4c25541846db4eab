from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Optional

from ..common.datetime_utils import now_local
from .bootstrap import DEMO_PASSWORD, DEMO_USERNAME

if TYPE_CHECKING:
    from ..container import Container

logger = logging.getLogger(__name__)

DEMO_COURSES = [
    {"code": "CS101", "name": "Computer Science 101", "room": "Room 305B", "schedule": "Monday, Wednesday 2:30 PM"},
    {"code": "CS201", "name": "Data Structures", "room": "Lab 201", "schedule": "Tuesday, Thursday 10:15 AM"},
    {"code": "CS301", "name": "Database Systems", "room": "Room 112A", "schedule": "Wednesday, Friday 11:05 AM"},
    {"code": "CS401", "name": "Artificial Intelligence", "room": "Room 202C", "schedule": "Monday, Thursday 1:30 PM"},
]

DEMO_STUDENTS = [
    {"name": "Michael Roberts", "student_id": "S12345", "email": "michael.roberts@example.com", "courses": ["CS101", "CS201"]},
    {"name": "Sarah Johnson", "student_id": "S12346", "email": "sarah.johnson@example.com", "courses": ["CS101", "CS301"]},
    {"name": "David Wilson", "student_id": "S12347", "email": "david.wilson@example.com", "courses": ["CS201", "CS301"]},
    {"name": "Emily Chen", "student_id": "S12348", "email": "emily.chen@example.com", "courses": ["CS101", "CS401"]},
]

# (student id, course code, time of day, status, method)
DEMO_ATTENDANCE = [
    ("S12345", "CS101", time(9, 30), "present", "face"),
    ("S12346", "CS201", time(10, 15), "present", "face"),
    ("S12347", "CS301", time(11, 5), "absent", "manual"),
    ("S12348", "CS401", time(13, 30), "late", "face"),
]


def seed_demo_data(container: "Container", *, today: Optional[date] = None) -> bool:
    """Load the demo instructor, courses, students and today's check-ins.

    Returns False without touching anything when the demo account already exists.
    """

    if container.users_repo.get_by_username(DEMO_USERNAME):
        return False

    today = today or now_local().date()

    user = container.user_service.create_user(
        username=DEMO_USERNAME,
        password=DEMO_PASSWORD,
        name="Prof. Jane Smith",
        department="Computer Science",
        language="en",
    )

    courses = {c["code"]: container.course_service.create(user.id, c) for c in DEMO_COURSES}
    students = {s["student_id"]: container.student_service.create(s) for s in DEMO_STUDENTS}

    for external_id, code, at, status, method in DEMO_ATTENDANCE:
        container.attendance_recorder.record_attendance(
            students[external_id].id,
            courses[code].id,
            status,
            method,
            occurred_at=datetime.combine(today, at),
        )

    logger.info(
        "Seeded demo data: %d courses, %d students, %d attendance rows",
        len(courses),
        len(students),
        len(DEMO_ATTENDANCE),
    )
    return True
