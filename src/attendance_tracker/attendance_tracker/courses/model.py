from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

COURSE_MUTABLE_FIELDS = frozenset({"code", "name", "room", "schedule", "total_students"})


@dataclass(frozen=True)
class Course:
    """Domain entity: a course owned by one instructor.

    ``total_students`` is a cached counter maintained by the student
    repository, not a computed view.
    """

    id: int
    code: str
    name: str
    instructor_id: int
    room: Optional[str]
    schedule: Optional[str]
    total_students: int
    created_at: datetime


@dataclass(frozen=True)
class NewCourse:
    code: str
    name: str
    instructor_id: int
    room: Optional[str] = None
    schedule: Optional[str] = None
    total_students: int = 0
