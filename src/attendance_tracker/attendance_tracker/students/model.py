from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

STUDENT_MUTABLE_FIELDS = frozenset({"name", "student_id", "email", "face_descriptor", "courses"})


@dataclass(frozen=True)
class Student:
    """Domain entity: a student on one or more course rosters.

    ``courses`` holds course codes (denormalised enrollment), ``student_id`` is
    the external id printed on cards, distinct from the internal ``id``.
    """

    id: int
    name: str
    student_id: str
    email: Optional[str]
    face_descriptor: Optional[tuple[float, ...]]
    courses: tuple[str, ...]
    created_at: datetime


@dataclass(frozen=True)
class NewStudent:
    name: str
    student_id: str
    email: Optional[str] = None
    face_descriptor: Optional[tuple[float, ...]] = None
    courses: tuple[str, ...] = ()
