from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Closed set of attendance outcomes stored per record."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class VerificationMethod(str, Enum):
    """How an attendance event was authenticated."""

    FACE = "face"
    MANUAL = "manual"


class Language(str, Enum):
    """UI languages an instructor can pick."""

    EN = "en"
    ES = "es"
    FR = "fr"
    AR = "ar"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    MYSQL = "mysql"


class MatchPolicyName(str, Enum):
    """Server-side face match policies (see verification.factory)."""

    ALWAYS_ACCEPT = "always_accept"
    DESCRIPTOR_THRESHOLD = "descriptor_threshold"
