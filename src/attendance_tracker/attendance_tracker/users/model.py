from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Language

# Columns an update may touch; id, username and created_at are fixed after creation.
USER_MUTABLE_FIELDS = frozenset({"name", "department", "language", "profile_image", "password_hash"})


@dataclass(frozen=True)
class User:
    """Domain entity: instructor account.

    Note: plain data object, no DB access here.
    """

    id: int
    username: str
    password_hash: str
    name: str
    department: Optional[str]
    language: str
    profile_image: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class NewUser:
    """Insert shape; id and created_at are assigned by the repository."""

    username: str
    password_hash: str
    name: str
    department: Optional[str] = None
    language: str = Language.EN.value
    profile_image: Optional[str] = None
