from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.exceptions import ConflictError
from ..database.memory_store import MemoryStore
from .model import USER_MUTABLE_FIELDS, NewUser, User
from .repository import UserRepository


class MemoryUserRepository(UserRepository):
    def __init__(self, store: MemoryStore):
        self._store = store

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self._store.read() as s:
            return s.users.rows.get(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        with self._store.read() as s:
            return next((u for u in s.users.rows.values() if u.username == username), None)

    def create(self, new: NewUser) -> User:
        with self._store.transaction() as s:
            if any(u.username == new.username for u in s.users.rows.values()):
                raise ConflictError("Username already exists", errors={"username": "already exists"})

            user = User(
                id=s.users.allocate_id(),
                username=new.username,
                password_hash=new.password_hash,
                name=new.name,
                department=new.department,
                language=new.language,
                profile_image=new.profile_image,
                created_at=now_local(),
            )
            s.users.rows[user.id] = user
            return user

    def update(self, user_id: int, fields: Mapping[str, Any]) -> Optional[User]:
        changes = {k: v for k, v in fields.items() if k in USER_MUTABLE_FIELDS}
        with self._store.transaction() as s:
            existing = s.users.rows.get(int(user_id))
            if existing is None:
                return None
            if not changes:
                return existing
            updated = replace(existing, **changes)
            s.users.rows[existing.id] = updated
            return updated

    def list_all(self) -> Sequence[User]:
        with self._store.read() as s:
            return list(s.users.rows.values())
