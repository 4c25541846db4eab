from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.constants import MIN_NAME_LENGTH, MIN_PASSWORD_LENGTH
from ..core.enums import Language
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import NewUser, User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate an instructor (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> User:
        username = require_non_empty(username, "username")
        require_non_empty(password, "password")

        user = self._users.get_by_username(username)
        if not user:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")
        return user

    def current_user(self, user_id: Optional[int]) -> User:
        if not user_id:
            raise NotFoundError("User not found")
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user


class UserService:
    """Use case: manage instructor accounts and their preferences."""

    def __init__(self, users: UserRepository):
        self._users = users

    def create_user(
        self,
        *,
        username: str,
        password: str,
        name: str,
        department: Optional[str] = None,
        language: str = Language.EN.value,
    ) -> User:
        username = require_non_empty(username, "username")
        name = require_min_length(name, "name", MIN_NAME_LENGTH)
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)
        language = self._check_language(language)

        user = self._users.create(
            NewUser(
                username=username,
                password_hash=generate_password_hash(password),
                name=name,
                department=optional_text(department),
                language=language,
            )
        )
        logger.info("Created user %s (id=%s)", user.username, user.id)
        return user

    def update_language(self, user_id: int, language: Optional[str]) -> User:
        if not language:
            raise ValidationError("Language is required", errors={"language": "Language is required"})
        return self._update(user_id, {"language": self._check_language(language)})

    def update_profile(self, user_id: int, *, name: Optional[str], department: Optional[str]) -> User:
        fields = {"name": require_min_length(name, "name", MIN_NAME_LENGTH)}
        fields["department"] = optional_text(department)
        return self._update(user_id, fields)

    def change_password(
        self,
        user_id: int,
        *,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> User:
        require_non_empty(current_password, "currentPassword")
        require_min_length(new_password, "newPassword", MIN_PASSWORD_LENGTH)
        if new_password != confirm_password:
            raise ValidationError("Passwords do not match", errors={"confirmPassword": "Passwords do not match"})

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        if not check_password_hash(user.password_hash, current_password):
            raise ValidationError("Current password is incorrect", errors={"currentPassword": "incorrect"})

        return self._update(user_id, {"password_hash": generate_password_hash(new_password)})

    def _update(self, user_id: int, fields: dict) -> User:
        user = self._users.update(int(user_id), fields)
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def _check_language(language: str) -> str:
        try:
            return Language(str(language).strip()).value
        except ValueError:
            allowed = ", ".join(l.value for l in Language)
            raise ValidationError(f"Unsupported language (use one of {allowed})", errors={"language": "unsupported"})
