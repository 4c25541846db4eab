from __future__ import annotations

import pytest
from werkzeug.security import check_password_hash

from src.attendance_tracker.attendance_tracker.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


def test_authenticate_returns_user_for_valid_credentials(container, instructor):
    user = container.auth_service.authenticate("prof", "secret123")

    assert user.id == instructor.id
    assert user.password_hash != "secret123"


def test_authenticate_wrong_password_raises(container, instructor):
    with pytest.raises(AuthenticationError) as exc:
        container.auth_service.authenticate("prof", "wrong-password")
    assert exc.value.message == "Invalid credentials"


def test_authenticate_unknown_user_raises(container):
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("nobody", "whatever")


def test_authenticate_placeholder_hash_is_rejected(container, store, instructor):
    container.users_repo.update(instructor.id, {"password_hash": "!"})

    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("prof", "secret123")


def test_duplicate_username_conflicts(container, instructor):
    with pytest.raises(ConflictError):
        container.user_service.create_user(username="prof", password="another1", name="Someone")


def test_update_language_accepts_supported_values(container, instructor):
    user = container.user_service.update_language(instructor.id, "ar")
    assert user.language == "ar"


def test_update_language_rejects_unsupported(container, instructor):
    with pytest.raises(ValidationError) as exc:
        container.user_service.update_language(instructor.id, "de")
    assert "language" in exc.value.errors


def test_update_profile_requires_name(container, instructor):
    with pytest.raises(ValidationError):
        container.user_service.update_profile(instructor.id, name="A", department=None)

    user = container.user_service.update_profile(instructor.id, name="Prof. Ada L.", department="  ")
    assert user.name == "Prof. Ada L."
    assert user.department is None


def test_change_password_flow(container, instructor):
    with pytest.raises(ValidationError):
        container.user_service.change_password(
            instructor.id, current_password="secret123", new_password="abc", confirm_password="abc"
        )
    with pytest.raises(ValidationError):
        container.user_service.change_password(
            instructor.id, current_password="secret123", new_password="newpass1", confirm_password="newpass2"
        )
    with pytest.raises(ValidationError) as exc:
        container.user_service.change_password(
            instructor.id, current_password="not-it", new_password="newpass1", confirm_password="newpass1"
        )
    assert "currentPassword" in exc.value.errors

    user = container.user_service.change_password(
        instructor.id, current_password="secret123", new_password="newpass1", confirm_password="newpass1"
    )
    assert check_password_hash(user.password_hash, "newpass1")
    assert container.auth_service.authenticate("prof", "newpass1").id == instructor.id


def test_current_user_missing_raises(container):
    with pytest.raises(NotFoundError):
        container.auth_service.current_user(999)
