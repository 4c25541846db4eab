from __future__ import annotations

import pytest

from src.attendance_tracker.attendance_tracker.core.exceptions import ConflictError, NotFoundError, ValidationError


def test_create_validates_code_and_name(container, instructor):
    with pytest.raises(ValidationError) as exc:
        container.course_service.create(instructor.id, {"code": "C", "name": ""})
    assert set(exc.value.errors) == {"code", "name"}


def test_negative_total_rejected(container, instructor):
    with pytest.raises(ValidationError) as exc:
        container.course_service.create(instructor.id, {"code": "CS1", "name": "Intro", "total_students": -1})
    assert "totalStudents" in exc.value.errors


def test_code_must_be_unique(container, instructor):
    container.course_service.create(instructor.id, {"code": "CS101", "name": "Intro"})

    with pytest.raises(ConflictError):
        container.course_service.create(instructor.id, {"code": "CS101", "name": "Other"})


def test_list_is_scoped_to_instructor(container, instructor):
    other = container.user_service.create_user(username="other", password="secret123", name="Dr. Other")
    mine = container.course_service.create(instructor.id, {"code": "CS101", "name": "Intro"})
    container.course_service.create(other.id, {"code": "MA101", "name": "Calculus"})

    assert [c.id for c in container.course_service.list_for_instructor(instructor.id)] == [mine.id]


def test_update_and_delete(container, instructor):
    course = container.course_service.create(instructor.id, {"code": "CS101", "name": "Intro", "room": "B2"})

    updated = container.course_service.update(course.id, {"schedule": "Mon 9:00"})
    assert updated.schedule == "Mon 9:00"
    assert updated.room == "B2"

    container.course_service.delete(course.id)
    with pytest.raises(NotFoundError):
        container.course_service.get(course.id)
    with pytest.raises(NotFoundError):
        container.course_service.delete(course.id)


def test_delete_cascades_attendance(container, instructor):
    course = container.course_service.create(instructor.id, {"code": "CS101", "name": "Intro"})
    student = container.student_service.create({"name": "Ana Lima", "student_id": "S1", "courses": ["CS101"]})
    record = container.attendance_recorder.record_attendance(student.id, course.id, "present", "manual")

    container.course_service.delete(course.id)

    assert container.attendance_repo.get_by_id(record.id) is None
    assert container.attendance_recorder.list_by_student(student.id) == []


def test_resync_totals_repairs_drift(container, instructor):
    course = container.course_service.create(instructor.id, {"code": "CS101", "name": "Intro"})
    container.student_service.create({"name": "Ana Lima", "student_id": "S1", "courses": ["CS101"]})
    container.course_service.update(course.id, {"total_students": 35})

    assert container.course_service.resync_totals() == {"CS101": 1}
    assert container.course_service.get(course.id).total_students == 1
    assert container.course_service.resync_totals() == {}
