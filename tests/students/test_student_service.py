from __future__ import annotations

import pytest

from src.attendance_tracker.attendance_tracker.core.exceptions import ConflictError, NotFoundError, ValidationError


@pytest.fixture
def courses(container, instructor):
    cs101 = container.course_service.create(instructor.id, {"code": "CS101", "name": "Intro"})
    cs201 = container.course_service.create(instructor.id, {"code": "CS201", "name": "Data Structures"})
    return cs101, cs201


def _total(container, course):
    return container.course_service.get(course.id).total_students


def test_create_reports_every_invalid_field(container):
    with pytest.raises(ValidationError) as exc:
        container.student_service.create({"name": "A", "student_id": "", "email": "not-an-email"})

    assert set(exc.value.errors) == {"name", "studentId", "email"}


def test_create_normalizes_course_codes_and_bumps_totals(container, courses):
    cs101, cs201 = courses

    student = container.student_service.create(
        {"name": "Ana Lima", "student_id": "S1", "courses": ["CS101", " CS101 ", "", "CS201"]}
    )

    assert student.courses == ("CS101", "CS201")
    assert student.email is None
    assert _total(container, cs101) == 1
    assert _total(container, cs201) == 1


def test_duplicate_external_id_conflicts(container):
    container.student_service.create({"name": "Ana Lima", "student_id": "S1"})

    with pytest.raises(ConflictError):
        container.student_service.create({"name": "Bo Chen", "student_id": "S1"})


def test_update_applies_course_diff_to_totals(container, courses):
    cs101, cs201 = courses
    student = container.student_service.create({"name": "Ana Lima", "student_id": "S1", "courses": ["CS101"]})

    updated = container.student_service.update(student.id, {"courses": ["CS201"]})

    assert updated.courses == ("CS201",)
    assert _total(container, cs101) == 0
    assert _total(container, cs201) == 1


def test_partial_update_leaves_other_fields(container):
    student = container.student_service.create({"name": "Ana Lima", "student_id": "S1", "email": "ana@example.com"})

    updated = container.student_service.update(student.id, {"name": "Ana L. Lima"})

    assert updated.name == "Ana L. Lima"
    assert updated.email == "ana@example.com"
    assert updated.student_id == "S1"


def test_update_unknown_student_raises(container):
    with pytest.raises(NotFoundError):
        container.student_service.update(42, {"name": "Nobody Here"})


def test_delete_decrements_totals_and_cascades_attendance(container, courses):
    cs101, _ = courses
    student = container.student_service.create({"name": "Ana Lima", "student_id": "S1", "courses": ["CS101"]})
    container.attendance_recorder.record_attendance(student.id, cs101.id, "present", "manual")

    container.student_service.delete(student.id)

    assert _total(container, cs101) == 0
    assert container.attendance_recorder.list_by_course(cs101.id) == []
    with pytest.raises(NotFoundError):
        container.student_service.delete(student.id)


def test_list_by_course(container, courses):
    cs101, cs201 = courses
    a = container.student_service.create({"name": "Ana Lima", "student_id": "S1", "courses": ["CS101"]})
    container.student_service.create({"name": "Bo Chen", "student_id": "S2", "courses": ["CS201"]})

    assert [s.id for s in container.student_service.list_by_course(cs101.id)] == [a.id]
    assert container.student_service.list_by_course(999) == []
