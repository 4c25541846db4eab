from __future__ import annotations

import json
import logging

import pytest

from src.attendance_tracker.attendance_tracker.container import build_container
from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus, VerificationMethod
from src.attendance_tracker.attendance_tracker.core.exceptions import (
    NotFoundError,
    PayloadTooLargeError,
    ValidationError,
    VerificationFailedError,
)


@pytest.fixture
def strict(store):
    return build_container(backend="memory", store=store, face_match_policy="descriptor_threshold", max_upload_bytes=16)


@pytest.fixture
def enrolled(container, instructor):
    course = container.course_service.create(instructor.id, {"code": "CS101", "name": "Intro"})
    student = container.student_service.create({"name": "Ana Lima", "student_id": "S1", "courses": ["CS101"]})
    container.verification_service.enroll_face(student.id, [0.1, 0.2, 0.3])
    return course, student


def test_enroll_stores_descriptor(container, enrolled):
    _, student = enrolled
    assert container.student_service.get(student.id).face_descriptor == (0.1, 0.2, 0.3)


def test_enroll_unknown_student_raises(container):
    with pytest.raises(NotFoundError):
        container.verification_service.enroll_face(99, [0.1])


def test_verify_requires_both_ids(container, enrolled):
    course, student = enrolled

    with pytest.raises(ValidationError) as exc:
        container.verification_service.verify_and_record(student.id, None, b"img")
    assert exc.value.message == "Student ID and Course ID are required"
    assert container.attendance_recorder.list_by_course(course.id) == []


def test_verify_unknown_student_raises(container, enrolled):
    course, _ = enrolled
    with pytest.raises(NotFoundError):
        container.verification_service.verify_and_record(99, course.id, b"img")


def test_default_policy_records_present_face(container, enrolled):
    course, student = enrolled

    record = container.verification_service.verify_and_record(str(student.id), str(course.id), b"img")

    assert record.status == AttendanceStatus.PRESENT
    assert record.verification_method == VerificationMethod.FACE
    assert [r.id for r in container.attendance_recorder.list_by_student(student.id)] == [record.id]


def test_threshold_rejection_records_nothing(strict, enrolled):
    course, student = enrolled

    with pytest.raises(VerificationFailedError):
        strict.verification_service.verify_and_record(student.id, course.id, b"img", [0.9, 0.9, 0.9])
    assert strict.attendance_recorder.list_by_course(course.id) == []

    record = strict.verification_service.verify_and_record(student.id, course.id, b"img", [0.1, 0.2, 0.35])
    assert record.status == AttendanceStatus.PRESENT


def test_oversized_image_rejected(strict, enrolled):
    course, student = enrolled
    with pytest.raises(PayloadTooLargeError):
        strict.verification_service.verify_and_record(student.id, course.id, b"x" * 17, [0.1, 0.2, 0.3])


def test_nan_descriptor_is_rejected_before_matching(strict, enrolled):
    course, student = enrolled

    with pytest.raises(ValidationError) as exc:
        strict.verification_service.verify_and_record(student.id, course.id, b"img", json.loads("[NaN, NaN, NaN]"))
    assert exc.value.errors == {"faceDescriptor": "must contain only finite numbers"}
    assert strict.attendance_recorder.list_by_course(course.id) == []


def test_enroll_rejects_non_finite_descriptor(container, enrolled):
    _, student = enrolled

    with pytest.raises(ValidationError):
        container.verification_service.enroll_face(student.id, [float("nan"), 1.0])
    assert container.student_service.get(student.id).face_descriptor == (0.1, 0.2, 0.3)


def test_closest_enrolled_finds_nearest_student(strict, enrolled):
    _, ana = enrolled
    bo = strict.student_service.create({"name": "Bo Tran", "student_id": "S2"})
    strict.verification_service.enroll_face(bo.id, [0.9, 0.9, 0.9])

    assert strict.verification_service.closest_enrolled([0.85, 0.9, 0.9])[0] == bo.id
    assert strict.verification_service.closest_enrolled([0.1, 0.2, 0.31])[0] == ana.id
    assert strict.verification_service.closest_enrolled([5.0, 5.0, 5.0]) is None
    assert strict.verification_service.closest_enrolled(None) is None


def test_rejection_logs_closest_enrolled(strict, enrolled, caplog):
    course, ana = enrolled
    bo = strict.student_service.create({"name": "Bo Tran", "student_id": "S2", "courses": ["CS101"]})
    strict.verification_service.enroll_face(bo.id, [0.9, 0.9, 0.9])

    with caplog.at_level(logging.WARNING):
        with pytest.raises(VerificationFailedError):
            strict.verification_service.verify_and_record(ana.id, course.id, b"img", [0.9, 0.9, 0.9])

    assert f"closest enrolled={bo.id}" in caplog.text
