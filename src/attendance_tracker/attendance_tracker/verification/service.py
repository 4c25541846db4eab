from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceRecorder
from ..common import validators as v
from ..core.constants import FACE_MATCH_THRESHOLD, MAX_UPLOAD_BYTES
from ..core.enums import AttendanceStatus, VerificationMethod
from ..core.exceptions import NotFoundError, PayloadTooLargeError, ValidationError, VerificationFailedError
from ..students.model import Student
from ..students.repository import StudentRepository
from .policies.base import MatchPolicy
from .policies.descriptor_threshold import find_best_match

logger = logging.getLogger(__name__)


class FaceVerificationService:
    """Face enrollment and face-verified check-in.

    Descriptors are computed client-side; the server stores them and asks the
    configured ``MatchPolicy`` whether a capture is accepted.
    """

    def __init__(
        self,
        students: StudentRepository,
        recorder: AttendanceRecorder,
        policy: MatchPolicy,
        *,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
    ):
        self._students = students
        self._recorder = recorder
        self._policy = policy
        self._max_upload_bytes = int(max_upload_bytes)

    @property
    def policy(self) -> MatchPolicy:
        return self._policy

    def _check_upload(self, image: Optional[bytes]) -> None:
        if image is not None and len(image) > self._max_upload_bytes:
            raise PayloadTooLargeError("Face image is too large")

    def closest_enrolled(self, descriptor: Optional[Sequence[float]]) -> Optional[tuple[int, float]]:
        """Enrolled ``(student id, distance)`` nearest to ``descriptor`` within the policy threshold."""

        if not descriptor:
            return None
        known = [(s.id, s.face_descriptor) for s in self._students.list_all() if s.face_descriptor]
        threshold = getattr(self._policy, "threshold", FACE_MATCH_THRESHOLD)
        return find_best_match(descriptor, known, threshold=threshold)

    def enroll_face(self, student_id: int, descriptor: Any, *, image: Optional[bytes] = None) -> Student:
        self._check_upload(image)
        values = v.descriptor(descriptor)
        student = self._students.update(
            int(student_id),
            {"face_descriptor": tuple(values) if values is not None else ()},
        )
        if not student:
            raise NotFoundError("Student not found")

        logger.info("Enrolled face for student %s (%d values)", student.student_id, len(values or ()))
        return student

    def verify_and_record(
        self,
        student_id: Any,
        course_id: Any,
        image: Optional[bytes],
        descriptor: Optional[Sequence[float]] = None,
    ) -> AttendanceRecord:
        if not student_id or not course_id:
            raise ValidationError(
                "Student ID and Course ID are required",
                errors={k: "is required" for k, val in (("studentId", student_id), ("courseId", course_id)) if not val},
            )
        self._check_upload(image)

        sid = v.require_int(student_id, "studentId")
        cid = v.require_int(course_id, "courseId")
        values = v.descriptor(descriptor)

        student = self._students.get_by_id(sid)
        if not student:
            raise NotFoundError("Student not found")

        decision = self._policy.decide(student=student, image=image, descriptor=values)
        if not decision.accepted:
            closest = self.closest_enrolled(values)
            logger.warning(
                "Face verification rejected for student %s: %s (distance=%s, closest enrolled=%s)",
                student.student_id,
                decision.reason,
                decision.distance,
                closest[0] if closest else None,
            )
            raise VerificationFailedError(decision.reason or "Face verification failed")

        return self._recorder.record_attendance(
            student.id,
            cid,
            AttendanceStatus.PRESENT,
            VerificationMethod.FACE,
        )
