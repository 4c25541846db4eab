from __future__ import annotations

from typing import Iterable, Optional, Sequence

import numpy as np

from ...core.constants import FACE_MATCH_THRESHOLD
from ...core.enums import MatchPolicyName
from ...students.model import Student
from .base import MatchDecision, MatchPolicy


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> Optional[float]:
    """Distance between two descriptors, or None when their dimensions differ."""

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.ndim != 1 or va.shape != vb.shape or va.size == 0:
        return None
    return float(np.linalg.norm(va - vb))


def find_best_match(
    descriptor: Sequence[float],
    known: Iterable[tuple[int, Sequence[float]]],
    *,
    threshold: float = FACE_MATCH_THRESHOLD,
) -> Optional[tuple[int, float]]:
    """Closest known ``(student_id, distance)`` within ``threshold``, else None."""

    best: Optional[tuple[int, float]] = None
    for student_id, candidate in known:
        distance = euclidean_distance(descriptor, candidate)
        if distance is None or not np.isfinite(distance):
            continue
        if best is None or distance < best[1]:
            best = (student_id, distance)

    if best is not None and best[1] <= threshold:
        return best
    return None


class DescriptorThresholdPolicy(MatchPolicy):
    """Compares the submitted descriptor with the enrolled one."""

    name = MatchPolicyName.DESCRIPTOR_THRESHOLD.value

    def __init__(self, threshold: float = FACE_MATCH_THRESHOLD):
        self.threshold = float(threshold)

    def decide(self, *, student: Student, image: Optional[bytes], descriptor: Optional[Sequence[float]]) -> MatchDecision:
        if not student.face_descriptor:
            return MatchDecision(accepted=False, reason="No face enrolled for this student")
        if not descriptor:
            return MatchDecision(accepted=False, reason="No face descriptor submitted")

        distance = euclidean_distance(descriptor, student.face_descriptor)
        if distance is None:
            return MatchDecision(accepted=False, reason="Face descriptor dimensions do not match")
        if not np.isfinite(distance):
            return MatchDecision(accepted=False, reason="Face descriptor is not a finite vector")
        if distance <= self.threshold:
            return MatchDecision(accepted=True, distance=distance)
        return MatchDecision(accepted=False, distance=distance, reason="Face does not match")
