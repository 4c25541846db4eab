from __future__ import annotations

from typing import Optional, Sequence

from ...core.enums import MatchPolicyName
from ...students.model import Student
from .base import MatchDecision, MatchPolicy


class AlwaysAcceptPolicy(MatchPolicy):
    """Accepts every capture. Likeness is checked in the browser before upload."""

    name = MatchPolicyName.ALWAYS_ACCEPT.value

    def decide(self, *, student: Student, image: Optional[bytes], descriptor: Optional[Sequence[float]]) -> MatchDecision:
        return MatchDecision(accepted=True)
