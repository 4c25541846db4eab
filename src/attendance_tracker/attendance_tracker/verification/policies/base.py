from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from ...students.model import Student


@dataclass(frozen=True)
class MatchDecision:
    accepted: bool
    distance: Optional[float] = None
    reason: Optional[str] = None


class MatchPolicy(ABC):
    """Strategy Pattern: decide whether a capture belongs to the claimed student."""

    name: str = ""

    @abstractmethod
    def decide(self, *, student: Student, image: Optional[bytes], descriptor: Optional[Sequence[float]]) -> MatchDecision:
        raise NotImplementedError
