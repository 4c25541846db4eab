from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import FACE_MATCH_THRESHOLD
from ..core.enums import MatchPolicyName
from .policies.always_accept import AlwaysAcceptPolicy
from .policies.base import MatchPolicy
from .policies.descriptor_threshold import DescriptorThresholdPolicy


@dataclass
class MatchPolicyFactory:
    """Factory Pattern: build the match policy named in settings."""

    threshold: float = FACE_MATCH_THRESHOLD

    def create(self, name: str) -> MatchPolicy:
        try:
            policy = MatchPolicyName(str(name or MatchPolicyName.ALWAYS_ACCEPT.value).strip().lower())
        except ValueError:
            allowed = ", ".join(p.value for p in MatchPolicyName)
            raise ValueError(f"Unknown face match policy {name!r} (expected one of {allowed})")

        if policy == MatchPolicyName.DESCRIPTOR_THRESHOLD:
            return DescriptorThresholdPolicy(self.threshold)
        return AlwaysAcceptPolicy()
