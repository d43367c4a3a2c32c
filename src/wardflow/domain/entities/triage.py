"""Triage assessment: derived per request, never stored."""

from dataclasses import dataclass, field
from typing import List

from ..enums import TriagePriority


@dataclass
class TriageAssessment:
    urgency_level: int
    priority: TriagePriority
    estimated_wait_minutes: int
    recommendation: str
    flags: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not 1 <= self.urgency_level <= 5:
            raise ValueError("Urgency level must be between 1 and 5")
        if self.estimated_wait_minutes < 0:
            raise ValueError("Estimated wait cannot be negative")
