"""AI triage: urgency 1 (emergency) to 5 (non-urgent) from free-text symptoms."""

import logging
import re
from typing import Optional

from ...core.errors import ExternalServiceError
from ...domain.entities.triage import TriageAssessment
from ...domain.enums import TriagePriority
from ..dto.ai_dto import TriageRequest
from ..services.ai_gateway import AIGateway

logger = logging.getLogger(__name__)

EMERGENCY_KEYWORDS = (
    "chest pain",
    "difficulty breathing",
    "unconscious",
    "severe bleeding",
    "stroke",
    "heart attack",
    "suicide",
    "overdose",
)

DEFAULT_URGENCY = 3
DEFAULT_PRIORITY = TriagePriority.SEMI_URGENT
DEFAULT_WAIT_MINUTES = 30
DEFAULT_FLAGS = ["Standard assessment"]

_URGENCY = re.compile(r"URGENCY:\s*([1-5])", re.IGNORECASE)
_PRIORITY = re.compile(r"PRIORITY:\s*(immediate|urgent|semi-urgent|non-urgent)", re.IGNORECASE)
_WAIT = re.compile(r"WAIT:\s*(\d+)", re.IGNORECASE)
_FLAGS = re.compile(r"FLAGS:\s*(.*?)$", re.IGNORECASE | re.MULTILINE)


def emergency_assessment() -> TriageAssessment:
    return TriageAssessment(
        urgency_level=1,
        priority=TriagePriority.IMMEDIATE,
        estimated_wait_minutes=0,
        recommendation="Emergency keywords detected - immediate medical attention required",
        flags=["Emergency symptoms detected", "Requires immediate assessment"],
    )


def manual_assessment() -> TriageAssessment:
    return TriageAssessment(
        urgency_level=DEFAULT_URGENCY,
        priority=DEFAULT_PRIORITY,
        estimated_wait_minutes=DEFAULT_WAIT_MINUTES,
        recommendation="Unable to complete AI triage. Please perform manual assessment.",
        flags=["AI Assessment Failed"],
    )


def parse_triage_reply(text: str) -> TriageAssessment:
    """Read ``URGENCY:n PRIORITY:p WAIT:m FLAGS:a, b``; missing parts get defaults."""
    urgency = _URGENCY.search(text)
    priority = _PRIORITY.search(text)
    wait = _WAIT.search(text)
    flags_match = _FLAGS.search(text)

    flags = DEFAULT_FLAGS
    if flags_match:
        flags = [flag.strip() for flag in flags_match.group(1).split(",") if flag.strip()]

    return TriageAssessment(
        urgency_level=int(urgency.group(1)) if urgency else DEFAULT_URGENCY,
        priority=TriagePriority(priority.group(1).lower()) if priority else DEFAULT_PRIORITY,
        estimated_wait_minutes=int(wait.group(1)) if wait else DEFAULT_WAIT_MINUTES,
        recommendation=text,
        flags=list(flags),
    )


def _format_vitals(vital_signs: Optional[dict]) -> str:
    if not vital_signs:
        return ""
    readings = ", ".join(f"{name}: {value}" for name, value in vital_signs.items())
    return f"\nVitals: {readings}"


class AssessTriageUseCase:
    def __init__(self, ai_gateway: AIGateway):
        self._ai_gateway = ai_gateway

    async def execute(self, request: TriageRequest) -> TriageAssessment:
        symptoms = request.symptoms or ""
        lowered = symptoms.lower()
        if any(keyword in lowered for keyword in EMERGENCY_KEYWORDS):
            logger.warning("🚨 Emergency keywords detected; skipping AI triage")
            return emergency_assessment()

        prompt = (
            f"Triage assessment for: {symptoms}{_format_vitals(request.vital_signs)}\n\n"
            "Provide: URGENCY:[1-5] PRIORITY:[immediate/urgent/semi-urgent/non-urgent] "
            "WAIT:[minutes] FLAGS:[warnings]"
        )
        try:
            reply = await self._ai_gateway.analyze(prompt)
            return parse_triage_reply(reply.text)
        except (ExternalServiceError, ValueError) as exc:
            logger.error(f"❌ AI triage failed: {exc}")
            return manual_assessment()
