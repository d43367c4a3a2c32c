"""AI assistance DTOs."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..services.quota_governor import QuotaStatus


@dataclass
class TriageRequest:
    symptoms: str
    vital_signs: Optional[Dict[str, str]] = None


@dataclass
class ChatRequest:
    """Ordered ``{role, content}`` turns, oldest first."""

    messages: List[Dict[str, str]] = field(default_factory=list)


@dataclass
class ChatResponse:
    reply: str
    used_fallback: bool


@dataclass
class DiagnosisAssistRequest:
    symptoms: str = ""
    chief_complaint: str = ""
    medical_history: str = ""
    physical_exam: str = ""
    vital_signs: str = ""
    additional_info: str = ""
    patient_age: Optional[int] = None
    patient_gender: Optional[str] = None


@dataclass
class DiagnosisAssistResponse:
    assessment: str
    diagnoses: str
    used_fallback: bool
    quota: QuotaStatus
