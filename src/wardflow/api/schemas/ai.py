"""
Pydantic schemas for AI assistance endpoints.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from wardflow.application.services.quota_governor import QuotaStatus
from wardflow.domain.entities.triage import TriageAssessment
from wardflow.domain.enums import TriagePriority


class QuotaStatusSchema(BaseModel):
    used: int
    limit: int
    remaining: int
    percentage_used: int
    hours_until_reset: float
    is_limit_reached: bool
    last_reset: datetime

    @classmethod
    def from_domain(cls, status: QuotaStatus) -> "QuotaStatusSchema":
        return cls(**vars(status))


class DiagnosisAssistRequest(BaseModel):
    symptoms: str = ""
    chief_complaint: str = ""
    medical_history: str = ""
    physical_exam: str = ""
    vital_signs: str = ""
    additional_info: str = ""
    patient_age: Optional[int] = Field(None, ge=0, le=150)
    patient_gender: Optional[str] = None


class DiagnosisAssistResponse(BaseModel):
    success: bool = True
    response: str = Field(..., description="Assessment text with disclaimer")
    diagnoses: str = Field(..., description="Pipe-delimited extracted diagnoses")
    used_fallback: bool
    quota: QuotaStatusSchema


class TriageRequest(BaseModel):
    symptoms: str = Field(..., min_length=1)
    vital_signs: Optional[Dict[str, str]] = None


class TriageResponse(BaseModel):
    urgency_level: int
    priority: TriagePriority
    estimated_wait_minutes: int
    recommendation: str
    flags: List[str]
    assessment_time: datetime

    @classmethod
    def from_domain(cls, assessment: TriageAssessment, at: datetime) -> "TriageResponse":
        return cls(
            urgency_level=assessment.urgency_level,
            priority=assessment.priority,
            estimated_wait_minutes=assessment.estimated_wait_minutes,
            recommendation=assessment.recommendation,
            flags=assessment.flags,
            assessment_time=at,
        )


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(..., min_length=1)


class ChatResponse(BaseModel):
    reply: str
    used_fallback: bool
