"""
Pydantic schemas for outpatient visit endpoints.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from wardflow.domain.entities.visit import ConsultationRecord, Visit
from wardflow.domain.enums import VisitPriority, VisitStatus


class CheckInRequest(BaseModel):
    patient_id: str = Field(..., min_length=1, description="Patient record id")
    department: str = Field(..., min_length=1, description="Department queue")
    patient_name: Optional[str] = None
    doctor_id: Optional[str] = None
    priority: VisitPriority = VisitPriority.NORMAL
    symptoms: Optional[str] = None


class UpdateVisitStatusRequest(BaseModel):
    visit_id: str = Field(..., min_length=1)
    status: VisitStatus


class CallNextRequest(BaseModel):
    doctor_id: Optional[str] = None
    department: Optional[str] = None


class CompleteConsultationRequest(BaseModel):
    chief_complaint: Optional[str] = None
    history_of_present_illness: Optional[str] = None
    examination_notes: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment_plan: Optional[str] = None
    follow_up_instructions: Optional[str] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None


class ConsultationSchema(BaseModel):
    chief_complaint: Optional[str] = None
    history_of_present_illness: Optional[str] = None
    examination_notes: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment_plan: Optional[str] = None
    follow_up_instructions: Optional[str] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, record: ConsultationRecord) -> "ConsultationSchema":
        return cls(**vars(record))


class VisitSchema(BaseModel):
    visit_id: str
    patient_id: str
    patient_name: Optional[str] = None
    department: str
    doctor_id: Optional[str] = None
    status: VisitStatus
    priority: VisitPriority
    token_number: int
    queue_position: int
    symptoms: Optional[str] = None
    diagnosis: Optional[str] = None
    consultation: Optional[ConsultationSchema] = None
    checked_in_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, visit: Visit) -> "VisitSchema":
        return cls(
            visit_id=visit.visit_id.value,
            patient_id=visit.patient_id,
            patient_name=visit.patient_name,
            department=visit.department,
            doctor_id=visit.doctor_id,
            status=visit.status,
            priority=visit.priority,
            token_number=visit.token_number,
            queue_position=visit.queue_position,
            symptoms=visit.symptoms,
            diagnosis=visit.diagnosis,
            consultation=(
                ConsultationSchema.from_domain(visit.consultation) if visit.consultation else None
            ),
            checked_in_at=visit.checked_in_at,
            updated_at=visit.updated_at,
        )


class CallNextResponse(BaseModel):
    called: bool
    message: str
    visit: Optional[VisitSchema] = None
    remaining: int = 0


class QueueResponse(BaseModel):
    waiting: List[VisitSchema] = Field(default_factory=list)
    in_consultation: Optional[VisitSchema] = None
    next_token: Optional[int] = None
    counts: Dict[str, int] = Field(default_factory=dict)
