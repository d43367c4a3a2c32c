"""Outpatient visit DTOs."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...domain.entities.visit import Visit
from ...domain.enums import VisitPriority, VisitStatus


@dataclass
class CheckInRequest:
    """Request DTO for patient check-in."""

    patient_id: str
    department: str
    patient_name: Optional[str] = None
    doctor_id: Optional[str] = None
    priority: VisitPriority = VisitPriority.NORMAL
    symptoms: Optional[str] = None


@dataclass
class CallNextRequest:
    doctor_id: Optional[str] = None
    department: Optional[str] = None


@dataclass
class CallNextResult:
    called: bool
    message: str
    visit: Optional[Visit] = None
    remaining: int = 0


@dataclass
class UpdateVisitStatusRequest:
    visit_id: str
    status: VisitStatus


@dataclass
class CompleteConsultationRequest:
    """Doctor's notes; saved before the visit is marked completed."""

    visit_id: str
    chief_complaint: Optional[str] = None
    history_of_present_illness: Optional[str] = None
    examination_notes: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment_plan: Optional[str] = None
    follow_up_instructions: Optional[str] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None


@dataclass
class QueueRequest:
    doctor_id: Optional[str] = None
    department: Optional[str] = None
