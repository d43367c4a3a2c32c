"""Visit domain entity: one outpatient encounter from check-in onwards."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ...core.utils.datetime_utils import utc_now
from ..enums import VisitPriority, VisitStatus
from ..state_machine import VISIT_TRANSITIONS
from ..value_objects.record_id import VisitId


@dataclass
class ConsultationRecord:
    """Doctor's notes captured when a consultation is finalized."""

    chief_complaint: Optional[str] = None
    history_of_present_illness: Optional[str] = None
    examination_notes: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment_plan: Optional[str] = None
    follow_up_instructions: Optional[str] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None


@dataclass
class Visit:
    """Visit domain entity.

    Status changes go through ``transition_to`` so that the central
    transition table is consulted on every move.
    """

    visit_id: VisitId
    patient_id: str
    department: str
    patient_name: Optional[str] = None
    doctor_id: Optional[str] = None
    status: VisitStatus = VisitStatus.WAITING
    priority: VisitPriority = VisitPriority.NORMAL
    token_number: int = 0
    queue_position: int = 0
    symptoms: Optional[str] = None
    diagnosis: Optional[str] = None
    consultation: Optional[ConsultationRecord] = None
    checked_in_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def transition_to(self, target: VisitStatus) -> VisitStatus:
        """Move to ``target`` and return the previous status."""
        previous = self.status
        VISIT_TRANSITIONS.validate(self.visit_id.value, previous, target)
        self.status = target
        self.updated_at = utc_now()
        return previous

    def start_consultation(self, doctor_id: Optional[str] = None) -> None:
        self.transition_to(VisitStatus.IN_CONSULTATION)
        if doctor_id:
            self.doctor_id = doctor_id
        self.consultation = self.consultation or ConsultationRecord()
        self.consultation.started_at = self.consultation.started_at or self.updated_at

    def record_consultation(self, record: ConsultationRecord) -> None:
        """Attach consultation notes; the status is left untouched."""
        if self.consultation and self.consultation.started_at and not record.started_at:
            record.started_at = self.consultation.started_at
        record.ended_at = record.ended_at or utc_now()
        self.consultation = record
        if record.diagnosis:
            self.diagnosis = record.diagnosis
        self.updated_at = utc_now()
