"""Admission request domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ...core.utils.datetime_utils import utc_now
from ..enums import AdmissionStatus, AdmissionType, AdmissionUrgency
from ..state_machine import ADMISSION_TRANSITIONS
from ..value_objects.record_id import AdmissionId, BedId, VisitId, WardId


def build_admission_number(now: datetime) -> str:
    """``ADM-{year}-{last six digits of the epoch milliseconds}``."""
    millis = int(now.timestamp() * 1000)
    return f"ADM-{now.year}-{str(millis)[-6:]}"


@dataclass
class Admission:
    """A request to move a patient from outpatient care onto a ward."""

    admission_id: AdmissionId
    admission_number: str
    patient_id: str
    visit_id: VisitId
    requested_by: str
    reason: str
    ward_type: str
    urgency: AdmissionUrgency = AdmissionUrgency.ROUTINE
    admission_type: AdmissionType = AdmissionType.ELECTIVE
    status: AdmissionStatus = AdmissionStatus.PENDING
    ward_id: Optional[WardId] = None
    bed_id: Optional[BedId] = None
    diagnosis: Optional[str] = None
    treatment_plan: Optional[str] = None
    estimated_stay_days: Optional[int] = None
    special_requirements: Optional[str] = None
    approved_by: Optional[str] = None
    assigned_doctor_id: Optional[str] = None
    rejection_reason: Optional[str] = None
    discharge_notes: Optional[str] = None
    requested_at: datetime = field(default_factory=utc_now)
    approved_at: Optional[datetime] = None
    admitted_at: Optional[datetime] = None
    discharged_at: Optional[datetime] = None
    updated_at: datetime = field(default_factory=utc_now)

    def _move(self, target: AdmissionStatus) -> None:
        ADMISSION_TRANSITIONS.validate(self.admission_id.value, self.status, target)
        self.status = target
        self.updated_at = utc_now()

    def approve(
        self, bed_id: BedId, approved_by: str, assigned_doctor_id: Optional[str] = None
    ) -> None:
        self._move(AdmissionStatus.APPROVED)
        self.bed_id = bed_id
        self.approved_by = approved_by
        self.approved_at = self.updated_at
        if assigned_doctor_id:
            self.assigned_doctor_id = assigned_doctor_id

    def reject(self, rejected_by: str, reason: Optional[str] = None) -> None:
        self._move(AdmissionStatus.REJECTED)
        self.approved_by = rejected_by
        self.rejection_reason = reason

    def activate(self) -> None:
        self._move(AdmissionStatus.ACTIVE)
        self.admitted_at = self.updated_at

    def discharge(self, notes: Optional[str] = None) -> None:
        self._move(AdmissionStatus.DISCHARGED)
        self.discharged_at = self.updated_at
        self.discharge_notes = notes
