"""Admission DTOs."""

from dataclasses import dataclass
from typing import Optional

from ...domain.entities.admission import Admission
from ...domain.enums import AdmissionStatus, AdmissionUrgency


@dataclass
class RequestAdmissionRequest:
    """Request DTO for filing an admission from a visit."""

    visit_id: str
    requested_by: str
    reason: str
    ward_type: str
    urgency: AdmissionUrgency = AdmissionUrgency.ROUTINE
    estimated_stay_days: Optional[int] = None
    special_requirements: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment_plan: Optional[str] = None


@dataclass
class ApproveAdmissionRequest:
    admission_id: str
    bed_id: str
    approved_by: str
    assigned_doctor_id: Optional[str] = None


@dataclass
class RejectAdmissionRequest:
    admission_id: str
    rejected_by: str
    reason: Optional[str] = None


@dataclass
class DischargeAdmissionRequest:
    admission_id: str
    notes: Optional[str] = None


@dataclass
class DischargeResult:
    """``bed_released`` is False when the bed no longer pointed at this admission."""

    admission: Admission
    bed_released: bool


@dataclass
class ListAdmissionsRequest:
    status: Optional[AdmissionStatus] = None
    limit: int = 100
