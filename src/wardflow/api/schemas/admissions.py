"""
Pydantic schemas for admission endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from wardflow.domain.entities.admission import Admission
from wardflow.domain.enums import AdmissionStatus, AdmissionType, AdmissionUrgency


class RequestAdmissionRequest(BaseModel):
    visit_id: str = Field(..., description="Visit the admission is filed from")
    requested_by: str = Field(..., min_length=1, description="Requesting doctor")
    reason: str = Field(..., min_length=1, description="Admission reason")
    ward_type: str = Field(..., min_length=1, description="Preferred ward type")
    urgency: AdmissionUrgency = AdmissionUrgency.ROUTINE
    estimated_stay_days: Optional[int] = Field(None, ge=1, le=365)
    special_requirements: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment_plan: Optional[str] = None


class ApproveAdmissionRequest(BaseModel):
    bed_id: str = Field(..., min_length=1, description="Bed to assign")
    approved_by: str = Field(..., min_length=1, description="Approving ward administrator")
    assigned_doctor_id: Optional[str] = None


class RejectAdmissionRequest(BaseModel):
    rejected_by: str = Field(..., min_length=1)
    reason: Optional[str] = None


class DischargeAdmissionRequest(BaseModel):
    notes: Optional[str] = None


class AdmissionSchema(BaseModel):
    admission_id: str
    admission_number: str
    patient_id: str
    visit_id: str
    requested_by: str
    reason: str
    ward_type: str
    urgency: AdmissionUrgency
    admission_type: AdmissionType
    status: AdmissionStatus
    ward_id: Optional[str] = None
    bed_id: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment_plan: Optional[str] = None
    estimated_stay_days: Optional[int] = None
    special_requirements: Optional[str] = None
    approved_by: Optional[str] = None
    assigned_doctor_id: Optional[str] = None
    rejection_reason: Optional[str] = None
    requested_at: datetime
    approved_at: Optional[datetime] = None
    admitted_at: Optional[datetime] = None
    discharged_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, admission: Admission) -> "AdmissionSchema":
        return cls(
            admission_id=admission.admission_id.value,
            admission_number=admission.admission_number,
            patient_id=admission.patient_id,
            visit_id=admission.visit_id.value,
            requested_by=admission.requested_by,
            reason=admission.reason,
            ward_type=admission.ward_type,
            urgency=admission.urgency,
            admission_type=admission.admission_type,
            status=admission.status,
            ward_id=admission.ward_id.value if admission.ward_id else None,
            bed_id=admission.bed_id.value if admission.bed_id else None,
            diagnosis=admission.diagnosis,
            treatment_plan=admission.treatment_plan,
            estimated_stay_days=admission.estimated_stay_days,
            special_requirements=admission.special_requirements,
            approved_by=admission.approved_by,
            assigned_doctor_id=admission.assigned_doctor_id,
            rejection_reason=admission.rejection_reason,
            requested_at=admission.requested_at,
            approved_at=admission.approved_at,
            admitted_at=admission.admitted_at,
            discharged_at=admission.discharged_at,
        )


class DischargeResponse(BaseModel):
    admission: AdmissionSchema
    bed_released: bool
