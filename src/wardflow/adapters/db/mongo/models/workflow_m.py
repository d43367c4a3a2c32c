"""
MongoDB Beanie models for the hospital workflow collections.
"""

from datetime import datetime
from typing import List, Optional

from beanie import Document
from pydantic import BaseModel, Field
from pymongo import ASCENDING, IndexModel

from wardflow.core.utils.datetime_utils import utc_now


class ConsultationRecordMongo(BaseModel):
    """Embedded consultation notes."""

    chief_complaint: Optional[str] = None
    history_of_present_illness: Optional[str] = None
    examination_notes: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment_plan: Optional[str] = None
    follow_up_instructions: Optional[str] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None


class VisitMongo(Document):
    """MongoDB model for an outpatient visit."""

    visit_id: str = Field(..., description="Visit ID")
    patient_id: str = Field(..., description="Patient record reference")
    patient_name: Optional[str] = None
    department: str = Field(..., description="Department queue")
    doctor_id: Optional[str] = None
    status: str = Field(default="waiting")  # waiting, in_consultation, completed, admission_requested
    priority: str = Field(default="normal")  # normal, urgent, emergency
    token_number: int = Field(default=0)
    queue_position: int = Field(default=0)
    symptoms: Optional[str] = None
    diagnosis: Optional[str] = None
    consultation: Optional[ConsultationRecordMongo] = None
    checked_in_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "visits"
        indexes = [
            IndexModel([("visit_id", ASCENDING)], unique=True),
            "status",
            "doctor_id",
            "department",
            "queue_position",
        ]


class AdmissionMongo(Document):
    """MongoDB model for an admission request."""

    admission_id: str = Field(..., description="Admission ID")
    admission_number: str = Field(..., description="Human-readable admission number")
    patient_id: str
    visit_id: str
    requested_by: str
    reason: str
    ward_type: str
    urgency: str = Field(default="routine")
    admission_type: str = Field(default="elective")
    status: str = Field(default="pending")  # pending, approved, active, rejected, discharged
    ward_id: Optional[str] = None
    bed_id: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment_plan: Optional[str] = None
    estimated_stay_days: Optional[int] = None
    special_requirements: Optional[str] = None
    approved_by: Optional[str] = None
    assigned_doctor_id: Optional[str] = None
    rejection_reason: Optional[str] = None
    discharge_notes: Optional[str] = None
    requested_at: datetime = Field(default_factory=utc_now)
    approved_at: Optional[datetime] = None
    admitted_at: Optional[datetime] = None
    discharged_at: Optional[datetime] = None
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "admissions"
        indexes = [
            IndexModel([("admission_id", ASCENDING)], unique=True),
            "status",
            "requested_at",
        ]


class WardMongo(Document):
    ward_id: str = Field(..., description="Ward ID")
    name: str
    ward_type: str
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "wards"
        indexes = [IndexModel([("ward_id", ASCENDING)], unique=True), "ward_type"]


class BedMongo(Document):
    bed_id: str = Field(..., description="Bed ID")
    ward_id: str
    bed_number: str
    bed_type: str = "standard"
    status: str = Field(default="available")  # available, occupied, maintenance, reserved
    current_patient_id: Optional[str] = None
    current_admission_id: Optional[str] = None
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "beds"
        indexes = [
            IndexModel([("bed_id", ASCENDING)], unique=True),
            "ward_id",
            "status",
        ]


class CounterMongo(Document):
    """Named monotonic counter (token numbers, queue positions)."""

    key: str
    value: int = 0

    class Settings:
        name = "counters"
        indexes = [IndexModel([("key", ASCENDING)], unique=True)]


WORKFLOW_DOCUMENT_MODELS: List[type] = [
    VisitMongo,
    AdmissionMongo,
    WardMongo,
    BedMongo,
    CounterMongo,
]
