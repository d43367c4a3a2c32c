"""
Pydantic schemas for the patient directory endpoints.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, validator

from wardflow.domain.entities.patient import PatientRecord, VisitRecord


class RegisterPatientRequest(BaseModel):
    """Request schema for patient registration."""

    name: str = Field(..., min_length=2, max_length=80, description="Patient name")
    father_name: str = Field(..., max_length=80, description="Father's name")
    age: int = Field(..., ge=0, le=150, description="Patient age")
    contact: Optional[str] = Field(None, max_length=20, description="Phone number")

    @validator("name")
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class PatientSchema(BaseModel):
    id: str
    name: str
    father_name: Optional[str] = None
    age: Optional[int] = None
    contact: Optional[str] = None
    visit_count: int = 0
    risk_level: Optional[str] = None

    @classmethod
    def from_domain(cls, patient: PatientRecord) -> "PatientSchema":
        return cls(
            id=patient.record_id,
            name=patient.name,
            father_name=patient.father_name,
            age=patient.age,
            contact=patient.contact,
            visit_count=patient.visit_count,
            risk_level=patient.risk_level,
        )


class VisitRecordSchema(BaseModel):
    id: str
    patient_id: Optional[str] = None
    visit_date: Optional[str] = None
    symptoms: Optional[str] = None
    diagnosis: Optional[str] = None

    @classmethod
    def from_domain(cls, visit: VisitRecord, patient_id: Optional[str] = None) -> "VisitRecordSchema":
        return cls(
            id=visit.record_id,
            patient_id=visit.patient_ids[0] if visit.patient_ids else patient_id,
            visit_date=visit.visit_date,
            symptoms=visit.symptoms,
            diagnosis=visit.diagnosis,
        )


class PatientVisitsResponse(BaseModel):
    patient_id: str
    patient_name: str = ""
    visits: List[VisitRecordSchema] = Field(default_factory=list)


class CreateDiagnosedVisitRequest(BaseModel):
    symptoms: str = Field(..., min_length=3, max_length=5000, description="Free-text symptoms")


class DiagnosedVisitResponse(BaseModel):
    visit: VisitRecordSchema
    assessment: str = Field(..., description="Full AI assessment text")
    used_fallback: bool = Field(..., description="True when the AI was unavailable")
