"""Patient directory DTOs."""

from dataclasses import dataclass, field
from typing import List, Optional

from ...domain.entities.patient import VisitRecord


@dataclass
class SearchPatientsRequest:
    name: str = ""
    father_name: str = ""
    age: Optional[int] = None


@dataclass
class RegisterPatientRequest:
    """Request DTO for patient registration."""

    name: str
    father_name: str
    age: int
    contact: Optional[str] = None


@dataclass
class PatientVisitsResult:
    patient_id: str
    patient_name: str = ""
    visits: List[VisitRecord] = field(default_factory=list)


@dataclass
class CreateDiagnosedVisitRequest:
    patient_id: str
    symptoms: str


@dataclass
class DiagnosedVisitResult:
    """Visit archived with the extracted diagnosis labels."""

    visit: VisitRecord
    assessment: str
    used_fallback: bool

