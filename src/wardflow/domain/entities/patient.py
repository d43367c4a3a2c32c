"""Patient directory records held in the external record store."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class PatientRecord:
    """Patient row from the ``Patients`` table."""

    record_id: str
    name: str
    father_name: Optional[str] = None
    age: Optional[int] = None
    contact: Optional[str] = None
    visit_count: int = 0
    risk_level: Optional[str] = None
    created_time: Optional[str] = None


@dataclass
class VisitRecord:
    """Visit row from the ``Visits`` table (diagnosis archive)."""

    record_id: str
    patient_ids: List[str] = field(default_factory=list)
    visit_date: Optional[str] = None
    symptoms: Optional[str] = None
    diagnosis: Optional[str] = None
    created_time: Optional[str] = None
