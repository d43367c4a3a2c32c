from .workflow import (
    AdmissionStatus,
    AdmissionType,
    AdmissionUrgency,
    BedStatus,
    TriagePriority,
    VisitPriority,
    VisitStatus,
)

__all__ = [
    "AdmissionStatus",
    "AdmissionType",
    "AdmissionUrgency",
    "BedStatus",
    "TriagePriority",
    "VisitPriority",
    "VisitStatus",
]
