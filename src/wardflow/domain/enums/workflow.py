"""Status and classification enums for visits, admissions and beds."""

from enum import Enum


class VisitStatus(str, Enum):
    WAITING = "waiting"
    IN_CONSULTATION = "in_consultation"
    COMPLETED = "completed"
    ADMISSION_REQUESTED = "admission_requested"


class VisitPriority(str, Enum):
    NORMAL = "normal"
    URGENT = "urgent"
    EMERGENCY = "emergency"


class AdmissionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    ACTIVE = "active"
    REJECTED = "rejected"
    DISCHARGED = "discharged"


class AdmissionUrgency(str, Enum):
    ROUTINE = "routine"
    URGENT = "urgent"
    EMERGENCY = "emergency"


class AdmissionType(str, Enum):
    ELECTIVE = "elective"
    EMERGENCY = "emergency"


class BedStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    RESERVED = "reserved"


class TriagePriority(str, Enum):
    IMMEDIATE = "immediate"
    URGENT = "urgent"
    SEMI_URGENT = "semi-urgent"
    NON_URGENT = "non-urgent"
