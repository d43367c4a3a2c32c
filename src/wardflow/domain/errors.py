"""
Domain exceptions for the clinical workflow.

All domain errors carry a machine-readable ``error_code`` and optional
``details``; the API layer renders them without further translation.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain rule violations."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class NotFoundError(DomainError):
    """Referenced entity does not exist."""


class ConflictError(DomainError):
    """Request is valid but collides with the current state."""


class IllegalTransitionError(ConflictError):
    def __init__(self, entity: str, entity_id: str, current: str, requested: str):
        super().__init__(
            f"Cannot move {entity} {entity_id} from '{current}' to '{requested}'",
            "ILLEGAL_TRANSITION",
            {
                "entity": entity,
                "entity_id": entity_id,
                "current_status": current,
                "requested_status": requested,
            },
        )


class VisitNotFoundError(NotFoundError):
    def __init__(self, visit_id: str):
        super().__init__(
            f"Visit not found: {visit_id}", "VISIT_NOT_FOUND", {"visit_id": visit_id}
        )


class PatientNotFoundError(NotFoundError):
    def __init__(self, patient_id: str):
        super().__init__(
            f"Patient not found: {patient_id}",
            "PATIENT_NOT_FOUND",
            {"patient_id": patient_id},
        )


class AdmissionNotFoundError(NotFoundError):
    def __init__(self, admission_id: str):
        super().__init__(
            f"Admission not found: {admission_id}",
            "ADMISSION_NOT_FOUND",
            {"admission_id": admission_id},
        )


class BedNotFoundError(NotFoundError):
    def __init__(self, bed_id: str):
        super().__init__(f"Bed not found: {bed_id}", "BED_NOT_FOUND", {"bed_id": bed_id})


class WardNotFoundError(NotFoundError):
    def __init__(self, ward_id: str):
        super().__init__(
            f"Ward not found: {ward_id}", "WARD_NOT_FOUND", {"ward_id": ward_id}
        )


class BedUnavailableError(ConflictError):
    """The bed could not be claimed for this admission."""

    def __init__(self, bed_id: str, reason: str):
        super().__init__(
            f"Bed {bed_id} cannot be assigned: {reason}",
            "BED_UNAVAILABLE",
            {"bed_id": bed_id, "reason": reason},
        )


class NoBedsAvailableError(ConflictError):
    def __init__(self, ward_type: str):
        super().__init__(
            "No available beds in the requested ward type. "
            "Please try again later or contact administration.",
            "NO_BEDS_AVAILABLE",
            {"ward_type": ward_type},
        )


class ConcurrentUpdateError(ConflictError):
    """A conditional update matched nothing because another writer got there first."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            f"{entity} {entity_id} was modified concurrently; reload and retry",
            "CONCURRENT_UPDATE",
            {"entity": entity, "entity_id": entity_id},
        )


class InvalidPatientDataError(DomainError):
    def __init__(self, field: str, value: Any):
        super().__init__(
            f"Invalid patient data for '{field}': {value}",
            "INVALID_PATIENT_DATA",
            {"field": field, "value": value},
        )


class WorkflowStepRequiredError(ConflictError):
    """The requested status can only be reached through its own operation."""

    def __init__(self, visit_id: str, requested: str, required_step: str):
        super().__init__(
            f"Visit {visit_id} cannot be set to '{requested}' directly: {required_step}",
            "WORKFLOW_STEP_REQUIRED",
            {"visit_id": visit_id, "requested_status": requested, "required_step": required_step},
        )
