"""Register a patient in the directory."""

import logging

from ...domain.entities.patient import PatientRecord
from ...domain.errors import InvalidPatientDataError
from ..dto.patient_dto import RegisterPatientRequest
from ..ports.services.record_store import RecordStore
from ..utils.record_fields import (
    FIELD_AGE,
    FIELD_CONTACT,
    FIELD_FATHER_NAME,
    FIELD_NAME,
    PATIENTS_TABLE,
    patient_from_record,
)

logger = logging.getLogger(__name__)


class RegisterPatientUseCase:
    """Write path: a single attempt, failures propagate to the caller."""

    def __init__(self, record_store: RecordStore):
        self._record_store = record_store

    async def execute(self, request: RegisterPatientRequest) -> PatientRecord:
        name = request.name.strip() if request.name else ""
        if not name:
            raise InvalidPatientDataError("name", request.name)
        if request.age is None or not 0 <= request.age <= 150:
            raise InvalidPatientDataError("age", request.age)

        fields = {
            FIELD_NAME: name,
            FIELD_FATHER_NAME: (request.father_name or "").strip(),
            FIELD_AGE: request.age,
        }
        if request.contact:
            fields[FIELD_CONTACT] = request.contact

        record = await self._record_store.create_record(PATIENTS_TABLE, fields)
        patient = patient_from_record(record)
        logger.info(f"👤 Registered patient {patient.record_id}")
        return patient
