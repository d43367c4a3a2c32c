"""Search the patient directory by name, father's name and optional age."""

import logging
from typing import List

from ...core.resilience import PATIENT_SEARCH_POLICY, ResilientCallExecutor
from ...domain.entities.patient import PatientRecord
from ..dto.patient_dto import SearchPatientsRequest
from ..ports.services.record_store import RecordStore
from ..utils.record_fields import (
    PATIENTS_TABLE,
    build_patient_search_formula,
    patient_from_record,
)

logger = logging.getLogger(__name__)


class SearchPatientsUseCase:
    """Raises ``RetryExhaustedError`` once the retry budget is spent."""

    def __init__(
        self, record_store: RecordStore, executor: ResilientCallExecutor, max_records: int = 10
    ):
        self._record_store = record_store
        self._executor = executor
        self._max_records = max_records

    async def execute(self, request: SearchPatientsRequest) -> List[PatientRecord]:
        formula = build_patient_search_formula(
            request.name, request.father_name, request.age
        )
        logger.info(f"🔍 Searching patients with formula: {formula}")

        async def _search():
            return await self._record_store.list_records(
                PATIENTS_TABLE, filter_formula=formula, max_records=self._max_records
            )

        records = await self._executor.run(_search, PATIENT_SEARCH_POLICY)
        patients = [patient_from_record(record) for record in records]
        logger.info(f"👥 Found {len(patients)} matching patients")
        return patients
