"""List a patient's archived visits, newest first."""

import logging

from ...core.errors import ExternalServiceError
from ...core.resilience import VISIT_LISTING_POLICY, ResilientCallExecutor
from ..dto.patient_dto import PatientVisitsResult
from ..ports.services.record_store import RecordStore
from ..utils.record_fields import (
    FIELD_NAME,
    FIELD_VISIT_DATE,
    PATIENTS_TABLE,
    VISITS_TABLE,
    is_linked_to,
    visit_from_record,
)

logger = logging.getLogger(__name__)


class GetPatientVisitsUseCase:
    """Dashboard read path: degrades to an empty list instead of failing.

    The record store cannot filter on linked-record ids, so the most recent
    visits are fetched and filtered here.
    """

    def __init__(
        self, record_store: RecordStore, executor: ResilientCallExecutor, max_records: int = 1000
    ):
        self._record_store = record_store
        self._executor = executor
        self._max_records = max_records

    async def execute(self, patient_id: str) -> PatientVisitsResult:
        patient_name = await self._patient_name(patient_id)

        async def _list_visits():
            return await self._record_store.list_records(
                VISITS_TABLE,
                max_records=self._max_records,
                sort_field=FIELD_VISIT_DATE,
                sort_direction="desc",
            )

        records = await self._executor.run_or_default(
            _list_visits, VISIT_LISTING_POLICY, default=list
        )
        visits = [visit_from_record(r) for r in records if is_linked_to(r, patient_id)]
        logger.info(f"🎯 Found {len(visits)} visits for patient {patient_id}")
        return PatientVisitsResult(
            patient_id=patient_id, patient_name=patient_name, visits=visits
        )

    async def _patient_name(self, patient_id: str) -> str:
        try:
            record = await self._record_store.get_record(PATIENTS_TABLE, patient_id)
        except ExternalServiceError as exc:
            logger.warning(f"⚠️ Could not fetch patient name for {patient_id}: {exc}")
            return ""
        return (record.get("fields") or {}).get(FIELD_NAME, "")
