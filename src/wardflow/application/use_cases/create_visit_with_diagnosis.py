"""Archive a visit whose diagnosis is produced by the AI assistant."""

import logging

from ...core.resilience import VISIT_CREATE_POLICY, ResilientCallExecutor
from ...core.utils.datetime_utils import format_record_store_timestamp, utc_now
from ..dto.patient_dto import CreateDiagnosedVisitRequest, DiagnosedVisitResult
from ..ports.services.record_store import RecordStore
from ..services.ai_gateway import AIGateway
from ..utils.diagnosis_extraction import NO_SECTION_FALLBACK, DiagnosisExtractor
from ..utils.record_fields import (
    FIELD_DIAGNOSIS,
    FIELD_LINKED_PATIENT,
    FIELD_SYMPTOMS,
    FIELD_VISIT_DATE,
    VISITS_TABLE,
    visit_from_record,
)

logger = logging.getLogger(__name__)

DIAGNOSIS_PROMPT_TEMPLATE = """
As a medical AI assistant, analyze the following symptoms and provide a comprehensive medical assessment:

PATIENT SYMPTOMS:
{symptoms}

Please provide your response in this EXACT format:

POSSIBLE DIAGNOSES:
1. **Primary Diagnosis Name** - Brief explanation
2. **Secondary Diagnosis Name** - Brief explanation
3. **Alternative Diagnosis Name** - Brief explanation

RECOMMENDED TESTS:
- List specific tests needed

MANAGEMENT ADVICE:
- Treatment recommendations
- When to seek immediate care

IMPORTANT: Make sure to use **bold formatting** for all diagnosis names and number them clearly. Focus on the most likely medical conditions based on the symptoms provided.
"""


class CreateVisitWithDiagnosisUseCase:
    def __init__(
        self,
        record_store: RecordStore,
        ai_gateway: AIGateway,
        extractor: DiagnosisExtractor,
        executor: ResilientCallExecutor,
    ):
        self._record_store = record_store
        self._executor = executor
        self._ai_gateway = ai_gateway
        self._extractor = extractor

    async def execute(self, request: CreateDiagnosedVisitRequest) -> DiagnosedVisitResult:
        symptoms = (request.symptoms or "").strip()
        if not symptoms:
            raise ValueError("Symptoms are required to create a visit")

        logger.info(f"🏥 Creating visit for patient {request.patient_id}")
        reply = await self._ai_gateway.analyze(
            DIAGNOSIS_PROMPT_TEMPLATE.format(symptoms=symptoms)
        )
        # Fallback text carries no patient-specific diagnoses
        if reply.from_fallback:
            diagnosis = NO_SECTION_FALLBACK
        else:
            diagnosis = self._extractor.extract(reply.text)

        fields = {
            FIELD_LINKED_PATIENT: [request.patient_id],
            FIELD_VISIT_DATE: format_record_store_timestamp(utc_now()),
            FIELD_SYMPTOMS: symptoms,
            FIELD_DIAGNOSIS: diagnosis,
        }
        record = await self._executor.run(
            lambda: self._record_store.create_record(VISITS_TABLE, fields),
            VISIT_CREATE_POLICY,
        )
        visit = visit_from_record(record)
        logger.info(f"✅ Created visit {visit.record_id} with diagnosis: {diagnosis[:80]}")
        return DiagnosedVisitResult(
            visit=visit, assessment=reply.text, used_fallback=reply.from_fallback
        )
