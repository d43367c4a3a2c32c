"""Patient directory endpoints backed by the external record store."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Query, status

from wardflow.application.dto.patient_dto import (
    CreateDiagnosedVisitRequest,
    RegisterPatientRequest,
    SearchPatientsRequest,
)
from wardflow.application.use_cases.create_visit_with_diagnosis import (
    CreateVisitWithDiagnosisUseCase,
)
from wardflow.application.use_cases.get_patient_visits import GetPatientVisitsUseCase
from wardflow.application.use_cases.register_patient import RegisterPatientUseCase
from wardflow.application.use_cases.search_patients import SearchPatientsUseCase
from wardflow.core.config import get_settings

from ..deps import AIGatewayDep, DiagnosisExtractorDep, ExecutorDep, RecordStoreDep
from ..schemas import patients as schemas
from ..schemas.common import ErrorResponse

router = APIRouter(prefix="/patients", tags=["patients"])
logger = logging.getLogger(__name__)


@router.get(
    "/search",
    response_model=List[schemas.PatientSchema],
    responses={
        429: {"model": ErrorResponse, "description": "Record store rate limited"},
        503: {"model": ErrorResponse, "description": "Record store unavailable"},
    },
)
async def search_patients(
    record_store: RecordStoreDep,
    executor: ExecutorDep,
    name: str = Query("", description="Substring of the patient name"),
    father_name: str = Query("", description="Substring of the father's name"),
    age: Optional[int] = Query(None, ge=0, le=150),
):
    use_case = SearchPatientsUseCase(
        record_store, executor, max_records=get_settings().record_store.search_max_records
    )
    patients = await use_case.execute(
        SearchPatientsRequest(name=name, father_name=father_name, age=age)
    )
    return [schemas.PatientSchema.from_domain(patient) for patient in patients]


@router.post(
    "",
    response_model=schemas.PatientSchema,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: {"model": ErrorResponse, "description": "Invalid patient data"},
        502: {"model": ErrorResponse, "description": "Record store rejected the request"},
    },
)
async def register_patient(request: schemas.RegisterPatientRequest, record_store: RecordStoreDep):
    """Create a patient row in the record store (single attempt)."""
    use_case = RegisterPatientUseCase(record_store)
    patient = await use_case.execute(
        RegisterPatientRequest(
            name=request.name,
            father_name=request.father_name,
            age=request.age,
            contact=request.contact,
        )
    )
    logger.info(f"✅ Registered patient {patient.record_id}")
    return schemas.PatientSchema.from_domain(patient)


@router.get("/{patient_id}/visits", response_model=schemas.PatientVisitsResponse)
async def get_patient_visits(patient_id: str, record_store: RecordStoreDep, executor: ExecutorDep):
    """
    Visit history for a patient, newest first.

    Record store failures degrade to an empty list.
    """
    use_case = GetPatientVisitsUseCase(
        record_store, executor, max_records=get_settings().record_store.max_records
    )
    result = await use_case.execute(patient_id)
    return schemas.PatientVisitsResponse(
        patient_id=result.patient_id,
        patient_name=result.patient_name,
        visits=[schemas.VisitRecordSchema.from_domain(v, patient_id) for v in result.visits],
    )


@router.post(
    "/{patient_id}/visits",
    response_model=schemas.DiagnosedVisitResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        502: {"model": ErrorResponse, "description": "Record store rejected the visit"},
        504: {"model": ErrorResponse, "description": "AI request timed out"},
    },
)
async def create_visit_with_diagnosis(
    patient_id: str,
    request: schemas.CreateDiagnosedVisitRequest,
    record_store: RecordStoreDep,
    ai_gateway: AIGatewayDep,
    extractor: DiagnosisExtractorDep,
    executor: ExecutorDep,
):
    """
    Archive a visit with AI-suggested diagnoses.

    This endpoint:
    1. Asks the AI for possible diagnoses (fallback text when unavailable)
    2. Extracts up to ten diagnosis labels
    3. Stores the visit linked to the patient, retrying writes the record store rejected outright
    """
    use_case = CreateVisitWithDiagnosisUseCase(record_store, ai_gateway, extractor, executor)
    result = await use_case.execute(
        CreateDiagnosedVisitRequest(patient_id=patient_id, symptoms=request.symptoms)
    )
    return schemas.DiagnosedVisitResponse(
        visit=schemas.VisitRecordSchema.from_domain(result.visit, patient_id),
        assessment=result.assessment,
        used_fallback=result.used_fallback,
    )
