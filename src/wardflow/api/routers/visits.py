"""Outpatient visit lifecycle and queue endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Query, status

from wardflow.application.dto.visit_dto import (
    CallNextRequest,
    CheckInRequest,
    CompleteConsultationRequest,
    QueueRequest,
    UpdateVisitStatusRequest,
)
from wardflow.application.use_cases.call_next_patient import CallNextPatientUseCase
from wardflow.application.use_cases.check_in_visit import CheckInVisitUseCase
from wardflow.application.use_cases.complete_consultation import CompleteConsultationUseCase
from wardflow.application.use_cases.get_queue import GetQueueUseCase
from wardflow.application.use_cases.update_visit_status import UpdateVisitStatusUseCase

from ..deps import SequenceRepositoryDep, VisitRepositoryDep
from ..schemas import visits as schemas
from ..schemas.common import ErrorResponse

router = APIRouter(prefix="/visits", tags=["visits"])
logger = logging.getLogger(__name__)

_LIFECYCLE_ERRORS = {
    404: {"model": ErrorResponse, "description": "Visit not found"},
    409: {"model": ErrorResponse, "description": "Illegal transition or concurrent update"},
}


@router.post("/check-in", response_model=schemas.VisitSchema, status_code=status.HTTP_201_CREATED)
async def check_in(
    request: schemas.CheckInRequest,
    visit_repo: VisitRepositoryDep,
    sequences: SequenceRepositoryDep,
):
    """Put a patient into a department queue with the next token number."""
    use_case = CheckInVisitUseCase(visit_repo, sequences)
    visit = await use_case.execute(
        CheckInRequest(
            patient_id=request.patient_id,
            department=request.department,
            patient_name=request.patient_name,
            doctor_id=request.doctor_id,
            priority=request.priority,
            symptoms=request.symptoms,
        )
    )
    return schemas.VisitSchema.from_domain(visit)


@router.put("/status", response_model=schemas.VisitSchema, responses=_LIFECYCLE_ERRORS)
async def update_visit_status(request: schemas.UpdateVisitStatusRequest, visit_repo: VisitRepositoryDep):
    use_case = UpdateVisitStatusUseCase(visit_repo)
    visit = await use_case.execute(
        UpdateVisitStatusRequest(visit_id=request.visit_id, status=request.status)
    )
    return schemas.VisitSchema.from_domain(visit)


@router.post("/next", response_model=schemas.CallNextResponse)
async def call_next_patient(request: schemas.CallNextRequest, visit_repo: VisitRepositoryDep):
    """
    Call the next waiting patient into consultation.

    An empty queue is not an error: ``called`` is false and ``message`` says so.
    """
    use_case = CallNextPatientUseCase(visit_repo)
    result = await use_case.execute(
        CallNextRequest(doctor_id=request.doctor_id, department=request.department)
    )
    return schemas.CallNextResponse(
        called=result.called,
        message=result.message,
        visit=schemas.VisitSchema.from_domain(result.visit) if result.visit else None,
        remaining=result.remaining,
    )


@router.get("/queue", response_model=schemas.QueueResponse)
async def get_queue(
    visit_repo: VisitRepositoryDep,
    doctor_id: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
):
    use_case = GetQueueUseCase(visit_repo)
    snapshot = await use_case.execute(QueueRequest(doctor_id=doctor_id, department=department))
    next_visit = snapshot.next_visit
    return schemas.QueueResponse(
        waiting=[schemas.VisitSchema.from_domain(v) for v in snapshot.waiting],
        in_consultation=(
            schemas.VisitSchema.from_domain(snapshot.in_consultation)
            if snapshot.in_consultation
            else None
        ),
        next_token=next_visit.token_number if next_visit else None,
        counts=snapshot.counts,
    )


@router.post(
    "/{visit_id}/consultation",
    response_model=schemas.VisitSchema,
    responses=_LIFECYCLE_ERRORS,
)
async def complete_consultation(
    visit_id: str,
    request: schemas.CompleteConsultationRequest,
    visit_repo: VisitRepositoryDep,
):
    """Save the consultation record and mark the visit completed."""
    use_case = CompleteConsultationUseCase(visit_repo)
    visit = await use_case.execute(
        CompleteConsultationRequest(visit_id=visit_id, **request.model_dump())
    )
    logger.info(f"🩺 Consultation completed for visit {visit_id}")
    return schemas.VisitSchema.from_domain(visit)
