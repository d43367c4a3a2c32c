"""Inpatient admission workflow endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Query, status

from wardflow.application.dto.admission_dto import (
    ApproveAdmissionRequest,
    DischargeAdmissionRequest,
    ListAdmissionsRequest,
    RejectAdmissionRequest,
    RequestAdmissionRequest,
)
from wardflow.application.use_cases.activate_admission import ActivateAdmissionUseCase
from wardflow.application.use_cases.approve_admission import ApproveAdmissionUseCase
from wardflow.application.use_cases.discharge_admission import DischargeAdmissionUseCase
from wardflow.application.use_cases.list_admissions import ListAdmissionsUseCase
from wardflow.application.use_cases.reject_admission import RejectAdmissionUseCase
from wardflow.application.use_cases.request_admission import RequestAdmissionUseCase
from wardflow.domain.enums import AdmissionStatus

from ..deps import AdmissionRepositoryDep, VisitRepositoryDep, WardRepositoryDep
from ..schemas import admissions as schemas
from ..schemas.common import ErrorResponse

router = APIRouter(prefix="/admissions", tags=["admissions"])
logger = logging.getLogger(__name__)

_TRANSITION_ERRORS = {
    404: {"model": ErrorResponse, "description": "Admission not found"},
    409: {"model": ErrorResponse, "description": "Illegal transition or concurrent update"},
}


@router.post(
    "/request",
    response_model=schemas.AdmissionSchema,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ErrorResponse, "description": "Visit not found"},
        409: {"model": ErrorResponse, "description": "No beds available or illegal transition"},
    },
)
async def request_admission(
    request: schemas.RequestAdmissionRequest,
    visit_repo: VisitRepositoryDep,
    admission_repo: AdmissionRepositoryDep,
    ward_repo: WardRepositoryDep,
):
    """
    File an admission request from a visit.

    The visit moves to ``admission_requested`` and a pending admission is
    created in the ward of the requested type with the most free beds.
    """
    use_case = RequestAdmissionUseCase(visit_repo, admission_repo, ward_repo)
    admission = await use_case.execute(
        RequestAdmissionRequest(
            visit_id=request.visit_id,
            requested_by=request.requested_by,
            reason=request.reason,
            ward_type=request.ward_type,
            urgency=request.urgency,
            estimated_stay_days=request.estimated_stay_days,
            special_requirements=request.special_requirements,
            diagnosis=request.diagnosis,
            treatment_plan=request.treatment_plan,
        )
    )
    return schemas.AdmissionSchema.from_domain(admission)


@router.get("", response_model=List[schemas.AdmissionSchema])
async def list_admissions(
    admission_repo: AdmissionRepositoryDep,
    status_filter: Optional[AdmissionStatus] = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
):
    use_case = ListAdmissionsUseCase(admission_repo)
    admissions = await use_case.execute(ListAdmissionsRequest(status=status_filter, limit=limit))
    return [schemas.AdmissionSchema.from_domain(a) for a in admissions]


@router.post(
    "/{admission_id}/approve",
    response_model=schemas.AdmissionSchema,
    responses={
        404: {"model": ErrorResponse, "description": "Admission or bed not found"},
        409: {"model": ErrorResponse, "description": "Bed unavailable or illegal transition"},
    },
)
async def approve_admission(
    admission_id: str,
    request: schemas.ApproveAdmissionRequest,
    admission_repo: AdmissionRepositoryDep,
    ward_repo: WardRepositoryDep,
):
    """Approve a pending admission and claim the bed for it."""
    use_case = ApproveAdmissionUseCase(admission_repo, ward_repo)
    admission = await use_case.execute(
        ApproveAdmissionRequest(
            admission_id=admission_id,
            bed_id=request.bed_id,
            approved_by=request.approved_by,
            assigned_doctor_id=request.assigned_doctor_id,
        )
    )
    return schemas.AdmissionSchema.from_domain(admission)


@router.post(
    "/{admission_id}/reject", response_model=schemas.AdmissionSchema, responses=_TRANSITION_ERRORS
)
async def reject_admission(
    admission_id: str,
    request: schemas.RejectAdmissionRequest,
    admission_repo: AdmissionRepositoryDep,
):
    use_case = RejectAdmissionUseCase(admission_repo)
    admission = await use_case.execute(
        RejectAdmissionRequest(
            admission_id=admission_id, rejected_by=request.rejected_by, reason=request.reason
        )
    )
    return schemas.AdmissionSchema.from_domain(admission)


@router.post(
    "/{admission_id}/activate", response_model=schemas.AdmissionSchema, responses=_TRANSITION_ERRORS
)
async def activate_admission(admission_id: str, admission_repo: AdmissionRepositoryDep):
    """Mark an approved admission as active (patient arrived on the ward)."""
    use_case = ActivateAdmissionUseCase(admission_repo)
    admission = await use_case.execute(admission_id)
    return schemas.AdmissionSchema.from_domain(admission)


@router.post(
    "/{admission_id}/discharge",
    response_model=schemas.DischargeResponse,
    responses=_TRANSITION_ERRORS,
)
async def discharge_admission(
    admission_id: str,
    admission_repo: AdmissionRepositoryDep,
    ward_repo: WardRepositoryDep,
    request: Optional[schemas.DischargeAdmissionRequest] = None,
):
    use_case = DischargeAdmissionUseCase(admission_repo, ward_repo)
    result = await use_case.execute(
        DischargeAdmissionRequest(
            admission_id=admission_id, notes=request.notes if request else None
        )
    )
    if not result.bed_released:
        logger.warning(f"⚠️ Admission {admission_id} discharged without releasing a bed")
    return schemas.DischargeResponse(
        admission=schemas.AdmissionSchema.from_domain(result.admission),
        bed_released=result.bed_released,
    )
