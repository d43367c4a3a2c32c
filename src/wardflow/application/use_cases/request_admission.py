"""File an admission request from an outpatient visit."""

import logging
from typing import List, Optional

from ...core.utils.datetime_utils import utc_now
from ...domain.entities.admission import Admission, build_admission_number
from ...domain.entities.ward import Ward, WardOccupancy
from ...domain.errors import ConcurrentUpdateError, NoBedsAvailableError
from ...domain.enums import AdmissionType, AdmissionUrgency, VisitStatus
from ...domain.state_machine import VISIT_TRANSITIONS
from ...domain.value_objects.record_id import AdmissionId
from ..dto.admission_dto import RequestAdmissionRequest
from ..ports.repositories.admission_repo import AdmissionRepository
from ..ports.repositories.visit_repo import VisitRepository
from ..ports.repositories.ward_repo import WardRepository
from ..utils.lookups import require_visit

logger = logging.getLogger(__name__)


class RequestAdmissionUseCase:
    """Creates a pending admission and moves the visit to ``admission_requested``.

    The ward is pre-selected: among active wards of the requested type, the one
    with the most available beds. The bed itself is chosen at approval time.
    """

    def __init__(
        self,
        visit_repository: VisitRepository,
        admission_repository: AdmissionRepository,
        ward_repository: WardRepository,
    ):
        self._visit_repository = visit_repository
        self._admission_repository = admission_repository
        self._ward_repository = ward_repository

    async def execute(self, request: RequestAdmissionRequest) -> Admission:
        for field_name in ("visit_id", "requested_by", "reason", "ward_type"):
            if not (getattr(request, field_name) or "").strip():
                raise ValueError(f"{field_name} is required")

        visit = await require_visit(self._visit_repository, request.visit_id)
        previous = visit.status
        VISIT_TRANSITIONS.validate(
            visit.visit_id.value, previous, VisitStatus.ADMISSION_REQUESTED
        )

        ward = await self._select_ward(request.ward_type.strip().lower())
        if ward is None:
            raise NoBedsAvailableError(request.ward_type)

        consultation = visit.consultation
        diagnosis = request.diagnosis or visit.diagnosis
        treatment_plan = request.treatment_plan
        if consultation:
            diagnosis = request.diagnosis or consultation.diagnosis or visit.diagnosis
            treatment_plan = request.treatment_plan or consultation.treatment_plan
        now = utc_now()
        admission = Admission(
            admission_id=AdmissionId.generate(),
            admission_number=build_admission_number(now),
            patient_id=visit.patient_id,
            visit_id=visit.visit_id,
            requested_by=request.requested_by,
            reason=request.reason.strip(),
            ward_type=request.ward_type,
            urgency=request.urgency,
            admission_type=(
                AdmissionType.EMERGENCY
                if request.urgency == AdmissionUrgency.EMERGENCY
                else AdmissionType.ELECTIVE
            ),
            ward_id=ward.ward_id,
            diagnosis=diagnosis,
            treatment_plan=treatment_plan,
            estimated_stay_days=request.estimated_stay_days,
            special_requirements=request.special_requirements,
            requested_at=now,
            updated_at=now,
        )

        visit.transition_to(VisitStatus.ADMISSION_REQUESTED)
        if not await self._visit_repository.save_if_status(visit, previous):
            raise ConcurrentUpdateError("visit", request.visit_id)

        try:
            await self._admission_repository.save(admission)
        except Exception:
            logger.error(
                f"❌ Could not store admission for visit {request.visit_id}; "
                f"reverting visit to {previous.value}",
                exc_info=True,
            )
            visit.status = previous
            await self._visit_repository.save_if_status(visit, VisitStatus.ADMISSION_REQUESTED)
            raise

        logger.info(
            f"🏥 Admission {admission.admission_number} requested for visit "
            f"{request.visit_id} in ward {ward.name}"
        )
        return admission

    async def _select_ward(self, ward_type: str) -> Optional[Ward]:
        wards = await self._ward_repository.list_wards(ward_type=ward_type, active_only=True)
        candidates: List[WardOccupancy] = []
        for ward in wards:
            beds = await self._ward_repository.list_beds(ward_id=ward.ward_id)
            occupancy = WardOccupancy(ward=ward, beds=beds)
            if occupancy.available_beds > 0:
                candidates.append(occupancy)
        if not candidates:
            return None
        candidates.sort(key=lambda occupancy: occupancy.available_beds, reverse=True)
        return candidates[0].ward
