"""Approve a pending admission and claim its bed."""

import logging

from ...domain.entities.admission import Admission
from ...domain.errors import BedUnavailableError, ConcurrentUpdateError
from ...domain.enums import AdmissionStatus, BedStatus
from ...domain.state_machine import ADMISSION_TRANSITIONS
from ...domain.value_objects.record_id import BedId
from ..dto.admission_dto import ApproveAdmissionRequest
from ..ports.repositories.admission_repo import AdmissionRepository
from ..ports.repositories.ward_repo import WardRepository
from ..utils.lookups import require_admission, require_bed

logger = logging.getLogger(__name__)


class ApproveAdmissionUseCase:
    """Compound approval: bed ``available -> occupied`` then admission ``pending -> approved``.

    The bed claim is a conditional write on ``status == available``; of two
    approvals racing for the same bed exactly one wins, the other gets
    ``BedUnavailableError`` and leaves the bed alone. If the admission write
    then loses its own race, the bed is handed back.
    """

    def __init__(
        self, admission_repository: AdmissionRepository, ward_repository: WardRepository
    ):
        self._admission_repository = admission_repository
        self._ward_repository = ward_repository

    async def execute(self, request: ApproveAdmissionRequest) -> Admission:
        if not (request.bed_id or "").strip():
            raise ValueError("bed_id is required to approve an admission")
        if not (request.approved_by or "").strip():
            raise ValueError("approved_by is required to approve an admission")

        admission = await require_admission(self._admission_repository, request.admission_id)
        ADMISSION_TRANSITIONS.validate(
            admission.admission_id.value, admission.status, AdmissionStatus.APPROVED
        )

        bed = await require_bed(self._ward_repository, request.bed_id)
        if admission.ward_id is not None and bed.ward_id != admission.ward_id:
            raise BedUnavailableError(request.bed_id, "bed is not in the requested ward")
        if not bed.is_available():
            raise BedUnavailableError(request.bed_id, f"bed is {bed.status.value}")

        bed.occupy(admission.admission_id, admission.patient_id)
        if not await self._ward_repository.save_bed_if(bed, BedStatus.AVAILABLE):
            logger.warning(
                f"⚠️ Bed {request.bed_id} was claimed by another approval; "
                f"admission {admission.admission_number} stays pending"
            )
            raise BedUnavailableError(request.bed_id, "bed was assigned concurrently")
        logger.info(f"🛏️ Bed {bed.bed_number} claimed for {admission.admission_number}")

        admission.approve(
            BedId.from_string(request.bed_id), request.approved_by, request.assigned_doctor_id
        )
        if not await self._admission_repository.save_if_status(
            admission, AdmissionStatus.PENDING
        ):
            logger.warning(
                f"⚠️ Admission {admission.admission_number} changed during approval; "
                f"releasing bed {bed.bed_number}"
            )
            bed.release()
            await self._ward_repository.save_bed_if(
                bed, BedStatus.OCCUPIED, expected_admission_id=admission.admission_id
            )
            raise ConcurrentUpdateError("admission", request.admission_id)

        logger.info(
            f"✅ Admission {admission.admission_number} approved by {request.approved_by}"
        )
        return admission
