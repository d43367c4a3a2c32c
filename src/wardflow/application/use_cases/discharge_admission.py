"""Discharge an admission and hand its bed back."""

import logging

from ...domain.errors import ConcurrentUpdateError
from ...domain.enums import BedStatus
from ..dto.admission_dto import DischargeAdmissionRequest, DischargeResult
from ..ports.repositories.admission_repo import AdmissionRepository
from ..ports.repositories.ward_repo import WardRepository
from ..utils.lookups import require_admission

logger = logging.getLogger(__name__)


class DischargeAdmissionUseCase:
    """``approved|active -> discharged``, then ``occupied -> available`` on the bed.

    The bed is released only while it still points at this admission. When it
    does not, the discharge still stands and the result says the bed was not
    released so ward staff can reconcile it.
    """

    def __init__(
        self, admission_repository: AdmissionRepository, ward_repository: WardRepository
    ):
        self._admission_repository = admission_repository
        self._ward_repository = ward_repository

    async def execute(self, request: DischargeAdmissionRequest) -> DischargeResult:
        admission = await require_admission(self._admission_repository, request.admission_id)
        previous = admission.status
        admission.discharge(request.notes)
        if not await self._admission_repository.save_if_status(admission, previous):
            raise ConcurrentUpdateError("admission", request.admission_id)
        logger.info(f"🏁 Admission {admission.admission_number} discharged")

        bed_released = await self._release_bed(admission)
        return DischargeResult(admission=admission, bed_released=bed_released)

    async def _release_bed(self, admission) -> bool:
        if admission.bed_id is None:
            return False

        bed = await self._ward_repository.find_bed(admission.bed_id)
        if (
            bed is None
            or bed.status != BedStatus.OCCUPIED
            or bed.current_admission_id != admission.admission_id
        ):
            logger.warning(
                f"⚠️ Bed {admission.bed_id} no longer held by admission "
                f"{admission.admission_number}; not released, needs reconciliation"
            )
            return False

        bed.release()
        released = await self._ward_repository.save_bed_if(
            bed, BedStatus.OCCUPIED, expected_admission_id=admission.admission_id
        )
        if released:
            logger.info(f"🛏️ Bed {bed.bed_number} released")
        else:
            logger.warning(
                f"⚠️ Bed {bed.bed_number} changed while releasing it for "
                f"{admission.admission_number}; needs reconciliation"
            )
        return released
