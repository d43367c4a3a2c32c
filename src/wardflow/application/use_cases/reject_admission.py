"""Reject a pending admission; no bed is touched."""

import logging

from ...domain.entities.admission import Admission
from ...domain.errors import ConcurrentUpdateError
from ...domain.enums import AdmissionStatus
from ..dto.admission_dto import RejectAdmissionRequest
from ..ports.repositories.admission_repo import AdmissionRepository
from ..utils.lookups import require_admission

logger = logging.getLogger(__name__)


class RejectAdmissionUseCase:
    def __init__(self, admission_repository: AdmissionRepository):
        self._admission_repository = admission_repository

    async def execute(self, request: RejectAdmissionRequest) -> Admission:
        if not (request.rejected_by or "").strip():
            raise ValueError("rejected_by is required to reject an admission")

        admission = await require_admission(self._admission_repository, request.admission_id)
        admission.reject(request.rejected_by, request.reason)
        if not await self._admission_repository.save_if_status(
            admission, AdmissionStatus.PENDING
        ):
            raise ConcurrentUpdateError("admission", request.admission_id)

        logger.info(f"🚫 Admission {admission.admission_number} rejected")
        return admission
