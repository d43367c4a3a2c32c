"""Patient has arrived on the ward: ``approved -> active``."""

import logging

from ...domain.entities.admission import Admission
from ...domain.errors import ConcurrentUpdateError
from ...domain.enums import AdmissionStatus
from ..ports.repositories.admission_repo import AdmissionRepository
from ..utils.lookups import require_admission

logger = logging.getLogger(__name__)


class ActivateAdmissionUseCase:
    def __init__(self, admission_repository: AdmissionRepository):
        self._admission_repository = admission_repository

    async def execute(self, admission_id: str) -> Admission:
        admission = await require_admission(self._admission_repository, admission_id)
        admission.activate()
        if not await self._admission_repository.save_if_status(
            admission, AdmissionStatus.APPROVED
        ):
            raise ConcurrentUpdateError("admission", admission_id)

        logger.info(f"🏨 Admission {admission.admission_number} is now active")
        return admission
