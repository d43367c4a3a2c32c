"""Finalize a consultation: save the notes, then mark the visit completed."""

import logging

from ...domain.entities.visit import ConsultationRecord, Visit
from ...domain.errors import ConcurrentUpdateError
from ...domain.enums import VisitStatus
from ...domain.state_machine import VISIT_TRANSITIONS
from ..dto.visit_dto import CompleteConsultationRequest
from ..ports.repositories.visit_repo import VisitRepository
from ..utils.lookups import require_visit

logger = logging.getLogger(__name__)


class CompleteConsultationUseCase:
    def __init__(self, visit_repository: VisitRepository):
        self._visit_repository = visit_repository

    async def execute(self, request: CompleteConsultationRequest) -> Visit:
        visit = await require_visit(self._visit_repository, request.visit_id)
        VISIT_TRANSITIONS.validate(visit.visit_id.value, visit.status, VisitStatus.COMPLETED)

        visit.record_consultation(
            ConsultationRecord(
                chief_complaint=request.chief_complaint,
                history_of_present_illness=request.history_of_present_illness,
                examination_notes=request.examination_notes,
                diagnosis=request.diagnosis,
                treatment_plan=request.treatment_plan,
                follow_up_instructions=request.follow_up_instructions,
                started_at=request.started_at,
                ended_at=request.ended_at,
            )
        )
        if not await self._visit_repository.save_if_status(visit, VisitStatus.IN_CONSULTATION):
            raise ConcurrentUpdateError("visit", request.visit_id)
        logger.info(f"📝 Consultation record saved for visit {request.visit_id}")

        visit.transition_to(VisitStatus.COMPLETED)
        if not await self._visit_repository.save_if_status(visit, VisitStatus.IN_CONSULTATION):
            raise ConcurrentUpdateError("visit", request.visit_id)
        logger.info(f"✅ Visit {request.visit_id} completed")
        return visit
