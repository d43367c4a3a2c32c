"""Explicit visit status change, validated against the transition table."""

import logging

from ...domain.entities.visit import Visit
from ...domain.errors import ConcurrentUpdateError, WorkflowStepRequiredError
from ...domain.enums import VisitStatus
from ...domain.state_machine import VISIT_TRANSITIONS
from ..dto.visit_dto import UpdateVisitStatusRequest
from ..ports.repositories.visit_repo import VisitRepository
from ..utils.lookups import require_visit

logger = logging.getLogger(__name__)


class UpdateVisitStatusUseCase:
    """Plain status moves only.

    ``admission_requested`` is reached through ``POST /admissions/request``,
    which creates the admission in the same step, and ``completed`` needs the
    consultation notes saved first.
    """

    def __init__(self, visit_repository: VisitRepository):
        self._visit_repository = visit_repository

    async def execute(self, request: UpdateVisitStatusRequest) -> Visit:
        visit = await require_visit(self._visit_repository, request.visit_id)
        previous = visit.status
        VISIT_TRANSITIONS.validate(visit.visit_id.value, previous, request.status)
        self._require_workflow_step(visit, request.status)

        if request.status == VisitStatus.IN_CONSULTATION:
            visit.start_consultation()
        else:
            visit.transition_to(request.status)

        if not await self._visit_repository.save_if_status(visit, previous):
            raise ConcurrentUpdateError("visit", request.visit_id)

        logger.info(
            f"🔁 Visit {request.visit_id}: {previous.value} -> {visit.status.value}"
        )
        return visit

    @staticmethod
    def _require_workflow_step(visit: Visit, target: VisitStatus) -> None:
        if target == VisitStatus.ADMISSION_REQUESTED:
            raise WorkflowStepRequiredError(
                visit.visit_id.value,
                target.value,
                "request the admission through POST /admissions/request",
            )
        if target == VisitStatus.COMPLETED and (
            visit.consultation is None or visit.consultation.ended_at is None
        ):
            raise WorkflowStepRequiredError(
                visit.visit_id.value,
                target.value,
                "save the consultation record through POST /visits/{visit_id}/consultation",
            )
