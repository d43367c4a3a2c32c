"""Move the first waiting patient into consultation."""

import logging

from ...domain.enums import VisitStatus
from ..dto.visit_dto import CallNextRequest, CallNextResult
from ..ports.repositories.visit_repo import VisitRepository
from ..services.queue_ordering import order_waiting

logger = logging.getLogger(__name__)

EMPTY_QUEUE_MESSAGE = "No patients waiting in queue"


class CallNextPatientUseCase:
    """An empty queue is reported, not raised.

    If another caller claims the head of the queue between the read and the
    conditional write, the next waiting visit is tried instead.
    """

    def __init__(self, visit_repository: VisitRepository):
        self._visit_repository = visit_repository

    async def execute(self, request: CallNextRequest) -> CallNextResult:
        if not request.doctor_id and not request.department:
            raise ValueError("Either doctor_id or department is required")

        waiting = order_waiting(
            await self._visit_repository.find_by_status(
                [VisitStatus.WAITING],
                doctor_id=request.doctor_id,
                department=request.department,
            )
        )

        for index, visit in enumerate(waiting):
            visit.start_consultation(request.doctor_id)
            if await self._visit_repository.save_if_status(visit, VisitStatus.WAITING):
                logger.info(
                    f"📢 Called token {visit.token_number} (visit {visit.visit_id}) "
                    f"into consultation"
                )
                return CallNextResult(
                    called=True,
                    message=f"Token {visit.token_number} called",
                    visit=visit,
                    remaining=len(waiting) - index - 1,
                )
            logger.info(f"↪️ Visit {visit.visit_id} was called elsewhere; trying next")

        logger.info(f"📭 {EMPTY_QUEUE_MESSAGE}")
        return CallNextResult(called=False, message=EMPTY_QUEUE_MESSAGE)
