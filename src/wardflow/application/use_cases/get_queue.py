"""A doctor's or department's live queue."""

from ...core.utils.datetime_utils import start_of_utc_day, utc_now
from ...domain.enums import VisitStatus
from ..dto.visit_dto import QueueRequest
from ..ports.repositories.visit_repo import VisitRepository
from ..services.queue_ordering import QueueSnapshot, queue_snapshot

ACTIVE_STATUSES = (VisitStatus.WAITING, VisitStatus.IN_CONSULTATION)
FINISHED_STATUSES = (VisitStatus.COMPLETED, VisitStatus.ADMISSION_REQUESTED)


class GetQueueUseCase:
    """Active visits of any age, plus today's finished visits for the counts."""

    def __init__(self, visit_repository: VisitRepository, clock=utc_now):
        self._visit_repository = visit_repository
        self._clock = clock

    async def execute(self, request: QueueRequest) -> QueueSnapshot:
        if not request.doctor_id and not request.department:
            raise ValueError("Either doctor_id or department is required")
        active = await self._visit_repository.find_by_status(
            ACTIVE_STATUSES, doctor_id=request.doctor_id, department=request.department
        )
        finished_today = await self._visit_repository.find_by_status(
            FINISHED_STATUSES,
            doctor_id=request.doctor_id,
            department=request.department,
            checked_in_since=start_of_utc_day(self._clock()),
        )
        return queue_snapshot([*active, *finished_today])
