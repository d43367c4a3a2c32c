"""Waiting-room order for a doctor or department."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ...domain.entities.visit import Visit
from ...domain.enums import VisitStatus


@dataclass
class QueueSnapshot:
    waiting: List[Visit] = field(default_factory=list)
    in_consultation: Optional[Visit] = None
    counts: Dict[str, int] = field(default_factory=dict)

    @property
    def next_visit(self) -> Optional[Visit]:
        return self.waiting[0] if self.waiting else None


def order_waiting(visits: Iterable[Visit]) -> List[Visit]:
    """Waiting visits by ascending queue position, then check-in time (stable)."""
    waiting = [visit for visit in visits if visit.status == VisitStatus.WAITING]
    return sorted(waiting, key=lambda visit: (visit.queue_position, visit.checked_in_at))


def next_waiting(visits: Iterable[Visit]) -> Optional[Visit]:
    ordered = order_waiting(visits)
    return ordered[0] if ordered else None


def queue_snapshot(visits: Iterable[Visit]) -> QueueSnapshot:
    visits = list(visits)
    counts = Counter(visit.status.value for visit in visits)
    in_consultation = [v for v in visits if v.status == VisitStatus.IN_CONSULTATION]
    # Most recently called patient is the one currently in the room
    in_consultation.sort(key=lambda visit: visit.updated_at, reverse=True)
    return QueueSnapshot(
        waiting=order_waiting(visits),
        in_consultation=in_consultation[0] if in_consultation else None,
        counts={status.value: counts.get(status.value, 0) for status in VisitStatus},
    )
