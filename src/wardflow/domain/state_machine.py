"""
Central transition tables for visit, admission and bed status fields.

Every status change in the application layer is validated here first, so
an illegal move is rejected with ``IllegalTransitionError`` instead of
leaving a record in an inconsistent state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Generic, Mapping, TypeVar

from .enums import AdmissionStatus, BedStatus, VisitStatus
from .errors import IllegalTransitionError

S = TypeVar("S", bound=Enum)


@dataclass(frozen=True)
class TransitionTable(Generic[S]):
    """Allowed ``current -> next`` moves for one status field."""

    entity: str
    transitions: Mapping[S, FrozenSet[S]]

    def allowed_from(self, current: S) -> FrozenSet[S]:
        return self.transitions.get(current, frozenset())

    def can_transition(self, current: S, target: S) -> bool:
        return target in self.allowed_from(current)

    def validate(self, entity_id: str, current: S, target: S) -> None:
        """Raise ``IllegalTransitionError`` unless ``current -> target`` is listed."""
        if not self.can_transition(current, target):
            raise IllegalTransitionError(
                self.entity, entity_id, current.value, target.value
            )


def _table(entity: str, moves: Dict[S, tuple]) -> "TransitionTable[S]":
    return TransitionTable(
        entity=entity,
        transitions={source: frozenset(targets) for source, targets in moves.items()},
    )


VISIT_TRANSITIONS: TransitionTable[VisitStatus] = _table(
    "visit",
    {
        VisitStatus.WAITING: (VisitStatus.IN_CONSULTATION,),
        VisitStatus.IN_CONSULTATION: (
            VisitStatus.COMPLETED,
            VisitStatus.WAITING,
            VisitStatus.ADMISSION_REQUESTED,
        ),
        VisitStatus.COMPLETED: (VisitStatus.ADMISSION_REQUESTED,),
    },
)

ADMISSION_TRANSITIONS: TransitionTable[AdmissionStatus] = _table(
    "admission",
    {
        AdmissionStatus.PENDING: (AdmissionStatus.APPROVED, AdmissionStatus.REJECTED),
        AdmissionStatus.APPROVED: (AdmissionStatus.ACTIVE, AdmissionStatus.DISCHARGED),
        AdmissionStatus.ACTIVE: (AdmissionStatus.DISCHARGED,),
    },
)

BED_TRANSITIONS: TransitionTable[BedStatus] = _table(
    "bed",
    {
        BedStatus.AVAILABLE: (
            BedStatus.OCCUPIED,
            BedStatus.MAINTENANCE,
            BedStatus.RESERVED,
        ),
        BedStatus.OCCUPIED: (BedStatus.AVAILABLE,),
        BedStatus.MAINTENANCE: (BedStatus.AVAILABLE,),
        BedStatus.RESERVED: (BedStatus.AVAILABLE,),
    },
)
