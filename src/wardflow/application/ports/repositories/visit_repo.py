"""
Visit repository interface.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional

from ....domain.entities.visit import Visit
from ....domain.enums import VisitStatus
from ....domain.value_objects.record_id import VisitId


class VisitRepository(ABC):
    """Abstract repository for outpatient visits."""

    @abstractmethod
    async def save(self, visit: Visit) -> Visit:
        """Insert or replace a visit unconditionally."""
        pass

    @abstractmethod
    async def save_if_status(self, visit: Visit, expected_status: VisitStatus) -> bool:
        """Persist ``visit`` only if the stored status still equals ``expected_status``.

        Returns False when another writer changed the status first.
        """
        pass

    @abstractmethod
    async def find_by_id(self, visit_id: VisitId) -> Optional[Visit]:
        pass

    @abstractmethod
    async def find_by_status(
        self,
        statuses: Iterable[VisitStatus],
        doctor_id: Optional[str] = None,
        department: Optional[str] = None,
        checked_in_since: Optional[datetime] = None,
    ) -> List[Visit]:
        """Visits in any of ``statuses``, optionally for one doctor or department
        and checked in no earlier than ``checked_in_since``."""
        pass
