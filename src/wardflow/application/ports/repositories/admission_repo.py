"""
Admission repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.admission import Admission
from ....domain.enums import AdmissionStatus
from ....domain.value_objects.record_id import AdmissionId


class AdmissionRepository(ABC):
    """Abstract repository for admission requests."""

    @abstractmethod
    async def save(self, admission: Admission) -> Admission:
        pass

    @abstractmethod
    async def save_if_status(
        self, admission: Admission, expected_status: AdmissionStatus
    ) -> bool:
        """Conditional write keyed on the stored status."""
        pass

    @abstractmethod
    async def find_by_id(self, admission_id: AdmissionId) -> Optional[Admission]:
        pass

    @abstractmethod
    async def find_all(
        self, status: Optional[AdmissionStatus] = None, limit: int = 100
    ) -> List[Admission]:
        """Newest first."""
        pass
