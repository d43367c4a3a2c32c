"""
Ward and bed repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.ward import Bed, Ward
from ....domain.enums import BedStatus
from ....domain.value_objects.record_id import AdmissionId, BedId, WardId


class WardRepository(ABC):
    """Abstract repository for wards and their beds."""

    @abstractmethod
    async def save_ward(self, ward: Ward) -> Ward:
        pass

    @abstractmethod
    async def find_ward(self, ward_id: WardId) -> Optional[Ward]:
        pass

    @abstractmethod
    async def list_wards(
        self, ward_type: Optional[str] = None, active_only: bool = False
    ) -> List[Ward]:
        pass

    @abstractmethod
    async def save_bed(self, bed: Bed) -> Bed:
        pass

    @abstractmethod
    async def find_bed(self, bed_id: BedId) -> Optional[Bed]:
        pass

    @abstractmethod
    async def list_beds(
        self, ward_id: Optional[WardId] = None, status: Optional[BedStatus] = None
    ) -> List[Bed]:
        """Beds ordered by bed number."""
        pass

    @abstractmethod
    async def save_bed_if(
        self,
        bed: Bed,
        expected_status: BedStatus,
        expected_admission_id: Optional[AdmissionId] = None,
    ) -> bool:
        """Compare-and-swap on the bed row.

        The write lands only if the stored status equals ``expected_status``
        (and, when given, the stored admission equals ``expected_admission_id``).
        Exactly one of several concurrent claims on the same bed succeeds.
        """
        pass
