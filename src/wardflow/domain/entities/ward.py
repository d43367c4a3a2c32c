"""Ward and bed domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ...core.utils.datetime_utils import utc_now
from ..enums import BedStatus
from ..state_machine import BED_TRANSITIONS
from ..value_objects.record_id import AdmissionId, BedId, WardId


@dataclass
class Bed:
    """A single bed; holds at most one admission at a time."""

    bed_id: BedId
    ward_id: WardId
    bed_number: str
    bed_type: str = "standard"
    status: BedStatus = BedStatus.AVAILABLE
    current_patient_id: Optional[str] = None
    current_admission_id: Optional[AdmissionId] = None
    updated_at: datetime = field(default_factory=utc_now)

    def occupy(self, admission_id: AdmissionId, patient_id: str) -> None:
        BED_TRANSITIONS.validate(self.bed_id.value, self.status, BedStatus.OCCUPIED)
        self.status = BedStatus.OCCUPIED
        self.current_admission_id = admission_id
        self.current_patient_id = patient_id
        self.updated_at = utc_now()

    def release(self) -> None:
        BED_TRANSITIONS.validate(self.bed_id.value, self.status, BedStatus.AVAILABLE)
        self.status = BedStatus.AVAILABLE
        self.current_admission_id = None
        self.current_patient_id = None
        self.updated_at = utc_now()

    def set_status(self, target: BedStatus) -> None:
        """Housekeeping moves (maintenance, reservation); never occupancy."""
        BED_TRANSITIONS.validate(self.bed_id.value, self.status, target)
        self.status = target
        self.updated_at = utc_now()

    def is_available(self) -> bool:
        return self.status == BedStatus.AVAILABLE


@dataclass
class Ward:
    """Typed inpatient unit (general, ICU, surgery, ...)."""

    ward_id: WardId
    name: str
    ward_type: str
    is_active: bool = True
    created_at: datetime = field(default_factory=utc_now)


@dataclass
class WardOccupancy:
    """Ward with its beds and counts derived from bed statuses."""

    ward: Ward
    beds: List[Bed] = field(default_factory=list)

    @property
    def total_beds(self) -> int:
        return len(self.beds)

    @property
    def occupied_beds(self) -> int:
        return sum(1 for bed in self.beds if bed.status == BedStatus.OCCUPIED)

    @property
    def available_beds(self) -> int:
        return sum(1 for bed in self.beds if bed.is_available())
