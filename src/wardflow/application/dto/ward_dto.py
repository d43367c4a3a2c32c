"""Ward and bed DTOs."""

from dataclasses import dataclass
from typing import Optional

from ...domain.enums import BedStatus


@dataclass
class CreateWardRequest:
    name: str
    ward_type: str
    is_active: bool = True


@dataclass
class AddBedRequest:
    ward_id: str
    bed_number: str
    bed_type: str = "standard"


@dataclass
class SetBedStatusRequest:
    bed_id: str
    status: BedStatus


@dataclass
class WardOccupancyRequest:
    ward_type: Optional[str] = None
