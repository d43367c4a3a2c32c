"""UUID-based identifiers for workflow records.

Visits, admissions, wards and beds are all keyed by UUID4 strings; the
subclasses only exist so a visit id cannot be passed where a bed id is
expected.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Type, TypeVar

T = TypeVar("T", bound="RecordId")


@dataclass(frozen=True)
class RecordId:
    """Immutable UUID identifier value object."""

    value: str

    label = "Record ID"

    def __post_init__(self) -> None:
        """Validate identifier format."""
        if not self.value:
            raise ValueError(f"{self.label} cannot be empty")

        if not isinstance(self.value, str):
            raise ValueError(f"{self.label} must be a string")

        try:
            uuid.UUID(self.value)
        except ValueError:
            raise ValueError(f"{self.label} must be a valid UUID")

    def __str__(self) -> str:
        return self.value

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return False
        return self.value == other.value

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.value))

    @classmethod
    def generate(cls: Type[T]) -> T:
        """Generate a new identifier using UUID4."""
        return cls(str(uuid.uuid4()))

    @classmethod
    def from_string(cls: Type[T], value: str) -> T:
        return cls(value)


@dataclass(frozen=True, eq=False)
class VisitId(RecordId):
    label = "Visit ID"


@dataclass(frozen=True, eq=False)
class AdmissionId(RecordId):
    label = "Admission ID"


@dataclass(frozen=True, eq=False)
class WardId(RecordId):
    label = "Ward ID"


@dataclass(frozen=True, eq=False)
class BedId(RecordId):
    label = "Bed ID"
