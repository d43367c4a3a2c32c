"""
Spreadsheet-style record store interface (named tables of field maps).
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class RecordStore(ABC):
    """Opaque request/response store with formula filtering."""

    @abstractmethod
    async def list_records(
        self,
        table: str,
        *,
        filter_formula: Optional[str] = None,
        max_records: Optional[int] = None,
        sort_field: Optional[str] = None,
        sort_direction: str = "asc",
    ) -> List[Dict[str, Any]]:
        """Return raw records: ``{"id": ..., "fields": {...}, "createdTime": ...}``."""
        pass

    @abstractmethod
    async def get_record(self, table: str, record_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def create_record(self, table: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        pass
