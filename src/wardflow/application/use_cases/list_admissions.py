"""Admission requests for the ward administration dashboard."""

from typing import List

from ...domain.entities.admission import Admission
from ..dto.admission_dto import ListAdmissionsRequest
from ..ports.repositories.admission_repo import AdmissionRepository


class ListAdmissionsUseCase:
    def __init__(self, admission_repository: AdmissionRepository):
        self._admission_repository = admission_repository

    async def execute(self, request: ListAdmissionsRequest) -> List[Admission]:
        limit = max(1, min(request.limit, 500))
        return await self._admission_repository.find_all(status=request.status, limit=limit)
