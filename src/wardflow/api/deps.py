"""FastAPI dependency providers."""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from wardflow.adapters.db.mongo.repositories.admission_repository import (
    MongoAdmissionRepository,
)
from wardflow.adapters.db.mongo.repositories.sequence_repository import (
    MongoSequenceRepository,
)
from wardflow.adapters.db.mongo.repositories.visit_repository import MongoVisitRepository
from wardflow.adapters.db.mongo.repositories.ward_repository import MongoWardRepository
from wardflow.adapters.external.airtable_record_store import AirtableRecordStore
from wardflow.adapters.external.openai_oracle import OpenAIOracle
from wardflow.application.ports.repositories.admission_repo import AdmissionRepository
from wardflow.application.ports.repositories.sequence_repo import SequenceRepository
from wardflow.application.ports.repositories.visit_repo import VisitRepository
from wardflow.application.ports.repositories.ward_repo import WardRepository
from wardflow.application.ports.services.ai_oracle import AIOracle
from wardflow.application.ports.services.record_store import RecordStore
from wardflow.application.services.ai_gateway import AIGateway
from wardflow.application.services.quota_governor import QuotaGovernor
from wardflow.application.utils.diagnosis_extraction import DiagnosisExtractor
from wardflow.core.config import get_settings
from wardflow.core.resilience import ResilientCallExecutor


@lru_cache()
def get_visit_repository() -> VisitRepository:
    return MongoVisitRepository()


@lru_cache()
def get_admission_repository() -> AdmissionRepository:
    return MongoAdmissionRepository()


@lru_cache()
def get_ward_repository() -> WardRepository:
    return MongoWardRepository()


@lru_cache()
def get_sequence_repository() -> SequenceRepository:
    return MongoSequenceRepository()


@lru_cache()
def get_record_store() -> RecordStore:
    """Get record store client instance."""
    return AirtableRecordStore(get_settings().record_store)


@lru_cache()
def get_ai_oracle() -> AIOracle:
    return OpenAIOracle(get_settings().openai)


@lru_cache()
def get_quota_governor() -> QuotaGovernor:
    """Process-wide AI call budget; one instance shared by every request."""
    quota = get_settings().quota
    return QuotaGovernor(quota.daily_limit, timedelta(hours=quota.reset_hours))


@lru_cache()
def get_executor() -> ResilientCallExecutor:
    return ResilientCallExecutor()


@lru_cache()
def get_ai_gateway() -> AIGateway:
    return AIGateway(
        get_ai_oracle(), get_quota_governor(), get_executor(), get_settings().openai
    )


@lru_cache()
def get_diagnosis_extractor() -> DiagnosisExtractor:
    return DiagnosisExtractor(get_settings().diagnosis_extraction)


# Dependency annotations for FastAPI
VisitRepositoryDep = Annotated[VisitRepository, Depends(get_visit_repository)]
AdmissionRepositoryDep = Annotated[AdmissionRepository, Depends(get_admission_repository)]
WardRepositoryDep = Annotated[WardRepository, Depends(get_ward_repository)]
SequenceRepositoryDep = Annotated[SequenceRepository, Depends(get_sequence_repository)]
RecordStoreDep = Annotated[RecordStore, Depends(get_record_store)]
ExecutorDep = Annotated[ResilientCallExecutor, Depends(get_executor)]
AIGatewayDep = Annotated[AIGateway, Depends(get_ai_gateway)]
DiagnosisExtractorDep = Annotated[DiagnosisExtractor, Depends(get_diagnosis_extractor)]
