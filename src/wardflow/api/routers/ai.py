"""AI assistance endpoints: diagnosis support, triage and chat."""

import logging

from fastapi import APIRouter

from wardflow.application.dto.ai_dto import (
    ChatRequest,
    DiagnosisAssistRequest,
    TriageRequest,
)
from wardflow.application.use_cases.assess_triage import AssessTriageUseCase
from wardflow.application.use_cases.chat_with_assistant import ChatWithAssistantUseCase
from wardflow.application.use_cases.diagnosis_assist import DiagnosisAssistUseCase
from wardflow.core.config import get_settings
from wardflow.core.utils.datetime_utils import utc_now

from ..deps import AIGatewayDep, DiagnosisExtractorDep
from ..schemas import ai as schemas
from ..schemas.common import ErrorResponse

router = APIRouter(prefix="/ai", tags=["ai"])
logger = logging.getLogger(__name__)


@router.post(
    "/diagnosis",
    response_model=schemas.DiagnosisAssistResponse,
    responses={
        422: {"model": ErrorResponse, "description": "Symptoms or chief complaint required"},
        503: {"model": ErrorResponse, "description": "AI service not configured"},
        504: {"model": ErrorResponse, "description": "AI request timed out"},
    },
)
async def diagnosis_assist(
    request: schemas.DiagnosisAssistRequest,
    ai_gateway: AIGatewayDep,
    extractor: DiagnosisExtractorDep,
):
    """
    Physician-style differential diagnosis for a case.

    The response always carries the current quota status. When the AI is
    unavailable a deterministic fallback text is returned instead.
    """
    use_case = DiagnosisAssistUseCase(ai_gateway, extractor, get_settings().openai)
    result = await use_case.execute(DiagnosisAssistRequest(**request.model_dump()))
    return schemas.DiagnosisAssistResponse(
        response=result.assessment,
        diagnoses=result.diagnoses,
        used_fallback=result.used_fallback,
        quota=schemas.QuotaStatusSchema.from_domain(result.quota),
    )


@router.post("/triage", response_model=schemas.TriageResponse)
async def assess_triage(request: schemas.TriageRequest, ai_gateway: AIGatewayDep):
    """Urgency 1-5 with priority band; emergency keywords skip the AI."""
    use_case = AssessTriageUseCase(ai_gateway)
    assessment = await use_case.execute(
        TriageRequest(symptoms=request.symptoms, vital_signs=request.vital_signs)
    )
    return schemas.TriageResponse.from_domain(assessment, utc_now())


@router.post(
    "/chat",
    response_model=schemas.ChatResponse,
    responses={422: {"model": ErrorResponse, "description": "Invalid conversation"}},
)
async def chat(request: schemas.ChatRequest, ai_gateway: AIGatewayDep):
    use_case = ChatWithAssistantUseCase(ai_gateway)
    result = await use_case.execute(
        ChatRequest(messages=[m.model_dump() for m in request.messages])
    )
    return schemas.ChatResponse(reply=result.reply, used_fallback=result.used_fallback)


@router.get("/quota", response_model=schemas.QuotaStatusSchema)
async def quota_status(ai_gateway: AIGatewayDep):
    """Current AI call budget; reading it never consumes quota."""
    return schemas.QuotaStatusSchema.from_domain(ai_gateway.governor.status())
