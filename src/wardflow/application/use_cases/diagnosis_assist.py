"""Structured differential-diagnosis assistance for doctors."""

import logging

from ...core.config import OpenAISettings
from ..dto.ai_dto import DiagnosisAssistRequest, DiagnosisAssistResponse
from ..services.ai_gateway import AIGateway
from ..utils.diagnosis_extraction import DiagnosisExtractor

logger = logging.getLogger(__name__)

PHYSICIAN_PERSONA = (
    "You are a highly experienced physician with expertise in internal medicine, "
    "emergency medicine, and clinical diagnosis. You provide thorough, evidence-based "
    "diagnostic assistance while emphasizing the importance of clinical judgment."
)

CASE_TEMPLATE = """{persona}

Please analyze the following patient case and provide a comprehensive medical assessment.

**PATIENT INFORMATION:**
- Age: {age} years
- Gender: {gender}

**CHIEF COMPLAINT:**
{chief_complaint}

**CURRENT SYMPTOMS:**
{symptoms}

**MEDICAL HISTORY:**
{medical_history}

**PHYSICAL EXAMINATION FINDINGS:**
{physical_exam}

**VITAL SIGNS:**
{vital_signs}

**ADDITIONAL CLINICAL INFORMATION:**
{additional_info}

**REQUESTED ANALYSIS:**
1. **DIFFERENTIAL DIAGNOSIS** (in order of clinical probability), with **bold** diagnosis names
2. **RED FLAGS & EMERGENCY INDICATORS**
3. **RECOMMENDED INVESTIGATIONS**
4. **TREATMENT APPROACH**
5. **FOLLOW-UP & PROGNOSIS**
"""

MEDICAL_DISCLAIMER = """

**⚠️ IMPORTANT MEDICAL DISCLAIMER:**
This AI-generated assessment is for educational and assistance purposes only. It should NOT replace clinical judgment, physical examination, or definitive diagnostic testing. The final diagnostic and treatment decisions remain the responsibility of the attending physician."""


def build_case_prompt(request: DiagnosisAssistRequest) -> str:
    return CASE_TEMPLATE.format(
        persona=PHYSICIAN_PERSONA,
        age=request.patient_age or "Not specified",
        gender=request.patient_gender or "Not specified",
        chief_complaint=request.chief_complaint or "Not provided",
        symptoms=request.symptoms or "Not provided",
        medical_history=request.medical_history or "Not provided",
        physical_exam=request.physical_exam or "Not performed yet",
        vital_signs=request.vital_signs or "Not recorded",
        additional_info=request.additional_info or "None provided",
    )


class DiagnosisAssistUseCase:
    def __init__(
        self, ai_gateway: AIGateway, extractor: DiagnosisExtractor, settings: OpenAISettings
    ):
        self._ai_gateway = ai_gateway
        self._extractor = extractor
        self._settings = settings

    async def execute(self, request: DiagnosisAssistRequest) -> DiagnosisAssistResponse:
        if not (request.symptoms or "").strip() and not (request.chief_complaint or "").strip():
            raise ValueError("Either symptoms or chief complaint is required")

        logger.info("🤖 Requesting diagnosis assistance")
        reply = await self._ai_gateway.analyze(
            build_case_prompt(request),
            temperature=self._settings.assist_temperature,
            max_tokens=self._settings.assist_max_tokens,
        )
        assessment = reply.text if reply.from_fallback else reply.text + MEDICAL_DISCLAIMER
        return DiagnosisAssistResponse(
            assessment=assessment,
            diagnoses=self._extractor.extract(reply.text),
            used_fallback=reply.from_fallback,
            quota=self._ai_gateway.governor.status(),
        )
