"""
Deterministic canned replies used when the AI oracle cannot be called.

The reply is chosen by sniffing the prompt for its intent, so callers that
parse the text (triage in particular) still get something they can read.
"""

import logging

logger = logging.getLogger(__name__)

TRIAGE_FALLBACK = (
    "URGENCY:3 PRIORITY:semi-urgent WAIT:30 "
    "FLAGS:Standard assessment - AI analysis temporarily unavailable"
)

ANALYTICS_FALLBACK = """📊 **Hospital Analytics Summary**

**Current Status**: System operational with standard monitoring active.

**Key Observations**:
- Patient database: Actively maintained and accessible
- Visit tracking: Normal operational patterns
- System health: All core functions operational

**Recommendations**:
- Continue standard patient care protocols
- Monitor for any unusual patterns
- Regular data backup and maintenance

*Note: Advanced AI analytics temporarily unavailable due to usage limits. Core hospital functions remain fully operational.*"""

CLINICAL_GUIDELINE_FALLBACK = """Based on the symptoms provided, please consider:

1. **Immediate Assessment**: Evaluate vital signs and patient stability
2. **Medical History**: Review patient's previous conditions and medications
3. **Physical Examination**: Conduct thorough clinical examination
4. **Differential Diagnosis**: Consider multiple possible conditions
5. **Diagnostic Tests**: Order appropriate tests based on clinical findings

**Recommendation**: Consult with attending physician for comprehensive evaluation and treatment plan.

*Note: This is a basic clinical guideline. AI-powered diagnosis temporarily unavailable.*"""

GENERIC_FALLBACK = (
    "Clinical assessment required. Please consult with medical professional "
    "for proper evaluation. AI analysis temporarily unavailable due to usage limits."
)

CHAT_UNAVAILABLE_MESSAGE = (
    "I'm temporarily unavailable due to usage limits. Please try again later "
    "or contact your system administrator for medical assistance."
)

_INTENTS = (
    (("triage", "urgency"), TRIAGE_FALLBACK),
    (("insight", "analytics"), ANALYTICS_FALLBACK),
    (("diagnos", "symptom"), CLINICAL_GUIDELINE_FALLBACK),
)


def generate_fallback_response(prompt: str) -> str:
    """Pick the canned reply matching the prompt's intent; first match wins."""
    lowered = (prompt or "").lower()
    for keywords, reply in _INTENTS:
        if any(keyword in lowered for keyword in keywords):
            logger.info(f"🔄 Serving '{keywords[0]}' fallback response")
            return reply
    logger.info("🔄 Serving generic fallback response")
    return GENERIC_FALLBACK
