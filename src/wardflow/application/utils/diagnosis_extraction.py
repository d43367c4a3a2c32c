"""
Diagnosis label extraction from free-text AI assessments.

The pipeline runs in fixed stages:

1. ``locate_diagnosis_section``: find the block that follows a diagnosis
   heading and stops at the next recommendations/tests/treatment heading.
2. ``extract_section_candidates``: bold spans, numbered items, bullets,
   parenthesised spans and ``Label:`` lines inside that block.
3. ``extract_document_candidates``: bold spans anywhere in the text that
   look like condition names.
4. ``deduplicate`` then ``format_diagnoses``: first-seen order, capped,
   rendered as ``"1. A | 2. B"``.
5. ``fallback_sentence``: first reasonably sized sentence of the block when
   no label survived.

Stage order matters: the same label may be produced by several extractors
and only its first appearance counts.
"""

import logging
import re
from typing import Iterable, List, Optional, Sequence

from ...core.config import DiagnosisExtractionSettings

logger = logging.getLogger(__name__)

NO_SECTION_FALLBACK = "Multiple possible diagnoses identified - see full assessment"
EXTRACTION_FAILED = "Diagnosis extraction failed"

_SECTION_PATTERNS = (
    re.compile(r"\*\*(.*?)\*\*"),
    re.compile(r"^\d+\.\s*([^:\n]+)", re.MULTILINE),
    re.compile(r"^[-•]\s*([^:\n]+)", re.MULTILINE),
    re.compile(r"\(([^)]+)\)"),
    re.compile(r"^([^:\n]+):", re.MULTILINE),
)
_BOLD = re.compile(r"\*\*(.*?)\*\*")
_TWO_CAPITALISED_WORDS = re.compile(r"^[A-Z][a-z]+\s[A-Z][a-z]+")
_SENTENCE_SPLIT = re.compile(r"[.!?]")

# " - short description" trailing a label on the same line
_TRAILING_DESCRIPTION = re.compile(r"\s+[-–—]\s+.*$")


def locate_diagnosis_section(
    text: str, section_keywords: Sequence[str], terminator_keywords: Sequence[str]
) -> Optional[str]:
    """Return the non-blank lines of the diagnosis block, or None if no heading exists.

    A heading line is never part of the block; a second heading inside the
    block is skipped rather than ending it.
    """
    found = False
    collected: List[str] = []

    for line in text.split("\n"):
        upper = line.upper()
        if any(keyword in upper for keyword in section_keywords):
            found = True
            continue
        if found and any(keyword in upper for keyword in terminator_keywords):
            break
        if found and line.strip():
            collected.append(line)

    if not found:
        return None
    return "".join(f"{line}\n" for line in collected)


def clean_candidate(raw: str) -> str:
    cleaned = raw.replace("**", "")
    cleaned = re.sub(r"^\d+\.\s*", "", cleaned)
    cleaned = re.sub(r"^[-•]\s*", "", cleaned)
    cleaned = re.sub(r"[()]", "", cleaned)
    cleaned = re.sub(r":$", "", cleaned)
    cleaned = _TRAILING_DESCRIPTION.sub("", cleaned.strip())
    return cleaned.strip()


def _is_acceptable_section_label(label: str, stop_words: Sequence[str]) -> bool:
    if not 3 < len(label) < 100:
        return False
    lowered = label.lower()
    return not any(word in lowered for word in stop_words)


def extract_section_candidates(section: str, stop_words: Sequence[str]) -> List[str]:
    """Run the five extractors over the block, in order."""
    candidates: List[str] = []
    for index, pattern in enumerate(_SECTION_PATTERNS, start=1):
        matches = [match.group(0) for match in pattern.finditer(section)]
        if matches:
            logger.debug(f"🎯 Pattern {index} found {len(matches)} matches: {matches[:3]}")
        for match in matches:
            cleaned = clean_candidate(match)
            if _is_acceptable_section_label(cleaned, stop_words):
                candidates.append(cleaned)
    return candidates


def extract_document_candidates(
    text: str, medical_signals: Sequence[str], headings: Sequence[str] = ()
) -> List[str]:
    """Bold spans anywhere in the text that read like a condition name.

    Spans containing one of ``headings`` are section titles, not labels.
    """
    candidates: List[str] = []
    for match in _BOLD.finditer(text):
        cleaned = match.group(0).replace("**", "").strip()
        if not 5 < len(cleaned) < 80:
            continue
        if any(heading in cleaned.upper() for heading in headings):
            continue
        lowered = cleaned.lower()
        if any(signal in lowered for signal in medical_signals) or _TWO_CAPITALISED_WORDS.match(
            cleaned
        ):
            candidates.append(cleaned)
    return candidates


def deduplicate(candidates: Iterable[str], limit: int) -> List[str]:
    seen = set()
    unique: List[str] = []
    for candidate in candidates:
        if candidate in seen:
            continue
        seen.add(candidate)
        unique.append(candidate)
    return [label for label in unique if len(label) > 3][:limit]


def format_diagnoses(labels: Sequence[str]) -> str:
    return " | ".join(f"{index}. {label}" for index, label in enumerate(labels, start=1))


def fallback_sentence(section: str) -> Optional[str]:
    for sentence in _SENTENCE_SPLIT.split(section):
        cleaned = sentence.strip()
        if 10 < len(cleaned) < 200:
            return cleaned
    return None


class DiagnosisExtractor:
    """Turns an AI assessment into a pipe-delimited list of diagnosis labels."""

    def __init__(self, rules: DiagnosisExtractionSettings):
        self._rules = rules

    def extract(self, text: str) -> str:
        """Never raises and never returns an empty string."""
        try:
            return self._extract(text or "")
        except Exception:
            logger.exception("❌ Error extracting diagnosis headings")
            return EXTRACTION_FAILED

    def _extract(self, text: str) -> str:
        rules = self._rules
        logger.debug(f"🧠 Extracting diagnosis headings from response length: {len(text)}")

        section = locate_diagnosis_section(
            text, rules.section_keywords, rules.terminator_keywords
        )
        candidates: List[str] = []
        if section:
            candidates.extend(extract_section_candidates(section, rules.stop_words))
        candidates.extend(
            extract_document_candidates(
                text,
                rules.medical_signals,
                headings=[*rules.section_keywords, *rules.terminator_keywords],
            )
        )

        labels = deduplicate(candidates, rules.max_labels)
        if labels:
            formatted = format_diagnoses(labels)
            logger.info(f"📋 Extracted {len(labels)} diagnosis labels")
            return formatted

        if section:
            sentence = fallback_sentence(section)
            if sentence:
                logger.warning(f"⚠️ Using fallback sentence: {sentence[:80]}")
                return sentence

        logger.warning("⚠️ No diagnosis labels found; using generic summary")
        return NO_SECTION_FALLBACK
