import pytest

from wardflow.application.utils.diagnosis_extraction import (
    EXTRACTION_FAILED,
    NO_SECTION_FALLBACK,
    DiagnosisExtractor,
    clean_candidate,
    deduplicate,
    extract_section_candidates,
    locate_diagnosis_section,
)
from wardflow.core.config import DiagnosisExtractionSettings

from .fakes import load_ai_response

RULES = DiagnosisExtractionSettings()


def test_short_example_response(extractor):
    text = (
        "POSSIBLE DIAGNOSES:\n1. **Migraine** - headache\n"
        "2. **Tension Headache** - stress\nRECOMMENDED TESTS:\n- CT scan"
    )

    assert extractor.extract(text) == "1. Migraine | 2. Tension Headache"


@pytest.mark.parametrize(
    "fixture, expected",
    [
        ("possible_diagnoses.txt", "1. Migraine | 2. Tension Headache | 3. Sinusitis"),
        (
            "differential_assessment.txt",
            "1. Community-Acquired Pneumonia | 2. Acute Bronchitis | 3. Influenza",
        ),
        ("inline_bold_terms.txt", "1. Iron Deficiency Anaemia | 2. thyroiditis"),
        ("prose_only.txt", "The clinical picture suggests a viral upper respiratory illness"),
        ("no_structure.txt", NO_SECTION_FALLBACK),
    ],
)
def test_recorded_responses(extractor, fixture, expected):
    assert extractor.extract(load_ai_response(fixture)) == expected


def test_section_stops_at_terminator_and_skips_blank_lines():
    text = "Intro\nMOST PROBABLE:\n\n- Gastritis\n\n- Peptic ulcer\nTREATMENT:\n- PPI"

    section = locate_diagnosis_section(text, RULES.section_keywords, RULES.terminator_keywords)

    assert section == "- Gastritis\n- Peptic ulcer\n"


def test_missing_heading_yields_no_section():
    assert locate_diagnosis_section("just text", RULES.section_keywords, ["---"]) is None


def test_parenthesised_and_colon_labels_are_extracted():
    section = "(Acute Appendicitis)\nMesenteric Adenitis: less likely\n"

    assert extract_section_candidates(section, RULES.stop_words) == [
        "Acute Appendicitis",
        "Mesenteric Adenitis",
    ]


def test_stop_words_and_short_labels_are_rejected():
    section = "- Patient history\n- Symptoms overview\n- Flu\n- Otitis media\n"

    assert extract_section_candidates(section, RULES.stop_words) == ["Otitis media"]


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("**Migraine**", "Migraine"),
        ("1. **Migraine** - throbbing", "Migraine"),
        ("• Gout:", "Gout"),
        ("(Cellulitis)", "Cellulitis"),
        ("Post-viral fatigue", "Post-viral fatigue"),
    ],
)
def test_clean_candidate(raw, expected):
    assert clean_candidate(raw) == expected


def test_deduplicate_keeps_first_seen_order_and_caps():
    labels = deduplicate(["Asthma", "COPD", "Asthma", "Flu", "Croup"], limit=2)

    assert labels == ["Asthma", "COPD"]


def test_deduplicate_compares_exact_text():
    assert deduplicate(["Migraine", "migraine", "Migraine"], limit=10) == ["Migraine", "migraine"]


def test_output_is_capped_at_ten_labels(extractor):
    items = "\n".join(f"{i}. **Condition Number {i}**" for i in range(1, 16))
    text = f"DIFFERENTIAL DIAGNOSIS\n{items}\n"

    result = extractor.extract(text)

    assert result.count(" | ") == 9
    assert result.startswith("1. Condition Number 1 | ")
    assert result.endswith("10. Condition Number 10")


def test_heading_without_usable_content_uses_generic_summary(extractor):
    assert extractor.extract("DIAGNOSIS:\nn/a\n") == NO_SECTION_FALLBACK


def test_internal_failure_returns_fixed_string():
    class BrokenRules:
        section_keywords = None

    extractor = DiagnosisExtractor(BrokenRules())

    assert extractor.extract("DIAGNOSIS\n- Asthma") == EXTRACTION_FAILED


def test_empty_input_never_raises(extractor):
    assert extractor.extract("") == NO_SECTION_FALLBACK
    assert extractor.extract("   \n\t") == NO_SECTION_FALLBACK
    assert extractor.extract(None) == NO_SECTION_FALLBACK


@pytest.mark.parametrize("fixture", ["differential_assessment.txt", "prose_only.txt"])
def test_extraction_is_deterministic(extractor, fixture):
    text = load_ai_response(fixture)

    assert extractor.extract(text) == extractor.extract(text)
