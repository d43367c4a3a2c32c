"""
Table/field names of the patient record store and row <-> entity mapping.
"""

from typing import Any, Dict, Optional

from ...domain.entities.patient import PatientRecord, VisitRecord

PATIENTS_TABLE = "Patients"
VISITS_TABLE = "Visits"

FIELD_NAME = "Name"
FIELD_FATHER_NAME = "Father Name"
FIELD_AGE = "Age"
FIELD_CONTACT = "Contact"
FIELD_COUNT = "Count"
FIELD_RISK_LEVEL = "Risk Level"

FIELD_LINKED_PATIENT = "Linked Patient"
FIELD_VISIT_DATE = "Visit Date"
FIELD_SYMPTOMS = "Symptoms"
FIELD_DIAGNOSIS = "Diagnosis"


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def build_patient_search_formula(
    name: str, father_name: str, age: Optional[int] = None
) -> Optional[str]:
    """Case-insensitive substring match on the names, exact match on age."""
    conditions = []
    if name.strip():
        conditions.append(f"SEARCH(LOWER({_quote(name.lower())}), LOWER({{{FIELD_NAME}}}))")
    if father_name.strip():
        conditions.append(
            f"SEARCH(LOWER({_quote(father_name.lower())}), LOWER({{{FIELD_FATHER_NAME}}}))"
        )
    if age and age > 0:
        conditions.append(f"{{{FIELD_AGE}}} = {int(age)}")
    if not conditions:
        return None
    return f"AND({', '.join(conditions)})"


def patient_from_record(record: Dict[str, Any]) -> PatientRecord:
    fields = record.get("fields") or {}
    return PatientRecord(
        record_id=record["id"],
        name=fields.get(FIELD_NAME, ""),
        father_name=fields.get(FIELD_FATHER_NAME, ""),
        age=fields.get(FIELD_AGE) or 0,
        contact=fields.get(FIELD_CONTACT),
        visit_count=fields.get(FIELD_COUNT) or 0,
        risk_level=fields.get(FIELD_RISK_LEVEL),
        created_time=record.get("createdTime"),
    )


def visit_from_record(record: Dict[str, Any]) -> VisitRecord:
    fields = record.get("fields") or {}
    linked = fields.get(FIELD_LINKED_PATIENT) or []
    return VisitRecord(
        record_id=record["id"],
        patient_ids=list(linked) if isinstance(linked, list) else [],
        visit_date=fields.get(FIELD_VISIT_DATE, ""),
        symptoms=fields.get(FIELD_SYMPTOMS, ""),
        diagnosis=fields.get(FIELD_DIAGNOSIS, ""),
        created_time=record.get("createdTime"),
    )


def is_linked_to(record: Dict[str, Any], patient_id: str) -> bool:
    linked = (record.get("fields") or {}).get(FIELD_LINKED_PATIENT) or []
    return isinstance(linked, list) and patient_id in linked
