"""Symptom catalog, recommendation bank and patient profiles."""

from clinassess.catalog.defaults import default_document
from clinassess.catalog.models import (
    CURRENT_SCHEMA_VERSION,
    AssessmentDocument,
    Recommendation,
    Symptom,
    SymptomCategory,
)
from clinassess.catalog.profiles import (
    PROFILE_KEYS,
    AgeGroup,
    Diagnosis,
    PatientProfile,
    Sex,
    profile_key,
)

__all__ = [
    "default_document",
    "CURRENT_SCHEMA_VERSION",
    "AssessmentDocument",
    "Recommendation",
    "Symptom",
    "SymptomCategory",
    "PROFILE_KEYS",
    "AgeGroup",
    "Diagnosis",
    "PatientProfile",
    "Sex",
    "profile_key",
]
