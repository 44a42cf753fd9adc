"""Built-in symptom catalog and recommendation bank.

Seeded on first use and whenever the persisted document cannot be used.
Every profile gets its own copy of the bank so that edits to one profile
never leak into another.
"""

from clinassess.catalog.models import (
    CURRENT_SCHEMA_VERSION,
    AssessmentDocument,
    Recommendation,
    Symptom,
    SymptomCategory,
)
from clinassess.catalog.profiles import PROFILE_KEYS

# (category id, label, symptom id prefix, symptom labels)
DEFAULT_CATEGORIES = [
    (
        "difficulties_concentrating",
        "Koncentrationssvårigheter",
        "concentration",
        ["1a", "1b", "1c", "1d", "1e", "1f", "1g", "1h", "1i"],
    ),
    (
        "hyperactivity_impulsivity",
        "Hyperaktivitet",
        "hyperactivity",
        ["2a", "2b", "2c", "2d", "2e", "2f", "2g", "2h", "2i"],
    ),
    (
        "socio_communicative",
        "Socio-kommunikativa svårigheter",
        "social_communication",
        ["A1", "A2", "A3"],
    ),
    (
        "limited_repetitive",
        "Begränsade och repetitiva beteenden",
        "repetitive_behaviour",
        ["B1", "B2", "B3", "B4"],
    ),
]


def default_symptom_categories() -> list[SymptomCategory]:
    """Build the default symptom catalog."""
    return [
        SymptomCategory(
            id=category_id,
            label=label,
            symptoms=[
                Symptom(id=f"{prefix}_{index}", label=symptom_label)
                for index, symptom_label in enumerate(symptom_labels, start=1)
            ],
        )
        for category_id, label, prefix, symptom_labels in DEFAULT_CATEGORIES
    ]


def default_profile_recommendations(
    categories: list[SymptomCategory],
) -> dict[str, list[Recommendation]]:
    """One placeholder recommendation per symptom, grouped by category."""
    return {
        category.id: [
            Recommendation(
                text=f"Placeholder recommendation for {symptom.label}.",
                linked_symptoms=[symptom.id],
            )
            for symptom in category.symptoms
        ]
        for category in categories
    }


def default_document() -> AssessmentDocument:
    """Build a fresh default document with an independent bank per profile."""
    categories = default_symptom_categories()
    return AssessmentDocument(
        schema_version=CURRENT_SCHEMA_VERSION,
        symptom_categories=categories,
        recommendations={
            key: default_profile_recommendations(categories) for key in PROFILE_KEYS
        },
    )
