"""Pydantic schemas for the symptom catalog and recommendation bank.

These are the shapes of the persisted document; field aliases keep the
stored JSON in camelCase.
"""

from pydantic import BaseModel, Field, field_validator, model_validator

# Version written alongside every persisted document
CURRENT_SCHEMA_VERSION = 1


class Symptom(BaseModel):
    """Selectable symptom."""

    id: str
    label: str


class SymptomCategory(BaseModel):
    """Ordered group of symptoms."""

    id: str
    label: str
    symptoms: list[Symptom] = Field(default_factory=list)


class Recommendation(BaseModel):
    """Free-text recommendation linked to one or more symptoms."""

    text: str
    linked_symptoms: list[str] = Field(..., alias="linkedSymptoms", min_length=1)

    model_config = {"populate_by_name": True}

    @field_validator("linked_symptoms")
    @classmethod
    def dedupe_linked_symptoms(cls, value: list[str]) -> list[str]:
        """Keep first occurrence order, drop repeats."""
        return list(dict.fromkeys(value))

    def is_linked_to_any(self, symptom_ids: set[str]) -> bool:
        """Check whether any linked symptom is in symptom_ids."""
        return any(symptom_id in symptom_ids for symptom_id in self.linked_symptoms)


# profile key -> category id -> recommendations
RecommendationBank = dict[str, dict[str, list[Recommendation]]]


class AssessmentDocument(BaseModel):
    """Persisted catalog and recommendation bank."""

    schema_version: int = Field(CURRENT_SCHEMA_VERSION, alias="schemaVersion")
    symptom_categories: list[SymptomCategory] = Field(..., alias="symptomCategories")
    recommendations: RecommendationBank

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def check_symptom_links(self) -> "AssessmentDocument":
        """Symptom ids are unique across categories and every link resolves."""
        seen: set[str] = set()
        for category in self.symptom_categories:
            for symptom in category.symptoms:
                if symptom.id in seen:
                    raise ValueError(f"Symptom id in more than one category: {symptom.id}")
                seen.add(symptom.id)

        for key, categories in self.recommendations.items():
            for category_id, entries in categories.items():
                for entry in entries:
                    unknown = [s for s in entry.linked_symptoms if s not in seen]
                    if unknown:
                        raise ValueError(
                            f"Recommendation in {key}/{category_id} links unknown symptoms: {unknown}"
                        )
        return self

    def symptom_ids(self) -> set[str]:
        """Every symptom id in the catalog."""
        return {s.id for category in self.symptom_categories for s in category.symptoms}

    def to_json_dict(self) -> dict:
        """Serialize with stored (camelCase) field names."""
        return self.model_dump(by_alias=True, mode="json")
