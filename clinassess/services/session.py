"""Assessment session: the state behind one clinician's screen.

Holds the catalog and recommendation bank, the patient profile, the
selected symptoms and the per-instrument response maps, and exposes the
explicit mutation operations the UI calls. All derived values (filtered
recommendations, narrative, scores, export text) are computed on demand.

Persistence is a side channel: a failed write is logged and the
in-memory change stands.
"""

from collections.abc import Iterable
from typing import Any, Optional

from clinassess.catalog.defaults import default_document
from clinassess.catalog.models import AssessmentDocument, Recommendation
from clinassess.catalog.profiles import AgeGroup, Diagnosis, PatientProfile, Sex
from clinassess.core.config import settings
from clinassess.core.logging import audit_logger, get_logger
from clinassess.instruments.models import Instrument
from clinassess.narratives.selector import diagnosis_text, get_narrative
from clinassess.scoring.cats2 import CATS2Result, score_cats2
from clinassess.scoring.checklist import ChecklistResult, default_definition, score_checklist
from clinassess.scoring.responses import ResponseStore
from clinassess.services.export import cats2_text, recommendations_text
from clinassess.services.recommendations import filter_recommendations
from clinassess.services.repository import RESPONSE_MAPS, AssessmentRepository
from clinassess.services.storage import StorageError

logger = get_logger(__name__)

# Response maps cleared together per instrument
INSTRUMENT_RESPONSE_MAPS = {
    Instrument.CATS2: ("cats2_ratings", "cats2_answers"),
    Instrument.YSR: ("ysr",),
    Instrument.CBCL: ("cbcl",),
}


class AssessmentSession:
    """Explicitly constructed assessment state.

    Args:
        repository: Persistence (None keeps everything in memory)
        document: Initial catalog and bank (loaded from the repository,
            or defaults, when omitted)
        profile: Initial patient profile (settings defaults when omitted)
        persist_responses: Store response maps (settings default when None)
    """

    def __init__(
        self,
        repository: Optional[AssessmentRepository] = None,
        document: Optional[AssessmentDocument] = None,
        profile: Optional[PatientProfile] = None,
        persist_responses: Optional[bool] = None,
    ) -> None:
        self.repository = repository
        self.persist_responses = (
            settings.persist_responses if persist_responses is None else persist_responses
        )
        self.profile = profile or PatientProfile(
            age_group=AgeGroup(settings.default_age_group),
            sex=Sex(settings.default_sex),
            diagnosis=Diagnosis(settings.default_diagnosis),
        )
        self.selected_symptoms: list[str] = []
        self.responses: dict[str, ResponseStore] = {name: ResponseStore() for name in RESPONSE_MAPS}

        if document is None:
            document = self._load_document()
        self.document = document

        if self.repository is not None and self.persist_responses:
            self._load_responses()

    # =========================================================================
    # Persistence
    # =========================================================================

    def _load_document(self) -> AssessmentDocument:
        if self.repository is None:
            return default_document()
        try:
            document = self.repository.load_document()
        except StorageError as e:
            logger.error(f"Failed to read stored assessment document: {e}")
            return default_document()
        self._save_document(document)
        return document

    def _load_responses(self) -> None:
        for name in RESPONSE_MAPS:
            try:
                self.responses[name] = ResponseStore(self.repository.load_responses(name))
            except StorageError as e:
                logger.error(f"Failed to read stored responses {name}: {e}")

    def _save_document(self, document: Optional[AssessmentDocument] = None) -> None:
        if self.repository is None:
            return
        try:
            self.repository.save_document(document or self.document)
        except StorageError as e:
            logger.error(f"Failed to save assessment document: {e}")

    def _save_responses(self, name: str) -> None:
        if self.repository is None or not self.persist_responses:
            return
        try:
            self.repository.save_responses(name, self.responses[name].to_dict())
        except StorageError as e:
            logger.error(f"Failed to save responses {name}: {e}")

    def reset_persisted_state(self) -> None:
        """Clear storage and every in-memory map, reseeding the defaults.

        Last-resort recovery when the stored state cannot be rendered.
        """
        if self.repository is not None:
            try:
                self.document = self.repository.reset()
            except StorageError as e:
                logger.error(f"Failed to reset storage: {e}")
                self.document = default_document()
        else:
            self.document = default_document()

        self.selected_symptoms = []
        for store in self.responses.values():
            store.clear()

        audit_logger.log(action="reset", entity_type="assessment", entity_id="all")

    # =========================================================================
    # Symptoms and profile
    # =========================================================================

    def toggle_symptom(self, symptom_id: str) -> bool:
        """Select or deselect a symptom.

        Returns:
            True if the symptom is now selected

        Raises:
            ValueError: If the symptom is not in the catalog.
        """
        if symptom_id not in self.document.symptom_ids():
            raise ValueError(f"Unknown symptom: {symptom_id}")

        if symptom_id in self.selected_symptoms:
            self.selected_symptoms.remove(symptom_id)
            return False
        self.selected_symptoms.append(symptom_id)
        return True

    def clear_selected_symptoms(self) -> None:
        self.selected_symptoms = []

    def set_profile(
        self,
        age_group: AgeGroup | str | None = None,
        sex: Sex | str | None = None,
        diagnosis: Diagnosis | str | None = None,
    ) -> PatientProfile:
        """Change any of the profile selectors.

        Raises:
            ValueError: If a value is not a known option.
        """
        # Parse everything before assigning so a bad value changes nothing
        new_age_group = self.profile.age_group if age_group is None else AgeGroup(age_group)
        new_sex = self.profile.sex if sex is None else Sex(sex)
        new_diagnosis = self.profile.diagnosis if diagnosis is None else Diagnosis(diagnosis)

        self.profile.age_group = new_age_group
        self.profile.sex = new_sex
        self.profile.diagnosis = new_diagnosis

        logger.debug(
            f"Profile set to {self.profile.key} ({self.profile.diagnosis.value})",
            extra={"profile": self.profile.key},
        )
        return self.profile

    # =========================================================================
    # Responses
    # =========================================================================

    def set_rating(self, instrument: Instrument | str, item_id: Any, rating: Optional[int]) -> None:
        """Record an item rating; None makes the item unanswered.

        Raises:
            ValueError: If the instrument is unknown.
        """
        name = {
            Instrument.CATS2: "cats2_ratings",
            Instrument.YSR: "ysr",
            Instrument.CBCL: "cbcl",
        }[Instrument(instrument)]
        self._set_response(name, item_id, rating)

    def set_answer(self, item_id: Any, answer: Optional[str]) -> None:
        """Record a CATS-2 yes/no answer ("ja" / "nej"); None unsets it."""
        self._set_response("cats2_answers", item_id, answer)

    def _set_response(self, name: str, item_id: Any, value: Any) -> None:
        store = self.responses[name]
        if value is None:
            store.unset(item_id)
        else:
            store.set(item_id, value)
        self._save_responses(name)

    def clear_responses(self, instrument: Instrument | str) -> None:
        """Clear every response of an instrument."""
        instrument = Instrument(instrument)
        for name in INSTRUMENT_RESPONSE_MAPS[instrument]:
            self.responses[name].clear()
            self._save_responses(name)

        logger.info(f"Cleared {instrument.value} responses", extra={"instrument": instrument.value})
        audit_logger.log(
            action="clear_responses",
            entity_type="instrument",
            entity_id=instrument.value,
        )

    # =========================================================================
    # Recommendation bank edits
    # =========================================================================

    def _entries(self, profile_key: str, category_id: str, index: int) -> list[Recommendation]:
        by_category = self.document.recommendations.get(profile_key)
        if by_category is None:
            raise ValueError(f"Unknown profile: {profile_key}")
        entries = by_category.get(category_id)
        if entries is None:
            raise ValueError(f"Unknown category for {profile_key}: {category_id}")
        if not 0 <= index < len(entries):
            raise IndexError(f"No recommendation {index} in {profile_key}/{category_id}")
        return entries

    def update_recommendation_text(
        self,
        profile_key: str,
        category_id: str,
        index: int,
        text: str,
    ) -> Recommendation:
        """Replace the text of one recommendation.

        Raises:
            ValueError: If the profile or category is unknown.
            IndexError: If index is out of range.
        """
        entries = self._entries(profile_key, category_id, index)
        entries[index] = entries[index].model_copy(update={"text": text})

        audit_logger.log(
            action="update_text",
            entity_type="recommendation",
            entity_id=f"{profile_key}/{category_id}/{index}",
        )
        self._save_document()
        return entries[index]

    def update_recommendation_symptoms(
        self,
        profile_key: str,
        category_id: str,
        index: int,
        linked_symptoms: str | Iterable[str],
    ) -> Recommendation:
        """Relink one recommendation to one or more symptoms.

        Raises:
            ValueError: If the profile or category is unknown, the link set
                is empty or a symptom is not in the catalog.
            IndexError: If index is out of range.
        """
        entries = self._entries(profile_key, category_id, index)

        if isinstance(linked_symptoms, str):
            linked_symptoms = [linked_symptoms]
        linked = list(dict.fromkeys(linked_symptoms))
        if not linked:
            raise ValueError("A recommendation must link at least one symptom")
        unknown = [s for s in linked if s not in self.document.symptom_ids()]
        if unknown:
            raise ValueError(f"Unknown symptoms: {unknown}")

        entries[index] = Recommendation(text=entries[index].text, linked_symptoms=linked)

        audit_logger.log(
            action="update_symptoms",
            entity_type="recommendation",
            entity_id=f"{profile_key}/{category_id}/{index}",
            metadata={"linked_symptoms": linked},
        )
        self._save_document()
        return entries[index]

    # =========================================================================
    # Derived views
    # =========================================================================

    def filtered_recommendations(self) -> list[Recommendation]:
        """Recommendations for the current profile and selected symptoms."""
        return filter_recommendations(
            self.document.recommendations,
            self.profile.key,
            self.document.symptom_categories,
            self.selected_symptoms,
        )

    def diagnosis_text(self, name: Optional[str] = None) -> Optional[str]:
        """Rendered narrative for the current profile, None without diagnosis."""
        return diagnosis_text(
            self.profile.diagnosis,
            self.profile.age_group,
            self.profile.sex,
            name,
        )

    def diagnosis_notice(self) -> Optional[str]:
        """Notice shown above the narrative, if the narrative has one."""
        narrative = get_narrative(self.profile.diagnosis, self.profile.age_group)
        return narrative.notice if narrative else None

    def cats2_result(self) -> CATS2Result:
        return score_cats2(self.responses["cats2_ratings"], self.responses["cats2_answers"])

    def checklist_result(self, instrument: Instrument | str) -> ChecklistResult:
        """Score the YSR or CBCL responses.

        Raises:
            ValueError: If the instrument is not a behaviour checklist.
        """
        instrument = Instrument(instrument)
        if instrument not in (Instrument.YSR, Instrument.CBCL):
            raise ValueError(f"Not a behaviour checklist: {instrument.value}")
        return score_checklist(self.responses[instrument.value], default_definition(instrument))

    def export_recommendations(self, name: Optional[str] = None) -> str:
        return recommendations_text(self.diagnosis_text(name), self.filtered_recommendations())

    def export_cats2(self) -> str:
        return cats2_text(self.cats2_result())
