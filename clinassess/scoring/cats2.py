"""CATS-2 (Child and Adolescent Trauma Screen) scoring module.

Symptom items are rated 0-3:
- 0 = Aldrig (never)
- 1 = Ibland (sometimes)
- 2 = Ofta (often)
- 3 = Nästan alltid (almost always)

Three nosologies are scored from the same responses:
- DSM-5 PTSD: sum of every symptom item and sub-item
- ICD-11 PTSD: sum of items 2, 3, 6, 7, 17, 18
- ICD-11 CPTSD: ICD-11 PTSD items plus 9b, 9d, 10a, 13, 14, 15a

Categorical criteria count only items rated 2 or 3. Sub-items of questions
9, 10 and 15 count as one symptom toward the DSM-5 clusters. The CPTSD
verdict requires the ICD-11 PTSD verdict.

Traumatic events (t1-t15) and functional impairment (f1-f5) are yes/no
questions answered "ja" or "nej"; they are reported but do not change any
verdict.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Optional

from clinassess.instruments.loader import InstrumentLoader
from clinassess.instruments.models import Instrument, Nosology, TraumaScreenDefinition
from clinassess.scoring.criteria import NosologyResult, evaluate_nosologies
from clinassess.scoring.responses import ResponseStore, normalize_responses


@dataclass
class CATS2Result:
    """Result of CATS-2 scoring."""
    nosologies: dict[Nosology, NosologyResult]
    traumatic_events: list[str]
    functional_impairment_count: int
    functional_impairment_total: int
    answered_count: int
    item_count: int
    yes_no_answered_count: int
    definition_version: str
    definition_hash: str
    items: dict[str, Any] = field(default_factory=dict)

    @property
    def dsm5(self) -> NosologyResult:
        return self.nosologies[Nosology.DSM5_PTSD]

    @property
    def icd11(self) -> NosologyResult:
        return self.nosologies[Nosology.ICD11_PTSD]

    @property
    def cptsd(self) -> NosologyResult:
        return self.nosologies[Nosology.ICD11_CPTSD]

    @property
    def has_responses(self) -> bool:
        """Whether any symptom or yes/no question has been answered."""
        return self.answered_count > 0 or self.yes_no_answered_count > 0


@lru_cache
def default_definition() -> TraumaScreenDefinition:
    """Packaged CATS-2 definition, parsed once."""
    return InstrumentLoader().trauma_screen(Instrument.CATS2)


def _yes_ids(
    answers: Mapping[str, Any],
    item_ids: list[str],
    yes_answer: str,
) -> list[str]:
    """Ids of questions answered yes, in questionnaire order."""
    yes = yes_answer.lower()
    return [
        item_id
        for item_id in item_ids
        if isinstance(answers.get(item_id), str) and answers[item_id].strip().lower() == yes
    ]


def score_cats2(
    responses: Mapping[Any, Any],
    answers: Optional[Mapping[Any, Any]] = None,
    definition: Optional[TraumaScreenDefinition] = None,
) -> CATS2Result:
    """Score CATS-2 questionnaire responses.

    Args:
        responses: Symptom item id -> rating 0-3 (e.g. {1: 2, "9a": 3});
                   unanswered items are simply absent
        answers: Yes/no answers for trauma events and functional
                 impairment (e.g. {"t1": "ja", "f2": "nej"})
        definition: Instrument definition (defaults to the packaged one)

    Returns:
        CATS2Result with per-nosology totals, bands and criteria verdicts.
    """
    definition = definition or default_definition()
    ratings = responses if isinstance(responses, ResponseStore) else normalize_responses(responses)
    yes_no = normalize_responses(answers or {})

    nosologies = evaluate_nosologies(
        ratings,
        definition.nosologies,
        item_threshold=definition.item_threshold,
    )

    event_ids = [item.id for item in definition.trauma_events]
    event_texts = {item.id: item.text for item in definition.trauma_events}
    traumatic_events = [
        event_texts[item_id] for item_id in _yes_ids(yes_no, event_ids, definition.yes_answer)
    ]

    impairment_ids = [item.id for item in definition.functional_impairment]
    impairment_count = len(_yes_ids(yes_no, impairment_ids, definition.yes_answer))

    for result in nosologies.values():
        result.details["functional_impairment"] = {
            "count": impairment_count,
            "of": len(impairment_ids),
        }

    item_ids = definition.item_ids
    answered = sum(1 for item_id in item_ids if item_id in ratings)
    yes_no_answered = sum(1 for item_id in event_ids + impairment_ids if item_id in yes_no)

    return CATS2Result(
        nosologies=nosologies,
        traumatic_events=traumatic_events,
        functional_impairment_count=impairment_count,
        functional_impairment_total=len(impairment_ids),
        answered_count=answered,
        item_count=len(item_ids),
        yes_no_answered_count=yes_no_answered,
        definition_version=definition.version,
        definition_hash=definition.content_hash,
        items={item_id: ratings[item_id] for item_id in item_ids if item_id in ratings},
    )
