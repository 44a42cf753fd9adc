"""Plain-text export of recommendations and CATS-2 results.

Produces the text a clinician pastes into the patient record.
"""

from collections.abc import Iterable
from typing import Optional

from clinassess.catalog.models import Recommendation
from clinassess.instruments.models import TraumaScreenDefinition
from clinassess.scoring.cats2 import CATS2Result, default_definition

DEFAULT_EXPORT_LABELS = {
    "title": "CATS-2 RESULTAT",
    "trauma_events_header": "TRAUMATISKA HÄNDELSER (JA-SVAR):",
    "dimensional_header": "DIMENSIONELL POÄNGSÄTTNING:",
    "categorical_header": "KATEGORISK BEDÖMNING:",
    "score_unit": "poäng",
    "criteria_suffix": "Uppfyller kriterierna",
    "yes_label": "JA",
    "no_label": "NEJ",
}


def recommendations_text(
    narrative: Optional[str],
    recommendations: Iterable[Recommendation],
) -> str:
    """Narrative block, a blank line, then one "- text" line per recommendation.

    Either part is left out when empty.
    """
    parts = []
    if narrative:
        parts.append(narrative)

    lines = [f"- {rec.text}" for rec in recommendations]
    if lines:
        parts.append("\n".join(lines))

    return "\n\n".join(parts)


def cats2_text(
    result: CATS2Result,
    definition: Optional[TraumaScreenDefinition] = None,
) -> str:
    """Format CATS-2 results for the patient record.

    Args:
        result: Scored CATS-2 responses
        definition: Definition providing labels (defaults to the packaged one)

    Returns:
        Title, yes-answered traumatic events (if any), one dimensional line
        and one categorical line per nosology.
    """
    definition = definition or default_definition()
    labels = {**DEFAULT_EXPORT_LABELS, **definition.export}

    lines = [labels["title"], ""]

    if result.traumatic_events:
        lines.extend([labels["trauma_events_header"], ""])
        lines.extend(f"• {event}" for event in result.traumatic_events)
        lines.append("")

    lines.extend([labels["dimensional_header"], ""])
    for nosology in result.nosologies.values():
        lines.append(
            f"{nosology.label}: {nosology.total} {labels['score_unit']} - {nosology.interpretation}"
        )
    lines.append("")

    lines.extend([labels["categorical_header"], ""])
    for nosology in result.nosologies.values():
        verdict = labels["yes_label"] if nosology.meets_criteria else labels["no_label"]
        lines.append(f"{nosology.label}: {verdict} - {labels['criteria_suffix']}")

    return "\n".join(lines) + "\n"
