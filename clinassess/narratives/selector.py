"""Diagnosis narrative lookup and pronoun substitution."""

from typing import Optional

from clinassess.catalog.profiles import AgeGroup, Diagnosis, Sex
from clinassess.core.config import settings
from clinassess.narratives.templates import DIAGNOSIS_NARRATIVES, PRONOUNS, DiagnosisNarrative


def get_narrative(
    diagnosis: Diagnosis | str,
    age_group: AgeGroup | str,
) -> Optional[DiagnosisNarrative]:
    """Get the narrative entry for a diagnosis and age group.

    Returns None for "no diagnosis" and for unknown keys.
    """
    try:
        key = (Diagnosis(diagnosis), AgeGroup(age_group))
    except ValueError:
        return None
    if key[0] == Diagnosis.NONE:
        return None
    return DIAGNOSIS_NARRATIVES.get(key)


def lookup(diagnosis: Diagnosis | str, age_group: AgeGroup | str) -> Optional[str]:
    """Get the unrendered template for a diagnosis and age group."""
    narrative = get_narrative(diagnosis, age_group)
    return narrative.template if narrative else None


def render(template: str, sex: Sex | str, name: Optional[str] = None) -> str:
    """Substitute the pronoun family for sex and the patient name.

    Args:
        template: Narrative template
        sex: Selects the pronoun family
        name: Name token (defaults to the configured patient name)

    Returns:
        Rendered narrative text
    """
    pronouns = PRONOUNS[Sex(sex)]
    substitutions = {
        "name": name or settings.default_patient_name,
        "subject": pronouns.subject,
        "Subject": pronouns.subject.capitalize(),
        "object": pronouns.object,
        "possessive": pronouns.possessive,
        "Possessive": pronouns.possessive.capitalize(),
    }

    text = template
    for key, value in substitutions.items():
        text = text.replace(f"{{{{{key}}}}}", value)
    return text


def diagnosis_text(
    diagnosis: Diagnosis | str,
    age_group: AgeGroup | str,
    sex: Sex | str,
    name: Optional[str] = None,
) -> Optional[str]:
    """Look up and render the narrative, None when there is none."""
    template = lookup(diagnosis, age_group)
    if template is None:
        return None
    return render(template, sex, name)
