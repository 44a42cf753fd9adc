"""Patient profile selectors.

A profile is an age group and a sex; the pair selects which copy of the
recommendation bank and which pronoun family are used. The diagnosis is
carried alongside to select the narrative text.
"""

from dataclasses import dataclass
from enum import Enum


class AgeGroup(str, Enum):
    """Age groups with separate recommendation banks and narratives."""

    CHILD = "child"
    TEEN = "teen"


class Sex(str, Enum):
    """Patient sex as selected by the clinician."""

    MALE = "male"
    FEMALE = "female"
    NONBINARY = "nonbinary"


class Diagnosis(str, Enum):
    """Diagnoses with a pre-written narrative."""

    NONE = "none"
    ADHD = "adhd"
    AUTISM = "autism"
    BOTH = "both"  # ADHD and autism
    INTELLECTUAL_DISABILITY = "intellectual_disability"


AGE_GROUP_LABELS = {
    AgeGroup.CHILD: "Barn",
    AgeGroup.TEEN: "Tonåring",
}

SEX_LABELS = {
    Sex.MALE: "Pojke",
    Sex.FEMALE: "Flicka",
    Sex.NONBINARY: "Icke-binär",
}

DIAGNOSIS_LABELS = {
    Diagnosis.NONE: "Ingen diagnos",
    Diagnosis.ADHD: "ADHD",
    Diagnosis.AUTISM: "Autism",
    Diagnosis.BOTH: "ADHD och Autism",
    Diagnosis.INTELLECTUAL_DISABILITY: "Intellektuell funktionsnedsättning",
}


def profile_key(age_group: AgeGroup | str, sex: Sex | str) -> str:
    """Build the bank key for a profile, e.g. "child_male"."""
    return f"{AgeGroup(age_group).value}_{Sex(sex).value}"


# Every profile key, in selector order
PROFILE_KEYS = [profile_key(age, sex) for age in AgeGroup for sex in Sex]


def profile_label(key: str) -> str:
    """Human-readable label for a profile key ("Barn - Pojke")."""
    age, _, sex = key.partition("_")
    return f"{AGE_GROUP_LABELS[AgeGroup(age)]} - {SEX_LABELS[Sex(sex)]}"


@dataclass
class PatientProfile:
    """Current selector values for the patient."""
    age_group: AgeGroup = AgeGroup.CHILD
    sex: Sex = Sex.MALE
    diagnosis: Diagnosis = Diagnosis.NONE

    @property
    def key(self) -> str:
        return profile_key(self.age_group, self.sex)

    def describe(self) -> str:
        """Age group and sex labels, as shown in "no match" notices."""
        return f"{AGE_GROUP_LABELS[self.age_group]}, {SEX_LABELS[self.sex]}"
