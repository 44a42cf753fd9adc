"""Tests for diagnosis narrative lookup and rendering."""

import pytest

from clinassess.catalog.profiles import AgeGroup, Diagnosis, Sex
from clinassess.narratives.selector import diagnosis_text, get_narrative, lookup, render
from clinassess.narratives.templates import DIAGNOSIS_NARRATIVES


class TestLookup:
    """Tests for (diagnosis, age group) lookup."""

    def test_no_diagnosis_has_no_text(self) -> None:
        assert lookup("none", "child") is None
        assert lookup(Diagnosis.NONE, AgeGroup.TEEN) is None

    @pytest.mark.parametrize("diagnosis", [d for d in Diagnosis if d != Diagnosis.NONE])
    @pytest.mark.parametrize("age_group", list(AgeGroup))
    def test_every_diagnosis_has_text_per_age_group(self, diagnosis, age_group) -> None:
        """Each diagnosis is written for both age groups."""
        assert lookup(diagnosis, age_group)

    def test_unknown_keys_return_none(self) -> None:
        assert lookup("dyslexia", "child") is None
        assert lookup("adhd", "adult") is None

    def test_child_and_teen_texts_differ(self) -> None:
        assert lookup("adhd", "child") != lookup("adhd", "teen")

    def test_autism_child_carries_notice(self) -> None:
        """Only the autism text for children has a notice."""
        narrative = get_narrative("autism", "child")

        assert narrative.notice == "OBS: texten riktad mot barn som har som mest fyllt 4 år detta år!"
        noticed = [key for key, n in DIAGNOSIS_NARRATIVES.items() if n.notice]
        assert noticed == [(Diagnosis.AUTISM, AgeGroup.CHILD)]


class TestRender:
    """Tests for pronoun and name substitution."""

    TEMPLATE = "{{name}} är här. {{Subject}} ser {{possessive}} bok och vi ser {{object}}."

    @pytest.mark.parametrize(
        "sex,expected",
        [
            (Sex.MALE, "Kim är här. Han ser hans bok och vi ser honom."),
            (Sex.FEMALE, "Kim är här. Hon ser hennes bok och vi ser henne."),
            (Sex.NONBINARY, "Kim är här. Hen ser hens bok och vi ser hen."),
        ],
    )
    def test_pronoun_families(self, sex, expected) -> None:
        assert render(self.TEMPLATE, sex, name="Kim") == expected

    def test_default_name_token(self) -> None:
        """Without a name the configured token is used."""
        assert render("{{name}}", "female") == "Patienten"

    def test_rendered_narratives_have_no_placeholders(self) -> None:
        """Every shipped template renders completely for every sex."""
        for diagnosis, age_group in DIAGNOSIS_NARRATIVES:
            for sex in Sex:
                text = diagnosis_text(diagnosis, age_group, sex, name="Alex")
                assert "{{" not in text
                assert "Alex" in text

    def test_render_is_pure(self) -> None:
        """Rendering does not change the stored template."""
        before = lookup("both", "teen")

        render(before, "male")

        assert lookup("both", "teen") == before
