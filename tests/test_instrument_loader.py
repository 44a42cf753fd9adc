"""Tests for instrument definition loading and integrity."""

import pytest

from clinassess.instruments.loader import (
    InstrumentLoader,
    InstrumentNotFoundError,
    compute_definition_hash,
    load_definition,
)
from clinassess.instruments.models import Instrument, Nosology, TraumaScreenDefinition


class TestInstrumentLoader:
    """Tests for the InstrumentLoader class."""

    def test_load_definition_returns_dict_and_hash(self) -> None:
        """load_definition returns both the parsed dict and its hash."""
        definition, definition_hash = load_definition("cats2-v1.0.0.yaml")

        assert isinstance(definition, dict)
        assert definition["id"] == "cats2"
        assert len(definition_hash) == 64

    def test_hash_is_deterministic(self) -> None:
        assert compute_definition_hash("abc") == compute_definition_hash("abc")
        assert compute_definition_hash("abc") != compute_definition_hash("abd")

    def test_loader_caches_definition(self) -> None:
        """Repeated loads return the cached definition object."""
        loader = InstrumentLoader()

        definition1, hash1 = loader.load("ysr-v1.0.0.yaml")
        definition2, hash2 = loader.load("ysr-v1.0.0.yaml")

        assert definition1 is definition2
        assert hash1 == hash2

    def test_clear_cache(self) -> None:
        """clear_cache forces a fresh read from disk."""
        loader = InstrumentLoader()
        definition1, hash1 = loader.load("ysr-v1.0.0.yaml")

        loader.clear_cache()
        definition2, hash2 = loader.load("ysr-v1.0.0.yaml")

        assert definition1 is not definition2
        assert definition1 == definition2
        assert hash1 == hash2

    def test_use_cache_false_rereads(self) -> None:
        loader = InstrumentLoader()
        definition1, _ = loader.load("cbcl-v1.0.0.yaml")

        definition2, _ = loader.load("cbcl-v1.0.0.yaml", use_cache=False)

        assert definition1 is not definition2
        assert loader.load("cbcl-v1.0.0.yaml")[0] is definition2

    def test_missing_file_raises(self) -> None:
        with pytest.raises(InstrumentNotFoundError):
            load_definition("nonexistent.yaml")

    def test_not_found_is_file_not_found(self) -> None:
        assert issubclass(InstrumentNotFoundError, FileNotFoundError)

    def test_checklist_rejects_trauma_screen(self) -> None:
        with pytest.raises(ValueError):
            InstrumentLoader().checklist(Instrument.CATS2)

    def test_custom_definitions_dir(self, tmp_path) -> None:
        (tmp_path / "cats2-v1.0.0.yaml").write_text(
            "id: cats2\nname: Test\nversion: '9'\n", encoding="utf-8"
        )

        definition, _ = InstrumentLoader(tmp_path).load("cats2-v1.0.0.yaml")

        assert definition["name"] == "Test"


class TestCats2Definition:
    """Integrity checks for the packaged CATS-2 table."""

    def test_item_ids(self, cats2_definition: TraumaScreenDefinition) -> None:
        ids = cats2_definition.item_ids

        assert len(ids) == 25
        assert ids[8:12] == ["9a", "9b", "9c", "9d"]
        assert "9" not in ids

    def test_yes_no_questions(self, cats2_definition: TraumaScreenDefinition) -> None:
        assert [e.id for e in cats2_definition.trauma_events] == [f"t{i}" for i in range(1, 16)]
        assert [f.label for f in cats2_definition.functional_impairment] == ["I", "II", "III", "IV", "V"]

    def test_every_referenced_item_exists(self, cats2_definition: TraumaScreenDefinition) -> None:
        known = set(cats2_definition.item_ids)

        for nosology in cats2_definition.nosologies:
            assert set(nosology.scale.items) <= known
            for cluster in nosology.clusters:
                assert set(cluster.members) <= known
                for group in cluster.collapse_groups:
                    assert set(group) <= known

    def test_dsm5_scale_covers_every_item(self, cats2_definition: TraumaScreenDefinition) -> None:
        dsm5 = cats2_definition.nosology(Nosology.DSM5_PTSD)

        assert list(dsm5.scale.items) == cats2_definition.item_ids

    def test_cptsd_requires_icd11_ptsd(self, cats2_definition: TraumaScreenDefinition) -> None:
        assert cats2_definition.nosology("icd11_cptsd").requires == Nosology.ICD11_PTSD

    def test_prerequisite_must_come_first(self) -> None:
        bands = [{"band": "normal", "min": 0, "max": None}]
        data = {
            "id": "x",
            "name": "X",
            "version": "1",
            "nosologies": [
                {"id": "icd11_cptsd", "requires": "icd11_ptsd", "scale": {"items": [], "bands": bands}},
                {"id": "icd11_ptsd", "scale": {"items": [], "bands": bands}},
            ],
        }

        with pytest.raises(ValueError):
            TraumaScreenDefinition.from_dict(data)

    def test_content_hash_is_stable(self, cats2_definition: TraumaScreenDefinition) -> None:
        reloaded = InstrumentLoader().trauma_screen()

        assert reloaded.content_hash == cats2_definition.content_hash
