"""Tests for storage backends, schema migrations and the repository."""

import json

import pytest

from clinassess.catalog.defaults import default_document
from clinassess.catalog.models import CURRENT_SCHEMA_VERSION
from clinassess.services.migrations import MigrationError, detect_version, migrate_document
from clinassess.services.repository import AssessmentRepository
from clinassess.services.storage import (
    InMemoryStorageBackend,
    LocalFileStorageBackend,
    StorageError,
)


def _v0_document(with_links: bool) -> dict:
    """Unversioned document as written before schemaVersion existed."""
    data = default_document().to_json_dict()
    del data["schemaVersion"]
    if not with_links:
        for categories in data["recommendations"].values():
            for entries in categories.values():
                for entry in entries:
                    del entry["linkedSymptoms"]
    return data


class TestLocalFileStorage:
    """Tests for the JSON file backend."""

    def test_set_and_get(self, tmp_path) -> None:
        backend = LocalFileStorageBackend(tmp_path / "store.json")

        backend.set_item("a", "1")

        assert backend.get_item("a") == "1"
        assert LocalFileStorageBackend(tmp_path / "store.json").get_item("a") == "1"

    def test_missing_file_reads_as_empty(self, tmp_path) -> None:
        backend = LocalFileStorageBackend(tmp_path / "missing" / "store.json")

        assert backend.get_item("a") is None
        assert backend.remove_item("a") is False

    def test_remove_and_clear(self, tmp_path) -> None:
        backend = LocalFileStorageBackend(tmp_path / "store.json")
        backend.set_item("a", "1")
        backend.set_item("b", "2")

        assert backend.remove_item("a") is True
        assert backend.get_item("a") is None

        backend.clear()
        assert backend.get_item("b") is None
        assert not (tmp_path / "store.json").exists()

    def test_corrupt_file_raises_storage_error(self, tmp_path) -> None:
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageError):
            LocalFileStorageBackend(path).get_item("a")


class TestMigrations:
    """Tests for the versioned migration table."""

    def test_unversioned_is_version_zero(self) -> None:
        assert detect_version({}) == 0

    def test_v0_with_links_is_stamped(self) -> None:
        migrated = migrate_document(_v0_document(with_links=True))

        assert migrated["schemaVersion"] == CURRENT_SCHEMA_VERSION

    def test_v0_without_links_is_rejected(self) -> None:
        with pytest.raises(MigrationError):
            migrate_document(_v0_document(with_links=False))

    def test_future_version_is_rejected(self) -> None:
        with pytest.raises(MigrationError):
            migrate_document({"schemaVersion": CURRENT_SCHEMA_VERSION + 1})

    def test_non_integer_version_is_rejected(self) -> None:
        with pytest.raises(MigrationError):
            migrate_document({"schemaVersion": "1"})

    def test_current_version_passes_through(self) -> None:
        data = default_document().to_json_dict()

        assert migrate_document(data) == data

    def test_non_object_is_rejected(self) -> None:
        with pytest.raises(MigrationError):
            migrate_document([1, 2, 3])


class TestRepository:
    """Tests for loading and saving the assessment document."""

    def test_empty_storage_loads_defaults(self, repository) -> None:
        assert repository.load_document() == default_document()

    def test_saved_document_round_trips(self, repository) -> None:
        document = default_document()
        document.recommendations["teen_male"]["socio_communicative"][0].text = "Ändrad"

        repository.save_document(document)

        loaded = repository.load_document()
        assert loaded.recommendations["teen_male"]["socio_communicative"][0].text == "Ändrad"

    def test_entries_without_links_yield_defaults_not_merge(self, storage) -> None:
        """A stale bank is discarded whole, even edited texts."""
        stale = _v0_document(with_links=False)
        stale["recommendations"]["child_male"]["difficulties_concentrating"][0]["text"] = "Gammal"
        storage.set_item("assessmentData", json.dumps(stale))

        loaded = AssessmentRepository(storage=storage).load_document()

        assert loaded == default_document()
        assert storage.get_item("assessmentData") is None

    def test_invalid_json_yields_defaults(self, storage, caplog) -> None:
        storage.set_item("assessmentData", "{oops")

        with caplog.at_level("WARNING"):
            loaded = AssessmentRepository(storage=storage).load_document()

        assert loaded == default_document()
        assert "Discarding stored assessment document" in caplog.text

    def test_discard_is_tagged_with_action(self, storage, caplog) -> None:
        """Discard warnings carry the action for structured output."""
        storage.set_item("assessmentData", "{oops")

        with caplog.at_level("WARNING"):
            AssessmentRepository(storage=storage).load_document()

        assert [r.action for r in caplog.records] == ["discard_document"]

    def test_unreadable_file_is_cleared(self, tmp_path, caplog) -> None:
        """A storage file that cannot be decoded is removed, not retried."""
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")
        repository = AssessmentRepository(storage=LocalFileStorageBackend(path))

        with caplog.at_level("WARNING"):
            loaded = repository.load_document()

        assert loaded == default_document()
        assert not path.exists()
        assert [getattr(r, "action", None) for r in caplog.records if r.levelname == "WARNING"] == [
            "clear_storage"
        ]

        repository.save_document(loaded)
        assert repository.load_document() == loaded

    def test_validation_failure_yields_defaults(self, storage) -> None:
        data = default_document().to_json_dict()
        data["recommendations"]["child_male"]["socio_communicative"][0]["linkedSymptoms"] = []
        storage.set_item("assessmentData", json.dumps(data))

        assert AssessmentRepository(storage=storage).load_document() == default_document()

    def test_unrecognised_version_yields_defaults(self, storage) -> None:
        data = default_document().to_json_dict()
        data["schemaVersion"] = 99
        storage.set_item("assessmentData", json.dumps(data))

        assert AssessmentRepository(storage=storage).load_document() == default_document()

    def test_responses_round_trip(self, repository) -> None:
        repository.save_responses("cats2_ratings", {"1": 2, "9a": 3})

        assert repository.load_responses("cats2_ratings") == {"1": 2, "9a": 3}

    def test_empty_responses_remove_key(self, repository, storage) -> None:
        repository.save_responses("ysr", {"5": 1})
        repository.save_responses("ysr", {})

        assert storage.get_item("assessmentData.ysr") is None

    def test_unknown_response_map_raises(self, repository) -> None:
        with pytest.raises(ValueError):
            repository.load_responses("phq9")

    def test_reset_clears_everything_and_reseeds(self, repository, storage) -> None:
        storage.set_item("assessmentData.cbcl", "{}")
        storage.set_item("other", "x")

        document = repository.reset()

        assert document == default_document()
        assert storage.get_item("other") is None
        assert storage.get_item("assessmentData.cbcl") is None
        assert json.loads(storage.get_item("assessmentData"))["schemaVersion"] == 1


class TestInMemoryStorage:
    """Tests for the dict backend."""

    def test_initial_items_are_copied(self) -> None:
        initial = {"a": "1"}
        backend = InMemoryStorageBackend(initial)

        backend.set_item("b", "2")

        assert initial == {"a": "1"}
        assert backend.get_item("b") == "2"
