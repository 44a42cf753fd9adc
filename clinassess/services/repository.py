"""Persistence of the assessment document and response maps."""

import json
from typing import Any

from pydantic import ValidationError

from clinassess.catalog.defaults import default_document
from clinassess.catalog.models import AssessmentDocument
from clinassess.core.config import settings
from clinassess.core.logging import get_logger
from clinassess.services.migrations import MigrationError, migrate_document
from clinassess.services.storage import StorageBackend, StorageError, get_storage_backend

logger = get_logger(__name__)

# Response maps persisted next to the document
RESPONSE_MAPS = ("cats2_ratings", "cats2_answers", "ysr", "cbcl")


class AssessmentRepository:
    """Reads and writes the assessment document through a storage backend.

    The document lives under one key (settings.storage_key); each response
    map lives under "<storage key>.<map name>".
    """

    def __init__(
        self,
        storage: StorageBackend | None = None,
        storage_key: str | None = None,
    ) -> None:
        self.storage = storage or get_storage_backend()
        self.storage_key = storage_key or settings.storage_key

    def response_key(self, name: str) -> str:
        """Storage key of a response map."""
        if name not in RESPONSE_MAPS:
            raise ValueError(f"Unknown response map: {name}")
        return f"{self.storage_key}.{name}"

    def load_document(self) -> AssessmentDocument:
        """Load, migrate and validate the stored document.

        Falls back to a fresh default document when nothing is stored or
        the stored document is unreadable, of an unknown version, or fails
        validation. Unusable documents are removed from storage; a backend
        that cannot be read at all is cleared.

        Raises:
            StorageError: If an unreadable backend cannot be cleared.
        """
        try:
            raw = self.storage.get_item(self.storage_key)
        except StorageError as e:
            logger.warning(
                f"Clearing unreadable storage ({e}), using defaults",
                extra={"action": "clear_storage"},
            )
            self.storage.clear()
            return default_document()

        if raw is None:
            logger.info("No stored assessment document, using defaults")
            return default_document()

        try:
            document = migrate_document(json.loads(raw))
            return AssessmentDocument.model_validate(document)
        except json.JSONDecodeError as e:
            reason = f"invalid JSON: {e}"
        except MigrationError as e:
            reason = str(e)
        except ValidationError as e:
            reason = f"{e.error_count()} validation error(s)"

        logger.warning(
            f"Discarding stored assessment document ({reason}), using defaults",
            extra={"action": "discard_document"},
        )
        self.storage.remove_item(self.storage_key)
        return default_document()

    def save_document(self, document: AssessmentDocument) -> None:
        """Write the document under the storage key.

        Raises:
            StorageError: If the backend cannot be written.
        """
        self.storage.set_item(
            self.storage_key,
            json.dumps(document.to_json_dict(), ensure_ascii=False),
        )

    def load_responses(self, name: str) -> dict[str, Any]:
        """Load a stored response map, empty when absent or unreadable."""
        raw = self.storage.get_item(self.response_key(name))
        if raw is None:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            data = None
        if not isinstance(data, dict):
            logger.warning(
                f"Discarding stored responses {name}: not a JSON object",
                extra={"action": "discard_responses"},
            )
            self.storage.remove_item(self.response_key(name))
            return {}
        return data

    def save_responses(self, name: str, responses: dict[str, Any]) -> None:
        """Write a response map; an empty map removes the key."""
        key = self.response_key(name)
        if not responses:
            self.storage.remove_item(key)
            return
        self.storage.set_item(key, json.dumps(responses, ensure_ascii=False))

    def reset(self) -> AssessmentDocument:
        """Clear all storage and persist a fresh default document."""
        self.storage.clear()
        document = default_document()
        self.save_document(document)
        logger.warning("Persisted state reset to defaults", extra={"action": "reset"})
        return document
