"""Schema migrations for the persisted assessment document.

Each step upgrades a raw document from one schemaVersion to the next.
Documents written before versioning existed carry no schemaVersion and
are treated as version 0.
"""

from collections.abc import Callable
from typing import Any

from clinassess.catalog.models import CURRENT_SCHEMA_VERSION
from clinassess.core.logging import get_logger

logger = get_logger(__name__)

VERSION_KEY = "schemaVersion"


class MigrationError(Exception):
    """Raised when a document cannot be upgraded."""

    pass


def detect_version(document: dict[str, Any]) -> int:
    """Get the schema version of a raw document (0 when unversioned)."""
    version = document.get(VERSION_KEY, 0)
    if isinstance(version, bool) or not isinstance(version, int):
        raise MigrationError(f"Invalid {VERSION_KEY}: {version!r}")
    return version


def migrate_v0_to_v1(document: dict[str, Any]) -> dict[str, Any]:
    """Stamp an unversioned document that already links symptoms.

    Version 0 recommendations were plain text without linkedSymptoms.
    Those cannot be mapped onto symptoms, so the document is rejected
    rather than merged.
    """
    recommendations = document.get("recommendations")
    if not isinstance(recommendations, dict) or not recommendations:
        raise MigrationError("Document has no recommendation bank")

    for key, categories in recommendations.items():
        if not isinstance(categories, dict):
            raise MigrationError(f"Profile {key} is not a category map")
        for category_id, entries in categories.items():
            if not isinstance(entries, list):
                raise MigrationError(f"{key}/{category_id} is not a list")
            for entry in entries:
                if not isinstance(entry, dict) or "linkedSymptoms" not in entry:
                    raise MigrationError(
                        f"Recommendation in {key}/{category_id} has no linkedSymptoms"
                    )

    return {**document, VERSION_KEY: 1}


# from version -> step producing version + 1
MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    0: migrate_v0_to_v1,
}


def migrate_document(document: Any) -> dict[str, Any]:
    """Upgrade a raw document to CURRENT_SCHEMA_VERSION.

    Args:
        document: Parsed JSON of the stored document

    Returns:
        Raw document at the current version (not yet validated)

    Raises:
        MigrationError: If the document is not an object, its version is
            unknown, or a step rejects it
    """
    if not isinstance(document, dict):
        raise MigrationError("Document is not a JSON object")

    version = detect_version(document)
    if version > CURRENT_SCHEMA_VERSION:
        raise MigrationError(f"Unrecognised {VERSION_KEY}: {version}")

    while version < CURRENT_SCHEMA_VERSION:
        step = MIGRATIONS.get(version)
        if step is None:
            raise MigrationError(f"No migration from {VERSION_KEY} {version}")
        document = step(document)
        logger.info(f"Migrated assessment document from v{version} to v{version + 1}")
        version = detect_version(document)

    return document
