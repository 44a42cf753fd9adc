"""Session, persistence and export services."""

from clinassess.services.export import cats2_text, recommendations_text
from clinassess.services.migrations import MigrationError, migrate_document
from clinassess.services.recommendations import filter_recommendations
from clinassess.services.repository import AssessmentRepository
from clinassess.services.session import AssessmentSession
from clinassess.services.storage import (
    InMemoryStorageBackend,
    LocalFileStorageBackend,
    StorageBackend,
    StorageError,
)

__all__ = [
    "cats2_text",
    "recommendations_text",
    "MigrationError",
    "migrate_document",
    "filter_recommendations",
    "AssessmentRepository",
    "AssessmentSession",
    "InMemoryStorageBackend",
    "LocalFileStorageBackend",
    "StorageBackend",
    "StorageError",
]
