"""Pytest configuration and fixtures."""

import os

# Must be set before settings are first imported
os.environ.setdefault("ENV", "test")

import pytest

from clinassess.instruments.loader import InstrumentLoader
from clinassess.instruments.models import Instrument, TraumaScreenDefinition
from clinassess.services.repository import AssessmentRepository
from clinassess.services.session import AssessmentSession
from clinassess.services.storage import InMemoryStorageBackend


@pytest.fixture(scope="session")
def cats2_definition() -> TraumaScreenDefinition:
    """Packaged CATS-2 definition."""
    return InstrumentLoader().trauma_screen(Instrument.CATS2)


@pytest.fixture
def storage() -> InMemoryStorageBackend:
    """Empty in-memory storage backend."""
    return InMemoryStorageBackend()


@pytest.fixture
def repository(storage: InMemoryStorageBackend) -> AssessmentRepository:
    """Repository over in-memory storage."""
    return AssessmentRepository(storage=storage, storage_key="assessmentData")


@pytest.fixture
def session(repository: AssessmentRepository) -> AssessmentSession:
    """Fresh session persisting to in-memory storage."""
    return AssessmentSession(repository=repository, persist_responses=True)
