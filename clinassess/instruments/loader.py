"""YAML instrument definition loader with integrity hashes."""

import hashlib
from pathlib import Path
from typing import Any

import yaml

from clinassess.core.config import settings
from clinassess.core.logging import get_logger
from clinassess.instruments.models import (
    ChecklistDefinition,
    Instrument,
    TraumaScreenDefinition,
)

logger = get_logger(__name__)

# Packaged definitions directory
DEFINITIONS_DIR = Path(__file__).parent / "definitions"

# Definition file used for each instrument
INSTRUMENT_FILES = {
    Instrument.CATS2: "cats2-v1.0.0.yaml",
    Instrument.YSR: "ysr-v1.0.0.yaml",
    Instrument.CBCL: "cbcl-v1.0.0.yaml",
}


class InstrumentNotFoundError(FileNotFoundError):
    """Raised when an instrument definition file does not exist."""


def compute_definition_hash(content: str) -> str:
    """Compute SHA256 hash of definition content.

    Args:
        content: Raw YAML content string

    Returns:
        SHA256 hex digest
    """
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def load_definition(
    filename: str,
    definitions_dir: Path | None = None,
) -> tuple[dict[str, Any], str]:
    """Load an instrument YAML file and compute its hash.

    Args:
        filename: Name of the definition file (e.g., "cats2-v1.0.0.yaml")
        definitions_dir: Directory containing definitions (defaults to the
            configured directory, then the packaged one)

    Returns:
        Tuple of (parsed definition dict, SHA256 hash)

    Raises:
        InstrumentNotFoundError: If definition file doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    if definitions_dir is None:
        definitions_dir = settings.instruments_dir or DEFINITIONS_DIR

    filepath = definitions_dir / filename

    if not filepath.exists():
        raise InstrumentNotFoundError(f"Instrument definition not found: {filepath}")

    content = filepath.read_text(encoding="utf-8")
    definition_hash = compute_definition_hash(content)
    definition = yaml.safe_load(content)

    logger.debug(f"Loaded instrument definition {filename} ({definition_hash[:12]})")

    return definition, definition_hash


class InstrumentLoader:
    """Stateful instrument loader with caching."""

    def __init__(self, definitions_dir: Path | None = None) -> None:
        """Initialize loader.

        Args:
            definitions_dir: Directory containing instrument definitions
        """
        self.definitions_dir = definitions_dir or settings.instruments_dir or DEFINITIONS_DIR
        self._cache: dict[str, tuple[dict[str, Any], str]] = {}

    def load(self, filename: str, use_cache: bool = True) -> tuple[dict[str, Any], str]:
        """Load a definition with optional caching.

        Args:
            filename: Definition filename
            use_cache: Whether to use cached version if available

        Returns:
            Tuple of (definition dict, hash)
        """
        if use_cache and filename in self._cache:
            return self._cache[filename]

        self._cache[filename] = load_definition(filename, self.definitions_dir)

        return self._cache[filename]

    def trauma_screen(self, instrument: Instrument = Instrument.CATS2) -> TraumaScreenDefinition:
        """Load and parse a trauma screen definition."""
        definition, _ = self.load(INSTRUMENT_FILES[instrument])
        return TraumaScreenDefinition.from_dict(definition)

    def checklist(self, instrument: Instrument) -> ChecklistDefinition:
        """Load and parse a behaviour checklist definition.

        Raises:
            ValueError: If the instrument is not a checklist.
        """
        if instrument not in (Instrument.YSR, Instrument.CBCL):
            raise ValueError(f"Not a behaviour checklist: {instrument.value}")
        definition, _ = self.load(INSTRUMENT_FILES[instrument])
        return ChecklistDefinition.from_dict(definition)

    def clear_cache(self) -> None:
        """Clear the definition cache."""
        self._cache.clear()

