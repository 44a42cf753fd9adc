"""Instrument definitions (YAML data tables) and their loader."""

from clinassess.instruments.loader import (
    INSTRUMENT_FILES,
    InstrumentLoader,
    InstrumentNotFoundError,
    compute_definition_hash,
    load_definition,
)
from clinassess.instruments.models import (
    Band,
    ChecklistDefinition,
    ClusterDefinition,
    Instrument,
    Nosology,
    NosologyDefinition,
    TraumaScreenDefinition,
)

__all__ = [
    "INSTRUMENT_FILES",
    "InstrumentLoader",
    "InstrumentNotFoundError",
    "compute_definition_hash",
    "load_definition",
    "Band",
    "ChecklistDefinition",
    "ClusterDefinition",
    "Instrument",
    "Nosology",
    "NosologyDefinition",
    "TraumaScreenDefinition",
]
