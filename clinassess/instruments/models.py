"""Instrument definition data models.

Instruments are data tables: every nosology, cluster and band is read from
a versioned YAML definition, so adding a nosology or a checklist scale is a
data change rather than a new code path.
"""

import hashlib
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Instrument(str, Enum):
    """Questionnaire instruments handled by the engine."""

    CATS2 = "cats2"  # Child and Adolescent Trauma Screen
    YSR = "ysr"  # Youth Self Report
    CBCL = "cbcl"  # Child Behavior Checklist


class Nosology(str, Enum):
    """Diagnostic classification systems scored from CATS-2."""

    DSM5_PTSD = "dsm5_ptsd"
    ICD11_PTSD = "icd11_ptsd"
    ICD11_CPTSD = "icd11_cptsd"  # Complex variant, gated on ICD-11 PTSD


class Band(str, Enum):
    """Ordered interpretation bands for a dimensional total."""

    NORMAL = "normal"
    MODERATE = "moderate"
    ELEVATED = "elevated"


def item_key(item_id: Any) -> str:
    """Normalize an item id (1, "1", "9a") to its string key."""
    return str(item_id).strip()


@dataclass(frozen=True)
class ItemDefinition:
    """A single rateable or yes/no question."""
    id: str
    text: str
    label: str = ""


@dataclass(frozen=True)
class BandCutoff:
    """Inclusive score range mapped to a band."""
    band: Band
    min: int
    max: Optional[int]  # None = open-ended upper band
    text: str = ""

    def contains(self, total: int) -> bool:
        """Check whether a total falls inside this range."""
        if total < self.min:
            return False
        return self.max is None or total <= self.max


@dataclass(frozen=True)
class ScaleDefinition:
    """Dimensional scale: items to sum and the bands to interpret the sum."""
    items: tuple[str, ...]
    bands: tuple[BandCutoff, ...]

    @classmethod
    def from_dict(cls, data: dict) -> "ScaleDefinition":
        """Create ScaleDefinition from dictionary representation.

        Raises:
            ValueError: If the bands do not cover every total >= 0 exactly once.
        """
        bands = tuple(
            BandCutoff(
                band=Band(b["band"]),
                min=int(b["min"]),
                max=None if b.get("max") is None else int(b["max"]),
                text=b.get("text", ""),
            )
            for b in data.get("bands", [])
        )
        _check_band_coverage(bands)

        return cls(
            items=tuple(item_key(i) for i in data["items"]),
            bands=bands,
        )


def _check_band_coverage(bands: tuple[BandCutoff, ...]) -> None:
    """Bands must start at 0, be contiguous and end open-ended."""
    if not bands:
        raise ValueError("Scale has no bands")

    expected_min = 0
    for cutoff in bands:
        if cutoff.min != expected_min:
            raise ValueError(
                f"Band {cutoff.band.value} starts at {cutoff.min}, expected {expected_min}"
            )
        if cutoff.max is None:
            break
        if cutoff.max < cutoff.min:
            raise ValueError(f"Band {cutoff.band.value} has max below min")
        expected_min = cutoff.max + 1

    if bands[-1].max is not None or any(b.max is None for b in bands[:-1]):
        raise ValueError("Only the last band may be open-ended, and it must be")


@dataclass(frozen=True)
class ClusterDefinition:
    """Diagnostic criteria cluster.

    Plain members count once each when they reach the item threshold.
    Each collapse group (variants of one symptom) counts at most once.
    """
    id: str
    label: str
    members: tuple[str, ...]
    threshold: int
    collapse_groups: tuple[tuple[str, ...], ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "ClusterDefinition":
        """Create ClusterDefinition from dictionary representation."""
        return cls(
            id=data["id"],
            label=data.get("label", data["id"]),
            members=tuple(item_key(i) for i in data.get("members", [])),
            threshold=int(data["threshold"]),
            collapse_groups=tuple(
                tuple(item_key(i) for i in group)
                for group in data.get("collapse_groups", [])
            ),
        )


@dataclass(frozen=True)
class NosologyDefinition:
    """A classification system: its dimensional scale and criteria clusters."""
    id: Nosology
    label: str
    scale: ScaleDefinition
    clusters: tuple[ClusterDefinition, ...]
    requires: Optional[Nosology] = None

    @classmethod
    def from_dict(cls, data: dict) -> "NosologyDefinition":
        """Create NosologyDefinition from dictionary representation."""
        requires = data.get("requires")
        return cls(
            id=Nosology(data["id"]),
            label=data.get("label", data["id"]),
            scale=ScaleDefinition.from_dict(data["scale"]),
            clusters=tuple(ClusterDefinition.from_dict(c) for c in data.get("clusters", [])),
            requires=Nosology(requires) if requires else None,
        )


@dataclass
class TraumaScreenDefinition:
    """CATS-2 style trauma screen definition."""
    id: str
    name: str
    version: str
    description: str
    rating_min: int
    rating_max: int
    legend: str
    item_threshold: int
    items: list[ItemDefinition]
    trauma_events: list[ItemDefinition]
    functional_impairment: list[ItemDefinition]
    nosologies: list[NosologyDefinition]
    yes_answer: str = "ja"
    export: dict[str, str] = field(default_factory=dict)

    _hash: Optional[str] = field(default=None, repr=False)

    @property
    def item_ids(self) -> list[str]:
        """All symptom item ids in questionnaire order."""
        return [item.id for item in self.items]

    @property
    def content_hash(self) -> str:
        """Compute SHA-256 hash of the scoring-relevant content."""
        if self._hash is None:
            content = {
                "id": self.id,
                "version": self.version,
                "item_threshold": self.item_threshold,
                "nosologies": [
                    {
                        "id": n.id.value,
                        "requires": n.requires.value if n.requires else None,
                        "scale": list(n.scale.items),
                        "bands": [[b.band.value, b.min, b.max] for b in n.scale.bands],
                        "clusters": [
                            {
                                "id": c.id,
                                "members": list(c.members),
                                "collapse_groups": [list(g) for g in c.collapse_groups],
                                "threshold": c.threshold,
                            }
                            for c in n.clusters
                        ],
                    }
                    for n in self.nosologies
                ],
            }
            content_str = json.dumps(content, sort_keys=True)
            self._hash = hashlib.sha256(content_str.encode()).hexdigest()
        return self._hash

    def nosology(self, nosology_id: Nosology | str) -> NosologyDefinition:
        """Get a nosology definition by id.

        Raises:
            KeyError: If the nosology is not defined for this instrument.
        """
        wanted = Nosology(nosology_id)
        for nosology in self.nosologies:
            if nosology.id == wanted:
                return nosology
        raise KeyError(f"Nosology not defined: {wanted.value}")

    @classmethod
    def from_dict(cls, data: dict) -> "TraumaScreenDefinition":
        """Create TraumaScreenDefinition from dictionary representation.

        Raises:
            ValueError: If a nosology requires one that is not defined before it.
        """
        nosologies: list[NosologyDefinition] = []
        for nosology_data in data.get("nosologies", []):
            nosology = NosologyDefinition.from_dict(nosology_data)
            # Prerequisites are evaluated first, so they must come first
            if nosology.requires and nosology.requires not in {n.id for n in nosologies}:
                raise ValueError(
                    f"{nosology.id.value} requires {nosology.requires.value}, "
                    "which must be defined earlier"
                )
            nosologies.append(nosology)

        rating = data.get("rating", {})

        return cls(
            id=data["id"],
            name=data["name"],
            version=str(data["version"]),
            description=data.get("description", ""),
            rating_min=int(rating.get("min", 0)),
            rating_max=int(rating.get("max", 3)),
            legend=rating.get("legend", ""),
            item_threshold=int(data.get("item_threshold", 2)),
            items=_items_from_list(data.get("items", [])),
            trauma_events=_items_from_list(data.get("trauma_events", [])),
            functional_impairment=_items_from_list(data.get("functional_impairment", [])),
            nosologies=nosologies,
            yes_answer=data.get("yes_answer", "ja"),
            export=dict(data.get("export", {})),
        )


def _items_from_list(entries: list[dict]) -> list[ItemDefinition]:
    return [
        ItemDefinition(
            id=item_key(entry["id"]),
            text=entry.get("text", ""),
            label=str(entry.get("label", "")),
        )
        for entry in entries
    ]


@dataclass(frozen=True)
class ChecklistCluster:
    """Named sum scale of a behaviour checklist.

    highlight only changes how the cluster is presented.
    """
    id: str
    name: str
    items: tuple[str, ...]
    highlight: bool = False


@dataclass(frozen=True)
class ClusterSet:
    """A fixed group of checklist clusters (e.g. DSM-5-oriented scales)."""
    id: str
    label: str
    clusters: tuple[ChecklistCluster, ...]


@dataclass
class ChecklistDefinition:
    """Long-form behaviour checklist (YSR, CBCL)."""
    id: str
    name: str
    version: str
    description: str
    rating_min: int
    rating_max: int
    legend: str
    items: list[ItemDefinition]
    cluster_sets: list[ClusterSet]

    @property
    def item_ids(self) -> list[str]:
        """All answerable item ids, sub-items in place of their parent."""
        return [item.id for item in self.items]

    def cluster_set(self, set_id: str) -> ClusterSet:
        """Get a cluster set by id.

        Raises:
            KeyError: If the cluster set is not defined.
        """
        for cluster_set in self.cluster_sets:
            if cluster_set.id == set_id:
                return cluster_set
        raise KeyError(f"Cluster set not defined: {set_id}")

    @classmethod
    def from_dict(cls, data: dict) -> "ChecklistDefinition":
        """Create ChecklistDefinition from dictionary representation.

        Items are numbered 1..item_count. A parent listed under sub_items is
        replaced by its lettered sub-items (56 -> 56a..56h).
        """
        sub_items = {
            item_key(parent): [str(letter) for letter in letters]
            for parent, letters in data.get("sub_items", {}).items()
        }

        items: list[ItemDefinition] = []
        for number in range(1, int(data["item_count"]) + 1):
            parent = str(number)
            if parent in sub_items:
                for letter in sub_items[parent]:
                    items.append(ItemDefinition(id=f"{parent}{letter}", text=f"Fråga {parent}{letter}"))
            else:
                items.append(ItemDefinition(id=parent, text=f"Fråga {parent}"))

        cluster_sets = [
            ClusterSet(
                id=set_data["id"],
                label=set_data.get("label", set_data["id"]),
                clusters=tuple(
                    ChecklistCluster(
                        id=c["id"],
                        name=c.get("name", c["id"]),
                        items=tuple(item_key(i) for i in c["items"]),
                        highlight=bool(c.get("highlight", False)),
                    )
                    for c in set_data.get("clusters", [])
                ),
            )
            for set_data in data.get("cluster_sets", [])
        ]

        rating = data.get("rating", {})

        return cls(
            id=data["id"],
            name=data["name"],
            version=str(data["version"]),
            description=data.get("description", ""),
            rating_min=int(rating.get("min", 0)),
            rating_max=int(rating.get("max", 2)),
            legend=rating.get("legend", ""),
            items=items,
            cluster_sets=cluster_sets,
        )
