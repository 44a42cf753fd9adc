"""Categorical diagnostic-criteria evaluation.

A cluster counts its qualifying symptoms (rating >= item threshold) and is
met when the count reaches the cluster threshold. Variants of one symptom
(e.g. 9a-9d) form a collapse group that contributes at most 1, however
many of its members qualify.

A nosology's criteria are met only when every cluster is met. A nosology
with a prerequisite (ICD-11 CPTSD requires ICD-11 PTSD) still reports all
of its cluster counts, but its verdict is false whenever the prerequisite's
verdict is false.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from clinassess.instruments.models import (
    Band,
    ClusterDefinition,
    Nosology,
    NosologyDefinition,
    item_key,
)
from clinassess.scoring.dimensional import rating_of, score_scale
from clinassess.scoring.responses import ResponseStore, normalize_responses

# Rating at which an item counts as a present symptom ("ofta" or more)
DEFAULT_ITEM_THRESHOLD = 2


@dataclass(frozen=True)
class ClusterCount:
    """Raw outcome of a cluster evaluation."""
    count: int
    met: bool


@dataclass
class ClusterResult:
    """Cluster outcome with the details shown to the clinician."""
    id: str
    label: str
    count: int
    needed: int
    met: bool


@dataclass
class NosologyResult:
    """Dimensional and categorical outcome for one nosology."""
    nosology: Nosology
    label: str
    total: int
    band: Band
    interpretation: str
    clusters: list[ClusterResult]
    clusters_met: bool
    meets_criteria: bool
    prerequisite: Optional[Nosology] = None
    prerequisite_met: Optional[bool] = None
    details: dict[str, Any] = field(default_factory=dict)

    def cluster(self, cluster_id: str) -> ClusterResult:
        """Get a cluster result by id.

        Raises:
            KeyError: If no such cluster was evaluated.
        """
        for cluster in self.clusters:
            if cluster.id == cluster_id:
                return cluster
        raise KeyError(f"Cluster not evaluated: {cluster_id}")


def _as_store(responses: Mapping[Any, Any]) -> Mapping[str, Any]:
    if isinstance(responses, ResponseStore):
        return responses
    return normalize_responses(responses)


def qualifies(
    responses: Mapping[str, Any],
    item_id: Any,
    item_threshold: int = DEFAULT_ITEM_THRESHOLD,
) -> bool:
    """Check whether an item is rated at or above the item threshold."""
    return rating_of(responses, item_id) >= item_threshold


def evaluate_cluster(
    responses: Mapping[Any, Any],
    member_ids: Iterable[Any],
    collapse_groups: Iterable[Iterable[Any]] = (),
    threshold: int = 1,
    item_threshold: int = DEFAULT_ITEM_THRESHOLD,
) -> ClusterCount:
    """Count qualifying symptoms in a cluster and compare with its threshold.

    Args:
        responses: Item id -> rating
        member_ids: Cluster items; ids that also appear in a collapse group
            are counted through the group only
        collapse_groups: Groups of sub-items that count at most once
        threshold: Minimum count for the cluster to be met
        item_threshold: Minimum rating for an item to count

    Returns:
        ClusterCount with count and met flag
    """
    responses = _as_store(responses)
    groups = [[item_key(i) for i in group] for group in collapse_groups]
    grouped = {item_id for group in groups for item_id in group}

    count = 0

    # Plain members count once each
    for item_id in dict.fromkeys(item_key(i) for i in member_ids):
        if item_id in grouped:
            continue
        if qualifies(responses, item_id, item_threshold):
            count += 1

    # Each collapse group counts once if any variant qualifies
    for group in groups:
        if any(qualifies(responses, item_id, item_threshold) for item_id in group):
            count += 1

    return ClusterCount(count=count, met=count >= threshold)


def evaluate_cluster_definition(
    responses: Mapping[Any, Any],
    cluster: ClusterDefinition,
    item_threshold: int = DEFAULT_ITEM_THRESHOLD,
) -> ClusterResult:
    """Evaluate a cluster from its definition."""
    outcome = evaluate_cluster(
        responses,
        cluster.members,
        cluster.collapse_groups,
        cluster.threshold,
        item_threshold,
    )
    return ClusterResult(
        id=cluster.id,
        label=cluster.label,
        count=outcome.count,
        needed=cluster.threshold,
        met=outcome.met,
    )


def evaluate_nosology(
    responses: Mapping[Any, Any],
    nosology: NosologyDefinition,
    item_threshold: int = DEFAULT_ITEM_THRESHOLD,
    prerequisite_met: Optional[bool] = None,
) -> NosologyResult:
    """Score one nosology: dimensional total, band and criteria verdict.

    Args:
        responses: Item id -> rating
        nosology: Nosology definition
        item_threshold: Minimum rating for an item to count
        prerequisite_met: Verdict of the required nosology, if any

    Returns:
        NosologyResult
    """
    responses = _as_store(responses)

    total, cutoff = score_scale(responses, nosology.scale)
    clusters = [
        evaluate_cluster_definition(responses, cluster, item_threshold)
        for cluster in nosology.clusters
    ]
    clusters_met = all(cluster.met for cluster in clusters)

    if nosology.requires is not None:
        meets_criteria = bool(prerequisite_met) and clusters_met
    else:
        meets_criteria = clusters_met

    return NosologyResult(
        nosology=nosology.id,
        label=nosology.label,
        total=total,
        band=cutoff.band,
        interpretation=cutoff.text,
        clusters=clusters,
        clusters_met=clusters_met,
        meets_criteria=meets_criteria,
        prerequisite=nosology.requires,
        prerequisite_met=bool(prerequisite_met) if nosology.requires else None,
    )


def evaluate_nosologies(
    responses: Mapping[Any, Any],
    nosologies: Iterable[NosologyDefinition],
    item_threshold: int = DEFAULT_ITEM_THRESHOLD,
) -> dict[Nosology, NosologyResult]:
    """Evaluate nosologies in definition order, gating on prerequisites.

    Args:
        responses: Item id -> rating
        nosologies: Definitions, prerequisites listed before dependents
        item_threshold: Minimum rating for an item to count

    Returns:
        Nosology -> NosologyResult, in definition order
    """
    responses = _as_store(responses)
    results: dict[Nosology, NosologyResult] = {}

    for nosology in nosologies:
        prerequisite_met = None
        if nosology.requires is not None:
            prerequisite = results.get(nosology.requires)
            prerequisite_met = prerequisite.meets_criteria if prerequisite else False

        results[nosology.id] = evaluate_nosology(
            responses,
            nosology,
            item_threshold=item_threshold,
            prerequisite_met=prerequisite_met,
        )

    return results
