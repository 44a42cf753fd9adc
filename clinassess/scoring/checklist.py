"""Behaviour checklist (YSR / CBCL) category scoring.

Each item is rated 0-2:
- 0 = Stämmer ej (not true)
- 1 = Stämmer någorlunda, eller ibland (somewhat or sometimes true)
- 2 = Stämmer mycket bra, eller ofta (very true or often true)

Scores are plain sums per named cluster, for two fixed cluster sets per
instrument: DSM-5-oriented scales and syndrome scales. There are no
thresholds; the "O" syndrome cluster is flagged for highlighting only.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from clinassess.instruments.loader import InstrumentLoader
from clinassess.instruments.models import ChecklistCluster, ChecklistDefinition, Instrument
from clinassess.scoring.dimensional import rating_of, score
from clinassess.scoring.responses import ResponseStore, normalize_responses


@dataclass
class ClusterScore:
    """Score of one checklist cluster."""
    id: str
    name: str
    score: int
    items: dict[str, int]  # item id -> rating, 0 if unanswered
    highlight: bool = False


@dataclass
class ClusterSetScore:
    """Scores of every cluster in a cluster set."""
    id: str
    label: str
    clusters: list[ClusterScore]

    @property
    def total(self) -> int:
        return sum(cluster.score for cluster in self.clusters)

    def as_mapping(self) -> dict[str, int]:
        """Cluster id -> score."""
        return {cluster.id: cluster.score for cluster in self.clusters}


@dataclass
class ChecklistResult:
    """Result of behaviour checklist scoring."""
    instrument: str
    cluster_sets: list[ClusterSetScore]
    answered_count: int
    item_count: int

    def cluster_set(self, set_id: str) -> ClusterSetScore:
        """Get the scores of a cluster set.

        Raises:
            KeyError: If the cluster set was not scored.
        """
        for cluster_set in self.cluster_sets:
            if cluster_set.id == set_id:
                return cluster_set
        raise KeyError(f"Cluster set not scored: {set_id}")


@lru_cache
def default_definition(instrument: Instrument) -> ChecklistDefinition:
    """Packaged checklist definition, parsed once per instrument."""
    return InstrumentLoader().checklist(instrument)


def score_all_clusters(
    responses: Mapping[Any, Any],
    clusters: Iterable[ChecklistCluster],
) -> dict[str, int]:
    """Sum responses into every named cluster.

    Args:
        responses: Item id -> rating 0-2
        clusters: Cluster definitions

    Returns:
        Cluster id -> score
    """
    ratings = responses if isinstance(responses, ResponseStore) else normalize_responses(responses)
    return {cluster.id: score(ratings, cluster.items) for cluster in clusters}


def score_checklist(
    responses: Mapping[Any, Any],
    definition: ChecklistDefinition,
) -> ChecklistResult:
    """Score a behaviour checklist against all of its cluster sets.

    Args:
        responses: Item id -> rating 0-2 (e.g. {5: 1, "56a": 2})
        definition: Checklist definition

    Returns:
        ChecklistResult with per-cluster scores and item breakdowns.
    """
    ratings = responses if isinstance(responses, ResponseStore) else normalize_responses(responses)

    set_scores = []
    for cluster_set in definition.cluster_sets:
        sums = score_all_clusters(ratings, cluster_set.clusters)
        set_scores.append(
            ClusterSetScore(
                id=cluster_set.id,
                label=cluster_set.label,
                clusters=[
                    ClusterScore(
                        id=cluster.id,
                        name=cluster.name,
                        score=sums[cluster.id],
                        items={item_id: rating_of(ratings, item_id) for item_id in cluster.items},
                        highlight=cluster.highlight,
                    )
                    for cluster in cluster_set.clusters
                ],
            )
        )

    item_ids = definition.item_ids

    return ChecklistResult(
        instrument=definition.id,
        cluster_sets=set_scores,
        answered_count=sum(1 for item_id in item_ids if item_id in ratings),
        item_count=len(item_ids),
    )


def score_ysr(responses: Mapping[Any, Any]) -> ChecklistResult:
    """Score YSR responses with the packaged definition."""
    return score_checklist(responses, default_definition(Instrument.YSR))


def score_cbcl(responses: Mapping[Any, Any]) -> ChecklistResult:
    """Score CBCL responses with the packaged definition."""
    return score_checklist(responses, default_definition(Instrument.CBCL))
