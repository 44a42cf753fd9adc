"""Scoring modules for the trauma screen and behaviour checklists."""

from clinassess.scoring.cats2 import CATS2Result, score_cats2
from clinassess.scoring.checklist import (
    ChecklistResult,
    score_all_clusters,
    score_cbcl,
    score_checklist,
    score_ysr,
)
from clinassess.scoring.criteria import (
    ClusterCount,
    NosologyResult,
    evaluate_cluster,
    evaluate_nosologies,
)
from clinassess.scoring.dimensional import get_band, score
from clinassess.scoring.responses import ResponseStore

__all__ = [
    "score_cats2",
    "CATS2Result",
    "score_checklist",
    "score_all_clusters",
    "score_ysr",
    "score_cbcl",
    "ChecklistResult",
    "evaluate_cluster",
    "evaluate_nosologies",
    "ClusterCount",
    "NosologyResult",
    "score",
    "get_band",
    "ResponseStore",
]
