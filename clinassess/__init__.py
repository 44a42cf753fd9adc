"""Clinical assessment support engine.

Scores the CATS-2 trauma screen and the YSR/CBCL behaviour checklists,
filters the recommendation bank by patient profile and selected symptoms,
and renders diagnosis narratives. All scoring is deterministic.
"""

__version__ = "1.0.0"
