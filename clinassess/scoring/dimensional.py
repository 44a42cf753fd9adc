"""Dimensional scoring and interpretation banding.

A dimensional score is the plain sum of the ratings of a scale's items.
Missing items count as zero. Parent questions and their lettered
sub-items are treated alike; the scale definition decides which ids
belong to it.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from clinassess.instruments.models import BandCutoff, ScaleDefinition, item_key
from clinassess.scoring.responses import ResponseStore, normalize_responses


def rating_of(responses: Mapping[str, Any], item_id: Any) -> int:
    """Get the numeric rating of an item, 0 if unanswered."""
    value = responses.get(item_key(item_id))
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return 0


def score(responses: Mapping[str, Any], item_ids: Iterable[Any]) -> int:
    """Sum the ratings of item_ids.

    Args:
        responses: Item id -> rating (int or string ids)
        item_ids: Items belonging to the scale

    Returns:
        Total score (0 for an empty response map)
    """
    if not isinstance(responses, ResponseStore):
        responses = normalize_responses(responses)
    return sum(rating_of(responses, item_id) for item_id in item_ids)


def get_band(total: int, bands: Iterable[BandCutoff]) -> BandCutoff:
    """Determine the interpretation band for a total.

    Args:
        total: Dimensional total
        bands: Contiguous cutoffs starting at 0, last one open-ended

    Returns:
        The matching BandCutoff
    """
    cutoffs = list(bands)
    for cutoff in cutoffs:
        if cutoff.contains(total):
            return cutoff
    # Fallback for edge cases
    if total < 0:
        return cutoffs[0]
    return cutoffs[-1]


def score_scale(responses: Mapping[str, Any], scale: ScaleDefinition) -> tuple[int, BandCutoff]:
    """Score a scale and interpret its total."""
    total = score(responses, scale.items)
    return total, get_band(total, scale.bands)
