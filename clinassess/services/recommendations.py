"""Recommendation filtering by patient profile and selected symptoms."""

from collections.abc import Iterable, Mapping
from typing import Union

from clinassess.catalog.models import Recommendation, SymptomCategory


def profile_recommendations(
    bank: Mapping[str, Mapping[str, list[Recommendation]]],
    profile_key: str,
    categories: Iterable[Union[SymptomCategory, str]],
) -> list[Recommendation]:
    """Concatenate a profile's recommendations in catalog category order.

    Unknown profile keys and categories contribute nothing.
    """
    by_category = bank.get(profile_key) or {}
    entries: list[Recommendation] = []
    category_ids = [c if isinstance(c, str) else c.id for c in categories]
    for category_id in dict.fromkeys(category_ids):
        entries.extend(by_category.get(category_id) or [])
    return entries


def filter_recommendations(
    bank: Mapping[str, Mapping[str, list[Recommendation]]],
    profile_key: str,
    categories: Iterable[Union[SymptomCategory, str]],
    selected_symptom_ids: Iterable[str],
) -> list[Recommendation]:
    """Select the recommendations that apply to the selected symptoms.

    An entry applies when at least one of its linked symptoms is selected.
    With no symptoms selected every entry of the profile is returned.
    Entries are returned once each, in category then insertion order.

    Args:
        bank: Profile key -> category id -> recommendations
        profile_key: e.g. "teen_female"
        categories: Catalog categories (or their ids) in display order
        selected_symptom_ids: Currently selected symptoms

    Returns:
        Matching recommendations (empty for an unknown profile key)
    """
    entries = profile_recommendations(bank, profile_key, categories)
    selected = set(selected_symptom_ids)

    if not selected:
        return entries

    return [entry for entry in entries if entry.is_linked_to_any(selected)]
