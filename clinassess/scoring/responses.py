"""Per-instrument response store.

Unset items are absent from the map rather than stored as zero: they sum
as zero but do not count as answered.
"""

from collections.abc import Iterator, Mapping
from typing import Any

from clinassess.instruments.models import item_key


def normalize_responses(responses: Mapping[Any, Any]) -> dict[str, Any]:
    """Return a copy of responses keyed by string item ids."""
    return {item_key(k): v for k, v in responses.items()}


class ResponseStore(Mapping[str, Any]):
    """Mapping from item id to response value for one instrument.

    Values are ratings (int) or yes/no answers (str). Ratings outside the
    instrument's domain are not rejected here.
    """

    def __init__(self, responses: Mapping[Any, Any] | None = None) -> None:
        self._responses: dict[str, Any] = normalize_responses(responses or {})

    def __getitem__(self, item_id: Any) -> Any:
        return self._responses[item_key(item_id)]

    def __contains__(self, item_id: object) -> bool:
        return item_key(item_id) in self._responses

    def __iter__(self) -> Iterator[str]:
        return iter(self._responses)

    def __len__(self) -> int:
        return len(self._responses)

    def __repr__(self) -> str:
        return f"<ResponseStore answered={len(self._responses)}>"

    def set(self, item_id: Any, value: Any) -> None:
        """Record a response, replacing any previous one."""
        self._responses[item_key(item_id)] = value

    def unset(self, item_id: Any) -> None:
        """Remove a response so the item is unanswered again."""
        self._responses.pop(item_key(item_id), None)

    def clear(self) -> None:
        """Remove every response."""
        self._responses.clear()

    def answered_count(self, item_ids: list[Any] | None = None) -> int:
        """Count answered items, optionally restricted to item_ids."""
        if item_ids is None:
            return len(self._responses)
        return sum(1 for item_id in item_ids if item_key(item_id) in self._responses)

    def to_dict(self) -> dict[str, Any]:
        """Plain dict copy, suitable for JSON persistence."""
        return dict(self._responses)
