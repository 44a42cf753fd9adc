"""Tests for the per-instrument response store."""

from clinassess.scoring.responses import ResponseStore


class TestResponseStore:
    """Tests for ResponseStore."""

    def test_keys_are_normalized(self) -> None:
        store = ResponseStore({1: 2})
        store.set("9a", 3)

        assert store["1"] == 2
        assert store[1] == 2
        assert 1 in store
        assert sorted(store) == ["1", "9a"]

    def test_unset_is_not_zero(self) -> None:
        """A zero rating is answered; an unset item is not."""
        store = ResponseStore({"1": 0})

        assert store.answered_count() == 1

        store.unset(1)

        assert store.answered_count() == 0
        assert "1" not in store

    def test_answered_count_for_subset(self) -> None:
        store = ResponseStore({"1": 0, "2": 1, "t1": "ja"})

        assert store.answered_count(["1", 2, "3"]) == 2

    def test_clear_and_copy(self) -> None:
        store = ResponseStore({"1": 2})
        copy = store.to_dict()

        store.clear()

        assert len(store) == 0
        assert copy == {"1": 2}
