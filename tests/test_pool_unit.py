from __future__ import annotations

from luckydraw.core.pool import CandidatePool, clean_labels


def test_clean_labels_drops_falsy_and_duplicates_in_order():
    assert clean_labels(["Bob", "", None, "Alice", "Bob", "Carol", "Alice"]) == ["Bob", "Alice", "Carol"]


def test_clean_labels_can_keep_duplicates():
    assert clean_labels(["A", "", "A", "B"], deduplicate=False) == ["A", "A", "B"]


def test_set_candidates_replaces_pool():
    pool = CandidatePool(["x", "y"])
    pool.set_candidates(["a", "b", "a"])
    assert pool.candidates == ("a", "b")
    assert len(pool) == 2
    assert not pool.is_empty()
    pool.set_candidates([])
    assert pool.is_empty()


def test_remove_first_matching_only_removes_one_occurrence():
    pool = CandidatePool(["A", "B", "A"], deduplicate=False)
    assert pool.remove_first_matching("A") is True
    assert pool.candidates == ("B", "A")
    assert pool.count("A") == 1
    assert pool.remove_first_matching("missing") is False
    assert pool.candidates == ("B", "A")


def test_snapshot_is_a_copy():
    pool = CandidatePool(["a", "b"])
    snap = pool.snapshot()
    snap.append("c")
    assert "c" not in pool
    assert list(pool) == ["a", "b"]
