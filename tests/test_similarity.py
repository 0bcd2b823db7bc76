"""Tests for edit-distance similarity."""
import pytest

from quotegate.similarity import edit_distance, length_bound, similarity

PAIRS = [
    ("kitten", "sitting"),
    ("אני תומך בחוק", "אני מתנגד לחוק"),
    ("", "abc"),
    ("abc", "abc"),
    ("flaw", "lawn"),
]


def test_edit_distance_classic():
    assert edit_distance("kitten", "sitting") == 3
    assert edit_distance("flaw", "lawn") == 2
    assert edit_distance("", "abc") == 3
    assert edit_distance("abc", "") == 3
    assert edit_distance("same", "same") == 0


def test_similarity_value():
    assert similarity("kitten", "sitting") == pytest.approx(1 - 3 / 7)


@pytest.mark.parametrize("a,b", PAIRS)
def test_symmetric(a, b):
    assert similarity(a, b) == similarity(b, a)


@pytest.mark.parametrize("a", ["", "x", "אני תומך בחוק", "a" * 200])
def test_identical_is_one(a):
    assert similarity(a, a) == 1.0


def test_empty_strings():
    assert similarity("", "") == 1.0
    assert similarity("", "abc") == 0.0


@pytest.mark.parametrize("a,b", PAIRS)
def test_bounded(a, b):
    assert 0.0 <= similarity(a, b) <= 1.0


def test_decreases_with_distance():
    base = "abcdefgh"
    scores = [similarity(base, other) for other in ("abcdefgh", "abcdefgX", "abcdefXX", "abcdeXXX")]
    assert scores == sorted(scores, reverse=True)
    assert len(set(scores)) == 4


def test_threshold_boundary_is_exact():
    assert similarity("abcdefghijklmnopqrst", "abcdefghijklmnopqxyz") == 0.85


def test_length_bound_is_upper_bound():
    for a, b in PAIRS:
        assert similarity(a, b) <= length_bound(len(a), len(b))
    assert length_bound(0, 0) == 1.0
