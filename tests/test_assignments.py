import random

import pytest

from santagate.models import Pair
from santagate.services.assignments import draw_pairs, is_derangement

from conftest import ScriptedShuffle


@pytest.mark.parametrize("count", range(2, 13))
def test_draw_is_derangement(count):
    members = [f"member-{i}" for i in range(count)]
    pairs = draw_pairs(members, random.Random(count))

    assert len(pairs) == count
    assert [p.giver for p in pairs] == members
    assert sorted(p.receiver for p in pairs) == sorted(members)
    assert all(p.giver != p.receiver for p in pairs)
    assert is_derangement(members, pairs)


@pytest.mark.parametrize("members", [[], ["Solo"]])
def test_draw_needs_two_members(members):
    assert draw_pairs(members) == []


def test_two_members_swap():
    pairs = draw_pairs(["A", "B"], random.Random(3))
    assert [(p.giver, p.receiver) for p in pairs] == [("A", "B"), ("B", "A")]


def test_draw_retries_until_no_fixed_points():
    rng = ScriptedShuffle([
        ["A", "B", "C"],
        ["C", "B", "A"],
        ["B", "C", "A"],
    ])
    pairs = draw_pairs(["A", "B", "C"], rng)

    assert rng.calls == 3
    assert [(p.giver, p.receiver) for p in pairs] == [("A", "B"), ("B", "C"), ("C", "A")]


def test_draw_pairs_are_unclaimed():
    pairs = draw_pairs(["A", "B", "C"], random.Random(1))
    assert all(p.password_hash is None and not p.has_access for p in pairs)


def test_draw_does_not_touch_input():
    members = ["A", "B", "C", "D"]
    draw_pairs(members, random.Random(7))
    assert members == ["A", "B", "C", "D"]


def test_is_derangement_rejects_bad_pairings():
    members = ["A", "B", "C"]
    assert not is_derangement(members, [Pair("A", "B"), Pair("B", "A")])
    assert not is_derangement(members, [Pair("A", "A"), Pair("B", "C"), Pair("C", "B")])
    assert not is_derangement(members, [Pair("A", "B"), Pair("B", "B"), Pair("C", "A")])
    assert not is_derangement(members, [Pair("A", "B"), Pair("B", "C"), Pair("D", "A")])
    assert not is_derangement(["A"], [Pair("A", "B")])
    assert is_derangement(["A"], [])
