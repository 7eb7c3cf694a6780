"""Tests for pairing/assigner.py."""

import random
from collections import Counter

import pytest

from pairing.assigner import Pairing, PairingError, assign_pairings, verify_pairings


def test_three_participants_form_a_derangement():
    pairings = assign_pairings(["A", "B", "C"], rng=random.Random(3))

    assert len(pairings) == 3
    assert {p.giver for p in pairings} == {"A", "B", "C"}
    assert sorted(p.receiver for p in pairings) == ["A", "B", "C"]
    assert all(p.giver != p.receiver for p in pairings)


def test_two_participants_swap():
    pairings = assign_pairings(["U1", "U2"], rng=random.Random(0))

    assert {(p.giver, p.receiver) for p in pairings} == {("U1", "U2"), ("U2", "U1")}


def test_no_self_pairing_across_many_trials():
    participants = ["A", "B", "C", "D", "E"]
    rng = random.Random(2026)

    for _ in range(10_000):
        pairings = assign_pairings(participants, rng=rng)
        assert len(pairings) == 5
        assert all(p.giver != p.receiver for p in pairings)
        assert Counter(p.giver for p in pairings) == Counter(participants)
        assert Counter(p.receiver for p in pairings) == Counter(participants)


def test_same_seed_same_pairings():
    participants = [f"U{i}" for i in range(8)]

    first = assign_pairings(participants, rng=random.Random(123))
    second = assign_pairings(participants, rng=random.Random(123))

    assert first == second


class ScriptedRandom:
    """Reverses on every shuffle and hands out randrange results from a script."""

    def __init__(self, picks):
        self.picks = list(picks)
        self.ranges = []

    def shuffle(self, items):
        items.reverse()

    def randrange(self, stop):
        self.ranges.append(stop)
        return self.picks.pop(0)


def test_exact_output_for_scripted_rng_swapping_backwards():
    # givers [C, B, A], receivers [A, B, C]: B collides and swaps with position 0.
    rng = ScriptedRandom([0])

    pairings = assign_pairings(["A", "B", "C"], rng=rng)

    assert pairings == [Pairing("C", "B"), Pairing("B", "A"), Pairing("A", "C")]
    assert rng.ranges == [2]


def test_exact_output_for_scripted_rng_skipping_own_position():
    # A pick of 1 for position 1 skips itself and lands on position 2.
    rng = ScriptedRandom([1])

    pairings = assign_pairings(["A", "B", "C"], rng=rng)

    assert pairings == [Pairing("C", "A"), Pairing("B", "C"), Pairing("A", "B")]


def test_randomness_produces_variety():
    participants = ["A", "B", "C", "D"]
    seen = {tuple(assign_pairings(participants, rng=random.Random(seed))) for seed in range(50)}

    assert len(seen) >= 2, "Pairings should vary across seeds"


def test_reciprocal_pairs_are_allowed():
    participants = ["A", "B", "C", "D"]
    found_reciprocal = False
    for seed in range(200):
        pairs = {(p.giver, p.receiver) for p in assign_pairings(participants, rng=random.Random(seed))}
        if any((r, g) in pairs for g, r in pairs):
            found_reciprocal = True
            break

    assert found_reciprocal


def test_default_rng_is_used_when_none_given():
    pairings = assign_pairings(["A", "B", "C"])

    assert all(p.giver != p.receiver for p in pairings)


def test_input_list_is_not_mutated():
    participants = ["A", "B", "C", "D"]

    assign_pairings(participants, rng=random.Random(1))

    assert participants == ["A", "B", "C", "D"]


def test_empty_input_yields_no_pairings():
    assert assign_pairings([], rng=random.Random(0)) == []


def test_single_participant_raises_instead_of_hanging():
    with pytest.raises(PairingError):
        assign_pairings(["lonely"], rng=random.Random(0))


def test_duplicate_participants_rejected():
    with pytest.raises(PairingError, match="Duplicate"):
        assign_pairings(["A", "B", "A"], rng=random.Random(0))


def test_large_group():
    participants = [f"P{i}" for i in range(30)]

    pairings = assign_pairings(participants, rng=random.Random(7))

    assert {p.giver for p in pairings} == set(participants)
    assert len({p.receiver for p in pairings}) == len(participants)
    assert all(p.giver != p.receiver for p in pairings)


def test_verify_pairings_passes_and_logs_summary(caplog):
    pairings = [Pairing("A", "B"), Pairing("B", "C"), Pairing("C", "A")]

    with caplog.at_level("INFO"):
        verify_pairings(pairings, ["A", "B", "C"])

    assert "Verification passed" in caplog.text
    assert "A -> B" not in caplog.text


def test_verify_pairings_detects_missing():
    with pytest.raises(PairingError, match="Missing givers"):
        verify_pairings([Pairing("A", "B")], ["A", "B", "C"])


def test_verify_pairings_detects_self_pairing():
    pairings = [Pairing("A", "A"), Pairing("B", "C"), Pairing("C", "B")]

    with pytest.raises(PairingError, match="Self pairings"):
        verify_pairings(pairings, ["A", "B", "C"])


def test_verify_pairings_detects_duplicate_receivers():
    pairings = [Pairing("A", "B"), Pairing("B", "C"), Pairing("C", "B")]

    with pytest.raises(PairingError, match="Duplicate receivers"):
        verify_pairings(pairings, ["A", "B", "C"])


def test_verify_pairings_accepts_empty():
    verify_pairings([], [])
