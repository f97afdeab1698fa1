from __future__ import annotations

import hashlib

from tictacchain.engine.fairness import assign_first_mover, creator_moves_first, pairing_digest


def test_digest_is_sha256_of_creator_then_joiner() -> None:
    assert pairing_digest("alice", "bob") == hashlib.sha256(b"alicebob").digest()
    assert pairing_digest("alice", "bob") != pairing_digest("bob", "alice")


def test_assignment_follows_most_significant_bit() -> None:
    for joiner in ("bob", "carol", "dave", "erin", "frank"):
        creator_first = hashlib.sha256(("alice" + joiner).encode()).digest()[0] >= 0x80
        players, first = assign_first_mover("alice", joiner)
        assert first == players[0]
        if creator_first:
            assert players == ("alice", joiner)
        else:
            assert players == (joiner, "alice")


def test_known_pairing() -> None:
    players, first = assign_first_mover("player_1", "player_2")
    assert first == "player_2"
    assert players == ("player_2", "player_1")


def test_assignment_is_deterministic() -> None:
    for i in range(20):
        a, b = f"creator{i}", f"joiner{i}"
        assert assign_first_mover(a, b) == assign_first_mover(a, b)


def test_both_outcomes_occur() -> None:
    outcomes = {creator_moves_first("alice", f"player{i}") for i in range(64)}
    assert outcomes == {True, False}


def test_outcome_depends_on_ordered_pair() -> None:
    # A rule keyed on roles alone, or on the unordered pair, would always pick
    # different people after the swap.
    firsts = set()
    for i in range(64):
        a, b = "alice", f"player{i}"
        _, first_ab = assign_first_mover(a, b)
        _, first_ba = assign_first_mover(b, a)
        firsts.add(first_ab == first_ba)
    assert firsts == {True, False}
