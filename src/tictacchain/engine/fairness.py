"""Who moves first.

The decision bit comes from SHA-256 over the creator's identity followed by
the joiner's identity. Anyone can recompute it once the pairing is final, but
a joiner cannot steer it without changing who they are.
"""

from __future__ import annotations

import hashlib


def pairing_digest(creator: str, joiner: str) -> bytes:
    return hashlib.sha256(creator.encode("utf-8") + joiner.encode("utf-8")).digest()


def creator_moves_first(creator: str, joiner: str) -> bool:
    # Most significant bit of the first digest byte.
    return (pairing_digest(creator, joiner)[0] & 0x80) != 0


def assign_first_mover(creator: str, joiner: str) -> tuple[tuple[str, str], str]:
    """Return (players, first_to_move) with players[0] being the first mover ("X").

    Identical identities are not meaningful here; callers reject self-join first.
    """
    if creator_moves_first(creator, joiner):
        players = (creator, joiner)
    else:
        players = (joiner, creator)
    return players, players[0]
