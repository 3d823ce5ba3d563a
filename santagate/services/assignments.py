from __future__ import annotations

import random
from collections.abc import Sequence

from loguru import logger

from ..models import Pair


def draw_pairs(members: Sequence[str], rng=None) -> list[Pair]:
    """
    Pair every member with a distinct receiver other than themselves.

    Rejection sampling: shuffle a copy of the members until no position keeps
    its own name. Members must be unique. Fewer than two members yields no
    pairs. `rng` is any object with a `shuffle` method (defaults to `random`).
    """
    givers = list(members)
    if len(givers) < 2:
        return []

    shuffle = (rng or random).shuffle
    receivers = givers[:]
    attempts = 0
    while True:
        attempts += 1
        shuffle(receivers)
        if all(g != r for g, r in zip(givers, receivers)):
            break

    logger.debug("Drew {count} pairs after {attempts} shuffle(s)", count=len(givers), attempts=attempts)
    return [Pair(giver=g, receiver=r) for g, r in zip(givers, receivers)]


def is_derangement(members: Sequence[str], pairs: Sequence[Pair]) -> bool:
    """True if `pairs` gives and receives each member exactly once, never to self."""
    if len(members) < 2:
        return not pairs
    if len(pairs) != len(members):
        return False
    expected = set(members)
    givers = [p.giver for p in pairs]
    receivers = [p.receiver for p in pairs]
    return (
        set(givers) == expected
        and set(receivers) == expected
        and len(set(givers)) == len(givers)
        and len(set(receivers)) == len(receivers)
        and all(p.giver != p.receiver for p in pairs)
    )
