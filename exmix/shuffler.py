"""
Shuffler
========
Uniform random permutation with an injectable randomness source.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


def permute(items: Sequence[T], rng: Optional[random.Random] = None) -> list[T]:
    """
    Return a shuffled copy of ``items`` (Fisher-Yates, last index down to 1).

    ``rng`` defaults to the process-wide ``random`` module generator; pass a
    seeded ``random.Random`` for reproducible output.
    """
    source = rng if rng is not None else random
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = source.randrange(i + 1)
        result[i], result[j] = result[j], result[i]
    return result


def permutation(size: int, rng: Optional[random.Random] = None) -> list[int]:
    """A shuffled ``[0, size)`` index order."""
    return permute(range(size), rng)
