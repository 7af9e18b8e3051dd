from __future__ import annotations

"""Randomness helpers: seeded generators and the selection shuffle."""

import os
import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Build a generator; falls back to the SEED env var when no seed is given."""
    if seed is None:
        env = os.environ.get("SEED")
        if env is not None:
            try:
                seed = int(env)
            except ValueError:
                seed = None
    return random.Random(seed)


def fisher_yates(items: Sequence[T], rng: random.Random) -> List[T]:
    """Return a uniformly shuffled copy of `items`.

    For i from the last index down to 1, swap element i with a uniformly
    chosen element at index <= i.
    """
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randint(0, i)
        out[i], out[j] = out[j], out[i]
    return out
