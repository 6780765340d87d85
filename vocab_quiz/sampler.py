"""Random selection helpers shared by question and distractor sampling."""
from __future__ import annotations

import random
from collections.abc import MutableSequence
from typing import TypeVar

T = TypeVar("T")


def make_rng(seed: int | None = None) -> random.Random:
    """Seeded generator when a seed is configured, fresh entropy otherwise."""
    return random.Random(seed)


def shuffle(seq: MutableSequence[T], rng: random.Random | None = None) -> MutableSequence[T]:
    """Fisher-Yates shuffle of *seq* in place. Returns the same sequence."""
    r = rng or random
    for i in range(len(seq) - 1, 0, -1):
        j = r.randrange(i + 1)
        seq[i], seq[j] = seq[j], seq[i]
    return seq


def pick_distinct_indices(
    population_size: int,
    count: int,
    rng: random.Random | None = None,
) -> set[int]:
    """Pick *count* distinct indices in ``range(population_size)``.

    Asking for more than the population holds returns every index.
    """
    if population_size < 0 or count < 0:
        raise ValueError(
            f"population_size and count must be non-negative (got {population_size}, {count})"
        )
    r = rng or random
    count = min(count, population_size)
    return set(r.sample(range(population_size), count))
