"""
Selection, crossover and mutation operators for the tour GA.

Every operator takes an explicit ``random.Random`` so runs can be replayed
from a seed.
"""

import bisect
import itertools
import logging
import math
import random
from typing import List, Optional, Sequence

from ..errors import InvalidConfiguration
from .base import Tour
from .two_opt import TwoOptEngine


logger = logging.getLogger(__name__)

MUTATION_POLICIES = ("swap", "two_opt")


def mating_pool(ranked: Sequence[Tour], elite_size: int, rng: random.Random) -> List[Tour]:
    """
    Elites first, then fitness-proportionate draws with replacement.

    ``ranked`` must already be sorted fittest first. The pool holds
    references to the parents; breeding only reads them.
    """
    size = len(ranked)
    if not 0 <= elite_size <= size:
        raise InvalidConfiguration(f"elite_size {elite_size} outside [0, {size}]")
    pool = list(ranked[:elite_size])
    slots = size - elite_size
    if slots == 0:
        return pool

    cumulative = list(itertools.accumulate(t.fitness for t in ranked))
    total = cumulative[-1]
    if total <= 0 or not math.isfinite(total):
        logger.debug("total fitness %r unusable, sampling parents uniformly", total)
        pool.extend(ranked[rng.randrange(size)] for _ in range(slots))
        return pool

    shares = [c / total for c in cumulative]
    for _ in range(slots):
        pick = rng.random()
        # First individual whose cumulative share reaches the draw; the clamp
        # covers a last share that rounds just below 1.0.
        idx = min(bisect.bisect_left(shares, pick), size - 1)
        pool.append(ranked[idx])
    return pool


def breed(parent1: Tour, parent2: Tour, rng: random.Random) -> Tour:
    """Ordered crossover: a slice of parent1, then parent2's remaining cities in order."""
    n = len(parent1)
    gene_a = rng.randrange(n)
    gene_b = rng.randrange(n)
    start, end = min(gene_a, gene_b), max(gene_a, gene_b)

    segment = parent1.order[start:end]
    taken = set(segment)
    rest = [city for city in parent2.order if city not in taken]
    return Tour(parent1.matrix, segment + rest)


def breed_population(pool: Sequence[Tour], elite_size: int, rng: random.Random) -> List[Tour]:
    """
    Elites pass through as copies; the rest are children of a shuffled pool
    paired from both ends (``shuffled[k]`` with ``shuffled[-k - 1]``).
    """
    size = len(pool)
    if not 0 <= elite_size <= size:
        raise InvalidConfiguration(f"elite_size {elite_size} outside [0, {size}]")
    shuffled = list(pool)
    rng.shuffle(shuffled)
    children = [t.copy() for t in pool[:elite_size]]
    for k in range(size - elite_size):
        children.append(breed(shuffled[k], shuffled[size - k - 1], rng))
    return children


def mutate(tour: Tour, mutation_rate: float, rng: random.Random) -> None:
    """Swap each position, with probability ``mutation_rate``, with another random position."""
    n = len(tour)
    if n < 2:
        return
    order = tour.order
    changed = False
    for i in range(n):
        if rng.random() < mutation_rate:
            j = rng.randrange(n - 1)
            if j >= i:
                j += 1
            order[i], order[j] = order[j], order[i]
            changed = True
    if changed:
        tour.refresh()


def mutate_population(
    tours: Sequence[Tour],
    mutation_rate: float,
    rng: random.Random,
    elite_size: int = 0,
    policy: str = "swap",
    engine: Optional[TwoOptEngine] = None,
) -> List[Tour]:
    """
    Mutate every tour after the first ``elite_size`` in place.

    ``"swap"`` applies :func:`mutate` per tour. ``"two_opt"`` refines each
    tour with probability ``mutation_rate`` using a full 2-opt run.
    """
    if policy not in MUTATION_POLICIES:
        raise InvalidConfiguration(f"unknown mutation policy {policy!r}")
    if policy == "two_opt" and engine is None:
        engine = TwoOptEngine()
    for tour in tours[elite_size:]:
        if policy == "swap":
            mutate(tour, mutation_rate, rng)
        elif rng.random() < mutation_rate:
            engine.optimize(tour)
    return list(tours)
