"""
Pairwise-exchange local search.

A pass tries every ordered pair of positions, swaps the two cities and
keeps the swap unless the summed marginal cost of both positions got
worse. For positions that are not neighbours those marginal costs cover
exactly the four edges a swap touches. For neighbours the shared edge is
counted twice, which cancels on symmetric matrices and is only an
approximation on asymmetric ones. Passes repeat until the full objective
stops changing.
"""

import concurrent.futures
import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from ..errors import InvalidConfiguration
from ..matrix import DistanceMatrix
from .base import Solver, Tour


logger = logging.getLogger(__name__)


@dataclass
class TwoOptConfig:
    max_passes: Optional[int] = None
    restarts: int = 10
    max_workers: Optional[int] = None
    random_seed: int = 123

    def __post_init__(self):
        if self.max_passes is not None and self.max_passes < 1:
            raise InvalidConfiguration("max_passes must be positive when set")
        if self.restarts < 1:
            raise InvalidConfiguration("restarts must be at least 1")
        if self.max_workers is not None and self.max_workers < 1:
            raise InvalidConfiguration("max_workers must be positive when set")


@dataclass
class TwoOptResult:
    tour: Tour
    objective: float
    passes: int


class TwoOptEngine:
    def __init__(self, max_passes: Optional[int] = None):
        if max_passes is not None and max_passes < 1:
            raise InvalidConfiguration("max_passes must be positive when set")
        self.max_passes = max_passes

    def swaps(self, tour: Tour) -> None:
        """Run one full pass over ``tour`` in place."""
        order = tour.order
        rows = tour.matrix.rows
        n = len(order)

        # Inlined Tour.marginal_cost without the bounds check; runs N^2 times per pass.
        def marginal(pos: int) -> float:
            node = order[pos]
            return rows[order[pos - 1]][node] + rows[node][order[(pos + 1) % n]]

        for i in range(n):
            for j in range(n):
                current = marginal(i) + marginal(j)
                order[i], order[j] = order[j], order[i]
                if marginal(i) + marginal(j) > current:
                    order[i], order[j] = order[j], order[i]
        tour.refresh()

    def optimize(self, tour: Tour) -> TwoOptResult:
        n = len(tour)
        if n <= 2:
            # Every ordering of one or two cities is the same cycle.
            return TwoOptResult(tour=tour, objective=tour.objective(), passes=0)

        last = tour.objective()
        passes = 0
        while True:
            self.swaps(tour)
            passes += 1
            current = tour.route_distance
            logger.debug("pass %d: objective %.4f", passes, current)
            if current == last:
                break
            last = current
            if self.max_passes is not None and passes >= self.max_passes:
                logger.info("stopped after %d passes without converging", passes)
                break
        return TwoOptResult(tour=tour, objective=tour.route_distance, passes=passes)

    def solve(self, matrix: DistanceMatrix, rng: random.Random) -> TwoOptResult:
        """Optimize a fresh random tour."""
        return self.optimize(Tour.random(matrix, rng))


def random_restarts(
    matrix: DistanceMatrix,
    restarts: int = 10,
    max_workers: Optional[int] = None,
    seed: int = 123,
    max_passes: Optional[int] = None,
) -> TwoOptResult:
    """
    Solve ``restarts`` independent random starts and keep the shortest.

    Each worker owns its tour and a private RNG seeded with ``seed + k``;
    the matrix is shared read-only. All workers finish before the best
    result is chosen, the earliest restart winning ties.
    """
    if restarts < 1:
        raise InvalidConfiguration("restarts must be at least 1")
    engine = TwoOptEngine(max_passes=max_passes)

    def worker(k: int) -> TwoOptResult:
        return engine.solve(matrix, random.Random(seed + k))

    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as ex:
        results: List[TwoOptResult] = list(ex.map(worker, range(restarts)))

    best = results[0]
    for result in results[1:]:
        if result.objective < best.objective:
            best = result
    logger.info(
        "best of %d restarts: %.4f (worst %.4f)",
        restarts,
        best.objective,
        max(r.objective for r in results),
    )
    return best


class TwoOptSolver(Solver):
    name = "two_opt"

    def __init__(self, config: Optional[TwoOptConfig] = None):
        self.cfg = config or TwoOptConfig()
        self.last_result: Optional[TwoOptResult] = None

    def solve(self, matrix: DistanceMatrix) -> Tour:
        self.last_result = random_restarts(
            matrix,
            restarts=self.cfg.restarts,
            max_workers=self.cfg.max_workers,
            seed=self.cfg.random_seed,
            max_passes=self.cfg.max_passes,
        )
        return self.last_result.tour
