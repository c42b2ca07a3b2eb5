import itertools
import random

import pytest

from tsp_heuristics.data import generate_matrix
from tsp_heuristics.errors import InvalidConfiguration
from tsp_heuristics.matrix import DistanceMatrix
from tsp_heuristics.solvers.base import Tour, tour_length
from tsp_heuristics.solvers.two_opt import (
    TwoOptConfig,
    TwoOptEngine,
    TwoOptSolver,
    random_restarts,
)


def brute_force_minimum(matrix: DistanceMatrix) -> float:
    n = matrix.size
    return min(tour_length(matrix, (0,) + rest) for rest in itertools.permutations(range(1, n)))


def test_four_city_reaches_brute_force_optimum(four_city):
    tour = Tour(four_city, [0, 1, 2, 3])
    result = TwoOptEngine().optimize(tour)
    assert result.objective == brute_force_minimum(four_city)
    assert result.objective == tour.objective()
    assert sorted(result.tour.order) == [0, 1, 2, 3]


def test_single_city_short_circuits():
    result = TwoOptEngine().optimize(Tour(DistanceMatrix([[0]]), [0]))
    assert result.objective == 0
    assert result.passes == 0


def test_two_cities_cost_both_directions():
    matrix = DistanceMatrix([[0, 7], [7, 0]])
    result = TwoOptEngine().optimize(Tour(matrix, [1, 0]))
    assert result.objective == 2 * matrix.cost(0, 1)
    assert result.passes <= 1


def test_never_worse_than_start_on_symmetric_matrix(random_matrix, rng):
    engine = TwoOptEngine()
    for _ in range(5):
        tour = Tour.random(random_matrix, rng)
        start = tour.route_distance
        result = engine.optimize(tour)
        assert result.objective <= start + 1e-9
        assert result.passes >= 1


def test_converged_tour_is_stable_under_another_pass(random_matrix, rng):
    engine = TwoOptEngine()
    result = engine.optimize(Tour.random(random_matrix, rng))
    before = result.tour.objective()
    engine.swaps(result.tour)
    assert result.tour.objective() == before


# Ring edges (i, i+1) cost 1; chords (i, i+2) cost 100..115 with all pair
# sums distinct. Every one of the 12 tours then has its own length, no
# single swap maps a 5-city tour onto itself, and every tour other than
# the ring has a strictly improving swap, so the ring is the only stopping point.
RING_GRID = [
    [0, 1, 100, 107, 1],
    [1, 0, 1, 101, 115],
    [100, 1, 0, 1, 103],
    [107, 101, 1, 0, 1],
    [1, 115, 103, 1, 0],
]


def test_pentagram_start_converges_to_ring():
    matrix = DistanceMatrix(RING_GRID)
    tour = Tour(matrix, [0, 2, 4, 1, 3])
    assert tour.route_distance == 526
    result = TwoOptEngine().optimize(tour)
    assert brute_force_minimum(matrix) == 5
    assert result.objective == 5
    assert result.passes >= 2


def test_every_start_reaches_the_ring():
    matrix = DistanceMatrix(RING_GRID)
    engine = TwoOptEngine()
    for order in itertools.permutations(range(5)):
        assert engine.optimize(Tour(matrix, order)).objective == 5


def test_random_instances_never_beat_exhaustive_search():
    engine = TwoOptEngine()
    for seed in range(10):
        matrix = generate_matrix(6, max_distance=50.0, rng=random.Random(seed))
        result = engine.optimize(Tour.random(matrix, random.Random(seed)))
        assert result.objective >= brute_force_minimum(matrix) - 1e-9


def test_pass_matches_marginal_cost_rule(random_matrix, rng):
    tour = Tour.random(random_matrix, rng)
    expected = tour.copy()
    n = len(expected)
    for i in range(n):
        for j in range(n):
            current = expected.marginal_cost(i) + expected.marginal_cost(j)
            expected.order[i], expected.order[j] = expected.order[j], expected.order[i]
            if expected.marginal_cost(i) + expected.marginal_cost(j) > current:
                expected.order[i], expected.order[j] = expected.order[j], expected.order[i]
    TwoOptEngine().swaps(tour)
    assert tour.order == expected.order


def test_max_passes_caps_the_run(random_matrix, rng):
    result = TwoOptEngine(max_passes=1).optimize(Tour.random(random_matrix, rng))
    assert result.passes == 1


def test_random_restarts_is_reproducible_and_keeps_best(random_matrix):
    best = random_restarts(random_matrix, restarts=4, max_workers=2, seed=11)
    again = random_restarts(random_matrix, restarts=4, max_workers=4, seed=11)
    assert best.tour.order == again.tour.order
    singles = [TwoOptEngine().solve(random_matrix, random.Random(11 + k)).objective for k in range(4)]
    assert best.objective == min(singles)


def test_solver_wraps_restarts(random_matrix):
    solver = TwoOptSolver(TwoOptConfig(restarts=2, random_seed=3))
    tour = solver.solve(random_matrix)
    assert tour is solver.last_result.tour
    assert sorted(tour.order) == list(range(random_matrix.size))


@pytest.mark.parametrize(
    "kwargs",
    [{"restarts": 0}, {"max_passes": 0}, {"max_workers": 0}],
)
def test_config_validation(kwargs):
    with pytest.raises(InvalidConfiguration):
        TwoOptConfig(**kwargs)
