import random

import pytest

from tsp_heuristics.data import generate_matrix
from tsp_heuristics.matrix import DistanceMatrix


FOUR_CITY_GRID = [
    [0, 1, 2, 3],
    [1, 0, 4, 5],
    [2, 4, 0, 6],
    [3, 5, 6, 0],
]


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def four_city():
    return DistanceMatrix(FOUR_CITY_GRID)


@pytest.fixture
def random_matrix():
    return generate_matrix(12, max_distance=100.0, symmetric=True, rng=random.Random(7))
