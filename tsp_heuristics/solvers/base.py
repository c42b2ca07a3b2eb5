import logging
import math
import numbers
import random
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from ..errors import IndexOutOfRange, InvalidConfiguration, InvalidDimension
from ..matrix import DistanceMatrix


logger = logging.getLogger(__name__)

# Fitness of a zero-length tour; keeps sort keys and cumulative sums finite.
MAX_FITNESS = sys.float_info.max


def tour_length(matrix: DistanceMatrix, order: Sequence[int]) -> float:
    rows = matrix.rows
    dist = 0.0
    n = len(order)
    for i in range(n - 1):
        dist += rows[order[i]][order[i + 1]]
    if n:
        dist += rows[order[n - 1]][order[0]]
    return float(dist)


class Tour:
    """
    Cyclic permutation of city indices bound to one distance matrix.

    ``route_distance`` and ``fitness`` are cached and refreshed by every
    public operation that changes the order. Code that edits ``order``
    directly must call :meth:`refresh` before handing the tour on.
    """

    def __init__(self, matrix: DistanceMatrix, order: Sequence[int]):
        order = list(order)
        n = matrix.size
        if not order:
            raise InvalidConfiguration("a tour needs at least one city")
        if len(order) != n:
            raise InvalidDimension(f"tour has {len(order)} cities, matrix has {n}")
        for city in order:
            if not isinstance(city, numbers.Integral):
                raise InvalidConfiguration(f"city label {city!r} is not an integer")
            if not 0 <= city < n:
                raise IndexOutOfRange(f"city {city} outside [0, {n})")
        if len(set(order)) != n:
            raise InvalidConfiguration("tour visits a city more than once")
        self.matrix = matrix
        self.order: List[int] = order
        self._route_distance = 0.0
        self._fitness = 0.0
        self.refresh()

    @classmethod
    def identity(cls, matrix: DistanceMatrix) -> "Tour":
        return cls(matrix, range(matrix.size))

    @classmethod
    def random(cls, matrix: DistanceMatrix, rng: random.Random) -> "Tour":
        order = list(range(matrix.size))
        rng.shuffle(order)
        return cls(matrix, order)

    @property
    def route_distance(self) -> float:
        return self._route_distance

    @property
    def fitness(self) -> float:
        return self._fitness

    def objective(self) -> float:
        self._route_distance = tour_length(self.matrix, self.order)
        return self._route_distance

    def calculate_fitness(self) -> float:
        if self._route_distance > 0:
            self._fitness = 1.0 / self._route_distance
        else:
            logger.debug("zero route distance, using sentinel fitness")
            self._fitness = MAX_FITNESS
        return self._fitness

    def refresh(self) -> None:
        self.objective()
        self.calculate_fitness()

    def marginal_cost(self, position: int) -> float:
        """Cost of the two edges entering and leaving ``position``."""
        n = len(self.order)
        if not 0 <= position < n:
            raise IndexOutOfRange(f"position {position} outside [0, {n})")
        rows = self.matrix.rows
        order = self.order
        node = order[position]
        before = order[position - 1]
        after = order[(position + 1) % n]
        return rows[before][node] + rows[node][after]

    def swap_positions(self, i: int, j: int) -> None:
        n = len(self.order)
        if not (0 <= i < n and 0 <= j < n):
            raise IndexOutOfRange(f"positions ({i}, {j}) outside [0, {n})")
        self.order[i], self.order[j] = self.order[j], self.order[i]
        self.refresh()

    def copy(self) -> "Tour":
        clone = Tour.__new__(Tour)
        clone.matrix = self.matrix
        clone.order = self.order[:]
        clone._route_distance = self._route_distance
        clone._fitness = self._fitness
        return clone

    def __len__(self) -> int:
        return len(self.order)

    def __iter__(self) -> Iterator[int]:
        return iter(self.order)

    def __getitem__(self, position: int) -> int:
        return self.order[position]

    def __repr__(self) -> str:
        return f"Tour(order={self.order}, route_distance={self._route_distance:.2f})"


def format_tour(tour: Tour) -> str:
    return " -> ".join(str(city) for city in tour.order + tour.order[:1])


class Solver(ABC):
    name: str = "base"

    @abstractmethod
    def solve(self, matrix: DistanceMatrix) -> Tour:
        raise NotImplementedError


@dataclass
class SolveResult:
    tour: Tour
    length: float
    solver_name: str
    optimum: Optional[float] = None
    runtime: float = 0.0

    @property
    def gap(self) -> float:
        if self.optimum is None or math.isclose(self.optimum, 0.0):
            return float("inf")
        return (self.length - self.optimum) / self.optimum
