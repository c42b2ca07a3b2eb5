import random
from typing import Iterable, Iterator, List, Sequence

from .errors import InvalidConfiguration, InvalidDimension
from .matrix import DistanceMatrix
from .solvers.base import Tour


def rank_routes(tours: Iterable[Tour]) -> List[Tour]:
    """Fittest first. ``sorted`` is stable, so equal fitness keeps input order."""
    return sorted(tours, key=lambda tour: tour.fitness, reverse=True)


class Population:
    """Fixed-size generation of tours that all share one matrix."""

    def __init__(self, matrix: DistanceMatrix, tours: Sequence[Tour]):
        if not tours:
            raise InvalidConfiguration("a population needs at least one tour")
        for tour in tours:
            if tour.matrix is not matrix:
                raise InvalidDimension("every tour in a population must use the same matrix")
        self.matrix = matrix
        self.tours: List[Tour] = list(tours)

    @classmethod
    def random(cls, matrix: DistanceMatrix, size: int, rng: random.Random) -> "Population":
        if size < 1:
            raise InvalidConfiguration("population size must be positive")
        return cls(matrix, [Tour.random(matrix, rng) for _ in range(size)])

    def rank(self) -> "Population":
        return Population(self.matrix, rank_routes(self.tours))

    def fittest(self) -> Tour:
        return rank_routes(self.tours)[0]

    def average_distance(self) -> float:
        return sum(t.route_distance for t in self.tours) / len(self.tours)

    def orders(self) -> List[List[int]]:
        return [t.order[:] for t in self.tours]

    def __len__(self) -> int:
        return len(self.tours)

    def __iter__(self) -> Iterator[Tour]:
        return iter(self.tours)

    def __getitem__(self, index: int) -> Tour:
        return self.tours[index]
