import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import InvalidConfiguration
from .matrix import DistanceMatrix
from .population import Population
from .solvers.base import Solver, Tour
from .solvers.operators import (
    MUTATION_POLICIES,
    breed_population,
    mating_pool,
    mutate_population,
)
from .solvers.two_opt import TwoOptEngine


logger = logging.getLogger(__name__)


@dataclass
class GAConfig:
    population_size: int = 100
    elite_size: int = 20
    mutation_rate: float = 0.01
    generations: int = 500
    mutation_policy: str = "swap"
    random_seed: int = 123

    def __post_init__(self):
        if self.population_size < 1:
            raise InvalidConfiguration("population_size must be positive")
        if not 0 <= self.elite_size <= self.population_size:
            raise InvalidConfiguration(
                f"elite_size must be within [0, {self.population_size}], got {self.elite_size}"
            )
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise InvalidConfiguration(f"mutation_rate must be within [0, 1], got {self.mutation_rate}")
        if self.generations < 0:
            raise InvalidConfiguration("generations must not be negative")
        if self.mutation_policy not in MUTATION_POLICIES:
            raise InvalidConfiguration(
                f"mutation_policy must be one of {MUTATION_POLICIES}, got {self.mutation_policy!r}"
            )


@dataclass
class GAResult:
    best: Tour
    initial_distance: float
    history: List[float] = field(default_factory=list)

    @property
    def distance(self) -> float:
        return self.best.route_distance


class GeneticEngine:
    """
    Generational GA over tours: rank, select, breed, mutate.

    Runs for exactly ``config.generations`` generations; there is no
    convergence test. ``history`` holds the best route distance of the
    initial population followed by one entry per generation.
    """

    def __init__(
        self,
        matrix: DistanceMatrix,
        config: Optional[GAConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.cfg = config or GAConfig()
        self.matrix = matrix
        self.rng = rng or random.Random(self.cfg.random_seed)
        self.two_opt = TwoOptEngine() if self.cfg.mutation_policy == "two_opt" else None
        self.population = Population.random(matrix, self.cfg.population_size, self.rng)
        self.generation = 0
        self.history: List[float] = [self.population.fittest().route_distance]

    def next_generation(self, population: Population) -> Population:
        ranked = population.rank()
        pool = mating_pool(ranked.tours, self.cfg.elite_size, self.rng)
        children = breed_population(pool, self.cfg.elite_size, self.rng)
        mutate_population(
            children,
            self.cfg.mutation_rate,
            self.rng,
            elite_size=self.cfg.elite_size,
            policy=self.cfg.mutation_policy,
            engine=self.two_opt,
        )
        return Population(self.matrix, children)

    def step(self) -> None:
        self.population = self.next_generation(self.population)
        self.generation += 1
        best = self.population.fittest().route_distance
        self.history.append(best)
        logger.debug(
            "generation %d: best %.4f avg %.4f",
            self.generation,
            best,
            self.population.average_distance(),
        )

    def best(self) -> Tour:
        return self.population.fittest()

    def run(self) -> GAResult:
        initial = self.history[0]
        logger.info("initial distance: %.4f", initial)
        for _ in range(self.cfg.generations):
            self.step()
        best = self.best()
        logger.info("final distance: %.4f after %d generations", best.route_distance, self.generation)
        return GAResult(best=best, initial_distance=initial, history=list(self.history))


class GeneticSolver(Solver):
    name = "genetic"

    def __init__(self, config: Optional[GAConfig] = None):
        self.cfg = config or GAConfig()
        self.last_result: Optional[GAResult] = None

    def solve(self, matrix: DistanceMatrix) -> Tour:
        self.last_result = GeneticEngine(matrix, self.cfg).run()
        return self.last_result.best
