from .base import MAX_FITNESS, Solver, SolveResult, Tour, format_tour, tour_length
from .operators import (
    MUTATION_POLICIES,
    breed,
    breed_population,
    mating_pool,
    mutate,
    mutate_population,
)
from .two_opt import TwoOptConfig, TwoOptEngine, TwoOptResult, TwoOptSolver, random_restarts

__all__ = [
    "MAX_FITNESS",
    "Solver",
    "SolveResult",
    "Tour",
    "format_tour",
    "tour_length",
    "MUTATION_POLICIES",
    "breed",
    "breed_population",
    "mating_pool",
    "mutate",
    "mutate_population",
    "TwoOptConfig",
    "TwoOptEngine",
    "TwoOptResult",
    "TwoOptSolver",
    "random_restarts",
]
