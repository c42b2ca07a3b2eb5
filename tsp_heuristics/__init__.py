"""
Heuristic TSP solvers over an explicit distance matrix: pairwise-exchange
local search and a genetic algorithm with elitism and ordered crossover.
"""

__all__ = [
    "data",
    "errors",
    "evaluation",
    "evolutionary",
    "matrix",
    "population",
]
