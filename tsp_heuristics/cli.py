import argparse
import logging
import random
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from tsp_heuristics.data import generate_matrix, load_instance
from tsp_heuristics.errors import TSPError
from tsp_heuristics.evaluation import evaluate_solver
from tsp_heuristics.evolutionary import GAConfig, GeneticSolver
from tsp_heuristics.matrix import DistanceMatrix
from tsp_heuristics.solvers.base import format_tour
from tsp_heuristics.solvers.operators import MUTATION_POLICIES
from tsp_heuristics.solvers.two_opt import TwoOptConfig, TwoOptSolver


def log(msg: str) -> None:
    ts = time.strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


def _build_matrix(args) -> Tuple[DistanceMatrix, Optional[float]]:
    if args.tsplib:
        path = Path(args.tsplib)
        log(f"loading TSPLIB instance from {path}")
        inst = load_instance(path)
        log(f"instance {inst.name}: {inst.matrix.size} cities, optimum={inst.optimum}")
        return inst.matrix, inst.optimum
    log(
        f"generating {'asymmetric' if args.asymmetric else 'symmetric'} matrix "
        f"with {args.cities} cities (max distance {args.max_distance})"
    )
    matrix = generate_matrix(
        args.cities,
        max_distance=args.max_distance,
        symmetric=not args.asymmetric,
        rng=random.Random(args.seed),
    )
    return matrix, None


def two_opt(args) -> None:
    matrix, optimum = _build_matrix(args)
    cfg = TwoOptConfig(
        max_passes=args.max_passes,
        restarts=args.restarts,
        max_workers=args.workers,
        random_seed=args.seed,
    )
    result = evaluate_solver(TwoOptSolver(cfg), matrix, optimum)
    print(f"Best Solution After {cfg.restarts} Iterations: {result.length:.2f}")
    if optimum is not None:
        print(f"Gap to optimum: {result.gap:.2%}")
    print(f"Two-Opt took: {result.runtime:.3f}s")


def ga(args) -> None:
    matrix, optimum = _build_matrix(args)
    cfg = GAConfig(
        population_size=args.population,
        elite_size=args.elite,
        mutation_rate=args.mutation_rate,
        generations=args.generations,
        mutation_policy=args.mutation_policy,
        random_seed=args.seed,
    )
    solver = GeneticSolver(cfg)
    result = evaluate_solver(solver, matrix, optimum)
    print(f"Initial Distance: {solver.last_result.initial_distance:.2f}")
    print(f"Final Distance: {result.length:.2f}")
    print(format_tour(result.tour))
    if optimum is not None:
        print(f"Gap to optimum: {result.gap:.2%}")
    print(f"Genetic Algorithm took: {result.runtime:.3f}s")


def _add_matrix_args(parser: argparse.ArgumentParser, default_cities: int) -> None:
    parser.add_argument("--cities", type=int, default=default_cities)
    parser.add_argument("--max-distance", type=float, default=1000.0)
    parser.add_argument("--asymmetric", action="store_true", help="Generate an asymmetric matrix")
    parser.add_argument("--tsplib", default=None, help="Load a TSPLIB .tsp file instead of generating")
    parser.add_argument("--seed", type=int, default=123)
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Heuristic TSP solvers")
    subparsers = parser.add_subparsers(dest="command", required=True)

    two_opt_parser = subparsers.add_parser("two-opt", help="Pairwise-exchange local search with random restarts")
    _add_matrix_args(two_opt_parser, default_cities=200)
    two_opt_parser.add_argument("--restarts", type=int, default=10)
    two_opt_parser.add_argument("--workers", type=int, default=None)
    two_opt_parser.add_argument("--max-passes", type=int, default=None)
    two_opt_parser.set_defaults(func=two_opt)

    ga_parser = subparsers.add_parser("ga", help="Genetic algorithm with elitism and ordered crossover")
    _add_matrix_args(ga_parser, default_cities=25)
    ga_parser.add_argument("--population", type=int, default=100)
    ga_parser.add_argument("--elite", type=int, default=20)
    ga_parser.add_argument("--mutation-rate", type=float, default=0.01)
    ga_parser.add_argument("--generations", type=int, default=500)
    ga_parser.add_argument("--mutation-policy", choices=MUTATION_POLICIES, default="swap")
    ga_parser.set_defaults(func=ga)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    try:
        args.func(args)
    except TSPError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
