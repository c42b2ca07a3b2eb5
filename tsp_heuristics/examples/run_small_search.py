import random

from tsp_heuristics.data import generate_matrix
from tsp_heuristics.evaluation import aggregate_results, evaluate_solver
from tsp_heuristics.evolutionary import GAConfig, GeneticSolver
from tsp_heuristics.solvers.two_opt import TwoOptConfig, TwoOptSolver


def main():
    results = []
    for seed in range(3):
        matrix = generate_matrix(30, max_distance=300.0, rng=random.Random(seed))
        solvers = [
            TwoOptSolver(TwoOptConfig(restarts=4, random_seed=seed)),
            GeneticSolver(GAConfig(population_size=60, elite_size=10, generations=100, random_seed=seed)),
        ]
        for solver in solvers:
            result = evaluate_solver(solver, matrix)
            results.append(result)
            print(f"seed {seed}: {result.solver_name:8s} length={result.length:.2f} runtime={result.runtime:.2f}s")
    for name in ("two_opt", "genetic"):
        summary = aggregate_results([r for r in results if r.solver_name == name])
        print(f"{name}: mean length={summary['length']:.2f} mean runtime={summary['runtime']:.2f}s")


if __name__ == "__main__":
    main()
