import time
from typing import Dict, List, Optional

from .matrix import DistanceMatrix
from .solvers.base import SolveResult, Solver, tour_length


def evaluate_solver(
    solver: Solver,
    matrix: DistanceMatrix,
    optimum: Optional[float] = None,
) -> SolveResult:
    start = time.perf_counter()
    tour = solver.solve(matrix)
    runtime = time.perf_counter() - start
    # Recomputed from scratch so a stale cache inside a solver cannot leak out.
    length = tour_length(matrix, tour.order)
    return SolveResult(
        tour=tour,
        length=length,
        solver_name=solver.name,
        optimum=optimum,
        runtime=runtime,
    )


def aggregate_results(results: List[SolveResult]) -> Dict[str, float]:
    if not results:
        return {"length": float("inf"), "gap": float("inf"), "runtime": float("inf")}
    length = sum(r.length for r in results) / len(results)
    finite_gaps = [r.gap for r in results if r.gap != float("inf")]
    gap = sum(finite_gaps) / max(1, len(finite_gaps)) if finite_gaps else float("inf")
    runtime = sum(r.runtime for r in results) / len(results)
    return {"length": length, "gap": gap, "runtime": runtime}
