import random
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

import numpy as np
import tsplib95

from .errors import InvalidConfiguration
from .matrix import DistanceMatrix


@dataclass
class Instance:
    name: str
    path: Path
    matrix: DistanceMatrix
    nodes: List[int]
    optimum: Optional[float]


def generate_matrix(
    size: int,
    max_distance: float = 1000.0,
    symmetric: bool = True,
    rng: Optional[random.Random] = None,
) -> DistanceMatrix:
    """Uniform random costs in [0, max_distance) with a zero diagonal."""
    if size < 1:
        raise InvalidConfiguration("size must be positive")
    if max_distance <= 0:
        raise InvalidConfiguration("max_distance must be positive")
    rng = rng or random.Random()
    grid = np.array([[max_distance * rng.random() for _ in range(size)] for _ in range(size)])
    np.fill_diagonal(grid, 0.0)
    if symmetric:
        # Mirror the lower triangle onto the upper one.
        upper = np.triu_indices(size, k=1)
        grid[upper] = grid.T[upper]
    return DistanceMatrix(grid)


def _solution_candidates(path: Path) -> Iterable[Path]:
    yield path.with_suffix(".opt.tour")
    for ext in (".opt.tour", ".opt", ".tour"):
        yield path.parent / "solutions" / f"{path.stem}{ext}"


def _read_dimension(path: Path) -> Optional[int]:
    with path.open("r") as f:
        for line in f:
            if "DIMENSION" in line.upper():
                parts = line.replace(":", " ").split()
                for token in parts:
                    if token.isdigit():
                        return int(token)
    return None


def _load_optimum(problem, path: Path) -> Optional[float]:
    for candidate in _solution_candidates(path):
        if not candidate.exists():
            continue
        tour_file = tsplib95.load(candidate)
        if not tour_file.tours:
            continue
        nodes = list(tour_file.tours[0])
        dist = 0.0
        for i in range(len(nodes)):
            a = nodes[i]
            b = nodes[(i + 1) % len(nodes)]
            dist += problem.get_weight(a, b)
        return float(dist)
    return None


def load_instance(path: Path) -> Instance:
    path = Path(path)
    problem = tsplib95.load(path)
    graph = problem.get_graph()
    nodes = sorted(graph.nodes())
    optimum = _load_optimum(problem, path)
    name = problem.name or path.stem
    matrix = DistanceMatrix.from_graph(graph)
    return Instance(name=name, path=path, matrix=matrix, nodes=nodes, optimum=optimum)


def load_tsplib_instances(
    root: Path, max_nodes: Optional[int] = None, max_instances: Optional[int] = None
) -> List[Instance]:
    tsp_files = sorted(Path(root).glob("*.tsp"))
    instances: List[Instance] = []
    for p in tsp_files:
        if max_nodes is not None:
            dim = _read_dimension(p)
            if dim is not None and dim > max_nodes:
                continue
        instances.append(load_instance(p))
        if max_instances is not None and len(instances) >= max_instances:
            break
    return instances
