"""
Read-only distance matrix shared by every tour and population.
"""

from typing import Sequence, Tuple, Union

import networkx as nx
import numpy as np

from .errors import IndexOutOfRange, InvalidConfiguration, InvalidDimension


Grid = Union[Sequence[Sequence[float]], np.ndarray]


class DistanceMatrix:
    """
    Square grid of pairwise travel costs.

    The grid is copied on construction and frozen, so one instance can be
    read from several worker threads without locking. Symmetric and
    asymmetric grids are handled the same way: lookups always index [i][j].
    """

    def __init__(self, grid: Grid):
        arr = np.array(grid, dtype=float)
        if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            raise InvalidDimension(f"distance matrix must be square, got shape {arr.shape}")
        if arr.shape[0] == 0:
            raise InvalidDimension("distance matrix must hold at least one city")
        if not np.all(np.isfinite(arr)) or np.any(arr < 0):
            raise InvalidConfiguration("distance matrix costs must be finite and non-negative")
        if np.any(np.diagonal(arr) != 0):
            raise InvalidConfiguration("distance matrix diagonal must be zero")
        arr.setflags(write=False)
        self._grid = arr
        self._symmetric = bool(np.array_equal(arr, arr.T))
        # Plain floats index much faster than numpy scalars in the search loops.
        self._rows: Tuple[Tuple[float, ...], ...] = tuple(tuple(row) for row in arr.tolist())

    @classmethod
    def from_graph(cls, graph: nx.Graph) -> "DistanceMatrix":
        """Build from a complete weighted graph; nodes are ordered by sorted label."""
        nodes = sorted(graph.nodes())
        idx_map = {n: i for i, n in enumerate(nodes)}
        arr = np.full((len(nodes), len(nodes)), np.nan)
        for u, v, w in graph.edges(data="weight", default=1.0):
            arr[idx_map[u], idx_map[v]] = w
            if not graph.is_directed():
                arr[idx_map[v], idx_map[u]] = w
        np.fill_diagonal(arr, 0.0)
        if np.any(np.isnan(arr)):
            raise InvalidDimension("graph is not complete; every pair of cities needs an edge")
        return cls(arr)

    @property
    def size(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> Tuple[Tuple[float, ...], ...]:
        return self._rows

    @property
    def is_symmetric(self) -> bool:
        return self._symmetric

    def cost(self, i: int, j: int) -> float:
        n = len(self._rows)
        if not (0 <= i < n and 0 <= j < n):
            raise IndexOutOfRange(f"city index ({i}, {j}) outside [0, {n})")
        return self._rows[i][j]

    def to_numpy(self) -> np.ndarray:
        return self._grid

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        kind = "symmetric" if self.is_symmetric else "asymmetric"
        return f"DistanceMatrix(size={self.size}, {kind})"
