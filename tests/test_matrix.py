import networkx as nx
import numpy as np
import pytest

from tsp_heuristics.errors import IndexOutOfRange, InvalidConfiguration, InvalidDimension
from tsp_heuristics.matrix import DistanceMatrix


def test_cost_reads_grid(four_city):
    assert four_city.size == 4
    assert len(four_city) == 4
    assert four_city.cost(1, 2) == 4
    assert four_city.cost(3, 0) == 3
    assert four_city.is_symmetric


def test_cost_rejects_out_of_range(four_city):
    with pytest.raises(IndexOutOfRange):
        four_city.cost(4, 0)
    with pytest.raises(IndexOutOfRange):
        four_city.cost(0, -1)


@pytest.mark.parametrize("grid", [[[0, 1], [1, 0], [2, 2]], [[0, 1, 2]], [], [0, 1]])
def test_rejects_non_square(grid):
    with pytest.raises(InvalidDimension):
        DistanceMatrix(grid)


def test_rejects_negative_and_diagonal():
    with pytest.raises(InvalidConfiguration):
        DistanceMatrix([[0, -1], [1, 0]])
    with pytest.raises(InvalidConfiguration):
        DistanceMatrix([[1, 1], [1, 0]])
    with pytest.raises(InvalidConfiguration):
        DistanceMatrix([[0, float("inf")], [1, 0]])


def test_is_read_only_copy():
    grid = np.array([[0.0, 2.0], [3.0, 0.0]])
    matrix = DistanceMatrix(grid)
    grid[0, 1] = 99.0
    assert matrix.cost(0, 1) == 2.0
    assert not matrix.is_symmetric
    with pytest.raises(ValueError):
        matrix.to_numpy()[0, 1] = 5.0


def test_from_graph_keeps_zero_cost_edges_and_drops_self_loops():
    graph = nx.Graph()
    graph.add_weighted_edges_from([(1, 2, 0.0), (1, 3, 2.0), (2, 3, 1.0), (3, 3, 9.0)])
    matrix = DistanceMatrix.from_graph(graph)
    assert matrix.rows == ((0.0, 0.0, 2.0), (0.0, 0.0, 1.0), (2.0, 1.0, 0.0))
    assert matrix.is_symmetric


def test_from_digraph_keeps_direction():
    graph = nx.DiGraph()
    graph.add_weighted_edges_from([(0, 1, 1.0), (1, 0, 2.0)])
    matrix = DistanceMatrix.from_graph(graph)
    assert matrix.cost(0, 1) == 1.0
    assert matrix.cost(1, 0) == 2.0
    assert not matrix.is_symmetric


def test_from_graph_requires_complete_graph():
    graph = nx.path_graph(3)
    with pytest.raises(InvalidDimension):
        DistanceMatrix.from_graph(graph)
