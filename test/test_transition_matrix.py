"""
Tests for the transition model builder and the shared power-iteration step.
"""

import jax.numpy as jnp
import networkx as nx
import numpy as np
import pytest
from jax.experimental.sparse import BCOO

from graph_props.utils import set_backend
set_backend('cpu')

from graph_props.errors import EmptyGraphError, InvalidWeightError
from graph_props.graphs import from_edge_list, from_networkx
from graph_props.kernels import power_step, sink_mask, transition_matrix, uniform_vector


def create_test_cases() -> dict:
    """Small graphs covering the sink-correction branches."""
    test_cases = {}

    # Node 2 has no out-arcs and no self-loop
    test_cases['dag_sink'] = from_edge_list([0, 0, 1], [1, 2, 2])

    # Node 1 only points to itself
    test_cases['loop_sink'] = from_edge_list([0, 1], [1, 1])

    # Weighted cycle without sinks
    test_cases['weighted_cycle'] = from_edge_list([0, 0, 1, 2], [1, 2, 2, 0], weights=[3.0, 1.0, 2.0, 0.5])

    # Undirected karate club
    test_cases['karate'] = from_networkx(nx.karate_club_graph())

    return test_cases


@pytest.mark.parametrize("case_name", list(create_test_cases().keys()))
def test_columns_are_distributions(case_name):
    graph = create_test_cases()[case_name]
    P = np.asarray(transition_matrix(graph, sparse=False))

    assert P.dtype == np.float64
    assert np.all(P >= 0)
    np.testing.assert_allclose(P.sum(axis=0), np.ones(graph.n_nodes), atol=1e-12)


def test_sink_without_loop_spreads_to_other_nodes():
    P = np.asarray(transition_matrix(create_test_cases()['dag_sink'], sparse=False))

    np.testing.assert_allclose(P[:, 2], [0.5, 0.5, 0.0])
    np.testing.assert_allclose(P[:, 0], [0.0, 0.5, 0.5])
    np.testing.assert_allclose(P[:, 1], [0.0, 0.0, 1.0])


def test_sink_with_loop_spreads_to_every_node():
    graph = create_test_cases()['loop_sink']
    P = np.asarray(transition_matrix(graph, sparse=False))

    np.testing.assert_allclose(P[:, 1], [0.5, 0.5])
    np.testing.assert_array_equal(np.asarray(sink_mask(graph)), [False, True])


def test_weights_drive_probabilities():
    P = np.asarray(transition_matrix(create_test_cases()['weighted_cycle'], sparse=False))

    np.testing.assert_allclose(P[:, 0], [0.0, 0.75, 0.25])
    np.testing.assert_allclose(P[:, 2], [1.0, 0.0, 0.0])


def test_single_node_walks_to_itself():
    P = transition_matrix(from_edge_list([], [], n_nodes=1), sparse=False)
    np.testing.assert_array_equal(np.asarray(P), [[1.0]])


def test_sparse_matches_dense():
    graph = create_test_cases()['karate']
    P_sparse = transition_matrix(graph)

    assert isinstance(P_sparse, BCOO)
    np.testing.assert_allclose(
        np.asarray(P_sparse.todense()),
        np.asarray(transition_matrix(graph, sparse=False))
    )


def test_negative_weight_is_rejected():
    graph = from_edge_list([0, 1], [1, 0], weights=[1.0, -2.0])
    with pytest.raises(InvalidWeightError):
        transition_matrix(graph)
    with pytest.raises(ValueError):
        sink_mask(graph)


@pytest.mark.parametrize("bad_weight", [float("nan"), float("inf"), -float("inf")])
def test_non_finite_weight_is_rejected(bad_weight):
    graph = from_edge_list([0, 1], [1, 0], weights=[1.0, bad_weight])
    with pytest.raises(InvalidWeightError):
        transition_matrix(graph)
    with pytest.raises(InvalidWeightError):
        sink_mask(graph)


def test_negative_weight_hidden_by_parallel_arc_is_rejected():
    graph = from_edge_list([0, 0, 1], [1, 1, 0], weights=[3.0, -1.0, 1.0])
    with pytest.raises(InvalidWeightError):
        transition_matrix(graph)


def test_empty_graph_is_rejected():
    with pytest.raises(EmptyGraphError):
        transition_matrix(from_edge_list([], []))


def test_power_step():
    P = jnp.array([[0.0, 1.0], [1.0, 0.0]])
    x_next, residual = power_step(P, jnp.array([1.0, 0.0]), 0.5)

    np.testing.assert_allclose(np.asarray(x_next), [0.25, 0.75])
    assert float(residual) == pytest.approx(1.5)


def test_power_step_preserves_mass():
    P = transition_matrix(create_test_cases()['karate'])
    x = uniform_vector(34)
    for alpha in (0.3, 0.85, 0.999):
        x, _ = power_step(P, x, alpha)
    assert float(jnp.sum(x)) == pytest.approx(1.0, abs=1e-12)
