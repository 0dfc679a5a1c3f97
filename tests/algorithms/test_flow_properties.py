"""Property checks for both engines on random networks.

Flow conservation, capacity respect, residual complementarity, valid
labeling, optimality against NetworkX, termination bounds, reset and
single-step equivalence.
"""

import networkx as nx
import pytest

from preflow.algorithms.base import MaxFlowAlgorithm
from preflow.algorithms.max_flow import create_engine
from preflow.graph.convert import to_digraph

CASES = [
    (seed, n, m)
    for seed, (n, m) in enumerate(
        [(4, 6), (6, 12), (8, 20), (10, 30), (12, 40), (15, 60), (20, 80), (25, 150)]
    )
]

ALGORITHMS = [MaxFlowAlgorithm.HIGHEST_LABEL, MaxFlowAlgorithm.EDMONDS_KARP]


def check_feasible(network, source, target):
    for _, _, _, attr in network.get_edges().values():
        assert 0 <= attr["flow"] <= attr["capacity"]
    for node in network.nodes:
        if node not in (source, target):
            assert network.flow_balance(node) == 0


def edge_flows(network):
    return {key: attr["flow"] for key, (_, _, _, attr) in network.get_edges().items()}


@pytest.mark.parametrize("algorithm", ALGORITHMS)
@pytest.mark.parametrize("seed,n,m", CASES)
def test_optimal_and_feasible(make_random_network, algorithm, seed, n, m):
    g = make_random_network(seed, n, m)
    source, target = 0, n - 1
    expected = nx.maximum_flow_value(to_digraph(g), source, target)

    engine = create_engine(g, source, target, algorithm)
    engine.run()

    assert engine.flow_value() == expected
    assert g.flow_value(source) == expected
    assert g.flow_balance(target) == expected
    check_feasible(g, source, target)


@pytest.mark.parametrize("seed,n,m", CASES)
def test_invariants_hold_after_every_step(make_random_network, seed, n, m):
    g = make_random_network(seed, n, m)
    source, target = 0, n - 1
    engine = create_engine(g, source, target, MaxFlowAlgorithm.HIGHEST_LABEL)
    residual = engine.residual

    last_heights = {node: 0 for node in g.nodes}
    while not engine.is_finished():
        engine.run_step()
        assert residual.check_complementarity()

        for arc in residual.arcs:
            assert arc.residual >= 0
            if arc.residual > 0:
                start = residual.vertices[arc.start]
                end = residual.vertices[arc.end]
                assert start.height <= end.height + 1

        for node, state in residual.vertices.items():
            assert state.height >= last_heights[node]
            last_heights[node] = state.height
            if node != source:
                assert state.excess >= 0
            if node not in (source, target):
                assert state.height <= 2 * n - 1

    assert engine.relabels <= 2 * n * n


@pytest.mark.parametrize("algorithm", ALGORITHMS)
@pytest.mark.parametrize("seed,n,m", CASES[:5])
def test_reset_is_idempotent(make_random_network, algorithm, seed, n, m):
    g = make_random_network(seed, n, m)
    engine = create_engine(g, 0, n - 1, algorithm)
    engine.run()
    first = edge_flows(g)

    engine.reset()
    engine.run()
    assert edge_flows(g) == first


@pytest.mark.parametrize("algorithm", ALGORITHMS)
@pytest.mark.parametrize("seed,n,m", CASES)
def test_single_step_matches_batch(make_random_network, algorithm, seed, n, m):
    batch = make_random_network(seed, n, m)
    stepped = batch.copy()

    create_engine(batch, 0, n - 1, algorithm).run()

    engine = create_engine(stepped, 0, n - 1, algorithm)
    while not engine.is_finished():
        engine.run_step()

    assert edge_flows(stepped) == edge_flows(batch)


@pytest.mark.parametrize("seed,n,m", CASES)
def test_min_cut_matches_networkx(make_random_network, seed, n, m):
    from preflow.algorithms.max_flow import calc_max_flow

    g = make_random_network(seed, n, m)
    flow, summary = calc_max_flow(g, 0, n - 1, return_summary=True)

    cut_value, (reachable, _) = nx.minimum_cut(to_digraph(g), 0, n - 1)
    assert flow == cut_value
    assert sum(summary.edge_flow[e] for e in summary.min_cut) == cut_value
    assert all(summary.residual_cap[e] == 0 for e in summary.min_cut)
    assert 0 in summary.reachable and n - 1 not in summary.reachable
