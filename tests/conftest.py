"""Global pytest configuration and shared flow network fixtures."""

from __future__ import annotations

import random

import pytest

from preflow.graph.flow_network import FlowNetwork
from preflow.logging import reset_logging


def build_network(nodes, arcs) -> FlowNetwork:
    """Build a FlowNetwork from node names and ``(u, v, capacity)`` triples."""
    g = FlowNetwork()
    for node in nodes:
        g.add_node(node)
    for u, v, capacity in arcs:
        g.add_arc(u, v, capacity=capacity)
    return g


def random_network(seed: int, num_nodes: int, num_arcs: int, max_cap: int = 20):
    """Random multigraph on vertices 0..num_nodes-1; source 0, target num_nodes-1."""
    rng = random.Random(seed)
    g = FlowNetwork()
    for node in range(num_nodes):
        g.add_node(node)
    while g.number_of_edges() < num_arcs:
        u, v = rng.sample(range(num_nodes), 2)
        g.add_arc(u, v, capacity=rng.randint(0, max_cap))
    return g


@pytest.fixture(autouse=True)
def _isolate_logging():
    """Keep logging configuration changes from leaking between tests."""
    yield
    reset_logging()


@pytest.fixture
def single_arc():
    #      [7]
    #  S────────►T
    return build_network("ST", [("S", "T", 7)])


@pytest.fixture
def diamond():
    # Capacity:
    #        [10]      [5]
    #   ┌───────►A────────┐
    #   │        │        ▼
    #   S        │[5]     T
    #   │        ▼        ▲
    #   └───────►B────────┘
    #        [10]      [10]
    return build_network(
        "SABT",
        [
            ("S", "A", 10),
            ("S", "B", 10),
            ("A", "T", 5),
            ("B", "T", 10),
            ("A", "B", 5),
        ],
    )


@pytest.fixture
def overflow():
    # A receives 3 but can forward only 1; the rest drains back to S.
    #      [3]      [1]
    #  S────────►A────────►T
    return build_network("SAT", [("S", "A", 3), ("A", "T", 1)])


@pytest.fixture
def parallel():
    # Parallel and antiparallel arcs:
    #      [4,6]       [3,5]
    #  S═════════►A═════════►T
    #             ▲          │
    #             └──────────┘
    #                 [2]
    return build_network(
        "SAT",
        [
            ("S", "A", 4),
            ("S", "A", 6),
            ("A", "T", 3),
            ("A", "T", 5),
            ("T", "A", 2),
        ],
    )


@pytest.fixture
def clrs():
    # Classic textbook network with max flow 23.
    return build_network(
        ["s", "v1", "v2", "v3", "v4", "t"],
        [
            ("s", "v1", 16),
            ("s", "v2", 13),
            ("v2", "v1", 4),
            ("v1", "v3", 12),
            ("v3", "v2", 9),
            ("v2", "v4", 14),
            ("v4", "v3", 7),
            ("v3", "t", 20),
            ("v4", "t", 4),
        ],
    )


@pytest.fixture
def disconnected():
    # Target unreachable from source.
    #      [5]            [5]
    #  S────────►A    B────────►T
    return build_network("SABT", [("S", "A", 5), ("B", "T", 5)])


@pytest.fixture
def make_network():
    """Factory fixture: ``make_network(nodes, [(u, v, capacity), ...])``."""
    return build_network


@pytest.fixture
def make_random_network():
    """Factory fixture: ``make_random_network(seed, num_nodes, num_arcs, max_cap=20)``."""
    return random_network
