"""preflow: maximum flow by highest-label push-relabel.

preflow computes maximum s-t flows in capacitated directed multigraphs with
integer capacities. The main engine is the generic push-relabel method with
highest-label active vertex selection and the current-arc heuristic; an
Edmonds-Karp engine shares the same residual graph and interface.

Primary API:
    calc_max_flow() - One-call max-flow computation with optional summary
    create_engine() - Engine for step-by-step or batch execution
    FlowNetwork - Capacitated graph model
    MaxFlowAlgorithm - Engine selector

Example:
    from preflow import FlowNetwork, calc_max_flow, create_engine

    net = FlowNetwork()
    for name in ("S", "A", "T"):
        net.add_node(name)
    net.add_arc("S", "A", capacity=3)
    net.add_arc("A", "T", capacity=1)

    flow = calc_max_flow(net, "S", "T")

    # Observe each push and relabel
    engine = create_engine(net, "S", "T", listener=print)
    while not engine.is_finished():
        engine.run_step()
"""

from __future__ import annotations

from preflow import logging
from preflow._version import __version__
from preflow.algorithms.augmenting import AugmentingPath, EdmondsKarp
from preflow.algorithms.base import MaxFlowAlgorithm, MaxFlowEngine
from preflow.algorithms.events import (
    AugmentEvent,
    FlowEvent,
    FlowListener,
    PushEvent,
    RelabelEvent,
)
from preflow.algorithms.max_flow import build_summary, calc_max_flow, create_engine
from preflow.algorithms.push_relabel import HighestLabelPushRelabel
from preflow.algorithms.residual import (
    ResidualArc,
    ResidualGraph,
    ResidualSnapshot,
    VertexState,
    build_residual_graph,
)
from preflow.algorithms.types import FlowSummary
from preflow.config import DEFAULT_CONFIG, SolverConfig
from preflow.graph.convert import from_networkx, to_digraph
from preflow.graph.flow_network import FlowNetwork

__all__ = [
    # Version
    "__version__",
    # Model
    "FlowNetwork",
    "from_networkx",
    "to_digraph",
    # Residual graph
    "ResidualArc",
    "ResidualGraph",
    "ResidualSnapshot",
    "VertexState",
    "build_residual_graph",
    # Engines
    "MaxFlowAlgorithm",
    "MaxFlowEngine",
    "HighestLabelPushRelabel",
    "EdmondsKarp",
    "AugmentingPath",
    "create_engine",
    "calc_max_flow",
    "build_summary",
    # Events
    "PushEvent",
    "RelabelEvent",
    "AugmentEvent",
    "FlowEvent",
    "FlowListener",
    # Results and configuration
    "FlowSummary",
    "SolverConfig",
    "DEFAULT_CONFIG",
    # Utilities
    "logging",
]
