"""Maximum-flow entry points.

``create_engine`` picks the engine for a `MaxFlowAlgorithm` tag. Engines can
be driven step by step or run to completion. ``calc_max_flow`` is the one-call
convenience wrapper that also builds a `FlowSummary` on request.
"""

from __future__ import annotations

from typing import Dict, Literal, Optional, Tuple, Type, Union, overload

from preflow.algorithms.augmenting import EdmondsKarp
from preflow.algorithms.base import MaxFlowAlgorithm, MaxFlowEngine
from preflow.algorithms.events import FlowListener
from preflow.algorithms.push_relabel import HighestLabelPushRelabel
from preflow.algorithms.types import FlowSummary
from preflow.config import DEFAULT_CONFIG, SolverConfig
from preflow.graph.flow_network import FlowNetwork, NodeID
from preflow.logging import get_logger

logger = get_logger(__name__)

_ENGINES: Dict[MaxFlowAlgorithm, Type] = {
    MaxFlowAlgorithm.HIGHEST_LABEL: HighestLabelPushRelabel,
    MaxFlowAlgorithm.EDMONDS_KARP: EdmondsKarp,
}


def create_engine(
    network: FlowNetwork,
    source: NodeID,
    target: NodeID,
    algorithm: Union[MaxFlowAlgorithm, str, None] = None,
    *,
    listener: Optional[FlowListener] = None,
    config: Optional[SolverConfig] = None,
) -> MaxFlowEngine:
    """Build an engine for ``algorithm`` bound to ``network`` and the s-t pair.

    Args:
        network: The network to solve in place.
        source: Source vertex.
        target: Target vertex.
        algorithm: Enum member or its name; None uses ``config.default_algorithm``.
        listener: Optional callback for progress events.
        config: Solver configuration; defaults to ``DEFAULT_CONFIG``.

    Returns:
        MaxFlowEngine: A fresh engine in the uninitialized state.

    Raises:
        ValueError: If the algorithm name is unknown or the endpoints are invalid.
    """
    config = config or DEFAULT_CONFIG
    if algorithm is None:
        algorithm = config.default_algorithm
    elif isinstance(algorithm, str):
        algorithm = MaxFlowAlgorithm.from_string(algorithm)
    engine_cls = _ENGINES[MaxFlowAlgorithm(algorithm)]
    return engine_cls(network, source, target, listener=listener, config=config)


def build_summary(engine: MaxFlowEngine) -> FlowSummary:
    """Summarize the current state of an engine's flow.

    Args:
        engine: An engine, normally finished.

    Returns:
        FlowSummary: Flows, residual capacities, source-side reachable set and
        min-cut arcs derived from the engine's residual graph.
    """
    residual = engine.residual
    source = engine.source
    reachable = residual.reachable_from(source)

    edge_flow = {}
    residual_cap = {}
    min_cut = []
    for key, (u, v, _, attr) in engine.network.get_edges().items():
        edge = (u, v, key)
        flow = residual.arc_flow(key)
        edge_flow[edge] = flow
        residual_cap[edge] = attr["capacity"] - flow
        if u in reachable and v not in reachable:
            min_cut.append(edge)

    return FlowSummary(
        total_flow=residual.net_outflow(source),
        edge_flow=edge_flow,
        residual_cap=residual_cap,
        reachable=reachable,
        min_cut=min_cut,
        pushes=engine.pushes,
        relabels=engine.relabels,
        augmentations=engine.augmentations,
    )


@overload
def calc_max_flow(
    network: FlowNetwork,
    source: NodeID,
    target: NodeID,
    *,
    algorithm: Union[MaxFlowAlgorithm, str, None] = None,
    return_summary: Literal[False] = False,
    copy_graph: bool = True,
    reset_flow_graph: bool = True,
    listener: Optional[FlowListener] = None,
    config: Optional[SolverConfig] = None,
) -> int: ...


@overload
def calc_max_flow(
    network: FlowNetwork,
    source: NodeID,
    target: NodeID,
    *,
    algorithm: Union[MaxFlowAlgorithm, str, None] = None,
    return_summary: Literal[True],
    copy_graph: bool = True,
    reset_flow_graph: bool = True,
    listener: Optional[FlowListener] = None,
    config: Optional[SolverConfig] = None,
) -> Tuple[int, FlowSummary]: ...


def calc_max_flow(
    network: FlowNetwork,
    source: NodeID,
    target: NodeID,
    *,
    algorithm: Union[MaxFlowAlgorithm, str, None] = None,
    return_summary: bool = False,
    copy_graph: bool = True,
    reset_flow_graph: bool = True,
    listener: Optional[FlowListener] = None,
    config: Optional[SolverConfig] = None,
) -> Union[int, Tuple[int, FlowSummary]]:
    """Compute the maximum flow from ``source`` to ``target``.

    Args:
        network: The capacitated network.
        source: Source vertex.
        target: Target vertex.
        algorithm: Engine to use; defaults to highest-label push-relabel.
        return_summary: If True, also return a `FlowSummary`.
        copy_graph: If True, solve on a copy so ``network`` keeps its flows.
        reset_flow_graph: If True, zero existing arc flows before solving.
            If False, existing flows are the starting point and must be
            conserved at every vertex other than ``source`` and ``target``.
        listener: Optional callback for progress events.
        config: Solver configuration; defaults to ``DEFAULT_CONFIG``.

    Returns:
        Union[int, tuple]: The flow value, or ``(flow, summary)`` when
        ``return_summary`` is True.

    Raises:
        ValueError: If source or target is missing or they coincide, or if
            kept flows are not conserved.

    Examples:
        >>> net = FlowNetwork()
        >>> for n in ("S", "A", "B", "T"):
        ...     net.add_node(n)
        >>> _ = net.add_arc("S", "A", capacity=10)
        >>> _ = net.add_arc("S", "B", capacity=10)
        >>> _ = net.add_arc("A", "T", capacity=5)
        >>> _ = net.add_arc("B", "T", capacity=10)
        >>> _ = net.add_arc("A", "B", capacity=5)
        >>> calc_max_flow(net, "S", "T")
        15
    """
    network.validate_endpoints(source, target)
    flow_network = network.copy() if copy_graph else network
    if reset_flow_graph:
        flow_network.reset_flow()

    engine = create_engine(
        flow_network, source, target, algorithm, listener=listener, config=config
    )
    engine.run()
    total_flow = engine.flow_value()
    logger.debug(
        "Max flow %s -> %s with %s: %d",
        source,
        target,
        engine.algorithm.name,
        total_flow,
    )

    if return_summary:
        return total_flow, build_summary(engine)
    return total_flow
