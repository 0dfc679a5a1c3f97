"""Augmenting paths and the Edmonds-Karp engine.

An `AugmentingPath` records residual arcs from source to target together with
the flow value sent along them. `EdmondsKarp` repeatedly finds a shortest such
path by breadth-first search over arcs with residual capacity and applies it,
one path per step, until the target is unreachable.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from preflow.algorithms.base import MaxFlowAlgorithm
from preflow.algorithms.events import AugmentEvent, FlowEvent, FlowListener
from preflow.algorithms.residual import ResidualGraph, build_residual_graph
from preflow.config import DEFAULT_CONFIG, SolverConfig
from preflow.graph.flow_network import FlowNetwork, NodeID
from preflow.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AugmentingPath:
    """A path of residual arcs and the flow value pushed along it.

    Attributes:
        arcs: Residual arc indices in path order.
        nodes: Vertices visited, source first and target last.
        value: Flow units sent along every arc of the path.
    """

    arcs: Tuple[int, ...]
    nodes: Tuple[NodeID, ...]
    value: int

    def __str__(self) -> str:
        return f"{self.value} | " + " -> ".join(str(n) for n in self.nodes)


def apply_augmenting_path(residual: ResidualGraph, path: AugmentingPath) -> None:
    """Send ``path.value`` units along every arc of ``path``."""
    for arc_index in path.arcs:
        residual.add_flow(arc_index, path.value)


def find_shortest_path(
    residual: ResidualGraph, source: NodeID, target: NodeID
) -> Optional[AugmentingPath]:
    """Breadth-first search for a fewest-arc path with residual capacity.

    Returns:
        The path with its bottleneck value, or None if ``target`` is unreachable.
    """
    pred: Dict[NodeID, int] = {}
    visited = {source}
    queue = deque([source])
    while queue and target not in visited:
        node = queue.popleft()
        for arc_index in residual.vertices[node].incident:
            arc = residual.arcs[arc_index]
            if arc.residual > 0 and arc.end not in visited:
                visited.add(arc.end)
                pred[arc.end] = arc_index
                queue.append(arc.end)

    if target not in visited:
        return None

    arcs: List[int] = []
    nodes: List[NodeID] = [target]
    node = target
    while node != source:
        arc_index = pred[node]
        arcs.append(arc_index)
        node = residual.arcs[arc_index].start
        nodes.append(node)
    arcs.reverse()
    nodes.reverse()
    value = min(residual.arcs[idx].residual for idx in arcs)
    return AugmentingPath(tuple(arcs), tuple(nodes), value)


class EdmondsKarp:
    """Shortest augmenting path engine with the same interface as push-relabel.

    Each ``run_step`` applies one augmenting path and returns its
    `AugmentEvent`; the step that finds no path finishes the engine.
    """

    algorithm = MaxFlowAlgorithm.EDMONDS_KARP
    #: Augmenting paths need neither pushes nor relabels.
    pushes = 0
    relabels = 0

    def __init__(
        self,
        network: FlowNetwork,
        source: NodeID,
        target: NodeID,
        *,
        listener: Optional[FlowListener] = None,
        config: Optional[SolverConfig] = None,
    ) -> None:
        network.validate_endpoints(source, target)
        network.validate_flow(source, target)
        self.network = network
        self.source = source
        self.target = target
        self.listener = listener
        self.config = config or DEFAULT_CONFIG
        self._residual = build_residual_graph(network)
        self._finished = False
        self.augmentations = 0

    @property
    def residual(self) -> ResidualGraph:
        return self._residual

    def is_finished(self) -> bool:
        return self._finished

    def flow_value(self) -> int:
        """Net flow currently leaving the source."""
        return self._residual.net_outflow(self.source)

    def run(self) -> FlowNetwork:
        """Augment until no path remains and return the network."""
        while not self._finished:
            self.run_step()
        return self.network

    def run_step(self) -> List[FlowEvent]:
        """Apply one shortest augmenting path, or finish if none exists."""
        if self._finished:
            return []
        path = find_shortest_path(self._residual, self.source, self.target)
        if path is None:
            self._finish()
            return []

        apply_augmenting_path(self._residual, path)
        self.augmentations += 1
        logger.debug("Augmented %s", path)

        if self.config.check_invariants and not self._residual.check_complementarity():
            raise RuntimeError(f"Residual complementarity broken after path {path}.")

        event = AugmentEvent(path)
        if self.listener is not None:
            self.listener(event)
        return [event]

    def reset(self) -> None:
        """Clear all flow and restore the engine to its freshly built state."""
        self.network.reset_flow()
        self._residual = build_residual_graph(self.network)
        self._finished = False
        self.augmentations = 0

    def _finish(self) -> None:
        for key, (_, _, _, attr) in self.network.get_edges().items():
            attr["flow"] = self._residual.arc_flow(key)
        self._finished = True
        logger.debug(
            "Edmonds-Karp finished: flow=%d, augmentations=%d",
            self.flow_value(),
            self.augmentations,
        )
