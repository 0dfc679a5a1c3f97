"""Maximum flow via push-relabel with highest-label selection.

The engine moves through Uninitialized -> Initializing -> Active-loop ->
Finished. Initialization raises the source to height ``|V|`` and saturates
every residual arc leaving it. The active loop always works on the
highest-labeled vertex with positive excess: it scans the vertex's incident
arcs from the current-arc cursor and either pushes along the first admissible
arc or, when the scan is exhausted, relabels the vertex to one more than the
lowest neighbour reachable over residual capacity. When no active vertex
remains, the flow on each original arc is written back into the network.

Example:
    >>> net = FlowNetwork()
    >>> for n in "SAT":
    ...     net.add_node(n)
    >>> _ = net.add_arc("S", "A", capacity=3)
    >>> _ = net.add_arc("A", "T", capacity=1)
    >>> engine = HighestLabelPushRelabel(net, "S", "T")
    >>> engine.run().flow_value("S")
    1
"""

from __future__ import annotations

import logging
from typing import List, Optional

from preflow.algorithms.active import ActiveVertexQueue
from preflow.algorithms.base import MaxFlowAlgorithm
from preflow.algorithms.events import FlowEvent, FlowListener, PushEvent, RelabelEvent
from preflow.algorithms.residual import ResidualGraph, build_residual_graph
from preflow.config import DEFAULT_CONFIG, SolverConfig
from preflow.graph.flow_network import FlowNetwork, NodeID
from preflow.logging import get_logger

logger = get_logger(__name__)


class HighestLabelPushRelabel:
    """Highest-label push-relabel engine bound to one network and s-t pair.

    Args:
        network: The network to solve. Its arc flows are overwritten when the
            engine finishes and cleared by ``reset``.
        source: Source vertex.
        target: Target vertex.
        listener: Optional callback receiving every `PushEvent` and
            `RelabelEvent`.
        config: Solver configuration; defaults to ``DEFAULT_CONFIG``.

    Raises:
        ValueError: If source or target is missing or they coincide, or if
            the network's current flow is not conserved.
    """

    algorithm = MaxFlowAlgorithm.HIGHEST_LABEL
    #: Push-relabel never augments whole paths.
    augmentations = 0

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
        self._relabel_limit = self.config.relabel_limit(network.number_of_nodes())
        self._residual = build_residual_graph(network)
        self._active = ActiveVertexQueue()
        self._initialized = False
        self._finished = False
        self.pushes = 0
        self.relabels = 0

    @property
    def residual(self) -> ResidualGraph:
        """The residual graph in its current state."""
        return self._residual

    def is_finished(self) -> bool:
        return self._finished

    def active_vertices(self) -> int:
        """Number of vertices currently holding excess."""
        return len(self._active)

    def flow_value(self) -> int:
        """Net flow currently leaving the source."""
        return self._residual.net_outflow(self.source)

    def run(self) -> FlowNetwork:
        """Run the algorithm to completion.

        Returns:
            FlowNetwork: The network, holding a maximum flow on its arcs.
        """
        if self._finished:
            return self.network
        if not self._initialized:
            self._initialize()
        while self._active:
            self._step()
        self._finish()
        return self.network

    def run_step(self) -> List[FlowEvent]:
        """Execute initialization or exactly one push-or-relabel decision.

        Returns:
            List[FlowEvent]: Events produced by this step. The initialization
            step returns one `PushEvent` per saturated source arc; a finished
            engine returns an empty list.
        """
        if self._finished:
            return []
        if not self._initialized:
            events: List[FlowEvent] = list(self._initialize())
        else:
            events = [self._step()]
        if not self._active:
            self._finish()
        return events

    def reset(self) -> None:
        """Clear all flow and restore the engine to its freshly built state."""
        self.network.reset_flow()
        self._residual = build_residual_graph(self.network)
        self._active.clear()
        self._initialized = False
        self._finished = False
        self.pushes = 0
        self.relabels = 0

    def _initialize(self) -> List[PushEvent]:
        residual = self._residual
        source_state = residual.vertices[self.source]
        source_state.height = len(residual.vertices)

        outgoing = [idx for idx in source_state.incident if residual.arcs[idx].residual > 0]
        source_state.excess += sum(residual.arcs[idx].residual for idx in outgoing)

        events = []
        for arc_index in outgoing:
            end = residual.arcs[arc_index].end
            end_state = residual.vertices[end]
            becomes_active = (
                end != self.source and end != self.target and end_state.excess == 0
            )
            events.append(self._push(arc_index))
            if becomes_active:
                self._active.add(end, end_state.height)

        self._initialized = True
        logger.debug(
            "Initialized push-relabel from '%s': %d saturating pushes, %d active vertices",
            self.source,
            len(events),
            len(self._active),
        )
        return events

    def _step(self) -> FlowEvent:
        residual = self._residual
        node = self._active.head()

        arc_index = residual.current_arc(node)
        while arc_index is not None and not residual.is_admissible(arc_index):
            arc_index = residual.current_arc(node)

        if arc_index is not None:
            arc = residual.arcs[arc_index]
            end_state = residual.vertices[arc.end]
            if (
                arc.end != self.source
                and arc.end != self.target
                and end_state.excess == 0
            ):
                self._active.add(arc.end, end_state.height)
            event: FlowEvent = self._push(arc_index)
            if arc.residual > 0:
                residual.retain_current_arc(node)
            if residual.vertices[node].excess == 0:
                self._active.pop_head()
        else:
            event = self._relabel(node)

        if self.config.check_invariants and not residual.check_complementarity():
            raise RuntimeError(f"Residual complementarity broken after {event}.")
        return event

    def _push(self, arc_index: int) -> PushEvent:
        arc = self._residual.arcs[arc_index]
        amount = self._residual.push_flow(arc_index)
        self.pushes += 1
        event = PushEvent(arc_index, arc.start, arc.end, arc.edge_key, arc.forward, amount)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Push %d along %s->%s", amount, arc.start, arc.end)
        if self.listener is not None:
            self.listener(event)
        return event

    def _relabel(self, node: NodeID) -> RelabelEvent:
        residual = self._residual
        state = residual.vertices[node]
        old_height = state.height
        state.height = residual.min_incident_height(node) + 1
        residual.reset_current_arc(node)
        self._active.move_head(state.height)

        self.relabels += 1
        if self.relabels > self._relabel_limit:
            raise RuntimeError(
                f"Relabel limit {self._relabel_limit} exceeded at vertex '{node}'."
            )

        event = RelabelEvent(node, old_height, state.height)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Relabel '%s': %d -> %d", node, old_height, state.height)
        if self.listener is not None:
            self.listener(event)
        return event

    def _finish(self) -> None:
        for key, (_, _, _, attr) in self.network.get_edges().items():
            attr["flow"] = self._residual.arc_flow(key)
        self._finished = True
        logger.debug(
            "Push-relabel finished: flow=%d, pushes=%d, relabels=%d",
            self.flow_value(),
            self.pushes,
            self.relabels,
        )
