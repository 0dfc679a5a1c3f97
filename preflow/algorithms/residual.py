"""Residual graph for max-flow engines.

Every original arc with capacity ``c`` and flow ``f`` becomes two residual
arcs stored next to each other in an arena list: the forward arc (index
``2i``, residual ``c - f``) and the backward arc (index ``2i + 1``, residual
``f``). Each arc stores the index of its pair, so pairing is fixed at
construction and ``forward.residual + backward.residual == c`` holds after
every mutation.

Per-vertex state (height, excess, incident arcs and the current-arc cursor)
lives in `VertexState` records keyed by the original vertex identity.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from preflow.graph.flow_network import EdgeID, FlowNetwork, NodeID
from preflow.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ResidualArc:
    """One direction of an original arc in the residual graph.

    Attributes:
        start: Vertex the residual capacity leaves from.
        end: Vertex the residual capacity leads to.
        residual: Remaining capacity in this direction.
        pair: Arena index of the reverse residual arc.
        edge_key: Key of the original arc (shared with the reverse arc).
        forward: True when the arc follows the original arc direction.
    """

    start: NodeID
    end: NodeID
    residual: int
    pair: int
    edge_key: EdgeID
    forward: bool


@dataclass
class VertexState:
    """Height label, excess and current-arc cursor of one vertex."""

    node: NodeID
    height: int = 0
    excess: int = 0
    incident: List[int] = field(default_factory=list)
    cursor: int = 0


@dataclass(frozen=True)
class ResidualSnapshot:
    """Immutable view of a residual graph at one point in time.

    Attributes:
        heights: Height label per vertex.
        excess: Excess per vertex.
        arcs: ``(start, end, residual, edge_key, forward)`` per residual arc,
            in arena order.
    """

    heights: Dict[NodeID, int]
    excess: Dict[NodeID, int]
    arcs: Tuple[Tuple[NodeID, NodeID, int, EdgeID, bool], ...]


class ResidualGraph:
    """Arena of paired residual arcs plus per-vertex state.

    Built from a `FlowNetwork` by `build_residual_graph`. The vertex set is the
    network's vertex set; the network itself is not mutated here.
    """

    def __init__(self, vertices: Dict[NodeID, VertexState]) -> None:
        self.vertices: Dict[NodeID, VertexState] = vertices
        self.arcs: List[ResidualArc] = []
        self.capacities: Dict[EdgeID, int] = {}
        self.forward_index: Dict[EdgeID, int] = {}

    def add_arc_pair(
        self, start: NodeID, end: NodeID, edge_key: EdgeID, capacity: int, flow: int
    ) -> Tuple[int, int]:
        """Append the forward/backward residual pair for one original arc.

        Returns:
            ``(forward_index, backward_index)``.
        """
        fwd_idx = len(self.arcs)
        bwd_idx = fwd_idx + 1
        self.arcs.append(
            ResidualArc(start, end, capacity - flow, bwd_idx, edge_key, True)
        )
        self.arcs.append(ResidualArc(end, start, flow, fwd_idx, edge_key, False))
        self.vertices[start].incident.append(fwd_idx)
        self.vertices[end].incident.append(bwd_idx)
        self.capacities[edge_key] = capacity
        self.forward_index[edge_key] = fwd_idx
        return fwd_idx, bwd_idx

    #
    # Mutation
    #
    def push_flow(self, arc_index: int) -> int:
        """Push as much excess as possible along one residual arc.

        Moves ``min(residual, excess(start))`` units from the start vertex to
        the end vertex and shifts the same amount of residual capacity to the
        reverse arc.

        Returns:
            int: The amount pushed.
        """
        arc = self.arcs[arc_index]
        start = self.vertices[arc.start]
        assert arc.residual > 0, f"push on saturated arc {arc.start}->{arc.end}"
        assert start.excess > 0, f"push from vertex '{arc.start}' without excess"

        amount = min(arc.residual, start.excess)
        start.excess -= amount
        self.vertices[arc.end].excess += amount
        arc.residual -= amount
        self.arcs[arc.pair].residual += amount
        return amount

    def add_flow(self, arc_index: int, value: int) -> None:
        """Send ``value`` units along one residual arc, ignoring excess.

        Used for whole-path augmentation, where conservation holds per path.
        """
        arc = self.arcs[arc_index]
        assert 0 < value <= arc.residual, (
            f"cannot add {value} units to arc {arc.start}->{arc.end} "
            f"with residual {arc.residual}"
        )
        arc.residual -= value
        self.arcs[arc.pair].residual += value

    #
    # Labels and the current-arc cursor
    #
    def is_admissible(self, arc_index: int) -> bool:
        """Return True if the arc has residual capacity and leads one level down."""
        arc = self.arcs[arc_index]
        return (
            arc.residual > 0
            and self.vertices[arc.start].height == self.vertices[arc.end].height + 1
        )

    def current_arc(self, node: NodeID) -> Optional[int]:
        """Return the arc under ``node``'s cursor and advance the cursor.

        Returns None once the incident list is exhausted.
        """
        state = self.vertices[node]
        if state.cursor >= len(state.incident):
            return None
        arc_index = state.incident[state.cursor]
        state.cursor += 1
        return arc_index

    def retain_current_arc(self, node: NodeID) -> None:
        """Step the cursor back so the arc just returned is returned again."""
        state = self.vertices[node]
        if state.cursor > 0:
            state.cursor -= 1

    def reset_current_arc(self, node: NodeID) -> None:
        """Move ``node``'s cursor back to its first incident arc."""
        self.vertices[node].cursor = 0

    def min_incident_height(self, node: NodeID) -> int:
        """Lowest end-vertex height over ``node``'s arcs with residual capacity."""
        heights = [
            self.vertices[self.arcs[idx].end].height
            for idx in self.vertices[node].incident
            if self.arcs[idx].residual > 0
        ]
        assert heights, f"vertex '{node}' has no residual arc to relabel against"
        return min(heights)

    #
    # Queries
    #
    def arc_flow(self, edge_key: EdgeID) -> int:
        """Current flow on an original arc (the backward residual capacity)."""
        fwd_idx = self.forward_index[edge_key]
        return self.capacities[edge_key] - self.arcs[fwd_idx].residual

    def edge_flows(self) -> Dict[EdgeID, int]:
        """Current flow on every original arc, keyed by arc key."""
        return {key: self.arc_flow(key) for key in self.forward_index}

    def net_outflow(self, node: NodeID) -> int:
        """Flow on original arcs leaving ``node`` minus flow on arcs entering it."""
        total = 0
        for idx in self.vertices[node].incident:
            arc = self.arcs[idx]
            if arc.forward:
                total += self.arcs[arc.pair].residual
            else:
                total -= arc.residual
        return total

    def check_complementarity(self) -> bool:
        """Return True if every forward/backward pair sums to its capacity."""
        for key, fwd_idx in self.forward_index.items():
            fwd = self.arcs[fwd_idx]
            if fwd.residual < 0 or self.arcs[fwd.pair].residual < 0:
                return False
            if fwd.residual + self.arcs[fwd.pair].residual != self.capacities[key]:
                return False
        return True

    def reachable_from(self, node: NodeID) -> Set[NodeID]:
        """Vertices reachable from ``node`` over arcs with residual capacity."""
        visited = {node}
        queue = deque([node])
        while queue:
            current = queue.popleft()
            for idx in self.vertices[current].incident:
                arc = self.arcs[idx]
                if arc.residual > 0 and arc.end not in visited:
                    visited.add(arc.end)
                    queue.append(arc.end)
        return visited

    def snapshot(self) -> ResidualSnapshot:
        """Return an immutable copy of heights, excesses and residual arcs."""
        return ResidualSnapshot(
            heights={n: s.height for n, s in self.vertices.items()},
            excess={n: s.excess for n, s in self.vertices.items()},
            arcs=tuple(
                (a.start, a.end, a.residual, a.edge_key, a.forward) for a in self.arcs
            ),
        )


def build_residual_graph(network: FlowNetwork) -> ResidualGraph:
    """Create the residual graph of ``network``.

    Vertices keep their identities and start at height 0 and excess 0. For
    every arc (in insertion order) a forward arc with residual
    ``capacity - flow`` is appended to the start vertex's incident list and a
    backward arc with residual ``flow`` to the end vertex's.
    """
    residual = ResidualGraph({node: VertexState(node) for node in network.nodes})
    for u, v, key, attr in network.get_edges().values():
        residual.add_arc_pair(u, v, key, attr["capacity"], attr["flow"])

    logger.debug(
        "Residual graph created: (|V|,|A|) = (%d, %d)",
        len(residual.vertices),
        len(residual.arcs),
    )
    return residual
