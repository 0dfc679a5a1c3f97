"""Capacitated multi-directed graph with validation and convenience APIs.

`FlowNetwork` extends `networkx.MultiDiGraph` to enforce explicit node
management, unique arc identifiers, integer capacities and flows, and
predictable error handling. Every arc carries a fixed ``capacity`` and a
mutable ``flow`` attribute; max-flow engines read the topology once and write
the final flow back into these attributes.
"""

from __future__ import annotations

from numbers import Integral
from pickle import dumps, loads
from typing import Any, Dict, Hashable, List, Optional, Tuple

import networkx as nx

NodeID = Hashable
EdgeID = Hashable
AttrDict = Dict[str, Any]
EdgeTuple = Tuple[NodeID, NodeID, EdgeID, AttrDict]


def _check_int(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise ValueError(f"{what} must be an integer, got {value!r}.")
    return int(value)


class FlowNetwork(nx.MultiDiGraph):
    """A capacitated multi-directed graph with strict rules and unique arc IDs.

    This class enforces:
      - No automatic creation of missing nodes when adding an arc.
      - No duplicate nodes (raises ValueError on duplicates).
      - No duplicate arcs by key (raises ValueError on duplicates).
      - No self-loops.
      - Integer capacities ``>= 0`` and integer flows with ``0 <= flow <= capacity``.
      - Removing non-existent nodes or arcs raises ValueError.

    Arc keys are monotonically increasing integers unless given explicitly.
    ``copy()`` performs a pickle-based deep copy.
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize a FlowNetwork.

        Args:
            *args: Positional arguments forwarded to the MultiDiGraph constructor.
            **kwargs: Keyword arguments forwarded to the MultiDiGraph constructor.

        Attributes:
            _edges: Map arc key to ``(source_node, target_node, edge_key, attribute_dict)``.
        """
        super().__init__(*args, **kwargs)
        self._edges: Dict[EdgeID, EdgeTuple] = {}
        # Only advances; removed arcs do not release their IDs.
        self._next_edge_id: int = 0

    def new_edge_key(self, u: NodeID, v: NodeID, key: Optional[int] = None) -> int:  # type: ignore[override]
        """Return a new unique integer arc ID.

        Signature matches NetworkX's ``new_edge_key(self, u, v, key=None)``.
        """
        next_edge_id = self._next_edge_id
        self._next_edge_id += 1
        return int(next_edge_id)

    def copy(self, as_view: bool = False, pickle: bool = True) -> FlowNetwork:
        """Create a copy of this network.

        Args:
            as_view: If True, return a view instead of a full copy; only used
                if ``pickle=False``.
            pickle: If True, perform a pickle-based deep copy.

        Returns:
            FlowNetwork: A new instance (or view) of the network.
        """
        if not pickle:
            return super().copy(as_view=as_view)  # type: ignore[return-value]
        return loads(dumps(self))

    #
    # Node management
    #
    def add_node(self, node_for_adding: NodeID, **attr: Any) -> None:
        """Add a single node, disallowing duplicates.

        Raises:
            ValueError: If the node already exists in the network.
        """
        if node_for_adding in self:
            raise ValueError(f"Node '{node_for_adding}' already exists in this graph.")
        super().add_node(node_for_adding, **attr)

    def remove_node(self, n: NodeID) -> None:
        """Remove a single node and all incident arcs.

        Raises:
            ValueError: If the node does not exist in the network.
        """
        if n not in self:
            raise ValueError(f"Node '{n}' does not exist.")
        to_delete = [
            e_id for e_id, (s, t, _, _) in self._edges.items() if s == n or t == n
        ]
        for e_id in to_delete:
            del self._edges[e_id]

        super().remove_node(n)

    #
    # Arc management
    #
    def add_edge(  # pyright: ignore[reportIncompatibleMethodOverride]
        self,
        u_for_edge: NodeID,
        v_for_edge: NodeID,
        key: Optional[EdgeID] = None,
        **attr: Any,
    ) -> EdgeID:
        """Add a directed arc from u_for_edge to v_for_edge.

        Missing ``capacity`` and ``flow`` attributes default to 0. Both
        endpoints must already exist. When an explicit integer key is
        provided, the internal counter is advanced past it.

        Args:
            u_for_edge: The start vertex. Must exist in the network.
            v_for_edge: The end vertex. Must exist in the network.
            key: The unique arc key. If None, a new key is generated.
            **attr: Arc attributes; ``capacity`` and ``flow`` are validated.

        Returns:
            EdgeID: The key associated with the new arc.

        Raises:
            ValueError: If either node does not exist, the key is already in
                use, the arc is a self-loop, or capacity/flow are invalid.
        """
        if u_for_edge not in self:
            raise ValueError(f"Source node '{u_for_edge}' does not exist.")
        if v_for_edge not in self:
            raise ValueError(f"Target node '{v_for_edge}' does not exist.")
        if u_for_edge == v_for_edge:
            raise ValueError(f"Self-loop on node '{u_for_edge}' is not allowed.")

        arc_name = f"Arc {u_for_edge}->{v_for_edge}"
        capacity = _check_int(attr.get("capacity", 0), f"{arc_name} capacity")
        if capacity < 0:
            raise ValueError(f"{arc_name} has negative capacity {capacity}.")
        flow = _check_int(attr.get("flow", 0), f"{arc_name} flow")
        if not 0 <= flow <= capacity:
            raise ValueError(
                f"{arc_name} has flow {flow} outside [0, {capacity}]."
            )
        attr["capacity"] = capacity
        attr["flow"] = flow

        if key is None:
            key = self.new_edge_key(u_for_edge, v_for_edge)
        else:
            if key in self._edges:
                raise ValueError(f"Edge with id '{key}' already exists.")
            if isinstance(key, int) and key >= self._next_edge_id:
                self._next_edge_id = key + 1

        super().add_edge(u_for_edge, v_for_edge, key=key, **attr)
        assert key is not None
        self._edges[key] = (
            u_for_edge,
            v_for_edge,
            key,
            self[u_for_edge][v_for_edge][key],  # pyright: ignore[reportArgumentType]
        )
        return key

    def add_arc(
        self,
        u: NodeID,
        v: NodeID,
        capacity: int,
        flow: int = 0,
        key: Optional[EdgeID] = None,
        **attr: Any,
    ) -> EdgeID:
        """Add an arc with an explicit capacity and initial flow.

        Returns:
            EdgeID: The key associated with the new arc.
        """
        return self.add_edge(u, v, key=key, capacity=capacity, flow=flow, **attr)

    def remove_edge(
        self,
        u: NodeID,
        v: NodeID,
        key: Optional[EdgeID] = None,
    ) -> None:
        """Remove an arc (or all arcs) between nodes u and v.

        Raises:
            ValueError: If the nodes or the specified arc do not exist.
        """
        if u not in self:
            raise ValueError(f"Source node '{u}' does not exist.")
        if v not in self:
            raise ValueError(f"Target node '{v}' does not exist.")

        if key is not None:
            if key not in self._edges:
                raise ValueError(f"No edge with id='{key}' found from {u} to {v}.")
            src_node, dst_node, _, _ = self._edges[key]
            if src_node != u or dst_node != v:
                raise ValueError(
                    f"Edge with id='{key}' is actually from {src_node} to {dst_node}, "
                    f"not from {u} to {v}."
                )
            self.remove_edge_by_id(key)
        else:
            edge_ids = tuple(self.succ[u].get(v, ()))
            if not edge_ids:
                raise ValueError(f"No edges from '{u}' to '{v}' to remove.")
            for e_id in edge_ids:
                self.remove_edge_by_id(e_id)

    def remove_edge_by_id(self, key: EdgeID) -> None:
        """Remove a directed arc by its unique key.

        Raises:
            ValueError: If no arc with this key exists.
        """
        if key not in self._edges:
            raise ValueError(f"Edge with id='{key}' not found.")
        src_node, dst_node, _, _ = self._edges.pop(key)
        super().remove_edge(src_node, dst_node, key=key)

    #
    # Convenience methods
    #
    def get_nodes(self) -> Dict[NodeID, AttrDict]:
        """Return all nodes and their attributes as a dictionary."""
        return dict(self.nodes(data=True))

    def get_edges(self) -> Dict[EdgeID, EdgeTuple]:
        """Return all arcs by key, in insertion order.

        Returns:
            Dict[EdgeID, EdgeTuple]: A mapping of arc key to
                ``(source_node, target_node, edge_key, edge_attributes)``.
        """
        return self._edges

    def get_edge_attr(self, key: EdgeID) -> AttrDict:
        """Return the attribute dictionary of a specific arc.

        Raises:
            ValueError: If no arc with this key is found.
        """
        if key not in self._edges:
            raise ValueError(f"Edge with id='{key}' not found.")
        return self._edges[key][3]

    def edges_between(self, u: NodeID, v: NodeID) -> List[EdgeID]:
        """List all arc keys from node u to node v."""
        if u not in self.succ or v not in self.succ[u]:
            return []
        return list(self.succ[u][v].keys())

    #
    # Flow helpers
    #
    def validate_endpoints(self, source: NodeID, target: NodeID) -> None:
        """Check that ``source`` and ``target`` are distinct existing vertices.

        Raises:
            ValueError: If either vertex is missing or they are the same vertex.
        """
        if source not in self:
            raise ValueError(f"Source node '{source}' does not exist.")
        if target not in self:
            raise ValueError(f"Target node '{target}' does not exist.")
        if source == target:
            raise ValueError(f"Source and target must differ, both are '{source}'.")

    def validate_flow(self, source: NodeID, target: NodeID) -> None:
        """Check that the arc flows conserve at every vertex but the endpoints.

        Raises:
            ValueError: Naming the first vertex whose inflow and outflow differ.
        """
        for node in self.nodes:
            if node == source or node == target:
                continue
            balance = self.flow_balance(node)
            if balance != 0:
                raise ValueError(
                    f"Flow is not conserved at node '{node}': net inflow {balance}."
                )

    def reset_flow(self) -> None:
        """Set the flow of every arc to zero."""
        for _, _, _, attr in self._edges.values():
            attr["flow"] = 0

    def flow_balance(self, node: NodeID) -> int:
        """Return inflow minus outflow at ``node``."""
        inflow = sum(d["flow"] for _, _, d in self.in_edges(node, data=True))
        outflow = sum(d["flow"] for _, _, d in self.out_edges(node, data=True))
        return inflow - outflow

    def flow_value(self, source: NodeID) -> int:
        """Return the net flow leaving ``source``."""
        return -self.flow_balance(source)
