"""Conversion utilities between FlowNetwork and NetworkX graphs.

``to_digraph`` consolidates parallel arcs into a single NetworkX edge, which
is the form NetworkX's own flow algorithms expect. ``from_networkx`` builds a
`FlowNetwork` from any directed NetworkX graph, keeping multi-edges.
"""

from typing import Any, Callable, Optional

import networkx as nx

from preflow.graph.flow_network import FlowNetwork, NodeID


def _sum_capacity(graph: FlowNetwork, u: NodeID, v: NodeID, edges: dict) -> dict:
    return {
        "capacity": sum(attr["capacity"] for attr in edges.values()),
        "flow": sum(attr["flow"] for attr in edges.values()),
    }


def to_digraph(
    graph: FlowNetwork,
    edge_func: Optional[Callable[[FlowNetwork, NodeID, NodeID, dict], dict]] = None,
) -> nx.DiGraph:
    """Convert a FlowNetwork to a NetworkX DiGraph.

    Parallel arcs between the same ordered pair of vertices are merged into one
    edge. By default the merged edge carries the summed ``capacity`` and
    ``flow``; a custom ``edge_func`` can compute other attributes.

    Args:
        graph: The FlowNetwork to convert.
        edge_func: Optional function to compute consolidated edge attributes.
            The callable receives ``(graph, u, v, edges)`` where ``edges`` maps
            arc key to attribute dict, and returns a dict.

    Returns:
        A NetworkX DiGraph with the same vertices.
    """
    if edge_func is None:
        edge_func = _sum_capacity

    nx_graph = nx.DiGraph()
    nx_graph.add_nodes_from(graph.get_nodes())
    for u, neighbors in graph.adjacency():
        for v, edges in neighbors.items():
            nx_graph.add_edge(u, v, **edge_func(graph, u, v, dict(edges)))
    return nx_graph


def from_networkx(
    nx_graph: Any,
    capacity_attr: str = "capacity",
    flow_attr: Optional[str] = None,
) -> FlowNetwork:
    """Build a FlowNetwork from a directed NetworkX graph.

    Args:
        nx_graph: A ``nx.DiGraph`` or ``nx.MultiDiGraph``.
        capacity_attr: Edge attribute holding the integer capacity. Edges
            without it get capacity 0.
        flow_attr: Optional edge attribute holding an initial flow. When None,
            every arc starts with zero flow.

    Returns:
        A new FlowNetwork.

    Raises:
        ValueError: If the graph is undirected or an edge has an invalid
            capacity or flow.
    """
    if not nx_graph.is_directed():
        raise ValueError("Only directed graphs can be converted to a FlowNetwork.")

    graph = FlowNetwork()
    for node, data in nx_graph.nodes(data=True):
        graph.add_node(node, **data)

    if nx_graph.is_multigraph():
        edge_iter = ((u, v, d) for u, v, _, d in nx_graph.edges(keys=True, data=True))
    else:
        edge_iter = nx_graph.edges(data=True)

    for u, v, data in edge_iter:
        flow = data.get(flow_attr, 0) if flow_attr is not None else 0
        graph.add_arc(u, v, capacity=data.get(capacity_attr, 0), flow=flow)
    return graph
