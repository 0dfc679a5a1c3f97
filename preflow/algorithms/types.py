"""Types and data structures for max-flow results.

Defines immutable summary containers and aliases for engine outputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Hashable, List, Set, Tuple

# Arc identifier tuple: (start_node, end_node, arc_key)
Edge = Tuple[Hashable, Hashable, Hashable]


@dataclass(frozen=True)
class FlowSummary:
    """Summary of a max-flow computation.

    Attributes:
        total_flow: Maximum flow value achieved.
        edge_flow: Flow per arc, indexed by ``(start, end, key)``.
        residual_cap: Remaining capacity per arc (capacity minus flow).
        reachable: Vertices reachable from the source in the final residual graph.
        min_cut: Arcs leaving ``reachable``; all of them are saturated.
        pushes: Push operations performed (push-relabel only).
        relabels: Relabel operations performed (push-relabel only).
        augmentations: Augmenting paths applied (Edmonds-Karp only).
    """

    total_flow: int
    edge_flow: Dict[Edge, int]
    residual_cap: Dict[Edge, int]
    reachable: Set[Hashable]
    min_cut: List[Edge]
    pushes: int = 0
    relabels: int = 0
    augmentations: int = 0
