"""Progress events emitted by max-flow engines.

Events are plain immutable records. Engines call an optional listener with
each event as it happens; with no listener attached nothing is delivered.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Hashable, Union

if TYPE_CHECKING:
    from preflow.algorithms.augmenting import AugmentingPath


@dataclass(frozen=True)
class PushEvent:
    """Flow was pushed along one residual arc.

    Attributes:
        arc_index: Index of the residual arc in ``ResidualGraph.arcs``.
        start: Start vertex of the residual arc.
        end: End vertex of the residual arc.
        edge_key: Key of the original arc the residual arc represents.
        forward: True for a forward residual arc, False for a backward one.
        amount: Flow units moved.
    """

    arc_index: int
    start: Hashable
    end: Hashable
    edge_key: Hashable
    forward: bool
    amount: int


@dataclass(frozen=True)
class RelabelEvent:
    """A vertex height was raised."""

    node: Hashable
    old_height: int
    new_height: int


@dataclass(frozen=True)
class AugmentEvent:
    """Flow was augmented along a whole path."""

    path: "AugmentingPath"


FlowEvent = Union[PushEvent, RelabelEvent, AugmentEvent]

#: Callback receiving every event an engine emits.
FlowListener = Callable[[FlowEvent], None]
