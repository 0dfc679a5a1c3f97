"""Base enums and the shared engine interface for max-flow algorithms."""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Hashable, List, Protocol

if TYPE_CHECKING:
    from preflow.algorithms.events import FlowEvent
    from preflow.algorithms.residual import ResidualGraph
    from preflow.graph.flow_network import FlowNetwork


class MaxFlowAlgorithm(IntEnum):
    """Max-flow algorithm variants sharing the residual-graph setup."""

    #: Push-relabel with highest-label active vertex selection.
    HIGHEST_LABEL = 1
    #: Shortest augmenting paths found by BFS (Edmonds-Karp).
    EDMONDS_KARP = 2

    @classmethod
    def from_string(cls, value: str) -> "MaxFlowAlgorithm":
        """Parse a string into a MaxFlowAlgorithm enum value.

        Args:
            value: Case-insensitive member name (e.g., "highest_label").

        Returns:
            The corresponding MaxFlowAlgorithm member.

        Raises:
            ValueError: If the string doesn't match any member.
        """
        try:
            return cls[value.strip().upper().replace("-", "_")]
        except KeyError:
            valid = ", ".join(e.name for e in cls)
            raise ValueError(
                f"Invalid algorithm '{value}'. Valid values are: {valid}"
            ) from None


class MaxFlowEngine(Protocol):
    """Interface implemented by every max-flow engine.

    An engine owns its residual graph exclusively. ``run`` drives it to
    completion, ``run_step`` advances it by one decision and returns the
    events that decision produced. After ``reset`` the engine behaves as if
    newly constructed.
    """

    algorithm: MaxFlowAlgorithm
    network: "FlowNetwork"
    source: Hashable
    target: Hashable
    pushes: int
    relabels: int
    augmentations: int

    @property
    def residual(self) -> "ResidualGraph": ...

    def run(self) -> "FlowNetwork": ...

    def run_step(self) -> List["FlowEvent"]: ...

    def is_finished(self) -> bool: ...

    def reset(self) -> None: ...

    def flow_value(self) -> int: ...
