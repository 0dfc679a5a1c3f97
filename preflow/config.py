"""Configuration classes for preflow solvers."""

from dataclasses import dataclass

from preflow.algorithms.base import MaxFlowAlgorithm


@dataclass
class SolverConfig:
    """Configuration for max-flow engines."""

    # Algorithm used when the caller does not pick one
    default_algorithm: MaxFlowAlgorithm = MaxFlowAlgorithm.HIGHEST_LABEL

    # Relabel budget is relabel_limit_factor * |V|^2 (the standard bound uses 2)
    relabel_limit_factor: int = 2

    # Verify residual complementarity after every step (slow, for debugging)
    check_invariants: bool = False

    def relabel_limit(self, num_vertices: int) -> int:
        """Upper bound on relabel operations for a graph with ``num_vertices`` vertices."""
        return max(1, self.relabel_limit_factor * num_vertices * num_vertices)


# Global configuration instance
DEFAULT_CONFIG = SolverConfig()
