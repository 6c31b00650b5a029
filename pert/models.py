from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class Activity:
    """Represents a project activity with all scheduling attributes."""

    id: str
    duration: float
    predecessors: List[str] = field(default_factory=list)

    # Derived from the predecessors declared by other activities
    successors: List[str] = field(default_factory=list)

    # Forward pass results
    es: float = 0.0  # Earliest Start
    ef: float = 0.0  # Earliest Finish

    # Backward pass results
    ls: float = 0.0  # Latest Start
    lf: float = 0.0  # Latest Finish

    slack: float = 0.0  # LS - ES
    is_critical: bool = False

    def reset_calculations(self) -> None:
        """Reset all calculated values."""
        self.successors = []
        self.es = 0.0
        self.ef = 0.0
        self.ls = 0.0
        self.lf = 0.0
        self.slack = 0.0
        self.is_critical = False


@dataclass
class Schedule:
    """Result of one successful calculation, replaced as a whole."""

    topological_order: List[str] = field(default_factory=list)
    project_duration: float = 0.0
    critical_path: List[str] = field(default_factory=list)
