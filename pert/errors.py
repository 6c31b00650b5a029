from __future__ import annotations

from typing import List


class SchedulingError(Exception):
    """Base class for failures that abort a schedule calculation."""


class EmptyProjectError(SchedulingError):
    def __init__(self) -> None:
        super().__init__("No activities defined.")


class MissingPredecessorError(SchedulingError):
    def __init__(self, activity_id: str, predecessor_id: str) -> None:
        self.activity_id = activity_id
        self.predecessor_id = predecessor_id
        super().__init__(
            f"Predecessor '{predecessor_id}' does not exist (referenced by activity '{activity_id}')."
        )


class CircularDependencyError(SchedulingError):
    def __init__(self, unresolved: List[str]) -> None:
        self.unresolved = list(unresolved)
        super().__init__(
            f"Circular dependency detected among: {', '.join(self.unresolved)}"
        )
