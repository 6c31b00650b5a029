from __future__ import annotations

from typing import List, Tuple

from .engine import PERTScheduler

# (id, duration, predecessors)
SAMPLE_ACTIVITIES: List[Tuple[str, float, List[str]]] = [
    ("A", 2, []),
    ("B", 4, ["A"]),
    ("C", 10, ["B"]),
    ("D", 6, ["C"]),
    ("E", 4, ["C"]),
    ("F", 5, ["E"]),
    ("G", 7, ["D"]),
    ("H", 9, ["E", "G"]),
    ("I", 7, ["C"]),
    ("J", 8, ["F", "I"]),
    ("K", 4, ["J"]),
    ("L", 5, ["J"]),
    ("M", 2, ["H"]),
    ("N", 6, ["K", "L"]),
]


def load_sample_project(scheduler: PERTScheduler) -> int:
    """Clear the scheduler and load the A-N sample project. Returns the count added."""
    scheduler.clear()
    added = 0
    for act_id, duration, predecessors in SAMPLE_ACTIVITIES:
        ok, _ = scheduler.add_activity(act_id, duration, predecessors)
        added += int(ok)
    return added
