"""Plain-text rendering of a calculated schedule."""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

if TYPE_CHECKING:
    from .engine import PERTScheduler

TABLE_HEADER = "ID\tDur\tES\tEF\tLS\tLF\tSlack\tPreds"
NOT_CALCULATED = "Not yet calculated"


def format_number(value: float) -> str:
    """Compact number rendering: 6 significant digits, no trailing zeros."""
    return f"{value:g}"


def format_critical_path(path: Sequence[str]) -> str:
    return " -> ".join(path)


def format_activity_table(scheduler: "PERTScheduler") -> str:
    """Tab-separated activity table in topological order."""
    lines: List[str] = [TABLE_HEADER]
    for act_id in scheduler.topological_order:
        act = scheduler.activities[act_id]
        values = [act.duration, act.es, act.ef, act.ls, act.lf, act.slack]
        lines.append(
            "\t".join([act.id] + [format_number(v) for v in values] + [",".join(act.predecessors)])
        )
    return "\n".join(lines)


def format_report(scheduler: "PERTScheduler") -> str:
    """
    Full text report: activity table, project duration and critical path.

    Returns ``NOT_CALCULATED`` when no topological order is cached, which is
    also the case right after a failed calculation.
    """
    if not scheduler.is_calculated:
        return NOT_CALCULATED

    lines = [
        format_activity_table(scheduler),
        f"Project Duration: {format_number(scheduler.get_project_duration())}",
    ]
    path = scheduler.get_critical_path()
    if path:
        lines.append(f"Critical Path: {format_critical_path(path)}")
    return "\n".join(lines)
