from __future__ import annotations

from collections import deque
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging
import math

import pandas as pd

from .errors import (
    CircularDependencyError,
    EmptyProjectError,
    MissingPredecessorError,
    SchedulingError,
)
from .models import Activity, Schedule
from .reporting import format_critical_path, format_number

logger = logging.getLogger(__name__)


class PERTScheduler:
    """
    Critical Path Method scheduler over an activity-on-node network.

    Activities are registered with ``add_activity`` and the whole schedule is
    recomputed from scratch by ``calculate``: successor edges, topological
    order, forward and backward passes, slack and a single critical path.
    """

    def __init__(self, slack_tolerance: float = 0.0):
        self.activities: Dict[str, Activity] = {}
        self.calculation_log: List[str] = []
        self.schedule = Schedule()
        self.slack_tolerance = slack_tolerance
        self.last_error: Optional[SchedulingError] = None

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Clear all activities and calculations."""
        self.activities.clear()
        self.calculation_log.clear()
        self.schedule = Schedule()
        self.last_error = None

    def add_activity(
        self,
        activity_id: str,
        duration: float,
        predecessors: Iterable[str] = (),
    ) -> Tuple[bool, str]:
        """
        Add an activity to the project.

        Args:
            activity_id: Unique identifier for the activity
            duration: Duration (must be a finite number >= 0)
            predecessors: Identifiers of the activities that must finish first

        Returns:
            Tuple of (success, message)
        """
        if activity_id is None:
            activity_id = ""
        if not isinstance(activity_id, str):
            return False, "Activity ID must be a string."
        activity_id = activity_id.strip()
        if not activity_id:
            return False, "Activity ID cannot be empty."
        if activity_id in self.activities:
            return False, f"Activity '{activity_id}' already exists."

        try:
            duration = float(duration)
        except (TypeError, ValueError):
            return False, "Duration must be a number."
        if not math.isfinite(duration):
            return False, "Duration must be a finite number."
        if duration < 0:
            return False, "Duration must be non-negative."

        self.activities[activity_id] = Activity(
            id=activity_id,
            duration=duration,
            predecessors=[str(p).strip() for p in predecessors],
        )
        self._invalidate()

        return True, f"Activity '{activity_id}' added successfully."

    def find(self, activity_id: str) -> Optional[Activity]:
        if not isinstance(activity_id, str):
            return None
        return self.activities.get(activity_id.strip())

    def _invalidate(self) -> None:
        # Any structural change may alter the entire schedule.
        self.schedule = Schedule()
        for act in self.activities.values():
            act.reset_calculations()

    # ------------------------------------------------------------------
    # Schedule accessors
    # ------------------------------------------------------------------

    @property
    def project_duration(self) -> float:
        return self.schedule.project_duration

    @property
    def critical_path(self) -> List[str]:
        return list(self.schedule.critical_path)

    @property
    def topological_order(self) -> List[str]:
        return list(self.schedule.topological_order)

    @property
    def is_calculated(self) -> bool:
        return bool(self.schedule.topological_order)

    def get_project_duration(self) -> float:
        return self.schedule.project_duration

    def get_critical_path(self) -> Optional[List[str]]:
        """Return the cached critical path, or None if there is none."""
        if not self.schedule.critical_path:
            return None
        return list(self.schedule.critical_path)

    # ------------------------------------------------------------------
    # Calculation
    # ------------------------------------------------------------------

    def calculate(self) -> Tuple[bool, str]:
        """
        Perform the full CPM calculation.

        On failure the cached schedule is cleared, the error is kept in
        ``last_error`` and ``(False, message)`` is returned.
        """
        self.calculation_log.clear()
        self._log("=" * 70)
        self._log("CPM CALCULATION")
        self._log("=" * 70)

        try:
            schedule = self._run_passes()
        except SchedulingError as exc:
            self.schedule = Schedule()
            self.last_error = exc
            self._log("")
            self._log(f"ERROR: {exc}")
            logger.warning("Calculation failed: %s", exc)
            return False, str(exc)

        self.schedule = schedule
        self.last_error = None

        self._log("")
        self._log("=" * 70)
        self._log("CALCULATION COMPLETE")
        self._log(f"Project Duration: {format_number(schedule.project_duration)}")
        if schedule.critical_path:
            self._log(f"Critical Path: {format_critical_path(schedule.critical_path)}")
        else:
            self._log("Critical Path: (none)")
        self._log("=" * 70)

        return True, "Calculation completed successfully."

    def _run_passes(self) -> Schedule:
        if not self.activities:
            raise EmptyProjectError()

        for act in self.activities.values():
            act.reset_calculations()

        self._build_graph()
        order = self._topological_sort()
        duration = self._forward_pass(order)
        self._backward_pass(order, duration)
        self._calculate_slack()
        path = self._derive_critical_path(order)

        return Schedule(topological_order=order, project_duration=duration, critical_path=path)

    def _log(self, message: str) -> None:
        self.calculation_log.append(message)
        logger.debug(message)

    def _build_graph(self) -> None:
        """Fill successor lists from declared predecessors."""
        for act in self.activities.values():
            act.successors = []

        for act_id, act in self.activities.items():
            for pred_id in act.predecessors:
                pred = self.activities.get(pred_id)
                if pred is None:
                    raise MissingPredecessorError(act_id, pred_id)
                pred.successors.append(act_id)

    def _topological_sort(self) -> List[str]:
        """Kahn's algorithm with a FIFO frontier seeded in registry order."""
        in_degree = {act_id: 0 for act_id in self.activities}
        for act in self.activities.values():
            for succ_id in act.successors:
                in_degree[succ_id] += 1

        queue = deque([act_id for act_id, degree in in_degree.items() if degree == 0])
        order: List[str] = []

        while queue:
            node = queue.popleft()
            order.append(node)
            for succ_id in self.activities[node].successors:
                in_degree[succ_id] -= 1
                if in_degree[succ_id] == 0:
                    queue.append(succ_id)

        if len(order) != len(self.activities):
            raise CircularDependencyError(
                [act_id for act_id, degree in in_degree.items() if degree > 0]
            )

        self._log(f"\nTopological Order: {', '.join(order)}")
        return order

    def _forward_pass(self, order: List[str]) -> float:
        """
        Forward pass calculation to determine Earliest Start (ES) and Earliest Finish (EF).
        """
        self._log("\nFORWARD PASS (Calculating ES and EF)")
        self._log("-" * 50)

        project_duration = 0.0
        for act_id in order:
            act = self.activities[act_id]
            act.es = max((self.activities[p].ef for p in act.predecessors), default=0.0)
            act.ef = act.es + act.duration
            project_duration = max(project_duration, act.ef)

            if act.predecessors:
                self._log(f"{act_id}: ES = max(EF of {', '.join(act.predecessors)}) = {format_number(act.es)}")
            else:
                self._log(f"{act_id}: ES = 0 (no predecessors)")
            self._log(
                f"  EF = ES + Duration = {format_number(act.es)} + {format_number(act.duration)} = {format_number(act.ef)}"
            )

        self._log(f"\nProject Finish = max(all EF values) = {format_number(project_duration)}")
        return project_duration

    def _backward_pass(self, order: List[str], project_duration: float) -> None:
        """
        Backward pass calculation to determine Latest Start (LS) and Latest Finish (LF).
        """
        self._log("\nBACKWARD PASS (Calculating LS and LF)")
        self._log("-" * 50)

        for act_id in reversed(order):
            act = self.activities[act_id]
            if not act.successors:
                act.lf = project_duration
                self._log(f"{act_id}: LF = Project Finish = {format_number(act.lf)}")
            else:
                act.lf = min(self.activities[s].ls for s in act.successors)
                self._log(f"{act_id}: LF = min(LS of {', '.join(act.successors)}) = {format_number(act.lf)}")
            act.ls = act.lf - act.duration
            self._log(
                f"  LS = LF - Duration = {format_number(act.lf)} - {format_number(act.duration)} = {format_number(act.ls)}"
            )

    def _calculate_slack(self) -> None:
        self._log("\nSLACK CALCULATIONS")
        self._log("-" * 50)

        for act_id, act in self.activities.items():
            slack = act.ls - act.es
            # Also turns -0.0 into 0.0.
            if abs(slack) <= self.slack_tolerance:
                slack = 0.0
            act.slack = slack
            act.is_critical = slack == 0.0
            self._log(
                f"{act_id}: Slack = LS - ES = {format_number(act.ls)} - {format_number(act.es)} = {format_number(act.slack)}"
                + (" -> CRITICAL" if act.is_critical else "")
            )

    def _derive_critical_path(self, order: List[str]) -> List[str]:
        """Follow the first zero-slack chain from the first zero-slack source."""
        self._log("\nCRITICAL PATH IDENTIFICATION")
        self._log("-" * 50)

        path: List[str] = []
        for act_id in order:
            act = self.activities[act_id]
            if act.predecessors or act.slack != 0.0:
                continue

            current = act
            path.append(current.id)
            while True:
                nxt = next(
                    (
                        s for s in current.successors
                        if self.activities[s].slack == 0.0
                        and current.ef == self.activities[s].es
                    ),
                    None,
                )
                if nxt is None:
                    break
                path.append(nxt)
                current = self.activities[nxt]
            break

        if path:
            self._log(format_critical_path(path))
        else:
            self._log("No zero-slack start activity found.")
        return path

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data snapshot used as a cache key by the visualizations."""
        return {
            "slack_tolerance": self.slack_tolerance,
            "calculated": self.is_calculated,
            "activities": [
                {"id": act.id, "duration": act.duration, "predecessors": list(act.predecessors)}
                for act in self.activities.values()
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PERTScheduler":
        scheduler = cls(slack_tolerance=data.get("slack_tolerance", 0.0))
        for item in data.get("activities", []):
            scheduler.add_activity(item["id"], item["duration"], item.get("predecessors", []))
        if data.get("calculated"):
            scheduler.calculate()
        return scheduler

    def _ordered_activities(self) -> List[Activity]:
        if self.is_calculated:
            return [self.activities[act_id] for act_id in self.schedule.topological_order]
        return list(self.activities.values())

    def get_results_dataframe(self) -> pd.DataFrame:
        """Get calculation results as a pandas DataFrame."""
        data = []
        calculated = self.is_calculated
        for act in self._ordered_activities():
            data.append(
                {
                    "ID": act.id,
                    "Duration": act.duration,
                    "ES": act.es if calculated else None,
                    "EF": act.ef if calculated else None,
                    "LS": act.ls if calculated else None,
                    "LF": act.lf if calculated else None,
                    "Slack": act.slack if calculated else None,
                    "Predecessors": ",".join(act.predecessors),
                    "Critical": "Yes" if act.is_critical else "No",
                }
            )
        return pd.DataFrame(
            data,
            columns=["ID", "Duration", "ES", "EF", "LS", "LF", "Slack", "Predecessors", "Critical"],
        )

    def get_activities_dataframe(self) -> pd.DataFrame:
        """Get activities list as a pandas DataFrame."""
        data = [
            {
                "ID": act.id,
                "Duration": act.duration,
                "Predecessors": ",".join(act.predecessors),
            }
            for act in self.activities.values()
        ]
        return pd.DataFrame(data, columns=["ID", "Duration", "Predecessors"])
