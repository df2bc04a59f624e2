"""Render a phase-ordered execution plan for a list of tasks.

Backend work is listed first (Phase 1) because the frontend consumes its API;
frontend work follows (Phase 2).  General tasks are not listed under either
phase but are included in the total.
"""

from __future__ import annotations

from typing import Sequence

from taskforge.planner.models import TaskType, TechnicalTask


class ExecutionPlanner:
    """Purely presentational: no side effects, deterministic for a given order."""

    def plan(self, tasks: Sequence[TechnicalTask], detailed: bool = False) -> str:
        """Render *tasks* as plain text.

        Both phase headings are always present, even when empty.

        Args:
            tasks: Tasks in breakdown order.
            detailed: Also show priority and estimated hours per task and a
                total-hours line.
        """
        backend = [t for t in tasks if t.type is TaskType.BACKEND]
        frontend = [t for t in tasks if t.type is TaskType.FRONTEND]

        lines = ["Execution Plan:", ""]
        lines.extend(self._phase(1, "Backend Development", backend, detailed))
        lines.append("")
        lines.extend(self._phase(2, "Frontend Development", frontend, detailed))
        lines.append("")
        lines.append(f"Total estimated tasks: {len(tasks)}")

        if detailed:
            hours = sum(t.estimated_hours or 0 for t in tasks)
            lines.append(f"Total estimated hours: {hours:g}")

        return "\n".join(lines)

    @staticmethod
    def _phase(
        number: int, label: str, tasks: list[TechnicalTask], detailed: bool
    ) -> list[str]:
        lines = [f"Phase {number} - {label} ({len(tasks)} tasks):"]
        for index, task in enumerate(tasks, start=1):
            if detailed:
                hours = f", {task.estimated_hours:g}h" if task.estimated_hours is not None else ""
                lines.append(f"  {index}. {task.title} [{task.priority.value} priority{hours}]")
            else:
                lines.append(f"  {index}. {task.title}")
        return lines
