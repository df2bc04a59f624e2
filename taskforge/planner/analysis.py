"""Heuristic project analysis and post-generation insights.

``analyze_project`` sizes up a task breakdown before any code is generated
(complexity, architecture pattern, stack, risks, recommendations).
``summarize_results`` and ``generation_insights`` report on what the builder
actually produced.
"""

from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel, Field

from taskforge.planner.models import (
    AgentResponse,
    GenerationSource,
    ProjectBrief,
    TaskPriority,
    TaskType,
    TechnicalTask,
)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class ProjectAnalysis(BaseModel):
    """Pre-generation assessment of a task breakdown."""

    complexity: str = Field(..., description="Simple, Moderate, High or Complex")
    architecture: str = Field(..., description="Suggested architecture pattern")
    tech_stack: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    estimated_hours: float = Field(default=0.0, ge=0)

    def render(self) -> str:
        """Plain-text report, one finding per line."""
        return "\n".join(
            [
                f"Project Complexity: {self.complexity}",
                f"Architecture Pattern: {self.architecture}",
                f"Technology Stack: {', '.join(self.tech_stack) or 'To be determined'}",
                f"Risk Factors: {', '.join(self.risks) or 'Low risk project'}",
                f"Recommendations: {', '.join(self.recommendations)}",
                f"Estimated Effort: {self.estimated_hours:g} hours",
            ]
        )


class GenerationInsights(BaseModel):
    """What the builder produced across all tasks."""

    total_tasks: int = 0
    successful: int = 0
    failed: int = 0
    success_rate: int = Field(default=0, description="Percentage, rounded")
    files_generated: int = 0
    remote_tasks: int = 0
    fallback_tasks: int = 0
    improvements: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Pre-generation analysis
# ---------------------------------------------------------------------------

def _mentions(tasks: Sequence[TechnicalTask], word: str) -> bool:
    return any(word in task.title.lower() for task in tasks)


def assess_complexity(tasks: Sequence[TechnicalTask]) -> str:
    total = len(tasks)
    high = sum(1 for t in tasks if t.priority is TaskPriority.HIGH)
    if total <= 3:
        return "Simple"
    if total <= 6:
        return "Moderate"
    if high > total * 0.6:
        return "High"
    return "Complex"


def identify_architecture(tasks: Sequence[TechnicalTask]) -> str:
    has_backend = any(t.type is TaskType.BACKEND for t in tasks)
    has_frontend = any(t.type is TaskType.FRONTEND for t in tasks)
    if _mentions(tasks, "auth") and has_backend and has_frontend:
        return "Full-Stack MVC"
    if has_backend and has_frontend:
        return "Client-Server"
    if has_backend:
        return "API-First"
    return "Component-Based"


def identify_tech_stack(tasks: Sequence[TechnicalTask]) -> list[str]:
    stack: list[str] = []
    if any(t.type is TaskType.FRONTEND for t in tasks):
        stack.append("React+TypeScript")
    if any(t.type is TaskType.BACKEND for t in tasks):
        stack.append("Node.js+Express")
    if _mentions(tasks, "database"):
        stack.append("PostgreSQL")
    if _mentions(tasks, "auth"):
        stack.append("JWT Auth")
    return stack


def identify_risks(brief: ProjectBrief, tasks: Sequence[TechnicalTask]) -> list[str]:
    risks: list[str] = []
    if len(tasks) > 8:
        risks.append("Scope complexity")
    if sum(1 for t in tasks if t.priority is TaskPriority.HIGH) > 4:
        risks.append("High priority overload")
    if brief.timeline and "week" in brief.timeline.lower():
        risks.append("Tight timeline")
    if not _mentions(tasks, "test"):
        risks.append("No testing strategy")
    return risks


def generate_recommendations(tasks: Sequence[TechnicalTask]) -> list[str]:
    recommendations: list[str] = []
    if not _mentions(tasks, "test"):
        recommendations.append("Add testing tasks")
    if not _mentions(tasks, "deploy"):
        recommendations.append("Consider deployment strategy")
    if len(tasks) > 6:
        recommendations.append("Consider MVP approach for initial release")
    recommendations.append("Implement CI/CD pipeline")
    recommendations.append("Add error monitoring and logging")
    return recommendations


def analyze_project(brief: ProjectBrief, tasks: Sequence[TechnicalTask]) -> ProjectAnalysis:
    """Run every heuristic over *tasks* and bundle the findings."""
    return ProjectAnalysis(
        complexity=assess_complexity(tasks),
        architecture=identify_architecture(tasks),
        tech_stack=identify_tech_stack(tasks),
        risks=identify_risks(brief, tasks),
        recommendations=generate_recommendations(tasks),
        estimated_hours=sum(t.estimated_hours or 0 for t in tasks),
    )


# ---------------------------------------------------------------------------
# Post-generation reporting
# ---------------------------------------------------------------------------

def summarize_results(results: Sequence[AgentResponse]) -> str:
    """Aggregate per-task results into the project execution summary.

    Failed tasks are listed by their 1-based position with the original
    error text.
    """
    successful = sum(1 for r in results if r.success)
    failed = len(results) - successful
    files = sum(len(r.files) for r in results)

    lines = [
        "Project Execution Summary:",
        f"- Total tasks: {len(results)}",
        f"- Successful: {successful}",
        f"- Failed: {failed}",
        f"- Files generated: {files}",
    ]
    if failed:
        lines.append("")
        lines.append("Failed tasks:")
        for index, result in enumerate(results, start=1):
            if not result.success:
                lines.append(f"- Task {index}: {result.error}")
    return "\n".join(lines)


def generation_insights(results: Sequence[AgentResponse]) -> GenerationInsights:
    """Success rate, file count and remote/fallback split for a run."""
    total = len(results)
    successful = sum(1 for r in results if r.success)
    return GenerationInsights(
        total_tasks=total,
        successful=successful,
        failed=total - successful,
        success_rate=round(successful / total * 100) if total else 0,
        files_generated=sum(len(r.files) for r in results),
        remote_tasks=sum(1 for r in results if r.source is GenerationSource.REMOTE),
        fallback_tasks=sum(1 for r in results if r.source is GenerationSource.FALLBACK),
        improvements=[
            f"{r.task_title or r.task_id}: {r.error}" for r in results if not r.success
        ],
    )
