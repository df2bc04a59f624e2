"""taskforge planner.

Turns a free-text brief into typed technical tasks, renders the execution
plan, and analyses the breakdown.

Usage::

    from taskforge.planner import TaskBreakdownEngine, ExecutionPlanner, ProjectBrief

    tasks = TaskBreakdownEngine().breakdown(ProjectBrief(description="Build a todo app"))
    print(ExecutionPlanner().plan(tasks))
"""

from taskforge.planner.analysis import ProjectAnalysis, analyze_project, summarize_results
from taskforge.planner.breakdown import (
    IdGenerator,
    SequentialIdGenerator,
    TaskBreakdownEngine,
    TimestampIdGenerator,
)
from taskforge.planner.execution_plan import ExecutionPlanner
from taskforge.planner.models import (
    AgentResponse,
    FileType,
    GeneratedFile,
    ProjectBrief,
    TaskPriority,
    TaskType,
    TechnicalTask,
)

__all__ = [
    "TaskBreakdownEngine",
    "IdGenerator",
    "TimestampIdGenerator",
    "SequentialIdGenerator",
    "ExecutionPlanner",
    "ProjectAnalysis",
    "analyze_project",
    "summarize_results",
    "ProjectBrief",
    "TechnicalTask",
    "TaskType",
    "TaskPriority",
    "GeneratedFile",
    "FileType",
    "AgentResponse",
]
