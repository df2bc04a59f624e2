"""Offline file sets used when remote generation is unavailable.

Each side keeps an ordered table of ``Blueprint`` entries.  A task picks up
every blueprint whose keywords appear in its lowercased title; when none
match, the side's generic scaffold is used so a task never comes back empty.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from taskforge.builder.blueprints import backend, frontend
from taskforge.planner.models import GeneratedFile, TaskType, TechnicalTask

BlueprintBuilder = Callable[[TechnicalTask], list[GeneratedFile]]


@dataclass(frozen=True)
class Blueprint:
    """A named file set triggered by keywords in a task title."""

    name: str
    keywords: tuple[str, ...]
    build: BlueprintBuilder

    def matches(self, title: str) -> bool:
        lowered = title.lower()
        return any(keyword in lowered for keyword in self.keywords)


FRONTEND_BLUEPRINTS: tuple[Blueprint, ...] = (
    Blueprint("auth", ("auth", "login"), frontend.auth_components),
    Blueprint("tasks", ("task", "todo"), frontend.task_components),
    Blueprint("sharing", ("shar",), frontend.sharing_components),
)

BACKEND_BLUEPRINTS: tuple[Blueprint, ...] = (
    Blueprint("auth", ("auth", "user"), backend.auth_files),
    Blueprint("tasks", ("task", "todo"), backend.task_files),
    Blueprint("sharing", ("shar",), backend.sharing_files),
    Blueprint("api-foundation", ("api", "foundation"), backend.api_foundation_files),
    Blueprint("database", ("database", "schema"), backend.database_files),
)

_TABLES: dict[TaskType, tuple[tuple[Blueprint, ...], BlueprintBuilder]] = {
    TaskType.FRONTEND: (FRONTEND_BLUEPRINTS, frontend.generic_component),
    TaskType.BACKEND: (BACKEND_BLUEPRINTS, backend.generic_files),
}


def matching_blueprints(task: TechnicalTask) -> list[Blueprint]:
    """Blueprints whose keywords appear in the task title, in table order."""
    if task.type not in _TABLES:
        return []
    table, _ = _TABLES[task.type]
    return [blueprint for blueprint in table if blueprint.matches(task.title)]


def blueprint_files(task: TechnicalTask) -> list[GeneratedFile]:
    """Build the offline file set for *task*.

    Files from several matching blueprints are concatenated; a path produced
    twice keeps its first occurrence.

    Raises:
        ValueError: If the task type has no blueprints.
    """
    if task.type not in _TABLES:
        raise ValueError(f"No blueprints for task type: {task.type}")

    _, generic = _TABLES[task.type]
    builders = [blueprint.build for blueprint in matching_blueprints(task)] or [generic]

    files: list[GeneratedFile] = []
    seen: set[str] = set()
    for build in builders:
        for file in build(task):
            if file.path in seen:
                continue
            seen.add(file.path)
            files.append(file)
    return files


__all__ = [
    "Blueprint",
    "FRONTEND_BLUEPRINTS",
    "BACKEND_BLUEPRINTS",
    "matching_blueprints",
    "blueprint_files",
]
