"""Rule-based breakdown of a project brief into technical tasks.

The engine lower-cases the brief's description and walks an ordered table of
topic rules.  Every rule whose keywords appear (as plain substrings) appends
its prewritten task templates.  Rules are independent: a description can hit
several topics, and one that hits none yields no tasks.

Matching has no negation awareness, so "no database needed" still produces
the schema task.
"""

from __future__ import annotations

import itertools
import secrets
import string
import time
from dataclasses import dataclass, field
from typing import Protocol, Sequence

from taskforge.planner.models import ProjectBrief, TaskPriority, TaskType, TechnicalTask


# ---------------------------------------------------------------------------
# Task id generation
# ---------------------------------------------------------------------------

class IdGenerator(Protocol):
    """Source of unique task identifiers."""

    def next(self) -> str: ...


_BASE36 = string.digits + string.ascii_lowercase


class TimestampIdGenerator:
    """``task_<epoch-ms>_<9 random base36 chars>``, unique within the process."""

    def __init__(self, prefix: str = "task") -> None:
        self.prefix = prefix
        self._issued: set[str] = set()

    def next(self) -> str:
        while True:
            suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
            candidate = f"{self.prefix}_{int(time.time() * 1000)}_{suffix}"
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate


class SequentialIdGenerator:
    """``task_1``, ``task_2``, ...  Deterministic, for tests and reproducible runs."""

    def __init__(self, prefix: str = "task", start: int = 1) -> None:
        self.prefix = prefix
        self._counter = itertools.count(start)

    def next(self) -> str:
        return f"{self.prefix}_{next(self._counter)}"


# ---------------------------------------------------------------------------
# Topic table
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TaskTemplate:
    """Prewritten content for one task appended by a topic rule."""

    title: str
    description: str
    type: TaskType
    priority: TaskPriority
    estimated_hours: float
    acceptance_criteria: tuple[str, ...]

    def instantiate(self, task_id: str) -> TechnicalTask:
        return TechnicalTask(
            id=task_id,
            title=self.title,
            description=self.description,
            type=self.type,
            priority=self.priority,
            estimated_hours=self.estimated_hours,
            acceptance_criteria=list(self.acceptance_criteria),
        )


@dataclass(frozen=True)
class TopicRule:
    """A keyword predicate paired with the tasks it contributes."""

    name: str
    keywords: tuple[str, ...]
    templates: tuple[TaskTemplate, ...] = field(default_factory=tuple)

    def matches(self, text: str) -> bool:
        """Substring match against already lower-cased *text*."""
        return any(keyword in text for keyword in self.keywords)


TOPIC_RULES: tuple[TopicRule, ...] = (
    TopicRule(
        name="authentication",
        keywords=("auth", "login", "user"),
        templates=(
            TaskTemplate(
                title="Implement User Authentication",
                description="Create user registration, login, and authentication system",
                type=TaskType.BACKEND,
                priority=TaskPriority.HIGH,
                estimated_hours=8,
                acceptance_criteria=(
                    "User registration endpoint",
                    "User login endpoint",
                    "JWT token generation",
                    "Password hashing",
                    "Authentication middleware",
                ),
            ),
            TaskTemplate(
                title="Create Authentication UI",
                description="Build login and registration forms",
                type=TaskType.FRONTEND,
                priority=TaskPriority.HIGH,
                estimated_hours=6,
                acceptance_criteria=(
                    "Login form component",
                    "Registration form component",
                    "Form validation",
                    "Error handling",
                    "Responsive design",
                ),
            ),
        ),
    ),
    TopicRule(
        name="task-management",
        keywords=("task", "todo", "management"),
        templates=(
            TaskTemplate(
                title="Implement Task Management API",
                description="Create CRUD operations for task management",
                type=TaskType.BACKEND,
                priority=TaskPriority.HIGH,
                estimated_hours=8,
                acceptance_criteria=(
                    "Create task endpoint",
                    "Read tasks endpoint",
                    "Update task endpoint",
                    "Delete task endpoint",
                    "Task model/schema",
                ),
            ),
            TaskTemplate(
                title="Build Task Management UI",
                description="Create components for task CRUD operations",
                type=TaskType.FRONTEND,
                priority=TaskPriority.HIGH,
                estimated_hours=10,
                acceptance_criteria=(
                    "Task list component",
                    "Task creation form",
                    "Task editing functionality",
                    "Task deletion",
                    "Task status updates",
                ),
            ),
        ),
    ),
    TopicRule(
        name="sharing",
        keywords=("shar", "collaborat"),
        templates=(
            TaskTemplate(
                title="Implement Task Sharing",
                description="Allow users to share tasks with other users",
                type=TaskType.BACKEND,
                priority=TaskPriority.MEDIUM,
                estimated_hours=6,
                acceptance_criteria=(
                    "Share task endpoint",
                    "User permissions system",
                    "Shared task visibility",
                    "Notification system",
                ),
            ),
            TaskTemplate(
                title="Create Sharing UI",
                description="Build interface for sharing tasks",
                type=TaskType.FRONTEND,
                priority=TaskPriority.MEDIUM,
                estimated_hours=5,
                acceptance_criteria=(
                    "Share task modal",
                    "User search/selection",
                    "Permission settings",
                    "Shared task indicators",
                ),
            ),
        ),
    ),
    TopicRule(
        name="api-foundation",
        keywords=("api", "rest", "graphql"),
        templates=(
            TaskTemplate(
                title="Setup API Foundation",
                description="Create basic API structure and middleware",
                type=TaskType.BACKEND,
                priority=TaskPriority.HIGH,
                estimated_hours=4,
                acceptance_criteria=(
                    "Express/Fastify server setup",
                    "Middleware configuration",
                    "Error handling",
                    "Request validation",
                    "API documentation",
                ),
            ),
        ),
    ),
    TopicRule(
        name="database",
        keywords=("database", "data"),
        templates=(
            TaskTemplate(
                title="Design Database Schema",
                description="Create optimized database schema",
                type=TaskType.BACKEND,
                priority=TaskPriority.HIGH,
                estimated_hours=5,
                acceptance_criteria=(
                    "Database schema design",
                    "Relationship definitions",
                    "Indexing strategy",
                    "Migration scripts",
                    "Seed data",
                ),
            ),
        ),
    ),
)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class TaskBreakdownEngine:
    """Turns a ``ProjectBrief`` into an ordered list of ``TechnicalTask``."""

    def __init__(
        self,
        id_generator: IdGenerator | None = None,
        rules: Sequence[TopicRule] = TOPIC_RULES,
    ) -> None:
        self.id_generator = id_generator or TimestampIdGenerator()
        self.rules = tuple(rules)

    def matched_topics(self, brief: ProjectBrief) -> list[str]:
        """Names of the rules that fire for *brief*, in table order."""
        text = brief.description.lower()
        return [rule.name for rule in self.rules if rule.matches(text)]

    def breakdown(self, brief: ProjectBrief) -> list[TechnicalTask]:
        """Return the tasks for every matching topic, in table order.

        Within a topic the backend task precedes the frontend one.
        """
        text = brief.description.lower()
        tasks: list[TechnicalTask] = []
        for rule in self.rules:
            if not rule.matches(text):
                continue
            for template in rule.templates:
                tasks.append(template.instantiate(self.id_generator.next()))
        return tasks
