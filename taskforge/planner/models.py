"""Pydantic v2 models shared by the planner, builder and scaffolder.

Defines the brief that enters the pipeline, the technical tasks it is broken
into, and the generated files and per-task responses that flow out of the
builder.  Serialised forms use camelCase aliases so results can be handed
straight to a JSON API.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class TaskType(str, Enum):
    """Which side of the generated project a task targets."""
    FRONTEND = "frontend"
    BACKEND = "backend"
    GENERAL = "general"


class TaskPriority(str, Enum):
    """Relative urgency of a task."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FileType(str, Enum):
    """Coarse classification of a generated file."""
    COMPONENT = "component"
    API = "api"
    SCHEMA = "schema"
    CONFIG = "config"
    OTHER = "other"


class GenerationSource(str, Enum):
    """Where a task's files came from."""
    REMOTE = "remote"
    FALLBACK = "fallback"
    NONE = "none"


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

class ProjectBrief(BaseModel):
    """The natural-language description of the project to build."""
    model_config = ConfigDict(frozen=True)

    description: str = Field(..., description="Free-text project description")
    requirements: list[str] = Field(default_factory=list, description="Extra requirements")
    constraints: list[str] = Field(default_factory=list, description="Constraints to respect")
    timeline: Optional[str] = Field(default=None, description="Delivery timeline, e.g. '2 weeks'")

    @field_validator("description")
    @classmethod
    def _description_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Description is required")
        return value


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

class TechnicalTask(BaseModel):
    """One discrete unit of work the pipeline generates code for."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="Unique task identifier")
    title: str = Field(default="", description="Short task title")
    description: str = Field(default="", description="What the task delivers")
    type: Optional[TaskType] = Field(default=None, description="Target side of the project")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    estimated_hours: Optional[float] = Field(default=None, ge=0, alias="estimatedHours")
    dependencies: list[str] = Field(default_factory=list)
    acceptance_criteria: list[str] = Field(default_factory=list, alias="acceptanceCriteria")

    @property
    def is_valid(self) -> bool:
        """A task may only be generated when title, description and type are set."""
        return bool(self.title.strip() and self.description.strip() and self.type)


# ---------------------------------------------------------------------------
# Generation output
# ---------------------------------------------------------------------------

class GeneratedFile(BaseModel):
    """A single source file produced for a task."""
    path: str = Field(..., description="Relative, forward-slash separated path")
    content: str = Field(default="")
    type: FileType = Field(default=FileType.OTHER)
    origin: Optional[TaskType] = Field(
        default=None, description="Type of the task that produced this file"
    )


class AgentResponse(BaseModel):
    """Terminal result of generating one task."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    output: str = Field(default="", description="Human-readable summary")
    files: list[GeneratedFile] = Field(default_factory=list)
    error: Optional[str] = Field(default=None)
    task_id: str = Field(default="", alias="taskId")
    task_title: str = Field(default="", alias="taskTitle")
    source: GenerationSource = Field(default=GenerationSource.NONE)

    @model_validator(mode="after")
    def _error_iff_failed(self) -> "AgentResponse":
        if self.success and self.error is not None:
            raise ValueError("A successful response cannot carry an error")
        if not self.success and not self.error:
            raise ValueError("A failed response must carry an error")
        return self

    @classmethod
    def failure(cls, error: str, task: TechnicalTask | None = None) -> "AgentResponse":
        """Build a failed response for *task*."""
        return cls(
            success=False,
            error=error,
            task_id=task.id if task else "",
            task_title=task.title if task else "",
        )
