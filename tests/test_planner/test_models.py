"""Unit tests for the shared Pydantic models (taskforge.planner.models).

Tests cover:
- ProjectBrief description validation
- TechnicalTask aliases and is_valid
- AgentResponse success/error consistency and failure()
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from taskforge.planner.models import (
    AgentResponse,
    FileType,
    GeneratedFile,
    GenerationSource,
    ProjectBrief,
    TaskType,
    TechnicalTask,
)


class TestProjectBrief:
    @pytest.mark.unit
    def test_minimal(self):
        brief = ProjectBrief(description="Build a todo app")
        assert brief.requirements == []
        assert brief.constraints == []
        assert brief.timeline is None

    @pytest.mark.unit
    @pytest.mark.parametrize("description", ["", "   \n"])
    def test_blank_description(self, description):
        with pytest.raises(ValidationError, match="Description is required"):
            ProjectBrief(description=description)

    @pytest.mark.unit
    def test_missing_description(self):
        with pytest.raises(ValidationError):
            ProjectBrief()


class TestTechnicalTask:
    @pytest.mark.unit
    def test_aliases(self):
        task = TechnicalTask.model_validate(
            {
                "id": "t",
                "title": "T",
                "description": "D",
                "type": "backend",
                "estimatedHours": 3,
                "acceptanceCriteria": ["a"],
            }
        )
        assert task.type is TaskType.BACKEND
        assert task.estimated_hours == 3
        dumped = task.model_dump(by_alias=True, mode="json")
        assert dumped["acceptanceCriteria"] == ["a"]
        assert dumped["priority"] == "medium"

    @pytest.mark.unit
    def test_is_valid(self, frontend_task):
        assert frontend_task.is_valid

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "overrides",
        [{"title": ""}, {"description": "  "}, {"type": None}],
    )
    def test_is_invalid(self, frontend_task, overrides):
        assert not frontend_task.model_copy(update=overrides).is_valid


class TestGeneratedFile:
    @pytest.mark.unit
    def test_defaults(self):
        generated = GeneratedFile(path="src/a.ts")
        assert generated.content == ""
        assert generated.type is FileType.OTHER
        assert generated.origin is None


class TestAgentResponse:
    @pytest.mark.unit
    def test_success_with_error_rejected(self):
        with pytest.raises(ValidationError):
            AgentResponse(success=True, error="boom")

    @pytest.mark.unit
    def test_failure_without_error_rejected(self):
        with pytest.raises(ValidationError):
            AgentResponse(success=False)

    @pytest.mark.unit
    def test_failure_factory(self, backend_task):
        response = AgentResponse.failure("boom", backend_task)
        assert response.success is False
        assert response.error == "boom"
        assert response.task_id == "task_be"
        assert response.task_title == "Implement Task Management API"
        assert response.source is GenerationSource.NONE
        assert response.files == []

    @pytest.mark.unit
    def test_failure_without_task(self):
        assert AgentResponse.failure("Invalid task provided").task_id == ""

    @pytest.mark.unit
    def test_camel_case_dump(self):
        dumped = AgentResponse(success=True, task_id="x", task_title="y").model_dump(
            by_alias=True
        )
        assert dumped["taskId"] == "x"
        assert dumped["taskTitle"] == "y"
