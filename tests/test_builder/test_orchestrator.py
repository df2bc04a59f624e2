"""Unit tests for GenerationOrchestrator (taskforge.builder.orchestrator).

Tests cover:
- format_output (files, source line, fallback reason, explanation)
- Task validation failures returned as responses
- Successful responses carrying files, ids and source
- Prompt wiring into the strategy
- from_config
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from taskforge.builder.orchestrator import GenerationOrchestrator, format_output
from taskforge.builder.prompt_gen import PromptGenerator
from taskforge.builder.strategies import (
    GenerationOutcome,
    RemoteGenerationStrategy,
    TemplateGenerationStrategy,
)
from taskforge.errors import NetworkError, TaskValidationError, UnsupportedTaskType
from taskforge.planner.models import FileType, GenerationSource


def _strategy(outcome: GenerationOutcome | None = None) -> MagicMock:
    strategy = MagicMock()
    strategy.generate = AsyncMock(return_value=outcome or GenerationOutcome())
    return strategy


class TestFormatOutput:
    @pytest.mark.unit
    def test_lists_files(self, backend_task, make_file):
        files = [
            make_file("src/routes/taskRoutes.ts", file_type=FileType.API),
            make_file("src/models/Task.ts", file_type=FileType.SCHEMA),
        ]
        outcome = GenerationOutcome(files=files, source=GenerationSource.FALLBACK)
        assert format_output(backend_task, outcome).splitlines() == [
            "Backend Agent - Task Completed: Implement Task Management API",
            "",
            "Generated 2 files:",
            "- src/routes/taskRoutes.ts (api)",
            "- src/models/Task.ts (schema)",
            "",
            "Source: 2 files via fallback",
        ]

    @pytest.mark.unit
    def test_fallback_reason(self, frontend_task, make_file):
        outcome = GenerationOutcome(
            files=[make_file("src/components/auth/LoginForm.tsx", file_type=FileType.COMPONENT)],
            source=GenerationSource.FALLBACK,
            fallback_reason="NetworkError: connection refused",
        )
        assert format_output(frontend_task, outcome).endswith(
            "\nSource: 1 files via fallback (fallback: NetworkError: connection refused)"
        )

    @pytest.mark.unit
    def test_explanation(self, frontend_task, make_file):
        outcome = GenerationOutcome(
            files=[make_file("src/components/LoginForm.tsx", file_type=FileType.COMPONENT)],
            source=GenerationSource.REMOTE,
            explanation="Here is the login form implementation.",
        )
        assert format_output(frontend_task, outcome).splitlines()[-4:] == [
            "Source: 1 files via remote",
            "",
            "Explanation:",
            "Here is the login form implementation.",
        ]


class TestValidation:
    @pytest.mark.unit
    def test_valid(self, frontend_task):
        GenerationOrchestrator.validate(frontend_task)

    @pytest.mark.unit
    def test_missing_title(self, frontend_task):
        with pytest.raises(TaskValidationError, match="Invalid task provided"):
            GenerationOrchestrator.validate(frontend_task.model_copy(update={"title": ""}))

    @pytest.mark.unit
    def test_general(self, general_task):
        with pytest.raises(UnsupportedTaskType, match="Unknown task type: general"):
            GenerationOrchestrator.validate(general_task)


class TestGenerate:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_task_response(self, frontend_task):
        strategy = _strategy()
        task = frontend_task.model_copy(update={"type": None})

        response = await GenerationOrchestrator(strategy).generate(task)

        assert response.success is False
        assert response.error == "Invalid task provided"
        assert response.task_id == "task_fe"
        strategy.generate.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_general_task_response(self, general_task):
        response = await GenerationOrchestrator(_strategy()).generate(general_task)
        assert response.success is False
        assert response.error == "Unknown task type: general"
        assert response.files == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_template_success(self, frontend_task):
        response = await GenerationOrchestrator(TemplateGenerationStrategy()).generate(frontend_task)

        assert response.success is True
        assert response.error is None
        assert response.task_id == "task_fe"
        assert response.task_title == "Create Authentication UI"
        assert response.source is GenerationSource.FALLBACK
        assert len(response.files) == 3
        assert response.output.startswith("Frontend Agent - Task Completed: Create Authentication UI")
        assert "- src/components/auth/LoginForm.tsx (component)" in response.output

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_prompt_passed_to_strategy(self, backend_task, make_file):
        strategy = _strategy(
            GenerationOutcome(files=[make_file("src/a.ts")], source=GenerationSource.REMOTE)
        )
        orchestrator = GenerationOrchestrator(
            strategy, PromptGenerator(requirements=["Use PostgreSQL"])
        )

        response = await orchestrator.generate(backend_task)

        task_arg, prompt_arg = strategy.generate.await_args.args
        assert task_arg is backend_task
        assert "TASK: Implement Task Management API" in prompt_arg
        assert "1. Use PostgreSQL" in prompt_arg
        assert response.source is GenerationSource.REMOTE
        assert [f.path for f in response.files] == ["src/a.ts"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_remote_output_carries_explanation(self, frontend_task, sample_model_output):
        client = MagicMock()
        client.generate = AsyncMock(return_value=sample_model_output)
        orchestrator = GenerationOrchestrator(RemoteGenerationStrategy(client))

        response = await orchestrator.generate(frontend_task)

        assert response.source is GenerationSource.REMOTE
        assert "\nSource: 3 files via remote\n" in response.output
        assert "\nExplanation:\nHere is the login form implementation." in response.output

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fallback_output_carries_reason(self, frontend_task):
        client = MagicMock()
        client.generate = AsyncMock(side_effect=NetworkError("connection refused"))
        orchestrator = GenerationOrchestrator(RemoteGenerationStrategy(client))

        response = await orchestrator.generate(frontend_task)

        assert response.success is True
        assert response.output.endswith(
            "Source: 3 files via fallback (fallback: NetworkError: connection refused)"
        )
        assert "Explanation:" not in response.output


class TestFromConfig:
    @pytest.mark.unit
    def test_fallback(self, fallback_config):
        orchestrator = GenerationOrchestrator.from_config(fallback_config)
        assert isinstance(orchestrator.strategy, TemplateGenerationStrategy)
        assert isinstance(orchestrator.prompt_generator, PromptGenerator)

    @pytest.mark.unit
    def test_remote(self, remote_config):
        prompts = PromptGenerator()
        orchestrator = GenerationOrchestrator.from_config(remote_config, prompts)
        assert isinstance(orchestrator.strategy, RemoteGenerationStrategy)
        assert orchestrator.prompt_generator is prompts
