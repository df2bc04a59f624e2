"""Shared pytest fixtures for the taskforge test suite.

Provides reusable fixtures for:
- Temporary output directories
- Deterministic task breakdown (sequential ids)
- Sample briefs and technical tasks
- Fallback and remote configurations
- Mocked Gemini responses and httpx clients
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from taskforge.config import Config, GeminiConfig, GenerationConfig, GenerationMode
from taskforge.planner.breakdown import SequentialIdGenerator, TaskBreakdownEngine
from taskforge.planner.models import (
    FileType,
    GeneratedFile,
    ProjectBrief,
    TaskPriority,
    TaskType,
    TechnicalTask,
)


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary directory for generated projects (auto-cleanup)."""
    project_dir = tmp_path / "test-project"
    project_dir.mkdir()
    yield project_dir


# ---------------------------------------------------------------------------
# Briefs & Tasks
# ---------------------------------------------------------------------------

TODO_BRIEF = "Build a todo app with user authentication and task management"


@pytest.fixture
def todo_brief() -> ProjectBrief:
    return ProjectBrief(description=TODO_BRIEF)


@pytest.fixture
def engine() -> TaskBreakdownEngine:
    """Breakdown engine with deterministic ``task_1, task_2, ...`` ids."""
    return TaskBreakdownEngine(id_generator=SequentialIdGenerator())


@pytest.fixture
def frontend_task() -> TechnicalTask:
    return TechnicalTask(
        id="task_fe",
        title="Create Authentication UI",
        description="Build login and registration forms",
        type=TaskType.FRONTEND,
        priority=TaskPriority.HIGH,
        estimated_hours=6,
        acceptance_criteria=["Login form", "Registration form", "Form validation"],
    )


@pytest.fixture
def backend_task() -> TechnicalTask:
    return TechnicalTask(
        id="task_be",
        title="Implement Task Management API",
        description="Create CRUD operations for tasks",
        type=TaskType.BACKEND,
        priority=TaskPriority.HIGH,
        estimated_hours=8,
        acceptance_criteria=["Create task endpoint", "List tasks endpoint"],
    )


@pytest.fixture
def general_task() -> TechnicalTask:
    return TechnicalTask(
        id="task_gen",
        title="Write project documentation",
        description="Document the architecture",
        type=TaskType.GENERAL,
    )


@pytest.fixture
def make_file() -> Callable[..., GeneratedFile]:
    """Shorthand factory for ``GeneratedFile`` instances."""

    def _factory(
        path: str,
        content: str = "export const x = 1;\n",
        file_type: FileType = FileType.OTHER,
        origin: TaskType | None = None,
    ) -> GeneratedFile:
        return GeneratedFile(path=path, content=content, type=file_type, origin=origin)

    return _factory


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def fallback_config(tmp_project_dir: Path) -> Config:
    """Template-only configuration writing into a temp directory."""
    return Config(
        output_dir=tmp_project_dir,
        generation=GenerationConfig(mode=GenerationMode.FALLBACK),
    )


@pytest.fixture
def remote_config(tmp_project_dir: Path) -> Config:
    """Remote configuration with a dummy API key."""
    return Config(
        output_dir=tmp_project_dir,
        gemini=GeminiConfig(api_key="test-key"),
        generation=GenerationConfig(mode=GenerationMode.REMOTE, request_timeout=5),
    )


# ---------------------------------------------------------------------------
# Model output
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_model_output() -> str:
    """Realistic model output: prose plus two named fenced blocks."""
    return textwrap.dedent("""\
        Here is the login form implementation.

        ```typescript
        // File: src/components/LoginForm.tsx
        export default function LoginForm() {
          return <form><input name="email" /></form>;
        }
        ```

        And its styles:

        ```css
        /* File: src/styles/LoginForm.css */
        .login-form { display: flex; }
        ```

        Let me know if you need anything else.
        """)


@pytest.fixture
def gemini_payload() -> Callable[[str], dict[str, Any]]:
    """Factory for a ``generateContent`` response body carrying the given text."""

    def _factory(text: str) -> dict[str, Any]:
        return {
            "candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}],
            "usageMetadata": {"promptTokenCount": 12, "candidatesTokenCount": 34},
        }

    return _factory


@pytest.fixture
def mock_httpx_client() -> Callable[..., AsyncMock]:
    """Factory for an ``httpx.AsyncClient`` stand-in usable as an async context manager.

    Call with ``json_body=`` for a successful response or ``side_effect=`` to
    make ``post`` raise.
    """

    def _factory(json_body: dict[str, Any] | None = None, side_effect: Exception | None = None) -> AsyncMock:
        mock_response = MagicMock()
        mock_response.json.return_value = json_body or {}
        mock_response.raise_for_status = MagicMock()

        mock_client = AsyncMock()
        if side_effect is not None:
            mock_client.post = AsyncMock(side_effect=side_effect)
        else:
            mock_client.post = AsyncMock(return_value=mock_response)
        mock_client.__aenter__ = AsyncMock(return_value=mock_client)
        mock_client.__aexit__ = AsyncMock(return_value=False)
        return mock_client

    return _factory
