"""Prompt generation for remote code generation.

Builds one natural-language prompt per task: the task's title, description
and numbered acceptance criteria, the brief's extra requirements, the
conventions for the target side, and a fixed output-format block that asks
for fenced code blocks headed by a ``File:`` comment.
"""

from __future__ import annotations

import textwrap
from typing import Sequence

from taskforge.planner.models import TaskType, TechnicalTask

_FRONTEND_CONVENTIONS = textwrap.dedent("""\
    - React 18 function components with hooks, written in TypeScript
    - Declare a props interface for every component
    - Validate form input before submitting
    - Handle loading and error states for every request
    - Responsive CSS with mobile breakpoints
    - Accessible markup: labelled inputs, keyboard-reachable controls
    - Components in src/components/, styles in src/styles/, types in src/types/
    """)

_BACKEND_CONVENTIONS = textwrap.dedent("""\
    - Node.js with Express, written in TypeScript
    - Typed request/response handlers
    - Validate all request input
    - try/catch in every async handler, with proper HTTP status codes
    - Authentication middleware on protected routes
    - REST conventions for routes and verbs
    - Controllers in src/controllers/, models in src/models/, routes in src/routes/,
      middleware in src/middleware/
    """)

_FRONTEND_FORMAT = textwrap.dedent("""\
    ```typescript
    // File: src/components/ComponentName.tsx
    [component code here]
    ```

    ```css
    /* File: src/styles/ComponentName.css */
    [css code here]
    ```
    """)

_BACKEND_FORMAT = textwrap.dedent("""\
    ```typescript
    // File: src/controllers/ControllerName.ts
    [controller code here]
    ```

    ```typescript
    // File: src/models/ModelName.ts
    [model code here]
    ```
    """)

_HEADLINES = {
    TaskType.FRONTEND: "Generate React TypeScript components for this task:",
    TaskType.BACKEND: "Generate Node.js/Express backend code for this task:",
}


def _numbered(items: Sequence[str]) -> str:
    if not items:
        return "  (none specified)"
    return "\n".join(f"  {index}. {item}" for index, item in enumerate(items, start=1))


class PromptGenerator:
    """Renders task prompts for the frontend and backend generators."""

    def __init__(self, requirements: Sequence[str] = (), constraints: Sequence[str] = ()) -> None:
        self.requirements = list(requirements)
        self.constraints = list(constraints)

    def generate(self, task: TechnicalTask) -> str:
        """Return the full prompt for *task*.

        Raises:
            ValueError: If the task type has no prompt (only frontend and
                backend tasks are generated).
        """
        if task.type not in _HEADLINES:
            raise ValueError(f"No prompt for task type: {task.type}")

        is_frontend = task.type is TaskType.FRONTEND
        conventions = _FRONTEND_CONVENTIONS if is_frontend else _BACKEND_CONVENTIONS
        output_format = _FRONTEND_FORMAT if is_frontend else _BACKEND_FORMAT

        sections = [
            _HEADLINES[task.type],
            "",
            f"TASK: {task.title}",
            f"DESCRIPTION: {task.description}",
            "ACCEPTANCE CRITERIA:",
            _numbered(task.acceptance_criteria),
        ]
        if self.requirements:
            sections += ["", "PROJECT REQUIREMENTS:", _numbered(self.requirements)]
        if self.constraints:
            sections += ["", "CONSTRAINTS:", _numbered(self.constraints)]
        sections += [
            "",
            "REQUIREMENTS:",
            conventions.rstrip(),
            "",
            "Write idiomatic, fully typed, production-quality code. No placeholders.",
            "",
            "OUTPUT FORMAT:",
            "Put every file in its own fenced code block. The first line inside the",
            "block must be a comment naming the file path relative to the project root:",
            "",
            output_format.rstrip(),
            "",
            "Generate 2-4 related files that implement the task requirements.",
        ]
        return "\n".join(sections) + "\n"
