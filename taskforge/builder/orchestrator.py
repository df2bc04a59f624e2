"""Per-task code generation.

``GenerationOrchestrator`` validates a task, builds its prompt, and hands
both to whichever ``GenerationStrategy`` it was constructed with.  Every
outcome, good or bad, comes back as an ``AgentResponse``; nothing raises out
of ``generate``.
"""

from __future__ import annotations

from taskforge.builder.prompt_gen import PromptGenerator
from taskforge.builder.strategies import GenerationOutcome, GenerationStrategy, build_strategy
from taskforge.config import Config
from taskforge.errors import TaskValidationError, UnsupportedTaskType
from taskforge.planner.models import AgentResponse, TaskType, TechnicalTask

_AGENT_NAMES = {
    TaskType.FRONTEND: "Frontend Agent",
    TaskType.BACKEND: "Backend Agent",
}


def format_output(task: TechnicalTask, outcome: GenerationOutcome) -> str:
    """Human-readable completion summary.

    Lists every file, then how the files were produced (including any
    fallback reason) and the model's explanation when there is one.
    """
    lines = [
        f"{_AGENT_NAMES[task.type]} - Task Completed: {task.title}",
        "",
        f"Generated {len(outcome.files)} files:",
    ]
    lines.extend(f"- {f.path} ({f.type.value})" for f in outcome.files)
    lines += ["", f"Source: {outcome.summary()}"]
    if outcome.explanation:
        lines += ["", "Explanation:", outcome.explanation]
    return "\n".join(lines)


class GenerationOrchestrator:
    """Produces an ``AgentResponse`` for each task.

    The orchestrator does not know whether its strategy calls a model or
    renders templates.
    """

    def __init__(
        self,
        strategy: GenerationStrategy,
        prompt_generator: PromptGenerator | None = None,
    ) -> None:
        self.strategy = strategy
        self.prompt_generator = prompt_generator or PromptGenerator()

    @classmethod
    def from_config(
        cls, config: Config, prompt_generator: PromptGenerator | None = None
    ) -> "GenerationOrchestrator":
        return cls(build_strategy(config), prompt_generator)

    @staticmethod
    def validate(task: TechnicalTask) -> None:
        """Raise if *task* cannot be generated.

        Raises:
            TaskValidationError: Title, description or type is missing.
            UnsupportedTaskType: The type has no generator.
        """
        if not task.is_valid:
            raise TaskValidationError("Invalid task provided")
        if task.type not in _AGENT_NAMES:
            raise UnsupportedTaskType(task.type.value)

    async def generate(self, task: TechnicalTask) -> AgentResponse:
        try:
            self.validate(task)
        except (TaskValidationError, UnsupportedTaskType) as exc:
            return AgentResponse.failure(str(exc), task)

        prompt = self.prompt_generator.generate(task)
        outcome = await self.strategy.generate(task, prompt)
        return AgentResponse(
            success=True,
            output=format_output(task, outcome),
            files=outcome.files,
            task_id=task.id,
            task_title=task.title,
            source=outcome.source,
        )
