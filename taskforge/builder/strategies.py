"""Code generation strategies.

Two interchangeable ways of turning a task and its prompt into files:

1. ``RemoteGenerationStrategy`` -- ask the text-generation API, extract the
   fenced blocks, enhance them, and add companion files.  Any
   ``ExternalCapabilityError`` (timeouts included) or an empty extraction
   drops straight to the template files.  The remote call is never repeated.
2. ``TemplateGenerationStrategy`` -- skip the API and return the hand-authored
   blueprint files for the task's topic.

``build_strategy`` picks one from a ``Config``.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from taskforge.builder.blueprints import blueprint_files
from taskforge.builder.companions import add_companions
from taskforge.builder.enhancer import CodeEnhancer
from taskforge.builder.extractor import ResponseExtractor
from taskforge.config import Config, GenerationMode
from taskforge.errors import ExternalCapabilityError, ExtractionEmpty, NetworkError
from taskforge.llm_client import GeminiClient
from taskforge.planner.models import GeneratedFile, GenerationSource, TechnicalTask
from taskforge.utils import console, print_warning


@dataclass
class GenerationOutcome:
    """Files produced for one task, and how they were produced."""

    files: list[GeneratedFile] = field(default_factory=list)
    source: GenerationSource = GenerationSource.NONE
    fallback_reason: str | None = None
    explanation: str = ""

    def summary(self) -> str:
        """Return a one-line human-readable summary."""
        text = f"{len(self.files)} files via {self.source.value}"
        if self.fallback_reason:
            text += f" (fallback: {self.fallback_reason})"
        return text


class GenerationStrategy(ABC):
    """Produces the files for a single validated task."""

    @abstractmethod
    async def generate(self, task: TechnicalTask, prompt: str) -> GenerationOutcome:
        """Return the files for *task*. Must not raise for a valid task."""


class TemplateGenerationStrategy(GenerationStrategy):
    """Deterministic, offline generation from hand-authored blueprints."""

    async def generate(self, task: TechnicalTask, prompt: str) -> GenerationOutcome:
        return GenerationOutcome(files=blueprint_files(task), source=GenerationSource.FALLBACK)


class RemoteGenerationStrategy(GenerationStrategy):
    """Model-backed generation with an automatic template fallback.

    Args:
        client: Text-generation client.
        request_timeout: Upper bound in seconds on one remote call.
        extractor: Shared extractor; its naming counter spans all tasks.
        enhancer: Post-processor applied to every extracted file.
        fallback: Strategy used when the remote call cannot produce files.
    """

    def __init__(
        self,
        client: GeminiClient,
        request_timeout: float = 90.0,
        extractor: ResponseExtractor | None = None,
        enhancer: CodeEnhancer | None = None,
        fallback: GenerationStrategy | None = None,
    ) -> None:
        self.client = client
        self.request_timeout = request_timeout
        self.extractor = extractor or ResponseExtractor()
        self.enhancer = enhancer or CodeEnhancer()
        self.fallback = fallback or TemplateGenerationStrategy()

    async def generate(self, task: TechnicalTask, prompt: str) -> GenerationOutcome:
        try:
            text = await self._call(prompt)
            files = self.extractor.extract(text, agent_type=task.type)
            if not files:
                raise ExtractionEmpty("No fenced code blocks in generated text")
        except (ExternalCapabilityError, ExtractionEmpty) as exc:
            reason = f"{type(exc).__name__}: {exc}"
            print_warning(f"Remote generation failed for '{task.title}', using templates ({reason})")
            outcome = await self.fallback.generate(task, prompt)
            outcome.fallback_reason = reason
            return outcome

        enhanced = [self.enhancer.enhance(f, task).model_copy(update={"origin": task.type}) for f in files]
        usage = self.client.last_usage
        console.print(
            f"  [dim]Extracted {len(enhanced)} files for '{task.title}' "
            f"({usage.prompt_tokens} prompt / {usage.output_tokens} output tokens)[/dim]"
        )
        return GenerationOutcome(
            files=add_companions(task, enhanced),
            source=GenerationSource.REMOTE,
            explanation=self.extractor.explanation(text),
        )

    async def _call(self, prompt: str) -> str:
        try:
            return await asyncio.wait_for(self.client.generate(prompt), timeout=self.request_timeout)
        except asyncio.TimeoutError as exc:
            raise NetworkError(f"Generation timed out after {self.request_timeout}s") from exc


def build_strategy(config: Config, client: GeminiClient | None = None) -> GenerationStrategy:
    """Select the strategy for ``config.effective_mode``."""
    if config.effective_mode is GenerationMode.FALLBACK:
        return TemplateGenerationStrategy()
    return RemoteGenerationStrategy(
        client=client or GeminiClient(config.gemini),
        request_timeout=config.generation.request_timeout,
    )
