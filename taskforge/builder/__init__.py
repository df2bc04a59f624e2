"""taskforge builder.

Produces source files per technical task: prompt generation, the remote and
template generation strategies, extraction of fenced code blocks, and the
deterministic enhancement pass.
"""

from taskforge.builder.enhancer import CodeEnhancer
from taskforge.builder.extractor import ResponseExtractor, classify_path
from taskforge.builder.orchestrator import GenerationOrchestrator
from taskforge.builder.prompt_gen import PromptGenerator
from taskforge.builder.strategies import (
    GenerationOutcome,
    GenerationStrategy,
    RemoteGenerationStrategy,
    TemplateGenerationStrategy,
    build_strategy,
)

__all__ = [
    "CodeEnhancer",
    "ResponseExtractor",
    "classify_path",
    "GenerationOrchestrator",
    "PromptGenerator",
    "GenerationOutcome",
    "GenerationStrategy",
    "RemoteGenerationStrategy",
    "TemplateGenerationStrategy",
    "build_strategy",
]
