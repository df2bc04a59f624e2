"""taskforge pipeline orchestrator.

Implements the three-phase generation pipeline:

Phase 1: ANALYZE  -- Break the brief into technical tasks, plan and assess them.
Phase 2: GENERATE -- Produce source files for each task, one task at a time.
Phase 3: ASSEMBLE -- Arrange every file into a runnable frontend/backend tree.

Usage::

    python -m taskforge "Build a todo app with user authentication" -o ./todo-app
    python -m taskforge "Build a todo app" --fallback-only --analyze-only
"""

from __future__ import annotations

import asyncio
import re
import sys
import time
from pathlib import Path
from typing import Any, Mapping, Sequence

from pydantic import ValidationError
from rich.panel import Panel

from taskforge.builder.orchestrator import GenerationOrchestrator
from taskforge.builder.prompt_gen import PromptGenerator
from taskforge.builder.strategies import GenerationStrategy, build_strategy
from taskforge.config import Config, GenerationMode
from taskforge.errors import BriefValidationError, TaskforgeError
from taskforge.planner.analysis import (
    ProjectAnalysis,
    analyze_project,
    generation_insights,
    summarize_results,
)
from taskforge.planner.breakdown import TaskBreakdownEngine
from taskforge.planner.execution_plan import ExecutionPlanner
from taskforge.planner.models import AgentResponse, ProjectBrief, TechnicalTask
from taskforge.scaffolder.assembler import AssembledProject, ProjectAssembler
from taskforge.utils import (
    PHASE_NAMES,
    console,
    format_duration,
    print_error,
    print_phase_header,
    print_success,
    print_summary_table,
    print_warning,
    save_json,
    write_project,
)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class PipelineError(TaskforgeError):
    """Raised when a pipeline phase cannot produce anything to continue with."""

    def __init__(self, phase: int, message: str) -> None:
        self.phase = phase
        super().__init__(f"Phase {phase} ({PHASE_NAMES.get(phase, '?')}): {message}")


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------

_RE_PROJECT_NAME = re.compile(
    r"(?:build|create|develop|make)\s+(?:a|an)\s+([\w\s-]+?)(?:\s+with|\s+that|\s+for|$)",
    re.IGNORECASE,
)


def _capitalize_words(words: Sequence[str]) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in words)


def extract_project_name(description: str) -> str:
    """Derive a display name from phrases like "Build a todo app with ...".

    Falls back to the first three words of the description.
    """
    match = _RE_PROJECT_NAME.search(description)
    if match and match.group(1).strip():
        return _capitalize_words(match.group(1).strip().split(" "))
    return _capitalize_words(description.strip().split(" ")[:3])


def coerce_brief(brief: ProjectBrief | Mapping[str, Any] | str) -> ProjectBrief:
    """Accept a brief, its JSON form, or a bare description string.

    Raises:
        BriefValidationError: If the description is missing or blank.
    """
    if isinstance(brief, ProjectBrief):
        return brief
    data = {"description": brief} if isinstance(brief, str) else dict(brief)
    try:
        return ProjectBrief.model_validate(data)
    except ValidationError as exc:
        raise BriefValidationError("Description is required") from exc


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class ProjectPipeline:
    """Brief in, project tree out.

    Attributes:
        config: Global configuration (generation mode, ports, output dir).
        engine: Rule-based task breakdown.
        planner: Execution plan renderer.
        strategy: Generation strategy shared by every orchestrator this
            pipeline creates.
        assembler: Project tree assembler.
    """

    def __init__(
        self,
        config: Config | None = None,
        engine: TaskBreakdownEngine | None = None,
        strategy: GenerationStrategy | None = None,
        assembler: ProjectAssembler | None = None,
    ) -> None:
        self.config = config or Config.from_env()
        self.engine = engine or TaskBreakdownEngine()
        self.planner = ExecutionPlanner()
        self.strategy = strategy or build_strategy(self.config)
        self.assembler = assembler or ProjectAssembler(ports=self.config.ports)

    # ------------------------------------------------------------------
    # Phase 1: ANALYZE
    # ------------------------------------------------------------------

    def analyze(self, brief: ProjectBrief | Mapping[str, Any] | str) -> dict[str, Any]:
        """Break *brief* down and return tasks, matched topics, execution plan
        and analysis.

        Raises:
            BriefValidationError: If the brief has no description.
        """
        brief = coerce_brief(brief)
        tasks = self.engine.breakdown(brief)
        return {
            "tasks": [t.model_dump(by_alias=True, mode="json") for t in tasks],
            "topics": self.engine.matched_topics(brief),
            "executionPlan": self.planner.plan(tasks),
            "analysis": analyze_project(brief, tasks).model_dump(mode="json"),
        }

    # ------------------------------------------------------------------
    # Phase 2: GENERATE
    # ------------------------------------------------------------------

    def orchestrator_for(self, brief: ProjectBrief) -> GenerationOrchestrator:
        """An orchestrator whose prompts carry the brief's requirements."""
        prompts = PromptGenerator(requirements=brief.requirements, constraints=brief.constraints)
        return GenerationOrchestrator(self.strategy, prompts)

    async def generate_tasks(
        self, tasks: Sequence[TechnicalTask], brief: ProjectBrief
    ) -> list[AgentResponse]:
        """Generate *tasks* strictly in order; one failure never stops the rest."""
        orchestrator = self.orchestrator_for(brief)
        results: list[AgentResponse] = []
        for index, task in enumerate(tasks, start=1):
            console.print(f"  [cyan][{index}/{len(tasks)}][/cyan] {task.title or task.id}")
            result = await orchestrator.generate(task)
            if result.success:
                console.print(
                    f"    [green]+[/green] {len(result.files)} files ({result.source.value})"
                )
            else:
                console.print(f"    [red]x[/red] {result.error}")
            results.append(result)
        return results

    async def generate_project(self, brief: ProjectBrief | Mapping[str, Any] | str) -> dict[str, Any]:
        """Break *brief* down and generate every task.

        Raises:
            BriefValidationError: If the brief has no description.
        """
        brief = coerce_brief(brief)
        tasks = self.engine.breakdown(brief)
        results = await self.generate_tasks(tasks, brief)
        return {
            "results": [r.model_dump(by_alias=True, mode="json") for r in results],
            "summary": summarize_results(results),
            "insights": generation_insights(results).model_dump(mode="json"),
        }

    # ------------------------------------------------------------------
    # Phase 3: ASSEMBLE
    # ------------------------------------------------------------------

    def assemble(
        self,
        results: Sequence[AgentResponse | Mapping[str, Any]],
        project_name: str | None = None,
        description: str = "",
    ) -> AssembledProject:
        """Assemble the files of every successful result into one tree."""
        responses = [
            r if isinstance(r, AgentResponse) else AgentResponse.model_validate(r)
            for r in results
        ]
        files = [f for r in responses if r.success for f in r.files]
        name = project_name or self.config.project_name or extract_project_name(description)
        return self.assembler.assemble_with_report(files, name, description)

    # ------------------------------------------------------------------
    # Full run
    # ------------------------------------------------------------------

    async def run(
        self,
        brief: ProjectBrief | Mapping[str, Any] | str,
        output_dir: str | Path | None = None,
    ) -> dict[str, Any]:
        """Analyze, generate and assemble *brief*, then write the tree.

        Raises:
            BriefValidationError: If the brief has no description.
            PipelineError: If no task was recognised or no file generated.
        """
        started = time.monotonic()
        brief = coerce_brief(brief)
        if output_dir is not None:
            self.config = self.config.model_copy(update={"output_dir": Path(output_dir)})

        mode = self.config.effective_mode.value
        console.print(
            Panel(
                f"[bold bright_cyan]taskforge[/bold bright_cyan]\n"
                f"Brief  : {brief.description}\n"
                f"Mode   : {mode}\n"
                f"Output : {self.config.output_dir.resolve()}",
                title="[bold]Pipeline Start[/bold]",
                border_style="bright_cyan",
            )
        )
        if self.config.generation.mode is GenerationMode.REMOTE and mode != "remote":
            print_warning("GEMINI_API_KEY is not set -- using template generation.")

        print_phase_header(1, PHASE_NAMES[1])
        analysis = self.analyze(brief)
        if not analysis["tasks"]:
            raise PipelineError(1, "No recognisable features in the brief")
        console.print(f"Topics: {', '.join(analysis['topics'])}\n")
        console.print(analysis["executionPlan"])
        await save_json(analysis, self.config.analysis_path)

        print_phase_header(2, PHASE_NAMES[2])
        tasks = [TechnicalTask.model_validate(t) for t in analysis["tasks"]]
        results = await self.generate_tasks(tasks, brief)
        summary = summarize_results(results)
        insights = generation_insights(results)
        await save_json(
            {
                "results": [r.model_dump(by_alias=True, mode="json") for r in results],
                "summary": summary,
                "insights": insights.model_dump(mode="json"),
            },
            self.config.results_path,
        )
        if insights.files_generated == 0:
            raise PipelineError(2, "No files were generated")

        print_phase_header(3, PHASE_NAMES[3])
        project = self.assemble(results, description=brief.description)
        written = write_project(project.as_pairs(), self.config.output_dir)
        for collision in project.collisions:
            print_warning(f"  {collision.kind.value}: {collision.path} ({collision.second_source})")

        elapsed = time.monotonic() - started
        print_summary_table(
            {
                "Project": project.project_name,
                "Tasks": f"{insights.successful}/{insights.total_tasks} succeeded",
                "Sources": f"{insights.remote_tasks} remote, {insights.fallback_tasks} fallback",
                "Files written": str(len(written)),
                "Collisions": str(len(project.collisions)),
                "Duration": format_duration(elapsed),
            },
            title="Pipeline Summary",
        )
        if insights.failed:
            print_warning(summary)
        else:
            print_success(f"Project written to {self.config.output_dir.resolve()}")

        return {
            "success": insights.failed == 0,
            "projectName": project.project_name,
            "outputDir": str(self.config.output_dir.resolve()),
            "files": project.paths(),
            "summary": summary,
            "insights": insights.model_dump(mode="json"),
            "collisions": [c.model_dump(mode="json") for c in project.collisions],
        }


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """CLI entry point for ``python -m taskforge``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="taskforge",
        description="taskforge -- turn a project brief into a runnable React + Express project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            '  taskforge "Build a todo app with user authentication"\n'
            '  taskforge "Build a todo app" -o ./todo --fallback-only\n'
            '  taskforge "Create a task manager with sharing" --analyze-only\n'
        ),
    )
    parser.add_argument("brief", nargs="+", help="Free-text project description")
    parser.add_argument("--output", "-o", default=None, help="Output directory (default: ./output)")
    parser.add_argument(
        "--fallback-only",
        action="store_true",
        help="Skip the model API and generate from templates only",
    )
    parser.add_argument("--project-name", default=None, help="Override the derived project name")
    parser.add_argument(
        "--analyze-only",
        action="store_true",
        help="Print the task breakdown, plan and analysis without generating code",
    )
    parser.add_argument(
        "--requirement", action="append", default=[], metavar="R",
        help="Extra requirement to pass to every prompt (repeatable)",
    )
    parser.add_argument(
        "--constraint", action="append", default=[], metavar="C",
        help="Constraint to pass to every prompt (repeatable)",
    )
    parser.add_argument("--timeline", default=None, help="Delivery timeline, e.g. '2 weeks'")
    parser.add_argument(
        "--strict", action="store_true",
        help="Fail on conflicting file paths instead of renaming",
    )

    args = parser.parse_args()

    config = Config.from_env()
    if args.fallback_only:
        config.generation.mode = GenerationMode.FALLBACK
    if args.project_name:
        config.project_name = args.project_name
    if args.output:
        config.output_dir = Path(args.output)

    try:
        brief = coerce_brief({
            "description": " ".join(args.brief),
            "requirements": args.requirement,
            "constraints": args.constraint,
            "timeline": args.timeline,
        })
    except BriefValidationError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    pipeline = ProjectPipeline(
        config, assembler=ProjectAssembler(ports=config.ports, strict=args.strict)
    )

    if args.analyze_only:
        analysis = pipeline.analyze(brief)
        console.print(f"Topics: {', '.join(analysis['topics']) or 'none'}\n")
        console.print(analysis["executionPlan"])
        console.print()
        console.print(ProjectAnalysis.model_validate(analysis["analysis"]).render())
        return

    try:
        result = asyncio.run(pipeline.run(brief))
    except TaskforgeError as exc:
        print_error(f"Pipeline failed: {exc}")
        sys.exit(1)

    if not result["success"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
