"""Unit tests for project analysis and insights (taskforge.planner.analysis).

Tests cover:
- Complexity tiers
- Architecture and stack identification
- Risks and recommendations
- analyze_project bundle and its rendered report
- summarize_results and generation_insights
"""

from __future__ import annotations

import pytest

from taskforge.planner.analysis import (
    ProjectAnalysis,
    analyze_project,
    assess_complexity,
    generate_recommendations,
    generation_insights,
    identify_architecture,
    identify_risks,
    identify_tech_stack,
    summarize_results,
)
from taskforge.planner.models import (
    AgentResponse,
    GeneratedFile,
    GenerationSource,
    ProjectBrief,
    TaskPriority,
    TaskType,
    TechnicalTask,
)


def _task(index: int, title: str = "Thing", task_type=TaskType.BACKEND, priority=TaskPriority.MEDIUM):
    return TechnicalTask(
        id=f"t{index}", title=title, description="d", type=task_type, priority=priority
    )


class TestComplexity:
    @pytest.mark.unit
    @pytest.mark.parametrize("count, expected", [(0, "Simple"), (3, "Simple"), (4, "Moderate"), (6, "Moderate")])
    def test_by_count(self, count, expected):
        assert assess_complexity([_task(i) for i in range(count)]) == expected

    @pytest.mark.unit
    def test_high_priority_heavy(self):
        tasks = [_task(i, priority=TaskPriority.HIGH) for i in range(5)] + [_task(9), _task(10)]
        assert assess_complexity(tasks) == "High"

    @pytest.mark.unit
    def test_large_mixed(self):
        assert assess_complexity([_task(i) for i in range(7)]) == "Complex"


class TestArchitectureAndStack:
    @pytest.mark.unit
    def test_todo_brief(self, engine, todo_brief):
        tasks = engine.breakdown(todo_brief)
        assert identify_architecture(tasks) == "Full-Stack MVC"
        assert identify_tech_stack(tasks) == ["React+TypeScript", "Node.js+Express", "JWT Auth"]

    @pytest.mark.unit
    def test_client_server(self):
        tasks = [_task(1), _task(2, task_type=TaskType.FRONTEND)]
        assert identify_architecture(tasks) == "Client-Server"

    @pytest.mark.unit
    def test_api_first(self):
        assert identify_architecture([_task(1)]) == "API-First"

    @pytest.mark.unit
    def test_component_based(self):
        assert identify_architecture([]) == "Component-Based"
        assert identify_tech_stack([]) == []

    @pytest.mark.unit
    def test_database_stack(self):
        assert "PostgreSQL" in identify_tech_stack([_task(1, title="Design Database Schema")])


class TestRisksAndRecommendations:
    @pytest.mark.unit
    def test_todo_brief(self, engine, todo_brief):
        tasks = engine.breakdown(todo_brief)
        assert identify_risks(todo_brief, tasks) == ["No testing strategy"]
        assert generate_recommendations(tasks) == [
            "Add testing tasks",
            "Consider deployment strategy",
            "Implement CI/CD pipeline",
            "Add error monitoring and logging",
        ]

    @pytest.mark.unit
    def test_tight_timeline_and_scope(self):
        brief = ProjectBrief(description="x", timeline="2 Weeks")
        tasks = [_task(i, priority=TaskPriority.HIGH) for i in range(9)]
        assert identify_risks(brief, tasks) == [
            "Scope complexity",
            "High priority overload",
            "Tight timeline",
            "No testing strategy",
        ]

    @pytest.mark.unit
    def test_testing_and_deploy_present(self):
        tasks = [_task(1, title="Write tests"), _task(2, title="Deploy to cloud")]
        assert generate_recommendations(tasks) == [
            "Implement CI/CD pipeline",
            "Add error monitoring and logging",
        ]
        assert identify_risks(ProjectBrief(description="x"), tasks) == []

    @pytest.mark.unit
    def test_mvp_recommendation(self):
        assert "Consider MVP approach for initial release" in generate_recommendations(
            [_task(i) for i in range(7)]
        )


class TestAnalyzeProject:
    @pytest.mark.unit
    def test_bundle(self, engine, todo_brief):
        analysis = analyze_project(todo_brief, engine.breakdown(todo_brief))
        assert analysis.complexity == "Moderate"
        assert analysis.architecture == "Full-Stack MVC"
        assert analysis.estimated_hours == 32

    @pytest.mark.unit
    def test_render(self):
        report = ProjectAnalysis(complexity="Simple", architecture="API-First").render()
        assert "Project Complexity: Simple" in report
        assert "Technology Stack: To be determined" in report
        assert "Risk Factors: Low risk project" in report
        assert report.endswith("Estimated Effort: 0 hours")


class TestResultsReporting:
    @pytest.fixture
    def results(self):
        return [
            AgentResponse(
                success=True,
                files=[GeneratedFile(path="a.ts"), GeneratedFile(path="b.ts")],
                task_id="task_1",
                task_title="One",
                source=GenerationSource.REMOTE,
            ),
            AgentResponse.failure("Unknown task type: general", _task(2, title="Two")),
            AgentResponse(
                success=True,
                files=[GeneratedFile(path="c.tsx")],
                task_id="task_3",
                task_title="Three",
                source=GenerationSource.FALLBACK,
            ),
        ]

    @pytest.mark.unit
    def test_summarize(self, results):
        assert summarize_results(results).splitlines() == [
            "Project Execution Summary:",
            "- Total tasks: 3",
            "- Successful: 2",
            "- Failed: 1",
            "- Files generated: 3",
            "",
            "Failed tasks:",
            "- Task 2: Unknown task type: general",
        ]

    @pytest.mark.unit
    def test_summarize_all_ok(self):
        summary = summarize_results([AgentResponse(success=True)])
        assert "Failed tasks:" not in summary

    @pytest.mark.unit
    def test_insights(self, results):
        insights = generation_insights(results)
        assert insights.total_tasks == 3
        assert insights.successful == 2
        assert insights.failed == 1
        assert insights.success_rate == 67
        assert insights.files_generated == 3
        assert insights.remote_tasks == 1
        assert insights.fallback_tasks == 1
        assert insights.improvements == ["Two: Unknown task type: general"]

    @pytest.mark.unit
    def test_insights_empty(self):
        assert generation_insights([]).success_rate == 0
