"""Unit tests for keyword-driven schema generation (taskforge.builder.schema_gen).

Tests cover:
- tables_for_task keyword matching and ordering
- Foreign keys that depend on which tables exist
- Generic fallback table
- Column / table / index rendering
- render_migration structure and determinism
"""

from __future__ import annotations

import pytest

from taskforge.builder.schema_gen import (
    Column,
    Table,
    TableIndex,
    render_column,
    render_index,
    render_migration,
    render_table,
    tables_for_task,
)
from taskforge.planner.models import TaskType, TechnicalTask


def _task(title: str, description: str = "", criteria: list[str] | None = None) -> TechnicalTask:
    return TechnicalTask(
        id="t",
        title=title,
        description=description,
        type=TaskType.BACKEND,
        acceptance_criteria=criteria or [],
    )


def _names(task: TechnicalTask, **kwargs) -> list[str]:
    return [t.name for t in tables_for_task(task, **kwargs)]


class TestTablesForTask:
    @pytest.mark.unit
    def test_tasks_only(self, backend_task):
        tables = tables_for_task(backend_task)
        assert [t.name for t in tables] == ["tasks"]
        assert tables[0].foreign_keys == []
        assert "user_id" not in [c.name for c in tables[0].columns]

    @pytest.mark.unit
    def test_users_and_tasks(self):
        tables = tables_for_task(_task("User login", "Users own their todos"))
        assert [t.name for t in tables] == ["users", "tasks"]
        tasks = tables[1]
        assert tasks.foreign_keys[0].column == "user_id"
        assert tasks.foreign_keys[0].references == "users"
        assert tasks.indexes[0].columns == ["user_id"]

    @pytest.mark.unit
    def test_sharing_requires_users(self):
        assert _names(_task("Share tasks")) == ["tasks"]
        assert _names(_task("Implement Task Sharing", "Allow users to share tasks")) == [
            "users",
            "tasks",
            "task_shares",
        ]

    @pytest.mark.unit
    def test_optional_tables(self):
        task = _task(
            "Design Database Schema",
            "Tasks with comments",
            ["Reminder notifications", "Category labels"],
        )
        assert _names(task) == ["tasks", "comments", "notifications", "categories"]

    @pytest.mark.unit
    def test_comments_foreign_keys(self):
        tables = tables_for_task(_task("User feedback on tasks"))
        comments = next(t for t in tables if t.name == "comments")
        assert [(fk.column, fk.on_delete) for fk in comments.foreign_keys] == [
            ("task_id", "CASCADE"),
            ("author_id", "SET NULL"),
        ]

    @pytest.mark.unit
    def test_generic_fallback(self):
        assert _names(_task("Design Database Schema", "Create optimized database schema")) == [
            "items"
        ]

    @pytest.mark.unit
    def test_no_generic_fallback(self):
        assert _names(_task("Setup API Foundation"), include_generic=False) == []


class TestRendering:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "column, expected",
        [
            (
                Column(name="id", type="UUID", default="uuid_generate_v4()", primary_key=True),
                "id UUID PRIMARY KEY DEFAULT uuid_generate_v4()",
            ),
            (
                Column(name="email", type="VARCHAR(255)", unique=True),
                "email VARCHAR(255) NOT NULL UNIQUE",
            ),
            (Column(name="notes", type="TEXT", nullable=True), "notes TEXT"),
            (
                Column(name="status", type="VARCHAR(20)", default="'pending'"),
                "status VARCHAR(20) NOT NULL DEFAULT 'pending'",
            ),
        ],
    )
    def test_render_column(self, column, expected):
        assert render_column(column) == expected

    @pytest.mark.unit
    def test_render_table_with_foreign_key(self):
        tables = tables_for_task(_task("User tasks"))
        sql = render_table(tables[1])
        assert sql.startswith("-- tasks\nCREATE TABLE IF NOT EXISTS tasks (\n")
        assert "  FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE\n);" in sql

    @pytest.mark.unit
    def test_render_index(self):
        table = Table(name="users")
        assert render_index(table, TableIndex(columns=["email"], unique=True)) == (
            "CREATE UNIQUE INDEX IF NOT EXISTS idx_users_email ON users (email);\n"
        )
        assert render_index(table, TableIndex(columns=["a", "b"])) == (
            "CREATE INDEX IF NOT EXISTS idx_users_a_b ON users (a, b);\n"
        )


class TestRenderMigration:
    @pytest.mark.unit
    def test_structure(self):
        sql = render_migration(tables_for_task(_task("User tasks")), title="Initial")
        lines = sql.splitlines()
        assert lines[0] == "-- Initial"
        assert 'CREATE EXTENSION IF NOT EXISTS "uuid-ossp";' in lines
        assert sql.index("BEGIN;") < sql.index("CREATE TABLE IF NOT EXISTS users")
        assert sql.index("CREATE TABLE IF NOT EXISTS users") < sql.index(
            "CREATE TABLE IF NOT EXISTS tasks"
        )
        assert sql.index("-- Indexes") < sql.index("COMMIT;")
        assert sql.endswith("COMMIT;\n")

    @pytest.mark.unit
    def test_no_indexes_section_without_indexes(self):
        sql = render_migration([Table(name="plain", columns=[Column(name="x", type="INT")])])
        assert "-- Indexes" not in sql
        assert sql.startswith("-- Database Schema Migration\n")

    @pytest.mark.unit
    def test_deterministic(self):
        task = _task("User tasks with sharing")
        assert render_migration(tables_for_task(task)) == render_migration(tables_for_task(task))
