"""Keyword-driven PostgreSQL schema generation.

Derives a set of tables from a task's title, description and acceptance
criteria, and renders them as a single idempotent migration script.  Used by
the database-schema template set and as a companion migration for remotely
generated backend tasks.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from taskforge.planner.models import TechnicalTask


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class Column(BaseModel):
    """A single column in a table."""
    name: str = Field(..., description="Column name")
    type: str = Field(..., description="PostgreSQL column type, e.g. 'VARCHAR(255)'")
    nullable: bool = Field(default=False)
    unique: bool = Field(default=False)
    default: Optional[str] = Field(default=None, description="SQL default expression")
    primary_key: bool = Field(default=False)


class ForeignKey(BaseModel):
    """A column referencing another table's primary key."""
    column: str
    references: str
    on_delete: str = Field(default="CASCADE")


class TableIndex(BaseModel):
    """A secondary index on one or more columns."""
    columns: list[str] = Field(..., min_length=1)
    unique: bool = Field(default=False)


class Table(BaseModel):
    """A table definition."""
    name: str
    columns: list[Column] = Field(default_factory=list)
    foreign_keys: list[ForeignKey] = Field(default_factory=list)
    indexes: list[TableIndex] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Table builders
# ---------------------------------------------------------------------------

def _id() -> Column:
    return Column(name="id", type="UUID", default="uuid_generate_v4()", primary_key=True)


def _timestamps() -> list[Column]:
    return [
        Column(name="created_at", type="TIMESTAMP WITH TIME ZONE", default="NOW()"),
        Column(name="updated_at", type="TIMESTAMP WITH TIME ZONE", default="NOW()"),
    ]


def _users_table() -> Table:
    return Table(
        name="users",
        columns=[
            _id(),
            Column(name="email", type="VARCHAR(255)", unique=True),
            Column(name="password_hash", type="VARCHAR(255)"),
            Column(name="name", type="VARCHAR(100)"),
            Column(name="is_active", type="BOOLEAN", default="TRUE"),
            Column(name="last_login_at", type="TIMESTAMP WITH TIME ZONE", nullable=True),
            *_timestamps(),
        ],
        indexes=[TableIndex(columns=["email"], unique=True)],
    )


def _tasks_table(with_users: bool) -> Table:
    columns = [
        _id(),
        Column(name="title", type="VARCHAR(255)"),
        Column(name="description", type="TEXT", nullable=True),
        Column(name="status", type="VARCHAR(20)", default="'pending'"),
        Column(name="priority", type="VARCHAR(10)", default="'medium'"),
        Column(name="due_date", type="TIMESTAMP WITH TIME ZONE", nullable=True),
    ]
    foreign_keys: list[ForeignKey] = []
    indexes = [TableIndex(columns=["status"]), TableIndex(columns=["due_date"])]
    if with_users:
        columns.append(Column(name="user_id", type="UUID"))
        foreign_keys.append(ForeignKey(column="user_id", references="users"))
        indexes.insert(0, TableIndex(columns=["user_id"]))
    columns.extend(_timestamps())
    return Table(name="tasks", columns=columns, foreign_keys=foreign_keys, indexes=indexes)


def _task_shares_table() -> Table:
    return Table(
        name="task_shares",
        columns=[
            _id(),
            Column(name="task_id", type="UUID"),
            Column(name="shared_with_user_id", type="UUID"),
            Column(name="permission", type="VARCHAR(10)", default="'view'"),
            Column(name="created_at", type="TIMESTAMP WITH TIME ZONE", default="NOW()"),
        ],
        foreign_keys=[
            ForeignKey(column="task_id", references="tasks"),
            ForeignKey(column="shared_with_user_id", references="users"),
        ],
        indexes=[TableIndex(columns=["task_id", "shared_with_user_id"], unique=True)],
    )


def _comments_table(with_users: bool, with_tasks: bool) -> Table:
    columns = [_id(), Column(name="body", type="TEXT")]
    foreign_keys: list[ForeignKey] = []
    indexes: list[TableIndex] = []
    if with_tasks:
        columns.append(Column(name="task_id", type="UUID"))
        foreign_keys.append(ForeignKey(column="task_id", references="tasks"))
        indexes.append(TableIndex(columns=["task_id"]))
    if with_users:
        columns.append(Column(name="author_id", type="UUID", nullable=True))
        foreign_keys.append(ForeignKey(column="author_id", references="users", on_delete="SET NULL"))
    columns.extend(_timestamps())
    return Table(name="comments", columns=columns, foreign_keys=foreign_keys, indexes=indexes)


def _notifications_table(with_users: bool) -> Table:
    columns = [
        _id(),
        Column(name="kind", type="VARCHAR(50)"),
        Column(name="message", type="TEXT"),
        Column(name="read", type="BOOLEAN", default="FALSE"),
    ]
    foreign_keys: list[ForeignKey] = []
    indexes = [TableIndex(columns=["read"])]
    if with_users:
        columns.append(Column(name="user_id", type="UUID"))
        foreign_keys.append(ForeignKey(column="user_id", references="users"))
        indexes.insert(0, TableIndex(columns=["user_id"]))
    columns.append(Column(name="created_at", type="TIMESTAMP WITH TIME ZONE", default="NOW()"))
    return Table(name="notifications", columns=columns, foreign_keys=foreign_keys, indexes=indexes)


def _categories_table() -> Table:
    return Table(
        name="categories",
        columns=[
            _id(),
            Column(name="name", type="VARCHAR(100)", unique=True),
            Column(name="color", type="VARCHAR(7)", nullable=True),
            Column(name="created_at", type="TIMESTAMP WITH TIME ZONE", default="NOW()"),
        ],
    )


def _items_table() -> Table:
    return Table(
        name="items",
        columns=[
            _id(),
            Column(name="name", type="VARCHAR(255)"),
            Column(name="data", type="JSONB", default="'{}'::jsonb"),
            *_timestamps(),
        ],
        indexes=[TableIndex(columns=["name"])],
    )


def _mentions(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def tables_for_task(task: TechnicalTask, include_generic: bool = True) -> list[Table]:
    """Infer the tables a task needs from its text.

    Args:
        task: The task to inspect.
        include_generic: Fall back to a generic ``items`` table when no
            keyword matches.

    Returns:
        Tables in creation order (referenced tables first).
    """
    text = " ".join(
        [task.title, task.description, *task.acceptance_criteria]
    ).lower()

    has_users = _mentions(text, ("auth", "login", "register", "user", "account", "profile"))
    has_tasks = _mentions(text, ("task", "todo", "project"))

    tables: list[Table] = []
    if has_users:
        tables.append(_users_table())
    if has_tasks:
        tables.append(_tasks_table(with_users=has_users))
        if has_users and _mentions(text, ("shar", "collaborat", "permission")):
            tables.append(_task_shares_table())
    if _mentions(text, ("comment", "note", "feedback", "discussion")):
        tables.append(_comments_table(with_users=has_users, with_tasks=has_tasks))
    if _mentions(text, ("notification", "alert", "reminder")):
        tables.append(_notifications_table(with_users=has_users))
    if _mentions(text, ("category", "categories", "tag", "label")):
        tables.append(_categories_table())

    if not tables and include_generic:
        tables.append(_items_table())
    return tables


def render_column(column: Column) -> str:
    parts = [column.name, column.type]
    if column.primary_key:
        parts.append("PRIMARY KEY")
    else:
        if not column.nullable:
            parts.append("NOT NULL")
        if column.unique:
            parts.append("UNIQUE")
    if column.default is not None:
        parts.append(f"DEFAULT {column.default}")
    return " ".join(parts)


def render_table(table: Table) -> str:
    definitions = [f"  {render_column(c)}" for c in table.columns]
    definitions.extend(
        f"  FOREIGN KEY ({fk.column}) REFERENCES {fk.references}(id) ON DELETE {fk.on_delete}"
        for fk in table.foreign_keys
    )
    body = ",\n".join(definitions)
    return f"-- {table.name}\nCREATE TABLE IF NOT EXISTS {table.name} (\n{body}\n);\n"


def render_index(table: Table, index: TableIndex) -> str:
    name = f"idx_{table.name}_{'_'.join(index.columns)}"
    unique = "UNIQUE " if index.unique else ""
    return (
        f"CREATE {unique}INDEX IF NOT EXISTS {name} "
        f"ON {table.name} ({', '.join(index.columns)});\n"
    )


def render_migration(tables: list[Table], title: str = "Database Schema Migration") -> str:
    """Render *tables* as one transactional PostgreSQL migration.

    The output contains no timestamps, so the same tables always render to the
    same script.
    """
    lines = [
        f"-- {title}",
        "-- Dialect: POSTGRESQL",
        "",
        'CREATE EXTENSION IF NOT EXISTS "uuid-ossp";',
        "",
        "BEGIN;",
        "",
    ]
    for table in tables:
        lines.append(render_table(table))
    if any(table.indexes for table in tables):
        lines.append("-- Indexes")
        for table in tables:
            for index in table.indexes:
                lines.append(render_index(table, index).rstrip("\n"))
        lines.append("")
    lines.append("COMMIT;")
    return "\n".join(lines) + "\n"
