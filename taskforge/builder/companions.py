"""Supporting files added next to remotely generated output.

Model output tends to cover the feature files a prompt asks for and skip the
glue around them.  Companions fill that gap: shared API types on the
frontend; on the backend, auth middleware for auth tasks, validation helpers,
an environment module, a schema migration, scheduled jobs and domain services
(the last three gated on the task text).  A companion never replaces a path
the model already produced.
"""

from __future__ import annotations

import textwrap

from taskforge.builder.blueprints.backend import auth_middleware, validation_utils
from taskforge.builder.blueprints.support import (
    environment_config,
    scheduling_files,
    service_files,
)
from taskforge.builder.schema_gen import render_migration, tables_for_task
from taskforge.planner.models import FileType, GeneratedFile, TaskType, TechnicalTask
from taskforge.utils import sanitize_name

_API_TYPES = textwrap.dedent("""\
    export interface ApiError {
      error: string;
      details?: Record<string, string>;
    }

    export type ApiResult<T> =
      | { ok: true; data: T }
      | { ok: false; error: ApiError };

    export type RequestStatus = 'idle' | 'loading' | 'success' | 'error';

    export async function requestJson<T>(input: RequestInfo, init?: RequestInit): Promise<ApiResult<T>> {
      try {
        const response = await fetch(input, {
          ...init,
          headers: { 'Content-Type': 'application/json', ...(init?.headers || {}) },
        });
        const body = response.status === 204 ? undefined : await response.json();
        if (!response.ok) {
          return { ok: false, error: body ?? { error: response.statusText } };
        }
        return { ok: true, data: body as T };
      } catch (err) {
        return { ok: false, error: { error: err instanceof Error ? err.message : 'Network error' } };
      }
    }
""")


def frontend_companions(task: TechnicalTask, files: list[GeneratedFile]) -> list[GeneratedFile]:
    return [
        GeneratedFile(
            path="src/types/api.ts", content=_API_TYPES, type=FileType.OTHER,
            origin=TaskType.FRONTEND,
        )
    ]


def backend_companions(task: TechnicalTask, files: list[GeneratedFile]) -> list[GeneratedFile]:
    extras = [auth_middleware()] if "auth" in task.title.lower() else []
    extras += [validation_utils(), environment_config()]
    tables = tables_for_task(task, include_generic=False)
    if tables:
        slug = sanitize_name(task.title).replace("-", "_") or "schema"
        extras.append(
            GeneratedFile(
                path=f"src/migrations/001_{slug}.sql",
                content=render_migration(tables, title=f"Migration: {task.title}"),
                type=FileType.SCHEMA,
                origin=TaskType.BACKEND,
            )
        )
    extras += scheduling_files(task)
    extras += service_files(task)
    return extras


def add_companions(task: TechnicalTask, files: list[GeneratedFile]) -> list[GeneratedFile]:
    """Return *files* followed by any companion whose path is not taken yet."""
    if task.type is TaskType.FRONTEND:
        extras = frontend_companions(task, files)
    elif task.type is TaskType.BACKEND:
        extras = backend_companions(task, files)
    else:
        return list(files)

    taken = {f.path for f in files}
    return list(files) + [extra for extra in extras if extra.path not in taken]
