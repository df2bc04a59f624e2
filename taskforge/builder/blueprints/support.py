"""Backend support modules added next to remotely generated routes.

Unlike the blueprints, which key on the task title, these rules read the
whole task text (title, description and acceptance criteria).  Services and
job modules are in-memory and self-contained; the scheduler only imports the
job modules that were actually produced.
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass

from taskforge.planner.models import FileType, GeneratedFile, TaskType, TechnicalTask


def _source(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


def _file(path: str, content: str, file_type: FileType = FileType.OTHER) -> GeneratedFile:
    return GeneratedFile(path=path, content=content, type=file_type, origin=TaskType.BACKEND)


def task_text(task: TechnicalTask) -> str:
    """Lowercased title, description and acceptance criteria joined by spaces."""
    return " ".join([task.title, task.description, *task.acceptance_criteria]).lower()


@dataclass(frozen=True)
class SupportRule:
    """A support module emitted when any keyword appears in the task text."""

    path: str
    keywords: tuple[str, ...]
    content: str

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

_ENVIRONMENT = _source(r"""
    import dotenv from 'dotenv';

    dotenv.config();

    export interface EnvironmentConfig {
      port: number;
      nodeEnv: string;
      jwtSecret: string;
      databaseUrl: string;
      corsOrigin: string;
      logLevel: string;
    }

    export const config: EnvironmentConfig = {
      port: Number(process.env.PORT || 3001),
      nodeEnv: process.env.NODE_ENV || 'development',
      jwtSecret: process.env.JWT_SECRET || 'change-me-in-production',
      databaseUrl: process.env.DATABASE_URL || '',
      corsOrigin: process.env.CORS_ORIGIN || 'http://localhost:5173',
      logLevel: process.env.LOG_LEVEL || 'info',
    };

    export function validateEnvironment(): void {
      if (config.nodeEnv === 'production' && config.jwtSecret === 'change-me-in-production') {
        throw new Error('JWT_SECRET must be set in production');
      }
    }
""")


def environment_config() -> GeneratedFile:
    return _file("src/config/environment.ts", _ENVIRONMENT, FileType.CONFIG)


# ---------------------------------------------------------------------------
# Domain services
# ---------------------------------------------------------------------------

_TASK_SERVICE = _source(r"""
    export type TaskStatus = 'todo' | 'in_progress' | 'done';
    export type TaskPriority = 'low' | 'medium' | 'high' | 'critical';

    const TRANSITIONS: Record<TaskStatus, TaskStatus[]> = {
      todo: ['in_progress', 'done'],
      in_progress: ['todo', 'done'],
      done: ['todo'],
    };

    export const PRIORITIES: TaskPriority[] = ['low', 'medium', 'high', 'critical'];

    export function canTransition(from: TaskStatus, to: TaskStatus): boolean {
      return from === to || TRANSITIONS[from].includes(to);
    }

    export function isOverdue(dueDate: Date | null | undefined, status: TaskStatus, now = new Date()): boolean {
      return Boolean(dueDate) && status !== 'done' && (dueDate as Date).getTime() < now.getTime();
    }

    export function sortByUrgency<T extends { priority: TaskPriority; dueDate?: Date | null }>(tasks: T[]): T[] {
      return [...tasks].sort((a, b) => {
        const byPriority = PRIORITIES.indexOf(b.priority) - PRIORITIES.indexOf(a.priority);
        if (byPriority !== 0) {
          return byPriority;
        }
        const aDue = a.dueDate ? a.dueDate.getTime() : Infinity;
        const bDue = b.dueDate ? b.dueDate.getTime() : Infinity;
        return aDue - bDue;
      });
    }
""")

_SHARING_SERVICE = _source(r"""
    export type Permission = 'view' | 'edit' | 'admin';

    const RANK: Record<Permission, number> = { view: 1, edit: 2, admin: 3 };
    const grants = new Map<string, Map<string, Permission>>();

    export const sharingService = {
      share(resourceId: string, userId: string, permission: Permission): void {
        const users = grants.get(resourceId) ?? new Map<string, Permission>();
        users.set(userId, permission);
        grants.set(resourceId, users);
      },

      revoke(resourceId: string, userId: string): boolean {
        return grants.get(resourceId)?.delete(userId) ?? false;
      },

      can(resourceId: string, userId: string, needed: Permission): boolean {
        const granted = grants.get(resourceId)?.get(userId);
        return granted !== undefined && RANK[granted] >= RANK[needed];
      },

      collaborators(resourceId: string): Array<{ userId: string; permission: Permission }> {
        return [...(grants.get(resourceId)?.entries() ?? [])].map(([userId, permission]) => ({ userId, permission }));
      },
    };
""")

_NOTIFICATION_SERVICE = _source(r"""
    import { randomUUID } from 'crypto';

    export interface Notification {
      id: string;
      userId: string;
      message: string;
      read: boolean;
      createdAt: Date;
    }

    const notifications: Notification[] = [];

    export const notificationService = {
      notify(userId: string, message: string): Notification {
        const notification = { id: randomUUID(), userId, message, read: false, createdAt: new Date() };
        notifications.push(notification);
        return notification;
      },

      unread(userId: string): Notification[] {
        return notifications.filter((n) => n.userId === userId && !n.read);
      },

      markRead(id: string): boolean {
        const notification = notifications.find((n) => n.id === id);
        if (!notification) {
          return false;
        }
        notification.read = true;
        return true;
      },
    };
""")

_COMMENT_SERVICE = _source(r"""
    import { randomUUID } from 'crypto';

    export interface Comment {
      id: string;
      resourceId: string;
      authorId: string;
      body: string;
      createdAt: Date;
    }

    const MAX_LENGTH = 2000;
    const comments: Comment[] = [];

    export const commentService = {
      add(resourceId: string, authorId: string, body: string): Comment {
        const text = body.trim();
        if (!text) {
          throw new Error('Comment body is required');
        }
        if (text.length > MAX_LENGTH) {
          throw new Error(`Comment must be at most ${MAX_LENGTH} characters`);
        }
        const comment = { id: randomUUID(), resourceId, authorId, body: text, createdAt: new Date() };
        comments.push(comment);
        return comment;
      },

      list(resourceId: string): Comment[] {
        return comments.filter((c) => c.resourceId === resourceId);
      },

      remove(id: string, authorId: string): boolean {
        const index = comments.findIndex((c) => c.id === id && c.authorId === authorId);
        if (index === -1) {
          return false;
        }
        comments.splice(index, 1);
        return true;
      },
    };
""")

_FILE_SERVICE = _source(r"""
    import { randomUUID } from 'crypto';

    export interface StoredFile {
      id: string;
      ownerId: string;
      name: string;
      mimeType: string;
      size: number;
    }

    export const MAX_FILE_SIZE = 10 * 1024 * 1024;
    export const ALLOWED_MIME_TYPES = ['image/png', 'image/jpeg', 'application/pdf', 'text/plain'];

    const files = new Map<string, StoredFile>();

    export const fileService = {
      validate(mimeType: string, size: number): string | null {
        if (!ALLOWED_MIME_TYPES.includes(mimeType)) {
          return `Unsupported file type: ${mimeType}`;
        }
        if (size > MAX_FILE_SIZE) {
          return 'File exceeds the 10MB limit';
        }
        return null;
      },

      register(ownerId: string, name: string, mimeType: string, size: number): StoredFile {
        const problem = fileService.validate(mimeType, size);
        if (problem) {
          throw new Error(problem);
        }
        const file = { id: randomUUID(), ownerId, name, mimeType, size };
        files.set(file.id, file);
        return file;
      },

      listFor(ownerId: string): StoredFile[] {
        return [...files.values()].filter((f) => f.ownerId === ownerId);
      },
    };
""")

SERVICE_RULES: tuple[SupportRule, ...] = (
    SupportRule("src/services/taskService.ts", ("task", "todo", "item"), _TASK_SERVICE),
    SupportRule("src/services/sharingService.ts", ("share", "collab", "team"), _SHARING_SERVICE),
    SupportRule(
        "src/services/notificationService.ts", ("notif", "alert", "reminder"), _NOTIFICATION_SERVICE
    ),
    SupportRule("src/services/commentService.ts", ("comment", "discuss", "feedback"), _COMMENT_SERVICE),
    SupportRule("src/services/fileService.ts", ("file", "attachment", "upload"), _FILE_SERVICE),
)


def service_files(task: TechnicalTask) -> list[GeneratedFile]:
    text = task_text(task)
    return [_file(rule.path, rule.content) for rule in SERVICE_RULES if rule.matches(text)]


# ---------------------------------------------------------------------------
# Scheduled jobs
# ---------------------------------------------------------------------------

SCHEDULING_KEYWORDS: tuple[str, ...] = (
    "schedule", "cron", "daily", "weekly", "monthly",
    "reminder", "notification", "alert", "email",
    "cleanup", "archive", "delete old",
    "report", "summary", "analytics",
    "backup", "export", "sync",
    "recurring", "periodic", "automated",
)

_JOB_TYPES = _source(r"""
    export interface ScheduledJob {
      name: string;
      description: string;
      intervalMs: number;
      run: () => Promise<void>;
    }

    export interface JobRun {
      name: string;
      startedAt: Date;
      durationMs: number;
      error?: string;
    }

    export const HOUR = 60 * 60 * 1000;
    export const DAY = 24 * HOUR;
""")

_NOTIFICATION_JOBS = _source(r"""
    import { DAY, HOUR, ScheduledJob } from '../types/jobs';

    export const notificationJobs: ScheduledJob[] = [
      {
        name: 'daily-reminders',
        description: 'Send reminders for tasks due tomorrow',
        intervalMs: DAY,
        run: async () => {
          console.log('Sending daily task reminders');
        },
      },
      {
        name: 'overdue-alerts',
        description: 'Alert owners about overdue tasks',
        intervalMs: 4 * HOUR,
        run: async () => {
          console.log('Sending overdue task alerts');
        },
      },
    ];
""")

_CLEANUP_JOBS = _source(r"""
    import { DAY, HOUR, ScheduledJob } from '../types/jobs';

    export const RETENTION_DAYS = 90;

    export const cleanupJobs: ScheduledJob[] = [
      {
        name: 'cleanup-completed-tasks',
        description: `Archive tasks completed more than ${RETENTION_DAYS} days ago`,
        intervalMs: 7 * DAY,
        run: async () => {
          const cutoff = new Date(Date.now() - RETENTION_DAYS * DAY);
          console.log(`Archiving completed tasks older than ${cutoff.toISOString()}`);
        },
      },
      {
        name: 'cleanup-expired-sessions',
        description: 'Drop expired sessions',
        intervalMs: 6 * HOUR,
        run: async () => {
          console.log('Removing expired sessions');
        },
      },
    ];
""")

_REPORT_JOBS = _source(r"""
    import { DAY, ScheduledJob } from '../types/jobs';

    export const reportJobs: ScheduledJob[] = [
      {
        name: 'weekly-reports',
        description: 'Build weekly productivity summaries',
        intervalMs: 7 * DAY,
        run: async () => {
          console.log('Generating weekly reports');
        },
      },
    ];
""")

_BACKUP_JOBS = _source(r"""
    import { promises as fs } from 'fs';
    import path from 'path';
    import { DAY, ScheduledJob } from '../types/jobs';

    export const BACKUP_DIR = process.env.BACKUP_DIR || path.join(process.cwd(), 'backups');

    export const backupJobs: ScheduledJob[] = [
      {
        name: 'daily-backup',
        description: 'Write a timestamped backup marker',
        intervalMs: DAY,
        run: async () => {
          await fs.mkdir(BACKUP_DIR, { recursive: true });
          const stamp = new Date().toISOString().replace(/[:.]/g, '-');
          await fs.writeFile(path.join(BACKUP_DIR, `backup-${stamp}.json`), JSON.stringify({ stamp }));
        },
      },
    ];
""")

JOB_RULES: tuple[SupportRule, ...] = (
    SupportRule("src/jobs/notificationJobs.ts", ("email", "notification", "reminder"), _NOTIFICATION_JOBS),
    SupportRule("src/jobs/cleanupJobs.ts", ("cleanup", "delete", "archive"), _CLEANUP_JOBS),
    SupportRule("src/jobs/reportJobs.ts", ("report", "analytics", "summary"), _REPORT_JOBS),
    SupportRule("src/jobs/backupJobs.ts", ("backup", "export"), _BACKUP_JOBS),
)

_SCHEDULER_BODY = _source(r"""
    const timers = new Map<string, NodeJS.Timeout>();
    export const history: JobRun[] = [];

    async function execute(job: ScheduledJob): Promise<void> {
      const startedAt = new Date();
      try {
        await job.run();
        history.push({ name: job.name, startedAt, durationMs: Date.now() - startedAt.getTime() });
      } catch (error) {
        const message = error instanceof Error ? error.message : String(error);
        history.push({ name: job.name, startedAt, durationMs: Date.now() - startedAt.getTime(), error: message });
        console.error(`Job ${job.name} failed: ${message}`);
      }
    }

    export function startScheduler(): void {
      for (const job of jobs) {
        if (!timers.has(job.name)) {
          timers.set(job.name, setInterval(() => void execute(job), job.intervalMs));
        }
      }
    }

    export function stopScheduler(): void {
      timers.forEach((timer) => clearInterval(timer));
      timers.clear();
    }

    export async function runNow(name: string): Promise<boolean> {
      const job = jobs.find((j) => j.name === name);
      if (!job) {
        return false;
      }
      await execute(job);
      return true;
    }
""")


def _scheduler(job_paths: list[str]) -> str:
    names = [path.rsplit("/", 1)[-1].removesuffix(".ts") for path in job_paths]
    lines = ["import { JobRun, ScheduledJob } from '../types/jobs';"]
    lines += [f"import {{ {name} }} from './{name}';" for name in names]
    spread = ", ".join(f"...{name}" for name in names)
    lines += ["", f"export const jobs: ScheduledJob[] = [{spread}];", ""]
    return "\n".join(lines) + "\n" + _SCHEDULER_BODY


def needs_scheduling(task: TechnicalTask) -> bool:
    text = task_text(task)
    return any(keyword in text for keyword in SCHEDULING_KEYWORDS)


def scheduling_files(task: TechnicalTask) -> list[GeneratedFile]:
    """Job types, the matched job modules and a scheduler wiring them up."""
    if not needs_scheduling(task):
        return []
    text = task_text(task)
    jobs = [_file(rule.path, rule.content) for rule in JOB_RULES if rule.matches(text)]
    return [
        _file("src/types/jobs.ts", _JOB_TYPES),
        *jobs,
        _file("src/jobs/scheduler.ts", _scheduler([job.path for job in jobs])),
    ]
