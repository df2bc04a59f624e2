"""Hand-authored Express/TypeScript file sets for backend tasks.

Every topic ships its own router module (``src/routes/*Routes.ts``) with a
default export.  Routers declare full sub-paths (``/auth/login``,
``/tasks/:id``) so the assembler's generated server can mount them all under
``/api`` without knowing which topics were produced.  Persistence is
in-memory unless the database topic contributes a connection module.
"""

from __future__ import annotations

import re
import textwrap

from taskforge.builder.schema_gen import render_migration, tables_for_task
from taskforge.planner.models import FileType, GeneratedFile, TaskType, TechnicalTask
from taskforge.utils import pascal_case, sanitize_name


def _source(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


def _file(path: str, content: str, file_type: FileType) -> GeneratedFile:
    return GeneratedFile(path=path, content=content, type=file_type, origin=TaskType.BACKEND)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

_USER_MODEL = _source(r"""
    import { randomUUID } from 'crypto';

    export interface User {
      id: string;
      email: string;
      name: string;
      passwordHash: string;
      createdAt: Date;
      updatedAt: Date;
    }

    export type PublicUser = Omit<User, 'passwordHash'>;

    const users = new Map<string, User>();

    export const UserModel = {
      async findByEmail(email: string): Promise<User | undefined> {
        const normalized = email.trim().toLowerCase();
        return [...users.values()].find((user) => user.email === normalized);
      },

      async findById(id: string): Promise<User | undefined> {
        return users.get(id);
      },

      async create(data: { email: string; name: string; passwordHash: string }): Promise<User> {
        const now = new Date();
        const user: User = {
          id: randomUUID(),
          email: data.email.trim().toLowerCase(),
          name: data.name.trim(),
          passwordHash: data.passwordHash,
          createdAt: now,
          updatedAt: now,
        };
        users.set(user.id, user);
        return user;
      },

      toPublic(user: User): PublicUser {
        const { passwordHash, ...rest } = user;
        return rest;
      },
    };
""")

_VALIDATION_UTILS = _source(r"""
    const EMAIL_PATTERN = /^[^\s@]+@[^\s@]+\.[^\s@]+$/;

    export function isValidEmail(email: unknown): email is string {
      return typeof email === 'string' && EMAIL_PATTERN.test(email.trim());
    }

    export function validatePassword(password: unknown): string | null {
      if (typeof password !== 'string' || password.length < 8) {
        return 'Password must be at least 8 characters';
      }
      if (!/[A-Za-z]/.test(password) || !/[0-9]/.test(password)) {
        return 'Password must contain letters and numbers';
      }
      return null;
    }

    export function missingFields(body: Record<string, unknown>, fields: string[]): string[] {
      return fields.filter((field) => {
        const value = body[field];
        return value === undefined || value === null || (typeof value === 'string' && !value.trim());
      });
    }
""")

_AUTH_MIDDLEWARE = _source(r"""
    import { NextFunction, Request, Response } from 'express';
    import jwt from 'jsonwebtoken';

    export interface AuthenticatedRequest extends Request {
      userId?: string;
    }

    export const JWT_SECRET = process.env.JWT_SECRET || 'change-me-in-production';

    export function authenticate(req: AuthenticatedRequest, res: Response, next: NextFunction): void {
      const header = req.headers.authorization;
      if (!header || !header.startsWith('Bearer ')) {
        res.status(401).json({ error: 'Authentication required' });
        return;
      }

      try {
        const payload = jwt.verify(header.slice('Bearer '.length), JWT_SECRET) as { sub: string };
        req.userId = payload.sub;
        next();
      } catch (error) {
        res.status(401).json({ error: 'Invalid or expired token' });
      }
    }
""")

_AUTH_CONTROLLER = _source(r"""
    import { Response } from 'express';
    import bcrypt from 'bcrypt';
    import jwt from 'jsonwebtoken';
    import { AuthenticatedRequest, JWT_SECRET } from '../middleware/auth';
    import { UserModel } from '../models/User';
    import { isValidEmail, missingFields, validatePassword } from '../utils/validation';

    const SALT_ROUNDS = 12;
    const TOKEN_TTL = process.env.JWT_EXPIRES_IN || '24h';

    function issueToken(userId: string): string {
      return jwt.sign({ sub: userId }, JWT_SECRET, { expiresIn: TOKEN_TTL } as jwt.SignOptions);
    }

    export class AuthController {
      static async register(req: AuthenticatedRequest, res: Response): Promise<void> {
        try {
          const missing = missingFields(req.body, ['name', 'email', 'password']);
          if (missing.length > 0) {
            res.status(400).json({ error: `Missing fields: ${missing.join(', ')}` });
            return;
          }

          const { name, email, password } = req.body;
          if (!isValidEmail(email)) {
            res.status(400).json({ error: 'Invalid email address' });
            return;
          }
          const passwordError = validatePassword(password);
          if (passwordError) {
            res.status(400).json({ error: passwordError });
            return;
          }
          if (await UserModel.findByEmail(email)) {
            res.status(409).json({ error: 'Email is already registered' });
            return;
          }

          const passwordHash = await bcrypt.hash(password, SALT_ROUNDS);
          const user = await UserModel.create({ name, email, passwordHash });
          res.status(201).json({ user: UserModel.toPublic(user), token: issueToken(user.id) });
        } catch (error) {
          res.status(500).json({ error: 'Registration failed' });
        }
      }

      static async login(req: AuthenticatedRequest, res: Response): Promise<void> {
        try {
          const { email, password } = req.body;
          if (!isValidEmail(email) || typeof password !== 'string') {
            res.status(400).json({ error: 'Email and password are required' });
            return;
          }

          const user = await UserModel.findByEmail(email);
          if (!user || !(await bcrypt.compare(password, user.passwordHash))) {
            res.status(401).json({ error: 'Invalid email or password' });
            return;
          }

          res.json({ user: UserModel.toPublic(user), token: issueToken(user.id) });
        } catch (error) {
          res.status(500).json({ error: 'Login failed' });
        }
      }

      static async me(req: AuthenticatedRequest, res: Response): Promise<void> {
        const user = req.userId ? await UserModel.findById(req.userId) : undefined;
        if (!user) {
          res.status(404).json({ error: 'User not found' });
          return;
        }
        res.json({ user: UserModel.toPublic(user) });
      }
    }
""")

_AUTH_ROUTES = _source(r"""
    import { Router } from 'express';
    import { AuthController } from '../controllers/AuthController';
    import { authenticate } from '../middleware/auth';

    const router = Router();

    router.post('/auth/register', AuthController.register);
    router.post('/auth/login', AuthController.login);
    router.get('/auth/me', authenticate, AuthController.me);

    export default router;
""")


def validation_utils() -> GeneratedFile:
    return _file("src/utils/validation.ts", _VALIDATION_UTILS, FileType.OTHER)


def auth_middleware() -> GeneratedFile:
    return _file("src/middleware/auth.ts", _AUTH_MIDDLEWARE, FileType.OTHER)


def auth_files(task: TechnicalTask) -> list[GeneratedFile]:
    return [
        _file("src/controllers/AuthController.ts", _AUTH_CONTROLLER, FileType.API),
        auth_middleware(),
        _file("src/models/User.ts", _USER_MODEL, FileType.SCHEMA),
        validation_utils(),
        _file("src/routes/authRoutes.ts", _AUTH_ROUTES, FileType.API),
    ]


# ---------------------------------------------------------------------------
# Task management
# ---------------------------------------------------------------------------

_TASK_MODEL = _source(r"""
    import { randomUUID } from 'crypto';

    export type TaskStatus = 'pending' | 'in_progress' | 'completed';
    export type TaskPriority = 'low' | 'medium' | 'high';

    export const TASK_STATUSES: TaskStatus[] = ['pending', 'in_progress', 'completed'];
    export const TASK_PRIORITIES: TaskPriority[] = ['low', 'medium', 'high'];

    export interface Task {
      id: string;
      title: string;
      description?: string;
      status: TaskStatus;
      priority: TaskPriority;
      dueDate?: string;
      createdAt: string;
      updatedAt: string;
    }

    export type TaskChanges = Partial<Pick<Task, 'title' | 'description' | 'status' | 'priority' | 'dueDate'>>;

    const tasks = new Map<string, Task>();

    export const TaskModel = {
      async list(status?: TaskStatus): Promise<Task[]> {
        const all = [...tasks.values()].sort((a, b) => b.createdAt.localeCompare(a.createdAt));
        return status ? all.filter((task) => task.status === status) : all;
      },

      async get(id: string): Promise<Task | undefined> {
        return tasks.get(id);
      },

      async create(data: { title: string } & TaskChanges): Promise<Task> {
        const now = new Date().toISOString();
        const task: Task = {
          id: randomUUID(),
          title: data.title,
          description: data.description,
          status: data.status ?? 'pending',
          priority: data.priority ?? 'medium',
          dueDate: data.dueDate,
          createdAt: now,
          updatedAt: now,
        };
        tasks.set(task.id, task);
        return task;
      },

      async update(id: string, changes: TaskChanges): Promise<Task | undefined> {
        const existing = tasks.get(id);
        if (!existing) return undefined;
        const updated: Task = { ...existing, ...changes, updatedAt: new Date().toISOString() };
        tasks.set(id, updated);
        return updated;
      },

      async remove(id: string): Promise<boolean> {
        return tasks.delete(id);
      },
    };
""")

_TASK_CONTROLLER = _source(r"""
    import { Request, Response } from 'express';
    import { TASK_PRIORITIES, TASK_STATUSES, TaskChanges, TaskModel, TaskStatus } from '../models/Task';

    function parseChanges(body: Record<string, unknown>): { changes: TaskChanges; error?: string } {
      const changes: TaskChanges = {};
      if (body.title !== undefined) {
        if (typeof body.title !== 'string' || !body.title.trim()) {
          return { changes, error: 'Title must be a non-empty string' };
        }
        changes.title = body.title.trim();
      }
      if (body.description !== undefined) {
        changes.description = String(body.description);
      }
      if (body.status !== undefined) {
        if (!TASK_STATUSES.includes(body.status as TaskStatus)) {
          return { changes, error: `Status must be one of ${TASK_STATUSES.join(', ')}` };
        }
        changes.status = body.status as TaskStatus;
      }
      if (body.priority !== undefined) {
        if (!TASK_PRIORITIES.includes(body.priority as never)) {
          return { changes, error: `Priority must be one of ${TASK_PRIORITIES.join(', ')}` };
        }
        changes.priority = body.priority as TaskChanges['priority'];
      }
      if (body.dueDate !== undefined) {
        if (Number.isNaN(Date.parse(String(body.dueDate)))) {
          return { changes, error: 'dueDate must be a valid date' };
        }
        changes.dueDate = String(body.dueDate);
      }
      return { changes };
    }

    export class TaskController {
      static async list(req: Request, res: Response): Promise<void> {
        try {
          const status = req.query.status as TaskStatus | undefined;
          res.json(await TaskModel.list(status));
        } catch (error) {
          res.status(500).json({ error: 'Could not load tasks' });
        }
      }

      static async get(req: Request, res: Response): Promise<void> {
        const task = await TaskModel.get(req.params.id);
        if (!task) {
          res.status(404).json({ error: 'Task not found' });
          return;
        }
        res.json(task);
      }

      static async create(req: Request, res: Response): Promise<void> {
        try {
          const { changes, error } = parseChanges(req.body ?? {});
          if (error || !changes.title) {
            res.status(400).json({ error: error ?? 'Title is required' });
            return;
          }
          const task = await TaskModel.create({ ...changes, title: changes.title });
          res.status(201).json(task);
        } catch (error) {
          res.status(500).json({ error: 'Could not create task' });
        }
      }

      static async update(req: Request, res: Response): Promise<void> {
        try {
          const { changes, error } = parseChanges(req.body ?? {});
          if (error) {
            res.status(400).json({ error });
            return;
          }
          const task = await TaskModel.update(req.params.id, changes);
          if (!task) {
            res.status(404).json({ error: 'Task not found' });
            return;
          }
          res.json(task);
        } catch (error) {
          res.status(500).json({ error: 'Could not update task' });
        }
      }

      static async remove(req: Request, res: Response): Promise<void> {
        try {
          const removed = await TaskModel.remove(req.params.id);
          if (!removed) {
            res.status(404).json({ error: 'Task not found' });
            return;
          }
          res.status(204).send();
        } catch (error) {
          res.status(500).json({ error: 'Could not delete task' });
        }
      }
    }
""")

_TASK_ROUTES = _source(r"""
    import { Router } from 'express';
    import { TaskController } from '../controllers/TaskController';

    const router = Router();

    router.get('/tasks', TaskController.list);
    router.post('/tasks', TaskController.create);
    router.get('/tasks/:id', TaskController.get);
    router.put('/tasks/:id', TaskController.update);
    router.delete('/tasks/:id', TaskController.remove);

    export default router;
""")


def task_files(task: TechnicalTask) -> list[GeneratedFile]:
    return [
        _file("src/controllers/TaskController.ts", _TASK_CONTROLLER, FileType.API),
        _file("src/models/Task.ts", _TASK_MODEL, FileType.SCHEMA),
        _file("src/routes/taskRoutes.ts", _TASK_ROUTES, FileType.API),
    ]


# ---------------------------------------------------------------------------
# Sharing
# ---------------------------------------------------------------------------

_SHARING_CONTROLLER = _source(r"""
    import { Request, Response } from 'express';

    export type SharePermission = 'view' | 'edit';

    export interface TaskShare {
      taskId: string;
      email: string;
      permission: SharePermission;
      sharedAt: string;
    }

    const shares = new Map<string, TaskShare[]>();
    const EMAIL_PATTERN = /^[^\s@]+@[^\s@]+\.[^\s@]+$/;

    export class SharingController {
      static async share(req: Request, res: Response): Promise<void> {
        try {
          const { email, permission = 'view' } = req.body ?? {};
          if (typeof email !== 'string' || !EMAIL_PATTERN.test(email)) {
            res.status(400).json({ error: 'A valid email is required' });
            return;
          }
          if (permission !== 'view' && permission !== 'edit') {
            res.status(400).json({ error: 'Permission must be view or edit' });
            return;
          }

          const taskId = req.params.id;
          const current = (shares.get(taskId) ?? []).filter((share) => share.email !== email);
          const share: TaskShare = { taskId, email: email.toLowerCase(), permission, sharedAt: new Date().toISOString() };
          shares.set(taskId, [...current, share]);
          res.status(201).json(share);
        } catch (error) {
          res.status(500).json({ error: 'Could not share task' });
        }
      }

      static async list(req: Request, res: Response): Promise<void> {
        res.json(shares.get(req.params.id) ?? []);
      }

      static async revoke(req: Request, res: Response): Promise<void> {
        const taskId = req.params.id;
        const current = shares.get(taskId) ?? [];
        const remaining = current.filter((share) => share.email !== req.params.email.toLowerCase());
        if (remaining.length === current.length) {
          res.status(404).json({ error: 'Share not found' });
          return;
        }
        shares.set(taskId, remaining);
        res.status(204).send();
      }
    }
""")

_SHARING_ROUTES = _source(r"""
    import { Router } from 'express';
    import { SharingController } from '../controllers/SharingController';

    const router = Router();

    router.post('/tasks/:id/share', SharingController.share);
    router.get('/tasks/:id/shares', SharingController.list);
    router.delete('/tasks/:id/shares/:email', SharingController.revoke);

    export default router;
""")


def sharing_files(task: TechnicalTask) -> list[GeneratedFile]:
    return [
        _file("src/controllers/SharingController.ts", _SHARING_CONTROLLER, FileType.API),
        _file("src/routes/sharingRoutes.ts", _SHARING_ROUTES, FileType.API),
    ]


# ---------------------------------------------------------------------------
# API foundation
# ---------------------------------------------------------------------------

_ERROR_HANDLER = _source(r"""
    import { NextFunction, Request, Response } from 'express';

    export class HttpError extends Error {
      constructor(public readonly status: number, message: string) {
        super(message);
        this.name = 'HttpError';
      }
    }

    export function notFoundHandler(req: Request, res: Response): void {
      res.status(404).json({ error: `Route not found: ${req.method} ${req.path}` });
    }

    export function errorHandler(err: Error, req: Request, res: Response, next: NextFunction): void {
      if (res.headersSent) {
        next(err);
        return;
      }
      const status = err instanceof HttpError ? err.status : 500;
      if (status >= 500) {
        console.error(`[${new Date().toISOString()}] ${req.method} ${req.path}:`, err);
      }
      res.status(status).json({
        error: status >= 500 && process.env.NODE_ENV === 'production' ? 'Internal server error' : err.message,
      });
    }
""")

_REQUEST_LOGGER = _source(r"""
    import { NextFunction, Request, Response } from 'express';

    export function requestLogger(req: Request, res: Response, next: NextFunction): void {
      const started = Date.now();
      res.on('finish', () => {
        const elapsed = Date.now() - started;
        console.log(`${req.method} ${req.originalUrl} ${res.statusCode} ${elapsed}ms`);
      });
      next();
    }
""")

_VALIDATE_BODY = _source(r"""
    import { NextFunction, Request, Response } from 'express';

    export function requireBody(fields: string[]) {
      return (req: Request, res: Response, next: NextFunction): void => {
        if (!req.body || typeof req.body !== 'object') {
          res.status(400).json({ error: 'Request body must be a JSON object' });
          return;
        }
        const missing = fields.filter((field) => req.body[field] === undefined || req.body[field] === '');
        if (missing.length > 0) {
          res.status(400).json({ error: `Missing fields: ${missing.join(', ')}` });
          return;
        }
        next();
      };
    }
""")


def api_foundation_files(task: TechnicalTask) -> list[GeneratedFile]:
    return [
        _file("src/middleware/errorHandler.ts", _ERROR_HANDLER, FileType.OTHER),
        _file("src/middleware/requestLogger.ts", _REQUEST_LOGGER, FileType.OTHER),
        _file("src/middleware/validateBody.ts", _VALIDATE_BODY, FileType.OTHER),
    ]


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

_DATABASE_CONFIG = _source(r"""
    import { Pool, QueryResultRow } from 'pg';

    export const pool = new Pool({
      connectionString: process.env.DATABASE_URL,
      max: Number(process.env.DB_POOL_SIZE || 10),
      idleTimeoutMillis: 30000,
    });

    export async function query<T extends QueryResultRow>(text: string, params: unknown[] = []): Promise<T[]> {
      const result = await pool.query<T>(text, params);
      return result.rows;
    }

    export async function checkConnection(): Promise<boolean> {
      try {
        await pool.query('SELECT 1');
        return true;
      } catch (error) {
        console.error('Database connection failed:', error);
        return false;
      }
    }
""")


def database_files(task: TechnicalTask) -> list[GeneratedFile]:
    migration = render_migration(tables_for_task(task), title=f"Migration: {task.title}")
    return [
        _file("src/config/database.ts", _DATABASE_CONFIG, FileType.CONFIG),
        _file("src/migrations/001_initial_schema.sql", migration, FileType.SCHEMA),
    ]


# ---------------------------------------------------------------------------
# Generic scaffold
# ---------------------------------------------------------------------------

def generic_files(task: TechnicalTask) -> list[GeneratedFile]:
    """In-memory CRUD controller and router named after the task."""
    name = pascal_case(task.title) or "Resource"
    if name[0].isdigit():
        name = f"Resource{name}"
    slug = sanitize_name(task.title) or "resources"
    router_name = name[0].lower() + name[1:]
    description = re.sub(r"\s+", " ", task.description).replace("*/", "* /")

    controller = _source(f"""
        import {{ Request, Response }} from 'express';
        import {{ randomUUID }} from 'crypto';

        /** {description} */
        interface Record_ {{
          id: string;
          [key: string]: unknown;
        }}

        const records = new Map<string, Record_>();

        export class {name}Controller {{
          static async list(req: Request, res: Response): Promise<void> {{
            res.json([...records.values()]);
          }}

          static async create(req: Request, res: Response): Promise<void> {{
            if (!req.body || typeof req.body !== 'object') {{
              res.status(400).json({{ error: 'Request body must be a JSON object' }});
              return;
            }}
            const record: Record_ = {{ ...req.body, id: randomUUID() }};
            records.set(record.id, record);
            res.status(201).json(record);
          }}

          static async remove(req: Request, res: Response): Promise<void> {{
            if (!records.delete(req.params.id)) {{
              res.status(404).json({{ error: 'Not found' }});
              return;
            }}
            res.status(204).send();
          }}
        }}
    """)
    routes = _source(f"""
        import {{ Router }} from 'express';
        import {{ {name}Controller }} from '../controllers/{name}Controller';

        const router = Router();

        router.get('/{slug}', {name}Controller.list);
        router.post('/{slug}', {name}Controller.create);
        router.delete('/{slug}/:id', {name}Controller.remove);

        export default router;
    """)
    return [
        _file(f"src/controllers/{name}Controller.ts", controller, FileType.API),
        _file(f"src/routes/{router_name}Routes.ts", routes, FileType.API),
    ]
