"""Hand-authored React/TypeScript file sets for frontend tasks.

Each builder returns a self-contained set of files: components only import
siblings from the same set, so any subset of topics assembles cleanly.
Components that can render without props have a default export; the
assembler's generated ``App.tsx`` only mounts those.
"""

from __future__ import annotations

import textwrap

from taskforge.planner.models import FileType, GeneratedFile, TaskType, TechnicalTask
from taskforge.utils import pascal_case


def _source(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


def _file(path: str, content: str, file_type: FileType) -> GeneratedFile:
    return GeneratedFile(path=path, content=content, type=file_type, origin=TaskType.FRONTEND)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

_LOGIN_FORM = _source(r"""
    import React, { useState } from 'react';
    import './AuthForm.css';

    interface LoginFormProps {
      onLogin?: (token: string) => void;
      onSwitchToRegister?: () => void;
    }

    export const LoginForm: React.FC<LoginFormProps> = ({ onLogin, onSwitchToRegister }) => {
      const [email, setEmail] = useState('');
      const [password, setPassword] = useState('');
      const [error, setError] = useState<string | null>(null);
      const [loading, setLoading] = useState(false);

      const validate = (): string | null => {
        if (!email.includes('@')) return 'Please enter a valid email address';
        if (password.length < 8) return 'Password must be at least 8 characters';
        return null;
      };

      const handleSubmit = async (event: React.FormEvent<HTMLFormElement>) => {
        event.preventDefault();
        const validationError = validate();
        if (validationError) {
          setError(validationError);
          return;
        }

        setLoading(true);
        setError(null);
        try {
          const response = await fetch('/api/auth/login', {
            method: 'POST',
            headers: { 'Content-Type': 'application/json' },
            body: JSON.stringify({ email, password }),
          });
          const data = await response.json();
          if (!response.ok) {
            throw new Error(data.error || 'Login failed');
          }
          localStorage.setItem('token', data.token);
          onLogin?.(data.token);
        } catch (err) {
          setError(err instanceof Error ? err.message : 'Login failed');
        } finally {
          setLoading(false);
        }
      };

      return (
        <form className="auth-form" onSubmit={handleSubmit} role="form" noValidate>
          <h2 className="auth-form__title">Sign in</h2>
          {error && <div className="auth-form__error" role="alert">{error}</div>}

          <label htmlFor="login-email">Email</label>
          <input
            id="login-email"
            type="email"
            value={email}
            onChange={(e) => setEmail(e.target.value)}
            aria-label="email"
            required
          />

          <label htmlFor="login-password">Password</label>
          <input
            id="login-password"
            type="password"
            value={password}
            onChange={(e) => setPassword(e.target.value)}
            aria-label="password"
            required
          />

          <button type="submit" disabled={loading} tabIndex={0}>
            {loading ? 'Signing in...' : 'Sign in'}
          </button>
          {onSwitchToRegister && (
            <button type="button" className="auth-form__link" onClick={onSwitchToRegister} tabIndex={0}>
              Create an account
            </button>
          )}
        </form>
      );
    };

    export default LoginForm;
""")

_REGISTER_FORM = _source(r"""
    import React, { useState } from 'react';
    import './AuthForm.css';

    interface RegisterFormProps {
      onRegistered?: (token: string) => void;
    }

    interface RegisterFields {
      name: string;
      email: string;
      password: string;
      confirmPassword: string;
    }

    const EMPTY_FIELDS: RegisterFields = { name: '', email: '', password: '', confirmPassword: '' };

    export const RegisterForm: React.FC<RegisterFormProps> = ({ onRegistered }) => {
      const [fields, setFields] = useState<RegisterFields>(EMPTY_FIELDS);
      const [error, setError] = useState<string | null>(null);
      const [loading, setLoading] = useState(false);

      const update = (key: keyof RegisterFields) => (event: React.ChangeEvent<HTMLInputElement>) =>
        setFields({ ...fields, [key]: event.target.value });

      const validate = (): string | null => {
        if (fields.name.trim().length < 2) return 'Name must be at least 2 characters';
        if (!fields.email.includes('@')) return 'Please enter a valid email address';
        if (fields.password.length < 8) return 'Password must be at least 8 characters';
        if (fields.password !== fields.confirmPassword) return 'Passwords do not match';
        return null;
      };

      const handleSubmit = async (event: React.FormEvent<HTMLFormElement>) => {
        event.preventDefault();
        const validationError = validate();
        if (validationError) {
          setError(validationError);
          return;
        }

        setLoading(true);
        setError(null);
        try {
          const response = await fetch('/api/auth/register', {
            method: 'POST',
            headers: { 'Content-Type': 'application/json' },
            body: JSON.stringify({ name: fields.name, email: fields.email, password: fields.password }),
          });
          const data = await response.json();
          if (!response.ok) {
            throw new Error(data.error || 'Registration failed');
          }
          localStorage.setItem('token', data.token);
          setFields(EMPTY_FIELDS);
          onRegistered?.(data.token);
        } catch (err) {
          setError(err instanceof Error ? err.message : 'Registration failed');
        } finally {
          setLoading(false);
        }
      };

      return (
        <form className="auth-form" onSubmit={handleSubmit} role="form" noValidate>
          <h2 className="auth-form__title">Create an account</h2>
          {error && <div className="auth-form__error" role="alert">{error}</div>}

          <label htmlFor="register-name">Name</label>
          <input id="register-name" type="text" value={fields.name} onChange={update('name')} aria-label="name" required />

          <label htmlFor="register-email">Email</label>
          <input id="register-email" type="email" value={fields.email} onChange={update('email')} aria-label="email" required />

          <label htmlFor="register-password">Password</label>
          <input
            id="register-password"
            type="password"
            value={fields.password}
            onChange={update('password')}
            aria-label="password"
            required
          />

          <label htmlFor="register-confirm">Confirm password</label>
          <input
            id="register-confirm"
            type="password"
            value={fields.confirmPassword}
            onChange={update('confirmPassword')}
            aria-label="confirm password"
            required
          />

          <button type="submit" disabled={loading} tabIndex={0}>
            {loading ? 'Creating account...' : 'Register'}
          </button>
        </form>
      );
    };

    export default RegisterForm;
""")

_AUTH_CSS = _source(r"""
    .auth-form {
      display: flex;
      flex-direction: column;
      gap: 0.5rem;
      max-width: 400px;
      margin: 2rem auto;
      padding: 2rem;
      border-radius: 8px;
      box-shadow: 0 2px 12px rgba(0, 0, 0, 0.08);
      background: #fff;
    }

    .auth-form__title {
      margin: 0 0 1rem;
      text-align: center;
    }

    .auth-form input {
      padding: 0.75rem;
      border: 1px solid #d0d5dd;
      border-radius: 4px;
      font-size: 1rem;
    }

    .auth-form input:focus {
      outline: 2px solid #2563eb;
      border-color: transparent;
    }

    .auth-form button[type='submit'] {
      margin-top: 1rem;
      padding: 0.75rem;
      border: none;
      border-radius: 4px;
      background: #2563eb;
      color: #fff;
      font-size: 1rem;
      cursor: pointer;
    }

    .auth-form button:disabled {
      opacity: 0.6;
      cursor: not-allowed;
    }

    .auth-form__link {
      background: none;
      border: none;
      color: #2563eb;
      cursor: pointer;
    }

    .auth-form__error {
      padding: 0.75rem;
      border-radius: 4px;
      background: #fee2e2;
      color: #b91c1c;
    }

    @media (max-width: 480px) {
      .auth-form {
        margin: 1rem;
        padding: 1.25rem;
        box-shadow: none;
      }
    }
""")


def auth_components(task: TechnicalTask) -> list[GeneratedFile]:
    return [
        _file("src/components/auth/LoginForm.tsx", _LOGIN_FORM, FileType.COMPONENT),
        _file("src/components/auth/RegisterForm.tsx", _REGISTER_FORM, FileType.COMPONENT),
        _file("src/components/auth/AuthForm.css", _AUTH_CSS, FileType.OTHER),
    ]


# ---------------------------------------------------------------------------
# Task management
# ---------------------------------------------------------------------------

_TASK_TYPES = _source(r"""
    export type TaskStatus = 'pending' | 'in_progress' | 'completed';
    export type TaskPriority = 'low' | 'medium' | 'high';

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

    export interface TaskInput {
      title: string;
      description?: string;
      priority: TaskPriority;
      dueDate?: string;
    }
""")

_TASK_LIST = _source(r"""
    import React, { useCallback, useEffect, useState } from 'react';
    import { Task, TaskInput, TaskStatus } from '../../types/Task';
    import { TaskForm } from './TaskForm';
    import { TaskItem } from './TaskItem';
    import './TaskList.css';

    const authHeaders = (): Record<string, string> => {
      const token = localStorage.getItem('token');
      return token ? { Authorization: `Bearer ${token}` } : {};
    };

    async function request<T>(url: string, init: RequestInit = {}): Promise<T> {
      const response = await fetch(url, {
        ...init,
        headers: { 'Content-Type': 'application/json', ...authHeaders(), ...(init.headers || {}) },
      });
      if (!response.ok) {
        const body = await response.json().catch(() => ({}));
        throw new Error(body.error || `Request failed with status ${response.status}`);
      }
      return response.status === 204 ? (undefined as T) : response.json();
    }

    export const TaskList: React.FC = () => {
      const [tasks, setTasks] = useState<Task[]>([]);
      const [filter, setFilter] = useState<TaskStatus | 'all'>('all');
      const [error, setError] = useState<string | null>(null);
      const [loading, setLoading] = useState(true);

      const loadTasks = useCallback(async () => {
        setLoading(true);
        try {
          setTasks(await request<Task[]>('/api/tasks'));
          setError(null);
        } catch (err) {
          setError(err instanceof Error ? err.message : 'Could not load tasks');
        } finally {
          setLoading(false);
        }
      }, []);

      useEffect(() => {
        loadTasks();
      }, [loadTasks]);

      const createTask = async (input: TaskInput) => {
        try {
          const created = await request<Task>('/api/tasks', { method: 'POST', body: JSON.stringify(input) });
          setTasks((current) => [created, ...current]);
        } catch (err) {
          setError(err instanceof Error ? err.message : 'Could not create task');
        }
      };

      const updateTask = async (id: string, changes: Partial<Task>) => {
        try {
          const updated = await request<Task>(`/api/tasks/${id}`, {
            method: 'PUT',
            body: JSON.stringify(changes),
          });
          setTasks((current) => current.map((task) => (task.id === id ? updated : task)));
        } catch (err) {
          setError(err instanceof Error ? err.message : 'Could not update task');
        }
      };

      const deleteTask = async (id: string) => {
        try {
          await request<void>(`/api/tasks/${id}`, { method: 'DELETE' });
          setTasks((current) => current.filter((task) => task.id !== id));
        } catch (err) {
          setError(err instanceof Error ? err.message : 'Could not delete task');
        }
      };

      const visible = filter === 'all' ? tasks : tasks.filter((task) => task.status === filter);

      return (
        <section className="task-list">
          <header className="task-list__header">
            <h2>Tasks</h2>
            <select
              value={filter}
              onChange={(e) => setFilter(e.target.value as TaskStatus | 'all')}
              aria-label="Filter tasks by status"
            >
              <option value="all">All</option>
              <option value="pending">Pending</option>
              <option value="in_progress">In progress</option>
              <option value="completed">Completed</option>
            </select>
          </header>

          <TaskForm onSubmit={createTask} />

          {error && <div className="task-list__error" role="alert">{error}</div>}
          {loading ? (
            <p className="task-list__empty">Loading tasks...</p>
          ) : visible.length === 0 ? (
            <p className="task-list__empty">No tasks yet.</p>
          ) : (
            <ul className="task-list__items">
              {visible.map((task) => (
                <TaskItem key={task.id} task={task} onUpdate={updateTask} onDelete={deleteTask} />
              ))}
            </ul>
          )}
        </section>
      );
    };

    export default TaskList;
""")

_TASK_ITEM = _source(r"""
    import React, { useState } from 'react';
    import { Task, TaskStatus } from '../../types/Task';

    interface TaskItemProps {
      task: Task;
      onUpdate: (id: string, changes: Partial<Task>) => void;
      onDelete: (id: string) => void;
    }

    const NEXT_STATUS: Record<TaskStatus, TaskStatus> = {
      pending: 'in_progress',
      in_progress: 'completed',
      completed: 'pending',
    };

    export const TaskItem: React.FC<TaskItemProps> = ({ task, onUpdate, onDelete }) => {
      const [editing, setEditing] = useState(false);
      const [title, setTitle] = useState(task.title);

      const saveTitle = () => {
        const trimmed = title.trim();
        if (trimmed && trimmed !== task.title) {
          onUpdate(task.id, { title: trimmed });
        }
        setEditing(false);
      };

      return (
        <li className={`task-item task-item--${task.status} task-item--${task.priority}`}>
          {editing ? (
            <input
              value={title}
              onChange={(e) => setTitle(e.target.value)}
              onBlur={saveTitle}
              onKeyDown={(e) => e.key === 'Enter' && saveTitle()}
              aria-label="Task title"
              autoFocus
            />
          ) : (
            <span className="task-item__title" onDoubleClick={() => setEditing(true)}>
              {task.title}
            </span>
          )}
          {task.dueDate && <time className="task-item__due">{new Date(task.dueDate).toLocaleDateString()}</time>}
          <button type="button" onClick={() => onUpdate(task.id, { status: NEXT_STATUS[task.status] })} tabIndex={0}>
            {task.status.replace('_', ' ')}
          </button>
          <button type="button" onClick={() => setEditing(true)} tabIndex={0}>
            Edit
          </button>
          <button type="button" className="task-item__delete" onClick={() => onDelete(task.id)} tabIndex={0}>
            Delete
          </button>
        </li>
      );
    };
""")

_TASK_FORM = _source(r"""
    import React, { useState } from 'react';
    import { TaskInput, TaskPriority } from '../../types/Task';

    interface TaskFormProps {
      onSubmit?: (input: TaskInput) => void | Promise<void>;
    }

    export const TaskForm: React.FC<TaskFormProps> = ({ onSubmit }) => {
      const [title, setTitle] = useState('');
      const [description, setDescription] = useState('');
      const [priority, setPriority] = useState<TaskPriority>('medium');
      const [dueDate, setDueDate] = useState('');
      const [error, setError] = useState<string | null>(null);

      const handleSubmit = async (event: React.FormEvent<HTMLFormElement>) => {
        event.preventDefault();
        if (!title.trim()) {
          setError('Title is required');
          return;
        }
        setError(null);
        await onSubmit?.({
          title: title.trim(),
          description: description.trim() || undefined,
          priority,
          dueDate: dueDate || undefined,
        });
        setTitle('');
        setDescription('');
        setDueDate('');
      };

      return (
        <form className="task-form" onSubmit={handleSubmit} role="form">
          {error && <div className="task-form__error" role="alert">{error}</div>}
          <input value={title} onChange={(e) => setTitle(e.target.value)} placeholder="New task" aria-label="Task title" />
          <textarea
            value={description}
            onChange={(e) => setDescription(e.target.value)}
            placeholder="Description"
            aria-label="Task description"
          />
          <select value={priority} onChange={(e) => setPriority(e.target.value as TaskPriority)} aria-label="Priority">
            <option value="low">Low</option>
            <option value="medium">Medium</option>
            <option value="high">High</option>
          </select>
          <input type="date" value={dueDate} onChange={(e) => setDueDate(e.target.value)} aria-label="Due date" />
          <button type="submit" tabIndex={0}>Add task</button>
        </form>
      );
    };

    export default TaskForm;
""")

_TASK_CSS = _source(r"""
    .task-list {
      max-width: 720px;
      margin: 2rem auto;
      padding: 0 1rem;
    }

    .task-list__header {
      display: flex;
      align-items: center;
      justify-content: space-between;
    }

    .task-list__items {
      list-style: none;
      padding: 0;
    }

    .task-list__empty {
      color: #667085;
      text-align: center;
    }

    .task-list__error,
    .task-form__error {
      padding: 0.75rem;
      border-radius: 4px;
      background: #fee2e2;
      color: #b91c1c;
    }

    .task-form {
      display: grid;
      grid-template-columns: 2fr 1fr 1fr auto;
      gap: 0.5rem;
      margin: 1rem 0;
    }

    .task-form textarea {
      grid-column: 1 / -1;
      min-height: 3rem;
    }

    .task-item {
      display: flex;
      align-items: center;
      gap: 0.5rem;
      padding: 0.75rem;
      border-bottom: 1px solid #eaecf0;
    }

    .task-item__title {
      flex: 1;
    }

    .task-item--completed .task-item__title {
      text-decoration: line-through;
      color: #98a2b3;
    }

    .task-item--high {
      border-left: 3px solid #dc2626;
    }

    .task-item__delete {
      color: #b91c1c;
    }

    @media (max-width: 768px) {
      .task-form {
        grid-template-columns: 1fr;
      }

      .task-item {
        flex-wrap: wrap;
      }
    }
""")


def task_components(task: TechnicalTask) -> list[GeneratedFile]:
    return [
        _file("src/components/tasks/TaskList.tsx", _TASK_LIST, FileType.COMPONENT),
        _file("src/components/tasks/TaskItem.tsx", _TASK_ITEM, FileType.COMPONENT),
        _file("src/components/tasks/TaskForm.tsx", _TASK_FORM, FileType.COMPONENT),
        _file("src/components/tasks/TaskList.css", _TASK_CSS, FileType.OTHER),
        _file("src/types/Task.ts", _TASK_TYPES, FileType.OTHER),
    ]


# ---------------------------------------------------------------------------
# Sharing
# ---------------------------------------------------------------------------

_SHARE_MODAL = _source(r"""
    import React, { useState } from 'react';
    import './ShareModal.css';

    type Permission = 'view' | 'edit';

    interface ShareTaskModalProps {
      taskId?: string;
      onClose?: () => void;
      onShared?: (email: string, permission: Permission) => void;
    }

    export const ShareTaskModal: React.FC<ShareTaskModalProps> = ({ taskId, onClose, onShared }) => {
      const [email, setEmail] = useState('');
      const [permission, setPermission] = useState<Permission>('view');
      const [status, setStatus] = useState<string | null>(null);
      const [error, setError] = useState<string | null>(null);
      const [loading, setLoading] = useState(false);

      const handleSubmit = async (event: React.FormEvent<HTMLFormElement>) => {
        event.preventDefault();
        if (!taskId) {
          setError('Select a task to share first');
          return;
        }
        if (!email.includes('@')) {
          setError('Please enter a valid email address');
          return;
        }

        setLoading(true);
        setError(null);
        try {
          const token = localStorage.getItem('token');
          const response = await fetch(`/api/tasks/${taskId}/share`, {
            method: 'POST',
            headers: {
              'Content-Type': 'application/json',
              ...(token ? { Authorization: `Bearer ${token}` } : {}),
            },
            body: JSON.stringify({ email, permission }),
          });
          const data = await response.json();
          if (!response.ok) {
            throw new Error(data.error || 'Sharing failed');
          }
          setStatus(`Shared with ${email}`);
          setEmail('');
          onShared?.(email, permission);
        } catch (err) {
          setError(err instanceof Error ? err.message : 'Sharing failed');
        } finally {
          setLoading(false);
        }
      };

      return (
        <div className="share-modal" role="dialog" aria-modal="true" aria-labelledby="share-modal-title">
          <form className="share-modal__body" onSubmit={handleSubmit} role="form">
            <h2 id="share-modal-title">Share task</h2>
            {error && <div className="share-modal__error" role="alert">{error}</div>}
            {status && <div className="share-modal__status" role="status">{status}</div>}

            <label htmlFor="share-email">Email</label>
            <input
              id="share-email"
              type="email"
              value={email}
              onChange={(e) => setEmail(e.target.value)}
              aria-label="email"
              required
            />

            <fieldset>
              <legend>Permission</legend>
              <label>
                <input
                  type="radio"
                  name="permission"
                  checked={permission === 'view'}
                  onChange={() => setPermission('view')}
                  aria-label="view"
                />
                Can view
              </label>
              <label>
                <input
                  type="radio"
                  name="permission"
                  checked={permission === 'edit'}
                  onChange={() => setPermission('edit')}
                  aria-label="edit"
                />
                Can edit
              </label>
            </fieldset>

            <div className="share-modal__actions">
              {onClose && (
                <button type="button" onClick={onClose} tabIndex={0}>
                  Cancel
                </button>
              )}
              <button type="submit" disabled={loading} tabIndex={0}>
                {loading ? 'Sharing...' : 'Share'}
              </button>
            </div>
          </form>
        </div>
      );
    };

    export default ShareTaskModal;
""")

_SHARE_CSS = _source(r"""
    .share-modal {
      display: flex;
      align-items: center;
      justify-content: center;
      padding: 2rem 1rem;
    }

    .share-modal__body {
      display: flex;
      flex-direction: column;
      gap: 0.5rem;
      width: 100%;
      max-width: 420px;
      padding: 1.5rem;
      border-radius: 8px;
      background: #fff;
      box-shadow: 0 8px 24px rgba(0, 0, 0, 0.12);
    }

    .share-modal__body fieldset {
      border: none;
      padding: 0;
    }

    .share-modal__actions {
      display: flex;
      justify-content: flex-end;
      gap: 0.5rem;
    }

    .share-modal__error {
      color: #b91c1c;
    }

    .share-modal__status {
      color: #15803d;
    }

    @media (max-width: 480px) {
      .share-modal__body {
        padding: 1rem;
        box-shadow: none;
      }
    }
""")


def sharing_components(task: TechnicalTask) -> list[GeneratedFile]:
    return [
        _file("src/components/sharing/ShareTaskModal.tsx", _SHARE_MODAL, FileType.COMPONENT),
        _file("src/components/sharing/ShareModal.css", _SHARE_CSS, FileType.OTHER),
    ]


# ---------------------------------------------------------------------------
# Generic scaffold
# ---------------------------------------------------------------------------

def _jsx_text(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("{", "&#123;")
        .replace("}", "&#125;")
    )


def generic_component(task: TechnicalTask) -> list[GeneratedFile]:
    """A feature panel listing the task's acceptance criteria."""
    name = pascal_case(task.title) or "Feature"
    if name[0].isdigit():
        name = f"Feature{name}"
    criteria = "\n".join(
        f"        <li>{_jsx_text(item)}</li>" for item in task.acceptance_criteria
    ) or "        <li>Initial version</li>"
    content = (
        "import React from 'react';\n"
        "\n"
        f"export const {name}: React.FC = () => (\n"
        f'  <section className="feature" aria-labelledby="{name}-title">\n'
        f'    <h2 id="{name}-title">{_jsx_text(task.title)}</h2>\n'
        f"    <p>{_jsx_text(task.description)}</p>\n"
        "    <ul>\n"
        f"{criteria}\n"
        "    </ul>\n"
        "  </section>\n"
        ");\n"
        "\n"
        f"export default {name};\n"
    )
    return [_file(f"src/components/{name}.tsx", content, FileType.COMPONENT)]
