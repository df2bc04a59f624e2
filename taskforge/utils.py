"""Shared utility functions for taskforge.

Provides name helpers, JSON and project-tree I/O, duration formatting, and
Rich-based progress reporting.  Console output is the pipeline's only
diagnostic channel; everything goes through the module-level ``console``.
"""

from __future__ import annotations

import asyncio
import json
import re
import stat
from pathlib import Path
from typing import Any, Iterable

from rich.console import Console
from rich.rule import Rule
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def sanitize_name(name: str) -> str:
    """Lower-case *name* into an npm-safe package name (``"Todo App"`` -> ``"todo-app"``).

    Underscores survive; any other run of non-alphanumerics becomes one hyphen.
    """
    return re.sub(r"[^a-z0-9_]+", "-", name.lower()).strip("-")


def pascal_case(value: str) -> str:
    """Convert ``some-thing``, ``some_thing`` or ``some thing`` to ``SomeThing``."""
    parts = re.split(r"[^a-zA-Z0-9]+", value)
    return "".join(word[:1].upper() + word[1:] for word in parts if word)


# ---------------------------------------------------------------------------
# JSON / tree I/O
# ---------------------------------------------------------------------------


async def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> None:
    """Save data as pretty-printed JSON.

    Parent directories are created automatically and the write runs in a
    worker thread to keep the event loop free.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(data, indent=2, ensure_ascii=False, default=str)
    await asyncio.to_thread(file_path.write_text, content, "utf-8")


def write_project(files: Iterable[tuple[str, str]], output_dir: str | Path) -> list[Path]:
    """Write an assembled ``(path, content)`` list under *output_dir*.

    Shell scripts (``*.sh``) are marked executable.

    Raises:
        ValueError: If a path would escape *output_dir*.
    """
    root = Path(output_dir).resolve()
    written: list[Path] = []
    for rel_path, content in files:
        target = (root / rel_path).resolve()
        if root != target and root not in target.parents:
            raise ValueError(f"Refusing to write outside the output directory: {rel_path}")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        if target.suffix == ".sh":
            target.chmod(target.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        written.append(target)
    return written


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Render elapsed *seconds* as ``3.7s``, ``1m 5s`` or ``1h 1m 1s``."""
    if seconds < 60:
        return f"{max(seconds, 0.0):.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    return f"{minutes}m {secs}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


PHASE_NAMES: dict[int, str] = {1: "ANALYZE", 2: "GENERATE", 3: "ASSEMBLE"}

PHASE_COLORS: dict[int, str] = {1: "bright_cyan", 2: "bright_yellow", 3: "bright_green"}


def print_phase_header(phase: int, name: str) -> None:
    """Print a full-width rule announcing a pipeline phase."""
    color = PHASE_COLORS.get(phase, "white")
    console.print()
    console.print(Rule(f"[bold {color}] Phase {phase}: {name.upper()} [/bold {color}]", style=color))
    console.print()


def print_summary_table(rows: dict[str, str], title: str = "Summary") -> None:
    table = Table(title=title, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")
    for key, value in rows.items():
        table.add_row(key, str(value))
    console.print(table)
    console.print()


def print_success(message: str) -> None:
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    console.print(f"[bold yellow]{message}[/bold yellow]")
