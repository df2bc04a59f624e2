"""Exception hierarchy shared across the taskforge pipeline.

Only ``BriefValidationError`` is fatal to a whole run.  Everything else is
either recovered locally (``ExternalCapabilityError`` triggers the template
fallback) or recorded against the task or file that caused it.
"""

from __future__ import annotations


class TaskforgeError(Exception):
    """Base class for every error raised by taskforge."""


class BriefValidationError(TaskforgeError):
    """Raised when a project brief is missing its description."""


class TaskValidationError(TaskforgeError):
    """Raised when a technical task is missing a title, description or type."""


class UnsupportedTaskType(TaskforgeError):
    """Raised when a task's type has no generator behind it."""

    def __init__(self, task_type: str) -> None:
        self.task_type = task_type
        super().__init__(f"Unknown task type: {task_type}")


# ---------------------------------------------------------------------------
# Text-generation failures
# ---------------------------------------------------------------------------


class ExternalCapabilityError(TaskforgeError):
    """The remote text-generation call failed.

    Never surfaced to pipeline callers: the remote strategy substitutes the
    template output whenever one of these is raised.
    """


class NetworkError(ExternalCapabilityError):
    """Connection failure or timeout talking to the model API."""


class QuotaError(ExternalCapabilityError):
    """The model API rejected the call for rate-limit or quota reasons."""


class MalformedResponseError(ExternalCapabilityError):
    """The model API answered, but without usable text."""


class ExtractionEmpty(TaskforgeError):
    """Generated text contained no usable fenced code blocks."""


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


class AssemblyCollision(TaskforgeError):
    """Two different files normalised to the same final path."""

    def __init__(self, path: str, first_source: str, second_source: str) -> None:
        self.path = path
        self.first_source = first_source
        self.second_source = second_source
        super().__init__(
            f"Assembly collision at {path}: {second_source} conflicts with {first_source}"
        )
