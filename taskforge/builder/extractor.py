"""Extract source files from free-form model output.

Generated text is untrusted: fences may be missing, unterminated, tagged with
any language, or empty.  Extraction is a tolerant regex scan that returns
whatever well-formed blocks it finds and never raises.

A block names its file with a leading path comment in either form::

    // File: src/components/LoginForm.tsx
    /* File: src/styles/LoginForm.css */

Blocks without one get a synthesized name (``generated_file_<n>.<ext>``) in a
directory chosen from the block language and the requesting agent.
"""

from __future__ import annotations

import itertools
import re

from taskforge.planner.models import FileType, GeneratedFile, TaskType

# A fence must open and close at the start of a line.  Anything after an
# opening fence with no matching close is left unmatched.
_RE_FENCED_BLOCK = re.compile(
    r"""
    ^[ \t]*```[ \t]*(?P<lang>[\w+#.-]*)[^\n]*\n   # opening fence + optional language tag
    (?P<body>.*?)                                # block content (lazy)
    ^[ \t]*```[ \t]*$                            # closing fence on its own line
    """,
    re.MULTILINE | re.DOTALL | re.VERBOSE,
)

_RE_LINE_COMMENT_PATH = re.compile(r"^\s*//\s*File:\s*(?P<path>.+?)\s*$")
_RE_BLOCK_COMMENT_PATH = re.compile(r"^\s*/\*\s*File:\s*(?P<path>.+?)\s*\*/\s*$")

_STYLE_LANGUAGES = {"css", "scss", "sass", "less"}

# language tag -> (frontend extension, backend extension)
_LANGUAGE_EXTENSIONS: dict[str, tuple[str, str]] = {
    "typescript": (".tsx", ".ts"),
    "ts": (".tsx", ".ts"),
    "tsx": (".tsx", ".tsx"),
    "javascript": (".jsx", ".js"),
    "js": (".jsx", ".js"),
    "jsx": (".jsx", ".jsx"),
    "css": (".css", ".css"),
    "scss": (".scss", ".scss"),
    "sass": (".sass", ".sass"),
    "less": (".less", ".less"),
    "sql": (".sql", ".sql"),
    "json": (".json", ".json"),
    "html": (".html", ".html"),
}


def classify_path(path: str) -> FileType:
    """Derive a file's type from its path alone."""
    lowered = path.lower()
    if "route" in lowered or "controller" in lowered:
        return FileType.API
    if "model" in lowered or "schema" in lowered:
        return FileType.SCHEMA
    if lowered.endswith((".tsx", ".jsx")):
        return FileType.COMPONENT
    return FileType.OTHER


def _clean_path(raw: str) -> str:
    path = raw.strip().strip("`'\"").replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


class ResponseExtractor:
    """Turns raw generated text into ``GeneratedFile`` candidates.

    The counter behind synthesized names is shared by every ``extract`` call
    on one instance, so unnamed blocks from different responses do not
    collide.
    """

    def __init__(self) -> None:
        self._counter = itertools.count(1)

    def extract(
        self, text: str, agent_type: TaskType = TaskType.FRONTEND
    ) -> list[GeneratedFile]:
        """Return one file per non-empty fenced block, in order of appearance.

        Args:
            text: Raw model output.
            agent_type: Picks the default directory and extension for blocks
                without a path comment.
        """
        if not text or "```" not in text:
            return []

        files: list[GeneratedFile] = []
        seen: set[str] = set()
        for match in _RE_FENCED_BLOCK.finditer(text):
            language = match.group("lang").lower()
            path, content = self._split_path(match.group("body"))
            content = content.strip("\n")
            if not content.strip():
                continue
            if path is None:
                path = self._default_path(language, agent_type)
            if path in seen:
                continue
            seen.add(path)
            files.append(GeneratedFile(path=path, content=content + "\n", type=classify_path(path)))
        return files

    @staticmethod
    def explanation(text: str) -> str:
        """The prose left over once every fenced block is removed."""
        stripped = _RE_FENCED_BLOCK.sub("", text or "")
        return re.sub(r"\n{3,}", "\n\n", stripped).strip()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _split_path(body: str) -> tuple[str | None, str]:
        """Pull a leading ``File:`` comment off *body*, if there is one."""
        lines = body.split("\n")
        for index, line in enumerate(lines):
            if not line.strip():
                continue
            match = _RE_LINE_COMMENT_PATH.match(line) or _RE_BLOCK_COMMENT_PATH.match(line)
            if match:
                path = _clean_path(match.group("path"))
                if path:
                    return path, "\n".join(lines[:index] + lines[index + 1:])
            break
        return None, body

    def _default_path(self, language: str, agent_type: TaskType) -> str:
        token = next(self._counter)
        is_backend = agent_type is TaskType.BACKEND
        frontend_ext, backend_ext = _LANGUAGE_EXTENSIONS.get(language, (".tsx", ".ts"))
        extension = backend_ext if is_backend else frontend_ext

        if language in _STYLE_LANGUAGES:
            directory = "src/styles"
        elif language == "sql":
            directory = "src/migrations"
        elif is_backend:
            directory = "src/controllers"
        else:
            directory = "src/components"
        return f"{directory}/generated_file_{token}{extension}"
