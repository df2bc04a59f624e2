"""Deterministic post-processing of generated source files.

Model output is usually close to runnable but routinely misses the same few
things.  ``CodeEnhancer`` applies a fixed sequence of textual repairs, each
gated on a file-extension and content trigger:

1. framework import      -- ``import React`` for component files
2. props interface       -- ``interface <Name>Props`` inferred from ``props.X`` (``.tsx`` only)
3. error/loading state   -- for network-calling code with no ``catch``
4. accessibility         -- ``aria-label`` / ``role`` / ``tabIndex`` attributes
5. responsive styles     -- ``@media`` breakpoints for stylesheets

Every repair is a no-op once its output is present, so ``enhance`` is
idempotent: ``enhance(enhance(f, t), t) == enhance(f, t)``.
"""

from __future__ import annotations

import re
import textwrap
from pathlib import PurePosixPath
from typing import Callable

from taskforge.planner.models import GeneratedFile, TechnicalTask
from taskforge.utils import pascal_case

# ---------------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------------

_COMPONENT_SUFFIXES = (".tsx", ".jsx")
_TYPED_COMPONENT_SUFFIXES = (".tsx",)
_SCRIPT_SUFFIXES = (".ts", ".js", ".tsx", ".jsx")
_MARKUP_SUFFIXES = (".tsx", ".jsx", ".html")
_STYLE_SUFFIXES = (".css", ".scss", ".less")

_RE_REACT_IMPORT = re.compile(r"^\s*import\s+(?:\*\s+as\s+)?React\b", re.MULTILINE)
_RE_PROPS_ACCESS = re.compile(r"\bprops\.([A-Za-z_$][\w$]*)")
_RE_PROPS_DECLARED = re.compile(r"\b(?:interface\s+\w*Props\b|type\s+\w*Props\s*=)")
_RE_NETWORK_CALL = re.compile(r"\bfetch\s*\(|\baxios\b|\bawait\b")
_RE_USE_STATE_LINE = re.compile(
    r"^(?P<indent>[ \t]*)const\s+\[[^\]]*\]\s*=\s*(?P<hook>(?:React\.)?useState)\b.*\)\s*;?[ \t]*$",
    re.MULTILINE,
)
_RE_MEDIA_QUERY = re.compile(r"@media\b")
_RE_FIRST_CLASS_SELECTOR = re.compile(r"^\s*\.([A-Za-z][\w-]*)", re.MULTILINE)
_RE_ATTR_VALUE = r"""\b{name}\s*=\s*["']([^"']+)["']"""
_RE_ARIA_LABEL_ATTR = re.compile(r"(?<![\w-])aria-label\s*=")
_RE_ROLE_ATTR = re.compile(r"(?<![\w-])role\s*=")
_RE_TABINDEX_ATTR = re.compile(r"(?<![\w-])tabindex\s*=", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Scaffolding snippets
# ---------------------------------------------------------------------------

_REQUEST_STATE_HOOK_TS = textwrap.dedent("""\

    // Error and loading state for asynchronous requests
    export function useRequestState() {
      const [error, setError] = React.useState<string | null>(null);
      const [loading, setLoading] = React.useState<boolean>(false);

      const run = async <T,>(request: () => Promise<T>): Promise<T | undefined> => {
        setLoading(true);
        setError(null);
        try {
          return await request();
        } catch (err) {
          setError(err instanceof Error ? err.message : 'Request failed');
          return undefined;
        } finally {
          setLoading(false);
        }
      };

      return { error, loading, run };
    }
""")

_REQUEST_STATE_HOOK_JS = textwrap.dedent("""\

    // Error and loading state for asynchronous requests
    export function useRequestState() {
      const [error, setError] = React.useState(null);
      const [loading, setLoading] = React.useState(false);

      const run = async (request) => {
        setLoading(true);
        setError(null);
        try {
          return await request();
        } catch (err) {
          setError(err instanceof Error ? err.message : 'Request failed');
          return undefined;
        } finally {
          setLoading(false);
        }
      };

      return { error, loading, run };
    }
""")

_ERROR_WRAPPER_TS = textwrap.dedent("""\

    // Wraps an async function so failures are logged before propagating
    export function withErrorHandling<T extends (...args: any[]) => Promise<any>>(fn: T) {
      return async (...args: Parameters<T>): Promise<Awaited<ReturnType<T>>> => {
        try {
          return await fn(...args);
        } catch (error) {
          console.error('Request failed:', error);
          throw error;
        }
      };
    }
""")

_ERROR_WRAPPER_JS = textwrap.dedent("""\

    // Wraps an async function so failures are logged before propagating
    export function withErrorHandling(fn) {
      return async (...args) => {
        try {
          return await fn(...args);
        } catch (error) {
          console.error('Request failed:', error);
          throw error;
        }
      };
    }
""")

_RESPONSIVE_BLOCK = textwrap.dedent("""\

    /* Responsive breakpoints */
    @media (max-width: 768px) {{
      {selector} {{
        width: 100%;
        padding: 1rem;
      }}
    }}

    @media (max-width: 480px) {{
      {selector} {{
        padding: 0.5rem;
        font-size: 0.875rem;
      }}
    }}
""")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _suffix(path: str) -> str:
    return PurePosixPath(path).suffix.lower()


def _component_name(path: str) -> str:
    return pascal_case(PurePosixPath(path).stem) or "Component"


def _import_block_end(lines: list[str]) -> int:
    """Index just past the last top-level import statement (0 if none)."""
    end = 0
    in_import = False
    for index, line in enumerate(lines):
        stripped = line.strip()
        if in_import:
            if re.search(r"\bfrom\s+['\"]", stripped) or stripped.endswith(";"):
                in_import = False
                end = index + 1
            continue
        if stripped.startswith("import "):
            if re.search(r"\bfrom\s+['\"]", stripped) or re.match(r"import\s+['\"]", stripped):
                end = index + 1
            else:
                in_import = True
    return end


def _infer_prop_type(content: str, prop: str) -> str:
    name = re.escape(prop)
    if re.search(rf"\bprops\.{name}\s*\(", content):
        return "(...args: any[]) => void"
    if re.search(rf"\bprops\.{name}\.map\b", content):
        return "any[]"
    if re.search(rf"\bprops\.{name}\s*&&", content):
        return "boolean"
    if re.search(rf"\{{\s*props\.{name}\s*\}}", content):
        return "string | number"
    return "any"


def _tag_spans(content: str, tag: str) -> list[tuple[int, int]]:
    """Return ``(attr_start, attr_end)`` spans of every ``<tag ...>`` opening.

    JSX attribute values may contain ``>`` inside braces (arrow functions), so
    the scan tracks brace depth and quoting instead of using ``[^>]*``.
    """
    spans: list[tuple[int, int]] = []
    for match in re.finditer(rf"<{tag}\b", content):
        start = match.end()
        depth = 0
        quote = ""
        index = start
        while index < len(content):
            char = content[index]
            if quote:
                if char == quote:
                    quote = ""
            elif char in "\"'" and depth == 0:
                quote = char
            elif char == "{":
                depth += 1
            elif char == "}":
                depth = max(depth - 1, 0)
            elif char == ">" and depth == 0:
                break
            index += 1
        end = index - 1 if index > start and content[index - 1] == "/" else index
        spans.append((start, end))
    return spans


def _add_attribute(
    content: str, tag: str, present: Callable[[str], bool], attribute: Callable[[str], str]
) -> str:
    """Insert ``attribute(attrs)`` right after ``<tag`` wherever ``present(attrs)`` is false."""
    spans = _tag_spans(content, tag)
    for start, end in reversed(spans):
        attrs = content[start:end]
        if present(attrs):
            continue
        content = content[:start] + " " + attribute(attrs) + content[start:]
    return content


# ---------------------------------------------------------------------------
# Enhancer
# ---------------------------------------------------------------------------

class CodeEnhancer:
    """Applies idempotent, trigger-gated repairs to generated files.

    ``enhance`` never mutates its input; it returns a copy with the repaired
    content (or an equal copy when nothing was triggered).
    """

    def enhance(self, file: GeneratedFile, task: TechnicalTask | None = None) -> GeneratedFile:
        content = file.content
        for repair in (
            self.ensure_framework_import,
            self.ensure_props_interface,
            self.ensure_request_state,
            self.ensure_accessibility,
            self.ensure_responsive_styles,
        ):
            content = repair(file.path, content)
        return file.model_copy(update={"content": content})

    # -- 1. framework import -------------------------------------------------

    @staticmethod
    def ensure_framework_import(path: str, content: str) -> str:
        if _suffix(path) not in _COMPONENT_SUFFIXES or _RE_REACT_IMPORT.search(content):
            return content
        return "import React from 'react';\n" + content

    # -- 2. props interface --------------------------------------------------

    @staticmethod
    def ensure_props_interface(path: str, content: str) -> str:
        if _suffix(path) not in _TYPED_COMPONENT_SUFFIXES or _RE_PROPS_DECLARED.search(content):
            return content

        props: list[str] = []
        for match in _RE_PROPS_ACCESS.finditer(content):
            if match.group(1) not in props:
                props.append(match.group(1))
        if not props:
            return content

        body = "\n".join(f"  {prop}: {_infer_prop_type(content, prop)};" for prop in props)
        interface = f"interface {_component_name(path)}Props {{\n{body}\n}}\n"

        lines = content.split("\n")
        at = _import_block_end(lines)
        return "\n".join(lines[:at] + ["", interface] + lines[at:]).lstrip("\n")

    # -- 3. error / loading state --------------------------------------------

    @staticmethod
    def ensure_request_state(path: str, content: str) -> str:
        suffix = _suffix(path)
        if suffix not in _SCRIPT_SUFFIXES:
            return content
        if not _RE_NETWORK_CALL.search(content) or "catch" in content:
            return content
        if "setError" in content or "withErrorHandling" in content:
            return content

        if suffix in _COMPONENT_SUFFIXES:
            state_lines = [m for m in _RE_USE_STATE_LINE.finditer(content)]
            if state_lines:
                last = state_lines[-1]
                indent, hook = last.group("indent"), last.group("hook")
                typed = suffix in _TYPED_COMPONENT_SUFFIXES
                error_hook = f"{hook}<string | null>" if typed else hook
                loading_hook = f"{hook}<boolean>" if typed else hook
                addition = (
                    f"\n{indent}const [error, setError] = {error_hook}(null);"
                    f"\n{indent}const [loading, setLoading] = {loading_hook}(false);"
                )
                return content[: last.end()] + addition + content[last.end():]
            hook_source = (
                _REQUEST_STATE_HOOK_TS if suffix in _TYPED_COMPONENT_SUFFIXES else _REQUEST_STATE_HOOK_JS
            )
            return content.rstrip("\n") + "\n" + hook_source

        wrapper = _ERROR_WRAPPER_TS if suffix == ".ts" else _ERROR_WRAPPER_JS
        return content.rstrip("\n") + "\n" + wrapper

    # -- 4. accessibility ----------------------------------------------------

    @staticmethod
    def ensure_accessibility(path: str, content: str) -> str:
        suffix = _suffix(path)
        if suffix not in _MARKUP_SUFFIXES:
            return content
        is_html = suffix == ".html"

        def input_label(attrs: str) -> str:
            for name in ("name", "placeholder", "type"):
                found = re.search(_RE_ATTR_VALUE.format(name=name), attrs)
                if found:
                    return f'aria-label="{found.group(1)}"'
            return 'aria-label="input"'

        content = _add_attribute(
            content, "input", lambda attrs: _RE_ARIA_LABEL_ATTR.search(attrs) is not None, input_label
        )
        content = _add_attribute(
            content, "form", lambda attrs: _RE_ROLE_ATTR.search(attrs) is not None,
            lambda attrs: 'role="form"',
        )
        tab_index = 'tabindex="0"' if is_html else "tabIndex={0}"
        return _add_attribute(
            content, "button", lambda attrs: _RE_TABINDEX_ATTR.search(attrs) is not None,
            lambda attrs: tab_index,
        )

    # -- 5. responsive styles ------------------------------------------------

    @staticmethod
    def ensure_responsive_styles(path: str, content: str) -> str:
        if _suffix(path) not in _STYLE_SUFFIXES or _RE_MEDIA_QUERY.search(content):
            return content
        first_class = _RE_FIRST_CLASS_SELECTOR.search(content)
        selector = f".{first_class.group(1)}" if first_class else "body"
        return content.rstrip("\n") + "\n" + _RESPONSIVE_BLOCK.format(selector=selector)
