"""taskforge configuration.

Centralised, typed configuration for the generation pipeline. All settings use
Pydantic v2 models so they can be validated at construction time and serialised
to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class GenerationMode(str, Enum):
    """How task code is produced."""

    REMOTE = "remote"
    FALLBACK = "fallback"


class PortConfig(BaseModel):
    """Ports baked into the generated project's manifests and start scripts."""

    frontend: int = Field(default=5173, ge=1, le=65535)
    backend: int = Field(default=3001, ge=1, le=65535)

    def as_dict(self) -> dict[str, int]:
        """Return a plain ``{service: port}`` mapping."""
        return {"frontend": self.frontend, "backend": self.backend}

    @property
    def frontend_url(self) -> str:
        return f"http://localhost:{self.frontend}"

    @property
    def backend_url(self) -> str:
        return f"http://localhost:{self.backend}"


class GeminiConfig(BaseModel):
    """Connection settings for the Gemini ``generateContent`` API."""

    api_key: str = Field(default="", repr=False)
    model: str = Field(default="gemini-2.0-flash")
    base_url: str = Field(default="https://generativelanguage.googleapis.com")
    timeout: int = Field(default=60, ge=5, description="Per-request timeout in seconds")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=8192, ge=256)


class GenerationConfig(BaseModel):
    """Tuning knobs for per-task code generation."""

    mode: GenerationMode = Field(
        default=GenerationMode.REMOTE,
        description="remote = call the model and fall back on failure; fallback = templates only",
    )
    request_timeout: float = Field(
        default=90.0,
        gt=0,
        description="Upper bound in seconds on one task's remote call, including retries inside httpx",
    )


class Config(BaseModel):
    """Global taskforge configuration.

    Instances are typically created once by ``ProjectPipeline`` or by the CLI
    entry point and then passed through the rest of the system.
    """

    project_name: str = Field(default="")
    output_dir: Path = Field(default=Path("./output"))
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    ports: PortConfig = Field(default_factory=PortConfig)

    # ------------------------------------------------------------------
    # Derived values (read-only properties)
    # ------------------------------------------------------------------

    @property
    def effective_mode(self) -> GenerationMode:
        """The mode actually used: remote generation needs an API key."""
        if self.generation.mode is GenerationMode.REMOTE and not self.gemini.api_key:
            return GenerationMode.FALLBACK
        return self.generation.mode

    @property
    def metadata_path(self) -> Path:
        """Directory holding run metadata next to the generated tree."""
        return self.output_dir / ".taskforge"

    @property
    def results_path(self) -> Path:
        """Path to the persisted per-task generation results."""
        return self.metadata_path / "results.json"

    @property
    def analysis_path(self) -> Path:
        """Path to the persisted task breakdown and analysis."""
        return self.metadata_path / "analysis.json"

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path | None = None) -> Path:
        """Persist the configuration to a JSON file.

        The API key is never written to disk.

        Args:
            path: Destination file. Defaults to ``<metadata_path>/config.json``.

        Returns:
            The path where the file was written.
        """
        target = path or (self.metadata_path / "config.json")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            self.model_dump_json(indent=2, exclude={"gemini": {"api_key"}}),
            encoding="utf-8",
        )
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            GEMINI_API_KEY, TASKFORGE_MODE, TASKFORGE_MODEL, TASKFORGE_TIMEOUT,
            TASKFORGE_OUTPUT_DIR, TASKFORGE_PROJECT_NAME,
            TASKFORGE_FRONTEND_PORT, TASKFORGE_BACKEND_PORT.
        """
        gemini_kwargs: dict[str, Any] = {}
        if os.environ.get("GEMINI_API_KEY"):
            gemini_kwargs["api_key"] = os.environ["GEMINI_API_KEY"]
        if os.environ.get("TASKFORGE_MODEL"):
            gemini_kwargs["model"] = os.environ["TASKFORGE_MODEL"]
        if os.environ.get("TASKFORGE_TIMEOUT"):
            gemini_kwargs["timeout"] = int(os.environ["TASKFORGE_TIMEOUT"])

        generation_kwargs: dict[str, Any] = {}
        if os.environ.get("TASKFORGE_MODE"):
            generation_kwargs["mode"] = GenerationMode(os.environ["TASKFORGE_MODE"].lower())

        port_kwargs: dict[str, Any] = {}
        if os.environ.get("TASKFORGE_FRONTEND_PORT"):
            port_kwargs["frontend"] = int(os.environ["TASKFORGE_FRONTEND_PORT"])
        if os.environ.get("TASKFORGE_BACKEND_PORT"):
            port_kwargs["backend"] = int(os.environ["TASKFORGE_BACKEND_PORT"])

        return cls(
            project_name=os.environ.get("TASKFORGE_PROJECT_NAME", ""),
            output_dir=Path(os.environ.get("TASKFORGE_OUTPUT_DIR", "./output")),
            gemini=GeminiConfig(**gemini_kwargs),
            generation=GenerationConfig(**generation_kwargs),
            ports=PortConfig(**port_kwargs),
        )
