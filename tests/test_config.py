"""Unit tests for taskforge configuration (taskforge.config).

Tests cover:
- PortConfig defaults, as_dict and URLs
- GeminiConfig defaults and api_key repr hiding
- Config.effective_mode resolution
- Derived metadata paths
- save / load round trip without the API key
- from_env parsing
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from taskforge.config import (
    Config,
    GeminiConfig,
    GenerationConfig,
    GenerationMode,
    PortConfig,
)


class TestPortConfig:
    @pytest.mark.unit
    def test_defaults(self):
        ports = PortConfig()
        assert ports.frontend == 5173
        assert ports.backend == 3001

    @pytest.mark.unit
    def test_as_dict(self):
        assert PortConfig(frontend=4000, backend=4001).as_dict() == {
            "frontend": 4000,
            "backend": 4001,
        }

    @pytest.mark.unit
    def test_urls(self):
        ports = PortConfig()
        assert ports.frontend_url == "http://localhost:5173"
        assert ports.backend_url == "http://localhost:3001"

    @pytest.mark.unit
    def test_rejects_out_of_range_port(self):
        with pytest.raises(ValueError):
            PortConfig(frontend=70000)


class TestGeminiConfig:
    @pytest.mark.unit
    def test_defaults(self):
        config = GeminiConfig()
        assert config.model == "gemini-2.0-flash"
        assert config.api_key == ""
        assert config.timeout == 60

    @pytest.mark.unit
    def test_api_key_not_in_repr(self):
        assert "secret-key" not in repr(GeminiConfig(api_key="secret-key"))


class TestEffectiveMode:
    @pytest.mark.unit
    def test_remote_without_key_falls_back(self):
        assert Config().effective_mode is GenerationMode.FALLBACK

    @pytest.mark.unit
    def test_remote_with_key(self):
        config = Config(gemini=GeminiConfig(api_key="k"))
        assert config.effective_mode is GenerationMode.REMOTE

    @pytest.mark.unit
    def test_explicit_fallback_with_key(self):
        config = Config(
            gemini=GeminiConfig(api_key="k"),
            generation=GenerationConfig(mode=GenerationMode.FALLBACK),
        )
        assert config.effective_mode is GenerationMode.FALLBACK


class TestPaths:
    @pytest.mark.unit
    def test_metadata_paths(self, tmp_path: Path):
        config = Config(output_dir=tmp_path)
        assert config.metadata_path == tmp_path / ".taskforge"
        assert config.results_path == tmp_path / ".taskforge" / "results.json"
        assert config.analysis_path == tmp_path / ".taskforge" / "analysis.json"


class TestSaveLoad:
    @pytest.mark.unit
    def test_round_trip_drops_api_key(self, tmp_path: Path):
        config = Config(
            project_name="Todo App",
            output_dir=tmp_path,
            gemini=GeminiConfig(api_key="secret-key", model="gemini-1.5-pro"),
            ports=PortConfig(frontend=4000, backend=4001),
        )
        path = config.save()

        assert path == tmp_path / ".taskforge" / "config.json"
        raw = json.loads(path.read_text(encoding="utf-8"))
        assert "api_key" not in raw["gemini"]

        loaded = Config.load(path)
        assert loaded.project_name == "Todo App"
        assert loaded.gemini.model == "gemini-1.5-pro"
        assert loaded.gemini.api_key == ""
        assert loaded.ports.frontend == 4000


class TestFromEnv:
    @pytest.mark.unit
    def test_defaults_with_empty_env(self, monkeypatch):
        for name in (
            "GEMINI_API_KEY", "TASKFORGE_MODE", "TASKFORGE_MODEL", "TASKFORGE_TIMEOUT",
            "TASKFORGE_OUTPUT_DIR", "TASKFORGE_PROJECT_NAME",
            "TASKFORGE_FRONTEND_PORT", "TASKFORGE_BACKEND_PORT",
        ):
            monkeypatch.delenv(name, raising=False)

        config = Config.from_env()
        assert config.gemini.api_key == ""
        assert config.generation.mode is GenerationMode.REMOTE
        assert config.effective_mode is GenerationMode.FALLBACK
        assert config.output_dir == Path("./output")

    @pytest.mark.unit
    def test_reads_variables(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        monkeypatch.setenv("TASKFORGE_MODE", "FALLBACK")
        monkeypatch.setenv("TASKFORGE_MODEL", "gemini-1.5-flash")
        monkeypatch.setenv("TASKFORGE_TIMEOUT", "30")
        monkeypatch.setenv("TASKFORGE_OUTPUT_DIR", "/tmp/out")
        monkeypatch.setenv("TASKFORGE_PROJECT_NAME", "My App")
        monkeypatch.setenv("TASKFORGE_FRONTEND_PORT", "8080")
        monkeypatch.setenv("TASKFORGE_BACKEND_PORT", "8081")

        config = Config.from_env()
        assert config.gemini.api_key == "env-key"
        assert config.gemini.model == "gemini-1.5-flash"
        assert config.gemini.timeout == 30
        assert config.generation.mode is GenerationMode.FALLBACK
        assert config.output_dir == Path("/tmp/out")
        assert config.project_name == "My App"
        assert config.ports.as_dict() == {"frontend": 8080, "backend": 8081}
