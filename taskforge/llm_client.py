"""Async client for the Gemini ``generateContent`` REST API.

Wraps ``POST /v1beta/models/<model>:generateContent`` with timeout handling
and typed failures.  ``generate`` either returns non-empty text or raises an
``ExternalCapabilityError`` subclass, which the remote generation strategy
answers with its template fallback.

Typical usage::

    client = GeminiClient(GeminiConfig(api_key="..."))
    if client.is_available():
        text = await client.generate("Generate a React login form")
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from taskforge.config import GeminiConfig
from taskforge.errors import (
    ExternalCapabilityError,
    MalformedResponseError,
    NetworkError,
    QuotaError,
)


class GenerationUsage(BaseModel):
    """Token accounting reported by the API for one call."""

    prompt_tokens: int = Field(default=0)
    output_tokens: int = Field(default=0)


class GeminiClient:
    """Async client for the Gemini text-generation API.

    A fresh ``httpx.AsyncClient`` is opened per call; the pipeline issues at
    most one call per task, so connection pooling buys nothing.
    """

    def __init__(self, config: GeminiConfig | None = None) -> None:
        self.config = config or GeminiConfig()
        self.base_url = self.config.base_url.rstrip("/")
        self.timeout = self.config.timeout
        self.last_usage = GenerationUsage()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and timeout."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
        )

    def _endpoint(self) -> str:
        return f"/v1beta/models/{self.config.model}:generateContent"

    def _payload(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "maxOutputTokens": self.config.max_output_tokens,
            },
        }

    @staticmethod
    def _extract_text(data: Any) -> str:
        """Join the text parts of the first candidate.

        The API nests text as ``candidates[0].content.parts[*].text``.  Any
        other shape yields ``""``.
        """
        if not isinstance(data, dict):
            return ""
        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return ""
        first = candidates[0]
        content = first.get("content") if isinstance(first, dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            return ""
        return "".join(
            part["text"] for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        )

    @staticmethod
    def _extract_usage(data: Any) -> GenerationUsage:
        meta = data.get("usageMetadata") if isinstance(data, dict) else None
        if not isinstance(meta, dict):
            return GenerationUsage()
        try:
            return GenerationUsage(
                prompt_tokens=meta.get("promptTokenCount", 0),
                output_tokens=meta.get("candidatesTokenCount", 0),
            )
        except ValidationError:
            return GenerationUsage()

    @staticmethod
    def _block_reason(data: Any) -> str:
        feedback = data.get("promptFeedback") if isinstance(data, dict) else None
        if isinstance(feedback, dict) and feedback.get("blockReason"):
            return str(feedback["blockReason"])
        return "no candidates"

    @staticmethod
    def _is_quota_error(response: httpx.Response) -> bool:
        if response.status_code == 429:
            return True
        try:
            body = response.json()
        except ValueError:
            return False
        error = body.get("error") if isinstance(body, dict) else None
        return isinstance(error, dict) and error.get("status") == "RESOURCE_EXHAUSTED"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def is_available(self) -> bool:
        """Return ``True`` when an API key is configured."""
        return bool(self.config.api_key)

    async def generate(self, prompt: str) -> str:
        """Generate text from a prompt.

        Returns:
            The generated text (never empty).

        Raises:
            NetworkError: The API could not be reached or timed out.
            QuotaError: The API rejected the call for quota/rate reasons.
            MalformedResponseError: The API answered without usable text.
            ExternalCapabilityError: Any other HTTP failure.
        """
        if not self.is_available():
            raise ExternalCapabilityError("No Gemini API key configured")

        try:
            async with self._client() as client:
                response = await client.post(
                    self._endpoint(),
                    params={"key": self.config.api_key},
                    json=self._payload(prompt),
                )
                response.raise_for_status()
                data = response.json()
        except httpx.ConnectError as exc:
            raise NetworkError(f"Cannot connect to Gemini at {self.base_url}: {exc}") from exc
        except httpx.TimeoutException as exc:
            raise NetworkError(f"Request to Gemini timed out after {self.timeout}s.") from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"Transport error talking to Gemini: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            if self._is_quota_error(exc.response):
                raise QuotaError(
                    f"Gemini quota exhausted (HTTP {exc.response.status_code})"
                ) from exc
            raise ExternalCapabilityError(
                f"Gemini returned HTTP {exc.response.status_code}: {exc.response.text[:500]}"
            ) from exc
        except ValueError as exc:
            raise MalformedResponseError(f"Gemini returned a non-JSON body: {exc}") from exc

        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Gemini returned a JSON {type(data).__name__}, expected an object"
            )
        text = self._extract_text(data)
        if not text.strip():
            raise MalformedResponseError(f"Gemini returned no text ({self._block_reason(data)})")

        self.last_usage = self._extract_usage(data)
        return text
