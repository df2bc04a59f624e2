"""Unit tests for GeminiClient (taskforge.llm_client).

Tests cover:
- GeminiClient.__init__
- GeminiClient.is_available
- GeminiClient.generate (success, no key, connect error, timeout, quota,
  other HTTP error, non-JSON body, empty candidates)
- Static helpers: _extract_text, _extract_usage, _is_quota_error
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
import pytest

from taskforge.config import GeminiConfig
from taskforge.errors import (
    ExternalCapabilityError,
    MalformedResponseError,
    NetworkError,
    QuotaError,
)
from taskforge.llm_client import GeminiClient, GenerationUsage


_REQUEST = httpx.Request("POST", "https://generativelanguage.googleapis.com/v1beta/models/x")


def _status_error(status_code: int, **kwargs) -> httpx.HTTPStatusError:
    response = httpx.Response(status_code, request=_REQUEST, **kwargs)
    return httpx.HTTPStatusError("error", request=_REQUEST, response=response)


# ---------------------------------------------------------------------------
# GeminiClient.__init__ / is_available
# ---------------------------------------------------------------------------


class TestGeminiClientInit:
    @pytest.mark.unit
    def test_defaults(self):
        client = GeminiClient()
        assert client.base_url == "https://generativelanguage.googleapis.com"
        assert client.timeout == 60
        assert client.last_usage == GenerationUsage()

    @pytest.mark.unit
    def test_strips_trailing_slash(self):
        client = GeminiClient(GeminiConfig(base_url="http://proxy:8080/", timeout=30))
        assert client.base_url == "http://proxy:8080"
        assert client.timeout == 30

    @pytest.mark.unit
    def test_endpoint_uses_model(self):
        client = GeminiClient(GeminiConfig(model="gemini-1.5-pro"))
        assert client._endpoint() == "/v1beta/models/gemini-1.5-pro:generateContent"


class TestIsAvailable:
    @pytest.mark.unit
    def test_without_key(self):
        assert GeminiClient().is_available() is False

    @pytest.mark.unit
    def test_with_key(self):
        assert GeminiClient(GeminiConfig(api_key="k")).is_available() is True


# ---------------------------------------------------------------------------
# GeminiClient.generate
# ---------------------------------------------------------------------------


class TestGenerate:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_success(self, mock_httpx_client, gemini_payload):
        mock_client = mock_httpx_client(json_body=gemini_payload("const a = 1;"))
        client = GeminiClient(GeminiConfig(api_key="test-key"))

        with patch("httpx.AsyncClient", return_value=mock_client):
            text = await client.generate("write code")

        assert text == "const a = 1;"
        assert client.last_usage.prompt_tokens == 12
        assert client.last_usage.output_tokens == 34

        _, kwargs = mock_client.post.call_args
        assert kwargs["params"] == {"key": "test-key"}
        assert kwargs["json"]["contents"][0]["parts"][0]["text"] == "write code"
        assert kwargs["json"]["generationConfig"]["maxOutputTokens"] == 8192

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_key(self):
        with pytest.raises(ExternalCapabilityError, match="No Gemini API key"):
            await GeminiClient().generate("write code")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connect_error(self, mock_httpx_client):
        mock_client = mock_httpx_client(side_effect=httpx.ConnectError("refused"))
        client = GeminiClient(GeminiConfig(api_key="k"))

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(NetworkError, match="Cannot connect"):
                await client.generate("x")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout(self, mock_httpx_client):
        mock_client = mock_httpx_client(side_effect=httpx.ReadTimeout("slow"))
        client = GeminiClient(GeminiConfig(api_key="k"))

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(NetworkError, match="timed out"):
                await client.generate("x")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_quota_error(self, mock_httpx_client):
        mock_client = mock_httpx_client(json_body={})
        mock_client.post.return_value.raise_for_status = MagicMock(
            side_effect=_status_error(429)
        )
        client = GeminiClient(GeminiConfig(api_key="k"))

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(QuotaError, match="429"):
                await client.generate("x")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_other_http_error(self, mock_httpx_client):
        mock_client = mock_httpx_client(json_body={})
        mock_client.post.return_value.raise_for_status = MagicMock(
            side_effect=_status_error(500, text="boom")
        )
        client = GeminiClient(GeminiConfig(api_key="k"))

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(ExternalCapabilityError, match="HTTP 500") as exc_info:
                await client.generate("x")
        assert not isinstance(exc_info.value, QuotaError)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_json_body(self, mock_httpx_client):
        mock_client = mock_httpx_client(json_body={})
        mock_client.post.return_value.json.side_effect = ValueError("bad json")
        client = GeminiClient(GeminiConfig(api_key="k"))

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(MalformedResponseError, match="non-JSON"):
                await client.generate("x")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_candidates(self, mock_httpx_client):
        body = {"candidates": [], "promptFeedback": {"blockReason": "SAFETY"}}
        mock_client = mock_httpx_client(json_body=body)
        client = GeminiClient(GeminiConfig(api_key="k"))

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(MalformedResponseError, match="SAFETY"):
                await client.generate("x")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_whitespace_only_text(self, mock_httpx_client, gemini_payload):
        mock_client = mock_httpx_client(json_body=gemini_payload("   \n"))
        client = GeminiClient(GeminiConfig(api_key="k"))

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(MalformedResponseError):
                await client.generate("x")

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            [],
            "text",
            {"candidates": "x"},
            {"candidates": ["x"]},
            {"candidates": [{"content": "oops"}]},
            {"candidates": [{"content": {"parts": "oops"}}]},
            {"candidates": [{"content": {"parts": [{"text": 3}]}}], "promptFeedback": "x"},
        ],
    )
    async def test_unexpected_body_shapes(self, mock_httpx_client, body):
        mock_client = mock_httpx_client()
        mock_client.post.return_value.json.return_value = body
        client = GeminiClient(GeminiConfig(api_key="k"))

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(MalformedResponseError):
                await client.generate("x")
        assert client.last_usage == GenerationUsage()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_bad_usage_metadata_ignored(self, mock_httpx_client, gemini_payload):
        body = gemini_payload("const a = 1;")
        body["usageMetadata"] = {"promptTokenCount": "many"}
        mock_client = mock_httpx_client(json_body=body)
        client = GeminiClient(GeminiConfig(api_key="k"))

        with patch("httpx.AsyncClient", return_value=mock_client):
            assert await client.generate("x") == "const a = 1;"
        assert client.last_usage == GenerationUsage()


# ---------------------------------------------------------------------------
# Static helpers
# ---------------------------------------------------------------------------


class TestStaticHelpers:
    @pytest.mark.unit
    def test_extract_text_joins_parts(self):
        data = {"candidates": [{"content": {"parts": [{"text": "a"}, {"text": "b"}]}}]}
        assert GeminiClient._extract_text(data) == "ab"

    @pytest.mark.unit
    def test_extract_text_missing(self):
        assert GeminiClient._extract_text({}) == ""
        assert GeminiClient._extract_text({"candidates": [{}]}) == ""

    @pytest.mark.unit
    def test_extract_usage(self):
        usage = GeminiClient._extract_usage(
            {"usageMetadata": {"promptTokenCount": 3, "candidatesTokenCount": 7}}
        )
        assert usage == GenerationUsage(prompt_tokens=3, output_tokens=7)

    @pytest.mark.unit
    def test_extract_usage_missing(self):
        assert GeminiClient._extract_usage({}) == GenerationUsage()

    @pytest.mark.unit
    def test_is_quota_error_by_status_field(self):
        response = httpx.Response(
            403,
            request=_REQUEST,
            json={"error": {"status": "RESOURCE_EXHAUSTED"}},
        )
        assert GeminiClient._is_quota_error(response) is True

    @pytest.mark.unit
    def test_is_quota_error_plain_403(self):
        response = httpx.Response(403, request=_REQUEST, text="forbidden")
        assert GeminiClient._is_quota_error(response) is False

    @pytest.mark.unit
    def test_is_quota_error_non_object_body(self):
        response = httpx.Response(403, request=_REQUEST, json=["RESOURCE_EXHAUSTED"])
        assert GeminiClient._is_quota_error(response) is False

    @pytest.mark.unit
    def test_extract_text_non_object(self):
        assert GeminiClient._extract_text([]) == ""
        assert GeminiClient._extract_text({"candidates": [{"content": "oops"}]}) == ""
