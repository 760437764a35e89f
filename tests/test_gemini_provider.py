"""Tests for the google-genai transport adapter."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from google.genai import errors
import pytest

from studio_genai.errors import TransportError
from studio_genai.orchestration.retry import is_rate_limit_error
from studio_genai.providers.base import GenerationConfig, InlineImageContent, TextContent
from studio_genai.providers.gemini_provider import GeminiProvider, to_generate_response


def _sdk_response() -> SimpleNamespace:
    parts = [
        SimpleNamespace(text="thinking...", inline_data=None, thought=True),
        SimpleNamespace(text="here you go", inline_data=None, thought=None),
        SimpleNamespace(text=None, inline_data=SimpleNamespace(data=b"png", mime_type="image/png"), thought=None),
    ]
    candidate = SimpleNamespace(
        finish_reason=SimpleNamespace(value="STOP"),
        safety_ratings=[SimpleNamespace(category=SimpleNamespace(value="HARM_CATEGORY_HARASSMENT"), blocked=None)],
        content=SimpleNamespace(parts=parts),
    )
    return SimpleNamespace(candidates=[candidate])


class TestToGenerateResponse:
    def test_maps_candidates_and_parts(self) -> None:
        resp = to_generate_response(_sdk_response())
        cand = resp.candidates[0]
        assert cand.finish_reason == "STOP"
        assert cand.safety_ratings[0].category == "HARM_CATEGORY_HARASSMENT"
        assert cand.safety_ratings[0].blocked is False
        assert cand.content == [
            TextContent(text="here you go"),
            InlineImageContent(mime_type="image/png", data=b"png"),
        ]

    def test_no_candidates(self) -> None:
        assert to_generate_response(SimpleNamespace(candidates=None)).candidates == []

    def test_candidate_without_content(self) -> None:
        resp = to_generate_response(
            SimpleNamespace(candidates=[SimpleNamespace(finish_reason="IMAGE_SAFETY", safety_ratings=None, content=None)])
        )
        assert resp.candidates[0].finish_reason == "IMAGE_SAFETY"
        assert resp.candidates[0].content == []


class TestGeminiProvider:
    def _provider(self, side_effect=None, return_value=None) -> GeminiProvider:
        provider = GeminiProvider(api_key="test-key")
        provider.client = MagicMock()
        provider.client.aio.models.generate_content = AsyncMock(side_effect=side_effect, return_value=return_value)
        return provider

    @pytest.mark.asyncio
    async def test_generate_content_passes_config(self) -> None:
        provider = self._provider(return_value=_sdk_response())
        parts = [{"text": "hello"}]
        resp = await provider.generate_content(
            parts, GenerationConfig(model="gemini-test", response_modalities=("IMAGE", "TEXT"))
        )

        assert resp.candidates[0].content[-1] == InlineImageContent(mime_type="image/png", data=b"png")
        kwargs = provider.client.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"] == [{"role": "user", "parts": parts}]
        assert [str(getattr(m, "value", m)) for m in kwargs["config"].response_modalities] == ["IMAGE", "TEXT"]

    @pytest.mark.asyncio
    async def test_api_error_becomes_transport_error(self) -> None:
        api_error = errors.ClientError(
            429,
            {"error": {"code": 429, "message": "Resource has been exhausted", "status": "RESOURCE_EXHAUSTED"}},
        )
        provider = self._provider(side_effect=api_error)

        with pytest.raises(TransportError) as excinfo:
            await provider.generate_content([{"text": "hi"}], GenerationConfig(model="gemini-test"))

        assert excinfo.value.status_code == 429
        assert excinfo.value.status == "RESOURCE_EXHAUSTED"
        assert excinfo.value.__cause__ is api_error
        assert is_rate_limit_error(excinfo.value)
