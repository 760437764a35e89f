"""Tests for rate-limit classification and the retry policy."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from studio_genai.errors import RateLimitedError, TransportError
from studio_genai.orchestration.retry import EXHAUSTED_MESSAGE, RetryPolicy, is_rate_limit_error


def _policy(sleeps: list[float], **kwargs) -> RetryPolicy:
    async def _sleep(delay: float) -> None:
        sleeps.append(delay)

    return RetryPolicy(sleep=_sleep, rand=lambda: 0.5, **kwargs)


class TestIsRateLimitError:
    def test_structured_status_code(self) -> None:
        assert is_rate_limit_error(TransportError("Too many requests", status_code=429))

    def test_structured_status(self) -> None:
        assert is_rate_limit_error(TransportError("quota", status_code=None, status="RESOURCE_EXHAUSTED"))

    def test_embedded_json_code(self) -> None:
        body = json.dumps({"error": {"code": 429, "message": "quota", "status": "RESOURCE_EXHAUSTED"}})
        assert is_rate_limit_error(RuntimeError(f"got error: {body}"))

    def test_embedded_json_status_only(self) -> None:
        body = json.dumps({"error": {"status": "RESOURCE_EXHAUSTED"}})
        assert is_rate_limit_error(RuntimeError(body))

    @pytest.mark.parametrize("message", ["HTTP 429 Too Many Requests", "RESOURCE_EXHAUSTED: slow down", "Rate limit hit"])
    def test_substring_fallback(self, message: str) -> None:
        assert is_rate_limit_error(RuntimeError(message))

    @pytest.mark.parametrize(
        "message",
        [
            "boom",
            json.dumps({"error": {"code": 500, "status": "INTERNAL"}}),
            "malformed {not json}",
        ],
    )
    def test_other_errors(self, message: str) -> None:
        assert not is_rate_limit_error(RuntimeError(message))

    def test_transport_error_with_other_status(self) -> None:
        assert not is_rate_limit_error(TransportError("bad request", status_code=400, status="INVALID_ARGUMENT"))

    @pytest.mark.parametrize(
        ("as_json", "as_text"),
        [
            (json.dumps({"error": {"code": 429}}), "error code 429"),
            (json.dumps({"error": {"status": "RESOURCE_EXHAUSTED"}}), "status RESOURCE_EXHAUSTED"),
            (json.dumps({"error": {"code": 503}}), "error code 503"),
        ],
    )
    def test_same_classification_for_json_and_text(self, as_json: str, as_text: str) -> None:
        assert is_rate_limit_error(RuntimeError(as_json)) == is_rate_limit_error(RuntimeError(as_text))


class TestRetryPolicy:
    @pytest.mark.asyncio
    async def test_success_first_try(self) -> None:
        sleeps: list[float] = []
        work = AsyncMock(return_value="ok")
        assert await _policy(sleeps).run(work) == "ok"
        assert work.await_count == 1
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_recovers_after_rate_limits(self) -> None:
        sleeps: list[float] = []
        work = AsyncMock(side_effect=[TransportError("slow", status_code=429), RuntimeError("429"), "ok"])
        assert await _policy(sleeps).run(work) == "ok"
        assert work.await_count == 3
        assert sleeps == [3.5, 6.5]

    @pytest.mark.asyncio
    async def test_five_rate_limits_exhaust_after_five_attempts(self) -> None:
        sleeps: list[float] = []
        last = TransportError("quota", status_code=429)
        work = AsyncMock(side_effect=last)

        with pytest.raises(RateLimitedError) as excinfo:
            await _policy(sleeps, max_attempts=5).run(work)

        assert work.await_count == 5
        assert str(excinfo.value) == EXHAUSTED_MESSAGE
        assert "temporarily unavailable" in str(excinfo.value)
        assert excinfo.value.__cause__ is last
        # Backoff 3s * 2^attempt plus 0.5s of jitter, no sleep after the final attempt.
        assert sleeps == [3.5, 6.5, 12.5, 24.5]

    @pytest.mark.asyncio
    async def test_non_rate_limit_error_propagates_immediately(self) -> None:
        sleeps: list[float] = []
        err = ValueError("bad prompt")
        work = AsyncMock(side_effect=err)

        with pytest.raises(ValueError) as excinfo:
            await _policy(sleeps).run(work)

        assert excinfo.value is err
        assert work.await_count == 1
        assert sleeps == []

    def test_jitter_bounds(self) -> None:
        low = RetryPolicy(initial_delay_s=1.0, backoff_factor=2.0, max_jitter_s=1.0, rand=lambda: 0.0)
        high = RetryPolicy(initial_delay_s=1.0, backoff_factor=2.0, max_jitter_s=1.0, rand=lambda: 0.999)
        assert low.delay_for(2) == 4.0
        assert 4.0 < high.delay_for(2) < 5.0

    def test_rejects_zero_attempts(self) -> None:
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)
