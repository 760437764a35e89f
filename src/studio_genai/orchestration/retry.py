"""Rate-limit aware retry with exponential backoff and jitter.

Only throttling failures (HTTP 429 / RESOURCE_EXHAUSTED) are retried; every
other error propagates on the first attempt.
"""

from __future__ import annotations

import asyncio
import json
import logging
import random
import re
from collections.abc import Awaitable, Callable
from typing import TypeVar

from studio_genai.errors import RateLimitedError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RATE_LIMIT_STATUS = "RESOURCE_EXHAUSTED"
EXHAUSTED_MESSAGE = (
    "The AI service is temporarily unavailable due to high demand. "
    "Please try again in a few moments. (Rate limit exceeded)"
)

_EMBEDDED_JSON_RE = re.compile(r"\{.*\}", re.DOTALL)


def _embedded_status(message: str) -> tuple[object, object] | None:
    m = _EMBEDDED_JSON_RE.search(message)
    if not m:
        return None
    try:
        body = json.loads(m.group(0))
    except json.JSONDecodeError:
        return None
    err = body.get("error") if isinstance(body, dict) else None
    if not isinstance(err, dict):
        return None
    return err.get("code"), err.get("status")


def is_rate_limit_error(exc: BaseException) -> bool:
    """
    Classify a failure as throttling.

    Structured fields win when present; otherwise the message is checked for
    an embedded JSON status payload, then for plain substrings. The same
    message classifies the same way whether or not it parses as JSON.
    """
    if isinstance(exc, TransportError):
        if exc.status_code == 429 or exc.status == RATE_LIMIT_STATUS:
            return True

    message = str(exc)
    embedded = _embedded_status(message)
    if embedded is not None:
        code, status = embedded
        if code == 429 or status == RATE_LIMIT_STATUS:
            return True

    return "429" in message or RATE_LIMIT_STATUS in message or "rate limit" in message.lower()


class RetryPolicy:
    """
    Re-run one unit of work on rate-limit failures.

    Args:
        max_attempts: Total attempts including the first.
        initial_delay_s: Delay before the first retry.
        backoff_factor: Multiplier applied per attempt.
        max_jitter_s: Upper bound of the uniform random jitter added to each delay.
        sleep: Awaitable sleep, injectable for tests.
        rand: Source of uniform [0, 1) values for jitter.
    """

    def __init__(
        self,
        *,
        max_attempts: int = 5,
        initial_delay_s: float = 3.0,
        backoff_factor: float = 2.0,
        max_jitter_s: float = 1.0,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        rand: Callable[[], float] = random.random,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.max_attempts = max_attempts
        self.initial_delay_s = initial_delay_s
        self.backoff_factor = backoff_factor
        self.max_jitter_s = max_jitter_s
        self._sleep = sleep
        self._rand = rand

    def delay_for(self, attempt: int) -> float:
        return self.initial_delay_s * (self.backoff_factor**attempt) + self._rand() * self.max_jitter_s

    async def run(self, work: Callable[[], Awaitable[T]]) -> T:
        for attempt in range(self.max_attempts):
            try:
                return await work()
            except Exception as exc:
                if not is_rate_limit_error(exc):
                    raise
                if attempt == self.max_attempts - 1:
                    raise RateLimitedError(EXHAUSTED_MESSAGE) from exc
                delay = self.delay_for(attempt)
                logger.warning(
                    "Rate limit exceeded. Retrying in %.0fms (attempt %d/%d)",
                    delay * 1000,
                    attempt + 1,
                    self.max_attempts,
                )
                await self._sleep(delay)
        raise AssertionError("unreachable")
