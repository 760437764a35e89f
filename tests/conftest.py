"""Shared pytest fixtures for studio_genai tests."""

from __future__ import annotations

from typing import Any

import pytest

from helpers import FakeTransport, make_png, no_sleep
from studio_genai.assets import ImageAsset
from studio_genai.config import Settings
from studio_genai.orchestration.queue import SerialJobQueue
from studio_genai.orchestration.retry import RetryPolicy
from studio_genai.service import StudioOrchestrator


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def subject() -> ImageAsset:
    return ImageAsset(data=b"subject-bytes", mime_type="image/png", label="subject")


@pytest.fixture
def other_image() -> ImageAsset:
    return ImageAsset(data=b"other-bytes", mime_type="image/jpeg")


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        gemini_api_key="test-key",
        queue_cooldown_s=0.0,
        request_timeout_s=None,
    )


@pytest.fixture
def make_orchestrator(test_settings: Settings):
    """Build an orchestrator with no real waits; keyword overrides patch the settings."""

    def _make(transport: FakeTransport | None, **overrides: Any) -> StudioOrchestrator:
        config = test_settings.model_copy(update=overrides) if overrides else test_settings
        return StudioOrchestrator(
            config=config,
            transport=transport,
            queue=SerialJobQueue(cooldown_s=0.0),
            retry=RetryPolicy(max_attempts=config.retry_max_attempts, sleep=no_sleep, rand=lambda: 0.0),
        )

    return _make
