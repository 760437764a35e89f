from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Loads keys from process env, and also from a local .env file for convenience.
    model_config = SettingsConfigDict(env_prefix="", extra="ignore", env_file=".env", env_file_encoding="utf-8")

    # Keys
    gemini_api_key: str | None = None

    # Models
    gemini_image_model: str = "gemini-2.5-flash-image"
    gemini_text_model: str = "gemini-2.5-flash"

    # Retry policy (rate-limit only)
    retry_max_attempts: int = 5
    retry_initial_delay_s: float = 3.0
    retry_backoff_factor: float = 2.0
    retry_max_jitter_s: float = 1.0

    # Serial queue
    queue_cooldown_s: float = 1.0
    # None disables the per-job deadline.
    request_timeout_s: float | None = None


settings = Settings()
