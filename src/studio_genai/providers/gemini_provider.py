from __future__ import annotations

import logging
from typing import Any

from studio_genai.errors import TransportError
from studio_genai.providers.base import (
    Candidate,
    GenerateResponse,
    GenerationConfig,
    InlineImageContent,
    SafetyRating,
    TextContent,
)

logger = logging.getLogger(__name__)


class GeminiProvider:
    name = "gemini"

    def __init__(self, api_key: str) -> None:
        # Imported lazily so the app can start without the dependency installed.
        from google import genai  # type: ignore

        self.client = genai.Client(api_key=api_key)

    async def generate_content(
        self,
        parts: list[dict[str, Any]],
        config: GenerationConfig,
    ) -> GenerateResponse:
        """
        One call to `models.generate_content`, no retries.

        SDK API errors are re-raised as `TransportError` carrying the HTTP code
        and status string so callers can classify them without parsing text.
        """
        from google.genai import errors, types  # type: ignore

        gen_config = types.GenerateContentConfig(
            response_modalities=list(config.response_modalities) or None,
            response_mime_type=config.response_mime_type,
            response_schema=config.response_schema,
        )
        try:
            resp = await self.client.aio.models.generate_content(
                model=config.model,
                contents=[{"role": "user", "parts": parts}],
                config=gen_config,
            )
        except errors.APIError as exc:
            raise TransportError(str(exc), status_code=exc.code, status=exc.status) from exc

        return to_generate_response(resp)


def _enum_value(value: Any) -> str | None:
    if value is None:
        return None
    return str(getattr(value, "value", value))


def to_generate_response(resp: Any) -> GenerateResponse:
    """Validate an SDK response object into the typed response model."""
    candidates: list[Candidate] = []
    for cand in getattr(resp, "candidates", None) or []:
        ratings = [
            SafetyRating(
                category=_enum_value(getattr(r, "category", None)) or "UNSPECIFIED",
                blocked=bool(getattr(r, "blocked", False)),
            )
            for r in getattr(cand, "safety_ratings", None) or []
        ]

        blocks: list[TextContent | InlineImageContent] = []
        content = getattr(cand, "content", None)
        for part in getattr(content, "parts", None) or []:
            if getattr(part, "thought", False):
                continue
            inline = getattr(part, "inline_data", None)
            if inline is not None and getattr(inline, "data", None):
                mime = getattr(inline, "mime_type", None) or "image/png"
                if not mime.startswith("image/"):
                    logger.debug("Skipping non-image inline part (%s)", mime)
                    continue
                blocks.append(InlineImageContent(mime_type=mime, data=inline.data))
            elif getattr(part, "text", None):
                blocks.append(TextContent(text=part.text))

        candidates.append(
            Candidate(
                finish_reason=_enum_value(getattr(cand, "finish_reason", None)),
                safety_ratings=ratings,
                content=blocks,
            )
        )
    return GenerateResponse(candidates=candidates)
