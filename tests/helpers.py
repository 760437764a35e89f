"""Test doubles and response builders shared across the suite."""

from __future__ import annotations

from io import BytesIO
from typing import Any

from PIL import Image

from studio_genai.providers.base import (
    Candidate,
    GenerateResponse,
    GenerationConfig,
    InlineImageContent,
    TextContent,
)


def make_png(color: str = "red", size: tuple[int, int] = (8, 8)) -> bytes:
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, "PNG")
    return buf.getvalue()


def image_response(text: str | None = "done", data: bytes = b"img", mime: str = "image/png") -> GenerateResponse:
    content: list[Any] = []
    if text is not None:
        content.append(TextContent(text=text))
    content.append(InlineImageContent(mime_type=mime, data=data))
    return GenerateResponse(candidates=[Candidate(finish_reason="STOP", content=content)])


def text_response(text: str) -> GenerateResponse:
    return GenerateResponse(candidates=[Candidate(finish_reason="STOP", content=[TextContent(text=text)])])


async def no_sleep(_delay: float) -> None:
    return None


class FakeTransport:
    """Scripted transport: each call consumes the next item; the last item repeats."""

    name = "fake"

    def __init__(self, *script: GenerateResponse | Exception) -> None:
        self.script = list(script)
        self.calls: list[tuple[list[dict[str, Any]], GenerationConfig]] = []

    async def generate_content(self, parts: list[dict[str, Any]], config: GenerationConfig) -> GenerateResponse:
        self.calls.append((parts, config))
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, Exception):
            raise item
        return item
