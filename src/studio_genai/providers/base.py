from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal, Protocol, Union

from pydantic import BaseModel, Field


class FinishReason(str, Enum):
    STOP = "STOP"
    MAX_TOKENS = "MAX_TOKENS"
    SAFETY = "SAFETY"
    IMAGE_SAFETY = "IMAGE_SAFETY"
    RECITATION = "RECITATION"
    PROHIBITED_CONTENT = "PROHIBITED_CONTENT"
    OTHER = "OTHER"


ACCEPTED_FINISH_REASONS = frozenset({FinishReason.STOP.value, FinishReason.MAX_TOKENS.value})
SAFETY_FINISH_REASONS = frozenset({FinishReason.SAFETY.value, FinishReason.IMAGE_SAFETY.value})


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class InlineImageContent(BaseModel):
    type: Literal["image"] = "image"
    mime_type: str
    data: bytes


ContentBlock = Annotated[Union[TextContent, InlineImageContent], Field(discriminator="type")]


class SafetyRating(BaseModel):
    category: str
    blocked: bool = False


class Candidate(BaseModel):
    # Kept as the raw code so unknown reasons survive into error messages.
    finish_reason: str | None = None
    safety_ratings: list[SafetyRating] = Field(default_factory=list)
    content: list[ContentBlock] = Field(default_factory=list)


class GenerateResponse(BaseModel):
    candidates: list[Candidate] = Field(default_factory=list)


@dataclass(frozen=True)
class Output:
    image_url: str | None
    text: str | None

    @property
    def mime_type(self) -> str | None:
        if not self.image_url or not self.image_url.startswith("data:"):
            return None
        return self.image_url[5:].split(";", 1)[0]

    def image_bytes(self) -> bytes | None:
        if not self.image_url:
            return None
        _, _, payload = self.image_url.partition(";base64,")
        return base64.b64decode(payload)


class ArtReferenceAnalysis(BaseModel):
    style_description: str
    integration_plan: str
    lighting_style: str
    action_prompt: str


@dataclass(frozen=True)
class GenerationConfig:
    model: str
    response_modalities: tuple[str, ...] = ()
    response_mime_type: str | None = None
    response_schema: Any = None


class GenerationTransport(Protocol):
    name: str

    async def generate_content(
        self,
        parts: list[dict[str, Any]],
        config: GenerationConfig,
    ) -> GenerateResponse: ...
