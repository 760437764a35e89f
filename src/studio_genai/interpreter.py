from __future__ import annotations

import base64

from studio_genai.errors import (
    EmptyResponseError,
    MissingImageError,
    SafetyBlockedError,
    UnexpectedFinishError,
)
from studio_genai.providers.base import (
    ACCEPTED_FINISH_REASONS,
    SAFETY_FINISH_REASONS,
    Candidate,
    GenerateResponse,
    InlineImageContent,
    Output,
    TextContent,
)

_HARM_PREFIX = "HARM_CATEGORY_"

DEFAULT_SAFETY_ADVICE = (
    "This can sometimes happen with portraits. Try using a different reference image or adjusting your text prompts."
)


def blocked_categories(candidate: Candidate) -> tuple[str, ...]:
    return tuple(r.category.removeprefix(_HARM_PREFIX) for r in candidate.safety_ratings if r.blocked)


def _check_finish(candidate: Candidate, safety_advice: str) -> None:
    reason = candidate.finish_reason
    if not reason or reason in ACCEPTED_FINISH_REASONS:
        return
    if reason in SAFETY_FINISH_REASONS:
        categories = blocked_categories(candidate)
        raise SafetyBlockedError(
            f"Request blocked for safety reasons: {', '.join(categories) or 'unspecified'}. {safety_advice}",
            categories=categories,
        )
    raise UnexpectedFinishError(f"Generation stopped for an unexpected reason: {reason}.", reason=reason)


def interpret(
    response: GenerateResponse,
    *,
    require_image: bool = True,
    safety_advice: str = DEFAULT_SAFETY_ADVICE,
) -> Output:
    """
    Turn a service response into an `Output`, or raise a classified error.

    Text blocks are concatenated in order; the last inline image wins and is
    returned as a base64 data URI. When `require_image` is False the
    operation is text-only and an answer without text counts as empty.
    `safety_advice` is appended to the message of a safety block.
    """
    if not response.candidates:
        raise EmptyResponseError(
            "The AI returned an empty response, which may be due to a content policy violation or a server error."
        )
    candidate = response.candidates[0]
    _check_finish(candidate, safety_advice)

    text: str | None = None
    image_url: str | None = None
    for block in candidate.content:
        if isinstance(block, InlineImageContent):
            payload = base64.b64encode(block.data).decode("ascii")
            image_url = f"data:{block.mime_type};base64,{payload}"
        elif isinstance(block, TextContent):
            text = (text or "") + block.text

    if require_image and image_url is None:
        raise MissingImageError(
            "The AI did not return an image. This can happen with unusual prompts. "
            "Please try again with a different prompt."
        )
    if not require_image and not text:
        raise EmptyResponseError("The AI returned no text for this request.")
    return Output(image_url=image_url, text=text)
