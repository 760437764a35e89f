from __future__ import annotations

import logging
from typing import Any

from studio_genai.config import Settings, settings
from studio_genai.errors import MissingCredentialError, StudioError, UnknownServiceError
from studio_genai.interpreter import DEFAULT_SAFETY_ADVICE, interpret
from studio_genai.operations import (
    AnalyzeReferenceRequest,
    CompositeRequest,
    DescribeRequest,
    FaceSwapRequest,
    InpaintRequest,
    OperationKind,
    OperationRequest,
    ReperspectiveRequest,
    kind_of,
)
from studio_genai.orchestration.queue import SerialJobQueue
from studio_genai.orchestration.retry import RetryPolicy
from studio_genai.prompts import options as opt
from studio_genai.prompts.templates import build_prompt
from studio_genai.providers.base import (
    ArtReferenceAnalysis,
    GenerateResponse,
    GenerationConfig,
    GenerationTransport,
    Output,
)

logger = logging.getLogger(__name__)

IMAGE_MODALITIES = ("IMAGE", "TEXT")

_FAILURE_PREFIX: dict[OperationKind, str] = {
    OperationKind.COMPOSITE_GENERATE: "An error occurred while communicating with the AI.",
    OperationKind.INPAINT: "An error occurred during in-painting.",
    OperationKind.DESCRIBE: "Failed to generate image description.",
    OperationKind.ANALYZE_REFERENCE: "Failed to analyze art reference.",
    OperationKind.FACE_SWAP: "An error occurred while swapping the face.",
    OperationKind.REPERSPECTIVE: "An error occurred during scene manipulation.",
}

_SAFETY_ADVICE: dict[OperationKind, str] = {
    OperationKind.COMPOSITE_GENERATE: DEFAULT_SAFETY_ADVICE,
    OperationKind.INPAINT: DEFAULT_SAFETY_ADVICE,
    OperationKind.DESCRIBE: "Please use a different image.",
    OperationKind.ANALYZE_REFERENCE: "Please use a different image.",
    OperationKind.FACE_SWAP: "This can sometimes happen with portraits. Try using a different reference image.",
    OperationKind.REPERSPECTIVE: "Please adjust your prompt or use a different image.",
}


class StudioOrchestrator:
    """
    Entry point for the six studio operations.

    Create one per process (or per test) and pass it to callers; it owns the
    serial queue and retry policy, and lazily builds the transport from the
    configured credential on first use.
    """

    def __init__(
        self,
        *,
        config: Settings | None = None,
        transport: GenerationTransport | None = None,
        queue: SerialJobQueue | None = None,
        retry: RetryPolicy | None = None,
    ) -> None:
        self.config = config or settings
        self.queue = queue or SerialJobQueue(cooldown_s=self.config.queue_cooldown_s)
        self.retry = retry or RetryPolicy(
            max_attempts=self.config.retry_max_attempts,
            initial_delay_s=self.config.retry_initial_delay_s,
            backoff_factor=self.config.retry_backoff_factor,
            max_jitter_s=self.config.retry_max_jitter_s,
        )
        self._transport = transport
        self._init_error: MissingCredentialError | None = None

    def _get_transport(self) -> GenerationTransport:
        if self._transport is not None:
            return self._transport
        # A failed first read is remembered; the environment is not re-checked.
        if self._init_error is not None:
            raise self._init_error
        if not self.config.gemini_api_key:
            self._init_error = MissingCredentialError(
                "GEMINI_API_KEY environment variable is not set. Please configure it in your environment."
            )
            raise self._init_error

        from studio_genai.providers.gemini_provider import GeminiProvider

        self._transport = GeminiProvider(api_key=self.config.gemini_api_key)
        return self._transport

    def _image_config(self) -> GenerationConfig:
        return GenerationConfig(model=self.config.gemini_image_model, response_modalities=IMAGE_MODALITIES)

    async def _submit(
        self,
        request: OperationRequest,
        gen_config: GenerationConfig,
        *,
        require_image: bool,
        timeout: float | None,
    ) -> Output:
        request.validate()
        kind = kind_of(request)
        spec = build_prompt(request)
        parts = spec.to_wire()
        transport = self._get_transport()

        async def attempt() -> GenerateResponse:
            return await transport.generate_content(parts, gen_config)

        deadline = timeout if timeout is not None else self.config.request_timeout_s
        prefix = _FAILURE_PREFIX[kind]
        try:
            response = await self.queue.enqueue(lambda: self.retry.run(attempt), timeout=deadline)
            return interpret(response, require_image=require_image, safety_advice=_SAFETY_ADVICE[kind])
        except StudioError as exc:
            logger.exception("%s failed (%s)", kind.value, exc.kind.value)
            raise exc.with_context(prefix) from exc
        except Exception as exc:
            logger.exception("%s failed", kind.value)
            raise UnknownServiceError(f"{prefix} Details: {exc}") from exc

    async def composite_generate(self, request: CompositeRequest, *, timeout: float | None = None) -> Output:
        return await self._submit(request, self._image_config(), require_image=True, timeout=timeout)

    async def inpaint(self, request: InpaintRequest, *, timeout: float | None = None) -> Output:
        return await self._submit(request, self._image_config(), require_image=True, timeout=timeout)

    async def face_swap(self, request: FaceSwapRequest, *, timeout: float | None = None) -> Output:
        return await self._submit(request, self._image_config(), require_image=True, timeout=timeout)

    async def reperspective(self, request: ReperspectiveRequest, *, timeout: float | None = None) -> Output:
        return await self._submit(request, self._image_config(), require_image=True, timeout=timeout)

    async def describe(self, request: DescribeRequest, *, timeout: float | None = None) -> str:
        gen_config = GenerationConfig(model=self.config.gemini_text_model)
        output = await self._submit(request, gen_config, require_image=False, timeout=timeout)
        return output.text or ""

    async def analyze_reference(
        self,
        request: AnalyzeReferenceRequest,
        *,
        timeout: float | None = None,
    ) -> ArtReferenceAnalysis:
        gen_config = GenerationConfig(
            model=self.config.gemini_text_model,
            response_mime_type="application/json",
            response_schema=ArtReferenceAnalysis,
        )
        output = await self._submit(request, gen_config, require_image=False, timeout=timeout)
        try:
            result = ArtReferenceAnalysis.model_validate_json((output.text or "").strip())
        except ValueError as exc:
            raise UnknownServiceError(
                f"{_FAILURE_PREFIX[OperationKind.ANALYZE_REFERENCE]} Details: the AI returned malformed JSON ({exc})"
            ) from exc

        if result.lighting_style not in opt.LIGHTING_STYLES:
            logger.warning("AI returned an invalid lighting style %r; falling back to 'None'", result.lighting_style)
            result = result.model_copy(update={"lighting_style": opt.NONE})
        return result

    async def run(self, request: OperationRequest, *, timeout: float | None = None) -> Any:
        """Dispatch any operation request to its handler."""
        handlers = {
            OperationKind.COMPOSITE_GENERATE: self.composite_generate,
            OperationKind.INPAINT: self.inpaint,
            OperationKind.DESCRIBE: self.describe,
            OperationKind.ANALYZE_REFERENCE: self.analyze_reference,
            OperationKind.FACE_SWAP: self.face_swap,
            OperationKind.REPERSPECTIVE: self.reperspective,
        }
        return await handlers[kind_of(request)](request, timeout=timeout)
