from __future__ import annotations

import dataclasses
import json
import logging
from typing import Any

from fastapi import FastAPI, File, Form, HTTPException, Request, Response, UploadFile

from studio_genai.assets import ImageAsset
from studio_genai.errors import ErrorKind, StudioError
from studio_genai.operations import (
    AnalyzeReferenceRequest,
    CompositeRequest,
    DescribeRequest,
    FaceSwapRequest,
    InpaintRequest,
    ReperspectiveRequest,
)
from studio_genai.prompts import options as opt
from studio_genai.providers.base import Output
from studio_genai.service import StudioOrchestrator

logger = logging.getLogger(__name__)

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.SAFETY_BLOCKED: 422,
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.CONFIGURATION: 503,
    ErrorKind.TIMED_OUT: 504,
}

# Knobs accepted in the composite `params` JSON; images arrive as uploads.
_IMAGE_FIELDS = {"subject", "face_reference", "outfit", "object_image", "background", "art_reference"}
_COMPOSITE_PARAMS = {f.name for f in dataclasses.fields(CompositeRequest)} - _IMAGE_FIELDS


def create_app(orchestrator: StudioOrchestrator | None = None) -> FastAPI:
    app = FastAPI(title="studio_genai")
    app.state.orchestrator = orchestrator or StudioOrchestrator()

    @app.get("/options")
    def get_options() -> dict[str, Any]:
        return opt.catalog()


    @app.post("/operations/composite-generate")
    async def composite_generate(
        request: Request,
        subject: UploadFile | None = File(None),
        subject_uri: str = Form(""),
        face_reference: UploadFile | None = File(None),
        outfit: UploadFile | None = File(None),
        object_image: UploadFile | None = File(None),
        background: UploadFile | None = File(None),
        art_reference: UploadFile | None = File(None),
        params: str = Form("{}"),
        effects: str = Form(""),
        as_image: bool = False,
    ):
        knobs = _parse_params(params)
        if effects:
            # Effects arrive as a JSON list, one per category; they fill style_prompt.
            knobs["style_prompt"] = opt.join_effects(_parse_json_list(effects, "effects"))
        req = _build_request(
            CompositeRequest,
            subject=await _read_source(subject, subject_uri, "subject"),
            face_reference=await _read_optional(face_reference, "face_reference"),
            outfit=await _read_optional(outfit, "outfit"),
            object_image=await _read_optional(object_image, "object_image"),
            background=await _read_optional(background, "background"),
            art_reference=await _read_optional(art_reference, "art_reference"),
            **knobs,
        )
        out = await _call(_orchestrator(request).composite_generate(req))
        return _render_output(out, as_image)

    @app.post("/operations/inpaint")
    async def inpaint(
        request: Request,
        source: UploadFile | None = File(None),
        source_uri: str = Form(""),
        mask: UploadFile = File(...),
        prompt: str = Form(...),
        as_image: bool = False,
    ):
        req = InpaintRequest(
            source=await _read_source(source, source_uri, "source"),
            mask=await _read_asset(mask, "mask"),
            prompt=prompt,
        )
        return _render_output(await _call(_orchestrator(request).inpaint(req)), as_image)

    @app.post("/operations/describe")
    async def describe(request: Request, image: UploadFile = File(...)):
        req = DescribeRequest(image=await _read_asset(image, "image"))
        return {"text": await _call(_orchestrator(request).describe(req))}

    @app.post("/operations/analyze-reference")
    async def analyze_reference(
        request: Request,
        subject: UploadFile = File(...),
        art_reference: UploadFile = File(...),
    ):
        req = AnalyzeReferenceRequest(
            subject=await _read_asset(subject, "subject"),
            art_reference=await _read_asset(art_reference, "art_reference"),
        )
        res = await _call(_orchestrator(request).analyze_reference(req))
        return res.model_dump()

    @app.post("/operations/face-swap")
    async def face_swap(
        request: Request,
        target: UploadFile | None = File(None),
        target_uri: str = Form(""),
        face_source: UploadFile = File(...),
        as_image: bool = False,
    ):
        req = FaceSwapRequest(
            target=await _read_source(target, target_uri, "target"),
            face_source=await _read_asset(face_source, "face_source"),
        )
        return _render_output(await _call(_orchestrator(request).face_swap(req)), as_image)

    @app.post("/operations/reperspective")
    async def reperspective(
        request: Request,
        source: UploadFile | None = File(None),
        source_uri: str = Form(""),
        prompt: str = Form(...),
        as_image: bool = False,
    ):
        req = ReperspectiveRequest(source=await _read_source(source, source_uri, "source"), prompt=prompt)
        return _render_output(await _call(_orchestrator(request).reperspective(req)), as_image)

    return app


def _orchestrator(request: Request) -> StudioOrchestrator:
    return request.app.state.orchestrator


async def _read_asset(upload: UploadFile, label: str) -> ImageAsset:
    content = await upload.read()
    if not content:
        raise HTTPException(status_code=400, detail=f"{label} upload is empty")
    try:
        return ImageAsset.from_bytes(content, label=label)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"{label}: {exc}") from exc


async def _read_optional(upload: UploadFile | None, label: str) -> ImageAsset | None:
    if upload is None or not upload.filename:
        return None
    return await _read_asset(upload, label)


async def _read_source(upload: UploadFile | None, uri: str, label: str) -> ImageAsset:
    # A previous result's image_url can be sent back as `<label>_uri` to chain edits.
    if uri:
        try:
            return ImageAsset.from_data_uri(uri, label=label)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"{label}_uri: {exc}") from exc
    if upload is None or not upload.filename:
        raise HTTPException(status_code=400, detail=f"either {label} or {label}_uri is required")
    return await _read_asset(upload, label)


def _parse_params(value: str) -> dict[str, Any]:
    try:
        loaded = json.loads(value or "{}")
    except json.JSONDecodeError as exc:
        raise HTTPException(status_code=400, detail=f"params must be a JSON object: {exc}") from exc
    if not isinstance(loaded, dict):
        raise HTTPException(status_code=400, detail="params must be a JSON object")
    unknown = sorted(set(loaded) - _COMPOSITE_PARAMS)
    if unknown:
        raise HTTPException(status_code=400, detail=f"unknown params: {', '.join(unknown)}")
    return loaded


def _parse_json_list(value: str, label: str) -> list[str]:
    try:
        loaded = json.loads(value)
    except json.JSONDecodeError as exc:
        raise HTTPException(status_code=400, detail=f"{label} must be JSON list: {exc}") from exc
    if not isinstance(loaded, list):
        raise HTTPException(status_code=400, detail=f"{label} must be JSON list")
    return [str(item) for item in loaded]


def _build_request(cls: type, **kwargs: Any) -> Any:
    try:
        return cls(**kwargs)
    except TypeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


async def _call(awaitable: Any) -> Any:
    try:
        return await awaitable
    except StudioError as exc:
        raise HTTPException(status_code=_STATUS_BY_KIND.get(exc.kind, 502), detail=str(exc)) from exc


def _output_json(out: Output) -> dict[str, Any]:
    return {"image_url": out.image_url, "text": out.text}


def _render_output(out: Output, as_image: bool) -> Any:
    if not as_image:
        return _output_json(out)
    return Response(content=out.image_bytes(), media_type=out.mime_type)


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="127.0.0.1", port=8000)
