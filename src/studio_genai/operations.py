from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from studio_genai.assets import ImageAsset
from studio_genai.errors import InvalidRequestError
from studio_genai.prompts import options as opt


class OperationKind(str, Enum):
    COMPOSITE_GENERATE = "composite-generate"
    INPAINT = "inpaint"
    DESCRIBE = "describe"
    ANALYZE_REFERENCE = "analyze-reference"
    FACE_SWAP = "face-swap"
    REPERSPECTIVE = "reperspective"


_TEXT_FIELDS = (
    "subject_prompt",
    "outfit_prompt",
    "background_prompt",
    "style_prompt",
    "art_reference_prompt",
    "integration_plan",
    "flyer_text",
    "thumbnail_text",
    "manual_focus_subject",
)


def _is_number(value: object, *, integral: bool = False) -> bool:
    # bool is an int subclass but never a valid knob value.
    if isinstance(value, bool):
        return False
    return isinstance(value, int) if integral else isinstance(value, (int, float))


@dataclass(frozen=True)
class CompositeRequest:
    subject: ImageAsset
    subject_mode: str = "single"
    subject_prompt: str = ""
    face_reference: ImageAsset | None = None

    # Composition
    outfit: ImageAsset | None = None
    outfit_prompt: str = ""
    object_image: ImageAsset | None = None
    background: ImageAsset | None = None
    background_prompt: str = ""
    background_mode: str = "describe"

    # Style
    style_prompt: str = ""
    art_reference: ImageAsset | None = None
    art_reference_prompt: str = ""
    art_style_influence: int = 75
    subject_influence: int = 75
    surprise: int = 25
    integration_plan: str = ""
    use_art_lighting: bool = False
    use_art_skin: bool = False
    flyer_text: str = ""
    thumbnail_text: str = ""

    # Lighting & skin
    lighting_style: str = opt.NONE
    skin_texture: str = opt.NONE
    highlight_style: str = opt.NONE
    highlight_intensity: str = opt.NONE

    # Camera
    perspective_distance: str = opt.NONE
    perspective_angle: str = opt.NONE
    perspective_pov: str = opt.NONE
    perspective_movement: str = opt.NONE
    perspective_lens: str = opt.NONE
    aperture: str = opt.NONE
    shutter_speed: str = opt.NONE
    iso: str = opt.NONE
    lens_type: str = opt.NONE
    shooting_mode: str = opt.NONE
    focus_mode: str = opt.FOCUS_AUTO
    manual_focus_subject: str = ""
    exposure: float = 0.0
    color_temperature: int = opt.DEFAULT_COLOR_TEMPERATURE

    @property
    def is_flyer(self) -> bool:
        return opt.FLYER_MARKER in self.style_prompt

    @property
    def is_thumbnail(self) -> bool:
        return not self.is_flyer and opt.THUMBNAIL_MARKER in self.style_prompt

    def validate(self) -> None:
        if self.subject is None:
            raise InvalidRequestError("A subject image is required.")

        for name in _TEXT_FIELDS:
            if not isinstance(getattr(self, name), str):
                raise InvalidRequestError(f"{name} must be a string.")
        for name in ("use_art_lighting", "use_art_skin"):
            if not isinstance(getattr(self, name), bool):
                raise InvalidRequestError(f"{name} must be true or false.")

        for name in ("art_style_influence", "subject_influence", "surprise"):
            value = getattr(self, name)
            if not _is_number(value, integral=True):
                raise InvalidRequestError(f"{name} must be an integer (got {value!r}).")
            if not 0 <= value <= 100:
                raise InvalidRequestError(f"{name} must be between 0 and 100 (got {value}).")

        lo, hi = opt.EXPOSURE_RANGE
        if not _is_number(self.exposure):
            raise InvalidRequestError(f"exposure must be a number (got {self.exposure!r}).")
        if not lo <= self.exposure <= hi:
            raise InvalidRequestError(f"exposure must be between {lo} and {hi} EV (got {self.exposure}).")
        if not _is_number(self.color_temperature, integral=True):
            raise InvalidRequestError(f"color_temperature must be an integer (got {self.color_temperature!r}).")
        if self.color_temperature <= 0:
            raise InvalidRequestError("color_temperature must be a positive Kelvin value.")

        choices = {
            "subject_mode": opt.SUBJECT_MODES,
            "background_mode": opt.BACKGROUND_MODES,
            "lighting_style": tuple(opt.LIGHTING_STYLES),
            "skin_texture": tuple(opt.SKIN_TEXTURES),
            "highlight_style": tuple(opt.HIGHLIGHT_STYLES),
            "highlight_intensity": opt.HIGHLIGHT_INTENSITIES,
            "perspective_distance": opt.PERSPECTIVE_DISTANCE,
            "perspective_angle": opt.PERSPECTIVE_ANGLE,
            "perspective_pov": opt.PERSPECTIVE_POV,
            "perspective_movement": opt.PERSPECTIVE_MOVEMENT,
            "perspective_lens": opt.PERSPECTIVE_LENS,
            "aperture": opt.APERTURES,
            "shutter_speed": opt.SHUTTER_SPEEDS,
            "iso": opt.ISO_VALUES,
            "lens_type": opt.LENS_TYPES,
            "shooting_mode": opt.SHOOTING_MODES,
            "focus_mode": opt.FOCUS_MODES,
        }
        for name, allowed in choices.items():
            value = getattr(self, name)
            if value not in allowed:
                raise InvalidRequestError(f"{name} '{value}' is not a supported option.")

        if self.is_flyer and not self.flyer_text.strip():
            raise InvalidRequestError("Flyer Design requires flyer text.")
        if self.is_thumbnail and not self.thumbnail_text.strip():
            raise InvalidRequestError("Thumbnail Design requires thumbnail text.")


@dataclass(frozen=True)
class InpaintRequest:
    source: ImageAsset
    mask: ImageAsset
    prompt: str

    def validate(self) -> None:
        if self.source is None or self.mask is None:
            raise InvalidRequestError("In-painting requires both a source image and a mask.")
        if not self.prompt.strip():
            raise InvalidRequestError("In-painting requires a prompt.")


@dataclass(frozen=True)
class DescribeRequest:
    image: ImageAsset

    def validate(self) -> None:
        if self.image is None:
            raise InvalidRequestError("An image is required to describe.")


@dataclass(frozen=True)
class AnalyzeReferenceRequest:
    subject: ImageAsset
    art_reference: ImageAsset

    def validate(self) -> None:
        if self.subject is None or self.art_reference is None:
            raise InvalidRequestError("Reference analysis requires a subject and an art style image.")


@dataclass(frozen=True)
class FaceSwapRequest:
    target: ImageAsset
    face_source: ImageAsset

    def validate(self) -> None:
        if self.target is None or self.face_source is None:
            raise InvalidRequestError("Face swap requires a target image and a face source image.")


@dataclass(frozen=True)
class ReperspectiveRequest:
    source: ImageAsset
    prompt: str

    def validate(self) -> None:
        if self.source is None:
            raise InvalidRequestError("A source image is required.")
        if not self.prompt.strip():
            raise InvalidRequestError("Describe the new camera perspective.")


OperationRequest = Union[
    CompositeRequest,
    InpaintRequest,
    DescribeRequest,
    AnalyzeReferenceRequest,
    FaceSwapRequest,
    ReperspectiveRequest,
]

REQUEST_KINDS: dict[type, OperationKind] = {
    CompositeRequest: OperationKind.COMPOSITE_GENERATE,
    InpaintRequest: OperationKind.INPAINT,
    DescribeRequest: OperationKind.DESCRIBE,
    AnalyzeReferenceRequest: OperationKind.ANALYZE_REFERENCE,
    FaceSwapRequest: OperationKind.FACE_SWAP,
    ReperspectiveRequest: OperationKind.REPERSPECTIVE,
}


def kind_of(request: OperationRequest) -> OperationKind:
    return REQUEST_KINDS[type(request)]
