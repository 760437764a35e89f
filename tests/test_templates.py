"""Tests for the fixed operation templates and request validation."""

from __future__ import annotations

import pytest

from studio_genai.assets import ImageAsset
from studio_genai.errors import InvalidRequestError
from studio_genai.operations import (
    AnalyzeReferenceRequest,
    CompositeRequest,
    DescribeRequest,
    FaceSwapRequest,
    InpaintRequest,
    OperationKind,
    ReperspectiveRequest,
    kind_of,
)
from studio_genai.prompts.options import join_effects
from studio_genai.prompts.templates import build_prompt


class TestFixedTemplates:
    def test_inpaint_labels_source_and_mask(self, subject: ImageAsset, other_image: ImageAsset) -> None:
        spec = build_prompt(InpaintRequest(source=subject, mask=other_image, prompt="add a hat"))
        spec.validate()
        assert 'based on the prompt: "add a hat"' in spec.text
        assert "This is the [Source] image:" in spec.text
        assert "This is the [Mask] image:" in spec.text
        assert spec.images == [subject, other_image]

    def test_describe(self, subject: ImageAsset) -> None:
        spec = build_prompt(DescribeRequest(image=subject))
        assert spec.text.startswith("Briefly describe the person or people in this photo")
        assert spec.images == [subject]

    def test_analyze_reference_lists_lighting_styles(self, subject: ImageAsset, other_image: ImageAsset) -> None:
        spec = build_prompt(AnalyzeReferenceRequest(subject=subject, art_reference=other_image))
        assert '"Three-Point Lighting", "Rembrandt Lighting"' in spec.text
        assert '"None"' not in spec.text
        assert spec.images == [subject, other_image]

    def test_face_swap_order(self, subject: ImageAsset, other_image: ImageAsset) -> None:
        spec = build_prompt(FaceSwapRequest(target=subject, face_source=other_image))
        spec.validate()
        assert spec.images == [subject, other_image]
        assert "This is the TARGET IMAGE:" in spec.text

    def test_reperspective(self, subject: ImageAsset) -> None:
        spec = build_prompt(ReperspectiveRequest(source=subject, prompt="from above"))
        assert '**User Prompt:** "from above"' in spec.text
        assert spec.images == [subject]

    def test_unknown_request_type(self) -> None:
        with pytest.raises(TypeError):
            build_prompt(object())  # type: ignore[arg-type]


class TestRequestValidation:
    def test_kind_of(self, subject: ImageAsset) -> None:
        assert kind_of(CompositeRequest(subject=subject)) is OperationKind.COMPOSITE_GENERATE
        assert kind_of(DescribeRequest(image=subject)) is OperationKind.DESCRIBE

    def test_missing_subject(self) -> None:
        with pytest.raises(InvalidRequestError, match="subject image is required"):
            CompositeRequest(subject=None).validate()  # type: ignore[arg-type]

    @pytest.mark.parametrize("field", ["art_style_influence", "subject_influence", "surprise"])
    def test_influence_range(self, subject: ImageAsset, field: str) -> None:
        with pytest.raises(InvalidRequestError, match=field):
            CompositeRequest(subject=subject, **{field: 101}).validate()

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("subject_influence", "50"),
            ("art_style_influence", True),
            ("style_prompt", 5),
            ("exposure", "1.0"),
            ("color_temperature", 5500.0),
            ("use_art_skin", 1),
        ],
    )
    def test_wrong_types_raise_invalid_request(self, subject: ImageAsset, field: str, value: object) -> None:
        with pytest.raises(InvalidRequestError, match=field):
            CompositeRequest(subject=subject, **{field: value}).validate()

    def test_integer_exposure_is_accepted(self, subject: ImageAsset) -> None:
        CompositeRequest(subject=subject, exposure=1).validate()

    def test_unknown_option(self, subject: ImageAsset) -> None:
        with pytest.raises(InvalidRequestError, match="lighting_style"):
            CompositeRequest(subject=subject, lighting_style="Disco").validate()

    def test_exposure_range(self, subject: ImageAsset) -> None:
        with pytest.raises(InvalidRequestError, match="exposure"):
            CompositeRequest(subject=subject, exposure=3.0).validate()

    def test_flyer_requires_text(self, subject: ImageAsset) -> None:
        with pytest.raises(InvalidRequestError, match="flyer text"):
            CompositeRequest(subject=subject, style_prompt="Flyer Design").validate()

    def test_valid_request_passes(self, subject: ImageAsset) -> None:
        CompositeRequest(
            subject=subject,
            lighting_style="Rembrandt Lighting",
            skin_texture="Professional Dodge & Burn",
            focus_mode="Main Object",
            exposure=-2.0,
        ).validate()

    def test_inpaint_requires_prompt(self, subject: ImageAsset) -> None:
        with pytest.raises(InvalidRequestError):
            InpaintRequest(source=subject, mask=subject, prompt="  ").validate()

    def test_invalid_request_is_value_error(self, subject: ImageAsset) -> None:
        with pytest.raises(ValueError):
            ReperspectiveRequest(source=subject, prompt="").validate()


def test_join_effects() -> None:
    assert join_effects(["Oil Painting", "", "Cinematic"]) == "Oil Painting & Cinematic"
