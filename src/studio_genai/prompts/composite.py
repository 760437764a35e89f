"""
Composite-generate prompt synthesis.

The main instruction is a single text block built from numbered sections,
each emitted only when its triggering inputs are present, in a fixed order:

    master -> 1. subject & identity -> 2. art style -> 3. composition & scene
    -> 4. final stylization -> 5. camera & lens -> final output requirements

Labelled image blocks follow the text: Subject, Face Reference, Art Style,
Outfit, Object, Background.

Flyer and thumbnail designs replace the whole section scheme with their own
template and only reference the subject image.
"""

from __future__ import annotations

import logging

from studio_genai.operations import CompositeRequest
from studio_genai.prompts import options as opt
from studio_genai.prompts.blocks import PromptSpec

logger = logging.getLogger(__name__)

MASTER_INSTRUCTION = (
    "You are an expert AI photo editor and virtual photographer. Your goal is to create a single, "
    "high-quality image based on a set of input images and text instructions. You will be provided "
    "with images labeled like [Subject], [Art Style], etc. You must use these labels to understand "
    "which image to use for which purpose."
)

FINAL_OUTPUT_REQUIREMENTS = (
    "\n**FINAL OUTPUT REQUIREMENTS**\n"
    "- Combine all elements into a single, cohesive, high-quality image, prioritizing the subject's "
    "identity above all."
)

DODGE_AND_BURN_DIRECTIVE = (
    "- **SKIN RETOUCHING:** Apply a professional 'dodge and burn' retouching technique to the subject's "
    "skin to enhance contours, add depth, and create a sculpted, high-end look."
)
FREQUENCY_SEPARATION_DIRECTIVE = (
    "- **SKIN RETOUCHING:** Apply a professional 'frequency separation' retouching technique. This involves "
    "separating skin texture from color/tone to perfectly smooth blemishes and transitions while preserving "
    "hyper-realistic skin texture."
)


def _label(role: str) -> str:
    return f"This is the [{role}] image:"


def build_composite_prompt(req: CompositeRequest) -> PromptSpec:
    if req.is_flyer:
        spec = _flyer_prompt(req)
    elif req.is_thumbnail:
        spec = _thumbnail_prompt(req)
    else:
        spec = _studio_prompt(req)
    logger.debug(
        "Built composite prompt: %d blocks, %d images",
        len(spec.blocks),
        len(spec.images),
    )
    return spec


def _flyer_prompt(req: CompositeRequest) -> PromptSpec:
    instructions = (
        "You are an expert graphic designer creating a professional promotional flyer.\n"
        "- **Primary Task:** Your main goal is to create a visually appealing flyer.\n"
        "- **Subject Integration:** The provided image contains the main subject(s). You MUST perfectly "
        "preserve their identity and creatively integrate them into the flyer design.\n"
        "- **Text Content:** The flyer MUST include the following text. Find a creative and legible way to "
        f'display it: "{req.flyer_text}".\n'
        "- **Style:** The overall style should be professional, modern, and eye-catching.\n"
        "- **Output:** The final image MUST be a cohesive, high-quality flyer. This is a critical instruction."
    )
    return PromptSpec().add_text(instructions).add_image(_label("Subject"), req.subject)


def _thumbnail_prompt(req: CompositeRequest) -> PromptSpec:
    instructions = (
        "You are a professional YouTube thumbnail designer. Your goal is to create a compelling, high-energy, "
        "clickable thumbnail.\n"
        "- **Primary Task:** Create an engaging thumbnail that grabs attention.\n"
        "- **Subject Integration:** The provided image is the main subject(s). You MUST preserve their identity "
        "and make them the focal point of the thumbnail.\n"
        "- **Text Content:** The thumbnail MUST include this text, making it bold, readable, and exciting: "
        f'"{req.thumbnail_text}".\n'
        "- **Style:** The design should be eye-catching, high-contrast, and follow modern social media trends.\n"
        "- **Output:** The final image must be a high-quality thumbnail. This is a critical instruction."
    )
    return PromptSpec().add_text(instructions).add_image(_label("Subject"), req.subject)


def _studio_prompt(req: CompositeRequest) -> PromptSpec:
    sections: list[str] = [MASTER_INSTRUCTION, subject_section(req)]
    for build in (art_style_section, composition_section, stylization_section, camera_section):
        section = build(req)
        if section:
            sections.append(section)
    sections.append(FINAL_OUTPUT_REQUIREMENTS)

    spec = PromptSpec().add_text("\n".join(sections))
    spec.add_image(_label("Subject"), req.subject)
    if req.face_reference is not None:
        spec.add_image(_label("Face Reference"), req.face_reference)
    if req.art_reference is not None:
        spec.add_image(_label("Art Style"), req.art_reference)
    if req.outfit is not None:
        spec.add_image(_label("Outfit"), req.outfit)
    if req.object_image is not None:
        spec.add_image(_label("Object"), req.object_image)
    if _uses_background_image(req):
        spec.add_image(_label("Background"), req.background)
    return spec


def subject_section(req: CompositeRequest) -> str:
    noun = "person" if req.subject_mode == "single" else "person(s)"
    plural = "subject" if req.subject_mode == "single" else "subjects"

    lines = [
        "\n**1. SUBJECT & IDENTITY (PARAMOUNT PRIORITY)**",
        f"- The {noun} in the [Subject] image is/are your primary subject.",
    ]
    if req.art_reference is not None:
        lines.append(
            f"- **CRITICAL - SUBJECT INFLUENCE {req.subject_influence}/100:** You MUST retain the subject's "
            f"identity. A value of 100 requires a perfect, photorealistic match to the original {noun}. "
            "A lower value allows for more artistic interpretation of their features to better match the art "
            f"style, while still ensuring the {noun} is/are recognizable. This is your most important instruction."
        )
    else:
        lines.append(
            "- **CRITICAL:** You MUST perfectly preserve their facial features, structure, and identity. "
            f"The final image must be unmistakably the same {noun}."
        )
    if req.subject_prompt:
        lines.append(
            f'- Apply these modifications to the {plural}, while maintaining their identity: "{req.subject_prompt}".'
        )
    if req.face_reference is not None:
        lines.append(
            "- **CRITICAL FACE OVERRIDE:** The [Face Reference] image provides the definitive likeness of the "
            "subject. Use this image to ensure the face is a perfect match, overriding the face from the "
            "[Subject] image if necessary."
        )
    return "\n".join(lines)


def art_style_section(req: CompositeRequest) -> str | None:
    if req.art_reference is None:
        return None

    lines = [
        "\n**2. ART STYLE APPLICATION**",
        "- Analyze the [Art Style] image. Your task is to re-imagine the subject(s) in this distinct artistic style.",
    ]
    if req.art_reference_prompt:
        lines.append(f'- The style is described as: "{req.art_reference_prompt}".')
    lines.append(
        f"- **Style Influence:** Apply the reference style with an influence level of "
        f"**{req.art_style_influence}/100**. A value of 100 means a complete transformation into the reference "
        "style, while still preserving the subject's recognizable identity."
    )
    lines.append(
        f"- **Creative Freedom (Surprise):** You have a creative freedom level of **{req.surprise}/100**. "
        "A value of 0 means strict adherence to instructions; 100 grants maximum artistic liberty."
    )
    if req.integration_plan:
        lines.append(f'- **Execution Plan:** Follow this user-approved plan: "{req.integration_plan}"')
    if req.use_art_skin:
        lines.append(
            "- **CRITICAL - SKIN & HIGHLIGHT MATCH:** Analyze the skin texture and highlights on the person in "
            "the [Art Style] image. Apply this exact skin finish to the main subject(s), but **you MUST preserve "
            "the subject's original skin tone and color**. This is a texture/finish matching instruction only."
        )
    if req.use_art_lighting:
        lines.append(
            "- **CRITICAL - LIGHTING MATCH:** Apply the lighting from the [Art Style] image (color, shadows, "
            "direction) perfectly to the subject(s)."
        )
    lines.append(
        "- **IMPORTANT:** DO NOT simply copy or output the [Art Style] image. The final image must be a "
        "**new creation** that **fuses** the subject(s) from the [Subject] image with the style of the "
        "[Art Style] image."
    )
    return "\n".join(lines)


def _uses_background_image(req: CompositeRequest) -> bool:
    return req.background_mode == "upload" and req.background is not None


def composition_section(req: CompositeRequest) -> str | None:
    parts: list[str] = []
    if req.outfit is not None:
        parts.append(
            "\n**Outfit:**\n"
            "- From the [Outfit] image, you must extract **ONLY THE CLOTHING/OUTFIT**.\n"
            "- **STRICTLY IGNORE EVERYTHING ELSE** in the [Outfit] image: the person, the background, the pose, "
            "accessories, etc. Your only focus is the **GARMENT** itself.\n"
            "- Apply this extracted outfit naturally onto the main subject(s)."
        )
        if req.outfit_prompt:
            parts.append(f'- Apply these modifications to the outfit: "{req.outfit_prompt}".')
    if req.object_image is not None:
        parts.append(
            "\n**Object:**\n"
            "- From the [Object] image, identify any non-clothing objects and incorporate them naturally into "
            "the scene with the subject(s)."
        )

    # The mode flag alone picks the branch; stray fields from other modes are ignored.
    if _uses_background_image(req):
        parts.append("\n**Background:**\n- Use the [Background] image as the new background.")
        if req.background_prompt:
            parts.append(f'- Apply these modifications to the background: "{req.background_prompt}".')
    elif req.background_mode == "describe" and req.background_prompt:
        parts.append(
            f'\n**Background:**\n- Create a new background based on this description: "{req.background_prompt}".'
        )
    elif req.background_mode == "random":
        parts.append(
            "\n**Background:**\n- Generate a random, photorealistic, professional studio background that "
            "complements the subject(s)."
        )

    if not parts:
        return None
    return "\n**3. COMPOSITION & SCENE**" + "\n".join(parts)


def stylization_section(req: CompositeRequest) -> str | None:
    touches: list[str] = []
    if req.lighting_style != opt.NONE and not req.use_art_lighting:
        touches.append(
            f'- **CRITICAL LIGHTING:** Apply a professional "{req.lighting_style}" lighting setup to the entire '
            "scene. This must define the mood and shadows."
        )

    if not req.use_art_skin:
        if req.skin_texture == opt.DODGE_AND_BURN:
            touches.append(DODGE_AND_BURN_DIRECTIVE)
        elif req.skin_texture == opt.FREQUENCY_SEPARATION:
            touches.append(FREQUENCY_SEPARATION_DIRECTIVE)
        elif req.skin_texture and req.skin_texture != opt.NONE:
            touches.append(
                f'- **SKIN TEXTURE:** Render the subject\'s skin with a "{req.skin_texture}" texture. Ensure it '
                "looks natural and maintains the original skin tone under consistent lighting."
            )
        if req.highlight_style not in ("", opt.NONE) and req.highlight_intensity not in ("", opt.NONE):
            touches.append(
                f'- **SKIN HIGHLIGHTS:** Apply "{req.highlight_style}" highlights to the skin at a '
                f'"{req.highlight_intensity}" intensity.'
            )

    if req.style_prompt:
        touches.append(
            f'- **ADDITIONAL EFFECTS:** Render the final image incorporating this style: "{req.style_prompt}".'
        )

    if not touches:
        return None
    return "\n**4. FINAL STYLIZATION**\n" + "\n".join(touches)


def describe_color_temperature(kelvin: int) -> str:
    if kelvin < 4000:
        return "warm, tungsten-like"
    if kelvin > 6500:
        return "cool, overcast-like"
    return "neutral daylight"


def format_exposure(ev: float) -> str:
    sign = "+" if ev > 0 else ""
    direction = "brighter" if ev > 0 else "darker"
    return f"{sign}{ev:.1f} EV ({direction} image)"


def _focus_detail(req: CompositeRequest) -> str | None:
    if req.focus_mode == opt.FOCUS_MANUAL:
        if req.manual_focus_subject:
            return f'Focus: Manually set the sharpest point of focus on "{req.manual_focus_subject}"'
        return None
    if req.focus_mode != opt.FOCUS_AUTO:
        return f"Focus: Set the sharpest point of focus on the {req.focus_mode.lower()}"
    return None


def camera_section(req: CompositeRequest) -> str | None:
    labelled = (
        ("Shooting Style", req.shooting_mode),
        ("Lens", req.lens_type),
        ("Framing/Distance", req.perspective_distance),
        ("Angle/Tilt", req.perspective_angle),
        ("Point of View", req.perspective_pov),
        ("Camera Movement", req.perspective_movement),
        ("Lens/Creative Style", req.perspective_lens),
    )
    details = [f"{name}: {value}" for name, value in labelled if value and value != opt.NONE]

    if req.aperture != opt.NONE:
        details.append(
            f"Aperture: {req.aperture} (a low f-number like f/1.8 creates a very blurry background; "
            "a high f-number like f/16 keeps everything in focus)"
        )
    if req.shutter_speed != opt.NONE:
        details.append(
            f"Shutter Speed: {req.shutter_speed} (a slow speed like 1s can create motion blur; "
            "a fast speed like 1/1000s freezes action)"
        )
    if req.iso != opt.NONE:
        details.append(
            f"ISO: {req.iso} (a high ISO like 6400 introduces noticeable film grain; a low ISO like 100 is clean)"
        )

    focus = _focus_detail(req)
    has_exposure = req.exposure != 0
    custom_temperature = req.color_temperature != opt.DEFAULT_COLOR_TEMPERATURE
    if not (details or focus or has_exposure or custom_temperature):
        return None

    # Temperature is always stated once the section is emitted.
    details.append(
        f"Color Temperature: {req.color_temperature}K ({describe_color_temperature(req.color_temperature)} light)"
    )
    if focus:
        details.append(focus)
    if has_exposure:
        details.append(f"Exposure Compensation: {format_exposure(req.exposure)}")

    return (
        "\n**5. CAMERA & LENS SETTINGS**\n"
        f"- **CRITICAL:** Simulate a professional camera with these settings: {'; '.join(details)}."
    )
