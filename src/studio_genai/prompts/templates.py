from __future__ import annotations

from studio_genai.operations import (
    AnalyzeReferenceRequest,
    CompositeRequest,
    DescribeRequest,
    FaceSwapRequest,
    InpaintRequest,
    OperationRequest,
    ReperspectiveRequest,
)
from studio_genai.prompts import options as opt
from studio_genai.prompts.blocks import PromptSpec
from studio_genai.prompts.composite import build_composite_prompt


def build_inpaint_prompt(req: InpaintRequest) -> PromptSpec:
    instructions = (
        "You are an expert AI photo editor. The user has provided an image, a mask, and a prompt. Your task is "
        f'to regenerate ONLY the masked area of the image based on the prompt: "{req.prompt}". The masked area '
        "is indicated in the [Mask] image (white is the area to regenerate). The rest of the image must remain "
        "unchanged. Seamlessly blend the new content with the existing image."
    )
    return (
        PromptSpec()
        .add_text(instructions)
        .add_image("This is the [Source] image:", req.source)
        .add_image("This is the [Mask] image:", req.mask)
    )


DESCRIBE_INSTRUCTION = (
    "Briefly describe the person or people in this photo in one short sentence, focusing on key visual "
    'features for an AI editor. For example: "A young woman with blonde hair smiling." or "A group of '
    'friends posing for a photo."'
)


def build_describe_prompt(req: DescribeRequest) -> PromptSpec:
    return PromptSpec().add_text(DESCRIBE_INSTRUCTION).add_image("This is the photo to describe:", req.image)


def build_analyze_reference_prompt(req: AnalyzeReferenceRequest) -> PromptSpec:
    styles = '", "'.join(s for s in opt.LIGHTING_STYLES if s != opt.NONE)
    instructions = f"""You are an expert AI artist and prompt engineer analyzing two images: a [SUBJECT IMAGE] and an [ART STYLE IMAGE].
Your task is to provide a complete analysis in a single JSON response.

1.  **Analyze Art Style**: In one concise sentence, describe the artistic style of the [ART STYLE IMAGE]. Focus on medium, technique, mood, and color palette.
2.  **Create Integration Plan**: In one or two concise sentences, describe your creative plan to integrate the subject person(s) into the art reference's style, maintaining the subject's identity.
3.  **Identify Lighting Style**: Analyze the lighting in the [ART STYLE IMAGE]. Classify it into ONE of the following categories: "{styles}". If no specific style fits, choose the closest one.
4.  **Generate Action Prompt**:
    a. First, analyze the [ART STYLE IMAGE] and identify the primary action, pose, and emotion of the person.
    b. Then, write a new, single, detailed, and evocative sentence describing the person/people from the [SUBJECT IMAGE] performing that exact action, pose, and emotion.

Provide your response strictly in the requested JSON format, with no extra text or explanations."""
    return (
        PromptSpec()
        .add_text(instructions)
        .add_image("This is the [SUBJECT IMAGE]:", req.subject)
        .add_image("This is the [ART STYLE IMAGE]:", req.art_reference)
    )


FACE_SWAP_INSTRUCTION = """You are a world-class AI digital artist specializing in hyperrealistic and style-consistent portrait recreation. Your work is for artistic and creative purposes only.

**Your Mission:**
Artistically blend the facial identity from the **FACE SOURCE IMAGE** onto the subject in the **TARGET IMAGE**.

**TARGET IMAGE (First Image):** This is the main image with the style, lighting, and composition that MUST be preserved.
**FACE SOURCE IMAGE (Second Image):** This image provides the facial identity (features, structure, expression) that you must transfer.

**Critical Directives (Non-negotiable):**
1.  **Identity Preservation (Highest Priority):** The final portrait must be UNMISTAKABLY recognizable as the person from the FACE SOURCE IMAGE.
2.  **Artistic Style Matching:** The recreated face MUST perfectly adopt the complete artistic style of the TARGET IMAGE. This includes:
    - **Lighting:** Match the direction, color, and intensity of the light and shadows.
    - **Color Grading:** Apply the exact same color palette and tone.
    - **Texture:** Replicate any textures present, such as skin texture, paint strokes, film grain, or digital artifacts.
    - **Effects:** If the TARGET IMAGE is a painting, cartoon, sketch, etc., the new face MUST be rendered in that same style.
3.  **Seamless Integration:** The new face must blend FLAWLESSLY with the head, hair, and neck of the subject in the TARGET IMAGE. There should be no visible seams or artifacts.

Do not alter the background, clothing, or body of the TARGET IMAGE. Your only task is this high-fidelity, style-aware portrait recreation."""


def build_face_swap_prompt(req: FaceSwapRequest) -> PromptSpec:
    return (
        PromptSpec()
        .add_text(FACE_SWAP_INSTRUCTION)
        .add_image("This is the TARGET IMAGE:", req.target)
        .add_image("This is the FACE SOURCE IMAGE:", req.face_source)
    )


def build_reperspective_prompt(req: ReperspectiveRequest) -> PromptSpec:
    instructions = f"""You are an expert AI cinematographer. Your task is to re-render the provided image from a new camera perspective as described by the user.

**Source Image:** The first image is the original scene.
**User Prompt:** "{req.prompt}"

**CRITICAL INSTRUCTIONS:**
1.  **Recreate the Scene:** You must recreate the *exact same scene* from the source image. This includes all subjects, objects, clothing, and the environment.
2.  **Change Perspective ONLY:** The only change you are allowed to make is the camera's position, angle, or viewpoint as specified in the user's prompt.
3.  **Maintain Consistency:** Preserve the original image's lighting, color palette, mood, and artistic style. The new image should feel like it was taken moments apart from the original, just from a different spot.
4.  **Execute the Prompt:** Religiously follow the user's prompt to define the new perspective.
5.  **Output:** Produce a single, high-quality image that fulfills these requirements."""
    return PromptSpec().add_text(instructions).add_image("This is the [Source Image]:", req.source)


_BUILDERS = {
    CompositeRequest: build_composite_prompt,
    InpaintRequest: build_inpaint_prompt,
    DescribeRequest: build_describe_prompt,
    AnalyzeReferenceRequest: build_analyze_reference_prompt,
    FaceSwapRequest: build_face_swap_prompt,
    ReperspectiveRequest: build_reperspective_prompt,
}


def build_prompt(request: OperationRequest) -> PromptSpec:
    try:
        builder = _BUILDERS[type(request)]
    except KeyError:
        raise TypeError(f"unsupported request type: {type(request).__name__}") from None
    return builder(request)
