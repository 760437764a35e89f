"""
Option catalogs for the composite generator.

Every enumerated knob on `CompositeRequest` must take one of the values
below. "None" means the facet is unset and contributes nothing to the prompt.
"""

from __future__ import annotations

NONE = "None"

SUBJECT_MODES = ("single", "multiple")
BACKGROUND_MODES = ("describe", "upload", "random")

LIGHTING_STYLES: dict[str, str] = {
    "None": "No specific lighting style will be applied.",
    "Three-Point Lighting": "Classic balanced look (used in interviews, portraits) using a key, fill, and back light.",
    "Rembrandt Lighting": "Dramatic, moody, natural look with a key light at a ~45° angle, forming a light triangle on the cheek.",
    "Split Lighting": "Intense, mysterious, powerful. A key light to the side lights only half the face.",
    "Loop Lighting": "Flattering and dimensional. A small shadow of the nose loops down toward the cheek.",
    "Butterfly Lighting": "Glamorous, beauty-style lighting. Light from above forms a butterfly-shaped shadow under the nose.",
    "High-Key Lighting": "Cheerful, commercial, fashion. Bright, evenly lit scene with minimal shadows.",
    "Low-Key Lighting": "Cinematic, dramatic, noir. Strong contrast, deep shadows, and selective illumination.",
    "Motivated Lighting": "Realistic storytelling. Light appears to come from natural or visible sources (e.g., windows, lamps).",
    "Natural / Ambient Lighting": "Documentary or outdoor scenes. Uses available light sources like sunlight or streetlights.",
}

DODGE_AND_BURN = "Professional Dodge & Burn"
FREQUENCY_SEPARATION = "Professional Frequency Separation"

SKIN_TEXTURES: dict[str, str] = {
    "None": "Default AI-generated skin texture.",
    "Smooth": "Creates a very smooth, airbrushed look, minimizing all pores and imperfections.",
    "Soft Matte": "Provides a non-shiny, velvety finish, similar to makeup foundation.",
    "Natural Pores": "Renders realistic skin with visible, fine pores and slight imperfections.",
    "Rough": "Adds texture for a more rugged or weathered appearance.",
    "Hyper-detailed": "Exaggerates every detail, including wrinkles, pores, and hairs for a very sharp look.",
    "Plastic": "Gives the skin a synthetic, doll-like, or mannequin appearance.",
    "Painterly": "Applies visible brushstroke textures, as if the skin were painted.",
    DODGE_AND_BURN: "Applies advanced retouching to enhance contours by selectively lightening (dodging) and darkening (burning) areas.",
    FREQUENCY_SEPARATION: "A high-end technique that separates skin texture from color/tone, allowing for flawless smoothing while preserving natural detail.",
}

HIGHLIGHT_STYLES: dict[str, str] = {
    "None": "No specific highlight style.",
    "Soft Diffused": "Creates soft, broad highlights, like light through a softbox.",
    "Glossy": "Simulates a shiny, moisturized look with defined but blended highlights.",
    "Wet": "Mimics the appearance of water on skin, with sharp, bright specular highlights.",
    "Matte": "Almost no highlights, absorbing light for a flat, non-reflective surface.",
    "Hard Specular": "Produces very sharp, small, and intense highlights, like direct sunlight.",
}

HIGHLIGHT_INTENSITIES = ("None", "Low", "Medium", "High", "Extreme")

PERSPECTIVE_DISTANCE = (
    "None",
    "Extreme Close-Up (ECU)",
    "Close-Up (CU)",
    "Medium Close-Up (MCU)",
    "Medium Shot (MS)",
    "Medium Long Shot (MLS)",
    "Full Shot (FS)",
    "Long Shot (LS)",
    "Extreme Long Shot (ELS)",
    "Establishing Shot",
)

PERSPECTIVE_ANGLE = (
    "None",
    "Eye-Level",
    "High Angle (looking down)",
    "Low Angle (looking up)",
    "Bird’s-Eye View (directly overhead)",
    "Worm’s-Eye View (from the ground)",
    "Dutch Angle / Tilted",
)

PERSPECTIVE_POV = (
    "None",
    "Over-the-Shoulder (OTS)",
    "Point of View (POV)",
    "Two-Shot (two subjects)",
    "Insert Shot (detail)",
)

PERSPECTIVE_MOVEMENT = (
    "None",
    "Tracking / Dolly Shot (following)",
    "Close Tracking Shot",
    "Pan (horizontal sweep)",
    "Tilt (vertical sweep)",
    "Zoom In/Out",
    "Dolly Zoom (Vertigo effect)",
    "Crane Shot (dramatic vertical)",
    "Handheld Shot (shaky)",
    "360° Wrap-around",
)

PERSPECTIVE_LENS = (
    "None",
    "Fisheye Lens (distorted)",
    "Split-screen View",
    "Reflections (mirror, water, glass)",
    "Through an Object (keyhole, window)",
    "Silhouette Shot",
    "Rack Focus (shifting focus)",
    "Drone-style Top-down",
    "Macro Shot (extreme detail)",
)

APERTURES = ("None", "f/1.4", "f/1.8", "f/2.8", "f/4", "f/5.6", "f/8", "f/11", "f/16")
SHUTTER_SPEEDS = ("None", "1/1000s", "1/500s", "1/250s", "1/125s", "1/60s", "1/30s", "1/15s", "1s")
ISO_VALUES = ("None", "100", "200", "400", "800", "1600", "3200", "6400")
LENS_TYPES = (
    "None",
    "14mm (Ultra-Wide)",
    "35mm (Wide/Street)",
    "50mm (Standard/Natural)",
    "85mm (Portrait)",
    "135mm (Telephoto)",
)
SHOOTING_MODES = ("None", "Portrait", "Landscape", "Macro", "Street Photography", "Studio Shot")

FOCUS_AUTO = "Auto"
FOCUS_MANUAL = "Manual"
FOCUS_MODES = (FOCUS_AUTO, "Subject's Eyes", "Subject's Face", "Main Object", "Background", FOCUS_MANUAL)

DEFAULT_COLOR_TEMPERATURE = 5500
EXPOSURE_RANGE = (-2.0, 2.0)

FLYER_MARKER = "Flyer Design"
THUMBNAIL_MARKER = "Thumbnail Design"

EFFECT_CATEGORIES: dict[str, tuple[str, ...]] = {
    "Digital / Painting Styles": (
        "Smudge Painting",
        "Oil Painting",
        "Watercolor",
        "Acrylic Painting",
        "Gouache",
        "Ink Wash (Sumi-e)",
        "Pastel Drawing",
        "Charcoal Sketch",
        "Pencil / Graphite",
        "Digital Airbrush",
        "Matte Painting",
    ),
    "Illustration & Cartoon Styles": (
        "Vector Art",
        "Flat Illustration",
        "Minimalist Illustration",
        "Cartoon / Comic Book",
        "Anime / Manga",
        "Chibi Style",
        "Line Art / Ink Drawing",
        "Pop Art (Warhol)",
        "Doodle Art",
    ),
    "Abstract & Conceptual Styles": (
        "Surrealism",
        "Cubism",
        "Expressionism",
        "Impressionism",
        "Futurism",
        "Minimalism",
        "Geometric Abstraction",
        "Collage Art",
    ),
    "Texture & Mixed Styles": (
        "Mosaic / Stained Glass",
        "Low Poly Art",
        "Pixel Art",
        "3D Render Style",
        "Claymation",
        "Graffiti / Spray Paint",
        "Glitch Art",
        "Neon / Cyberpunk",
        "Vaporwave / Retrowave",
    ),
    "Photography & Cinematic Styles": (
        "Cinematic",
        "Film Noir",
        "Documentary",
        "Portrait Studio",
        "Analog Film",
    ),
    "Graphic Design": (FLYER_MARKER, THUMBNAIL_MARKER),
}


def join_effects(effects: list[str] | tuple[str, ...]) -> str:
    """Aggregate selected effects (at most one per category) into the style string."""
    return " & ".join(e for e in effects if e)


def catalog() -> dict[str, object]:
    return {
        "subject_modes": list(SUBJECT_MODES),
        "background_modes": list(BACKGROUND_MODES),
        "lighting_styles": dict(LIGHTING_STYLES),
        "skin_textures": dict(SKIN_TEXTURES),
        "highlight_styles": dict(HIGHLIGHT_STYLES),
        "highlight_intensities": list(HIGHLIGHT_INTENSITIES),
        "perspective_distance": list(PERSPECTIVE_DISTANCE),
        "perspective_angle": list(PERSPECTIVE_ANGLE),
        "perspective_pov": list(PERSPECTIVE_POV),
        "perspective_movement": list(PERSPECTIVE_MOVEMENT),
        "perspective_lens": list(PERSPECTIVE_LENS),
        "apertures": list(APERTURES),
        "shutter_speeds": list(SHUTTER_SPEEDS),
        "iso_values": list(ISO_VALUES),
        "lens_types": list(LENS_TYPES),
        "shooting_modes": list(SHOOTING_MODES),
        "focus_modes": list(FOCUS_MODES),
        "effects": {name: list(items) for name, items in EFFECT_CATEGORIES.items()},
    }
