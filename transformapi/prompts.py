"""
Transformation-to-prompt mapping for the /transform endpoint.

Transformations fall into three categories:
  - image: image + instruction in, transformed image out (Gemini image model)
  - text: image + instruction in, text out (Gemini text model)
  - text_to_image: prompt in, generated image out (Imagen)
"""

from enum import Enum


class TransformationKind(str, Enum):
    LINE_ART = "LINE_ART"
    RELIEF_MODEL = "RELIEF_MODEL"
    VARIATION = "VARIATION"
    LOGO = "LOGO"
    DESCRIPTION = "DESCRIPTION"
    EXTRACTION_FORMAT = "EXTRACTION_FORMAT"
    GRAPHIC_FORMAT = "GRAPHIC_FORMAT"
    CLARITY_BOOST = "CLARITY_BOOST"
    PATTERNIZE = "PATTERNIZE"
    GEOMETRIZE = "GEOMETRIZE"
    TEXT_TO_IMAGE = "TEXT_TO_IMAGE"

    @classmethod
    def parse(cls, value: str) -> "TransformationKind":
        """Parse user input, case-insensitively. Raises ValueError if unknown."""
        key = value.strip().upper().replace("-", "_")
        key = KIND_ALIASES.get(key, key)
        return cls(key)


KIND_ALIASES: dict[str, str] = {
    "DEPTH_MAP": "RELIEF_MODEL",
}

KIND_LABELS: dict[TransformationKind, str] = {
    TransformationKind.LINE_ART: "Line Art",
    TransformationKind.RELIEF_MODEL: "Relief Model",
    TransformationKind.VARIATION: "Variation",
    TransformationKind.LOGO: "Logo",
    TransformationKind.DESCRIPTION: "Description",
    TransformationKind.EXTRACTION_FORMAT: "Extraction",
    TransformationKind.GRAPHIC_FORMAT: "Graphic Format",
    TransformationKind.CLARITY_BOOST: "Clarity Boost",
    TransformationKind.PATTERNIZE: "Patternize",
    TransformationKind.GEOMETRIZE: "Geometrize",
    TransformationKind.TEXT_TO_IMAGE: "Text to Image",
}

# -- Models -------------------------------------------------------------------

IMAGE_EDIT_MODEL = "gemini-2.5-flash-image-preview"
TEXT_MODEL = "gemini-2.5-flash"
TEXT_TO_IMAGE_MODEL = "imagen-4.0-generate-001"

# First entry of every list is the default selection.
MODEL_CATALOG: dict[TransformationKind, list[str]] = {
    TransformationKind.LINE_ART: [IMAGE_EDIT_MODEL],
    TransformationKind.RELIEF_MODEL: [IMAGE_EDIT_MODEL],
    TransformationKind.VARIATION: [IMAGE_EDIT_MODEL, TEXT_TO_IMAGE_MODEL],
    TransformationKind.LOGO: [IMAGE_EDIT_MODEL],
    TransformationKind.DESCRIPTION: [TEXT_MODEL],
    TransformationKind.EXTRACTION_FORMAT: [TEXT_MODEL],
    TransformationKind.GRAPHIC_FORMAT: [TEXT_MODEL],
    TransformationKind.CLARITY_BOOST: [IMAGE_EDIT_MODEL],
    TransformationKind.PATTERNIZE: [IMAGE_EDIT_MODEL],
    TransformationKind.GEOMETRIZE: [IMAGE_EDIT_MODEL],
    TransformationKind.TEXT_TO_IMAGE: [TEXT_TO_IMAGE_MODEL],
}

# Kinds whose result is text rather than an image
TEXT_KINDS: frozenset[TransformationKind] = frozenset(
    {
        TransformationKind.DESCRIPTION,
        TransformationKind.EXTRACTION_FORMAT,
        TransformationKind.GRAPHIC_FORMAT,
    }
)

INTENSITY_KINDS: frozenset[TransformationKind] = frozenset(
    {
        TransformationKind.CLARITY_BOOST,
        TransformationKind.PATTERNIZE,
        TransformationKind.GEOMETRIZE,
    }
)

MIN_INTENSITY = 1
MAX_INTENSITY = 10
DEFAULT_INTENSITY = 5


def default_model(kind: TransformationKind) -> str:
    return MODEL_CATALOG[kind][0]


def available_models(kind: TransformationKind) -> list[str]:
    return list(MODEL_CATALOG[kind])


def is_text_kind(kind: TransformationKind) -> bool:
    return kind in TEXT_KINDS


def supports_intensity(kind: TransformationKind) -> bool:
    return kind in INTENSITY_KINDS


# -- Intensity ----------------------------------------------------------------

INTENSITY_LABELS: dict[str, str] = {
    "low": "a subtle, low amount of",
    "medium": "a moderate amount of",
    "high": "a strong, high amount of",
}

ABSTRACTION_LEVELS: dict[str, str] = {
    "low": "subtly, keeping most original details",
    "medium": "moderately, balancing abstraction and original form",
    "high": "in a highly abstract way, using only basic shapes",
}


def intensity_bucket(value: int) -> str:
    """Map a 1-10 slider value onto "low" (<=3), "medium" (4-7) or "high" (>=8)."""
    if value <= 3:
        return "low"
    if value <= 7:
        return "medium"
    return "high"


def intensity_label(value: int) -> str:
    return INTENSITY_LABELS[intensity_bucket(value)]


def abstraction_level(value: int) -> str:
    return ABSTRACTION_LEVELS[intensity_bucket(value)]


# -- Fixed prompts (image in) -------------------------------------------------

FIXED_PROMPTS: dict[TransformationKind, str] = {
    TransformationKind.LINE_ART: (
        "Extract the clean, black and white line art from this image. "
        "The background should be pure white. Focus on the main contours and outlines."
    ),
    TransformationKind.RELIEF_MODEL: (
        "Generate a high-contrast, detailed grayscale depth map for this image, "
        "suitable for creating a 3D bas-relief model for STL generation. "
        "Lighter areas should represent higher elevation (closer to the viewer), "
        "and darker areas should represent lower elevation (further from the viewer). "
        "The output should be a clean image optimized for 3D displacement."
    ),
    TransformationKind.VARIATION: (
        "Generate a creative artistic variation of this image. "
        "Reimagine it in a completely different style, like a vibrant watercolor "
        "painting or a futuristic synthwave poster."
    ),
    TransformationKind.LOGO: (
        "Analyze the provided image and generate a clean, modern, vector-style logo "
        "based on its key elements and themes (like nature, adventure, contemplation). "
        "Then, place this generated logo as a small, tasteful watermark in the "
        "bottom-right corner of the original image. The final output should be the "
        "original image with the new logo added."
    ),
    TransformationKind.DESCRIPTION: (
        "Analyze the provided image and describe the prominent patterns, textures, "
        "and repeating visual elements in detail."
    ),
    TransformationKind.EXTRACTION_FORMAT: (
        "Analyze the provided image and describe its graphical format and style. "
        "Identify the key artistic elements, color palette, composition, and any "
        "distinct visual techniques used."
    ),
    TransformationKind.GRAPHIC_FORMAT: (
        "Analyze the provided image and describe its technical graphic format details. "
        "Identify potential file type (e.g., JPEG, PNG), compression characteristics "
        "(lossy/lossless), color space (e.g., RGB), bit depth, and whether it uses "
        "transparency. Suggest optimal use cases based on these properties (e.g., web, print)."
    ),
}

# -- Intensity-parameterized prompts ------------------------------------------

CLARITY_BOOST_TEMPLATE = (
    "Enhance the clarity and sharpness of this image. Apply {amount} enhancement. "
    "Reduce blur and bring out fine details. The output should be a clearer version "
    "of the original photo."
)

PATTERNIZE_TEMPLATE = (
    "Analyze the prominent patterns and textures in this image and generate a "
    "seamless, tileable pattern based on them. The pattern should capture the "
    "essence of the original image's design with {amount} detail and complexity."
)

GEOMETRIZE_TEMPLATE = (
    "Simplify this image into a composition of geometric shapes and solid colors. "
    "Represent the main subject and overall structure {level}."
)

# -- Compound variation (image -> description -> Imagen) ----------------------

VARIATION_DESCRIBE_PROMPT = (
    "Describe this image for a text-to-image AI. "
    "Focus on the main subject, style, and key visual elements."
)


def variation_prompt_from_description(description: str) -> str:
    return (
        f'A creative artistic variation based on this description: "{description}". '
        "Reimagine it in a completely different style."
    )


def build_prompt(kind: TransformationKind, intensity: int | None = None) -> str:
    """Return the instruction sent alongside the source image for *kind*.

    *intensity* only matters for CLARITY_BOOST, PATTERNIZE and GEOMETRIZE and
    falls back to DEFAULT_INTENSITY when omitted. TEXT_TO_IMAGE has no
    template (the user's prompt is sent as-is), so it raises KeyError like
    any other kind missing from the catalog.
    """
    kind = TransformationKind(kind)
    value = DEFAULT_INTENSITY if intensity is None else intensity

    if kind is TransformationKind.CLARITY_BOOST:
        return CLARITY_BOOST_TEMPLATE.format(amount=intensity_label(value))
    if kind is TransformationKind.PATTERNIZE:
        return PATTERNIZE_TEMPLATE.format(amount=intensity_label(value))
    if kind is TransformationKind.GEOMETRIZE:
        return GEOMETRIZE_TEMPLATE.format(level=abstraction_level(value))
    return FIXED_PROMPTS[kind]
