"""Derive the image generator's art direction from deck style and prompt keywords."""

from __future__ import annotations

import re

from shared.enums import VisualStyle
from shared.models import ImageGenerationRequest

UI_MOCKUP_DIRECTION = (
    "High-fidelity UI design, Figma style, clean user interface, modern SaaS aesthetic, "
    "detailed, pixel perfect."
)
DATA_VIZ_DIRECTION = "Data visualization, 3D infographic style, clean geometry, isometric."
BLUEPRINT_DIRECTION = "Blueprint style, white lines on blue background, technical schematic."

STYLE_DIRECTIONS: dict[VisualStyle, str] = {
    VisualStyle.PHOTOREALISTIC: "Photorealistic, natural lighting, shallow depth of field, editorial photography.",
    VisualStyle.MINIMAL_VECTOR: "Modern, clean, professional vector art style.",
    VisualStyle.HAND_DRAWN: "Hand-drawn illustration, ink and watercolor, warm sketchbook texture.",
    VisualStyle.ISOMETRIC_3D: "Isometric 3D render, soft shadows, pastel palette, clean geometry.",
    VisualStyle.ABSTRACT_GEOMETRIC: "Abstract geometric composition, bold shapes, gradients, Bauhaus influence.",
}

UI_KEYWORDS = re.compile(r"ui|screen|mockup|dashboard|interface", re.IGNORECASE)
CHART_KEYWORDS = re.compile(r"chart|graph", re.IGNORECASE)
WIREFRAME_KEYWORDS = re.compile(r"wireframe", re.IGNORECASE)

NO_TEXT_CONSTRAINT = (
    "NO TEXT, NO ALPHABET, NO WORDS in the image "
    "(unless it is a UI mockup where greeking/lorem ipsum is acceptable)."
)


def derive_art_direction(prompt: str, visual_style: VisualStyle) -> str:
    """Pick the art direction for one slide.

    Keyword matches in the prompt override the deck-wide visual style: UI
    mockups first, then charts, then wireframes.
    """
    if UI_KEYWORDS.search(prompt):
        return UI_MOCKUP_DIRECTION
    if CHART_KEYWORDS.search(prompt):
        return DATA_VIZ_DIRECTION
    if WIREFRAME_KEYWORDS.search(prompt):
        return BLUEPRINT_DIRECTION
    return STYLE_DIRECTIONS.get(visual_style, STYLE_DIRECTIONS[VisualStyle.MINIMAL_VECTOR])


def build_image_request(
    prompt: str, visual_style: VisualStyle, aspect_ratio: str = "16:9"
) -> ImageGenerationRequest:
    return ImageGenerationRequest(
        subject=prompt,
        art_direction=derive_art_direction(prompt, visual_style),
        aspect_ratio=aspect_ratio,
    )


def render_image_prompt(request: ImageGenerationRequest) -> str:
    """Full text prompt handed to text-to-image models."""
    return (
        "Generate an image.\n"
        f"Subject: {request.subject}\n"
        f"Style: {request.art_direction}\n"
        "Context: Professional business presentation.\n"
        f"Constraint: {NO_TEXT_CONSTRAINT}"
    )
