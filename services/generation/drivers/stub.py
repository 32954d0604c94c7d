"""Deterministic offline generators used in development and tests."""

from __future__ import annotations

import re

from services.generation.documents import decode_text
from shared.enums import DesignTheme, SlideLayout
from shared.models import (
    ImageGenerationRequest,
    SlideDescriptor,
    StructureRequest,
    StructureResponse,
)
from shared.utils import generate_hash, to_data_uri

from .base import ImageGenerator, StructureGenerator

POINTS_PER_SLIDE = 4
CONTENT_LAYOUTS = (SlideLayout.CONTENT_LEFT, SlideLayout.CONTENT_RIGHT, SlideLayout.BULLETS)


def _split_points(text: str) -> list[str]:
    points: list[str] = []
    for line in text.splitlines():
        line = line.strip(" \t-*•#")
        if not line:
            continue
        points.extend(part.strip() for part in re.split(r"(?<=[.!?])\s+", line) if part.strip())
    return points


class StubStructureGenerator(StructureGenerator):
    """Build an outline from the notes (and textual documents) without a model."""

    async def generate(self, request: StructureRequest) -> StructureResponse:
        source_parts = [request.notes]
        if request.document is not None:
            source_parts.append(decode_text(request.document) or "")
        points = _split_points("\n".join(part for part in source_parts if part))

        if points:
            title = points[0][:80]
        elif request.document is not None and request.document.filename:
            title = request.document.filename.rsplit(".", 1)[0]
        else:
            title = "Untitled Presentation"

        slides = [
            SlideDescriptor(
                id="slide-1",
                layout=SlideLayout.TITLE,
                title=title,
                subtitle="Generated from your source material",
                content=[],
                visual_prompt=f"Abstract hero illustration for {title}",
                speaker_notes=f"Introduce {title}.",
            )
        ]
        for group_index, start in enumerate(range(0, len(points), POINTS_PER_SLIDE)):
            group = points[start:start + POINTS_PER_SLIDE]
            layout = CONTENT_LAYOUTS[group_index % len(CONTENT_LAYOUTS)]
            slides.append(
                SlideDescriptor(
                    id=f"slide-{len(slides) + 1}",
                    layout=layout,
                    title=group[0][:60],
                    content=group,
                    visual_prompt=None if layout == SlideLayout.BULLETS else f"Illustration of {group[0]}",
                    speaker_notes=" ".join(group),
                )
            )

        return StructureResponse(title=title, theme=DesignTheme.MODERN, slides=slides)


class StubImageGenerator(ImageGenerator):
    """Return a small SVG placeholder tinted by the subject."""

    async def generate(self, request: ImageGenerationRequest) -> str:
        digest = generate_hash(f"{request.subject}|{request.art_direction}")
        color = f"#{digest[:6]}"
        accent = f"#{digest[6:12]}"
        width, height = (1600, 900) if request.aspect_ratio == "16:9" else (1024, 1024)
        svg = (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}">'
            f'<rect width="100%" height="100%" fill="{color}"/>'
            f'<circle cx="{width // 2}" cy="{height // 2}" r="{height // 3}" fill="{accent}"/>'
            "</svg>"
        )
        return to_data_uri(svg.encode("utf-8"), media_type="image/svg+xml")
