"""OpenAI structure and image generators with Azure routing support."""

from __future__ import annotations

from typing import Any

from services.generation.art_direction import render_image_prompt
from services.generation.documents import decode_text
from shared.azure_openai_client import create_client, get_model_name
from shared.enums import DesignTheme, SlideLayout
from shared.errors import ImageGenerationError, StructureGenerationError
from shared.models import ImageGenerationRequest, StructureRequest, StructureResponse
from shared.utils import config as service_config, to_data_uri

from .base import ImageGenerator, StructureGenerator, parse_structure_payload

IMAGE_SIZES = {
    "16:9": "1536x1024",
    "1:1": "1024x1024",
    "9:16": "1024x1536",
}

_LAYOUTS = ", ".join(layout.value for layout in SlideLayout)
_THEMES = ", ".join(theme.value for theme in DesignTheme)

STRUCTURE_SYSTEM_PROMPT = f"""\
You are an expert information designer and product lead. Transform the provided \
source material (PRDs, guides, pitches, notes) into a professional presentation.

Rules:
1. Faithfulness: tell the story exactly as it is in the source.
2. Clean text: never use markdown symbols (such as ** or ##) in any string.
3. UI mockups: when the content describes a software interface, screen or \
dashboard, request a UI mockup in visualPrompt, e.g. "High-fidelity UI mockup of \
a user analytics dashboard, dark mode, clean figma style".
4. Layouts: PROCESS for flows, DATA for metrics, CONTENT_LEFT / CONTENT_RIGHT for \
general content with visuals, QUOTE for testimonials (content[0] is the quote, \
subtitle the attribution), TITLE for the opening slide.

Respond with a JSON object:
{{"title": string, "theme": one of [{_THEMES}],
  "slides": [{{"id": string, "layout": one of [{_LAYOUTS}], "title": string,
              "subtitle": string (optional), "content": [string],
              "visualPrompt": string, "speakerNotes": string}}]}}
"""


class OpenAIStructureGenerator(StructureGenerator):
    """Chat completion in JSON mode, validated against the outline schema."""

    def __init__(self) -> None:
        self.client = create_client()
        self.model_name = get_model_name(service_config.get("structure_openai_model", "gpt-4o"))

    def _build_user_content(self, request: StructureRequest) -> list[dict[str, Any]]:
        prompt = "Here is the source material.\n"
        if request.notes:
            prompt += f"User notes: {request.notes}\n"
        prompt += "Generate the JSON structure for the presentation."

        parts: list[dict[str, Any]] = []
        document = request.document
        if document is not None:
            text = decode_text(document)
            if text is not None:
                parts.append({"type": "text", "text": f"Source document:\n{text}"})
            else:
                parts.append(
                    {
                        "type": "file",
                        "file": {
                            "filename": document.filename or "document",
                            "file_data": f"data:{document.media_type};base64,{document.data}",
                        },
                    }
                )
        parts.append({"type": "text", "text": prompt})
        return parts

    async def generate(self, request: StructureRequest) -> StructureResponse:
        try:
            response = await self.client.chat.completions.create(
                model=self.model_name,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": STRUCTURE_SYSTEM_PROMPT},
                    {"role": "user", "content": self._build_user_content(request)},
                ],
            )
        except Exception as exc:
            raise StructureGenerationError(f"Structure request failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else None
        return parse_structure_payload(content)


class OpenAIImageGenerator(ImageGenerator):
    """OpenAI Images API; returns a data URI (or the hosted URL when given one)."""

    def __init__(self) -> None:
        self.client = create_client()
        self.model_name = get_model_name(service_config.get("image_openai_model", "gpt-image-1"))

    async def generate(self, request: ImageGenerationRequest) -> str:
        try:
            response = await self.client.images.generate(
                model=self.model_name,
                prompt=render_image_prompt(request),
                size=IMAGE_SIZES.get(request.aspect_ratio, IMAGE_SIZES["16:9"]),
                n=1,
            )
        except Exception as exc:
            raise ImageGenerationError(f"Image request failed: {exc}") from exc

        for item in response.data or []:
            if getattr(item, "b64_json", None):
                return to_data_uri(item.b64_json)
            if getattr(item, "url", None):
                return item.url
        return ""
