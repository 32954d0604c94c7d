import math
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shared.enums import (
    AUTO_HEIGHT,
    DesignTheme,
    ElementType,
    GenerationStage,
    HandleType,
    ImageStatus,
    InteractionMode,
    SlideLayout,
    TextAlign,
    VisualStyle,
)


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON with the editor UI."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DeckModel(CamelModel):
    """Immutable deck value; changes are made with ``model_copy(update=...)``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# Deck data model
class ElementStyle(DeckModel):
    font_size: float | None = None
    font_weight: str | None = None
    color: str | None = None
    background_color: str | None = None
    z_index: int | None = None
    border_radius: float | None = None
    font_family: str | None = None
    text_align: TextAlign | None = None


class SlideElement(DeckModel):
    id: str
    type: ElementType
    content: str = ""
    x: float = Field(..., description="Left edge, percent of slide width")
    y: float = Field(..., description="Top edge, percent of slide height")
    width: float = Field(..., description="Percent of slide width")
    height: float | Literal["auto"] = Field(..., description="Percent of slide height or 'auto'")
    rotation: float | None = None
    style: ElementStyle | None = None

    @field_validator("x", "y", "width", "rotation")
    @classmethod
    def _require_finite(cls, value: float | None) -> float | None:
        if value is not None and not math.isfinite(value):
            raise ValueError("element geometry must be a finite number")
        return value

    @field_validator("height")
    @classmethod
    def _require_finite_height(cls, value: float | str) -> float | str:
        if value != AUTO_HEIGHT and not math.isfinite(value):
            raise ValueError("element height must be a finite number or 'auto'")
        return value

    @property
    def has_auto_height(self) -> bool:
        return self.height == AUTO_HEIGHT


class Slide(DeckModel):
    id: str
    layout: SlideLayout
    title: str = ""
    subtitle: str | None = None
    content: tuple[str, ...] = ()
    visual_prompt: str | None = None
    image_url: str | None = Field(
        default=None,
        description="Image reference; empty string while generation is pending, None when no image",
    )
    image_status: ImageStatus = ImageStatus.NOT_REQUESTED
    speaker_notes: str = ""
    elements: tuple[SlideElement, ...] | None = None

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)

    @property
    def expects_image(self) -> bool:
        """True once an illustration exists or is still being rendered."""
        return self.has_image or self.image_status == ImageStatus.PENDING

    @property
    def is_hydrated(self) -> bool:
        return self.elements is not None


class PresentationStyle(DeckModel):
    theme: DesignTheme = DesignTheme.MODERN
    primary_color: str | None = None
    font_scale: float = Field(default=1.0, ge=0.8, le=1.2)
    visual_style: VisualStyle = VisualStyle.MINIMAL_VECTOR


class Presentation(DeckModel):
    title: str
    slides: tuple[Slide, ...] = ()
    style: PresentationStyle = Field(default_factory=PresentationStyle)

    def slide_index(self, slide_id: str) -> int | None:
        for index, slide in enumerate(self.slides):
            if slide.id == slide_id:
                return index
        return None

    def get_slide(self, slide_id: str) -> Slide | None:
        index = self.slide_index(slide_id)
        return None if index is None else self.slides[index]


class GenerationStatus(DeckModel):
    stage: GenerationStage = GenerationStage.IDLE
    message: str = "Ready to create"
    progress: int = Field(default=0, ge=0, le=100)
    current_slide_index: int | None = None
    total_slides: int | None = None


# Structure / image generator contracts
class DocumentPayload(CamelModel):
    data: str = Field(..., description="Base64 encoded document bytes")
    media_type: str = Field(..., description="Declared media type of the document")
    filename: str | None = None


class StructureRequest(CamelModel):
    document: DocumentPayload | None = None
    notes: str = ""


class SlideDescriptor(CamelModel):
    id: str = ""
    layout: SlideLayout
    title: str
    subtitle: str | None = None
    content: list[str] = Field(default_factory=list)
    visual_prompt: str | None = None
    speaker_notes: str = ""


class StructureResponse(CamelModel):
    title: str
    theme: DesignTheme
    slides: list[SlideDescriptor] = Field(..., min_length=1)


class ImageGenerationRequest(CamelModel):
    subject: str
    art_direction: str
    aspect_ratio: str = "16:9"


# Deck studio API models
class SessionResponse(CamelModel):
    session_id: str
    version: int
    status: GenerationStatus
    presentation: Presentation | None = None
    created_at: datetime


class StyleUpdateRequest(CamelModel):
    theme: DesignTheme | None = None
    primary_color: str | None = None
    font_scale: float | None = Field(default=None, ge=0.8, le=1.2)
    visual_style: VisualStyle | None = None


class SlideUpdateRequest(CamelModel):
    layout: SlideLayout | None = None
    title: str | None = None
    subtitle: str | None = None
    content: list[str] | None = None
    visual_prompt: str | None = None
    speaker_notes: str | None = None


class ViewportRequest(CamelModel):
    width: float = Field(..., gt=0, description="Rendered container width in screen pixels")
    height: float = Field(..., gt=0, description="Rendered container height in screen pixels")
    scale: float = Field(default=1.0, gt=0)


class PointerDownRequest(CamelModel):
    element_id: str | None = Field(None, description="Element under the pointer; None for empty canvas")
    x: float
    y: float
    handle: HandleType = HandleType.BODY


class PointerMoveRequest(CamelModel):
    x: float
    y: float


class CanvasStateResponse(CamelModel):
    slide_id: str | None = None
    mode: InteractionMode
    selected_element_id: str | None = None
    element: SlideElement | None = None


class APIResponse(BaseModel):
    """Generic API response wrapper"""

    success: bool = True
    message: str = "Success"
    data: Any | None = None
    error: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)
