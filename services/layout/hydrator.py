"""Expand semantic slides into positioned free-form canvas elements.

Every template is expressed in percentages of the slide size. Element ids are
derived from the slide id, so hydrating the same slide twice yields equal
elements.
"""

from __future__ import annotations

from shared.enums import (
    AUTO_HEIGHT,
    IMAGE_Z_INDEX,
    TEXT_Z_INDEX,
    ElementType,
    SlideLayout,
    TextAlign,
)
from shared.models import ElementStyle, Presentation, Slide, SlideElement

MARGIN = 5.0
HALF_WIDTH = 42.0
IMAGE_HALF_X = 52.0
IMAGE_HALF_WIDTH = 43.0
BULLET_TOP = 25.0
BULLET_STEP = 12.0
COLUMN_X = (5.0, 52.0)
COLUMN_WIDTH = 43.0
GRID_TOP = 28.0
GRID_ROW_STEP = 16.0
QUOTE_MARK = "“"


def _text(
    element_id: str,
    content: str,
    x: float,
    y: float,
    width: float,
    font_size: float,
    font_weight: str = "normal",
    text_align: TextAlign = TextAlign.LEFT,
    height: float | str = AUTO_HEIGHT,
) -> SlideElement:
    return SlideElement(
        id=element_id,
        type=ElementType.TEXT,
        content=content,
        x=x,
        y=y,
        width=width,
        height=height,
        style=ElementStyle(
            font_size=font_size,
            font_weight=font_weight,
            text_align=text_align,
            z_index=TEXT_Z_INDEX,
        ),
    )


def _image(
    element_id: str,
    content: str,
    x: float,
    y: float,
    width: float,
    height: float,
    border_radius: float = 16,
) -> SlideElement:
    return SlideElement(
        id=element_id,
        type=ElementType.IMAGE,
        content=content,
        x=x,
        y=y,
        width=width,
        height=height,
        style=ElementStyle(z_index=IMAGE_Z_INDEX, border_radius=border_radius),
    )


def _mirror(element: SlideElement) -> SlideElement:
    return element.model_copy(update={"x": 100 - element.x - element.width})


def _title_layout(slide: Slide) -> list[SlideElement]:
    elements: list[SlideElement] = []
    if slide.expects_image:
        elements.append(
            _image(f"{slide.id}-background", slide.image_url or "", 0, 0, 100, 100, border_radius=0)
        )
    elements.append(
        _text(f"{slide.id}-title", slide.title, 10, 35, 80, 56, "bold", TextAlign.CENTER)
    )
    if slide.subtitle:
        elements.append(
            _text(f"{slide.id}-subtitle", slide.subtitle, 15, 55, 70, 24, text_align=TextAlign.CENTER)
        )
    return elements


def _content_split_layout(slide: Slide) -> list[SlideElement]:
    """Text in the left half, illustration in the right half."""
    elements = [_text(f"{slide.id}-title", slide.title, MARGIN, 8, HALF_WIDTH, 36, "bold")]
    for index, point in enumerate(slide.content):
        elements.append(
            _text(
                f"{slide.id}-bullet-{index}",
                point,
                MARGIN,
                BULLET_TOP + index * BULLET_STEP,
                HALF_WIDTH,
                20,
            )
        )
    elements.append(
        _image(f"{slide.id}-image", slide.image_url or "", IMAGE_HALF_X, 10, IMAGE_HALF_WIDTH, 80)
    )
    return elements


def _bullets_layout(slide: Slide) -> list[SlideElement]:
    elements = [_text(f"{slide.id}-title", slide.title, MARGIN, 8, 90, 36, "bold")]
    for index, point in enumerate(slide.content):
        column = index % 2
        row = index // 2
        elements.append(
            _text(
                f"{slide.id}-bullet-{index}",
                point,
                COLUMN_X[column],
                GRID_TOP + row * GRID_ROW_STEP,
                COLUMN_WIDTH,
                22,
            )
        )
    return elements


def _quote_layout(slide: Slide) -> list[SlideElement]:
    # Only the first content item is quoted
    elements = [_text(f"{slide.id}-quote-mark", QUOTE_MARK, 8, 8, 15, 120, "bold")]
    if slide.content:
        elements.append(
            _text(
                f"{slide.id}-quote",
                f'"{slide.content[0]}"',
                15,
                30,
                70,
                40,
                text_align=TextAlign.CENTER,
            )
        )
    if slide.subtitle:
        elements.append(
            _text(
                f"{slide.id}-attribution",
                f"— {slide.subtitle}",
                40,
                72,
                50,
                20,
                text_align=TextAlign.RIGHT,
            )
        )
    return elements


def _generic_layout(slide: Slide) -> list[SlideElement]:
    elements = [_text(f"{slide.id}-title", slide.title, MARGIN, 8, 90, 36, "bold")]
    top, step = 24.0, 12.0
    if slide.expects_image:
        elements.append(_image(f"{slide.id}-image", slide.image_url or "", MARGIN, 22, 90, 40))
        top, step = 66.0, 8.0
    for index, point in enumerate(slide.content):
        elements.append(
            _text(f"{slide.id}-item-{index}", point, MARGIN, top + index * step, 90, 18)
        )
    return elements


def hydrate(slide: Slide) -> tuple[SlideElement, ...]:
    """Return the free-form elements for ``slide``'s semantic layout."""
    match slide.layout:
        case SlideLayout.TITLE:
            elements = _title_layout(slide)
        case SlideLayout.CONTENT_LEFT:
            elements = _content_split_layout(slide)
        case SlideLayout.CONTENT_RIGHT:
            elements = [_mirror(element) for element in _content_split_layout(slide)]
        case SlideLayout.BULLETS:
            elements = _bullets_layout(slide)
        case SlideLayout.QUOTE:
            elements = _quote_layout(slide)
        case _:
            # DATA, PROCESS and layouts this build does not know yet
            elements = _generic_layout(slide)
    return tuple(elements)


def hydrate_slide(slide: Slide, force: bool = False) -> Slide:
    """Return ``slide`` with elements attached, keeping existing ones unless ``force``."""
    if slide.is_hydrated and not force:
        return slide
    return slide.model_copy(update={"elements": hydrate(slide)})


def hydrate_presentation(presentation: Presentation) -> Presentation:
    """Hydrate every slide that has no free-form elements yet."""
    slides = tuple(hydrate_slide(slide) for slide in presentation.slides)
    return presentation.model_copy(update={"slides": slides})


def refresh_image_elements(slide: Slide) -> Slide:
    """Point a hydrated slide's template image elements at its current image.

    Slides hydrated while their image was pending already carry an empty
    slot, so only existing elements are rewritten. Geometry is preserved and
    elements the user deleted stay deleted.
    """
    if not slide.is_hydrated:
        return slide

    fresh_content = {
        element.id: element.content
        for element in hydrate(slide)
        if element.type == ElementType.IMAGE
    }
    elements = tuple(
        element.model_copy(update={"content": fresh_content[element.id]})
        if element.type == ElementType.IMAGE and element.id in fresh_content
        else element
        for element in slide.elements
    )
    return slide.model_copy(update={"elements": elements})
