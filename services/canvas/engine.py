"""Selection, drag and resize of free-form slide elements."""

from __future__ import annotations

from dataclasses import dataclass

from services.canvas.coordinates import Viewport
from services.layout.hydrator import hydrate_slide
from services.presentation_store import PresentationStore
from shared.enums import AUTO_HEIGHT, MIN_ELEMENT_SIZE, HandleType, InteractionMode
from shared.errors import ElementNotFoundError, SlideNotFoundError
from shared.models import CanvasStateResponse, Slide, SlideElement
from shared.utils import setup_logging

logger = setup_logging("canvas-engine")

DEFAULT_VIEWPORT = Viewport(width=1280, height=720, scale=1.0)


def drag_position(anchor: SlideElement, dx_percent: float, dy_percent: float) -> tuple[float, float]:
    """New top-left corner; elements may leave the slide."""
    return anchor.x + dx_percent, anchor.y + dy_percent


def resize_dimensions(
    anchor: SlideElement, dx_percent: float, dy_percent: float
) -> tuple[float, float | str]:
    """New size, floored so the element stays visible and selectable."""
    width = max(MIN_ELEMENT_SIZE, anchor.width + dx_percent)
    if anchor.height == AUTO_HEIGHT:
        return width, AUTO_HEIGHT
    return width, max(MIN_ELEMENT_SIZE, anchor.height + dy_percent)


def find_element(slide: Slide, element_id: str) -> SlideElement:
    for element in slide.elements or ():
        if element.id == element_id:
            return element
    raise ElementNotFoundError(slide.id, element_id)


def replace_element(slide: Slide, element: SlideElement) -> Slide:
    find_element(slide, element.id)
    elements = tuple(element if item.id == element.id else item for item in slide.elements)
    return slide.model_copy(update={"elements": elements})


def remove_element(slide: Slide, element_id: str) -> Slide:
    find_element(slide, element_id)
    elements = tuple(item for item in slide.elements if item.id != element_id)
    return slide.model_copy(update={"elements": elements})


@dataclass(frozen=True)
class _Gesture:
    slide_id: str
    anchor: SlideElement
    pointer_x: float
    pointer_y: float


class CanvasInteractionEngine:
    """Turns pointer events into element edits written through the store.

    Holds the ephemeral interaction state (mode and selection); the geometry
    itself only ever lives in the store.
    """

    def __init__(self, store: PresentationStore, viewport: Viewport | None = None) -> None:
        self.store = store
        self.viewport = viewport or DEFAULT_VIEWPORT
        self.mode = InteractionMode.IDLE
        self.slide_id: str | None = None
        self.selected_element_id: str | None = None
        self._gesture: _Gesture | None = None

    def set_viewport(self, viewport: Viewport) -> None:
        self.viewport = viewport

    def ensure_hydrated(self, slide_id: str, force: bool = False) -> Slide:
        """Expand a slide into free-form elements if it has none yet."""
        return self.store.replace_slide(slide_id, lambda slide: hydrate_slide(slide, force=force))

    def select(self, slide_id: str, element_id: str) -> SlideElement:
        element = find_element(self._slide(slide_id), element_id)
        self.slide_id = slide_id
        self.selected_element_id = element_id
        return element

    def clear_selection(self) -> None:
        self.selected_element_id = None

    def pointer_down(
        self,
        slide_id: str,
        element_id: str | None,
        x: float,
        y: float,
        handle: HandleType = HandleType.BODY,
    ) -> CanvasStateResponse:
        """Start a drag (element body) or resize (resize handle) gesture.

        A press on empty canvas (``element_id`` is None) clears the selection.
        """
        self._end_gesture()
        self.slide_id = slide_id
        if element_id is None:
            self.clear_selection()
            return self.state()

        element = self.select(slide_id, element_id)
        self.mode = InteractionMode.RESIZING if handle == HandleType.RESIZE else InteractionMode.DRAGGING
        self._gesture = _Gesture(slide_id=slide_id, anchor=element, pointer_x=x, pointer_y=y)
        logger.debug("%s started on %s/%s", self.mode.value, slide_id, element_id)
        return self.state()

    def pointer_move(self, x: float, y: float) -> SlideElement | None:
        """Apply the accumulated pointer delta to the element under gesture."""
        gesture = self._gesture
        if gesture is None or self.mode == InteractionMode.IDLE:
            return None

        dx_percent, dy_percent = self.viewport.pixels_to_percent(
            x - gesture.pointer_x, y - gesture.pointer_y
        )
        anchor = gesture.anchor
        if self.mode == InteractionMode.DRAGGING:
            new_x, new_y = drag_position(anchor, dx_percent, dy_percent)
            changes = {"x": new_x, "y": new_y}
        else:
            width, height = resize_dimensions(anchor, dx_percent, dy_percent)
            changes = {"width": width, "height": height}

        try:
            slide = self.store.replace_slide(
                gesture.slide_id,
                lambda current: replace_element(
                    current, find_element(current, anchor.id).model_copy(update=changes)
                ),
            )
        except ElementNotFoundError:
            self._end_gesture()
            self.clear_selection()
            raise
        return find_element(slide, anchor.id)

    def pointer_up(self) -> CanvasStateResponse:
        """Finish the gesture; the selection survives."""
        self._end_gesture()
        return self.state()

    def cancel(self) -> CanvasStateResponse:
        """Abort the gesture and restore the element's geometry from the anchor."""
        gesture = self._gesture
        if gesture is not None:
            anchor = gesture.anchor
            restore = {"x": anchor.x, "y": anchor.y, "width": anchor.width, "height": anchor.height}
            self.store.replace_slide(
                gesture.slide_id,
                lambda current: replace_element(
                    current, find_element(current, anchor.id).model_copy(update=restore)
                ),
            )
        self._end_gesture()
        return self.state()

    def delete_element(self, slide_id: str, element_id: str) -> Slide:
        slide = self.store.replace_slide(slide_id, lambda current: remove_element(current, element_id))
        gesture = self._gesture
        if gesture is not None and (gesture.slide_id, gesture.anchor.id) == (slide_id, element_id):
            self._end_gesture()
        if (self.slide_id, self.selected_element_id) == (slide_id, element_id):
            self.clear_selection()
        return slide

    def state(self) -> CanvasStateResponse:
        element = None
        if self.slide_id and self.selected_element_id:
            presentation = self.store.presentation
            slide = presentation.get_slide(self.slide_id) if presentation else None
            if slide is not None:
                element = next(
                    (item for item in slide.elements or () if item.id == self.selected_element_id),
                    None,
                )
        return CanvasStateResponse(
            slide_id=self.slide_id,
            mode=self.mode,
            selected_element_id=self.selected_element_id,
            element=element,
        )

    def reset(self) -> None:
        self._end_gesture()
        self.slide_id = None
        self.clear_selection()

    def _slide(self, slide_id: str) -> Slide:
        slide = self.store.require_presentation().get_slide(slide_id)
        if slide is None:
            raise SlideNotFoundError(slide_id)
        return slide

    def _end_gesture(self) -> None:
        self._gesture = None
        self.mode = InteractionMode.IDLE
