"""Tests for the canvas interaction engine."""

import pytest

from services.canvas import CanvasInteractionEngine, Viewport
from services.presentation_store import PresentationStore
from shared.enums import AUTO_HEIGHT, MIN_ELEMENT_SIZE, HandleType, InteractionMode, SlideLayout
from shared.errors import ElementNotFoundError, SlideNotFoundError
from shared.models import Presentation, Slide


@pytest.fixture
def store() -> PresentationStore:
    store = PresentationStore()
    store.replace(
        Presentation(
            title="Canvas",
            slides=(
                Slide(id="s1", layout=SlideLayout.CONTENT_LEFT, title="Hello", content=("One", "Two")),
                Slide(id="s2", layout=SlideLayout.BULLETS, title="List", content=("A",)),
            ),
        )
    )
    return store


@pytest.fixture
def engine(store: PresentationStore) -> CanvasInteractionEngine:
    engine = CanvasInteractionEngine(store, Viewport(width=1000, height=500, scale=1.0))
    engine.ensure_hydrated("s1")
    return engine


def element(store: PresentationStore, element_id: str, slide_id: str = "s1"):
    slide = store.presentation.get_slide(slide_id)
    return next(item for item in slide.elements if item.id == element_id)


def test_ensure_hydrated_only_expands_once(store: PresentationStore, engine: CanvasInteractionEngine) -> None:
    version = store.version
    engine.ensure_hydrated("s1")

    assert store.presentation.get_slide("s1").is_hydrated
    # The second call writes the same value back
    assert store.version == version + 1
    assert element(store, "s1-title").x == 5.0


def test_drag_moves_by_converted_delta(store: PresentationStore, engine: CanvasInteractionEngine) -> None:
    engine.pointer_down("s1", "s1-title", 200, 100)
    moved = engine.pointer_move(300, 150)

    assert engine.mode == InteractionMode.DRAGGING
    assert moved.x == pytest.approx(15.0)
    assert moved.y == pytest.approx(18.0)
    assert element(store, "s1-title").x == pytest.approx(15.0)


def test_drag_is_relative_to_gesture_start(store: PresentationStore, engine: CanvasInteractionEngine) -> None:
    engine.pointer_down("s1", "s1-title", 0, 0)
    engine.pointer_move(50, 0)
    moved = engine.pointer_move(100, 0)

    assert moved.x == pytest.approx(15.0)


def test_drag_scale_does_not_change_percentages(store: PresentationStore) -> None:
    engine = CanvasInteractionEngine(store, Viewport(width=1000, height=500, scale=2.0))
    engine.ensure_hydrated("s1")

    engine.pointer_down("s1", "s1-title", 0, 0)
    moved = engine.pointer_move(100, 0)

    assert moved.x == pytest.approx(15.0)


def test_drag_may_leave_the_slide(engine: CanvasInteractionEngine) -> None:
    engine.pointer_down("s1", "s1-title", 0, 0)
    moved = engine.pointer_move(-500, 0)

    assert moved.x == pytest.approx(-45.0)


def test_resize_is_floored(engine: CanvasInteractionEngine) -> None:
    engine.pointer_down("s1", "s1-image", 0, 0, HandleType.RESIZE)
    resized = engine.pointer_move(-5000, -5000)

    assert engine.mode == InteractionMode.RESIZING
    assert resized.width == MIN_ELEMENT_SIZE
    assert resized.height == MIN_ELEMENT_SIZE


def test_resize_keeps_auto_height(engine: CanvasInteractionEngine) -> None:
    engine.pointer_down("s1", "s1-bullet-0", 0, 0, HandleType.RESIZE)
    resized = engine.pointer_move(100, 100)

    assert resized.width == pytest.approx(52.0)
    assert resized.height == AUTO_HEIGHT


def test_pointer_up_keeps_selection(engine: CanvasInteractionEngine) -> None:
    engine.pointer_down("s1", "s1-title", 0, 0)
    state = engine.pointer_up()

    assert state.mode == InteractionMode.IDLE
    assert state.selected_element_id == "s1-title"
    assert engine.pointer_move(10, 10) is None


def test_pointer_down_on_empty_canvas_clears_selection(engine: CanvasInteractionEngine) -> None:
    engine.pointer_down("s1", "s1-title", 0, 0)
    engine.pointer_up()

    state = engine.pointer_down("s1", None, 10, 10)

    assert state.selected_element_id is None
    assert state.mode == InteractionMode.IDLE


def test_cancel_restores_anchor_geometry(store: PresentationStore, engine: CanvasInteractionEngine) -> None:
    engine.pointer_down("s1", "s1-title", 0, 0)
    engine.pointer_move(400, 400)

    engine.cancel()

    assert element(store, "s1-title").x == 5.0
    assert element(store, "s1-title").y == 8.0


def test_delete_selected_element_clears_selection(store: PresentationStore, engine: CanvasInteractionEngine) -> None:
    engine.pointer_down("s1", "s1-title", 0, 0)

    slide = engine.delete_element("s1", "s1-title")

    assert all(item.id != "s1-title" for item in slide.elements)
    assert engine.state().selected_element_id is None
    assert engine.mode == InteractionMode.IDLE
    assert engine.pointer_move(50, 50) is None


def test_delete_other_element_keeps_selection(engine: CanvasInteractionEngine) -> None:
    engine.pointer_down("s1", "s1-title", 0, 0)
    engine.pointer_up()

    engine.delete_element("s1", "s1-image")

    assert engine.state().selected_element_id == "s1-title"


def test_edits_only_touch_target_slide(store: PresentationStore, engine: CanvasInteractionEngine) -> None:
    other = store.presentation.get_slide("s2")

    engine.pointer_down("s1", "s1-title", 0, 0)
    engine.pointer_move(100, 0)

    assert store.presentation.get_slide("s2") is other


def test_unknown_ids_raise(engine: CanvasInteractionEngine) -> None:
    with pytest.raises(SlideNotFoundError):
        engine.pointer_down("missing", "s1-title", 0, 0)
    with pytest.raises(ElementNotFoundError):
        engine.pointer_down("s1", "missing", 0, 0)
    with pytest.raises(ElementNotFoundError):
        engine.delete_element("s1", "missing")
