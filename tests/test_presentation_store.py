"""Tests for the versioned presentation store."""

import pytest

from services.presentation_store import PRESENTATION_UPDATED, STATUS_UPDATED, PresentationStore
from shared.enums import GenerationStage, SlideLayout
from shared.errors import NoPresentationError, SlideNotFoundError
from shared.models import Presentation, Slide


def make_presentation() -> Presentation:
    return Presentation(
        title="Deck",
        slides=(
            Slide(id="a", layout=SlideLayout.TITLE, title="Intro"),
            Slide(id="b", layout=SlideLayout.BULLETS, title="Points", content=("x", "y")),
        ),
    )


def test_initial_state() -> None:
    store = PresentationStore()

    assert store.presentation is None
    assert store.status.stage == GenerationStage.IDLE
    assert store.version == 0
    with pytest.raises(NoPresentationError):
        store.require_presentation()


def test_every_write_bumps_version_and_notifies() -> None:
    store = PresentationStore()
    events = []
    store.subscribe(lambda event, snapshot: events.append((event, snapshot.version)))

    store.replace(make_presentation())
    store.update_status(stage=GenerationStage.ANALYZING_DOC, progress=10)

    assert store.version == 2
    assert events == [(PRESENTATION_UPDATED, 1), (STATUS_UPDATED, 2)]


def test_replace_slide_leaves_previous_value_untouched() -> None:
    store = PresentationStore()
    store.replace(make_presentation())
    before = store.presentation

    store.replace_slide("b", lambda slide: slide.model_copy(update={"title": "Renamed"}))

    assert before.get_slide("b").title == "Points"
    assert store.presentation.get_slide("b").title == "Renamed"
    assert store.presentation.get_slide("a") is before.get_slide("a")
    assert [slide.id for slide in store.presentation.slides] == ["a", "b"]


def test_replace_slide_unknown_id() -> None:
    store = PresentationStore()
    store.replace(make_presentation())

    with pytest.raises(SlideNotFoundError):
        store.replace_slide("zzz", lambda slide: slide)


def test_listener_cannot_write_back() -> None:
    store = PresentationStore()
    failures = []

    def listener(event, snapshot):
        try:
            store.update_status(progress=50)
        except RuntimeError as exc:
            failures.append(str(exc))

    store.subscribe(listener)
    store.replace(make_presentation())

    assert failures == ["Concurrent write to presentation store"]
    assert store.status.progress == 0


def test_failing_listener_does_not_block_others() -> None:
    store = PresentationStore()
    received = []

    def broken(event, snapshot):
        raise ValueError("boom")

    store.subscribe(broken)
    store.subscribe(lambda event, snapshot: received.append(snapshot.presentation.title))

    store.replace(make_presentation())

    assert received == ["Deck"]


def test_unsubscribe_stops_notifications() -> None:
    store = PresentationStore()
    events = []
    unsubscribe = store.subscribe(lambda event, snapshot: events.append(event))

    store.update_status(progress=5)
    unsubscribe()
    store.update_status(progress=6)

    assert events == [STATUS_UPDATED]


def test_update_status_validates_progress() -> None:
    store = PresentationStore()

    with pytest.raises(ValueError):
        store.update_status(progress=101)
    assert store.version == 0
