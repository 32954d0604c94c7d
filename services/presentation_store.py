"""Authoritative in-memory deck state for one editing session."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator

from shared.errors import NoPresentationError, SlideNotFoundError
from shared.models import GenerationStatus, Presentation, Slide
from shared.utils import setup_logging

logger = setup_logging("presentation-store")

PRESENTATION_UPDATED = "presentation_updated"
STATUS_UPDATED = "status_updated"


@dataclass(frozen=True)
class StoreSnapshot:
    version: int
    presentation: Presentation | None
    status: GenerationStatus


StoreListener = Callable[[str, StoreSnapshot], None]


class PresentationStore:
    """Versioned value cell holding the current Presentation and generation status.

    Writers never mutate the stored value; they hand in a replacement (or a
    function computing one from the latest value). Each accepted write bumps
    ``version`` and notifies listeners with the complete new snapshot.
    Listeners may not write back while being notified.
    """

    def __init__(self) -> None:
        self._presentation: Presentation | None = None
        self._status = GenerationStatus()
        self._version = 0
        self._listeners: list[StoreListener] = []
        self._writing = False

    @property
    def presentation(self) -> Presentation | None:
        return self._presentation

    @property
    def status(self) -> GenerationStatus:
        return self._status

    @property
    def version(self) -> int:
        return self._version

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(self._version, self._presentation, self._status)

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it again."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def replace(self, presentation: Presentation | None) -> StoreSnapshot:
        """Swap in a whole new Presentation value."""
        with self._single_writer():
            self._presentation = presentation
            self._version += 1
            return self._notify(PRESENTATION_UPDATED)

    def update(self, updater: Callable[[Presentation], Presentation]) -> Presentation:
        """Replace the Presentation with ``updater(latest)``."""
        updated = updater(self.require_presentation())
        self.replace(updated)
        return updated

    def replace_slide(self, slide_id: str, updater: Callable[[Slide], Slide]) -> Slide:
        """Replace one slide, located by id in the latest Presentation value."""
        current = self.require_presentation()
        index = current.slide_index(slide_id)
        if index is None:
            raise SlideNotFoundError(slide_id)

        new_slide = updater(current.slides[index])
        slides = current.slides[:index] + (new_slide,) + current.slides[index + 1:]
        self.replace(current.model_copy(update={"slides": slides}))
        return new_slide

    def set_status(self, status: GenerationStatus) -> StoreSnapshot:
        with self._single_writer():
            self._status = status
            self._version += 1
            return self._notify(STATUS_UPDATED)

    def update_status(self, **changes) -> GenerationStatus:
        """Replace the status with a copy carrying ``changes``."""
        status = GenerationStatus.model_validate({**self._status.model_dump(), **changes})
        self.set_status(status)
        return status

    def require_presentation(self) -> Presentation:
        if self._presentation is None:
            raise NoPresentationError("No presentation has been generated yet")
        return self._presentation

    @contextmanager
    def _single_writer(self) -> Iterator[None]:
        if self._writing:
            raise RuntimeError("Concurrent write to presentation store")
        self._writing = True
        try:
            yield
        finally:
            self._writing = False

    def _notify(self, event: str) -> StoreSnapshot:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(event, snapshot)
            except Exception as exc:
                logger.error("Store listener failed on %s: %s", event, exc)
        return snapshot
