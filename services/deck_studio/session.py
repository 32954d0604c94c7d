"""In-memory deck sessions: one store, pipeline and canvas engine per editor."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Callable
from uuid import uuid4

from services.canvas import CanvasInteractionEngine
from services.generation.pipeline import GenerationPipeline
from services.presentation_store import PresentationStore
from shared.models import (
    Presentation,
    SessionResponse,
    Slide,
    SlideUpdateRequest,
    StyleUpdateRequest,
)
from shared.utils import config, setup_logging

logger = setup_logging("deck-sessions")


class SessionNotFoundError(Exception):
    """Raised when a requested deck session does not exist."""


class SessionLimitError(Exception):
    """Raised when the configured number of concurrent sessions is reached."""


@dataclass
class DeckSession:
    session_id: str
    store: PresentationStore
    pipeline: GenerationPipeline
    canvas: CanvasInteractionEngine
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    _detach: list[Callable[[], None]] = field(default_factory=list, repr=False)

    def to_response(self, include_presentation: bool = True) -> SessionResponse:
        snapshot = self.store.snapshot()
        return SessionResponse(
            session_id=self.session_id,
            version=snapshot.version,
            status=snapshot.status,
            presentation=snapshot.presentation if include_presentation else None,
            created_at=self.created_at,
        )

    def close(self) -> None:
        for detach in self._detach:
            detach()
        self._detach.clear()
        self.pipeline.cancel()


def apply_style_update(presentation: Presentation, request: StyleUpdateRequest) -> Presentation:
    changes = request.model_dump(exclude_none=True)
    if not changes:
        return presentation
    return presentation.model_copy(update={"style": presentation.style.model_copy(update=changes)})


def apply_slide_update(slide: Slide, request: SlideUpdateRequest) -> Slide:
    """Apply explicit text edits to a slide.

    Changing the layout discards any hydrated elements so the next hydration
    uses the new template; other edits leave free-form elements untouched.
    """
    changes: dict[str, Any] = request.model_dump(exclude_none=True)
    if "content" in changes:
        changes["content"] = tuple(changes["content"])
    if "visual_prompt" in changes:
        changes["visual_prompt"] = changes["visual_prompt"].strip() or None
    if "layout" in changes and changes["layout"] != slide.layout:
        changes["elements"] = None
    return slide.model_copy(update=changes) if changes else slide


class SessionManager:
    """Registry of live deck sessions.

    Sessions live only in memory; deleting one detaches its listeners and
    cancels any generation cycle still running.
    """

    def __init__(self, max_sessions: int | None = None) -> None:
        self._sessions: dict[str, DeckSession] = {}
        self._max_sessions = max_sessions

    @property
    def max_sessions(self) -> int:
        if self._max_sessions is not None:
            return self._max_sessions
        return int(config.get_pipeline_value("sessions.max_sessions", 100))

    def create(
        self,
        listener_factory: Callable[[str], Callable] | None = None,
        pipeline_factory: Callable[[PresentationStore], GenerationPipeline] | None = None,
    ) -> DeckSession:
        if len(self._sessions) >= self.max_sessions:
            raise SessionLimitError(f"Session limit of {self.max_sessions} reached")

        session_id = str(uuid4())
        store = PresentationStore()
        pipeline = pipeline_factory(store) if pipeline_factory else GenerationPipeline(store)
        session = DeckSession(
            session_id=session_id,
            store=store,
            pipeline=pipeline,
            canvas=CanvasInteractionEngine(store),
        )
        if listener_factory is not None:
            session._detach.append(store.subscribe(listener_factory(session_id)))
        self._sessions[session_id] = session
        logger.info("Created deck session %s", session_id)
        return session

    def get(self, session_id: str) -> DeckSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session '{session_id}' not found")
        return session

    def delete(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(f"Session '{session_id}' not found")
        session.close()
        logger.info("Deleted deck session %s", session_id)

    def reset(self) -> None:
        """Drop every session (primarily for tests)."""
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)
