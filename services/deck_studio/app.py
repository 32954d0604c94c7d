"""Deck studio API: generation, live editing and export of session decks."""

from __future__ import annotations

from fastapi import FastAPI, File, Form, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from services.canvas import Viewport
from services.deck_studio.export import export_filename, export_presentation
from services.deck_studio.session import (
    DeckSession,
    SessionLimitError,
    SessionManager,
    SessionNotFoundError,
    apply_slide_update,
    apply_style_update,
)
from services.websocket_progress import websocket_manager
from shared.enums import VisualStyle
from shared.errors import (
    DeckError,
    ElementNotFoundError,
    GenerationInProgressError,
    InputValidationError,
    NoPresentationError,
    SlideNotFoundError,
)
from shared.models import (
    APIResponse,
    CanvasStateResponse,
    GenerationStatus,
    PointerDownRequest,
    PointerMoveRequest,
    Presentation,
    PresentationStyle,
    SessionResponse,
    Slide,
    SlideElement,
    SlideUpdateRequest,
    StyleUpdateRequest,
    ViewportRequest,
)
from shared.utils import config, setup_logging

logger = setup_logging("deck-studio")

app = FastAPI(
    title="Deck Studio Service",
    description="Document-to-deck generation with an editable free-form canvas",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get("allowed_origins", ["*"]),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

sessions = SessionManager()


def _get_session(session_id: str) -> DeckSession:
    try:
        return sessions.get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


def _to_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, InputValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, GenerationInProgressError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, (SlideNotFoundError, ElementNotFoundError, NoPresentationError)):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, DeckError):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail=f"Unexpected error: {exc!s}")


@app.get("/health")
async def health_check():
    """Health check endpoint for the deck studio service."""
    return APIResponse(
        message="Deck Studio Service is healthy",
        data={
            "sessions": len(sessions),
            "structure_provider": config.get("structure_provider", "stub"),
            "image_provider": config.get("image_provider", "stub"),
        },
    )


@app.post("/sessions", response_model=SessionResponse, status_code=201)
async def create_session() -> SessionResponse:
    """Open a new editing session with an empty deck."""
    try:
        session = sessions.create(listener_factory=websocket_manager.store_listener)
    except SessionLimitError as e:
        raise HTTPException(status_code=429, detail=str(e)) from e
    return session.to_response()


@app.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str) -> SessionResponse:
    return _get_session(session_id).to_response()


@app.delete("/sessions/{session_id}")
async def delete_session(session_id: str):
    try:
        sessions.delete(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return APIResponse(message=f"Session {session_id} deleted")


@app.post("/sessions/{session_id}/generate", response_model=GenerationStatus, status_code=202)
async def start_generation(
    session_id: str,
    file: UploadFile | None = File(None),
    notes: str = Form(""),
    visual_style: VisualStyle | None = Form(None),
    primary_color: str | None = Form(None),
) -> GenerationStatus:
    """Start a generation cycle from an uploaded document and/or notes.

    The cycle runs in the background; progress is reported through the
    status endpoint and the ``/ws/progress`` WebSocket.
    """
    session = _get_session(session_id)

    document = await file.read() if file is not None else None
    current = session.store.presentation
    style = current.style if current is not None else PresentationStyle(
        visual_style=config.get("default_visual_style", VisualStyle.MINIMAL_VECTOR.value)
    )
    overrides = {"visual_style": visual_style, "primary_color": primary_color}
    style = style.model_copy(update={key: value for key, value in overrides.items() if value is not None})

    try:
        session.pipeline.start(
            document=document or None,
            notes=notes,
            media_type=file.content_type if file is not None else None,
            filename=file.filename if file is not None else None,
            style=style,
        )
    except DeckError as e:
        raise _to_http_error(e) from e

    logger.info(
        "Started generation for session %s (document=%s, notes=%d chars)",
        session_id,
        file.filename if file is not None else None,
        len(notes or ""),
    )
    return session.store.status


@app.get("/sessions/{session_id}/status", response_model=GenerationStatus)
async def get_status(session_id: str) -> GenerationStatus:
    return _get_session(session_id).store.status


@app.get("/sessions/{session_id}/presentation", response_model=Presentation)
async def get_presentation(session_id: str) -> Presentation:
    session = _get_session(session_id)
    try:
        return session.store.require_presentation()
    except NoPresentationError as e:
        raise _to_http_error(e) from e


@app.patch("/sessions/{session_id}/style", response_model=Presentation)
async def update_style(session_id: str, request: StyleUpdateRequest) -> Presentation:
    """Change deck-wide style; later image requests use the new visual style."""
    session = _get_session(session_id)
    try:
        return session.store.update(lambda presentation: apply_style_update(presentation, request))
    except DeckError as e:
        raise _to_http_error(e) from e


@app.patch("/sessions/{session_id}/slides/{slide_id}", response_model=Slide)
async def update_slide(session_id: str, slide_id: str, request: SlideUpdateRequest) -> Slide:
    session = _get_session(session_id)
    try:
        return session.store.replace_slide(slide_id, lambda slide: apply_slide_update(slide, request))
    except DeckError as e:
        raise _to_http_error(e) from e


@app.post("/sessions/{session_id}/slides/{slide_id}/regenerate-image", response_model=Slide)
async def regenerate_image(session_id: str, slide_id: str) -> Slide:
    """Re-render one slide's illustration and return the updated slide."""
    session = _get_session(session_id)
    try:
        await session.pipeline.regenerate_slide_image(slide_id)
    except DeckError as e:
        raise _to_http_error(e) from e
    except Exception as e:
        logger.error("Image regeneration failed for %s/%s: %s", session_id, slide_id, e)
        raise _to_http_error(e) from e
    return session.store.require_presentation().get_slide(slide_id)


@app.post("/sessions/{session_id}/slides/{slide_id}/hydrate", response_model=Slide)
async def hydrate(session_id: str, slide_id: str, force: bool = Query(False)) -> Slide:
    """Expand a slide's layout template into free-form elements."""
    session = _get_session(session_id)
    try:
        return session.canvas.ensure_hydrated(slide_id, force=force)
    except DeckError as e:
        raise _to_http_error(e) from e


@app.put("/sessions/{session_id}/canvas/viewport", response_model=CanvasStateResponse)
async def set_viewport(session_id: str, request: ViewportRequest) -> CanvasStateResponse:
    session = _get_session(session_id)
    session.canvas.set_viewport(Viewport(width=request.width, height=request.height, scale=request.scale))
    return session.canvas.state()


@app.post("/sessions/{session_id}/canvas/{slide_id}/pointer-down", response_model=CanvasStateResponse)
async def pointer_down(session_id: str, slide_id: str, request: PointerDownRequest) -> CanvasStateResponse:
    """Press on an element (drag or resize handle) or on empty canvas."""
    session = _get_session(session_id)
    try:
        session.canvas.ensure_hydrated(slide_id)
        return session.canvas.pointer_down(slide_id, request.element_id, request.x, request.y, request.handle)
    except DeckError as e:
        raise _to_http_error(e) from e


@app.post("/sessions/{session_id}/canvas/pointer-move", response_model=SlideElement | None)
async def pointer_move(session_id: str, request: PointerMoveRequest) -> SlideElement | None:
    session = _get_session(session_id)
    try:
        return session.canvas.pointer_move(request.x, request.y)
    except DeckError as e:
        raise _to_http_error(e) from e


@app.post("/sessions/{session_id}/canvas/pointer-up", response_model=CanvasStateResponse)
async def pointer_up(session_id: str) -> CanvasStateResponse:
    return _get_session(session_id).canvas.pointer_up()


@app.post("/sessions/{session_id}/canvas/cancel", response_model=CanvasStateResponse)
async def cancel_gesture(session_id: str) -> CanvasStateResponse:
    session = _get_session(session_id)
    try:
        return session.canvas.cancel()
    except DeckError as e:
        raise _to_http_error(e) from e


@app.get("/sessions/{session_id}/canvas", response_model=CanvasStateResponse)
async def canvas_state(session_id: str) -> CanvasStateResponse:
    return _get_session(session_id).canvas.state()


@app.delete("/sessions/{session_id}/canvas/{slide_id}/elements/{element_id}", response_model=Slide)
async def delete_element(session_id: str, slide_id: str, element_id: str) -> Slide:
    session = _get_session(session_id)
    try:
        return session.canvas.delete_element(slide_id, element_id)
    except DeckError as e:
        raise _to_http_error(e) from e


@app.get("/sessions/{session_id}/export")
async def export_deck(session_id: str, slide_ids: list[str] | None = Query(None)):
    """Download the deck (or the selected slides, in deck order) as JSON."""
    session = _get_session(session_id)
    try:
        presentation = session.store.require_presentation()
        payload = export_presentation(presentation, slide_ids)
    except DeckError as e:
        raise _to_http_error(e) from e

    return JSONResponse(
        content=payload,
        headers={"Content-Disposition": f'attachment; filename="{export_filename(presentation)}"'},
    )
