"""
SlideSmith Backend - Unified Application Entry Point
Mounts the deck studio service and the progress WebSocket under a single FastAPI application
"""

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from services.deck_studio.app import app as deck_studio_app
from services.websocket_progress import websocket_manager
from shared.utils import config, setup_logging

logger = setup_logging("slidesmith-backend")

app = FastAPI(
    title="SlideSmith Backend API",
    description="""
    Turns documents and notes into illustrated slide decks and serves the
    interactive editing canvas.

    All endpoints are documented below. Service routes are organized by tag.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {
            "name": "Health",
            "description": "Service health and status endpoints",
        },
        {
            "name": "Deck Studio",
            "description": "Deck generation, editing and export - mounted at /api/v1/deck",
        },
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get("allowed_origins", ["*"]),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes to exclude (internal FastAPI docs routes)
EXCLUDED_PATHS = {"/openapi.json", "/docs", "/docs/oauth2-redirect", "/redoc"}

# Include Deck Studio routes with prefix
for route in deck_studio_app.routes:
    if hasattr(route, "path") and hasattr(route, "endpoint"):
        # Skip internal documentation routes
        if route.path in EXCLUDED_PATHS:
            continue
        route_kwargs = {
            "path": f"/api/v1/deck{route.path}",
            "endpoint": route.endpoint,
            "methods": route.methods,
            "tags": ["Deck Studio"],
        }
        if hasattr(route, "name"):
            route_kwargs["name"] = f"deck_{route.name}"
        if hasattr(route, "response_model"):
            route_kwargs["response_model"] = route.response_model
        if getattr(route, "status_code", None) is not None:
            route_kwargs["status_code"] = route.status_code
        app.add_api_route(**route_kwargs)


@app.websocket("/ws/progress")
async def websocket_progress_endpoint(websocket: WebSocket):
    """WebSocket endpoint for deck session updates."""
    client_id = websocket.query_params.get("client_id")
    assigned_client_id = await websocket_manager.connect(websocket, client_id)
    await websocket.send_json({"event": "connected", "client_id": assigned_client_id})

    try:
        while True:
            message = await websocket.receive_json()
            action = message.get("action")

            if action == "subscribe":
                session_id = message.get("session_id")
                if not session_id:
                    await websocket.send_json(
                        {"event": "error", "message": "Missing session_id for subscribe"}
                    )
                    continue
                await websocket_manager.subscribe(assigned_client_id, session_id)
                await websocket.send_json({"event": "subscribed", "session_id": session_id})
            elif action == "unsubscribe":
                session_id = message.get("session_id")
                await websocket_manager.unsubscribe(assigned_client_id, session_id)
                await websocket.send_json({"event": "unsubscribed", "session_id": session_id})
            elif action == "ping":
                await websocket.send_json({"event": "pong"})
            else:
                await websocket.send_json(
                    {"event": "error", "message": f"Unknown action: {action}"}
                )
    except WebSocketDisconnect:
        await websocket_manager.disconnect(assigned_client_id)
    except Exception:
        await websocket_manager.disconnect(assigned_client_id)
        raise


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint with service information and API navigation"""
    return {
        "service": "SlideSmith Backend API",
        "version": "1.0.0",
        "services": {
            "deck_studio": {
                "base_url": "/api/v1/deck",
                "health": "/api/v1/deck/health",
            },
            "progress": {
                "websocket": "/ws/progress",
            },
        },
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json",
        },
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for all services"""
    return {
        "status": "healthy",
        "services": {
            "api_gateway": "operational",
            "deck_studio": "operational",
        },
    }


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting SlideSmith Backend on http://0.0.0.0:8000")
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
