"""WebSocket progress manager for real-time deck session updates."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Any, Callable, Dict, Set, Tuple
from uuid import uuid4

from fastapi import WebSocket

from services.presentation_store import STATUS_UPDATED, StoreSnapshot
from shared.utils import setup_logging

logger = setup_logging("websocket-progress")


def snapshot_message(session_id: str, event: str, snapshot: StoreSnapshot) -> dict[str, Any]:
    """Wire form of a store notification."""
    message: dict[str, Any] = {
        "event": event,
        "sessionId": session_id,
        "version": snapshot.version,
        "status": snapshot.status.model_dump(by_alias=True, mode="json"),
    }
    if event != STATUS_UPDATED:
        message["presentation"] = (
            snapshot.presentation.model_dump(by_alias=True, mode="json")
            if snapshot.presentation is not None
            else None
        )
    return message


class WebSocketProgressManager:
    """Track WebSocket connections and session subscriptions."""

    def __init__(self) -> None:
        self._connections: Dict[str, WebSocket] = {}
        self._session_subscriptions: Dict[str, Set[str]] = defaultdict(set)
        self._client_sessions: Dict[str, Set[str]] = defaultdict(set)
        self._lock = asyncio.Lock()
        self._pending: Set[asyncio.Task] = set()

    async def connect(self, websocket: WebSocket, client_id: str | None = None) -> str:
        """Accept WebSocket connection and register client."""
        client_key = client_id or str(uuid4())
        await websocket.accept()
        async with self._lock:
            self._connections[client_key] = websocket
        return client_key

    async def disconnect(self, client_id: str) -> None:
        """Remove client connection and subscriptions."""
        websocket: WebSocket | None = None
        async with self._lock:
            websocket = self._connections.pop(client_id, None)
            subscribed = self._client_sessions.pop(client_id, set())
            for session_id in subscribed:
                subscribers = self._session_subscriptions.get(session_id)
                if subscribers:
                    subscribers.discard(client_id)
                    if not subscribers:
                        self._session_subscriptions.pop(session_id, None)
        if websocket:
            try:
                await websocket.close()
            except RuntimeError:
                # Already closed by the peer
                pass

    async def subscribe(self, client_id: str, session_id: str) -> None:
        """Subscribe a client to a deck session."""
        async with self._lock:
            if client_id not in self._connections:
                raise RuntimeError("Client not connected")
            self._session_subscriptions[session_id].add(client_id)
            self._client_sessions[client_id].add(session_id)

    async def unsubscribe(self, client_id: str, session_id: str | None = None) -> None:
        """Unsubscribe a client from one session or from all of them."""
        async with self._lock:
            if client_id not in self._connections:
                return

            if session_id is None:
                session_ids = list(self._client_sessions.get(client_id, set()))
            else:
                session_ids = [session_id]

            for sid in session_ids:
                subscribers = self._session_subscriptions.get(sid)
                if subscribers:
                    subscribers.discard(client_id)
                    if not subscribers:
                        self._session_subscriptions.pop(sid, None)
            if session_id is None:
                self._client_sessions.pop(client_id, None)
            else:
                self._client_sessions.get(client_id, set()).discard(session_id)

    async def send_session_update(self, session_id: str, payload: dict[str, Any]) -> None:
        """Send an update to all subscribers of a session."""
        recipients: list[Tuple[str, WebSocket]] = []
        async with self._lock:
            client_ids = list(self._session_subscriptions.get(session_id, set()))
            for client_id in client_ids:
                websocket = self._connections.get(client_id)
                if websocket:
                    recipients.append((client_id, websocket))

        for client_id, websocket in recipients:
            try:
                await websocket.send_json(payload)
            except Exception as exc:
                logger.info("Dropping client %s after failed send: %s", client_id, exc)
                await self.disconnect(client_id)

    def store_listener(self, session_id: str) -> Callable[[str, StoreSnapshot], None]:
        """Build a store listener that forwards snapshots to the session's subscribers.

        Store listeners run synchronously inside the write; delivery is
        scheduled on the running loop so the writer never waits on sockets.
        """

        def _forward(event: str, snapshot: StoreSnapshot) -> None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.debug("No running loop; %s for session %s not forwarded", event, session_id)
                return
            task = loop.create_task(
                self.send_session_update(session_id, snapshot_message(session_id, event, snapshot))
            )
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        return _forward

    def subscriber_count(self, session_id: str) -> int:
        return len(self._session_subscriptions.get(session_id, set()))

    async def reset(self) -> None:
        """Clear all connections and subscriptions (primarily for tests)."""
        async with self._lock:
            connections = list(self._connections.items())
            self._connections.clear()
            self._session_subscriptions.clear()
            self._client_sessions.clear()

        for client_id, websocket in connections:
            try:
                await websocket.close()
            except Exception as exc:
                logger.debug("Ignoring close failure for %s: %s", client_id, exc)


# Shared manager instance
websocket_manager = WebSocketProgressManager()
