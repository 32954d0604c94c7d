import asyncio

import pytest

from services.presentation_store import PRESENTATION_UPDATED, STATUS_UPDATED, PresentationStore
from services.websocket_progress import WebSocketProgressManager, snapshot_message
from shared.enums import GenerationStage, SlideLayout
from shared.models import Presentation, Slide


class StubWebSocket:
    def __init__(self) -> None:
        self.accepted = False
        self.closed = False
        self.sent_messages = []

    async def accept(self) -> None:
        self.accepted = True

    async def close(self) -> None:
        self.closed = True

    async def send_json(self, message: dict) -> None:
        self.sent_messages.append(message)


class BrokenWebSocket(StubWebSocket):
    async def send_json(self, message: dict) -> None:
        raise ConnectionResetError("peer went away")


@pytest.mark.asyncio
async def test_websocket_manager_handles_unknown_sessions() -> None:
    manager = WebSocketProgressManager()
    websocket = StubWebSocket()

    client_id = await manager.connect(websocket, "client-test")
    assert websocket.accepted is True

    await manager.subscribe(client_id, "session-existing")

    await manager.send_session_update("session-missing", {"sessionId": "session-missing"})
    assert websocket.sent_messages == []

    await manager.unsubscribe(client_id, "session-missing")
    await manager.send_session_update("session-existing", {"sessionId": "session-existing"})
    assert websocket.sent_messages == [{"sessionId": "session-existing"}]

    await manager.disconnect(client_id)
    assert websocket.closed is True
    assert manager.subscriber_count("session-existing") == 0


@pytest.mark.asyncio
async def test_websocket_manager_unsubscribe_from_all_sessions() -> None:
    manager = WebSocketProgressManager()
    websocket = StubWebSocket()
    client_id = await manager.connect(websocket, None)
    await manager.subscribe(client_id, "session-456")

    await manager.send_session_update("session-456", {"progress": 25})
    assert websocket.sent_messages == [{"progress": 25}]

    await manager.unsubscribe(client_id)
    await manager.send_session_update("session-456", {"progress": 50})
    assert len(websocket.sent_messages) == 1


@pytest.mark.asyncio
async def test_subscribe_requires_connection() -> None:
    manager = WebSocketProgressManager()

    with pytest.raises(RuntimeError):
        await manager.subscribe("ghost", "session-1")


@pytest.mark.asyncio
async def test_failed_send_drops_client() -> None:
    manager = WebSocketProgressManager()
    websocket = BrokenWebSocket()
    client_id = await manager.connect(websocket, "flaky")
    await manager.subscribe(client_id, "session-1")

    await manager.send_session_update("session-1", {"progress": 10})

    assert websocket.closed is True
    assert manager.subscriber_count("session-1") == 0


@pytest.mark.asyncio
async def test_store_listener_forwards_snapshots() -> None:
    manager = WebSocketProgressManager()
    websocket = StubWebSocket()
    client_id = await manager.connect(websocket, "viewer")
    await manager.subscribe(client_id, "session-1")

    store = PresentationStore()
    store.subscribe(manager.store_listener("session-1"))
    store.update_status(stage=GenerationStage.ANALYZING_DOC, progress=10)
    store.replace(Presentation(title="Deck", slides=(Slide(id="a", layout=SlideLayout.TITLE, title="Hi"),)))

    # Delivery is scheduled on the loop
    for _ in range(5):
        await asyncio.sleep(0)

    events = [message["event"] for message in websocket.sent_messages]
    assert events == [STATUS_UPDATED, PRESENTATION_UPDATED]
    status_message, deck_message = websocket.sent_messages
    assert status_message["status"]["stage"] == "ANALYZING_DOC"
    assert "presentation" not in status_message
    assert deck_message["version"] == 2
    assert deck_message["presentation"]["slides"][0]["imageStatus"] == "not_requested"


def test_store_listener_without_loop_is_silent() -> None:
    manager = WebSocketProgressManager()
    store = PresentationStore()
    store.subscribe(manager.store_listener("session-1"))

    store.update_status(progress=5)

    assert store.status.progress == 5


def test_snapshot_message_uses_camel_case() -> None:
    store = PresentationStore()
    snapshot = store.replace(None)

    message = snapshot_message("abc", PRESENTATION_UPDATED, snapshot)

    assert message["sessionId"] == "abc"
    assert message["presentation"] is None
    assert "currentSlideIndex" in message["status"]
