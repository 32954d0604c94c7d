import asyncio
import copy
import os
import sys
from pathlib import Path
from typing import Generator

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from services.deck_studio.app import sessions
from services.websocket_progress import websocket_manager
from shared.utils import config as service_config

DEFAULT_PIPELINE_CONFIG = {
    "generation": {
        "images": {"enabled": True, "aspect_ratio": "16:9"},
        "hydrate_on_publish": False,
    },
    "sessions": {"max_sessions": 100},
}


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch) -> Generator:
    """Run every test against offline drivers and clean session state."""
    for key in list(os.environ):
        if key.startswith("PIPELINE_FLAG_"):
            monkeypatch.delenv(key, raising=False)

    original_config = dict(service_config.config)
    original_pipeline = service_config.pipeline_config
    service_config.set("structure_provider", "stub")
    service_config.set("image_provider", "stub")
    service_config.set_pipeline_config(copy.deepcopy(DEFAULT_PIPELINE_CONFIG))

    sessions.reset()
    # Reset WebSocket manager between tests to avoid leakage
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(websocket_manager.reset())
    finally:
        loop.close()

    try:
        yield
    finally:
        sessions.reset()
        service_config.config = original_config
        service_config.set_pipeline_config(original_pipeline)
