"""Generators backed by a remote HTTP service."""

from __future__ import annotations

import aiohttp

from shared.errors import ImageGenerationError, StructureGenerationError
from shared.http_client import AsyncHTTPClient
from shared.models import ImageGenerationRequest, StructureRequest, StructureResponse
from shared.utils import config as service_config, to_data_uri

from .base import ImageGenerator, StructureGenerator, parse_structure_payload

IMAGE_RESPONSE_KEYS = ("imageUrl", "image_url", "image", "data")


class RemoteStructureGenerator(StructureGenerator):
    """POST the request to ``REMOTE_STRUCTURE_URL`` and validate the JSON reply."""

    def __init__(self, url: str | None = None, timeout: int | None = None) -> None:
        self.url = url or service_config.get("remote_structure_url")
        self.timeout = timeout or int(service_config.get("remote_timeout", 120))
        if not self.url:
            raise ValueError("Remote structure generator URL not configured. Set REMOTE_STRUCTURE_URL.")

    async def generate(self, request: StructureRequest) -> StructureResponse:
        try:
            async with AsyncHTTPClient(timeout=self.timeout) as client:
                payload = await client.post(self.url, data=request.model_dump(by_alias=True, mode="json"))
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise StructureGenerationError(f"Remote structure request failed: {exc}") from exc
        return parse_structure_payload(payload)


class RemoteImageGenerator(ImageGenerator):
    """POST the request to ``REMOTE_IMAGE_URL``; the reply carries the image."""

    def __init__(self, url: str | None = None, timeout: int | None = None) -> None:
        self.url = url or service_config.get("remote_image_url")
        self.timeout = timeout or int(service_config.get("remote_timeout", 120))
        if not self.url:
            raise ValueError("Remote image generator URL not configured. Set REMOTE_IMAGE_URL.")

    async def generate(self, request: ImageGenerationRequest) -> str:
        try:
            async with AsyncHTTPClient(timeout=self.timeout) as client:
                payload = await client.post(self.url, data=request.model_dump(by_alias=True, mode="json"))
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise ImageGenerationError(f"Remote image request failed: {exc}") from exc

        for key in IMAGE_RESPONSE_KEYS:
            value = payload.get(key) if isinstance(payload, dict) else None
            if value:
                return to_data_uri(str(value))
        return ""
