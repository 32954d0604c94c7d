"""Base classes for structure and image generator drivers."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from pydantic import ValidationError

from shared.errors import StructureGenerationError
from shared.models import ImageGenerationRequest, StructureRequest, StructureResponse


class StructureGenerator(ABC):
    """Turns a source document and notes into a deck outline."""

    @abstractmethod
    async def generate(self, request: StructureRequest) -> StructureResponse:
        """Return the validated outline for ``request``."""


class ImageGenerator(ABC):
    """Produces one illustration per request."""

    @abstractmethod
    async def generate(self, request: ImageGenerationRequest) -> str:
        """Return an image reference (URL or data URI); empty means failure."""


def parse_structure_payload(payload: str | dict[str, Any] | None) -> StructureResponse:
    """Validate a raw generator reply against the outline schema."""
    if not payload:
        raise StructureGenerationError("No response from structure generator")
    try:
        data = json.loads(payload) if isinstance(payload, str) else payload
    except json.JSONDecodeError as exc:
        raise StructureGenerationError("Structure generator returned invalid JSON") from exc
    try:
        return StructureResponse.model_validate(data)
    except ValidationError as exc:
        raise StructureGenerationError(
            f"Structure generator returned an invalid outline: {exc.error_count()} validation error(s)"
        ) from exc
