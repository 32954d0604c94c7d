"""Structure and image generator driver registry."""

from .base import ImageGenerator, StructureGenerator, parse_structure_payload
from .openai import OpenAIImageGenerator, OpenAIStructureGenerator
from .remote import RemoteImageGenerator, RemoteStructureGenerator
from .stub import StubImageGenerator, StubStructureGenerator

STRUCTURE_GENERATORS: dict[str, type[StructureGenerator]] = {
    "stub": StubStructureGenerator,
    "openai": OpenAIStructureGenerator,
    "remote": RemoteStructureGenerator,
}

IMAGE_GENERATORS: dict[str, type[ImageGenerator]] = {
    "stub": StubImageGenerator,
    "openai": OpenAIImageGenerator,
    "remote": RemoteImageGenerator,
}

__all__ = [
    "IMAGE_GENERATORS",
    "STRUCTURE_GENERATORS",
    "ImageGenerator",
    "OpenAIImageGenerator",
    "OpenAIStructureGenerator",
    "RemoteImageGenerator",
    "RemoteStructureGenerator",
    "StructureGenerator",
    "StubImageGenerator",
    "StubStructureGenerator",
    "parse_structure_payload",
]
