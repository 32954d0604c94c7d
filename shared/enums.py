"""
Enums and constants used across the application.
"""

from enum import Enum


class SlideLayout(str, Enum):
    """Semantic slide layouts produced by the structure generator."""

    TITLE = "TITLE"
    CONTENT_LEFT = "CONTENT_LEFT"
    CONTENT_RIGHT = "CONTENT_RIGHT"
    BULLETS = "BULLETS"
    QUOTE = "QUOTE"
    DATA = "DATA"
    PROCESS = "PROCESS"


class ElementType(str, Enum):
    """Kinds of free-form canvas elements."""

    TEXT = "text"
    IMAGE = "image"
    SHAPE = "shape"


class TextAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class DesignTheme(str, Enum):
    """Deck-wide visual themes."""

    MODERN = "modern"
    ELEGANT = "elegant"
    TECH = "tech"
    MINIMAL = "minimal"


class VisualStyle(str, Enum):
    """Art direction presets sent to the image generator."""

    PHOTOREALISTIC = "photorealistic"
    MINIMAL_VECTOR = "minimal-vector"
    HAND_DRAWN = "hand-drawn"
    ISOMETRIC_3D = "isometric-3d"
    ABSTRACT_GEOMETRIC = "abstract-geometric"


class GenerationStage(str, Enum):
    """Stages of the deck generation state machine."""

    IDLE = "IDLE"
    ANALYZING_DOC = "ANALYZING_DOC"
    GENERATING_STRUCTURE = "GENERATING_STRUCTURE"
    GENERATING_IMAGES = "GENERATING_IMAGES"
    COMPLETE = "COMPLETE"
    ERROR = "ERROR"


class ImageStatus(str, Enum):
    """Lifecycle of a slide illustration."""

    NOT_REQUESTED = "not_requested"
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


class InteractionMode(str, Enum):
    """Pointer gesture currently driven by the canvas engine."""

    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"


class HandleType(str, Enum):
    """Hit target a gesture started on."""

    BODY = "body"
    RESIZE = "resize"


# Stages from which a new generation cycle may start
RESTARTABLE_STAGES = frozenset(
    {GenerationStage.IDLE, GenerationStage.COMPLETE, GenerationStage.ERROR}
)

AUTO_HEIGHT = "auto"
MIN_ELEMENT_SIZE = 5.0
TEXT_Z_INDEX = 10
IMAGE_Z_INDEX = 1
