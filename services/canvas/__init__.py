"""Direct manipulation of free-form slide elements."""

from .coordinates import Viewport, pixels_to_percent
from .engine import CanvasInteractionEngine

__all__ = ["CanvasInteractionEngine", "Viewport", "pixels_to_percent"]
