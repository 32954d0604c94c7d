"""Screen-pixel to slide-percentage conversion for canvas gestures."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Viewport:
    """The slide container as rendered on screen.

    ``width`` and ``height`` are the on-screen pixel size, i.e. the logical
    container size already multiplied by ``scale``.
    """

    width: float
    height: float
    scale: float = 1.0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("viewport dimensions must be positive")
        if self.scale <= 0:
            raise ValueError("viewport scale must be positive")

    @classmethod
    def from_logical(cls, width: float, height: float, scale: float = 1.0) -> "Viewport":
        """Build a viewport from the unscaled container size."""
        return cls(width=width * scale, height=height * scale, scale=scale)

    @property
    def logical_width(self) -> float:
        return self.width / self.scale

    @property
    def logical_height(self) -> float:
        return self.height / self.scale

    def pixels_to_percent(self, dx: float, dy: float) -> tuple[float, float]:
        """Convert a screen-pixel pointer delta into a slide-percentage delta.

        The delta is un-scaled first and normalised against the logical size,
        never against the rendered size.
        """
        dx_percent = (dx / self.scale) / self.logical_width * 100
        dy_percent = (dy / self.scale) / self.logical_height * 100
        return dx_percent, dy_percent

    def percent_to_pixels(self, dx_percent: float, dy_percent: float) -> tuple[float, float]:
        """Inverse of :meth:`pixels_to_percent`."""
        dx = dx_percent / 100 * self.logical_width * self.scale
        dy = dy_percent / 100 * self.logical_height * self.scale
        return dx, dy


def pixels_to_percent(
    dx: float,
    dy: float,
    width: float,
    height: float,
    scale: float = 1.0,
) -> tuple[float, float]:
    """Functional shortcut for ``Viewport(width, height, scale).pixels_to_percent``."""
    return Viewport(width, height, scale).pixels_to_percent(dx, dy)
