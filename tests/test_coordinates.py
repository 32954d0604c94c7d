"""Tests for screen-pixel to slide-percentage conversion."""

import pytest

from services.canvas import Viewport, pixels_to_percent


@pytest.mark.parametrize("scale", [0.5, 1.0, 2.0])
def test_hundred_pixels_on_thousand_wide_container_is_ten_percent(scale: float) -> None:
    dx_percent, _ = pixels_to_percent(100, 0, width=1000, height=500, scale=scale)
    assert dx_percent == pytest.approx(10.0)


def test_vertical_delta_uses_container_height() -> None:
    _, dy_percent = pixels_to_percent(0, 90, width=1600, height=900, scale=1.0)
    assert dy_percent == pytest.approx(10.0)


def test_from_logical_scales_rendered_size() -> None:
    viewport = Viewport.from_logical(1280, 720, scale=0.5)

    assert viewport.width == 640
    assert viewport.height == 360
    assert viewport.logical_width == pytest.approx(1280)
    # 64 screen pixels at half scale are 128 logical pixels, 10% of 1280
    assert viewport.pixels_to_percent(64, 0)[0] == pytest.approx(10.0)


def test_percent_to_pixels_inverts_conversion() -> None:
    viewport = Viewport(width=1200, height=675, scale=1.5)
    dx, dy = viewport.percent_to_pixels(25.0, 40.0)

    assert viewport.pixels_to_percent(dx, dy) == pytest.approx((25.0, 40.0))


@pytest.mark.parametrize(
    ("width", "height", "scale"),
    [(0, 720, 1.0), (1280, -1, 1.0), (1280, 720, 0.0)],
)
def test_invalid_viewport_rejected(width: float, height: float, scale: float) -> None:
    with pytest.raises(ValueError):
        Viewport(width=width, height=height, scale=scale)
