"""Tests for art direction selection and image prompt rendering."""

import pytest

from services.generation.art_direction import (
    BLUEPRINT_DIRECTION,
    DATA_VIZ_DIRECTION,
    STYLE_DIRECTIONS,
    UI_MOCKUP_DIRECTION,
    build_image_request,
    derive_art_direction,
    render_image_prompt,
)
from shared.enums import VisualStyle


@pytest.mark.parametrize(
    ("prompt", "expected"),
    [
        ("Analytics dashboard for sales reps", UI_MOCKUP_DIRECTION),
        ("Login screen of the mobile app", UI_MOCKUP_DIRECTION),
        ("Clean UI for onboarding", UI_MOCKUP_DIRECTION),
        ("Bar chart of monthly revenue", DATA_VIZ_DIRECTION),
        ("Line graph with growth trend", DATA_VIZ_DIRECTION),
        ("Wireframe of the checkout flow", BLUEPRINT_DIRECTION),
    ],
)
def test_keywords_override_visual_style(prompt: str, expected: str) -> None:
    assert derive_art_direction(prompt, VisualStyle.HAND_DRAWN) == expected


def test_ui_keyword_matches_inside_words() -> None:
    # Plain substring match, so "building" triggers the mockup direction
    direction = derive_art_direction("A guide to building the product", VisualStyle.PHOTOREALISTIC)

    assert direction == UI_MOCKUP_DIRECTION


def test_ui_takes_precedence_over_chart() -> None:
    assert derive_art_direction("Dashboard with a pie chart", VisualStyle.MINIMAL_VECTOR) == UI_MOCKUP_DIRECTION


@pytest.mark.parametrize("style", list(VisualStyle))
def test_every_visual_style_has_a_direction(style: VisualStyle) -> None:
    assert derive_art_direction("A mountain at sunrise", style) == STYLE_DIRECTIONS[style]


def test_build_image_request_and_prompt() -> None:
    request = build_image_request("Team photo", VisualStyle.ISOMETRIC_3D, aspect_ratio="1:1")

    assert request.subject == "Team photo"
    assert request.aspect_ratio == "1:1"
    prompt = render_image_prompt(request)
    assert "Subject: Team photo" in prompt
    assert STYLE_DIRECTIONS[VisualStyle.ISOMETRIC_3D] in prompt
    assert "NO TEXT" in prompt
