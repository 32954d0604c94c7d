"""JSON export of a deck or a subset of its slides."""

from __future__ import annotations

from typing import Any, Iterable

from shared.errors import SlideNotFoundError
from shared.models import Presentation
from shared.utils import slugify


def select_slides(presentation: Presentation, slide_ids: Iterable[str] | None = None) -> Presentation:
    """Presentation restricted to ``slide_ids``, kept in deck order."""
    if slide_ids is None:
        return presentation
    wanted = set(slide_ids)
    known = {slide.id for slide in presentation.slides}
    missing = wanted - known
    if missing:
        raise SlideNotFoundError(sorted(missing)[0])
    return presentation.model_copy(
        update={"slides": tuple(slide for slide in presentation.slides if slide.id in wanted)}
    )


def export_presentation(
    presentation: Presentation, slide_ids: Iterable[str] | None = None
) -> dict[str, Any]:
    return select_slides(presentation, slide_ids).model_dump(by_alias=True, mode="json")


def export_filename(presentation: Presentation) -> str:
    return f"{slugify(presentation.title)}.json"
