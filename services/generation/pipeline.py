"""Deck generation pipeline: outline first, then one illustration per slide."""

from __future__ import annotations

import asyncio
import math
from uuid import uuid4

from services.generation.art_direction import build_image_request
from services.generation.documents import encode_document
from services.generation.drivers import (
    IMAGE_GENERATORS,
    STRUCTURE_GENERATORS,
    ImageGenerator,
    StructureGenerator,
    StubImageGenerator,
    StubStructureGenerator,
)
from services.generation.image_queue import ImageJob, ImageJobQueue
from services.layout.hydrator import hydrate_presentation, refresh_image_elements
from services.presentation_store import PresentationStore
from shared.enums import RESTARTABLE_STAGES, GenerationStage, ImageStatus
from shared.errors import (
    GenerationInProgressError,
    ImageGenerationError,
    InputValidationError,
    SlideNotFoundError,
)
from shared.models import (
    Presentation,
    PresentationStyle,
    Slide,
    SlideDescriptor,
    StructureRequest,
    StructureResponse,
)
from shared.utils import config as service_config, setup_logging

STRUCTURE_START_PROGRESS = 10
STRUCTURE_REQUEST_PROGRESS = 30
IMAGES_START_PROGRESS = 40
IMAGES_PROGRESS_SPAN = 60


def image_progress(completed: int, total_jobs: int) -> int:
    """Overall progress after ``completed`` of ``total_jobs`` image jobs."""
    if total_jobs <= 0:
        return IMAGES_START_PROGRESS + IMAGES_PROGRESS_SPAN
    return IMAGES_START_PROGRESS + math.floor(completed / total_jobs * IMAGES_PROGRESS_SPAN)


def assign_slide_ids(descriptors: list[SlideDescriptor]) -> list[str]:
    """Keep generator ids that are present and unique, mint fresh ones otherwise."""
    seen: set[str] = set()
    ids: list[str] = []
    for descriptor in descriptors:
        candidate = descriptor.id.strip()
        while not candidate or candidate in seen:
            candidate = f"slide-{uuid4().hex[:8]}"
        seen.add(candidate)
        ids.append(candidate)
    return ids


def build_presentation(structure: StructureResponse, style: PresentationStyle | None = None) -> Presentation:
    """Initial deck from a validated outline; no images yet."""
    base_style = style or PresentationStyle()
    slides = []
    for slide_id, descriptor in zip(assign_slide_ids(structure.slides), structure.slides):
        prompt = (descriptor.visual_prompt or "").strip() or None
        slides.append(
            Slide(
                id=slide_id,
                layout=descriptor.layout,
                title=descriptor.title,
                subtitle=descriptor.subtitle,
                content=tuple(descriptor.content),
                visual_prompt=prompt,
                image_status=ImageStatus.PENDING if prompt else ImageStatus.NOT_REQUESTED,
                speaker_notes=descriptor.speaker_notes,
            )
        )
    return Presentation(
        title=structure.title,
        slides=tuple(slides),
        style=base_style.model_copy(update={"theme": structure.theme}),
    )


class GenerationPipeline:
    """Drives one session's deck through the generation stages.

    All deck writes go through the session's :class:`PresentationStore`;
    image results are applied to the latest stored value, so edits made while
    images are still rendering are kept.
    """

    def __init__(
        self,
        store: PresentationStore,
        structure_generator: StructureGenerator | None = None,
        image_generator: ImageGenerator | None = None,
    ) -> None:
        self.logger = setup_logging("generation-pipeline")
        self.store = store
        self.structure_generator = structure_generator or self._load_structure_generator(
            service_config.get("structure_provider", "stub")
        )
        self.image_generator = image_generator or self._load_image_generator(
            service_config.get("image_provider", "stub")
        )
        # Single in-flight image request across the main loop and ad-hoc regeneration
        self._image_lock = asyncio.Lock()
        self._task: asyncio.Task | None = None

    def _load_structure_generator(self, provider_name: str) -> StructureGenerator:
        provider_cls = STRUCTURE_GENERATORS.get(provider_name.lower())
        if provider_cls is None:
            self.logger.warning("Unknown structure provider '%s', falling back to stub", provider_name)
            provider_cls = StubStructureGenerator
        return provider_cls()

    def _load_image_generator(self, provider_name: str) -> ImageGenerator:
        provider_cls = IMAGE_GENERATORS.get(provider_name.lower())
        if provider_cls is None:
            self.logger.warning("Unknown image provider '%s', falling back to stub", provider_name)
            provider_cls = StubImageGenerator
        return provider_cls()

    @property
    def is_running(self) -> bool:
        return self.store.status.stage not in RESTARTABLE_STAGES

    def validate_request(self, document: bytes | None, notes: str | None) -> None:
        """Reject a start without any source material or while a cycle runs."""
        if not document and not (notes or "").strip():
            raise InputValidationError("Please upload a document or enter some notes to get started.")
        if self.is_running:
            raise GenerationInProgressError(
                f"A generation cycle is already running ({self.store.status.stage.value})"
            )

    async def generate(
        self,
        document: bytes | None = None,
        notes: str = "",
        media_type: str | None = None,
        filename: str | None = None,
        style: PresentationStyle | None = None,
    ) -> Presentation | None:
        """Run a full cycle; returns the final deck, or None when the outline failed."""
        self.validate_request(document, notes)
        return await self.run(document, notes, media_type, filename, style)

    def start(
        self,
        document: bytes | None = None,
        notes: str = "",
        media_type: str | None = None,
        filename: str | None = None,
        style: PresentationStyle | None = None,
    ) -> asyncio.Task:
        """Validate and schedule a cycle on the running loop.

        The stage leaves IDLE before this returns, so a second start issued
        right after is rejected.
        """
        self.validate_request(document, notes)
        self._enter_analyzing()
        self._task = asyncio.get_running_loop().create_task(
            self.run(document, notes, media_type, filename, style)
        )
        return self._task

    def cancel(self) -> None:
        """Cancel a cycle started with :meth:`start`, if still running."""
        task = self._task
        if task is not None and not task.done() and not task.get_loop().is_closed():
            task.cancel()

    async def run(
        self,
        document: bytes | None,
        notes: str,
        media_type: str | None = None,
        filename: str | None = None,
        style: PresentationStyle | None = None,
    ) -> Presentation | None:
        """Execute the stages for an already validated request."""
        try:
            # start() has already published this stage
            if self.store.status.stage != GenerationStage.ANALYZING_DOC:
                self._enter_analyzing()
            payload = encode_document(document, media_type, filename)

            self.store.update_status(
                stage=GenerationStage.GENERATING_STRUCTURE,
                message="Planning narrative flow & visuals...",
                progress=STRUCTURE_REQUEST_PROGRESS,
            )
            structure = await self.structure_generator.generate(
                StructureRequest(document=payload, notes=notes or "")
            )
            presentation = build_presentation(structure, style or self._current_style())
        except Exception as exc:
            self.logger.error("Deck structure generation failed: %s", exc)
            self.store.update_status(stage=GenerationStage.ERROR, message=f"Error: {exc}", progress=0)
            return None

        if service_config.get_pipeline_value("generation.hydrate_on_publish", False):
            presentation = hydrate_presentation(presentation)
        self.store.replace(presentation)
        self.logger.info("Published '%s' with %d slides", presentation.title, len(presentation.slides))

        try:
            await self._generate_images()
        except Exception as exc:
            self.logger.error("Image phase aborted: %s", exc)
            self.store.update_status(stage=GenerationStage.ERROR, message=f"Error: {exc}", progress=0)
            return self.store.presentation

        self.store.update_status(
            stage=GenerationStage.COMPLETE,
            message="Visuals Ready!",
            progress=100,
            current_slide_index=None,
            total_slides=None,
        )
        return self.store.presentation

    async def regenerate_slide_image(self, slide_id: str) -> bool:
        """Re-render one slide's illustration; other slides are untouched.

        The slide is marked pending first. On failure the pending sentinel
        stays in place and the slide is flagged as failed.
        """
        slide = self.store.require_presentation().get_slide(slide_id)
        if slide is None:
            raise SlideNotFoundError(slide_id)
        if not (slide.visual_prompt or "").strip():
            raise InputValidationError(f"Slide '{slide_id}' has no visual prompt")

        self.store.replace_slide(
            slide_id,
            lambda current: refresh_image_elements(
                current.model_copy(update={"image_url": "", "image_status": ImageStatus.PENDING})
            ),
        )
        return await self._render_slide_image(slide_id)

    async def _generate_images(self) -> None:
        presentation = self.store.require_presentation()
        total_slides = len(presentation.slides)
        queue = ImageJobQueue()
        for position, slide in enumerate(presentation.slides, start=1):
            if slide.visual_prompt:
                queue.enqueue(ImageJob(slide_id=slide.id, position=position, prompt=slide.visual_prompt))
        total_jobs = queue.get_length()

        self.store.update_status(
            stage=GenerationStage.GENERATING_IMAGES,
            message="Visualizing slide 1...",
            progress=IMAGES_START_PROGRESS,
            current_slide_index=0,
            total_slides=total_slides,
        )
        if not service_config.get_pipeline_value("generation.images.enabled", True):
            self.logger.info("Image generation disabled; skipping %d jobs", total_jobs)
            return

        completed = 0

        async def _handle(job: ImageJob) -> None:
            nonlocal completed
            self.store.update_status(
                message=f"Visualizing slide {job.position} of {total_slides}...",
                current_slide_index=job.position,
            )
            try:
                await self._render_slide_image(job.slide_id, fallback_prompt=job.prompt)
            except SlideNotFoundError:
                self.logger.warning("Slide %s disappeared before its image was generated", job.slide_id)
            completed += 1
            self.store.update_status(progress=image_progress(completed, total_jobs))

        await queue.drain(_handle)

    async def _render_slide_image(self, slide_id: str, fallback_prompt: str | None = None) -> bool:
        async with self._image_lock:
            presentation = self.store.require_presentation()
            slide = presentation.get_slide(slide_id)
            if slide is None:
                raise SlideNotFoundError(slide_id)
            prompt = slide.visual_prompt or fallback_prompt or ""
            request = build_image_request(
                prompt,
                presentation.style.visual_style,
                service_config.get_pipeline_value("generation.images.aspect_ratio", "16:9"),
            )
            try:
                image_ref = await self.image_generator.generate(request)
                if not image_ref:
                    raise ImageGenerationError("Image generator returned an empty payload")
            except Exception as exc:
                self.logger.warning("Failed to generate image for slide %s: %s", slide_id, exc)
                self.store.replace_slide(
                    slide_id,
                    lambda current: current.model_copy(update={"image_status": ImageStatus.FAILED}),
                )
                return False

            self.store.replace_slide(
                slide_id,
                lambda current: refresh_image_elements(
                    current.model_copy(update={"image_url": image_ref, "image_status": ImageStatus.READY})
                ),
            )
            return True

    def _enter_analyzing(self) -> None:
        self.store.set_status(
            self.store.status.model_copy(
                update={
                    "stage": GenerationStage.ANALYZING_DOC,
                    "message": "Analyzing document structure & intent...",
                    "progress": STRUCTURE_START_PROGRESS,
                    "current_slide_index": None,
                    "total_slides": None,
                }
            )
        )

    def _current_style(self) -> PresentationStyle:
        presentation = self.store.presentation
        if presentation is not None:
            return presentation.style
        return PresentationStyle(
            visual_style=service_config.get("default_visual_style", "minimal-vector")
        )
