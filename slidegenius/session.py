"""Caller-side state for one user working on one deck at a time."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .content_normalizer import ContentNormalizer, UploadedFile
from .credentials import CredentialGate
from .errors import CredentialError, ExportError
from .exporter import ExportedFile, PresentationExporter
from .models import GenerationParameters, Presentation, RenderedSlide, SourceInput
from .pipeline import PresentationPipeline, ProgressCallback

LOGGER = logging.getLogger(__name__)


@dataclass
class SlideNavigator:
    """Index of the slide currently on screen, clamped to the deck."""

    slide_count: int = 0
    index: int = 0

    def next(self) -> int:
        if self.index < self.slide_count - 1:
            self.index += 1
        return self.index

    def previous(self) -> int:
        if self.index > 0:
            self.index -= 1
        return self.index

    def select(self, index: int) -> int:
        if self.slide_count:
            self.index = max(0, min(index, self.slide_count - 1))
        return self.index


class PresentationSession:
    """Accumulated input, parameters and the latest deck.

    Failed uploads, generations and exports leave the previous state as it
    was; only a successful generation replaces the presentation and clears
    the attached document.
    """

    def __init__(
        self,
        pipeline: PresentationPipeline,
        *,
        normalizer: Optional[ContentNormalizer] = None,
        exporter: Optional[PresentationExporter] = None,
        parameters: Optional[GenerationParameters] = None,
    ) -> None:
        self.pipeline = pipeline
        self.normalizer = normalizer or ContentNormalizer()
        self.exporter = exporter or PresentationExporter()
        self.parameters = parameters or GenerationParameters()
        self.source = SourceInput()
        self.presentation: Optional[Presentation] = None
        self.navigator = SlideNavigator()
        self.has_credential = True

    @property
    def credential_gate(self) -> Optional[CredentialGate]:
        return self.pipeline.credential_gate

    @property
    def current_slide(self) -> Optional[RenderedSlide]:
        if self.presentation is None or not self.presentation.slides:
            return None
        return self.presentation.slides[self.navigator.index]

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def set_text(self, text: str) -> None:
        self.source = SourceInput(text=text, attachment=self.source.attachment)

    async def upload(self, upload: UploadedFile) -> SourceInput:
        self.source = await self.normalizer.apply(self.source, upload)
        return self.source

    def remove_attachment(self) -> None:
        self.source = self.source.without_attachment()

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    async def refresh_credential(self) -> bool:
        if self.credential_gate is not None:
            self.has_credential = await self.credential_gate.has_selected_api_key()
        return self.has_credential

    async def select_credential(self) -> None:
        if self.credential_gate is None:
            return
        await self.credential_gate.open_selector()
        self.has_credential = True

    async def generate(self, progress: Optional[ProgressCallback] = None) -> Presentation:
        try:
            presentation = await self.pipeline.generate(
                self.source, self.parameters, progress=progress
            )
        except CredentialError:
            self.has_credential = False
            raise
        self.presentation = presentation
        self.navigator = SlideNavigator(slide_count=len(presentation.slides))
        self.source = self.source.without_attachment()
        return presentation

    def reset(self) -> None:
        self.presentation = None
        self.navigator = SlideNavigator()

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def download_current_slide(self) -> ExportedFile:
        presentation = self._require_presentation()
        slide = self.current_slide
        if slide is None:
            raise ExportError("the presentation has no slides to download")
        return self.exporter.download_slide(presentation, slide)

    def export_pdf(self) -> ExportedFile:
        return self.exporter.export_pdf(self._require_presentation())

    def export_pptx(self) -> ExportedFile:
        return self.exporter.export_pptx(self._require_presentation())

    def _require_presentation(self) -> Presentation:
        if self.presentation is None:
            raise LookupError("no presentation has been generated yet")
        return self.presentation
