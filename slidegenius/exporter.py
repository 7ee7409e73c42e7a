"""Serialise a :class:`Presentation` into downloadable files."""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List

from PIL import Image
from pptx import Presentation as PptxPresentation
from pptx.util import Inches

from .errors import ExportError
from .models import Presentation, RenderedSlide

LOGGER = logging.getLogger(__name__)

PDF_PAGE_SIZE = (1280, 720)
PPTX_SLIDE_WIDTH = Inches(10)
PPTX_SLIDE_HEIGHT = Inches(5.625)
BLANK_LAYOUT_INDEX = 6

PPTX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
PDF_MIME_TYPE = "application/pdf"

_IMAGE_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
}
_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')


@dataclass(frozen=True)
class ExportedFile:
    file_name: str
    mime_type: str
    data: bytes

    def write_to(self, directory: Path) -> Path:
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.file_name
        path.write_bytes(self.data)
        return path


class PresentationExporter:
    """Export decks as single images, paginated PDFs or PPTX slideshows.

    Every operation is read-only with respect to the Presentation and
    reports writer failures as :class:`ExportError`.
    """

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def download_slide(self, presentation: Presentation, slide: RenderedSlide) -> ExportedFile:
        try:
            mime_type = slide.mime_type
            payload = slide.image_bytes
        except ValueError as exc:
            LOGGER.exception("Slide download failed for %s", slide.slide_id)
            raise ExportError("slide image could not be decoded") from exc
        extension = _IMAGE_EXTENSIONS.get(mime_type, "png")
        file_name = _sanitize_file_name(
            f"slide-{presentation.topic[:10]}-{slide.slide_id}.{extension}"
        )
        return ExportedFile(file_name=file_name, mime_type=mime_type, data=payload)

    def export_pdf(self, presentation: Presentation) -> ExportedFile:
        try:
            data = self._render_pdf(presentation)
        except Exception as exc:
            LOGGER.exception("PDF export failed")
            raise ExportError("PDF export failed, please retry") from exc
        return ExportedFile(
            file_name=f"{sanitize_topic(presentation.topic)}_presentation.pdf",
            mime_type=PDF_MIME_TYPE,
            data=data,
        )

    def export_pptx(self, presentation: Presentation) -> ExportedFile:
        try:
            data = self._render_pptx(presentation)
        except Exception as exc:
            LOGGER.exception("PPTX export failed")
            raise ExportError("PPTX export failed, please retry") from exc
        return ExportedFile(
            file_name=f"{sanitize_topic(presentation.topic)}.pptx",
            mime_type=PPTX_MIME_TYPE,
            data=data,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _render_pdf(self, presentation: Presentation) -> bytes:
        if not presentation.slides:
            raise ValueError("presentation has no slides")
        pages: List[Image.Image] = [
            _load_page_image(slide) for slide in presentation.slides
        ]
        buffer = io.BytesIO()
        try:
            first, rest = pages[0], pages[1:]
            first.save(
                buffer,
                format="PDF",
                save_all=True,
                append_images=rest,
                resolution=72.0,
            )
        finally:
            for page in pages:
                page.close()
        return buffer.getvalue()

    def _render_pptx(self, presentation: Presentation) -> bytes:
        deck = PptxPresentation()
        deck.slide_width = PPTX_SLIDE_WIDTH
        deck.slide_height = PPTX_SLIDE_HEIGHT
        layout = deck.slide_layouts[BLANK_LAYOUT_INDEX]

        for slide in presentation.slides:
            pptx_slide = deck.slides.add_slide(layout)
            pptx_slide.shapes.add_picture(
                io.BytesIO(slide.image_bytes),
                0,
                0,
                width=deck.slide_width,
                height=deck.slide_height,
            )
            if slide.speaker_notes:
                pptx_slide.notes_slide.notes_text_frame.text = slide.speaker_notes

        buffer = io.BytesIO()
        deck.save(buffer)
        return buffer.getvalue()


# ----------------------------------------------------------------------
# Helper functions
# ----------------------------------------------------------------------

def _load_page_image(slide: RenderedSlide) -> Image.Image:
    with Image.open(io.BytesIO(slide.image_bytes)) as image:
        page = image.convert("RGB")
    if page.size != PDF_PAGE_SIZE:
        resized = page.resize(PDF_PAGE_SIZE)
        page.close()
        page = resized
    return page


def sanitize_topic(topic: str) -> str:
    return _sanitize_file_name(re.sub(r"\s+", "_", topic.strip())) or "presentation"


def _sanitize_file_name(name: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("", name)
