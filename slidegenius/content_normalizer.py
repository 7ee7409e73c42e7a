"""Turn uploaded files into text fragments or pass-through attachments."""

from __future__ import annotations

import asyncio
import io
import logging
from dataclasses import dataclass
from typing import Optional

import mammoth

from .errors import ExtractionError, UnsupportedFileTypeError
from .models import PDF_MIME_TYPE, AttachedDocument, SourceInput

LOGGER = logging.getLogger(__name__)

TEXT_MIME_TYPE = "text/plain"
DOCX_MIME_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)


@dataclass(frozen=True)
class UploadedFile:
    """Raw upload as received from the presentation layer."""

    name: str
    mime_type: str
    payload: bytes


@dataclass(frozen=True)
class NormalizedContent:
    """Exactly one of ``text`` or ``attachment`` is set."""

    source_name: str
    text: Optional[str] = None
    attachment: Optional[AttachedDocument] = None


class ContentNormalizer:
    """Dispatch uploads by MIME type.

    PDFs are carried through as base64 attachments for the outline model to
    read directly. Word documents and plain text become text fragments that
    are appended to the accumulated input under a provenance header.
    """

    async def normalize(self, upload: UploadedFile) -> NormalizedContent:
        if upload.mime_type == PDF_MIME_TYPE:
            return NormalizedContent(
                source_name=upload.name,
                attachment=AttachedDocument.from_bytes(
                    upload.name, upload.mime_type, upload.payload
                ),
            )
        if _is_docx(upload):
            text = await asyncio.to_thread(_extract_docx_text, upload.payload)
            return NormalizedContent(source_name=upload.name, text=text)
        if upload.mime_type == TEXT_MIME_TYPE:
            text = upload.payload.decode("utf-8-sig", errors="replace")
            return NormalizedContent(source_name=upload.name, text=text)
        raise UnsupportedFileTypeError(upload.name, upload.mime_type)

    async def apply(self, source: SourceInput, upload: UploadedFile) -> SourceInput:
        """Return ``source`` with ``upload`` folded in; ``source`` is never modified."""

        content = await self.normalize(upload)
        if content.attachment is not None:
            LOGGER.info("Attached %s for direct model consumption", upload.name)
            return source.with_attachment(content.attachment)
        LOGGER.info("Appended %d characters from %s", len(content.text or ""), upload.name)
        return source.with_text_fragment(content.source_name, content.text or "")


def _is_docx(upload: UploadedFile) -> bool:
    return upload.name.lower().endswith(".docx") or upload.mime_type == DOCX_MIME_TYPE


def _extract_docx_text(payload: bytes) -> str:
    try:
        result = mammoth.extract_raw_text(io.BytesIO(payload))
    except Exception as exc:
        LOGGER.warning("Word document extraction failed: %s", exc)
        raise ExtractionError("unable to extract document content") from exc
    return result.value
