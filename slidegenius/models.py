"""Data models for generation inputs, outlines and rendered decks."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .errors import InputValidationError

MIN_SLIDE_COUNT = 3
MAX_SLIDE_COUNT = 12
DEFAULT_SLIDE_COUNT = 5

PDF_MIME_TYPE = "application/pdf"


class ComplexityLevel(str, Enum):
    GENERAL = "General"
    PROFESSIONAL = "Professional"
    ACADEMIC = "Academic"
    EXECUTIVE = "Executive"


class VisualStyle(str, Enum):
    MODERN_MINIMAL = "modern-minimal"
    BUSINESS_TECH = "business-tech"
    CREATIVE_ART = "creative-art"
    DARK_MODE = "dark-mode"
    NATURAL_FRESH = "natural-fresh"


class Language(str, Enum):
    SIMPLIFIED_CHINESE = "Simplified Chinese"
    ENGLISH = "English"
    SPANISH = "Spanish"
    FRENCH = "French"
    GERMAN = "German"
    JAPANESE = "Japanese"


@dataclass(frozen=True, slots=True)
class GenerationParameters:
    """User-selected knobs for one generation run."""

    level: ComplexityLevel = ComplexityLevel.PROFESSIONAL
    style: VisualStyle = VisualStyle.MODERN_MINIMAL
    language: Language = Language.SIMPLIFIED_CHINESE
    slide_count: int = DEFAULT_SLIDE_COUNT

    def __post_init__(self) -> None:
        if isinstance(self.slide_count, bool) or not isinstance(self.slide_count, int):
            raise InputValidationError("slide_count must be an integer")
        if not MIN_SLIDE_COUNT <= self.slide_count <= MAX_SLIDE_COUNT:
            raise InputValidationError(
                f"slide_count must be between {MIN_SLIDE_COUNT} and {MAX_SLIDE_COUNT}, "
                f"got {self.slide_count}"
            )


@dataclass(frozen=True, slots=True)
class AttachedDocument:
    """A binary document passed through to the outline model untouched."""

    name: str
    mime_type: str
    data: str  # base64, no data-URL prefix

    @classmethod
    def from_bytes(cls, name: str, mime_type: str, payload: bytes) -> "AttachedDocument":
        return cls(
            name=name,
            mime_type=mime_type,
            data=base64.b64encode(payload).decode("ascii"),
        )

    @property
    def raw_bytes(self) -> bytes:
        return base64.b64decode(self.data)


@dataclass(frozen=True, slots=True)
class SourceInput:
    """Accumulated source material: free text and an optional attachment."""

    text: str = ""
    attachment: Optional[AttachedDocument] = None

    @property
    def is_empty(self) -> bool:
        return not self.text.strip() and self.attachment is None

    def with_text_fragment(self, source_name: str, fragment: str) -> "SourceInput":
        block = f"[content from {source_name}]:\n{fragment}"
        text = f"{self.text}\n\n{block}" if self.text else block
        return replace(self, text=text)

    def with_attachment(self, attachment: AttachedDocument) -> "SourceInput":
        return replace(self, attachment=attachment)

    def without_attachment(self) -> "SourceInput":
        return replace(self, attachment=None)


@dataclass(frozen=True, slots=True)
class SlideOutlineEntry:
    """One slide's text and rendering directive, prior to rendering."""

    title: str
    content: str
    visual_description: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SlideOutlineEntry":
        visual = data.get("visualDescription")
        if visual is None:
            visual = data.get("visual_description", "")
        return cls(
            title=_as_text(data.get("title")),
            content=_as_text(data.get("content")),
            visual_description=_as_text(visual),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "title": self.title,
            "content": self.content,
            "visualDescription": self.visual_description,
        }


@dataclass(frozen=True, slots=True)
class SourceCitation:
    title: str
    url: str


@dataclass(frozen=True, slots=True)
class RenderedSlide:
    """A rendered slide image plus the text it was rendered from."""

    slide_id: str
    image_data_url: str
    title: str
    speaker_notes: str

    @property
    def mime_type(self) -> str:
        return decode_data_url(self.image_data_url)[0]

    @property
    def image_bytes(self) -> bytes:
        return decode_data_url(self.image_data_url)[1]


@dataclass(frozen=True, slots=True)
class Presentation:
    """A fully rendered deck. Only ever built from a complete render batch."""

    presentation_id: str
    topic: str
    created_at: datetime
    slides: Tuple[RenderedSlide, ...]
    level: ComplexityLevel
    style: VisualStyle
    sources: Tuple[SourceCitation, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Data URL helpers
# ---------------------------------------------------------------------------

def encode_data_url(payload: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(payload).decode('ascii')}"


def decode_data_url(data_url: str) -> Tuple[str, bytes]:
    """Split a base64 data URL into ``(mime_type, payload)``."""

    if not data_url.startswith("data:") or "," not in data_url:
        raise ValueError("not a data URL")
    header, encoded = data_url[5:].split(",", 1)
    mime_type, _, encoding = header.partition(";")
    if encoding != "base64":
        raise ValueError("only base64 data URLs are supported")
    try:
        payload = base64.b64decode(encoded, validate=True)
    except binascii.Error as exc:
        raise ValueError("invalid base64 payload in data URL") from exc
    return mime_type or "application/octet-stream", payload


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
