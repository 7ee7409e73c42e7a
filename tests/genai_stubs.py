"""Helper stubs for simulating the text and image services in tests."""

from __future__ import annotations

import asyncio
import io
import json
import re
import zlib
from typing import Any, Dict, Iterable, List, Optional, Sequence

from PIL import Image

from genai_api.data_classes import (
    Citation,
    ImageGenerationResponse,
    TextGenerationResponse,
)

_HEADLINE_PATTERN = re.compile(r"^HEADLINE: (.*)$", re.MULTILINE)


def make_png(seed: str, size: tuple[int, int] = (32, 18)) -> bytes:
    """Return a small solid-colour PNG whose colour is derived from ``seed``."""

    value = zlib.crc32(seed.encode("utf-8"))
    colour = (value & 0xFF, (value >> 8) & 0xFF, (value >> 16) & 0xFF)
    buffer = io.BytesIO()
    Image.new("RGB", size, color=colour).save(buffer, format="PNG")
    return buffer.getvalue()


def outline_json(count: int, *, prefix: str = "Slide") -> str:
    entries = [
        {
            "title": f"{prefix} {idx}",
            "content": f"Notes for {prefix.lower()} {idx}",
            "visualDescription": f"Layout {idx}",
        }
        for idx in range(count)
    ]
    return json.dumps(entries, ensure_ascii=False)


def headline_of(prompt: str) -> str:
    match = _HEADLINE_PATTERN.search(prompt)
    return match.group(1) if match else ""


class StubGenAIClient:
    """Async client stub that records every request it receives."""

    model_name = "stub-text"
    image_model_name = "stub-image"

    def __init__(
        self,
        *,
        outline_text: str = "",
        citations: Iterable[Citation] = (),
        text_error: Optional[BaseException] = None,
        text_delay: float = 0.0,
        render_delays: Optional[Dict[str, float]] = None,
        empty_images_for: Sequence[str] = (),
        image_errors: Optional[Dict[str, BaseException]] = None,
    ) -> None:
        self.outline_text = outline_text
        self.citations = list(citations)
        self.text_error = text_error
        self.text_delay = text_delay
        self.render_delays = dict(render_delays or {})
        self.empty_images_for = set(empty_images_for)
        self.image_errors = dict(image_errors or {})
        self.text_requests: List[Any] = []
        self.image_requests: List[Any] = []
        self.completed_renders: List[str] = []
        self.images: Dict[str, bytes] = {}

    async def generate_content(self, request: Any) -> TextGenerationResponse:
        self.text_requests.append(request)
        await asyncio.sleep(self.text_delay)
        if self.text_error is not None:
            raise self.text_error
        return TextGenerationResponse(
            text=self.outline_text,
            citations=list(self.citations),
            model_used="stub-text",
        )

    async def generate_image(self, request: Any) -> ImageGenerationResponse:
        self.image_requests.append(request)
        headline = headline_of(request.prompt)
        await asyncio.sleep(self.render_delays.get(headline, 0.0))
        if headline in self.image_errors:
            raise self.image_errors[headline]
        self.completed_renders.append(headline)
        if headline in self.empty_images_for:
            return ImageGenerationResponse(model_used="stub-image")
        payload = make_png(headline)
        self.images[headline] = payload
        return ImageGenerationResponse(
            image_bytes=payload, mime_type="image/png", model_used="stub-image"
        )


class StubCredentialGate:
    def __init__(self, selected: bool = True) -> None:
        self.selected = selected
        self.checks = 0
        self.selector_opened = 0

    async def has_selected_api_key(self) -> bool:
        self.checks += 1
        return self.selected

    async def open_selector(self) -> None:
        self.selector_opened += 1
        self.selected = True


__all__ = [
    "StubCredentialGate",
    "StubGenAIClient",
    "headline_of",
    "make_png",
    "outline_json",
]
