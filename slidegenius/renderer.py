"""Render one outline entry into a slide image via the image model."""

from __future__ import annotations

import logging
from typing import Optional

from genai_api.data_classes import ImageGenerationRequest, ImageGenerationResponse

from .config import PipelineSettings
from .errors import SlideRenderError
from .models import SlideOutlineEntry, encode_data_url
from .prompts import build_slide_prompt

LOGGER = logging.getLogger(__name__)


class SlideRenderer:
    """Turn a :class:`SlideOutlineEntry` into a base64 image data URL."""

    def __init__(self, llm_client, settings: Optional[PipelineSettings] = None) -> None:
        self.llm_client = llm_client
        self.settings = settings or PipelineSettings()

    def build_request(self, entry: SlideOutlineEntry) -> ImageGenerationRequest:
        return ImageGenerationRequest(
            prompt=build_slide_prompt(entry),
            model_name=self.settings.image_model,
        )

    async def render(self, entry: SlideOutlineEntry) -> str:
        """Return ``data:<mime>;base64,...`` or raise :class:`SlideRenderError`.

        Service errors propagate unchanged so callers can tell credential
        problems apart from an empty image response.
        """

        response: ImageGenerationResponse = await self.llm_client.generate_image(
            self.build_request(entry)
        )
        if not response.has_image:
            LOGGER.warning("No image returned for slide %r", entry.title)
            raise SlideRenderError("image generation failed")
        return encode_data_url(response.image_bytes, response.mime_type or "image/png")
