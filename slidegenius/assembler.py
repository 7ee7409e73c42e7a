"""Concurrent fan-out of slide renders joined into a Presentation."""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from .models import (
    GenerationParameters,
    Presentation,
    RenderedSlide,
    SlideOutlineEntry,
    SourceCitation,
)
from .renderer import SlideRenderer

LOGGER = logging.getLogger(__name__)

DEFAULT_TOPIC = "Generated Presentation"


def slide_id_for(index: int) -> str:
    return f"slide-{index}"


class DeckAssembler:
    """Render every outline entry at once and build the deck all-or-nothing."""

    def __init__(self, renderer: SlideRenderer) -> None:
        self.renderer = renderer

    async def assemble(
        self,
        outline: Sequence[SlideOutlineEntry],
        parameters: GenerationParameters,
        sources: Sequence[SourceCitation] = (),
    ) -> Presentation:
        slides = await self.render_all(outline)
        topic = (outline[0].title if outline else "") or DEFAULT_TOPIC
        presentation = Presentation(
            presentation_id=uuid.uuid4().hex,
            topic=topic,
            created_at=datetime.now(timezone.utc),
            slides=tuple(slides),
            level=parameters.level,
            style=parameters.style,
            sources=tuple(sources),
        )
        LOGGER.info("Assembled %d slides for %r", len(slides), topic)
        return presentation

    async def render_all(self, outline: Sequence[SlideOutlineEntry]) -> List[RenderedSlide]:
        """Render all entries concurrently; slide ``i`` always matches entry ``i``.

        The first failure cancels renders still in flight and is re-raised.
        When several renders have already failed, the one with the lowest
        outline index wins.
        """

        if not outline:
            return []

        tasks = [
            asyncio.create_task(self._render_one(index, entry), name=slide_id_for(index))
            for index, entry in enumerate(outline)
        ]
        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)

            failures = [
                task.exception()
                for task in tasks
                if task in done and not task.cancelled()
            ]
            failure: Optional[BaseException] = next(
                (error for error in failures if error is not None), None
            )
            if failure is not None:
                LOGGER.warning(
                    "Slide render failed, abandoning %d in-flight renders: %s",
                    len(pending),
                    failure,
                )
                raise failure
        finally:
            # Also reached when the caller cancels this coroutine.
            unfinished = [task for task in tasks if not task.done()]
            for task in unfinished:
                task.cancel()
            if unfinished:
                await asyncio.gather(*unfinished, return_exceptions=True)

        ordered = sorted((task.result() for task in tasks), key=lambda item: item[0])
        return [slide for _, slide in ordered]

    async def _render_one(self, index: int, entry: SlideOutlineEntry):
        data_url = await self.renderer.render(entry)
        return index, RenderedSlide(
            slide_id=slide_id_for(index),
            image_data_url=data_url,
            title=entry.title,
            speaker_notes=entry.content,
        )
