"""End-to-end generation run: outline synthesis followed by deck assembly."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .assembler import DeckAssembler
from .config import PipelineSettings
from .credentials import CredentialGate
from .errors import (
    CredentialError,
    GenerationError,
    GenerationInProgressError,
    InputValidationError,
    is_credential_failure,
)
from .models import GenerationParameters, Presentation, SourceInput
from .outline import OutlineSynthesizer
from .renderer import SlideRenderer

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[int, str], None]

STEP_OUTLINE = 1
STEP_RENDER = 2

CREDENTIAL_MESSAGE = (
    "Access denied. Select an API key from a Google Cloud project with billing enabled."
)
GENERATION_MESSAGE = "Generation failed. Try shortening the text or changing the topic."


class PresentationPipeline:
    """Run one generation at a time from source material to a Presentation."""

    def __init__(
        self,
        llm_client,
        *,
        settings: Optional[PipelineSettings] = None,
        credential_gate: Optional[CredentialGate] = None,
    ) -> None:
        self.settings = settings or PipelineSettings()
        self.credential_gate = credential_gate
        self.synthesizer = OutlineSynthesizer(llm_client, self.settings)
        self.assembler = DeckAssembler(SlideRenderer(llm_client, self.settings))
        self._in_progress = False

    @property
    def is_generating(self) -> bool:
        return self._in_progress

    async def generate(
        self,
        source: SourceInput,
        parameters: GenerationParameters,
        progress: Optional[ProgressCallback] = None,
    ) -> Presentation:
        # Check and set happen with no await in between, so the flag is
        # race-free on a single event loop.
        if self._in_progress:
            raise GenerationInProgressError("a generation run is already in progress")
        if source.is_empty:
            raise InputValidationError(
                "Enter a topic, paste some text, or upload a file."
            )
        self._in_progress = True
        try:
            return await self._run(source, parameters, progress)
        finally:
            self._in_progress = False

    async def _run(
        self,
        source: SourceInput,
        parameters: GenerationParameters,
        progress: Optional[ProgressCallback],
    ) -> Presentation:
        if not await self._has_credential():
            raise CredentialError(CREDENTIAL_MESSAGE)

        try:
            _report(
                progress,
                STEP_OUTLINE,
                f"Analyzing content and building a {parameters.slide_count}-slide outline...",
            )
            outline = await self.synthesizer.synthesize(source, parameters)

            _report(
                progress,
                STEP_RENDER,
                f"Rendering {len(outline.entries)} slides in parallel...",
            )
            return await self.assembler.assemble(
                outline.entries, parameters, outline.sources
            )
        except (CredentialError, GenerationInProgressError):
            raise
        except Exception as exc:
            if is_credential_failure(exc):
                LOGGER.warning("Generation rejected by the service: %s", exc)
                raise CredentialError(CREDENTIAL_MESSAGE) from exc
            LOGGER.error("Generation failed: %s", exc)
            if isinstance(exc, GenerationError):
                raise
            raise GenerationError(GENERATION_MESSAGE) from exc

    async def _has_credential(self) -> bool:
        if self.credential_gate is None:
            return True
        return await self.credential_gate.has_selected_api_key()


def _report(progress: Optional[ProgressCallback], step: int, message: str) -> None:
    LOGGER.info(message)
    if progress is not None:
        progress(step, message)
