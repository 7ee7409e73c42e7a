"""Outline synthesis: source material in, ordered slide outline out."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from genai_api.data_classes import (
    Citation,
    InlineDocument,
    TextGenerationRequest,
    TextGenerationResponse,
)

from .config import ARTICLE_LENGTH_THRESHOLD, PipelineSettings
from .json_extraction import JSONArrayNotFoundError, extract_json_array
from .models import (
    GenerationParameters,
    SlideOutlineEntry,
    SourceCitation,
    SourceInput,
)
from .prompts import build_outline_prompt

LOGGER = logging.getLogger(__name__)

FALLBACK_ENTRY = SlideOutlineEntry(
    title="Generation failed",
    content="Could not parse the outline structure, please retry.",
    visual_description="Generic professional background",
)


class OutlineParseError(ValueError):
    """Model output did not contain a usable outline array."""


@dataclass(frozen=True)
class OutlineResult:
    entries: Tuple[SlideOutlineEntry, ...]
    sources: Tuple[SourceCitation, ...] = field(default_factory=tuple)
    article_mode: bool = False
    parse_failed: bool = False


def is_article_mode(source: SourceInput, threshold: int = ARTICLE_LENGTH_THRESHOLD) -> bool:
    """Article analysis when a document is attached or the text is long.

    Short text is treated as a topic to research with search grounding.
    """

    return source.attachment is not None or len(source.text) > threshold


class OutlineSynthesizer:
    """Request a slide outline from the text model and parse it."""

    def __init__(self, llm_client, settings: Optional[PipelineSettings] = None) -> None:
        self.llm_client = llm_client
        self.settings = settings or PipelineSettings()

    async def synthesize(
        self, source: SourceInput, parameters: GenerationParameters
    ) -> OutlineResult:
        if self.llm_client is None:
            raise RuntimeError("LLM client is required to generate an outline")

        article_mode = is_article_mode(source, self.settings.article_threshold)
        request = self.build_request(source, parameters, article_mode=article_mode)
        LOGGER.info(
            "Requesting %d-slide outline (%s mode)",
            parameters.slide_count,
            "article" if article_mode else "topic",
        )
        response: TextGenerationResponse = await self.llm_client.generate_content(request)

        sources: Tuple[SourceCitation, ...] = ()
        if response.has_citations:
            sources = dedupe_citations(response.citations)
            LOGGER.info("Outline grounded by %d unique sources", len(sources))
        try:
            entries = parse_outline(response.text)
        except OutlineParseError as exc:
            LOGGER.warning("Outline parse failed, using fallback entry: %s", exc)
            return OutlineResult(
                entries=(FALLBACK_ENTRY,),
                sources=sources,
                article_mode=article_mode,
                parse_failed=True,
            )
        return OutlineResult(entries=entries, sources=sources, article_mode=article_mode)

    def build_request(
        self,
        source: SourceInput,
        parameters: GenerationParameters,
        *,
        article_mode: bool,
    ) -> TextGenerationRequest:
        prompt = build_outline_prompt(
            parameters,
            text=source.text,
            article_mode=article_mode,
            max_article_chars=self.settings.max_article_chars,
        )
        attachment = None
        if source.attachment is not None:
            attachment = InlineDocument(
                mime_type=source.attachment.mime_type,
                data=source.attachment.raw_bytes,
            )
        return TextGenerationRequest(
            prompt=prompt,
            model_name=self.settings.text_model,
            attachment=attachment,
            enable_search=not article_mode,
        )


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------

def parse_outline(text: str) -> Tuple[SlideOutlineEntry, ...]:
    """Parse outline entries by shape; the slide count is not re-checked."""

    try:
        payload = extract_json_array(text or "")
    except JSONArrayNotFoundError as exc:
        raise OutlineParseError(str(exc)) from exc
    if not payload:
        raise OutlineParseError("outline array is empty")
    entries: List[SlideOutlineEntry] = []
    for index, raw in enumerate(payload):
        if not isinstance(raw, dict):
            raise OutlineParseError(f"outline item {index} is not an object")
        entries.append(SlideOutlineEntry.from_dict(raw))
    return tuple(entries)


def dedupe_citations(citations: Iterable[Citation]) -> Tuple[SourceCitation, ...]:
    """Keep citations with both URL and title, one per URL.

    Position follows the first occurrence of a URL; the title comes from
    its last occurrence.
    """

    by_url: Dict[str, SourceCitation] = {}
    for citation in citations:
        if not citation.url or not citation.title:
            continue
        by_url[citation.url] = SourceCitation(title=citation.title, url=citation.url)
    return tuple(by_url.values())
