"""Runtime settings for the generation pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from genai_api.providers.gemini import DEFAULT_IMAGE_MODEL, DEFAULT_TEXT_MODEL

ARTICLE_LENGTH_THRESHOLD = 250
MAX_ARTICLE_CHARS = 20000


@dataclass(frozen=True)
class PipelineSettings:
    """Model identifiers and the article-mode policy knobs."""

    text_model: str = DEFAULT_TEXT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    article_threshold: int = ARTICLE_LENGTH_THRESHOLD
    max_article_chars: int = MAX_ARTICLE_CHARS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PipelineSettings":
        """Build settings from ``SLIDEGENIUS_*`` variables (``.env`` supported)."""

        if environ is None:
            load_dotenv()
            environ = os.environ
        return cls(
            text_model=environ.get("SLIDEGENIUS_TEXT_MODEL") or DEFAULT_TEXT_MODEL,
            image_model=environ.get("SLIDEGENIUS_IMAGE_MODEL") or DEFAULT_IMAGE_MODEL,
            article_threshold=_int_setting(
                environ, "SLIDEGENIUS_ARTICLE_THRESHOLD", ARTICLE_LENGTH_THRESHOLD
            ),
            max_article_chars=_int_setting(
                environ, "SLIDEGENIUS_MAX_ARTICLE_CHARS", MAX_ARTICLE_CHARS
            ),
        )


def _int_setting(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
