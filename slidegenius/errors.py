"""Exception taxonomy for the presentation generation pipeline."""

from __future__ import annotations

import re
from typing import Iterator, Optional

from genai_api.exceptions import LLMAuthenticationError, LLMModelNotFoundError


class SlideGeniusError(Exception):
    """Base class for every pipeline error."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputValidationError(SlideGeniusError, ValueError):
    """No usable input, or generation parameters out of range."""


class UnsupportedFileTypeError(SlideGeniusError):
    """An uploaded file has a MIME type the normalizer does not handle."""

    def __init__(self, name: str, mime_type: str) -> None:
        super().__init__(
            f"unsupported file type for '{name}' ({mime_type or 'unknown'}); "
            "upload a PDF, DOCX or TXT file"
        )
        self.name = name
        self.mime_type = mime_type


class ExtractionError(SlideGeniusError):
    """Document-to-text conversion failed."""


class GenerationError(SlideGeniusError):
    """Outline synthesis or slide rendering failed."""


class SlideRenderError(GenerationError):
    """The image service returned no image for a slide."""


class GenerationInProgressError(SlideGeniusError):
    """A second generation run was submitted while one is active."""


class CredentialError(SlideGeniusError):
    """No billing-enabled credential is selected, or the service rejected it."""


class ExportError(SlideGeniusError):
    """Writing an export artifact failed."""


CREDENTIAL_STATUS_CODES = frozenset({403, 404})

# Last resort when no structured code is available on the error.
_CREDENTIAL_MESSAGE_PATTERN = re.compile(
    r"\b40[34]\b|entity was not found|entity not found", re.IGNORECASE
)


def _iter_chain(error: BaseException) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def is_credential_failure(error: BaseException) -> bool:
    """Return ``True`` when ``error`` looks like an authorization problem.

    Structured signals are checked first across the whole exception chain:
    provider authentication/not-found errors and HTTP status codes 403/404
    exposed as ``status_code`` or ``code``. Only when none is found does the
    check fall back to matching the error message text, which depends on the
    wording of the upstream service and is not a stable contract.
    """

    chain = list(_iter_chain(error))
    for item in chain:
        if isinstance(item, (LLMAuthenticationError, LLMModelNotFoundError)):
            return True
        for attribute in ("status_code", "code"):
            code = getattr(item, attribute, None)
            if isinstance(code, int) and code in CREDENTIAL_STATUS_CODES:
                return True
    return any(_CREDENTIAL_MESSAGE_PATTERN.search(str(item)) for item in chain)
