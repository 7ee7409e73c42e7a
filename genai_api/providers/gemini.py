import os
import logging
from typing import Optional, List
from google import genai
from google.genai import errors
from google.genai import types
import httpx
from dotenv import load_dotenv
from ..data_classes import (
    TextGenerationRequest, TextGenerationResponse, Citation,
    ImageGenerationRequest, ImageGenerationResponse,
    ProviderConfig
)
from ..base import CallModel
from ..decorators import log_request
from ..exceptions import (
    LLMError, LLMAPIError, LLMAuthenticationError,
    LLMModelNotFoundError, LLMRateLimitError, LLMValidationError
)

LOGGER = logging.getLogger(__name__)

DEFAULT_TEXT_MODEL = "gemini-3-pro-preview"
DEFAULT_IMAGE_MODEL = "gemini-3-pro-image-preview"


class GeminiModel(CallModel):
    """Gemini API implementation of CallModel using data classes"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: str = DEFAULT_TEXT_MODEL,
        image_model_name: str = DEFAULT_IMAGE_MODEL,
    ):
        super().__init__(api_key=api_key, model_name=model_name, image_model_name=image_model_name)

    def _get_provider_config(self) -> ProviderConfig:
        """Get Gemini provider configuration"""
        return ProviderConfig(
            provider_name="Gemini",
            model_name=self.model_name or DEFAULT_TEXT_MODEL,
            image_model_name=self.image_model_name or DEFAULT_IMAGE_MODEL,
            supports_web_search=True,
            supports_document_input=True,
            supports_image_output=True,
        )

    def setup_client(self):
        """Setup Gemini client"""
        load_dotenv()
        api_key = self.api_key or os.getenv('GEMINI_API_KEY')
        if not api_key:
            raise LLMAuthenticationError(
                message=(
                    "Gemini API key is required. Please set GEMINI_API_KEY in your .env file "
                    "or pass it as api_key parameter to GeminiModel constructor."
                ),
                provider="Gemini",
                error_type="missing_api_key",
            )
        self.client = genai.Client(api_key=api_key)

    @log_request
    async def generate_content(self, request: TextGenerationRequest) -> TextGenerationResponse:
        """Generate text, attaching the document and search tool when requested"""
        model = request.model_name or self.model_name
        parts = [types.Part.from_text(text=request.prompt)]
        if request.attachment is not None:
            parts.append(types.Part.from_bytes(
                data=request.attachment.data,
                mime_type=request.attachment.mime_type,
            ))
        config = None
        if request.enable_search:
            grounding_tool = types.Tool(google_search=types.GoogleSearch())
            config = types.GenerateContentConfig(tools=[grounding_tool])

        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=[types.Content(role="user", parts=parts)],
                config=config,
            )
        except (errors.APIError, httpx.HTTPError) as e:
            raise _translate_error(e) from e

        return TextGenerationResponse(
            text=getattr(response, 'text', '') or "",
            model_used=model,
            citations=_extract_citations(response),
            raw_response=response
        )

    @log_request
    async def generate_image(self, request: ImageGenerationRequest) -> ImageGenerationResponse:
        """Generate a single image; an empty response is returned without raising"""
        model = request.model_name or self.image_model_name
        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=[types.Content(role="user", parts=[types.Part.from_text(text=request.prompt)])],
                config=types.GenerateContentConfig(
                    response_modalities=list(request.response_modalities),
                ),
            )
        except (errors.APIError, httpx.HTTPError) as e:
            raise _translate_error(e) from e

        image_bytes: Optional[bytes] = None
        mime_type = "image/png"
        candidates = getattr(response, 'candidates', None) or []
        if candidates and getattr(candidates[0], 'content', None) is not None:
            for part in candidates[0].content.parts or []:
                inline_data = getattr(part, 'inline_data', None)
                if inline_data is not None and inline_data.data:
                    image_bytes = inline_data.data
                    mime_type = inline_data.mime_type or mime_type
                    break
        return ImageGenerationResponse(
            model_used=model,
            image_bytes=image_bytes,
            mime_type=mime_type,
            raw_response=response
        )


def _extract_citations(response) -> List[Citation]:
    citations: List[Citation] = []
    candidates = getattr(response, 'candidates', None) or []
    if not candidates:
        return citations
    grounding_metadata = getattr(candidates[0], 'grounding_metadata', None)
    if grounding_metadata is None:
        return citations
    for chunk in getattr(grounding_metadata, 'grounding_chunks', None) or []:
        web = getattr(chunk, 'web', None)
        if web is None:
            continue
        citations.append(Citation(
            url=getattr(web, 'uri', '') or "",
            title=getattr(web, 'title', None)
        ))
    return citations


def _translate_error(error: Exception) -> LLMError:
    if isinstance(error, httpx.HTTPError):
        return LLMAPIError(
            message=str(error),
            provider="Gemini",
            error_type="transport",
            original_error=error,
        )
    code = getattr(error, 'code', None)
    message = getattr(error, 'message', None) or str(error)
    if code in (401, 403):
        error_cls, error_type = LLMAuthenticationError, "permission_denied"
    elif code == 400:
        error_cls, error_type = LLMValidationError, "invalid_request"
    elif code == 404:
        error_cls, error_type = LLMModelNotFoundError, "not_found"
    elif code == 429:
        error_cls, error_type = LLMRateLimitError, "rate_limited"
    else:
        error_cls, error_type = LLMAPIError, "api_error"
    LOGGER.debug("Gemini request failed with %s: %s", code, message)
    return error_cls(
        message=message,
        provider="Gemini",
        error_type=error_type,
        status_code=code,
        retry_after=_retry_after(error) if code == 429 else None,
        original_error=error,
    )


def _retry_after(error: Exception) -> Optional[int]:
    """Seconds from the Retry-After header of the failed response, if any"""
    headers = getattr(getattr(error, 'response', None), 'headers', None)
    if not headers:
        return None
    value = headers.get('retry-after')
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None
