"""
Generation API Package - Unified interface for text and image generation providers
"""

from .base import CallModel
from .data_classes import (
    BaseRequest, BaseResponse,
    TextGenerationRequest, TextGenerationResponse,
    ImageGenerationRequest, ImageGenerationResponse,
    InlineDocument, Citation,
    ProviderConfig
)
from .exceptions import (
    LLMError, LLMAPIError, LLMValidationError,
    LLMRateLimitError, LLMAuthenticationError,
    LLMModelNotFoundError
)
from .providers.gemini import GeminiModel

__version__ = "1.0.0"
__all__ = [
    # Base
    'CallModel',
    # Data Classes
    'BaseRequest', 'BaseResponse',
    'TextGenerationRequest', 'TextGenerationResponse',
    'ImageGenerationRequest', 'ImageGenerationResponse',
    'InlineDocument', 'Citation',
    'ProviderConfig',
    # Exceptions
    'LLMError', 'LLMAPIError', 'LLMValidationError',
    'LLMRateLimitError', 'LLMAuthenticationError',
    'LLMModelNotFoundError',
    # Providers
    'GeminiModel'
]
