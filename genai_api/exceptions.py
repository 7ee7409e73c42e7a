from typing import Optional
from datetime import datetime


class LLMError(Exception):
    """Base exception for all generation service errors"""

    def __init__(
        self,
        message: str,
        provider: str = "",
        error_type: str = "general",
        status_code: Optional[int] = None,
        retry_after: Optional[int] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.error_type = error_type
        self.status_code = status_code
        self.retry_after = retry_after
        self.original_error = original_error
        self.timestamp = datetime.now()

    def __str__(self):
        if self.status_code is not None:
            return f"[{self.provider}] {self.error_type} ({self.status_code}): {self.message}"
        return f"[{self.provider}] {self.error_type}: {self.message}"


class LLMAPIError(LLMError):
    """API request failed"""
    pass


class LLMAuthenticationError(LLMError):
    """Authentication failed (missing, invalid or unbilled API key)"""
    pass


class LLMRateLimitError(LLMError):
    """Rate limit exceeded"""
    pass


class LLMValidationError(LLMError):
    """Request validation failed"""
    pass


class LLMModelNotFoundError(LLMError):
    """Specified model or entity not found"""
    pass
