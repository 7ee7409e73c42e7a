from dataclasses import dataclass, field
from typing import Optional, List, Any


# ========== Base Classes ==========

@dataclass
class BaseRequest:
    """Base class for every request"""
    prompt: str = ""
    model_name: Optional[str] = None


@dataclass
class BaseResponse:
    """Base class for every response"""
    text: str = ""
    model_used: Optional[str] = None
    raw_response: Optional[Any] = None


# ========== Text Generation ==========

@dataclass
class InlineDocument:
    """Binary document sent alongside the prompt"""
    mime_type: str = "application/pdf"
    data: bytes = b""


@dataclass
class Citation:
    """Grounding reference"""
    url: str = ""
    title: Optional[str] = None


@dataclass
class TextGenerationRequest(BaseRequest):
    """Text generation with optional attachment and search grounding"""
    attachment: Optional[InlineDocument] = None
    enable_search: bool = False


@dataclass
class TextGenerationResponse(BaseResponse):
    """Text generation response"""
    citations: List[Citation] = field(default_factory=list)

    @property
    def has_citations(self) -> bool:
        """Whether grounding references were returned"""
        return len(self.citations) > 0


# ========== Image Generation ==========

@dataclass
class ImageGenerationRequest(BaseRequest):
    """Image generation request (image output modality)"""
    response_modalities: List[str] = field(default_factory=lambda: ["IMAGE"])


@dataclass
class ImageGenerationResponse(BaseResponse):
    """Image generation response; at most one embedded image"""
    image_bytes: Optional[bytes] = None
    mime_type: str = "image/png"

    @property
    def has_image(self) -> bool:
        """Whether the service returned an image payload"""
        return bool(self.image_bytes)


# ========== Provider Metadata ==========

@dataclass
class ProviderConfig:
    """Provider specific capabilities"""
    provider_name: str = ""
    model_name: str = ""
    image_model_name: str = ""
    supports_web_search: bool = True
    supports_document_input: bool = True
    supports_image_output: bool = True
