"""High-level interfaces for the presentation generation pipeline."""

from .assembler import DeckAssembler
from .config import PipelineSettings
from .content_normalizer import ContentNormalizer, NormalizedContent, UploadedFile
from .credentials import CredentialGate, EnvironmentCredentialGate
from .errors import (
    CredentialError,
    ExportError,
    ExtractionError,
    GenerationError,
    GenerationInProgressError,
    InputValidationError,
    SlideGeniusError,
    SlideRenderError,
    UnsupportedFileTypeError,
    is_credential_failure,
)
from .exporter import ExportedFile, PresentationExporter
from .json_extraction import extract_json_array
from .models import (
    AttachedDocument,
    ComplexityLevel,
    GenerationParameters,
    Language,
    Presentation,
    RenderedSlide,
    SlideOutlineEntry,
    SourceCitation,
    SourceInput,
    VisualStyle,
)
from .outline import OutlineResult, OutlineSynthesizer, is_article_mode
from .pipeline import PresentationPipeline
from .prompts import style_instruction
from .renderer import SlideRenderer
from .session import PresentationSession, SlideNavigator

__all__ = [
    "AttachedDocument",
    "ComplexityLevel",
    "ContentNormalizer",
    "CredentialError",
    "CredentialGate",
    "DeckAssembler",
    "EnvironmentCredentialGate",
    "ExportError",
    "ExportedFile",
    "ExtractionError",
    "GenerationError",
    "GenerationInProgressError",
    "GenerationParameters",
    "InputValidationError",
    "Language",
    "NormalizedContent",
    "OutlineResult",
    "OutlineSynthesizer",
    "PipelineSettings",
    "Presentation",
    "PresentationExporter",
    "PresentationPipeline",
    "PresentationSession",
    "RenderedSlide",
    "SlideGeniusError",
    "SlideNavigator",
    "SlideOutlineEntry",
    "SlideRenderError",
    "SlideRenderer",
    "SourceCitation",
    "SourceInput",
    "UnsupportedFileTypeError",
    "VisualStyle",
    "extract_json_array",
    "is_article_mode",
    "is_credential_failure",
    "style_instruction",
]
