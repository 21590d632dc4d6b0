"""Pydantic models package."""

from picmeta.models.generation import (
    BulkGenerateRequest,
    BulkGenerateResponse,
    ExtractionResult,
    FailureCode,
    FallbackTextRequest,
    FallbackTextResponse,
    GenerateBothRequest,
    GenerateBothResponse,
    GenerateRequest,
    GenerateResponse,
    GenerationOutcome,
    GenerationRequest,
    MetadataKind,
    OutcomeStatus,
    PromptBundle,
    ProviderName,
    ProviderResponse,
)
from picmeta.models.prompt_config import (
    FallbackTemplates,
    GenerationConfig,
    KindPromptConfig,
    TextOverride,
)

__all__ = [
    # Core generation models
    "MetadataKind",
    "ProviderName",
    "FailureCode",
    "OutcomeStatus",
    "GenerationRequest",
    "PromptBundle",
    "ProviderResponse",
    "ExtractionResult",
    "GenerationOutcome",
    # Configuration models
    "TextOverride",
    "KindPromptConfig",
    "FallbackTemplates",
    "GenerationConfig",
    # API models
    "GenerateRequest",
    "GenerateResponse",
    "GenerateBothRequest",
    "GenerateBothResponse",
    "BulkGenerateRequest",
    "BulkGenerateResponse",
    "FallbackTextRequest",
    "FallbackTextResponse",
]
