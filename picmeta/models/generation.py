"""Generation-related Pydantic models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MetadataKind(str, Enum):
    """Kind of metadata value to generate."""

    ALT = "alt"
    TITLE = "title"
    FILENAME = "filename"


class ProviderName(str, Enum):
    """Supported vision model providers."""

    OPENAI = "openai"
    GEMINI = "gemini"


class FailureCode(str, Enum):
    """Reason codes surfaced for failed generations."""

    MISSING_DATA = "missing_data"
    IMAGE_ERROR = "image_error"
    API_ERROR = "api_error"
    EMPTY_RESPONSE = "empty_response"
    AI_REFUSED = "ai_refused"


class OutcomeStatus(str, Enum):
    """Terminal state of a single generation request."""

    SUCCESS = "success"
    REFUSED = "refused"
    FAILED = "failed"


class GenerationRequest(BaseModel):
    """A single request to generate one metadata value for an image."""

    model_config = ConfigDict(frozen=True)

    image_path: str = Field(..., description="Resolved local path of the image file")
    kind: MetadataKind = Field(default=MetadataKind.ALT, description="Metadata kind")
    keywords: str = Field(default="", description="Free-text context keywords")
    provider: Optional[ProviderName] = Field(
        default=None, description="Override configured provider"
    )


class PromptBundle(BaseModel):
    """System message and user prompt sent to the provider."""

    model_config = ConfigDict(frozen=True)

    system_message: str
    user_prompt: str


class ProviderResponse(BaseModel):
    """Provider reply reduced to plain text."""

    text: str = ""


class ExtractionResult(BaseModel):
    """Single candidate isolated from a model reply."""

    text: str
    pattern_index: Optional[int] = Field(
        default=None, description="Cascade rule that matched (diagnostic only)"
    )


class GenerationOutcome(BaseModel):
    """Tagged result of one generation request."""

    status: OutcomeStatus
    kind: MetadataKind
    text: Optional[str] = Field(default=None)
    reason: Optional[FailureCode] = Field(default=None)
    message: Optional[str] = Field(default=None)
    fallback_used: bool = Field(default=False)
    provider: Optional[ProviderName] = Field(default=None)

    @classmethod
    def success(
        cls,
        kind: MetadataKind,
        text: str,
        provider: Optional[ProviderName] = None,
        fallback_used: bool = False,
    ) -> "GenerationOutcome":
        return cls(
            status=OutcomeStatus.SUCCESS,
            kind=kind,
            text=text,
            provider=provider,
            fallback_used=fallback_used,
        )

    @classmethod
    def refused(
        cls, kind: MetadataKind, provider: Optional[ProviderName] = None
    ) -> "GenerationOutcome":
        return cls(
            status=OutcomeStatus.REFUSED,
            kind=kind,
            reason=FailureCode.AI_REFUSED,
            message="AI refused to generate content for this image",
            provider=provider,
        )

    @classmethod
    def failed(
        cls,
        kind: MetadataKind,
        reason: FailureCode,
        message: str,
        provider: Optional[ProviderName] = None,
    ) -> "GenerationOutcome":
        return cls(
            status=OutcomeStatus.FAILED,
            kind=kind,
            reason=reason,
            message=message,
            provider=provider,
        )

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS


class GenerateRequest(BaseModel):
    """API request to generate one metadata value."""

    image_path: str = Field(..., description="Local path of the image file")
    kind: MetadataKind = Field(default=MetadataKind.ALT)
    keywords: str = Field(default="", description="Optional context keywords")
    provider: Optional[ProviderName] = Field(default=None)

    def to_generation_request(self) -> GenerationRequest:
        return GenerationRequest(
            image_path=self.image_path,
            kind=self.kind,
            keywords=self.keywords,
            provider=self.provider,
        )


class GenerateResponse(BaseModel):
    """API response for a generated value."""

    kind: MetadataKind
    result: str
    fallback_used: bool = Field(default=False)


class GenerateBothRequest(BaseModel):
    """API request to generate alt text and title together."""

    image_path: str
    keywords: str = Field(default="")
    provider: Optional[ProviderName] = Field(default=None)


class GenerateBothResponse(BaseModel):
    """Alt text and title generated for the same image."""

    alt_result: str
    title_result: str


class BulkGenerateRequest(BaseModel):
    """Batch of independent generation requests."""

    items: list[GenerateRequest] = Field(default_factory=list)


class BulkGenerateResponse(BaseModel):
    """Per-item outcomes of a bulk generation."""

    outcomes: list[GenerationOutcome] = Field(default_factory=list)
    total: int = Field(default=0)
    succeeded: int = Field(default=0)


class FallbackTextRequest(BaseModel):
    """Request for deterministic fallback text (e.g. when duplicating an image)."""

    kind: MetadataKind
    keywords: str = Field(default="")
    original_title: Optional[str] = Field(default=None)
    image_path: Optional[str] = Field(
        default=None, description="Required for the filename kind"
    )


class FallbackTextResponse(BaseModel):
    """Fallback text and the copy suffix configured for the kind."""

    kind: MetadataKind
    text: str
    copy_suffix: str
