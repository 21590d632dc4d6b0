"""Custom exceptions and exception handlers."""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from picmeta.models.generation import FailureCode, MetadataKind


class PicMetaError(Exception):
    """Base exception for PicMeta."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


_STATUS_BY_CODE = {
    FailureCode.MISSING_DATA: status.HTTP_400_BAD_REQUEST,
    FailureCode.IMAGE_ERROR: 422,
    FailureCode.API_ERROR: status.HTTP_502_BAD_GATEWAY,
    FailureCode.EMPTY_RESPONSE: status.HTTP_502_BAD_GATEWAY,
    FailureCode.AI_REFUSED: 422,
}


class GenerationError(PicMetaError):
    """Generation failed with a typed reason code."""

    def __init__(self, code: FailureCode, message: str, kind: MetadataKind | None = None):
        self.code = FailureCode(code)
        self.kind = kind
        super().__init__(message, status_code=_STATUS_BY_CODE[self.code])


class RefusedError(GenerationError):
    """The model declined to describe the image."""

    def __init__(self, kind: MetadataKind | None = None):
        super().__init__(
            FailureCode.AI_REFUSED,
            "AI refused to generate content for this image",
            kind=kind,
        )


class MissingCredentialsError(PicMetaError):
    """Provider API key is not configured."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(
            f"Missing {provider} API key",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


async def picmeta_exception_handler(request: Request, exc: PicMetaError) -> JSONResponse:
    """Handle PicMetaError exceptions."""
    content = {"error": exc.message, "type": type(exc).__name__}
    if isinstance(exc, GenerationError):
        content["code"] = exc.code.value
    return JSONResponse(status_code=exc.status_code, content=content)
