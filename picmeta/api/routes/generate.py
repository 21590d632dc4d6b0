"""Generation API routes."""

import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from picmeta.models.generation import (
    BulkGenerateRequest,
    BulkGenerateResponse,
    FallbackTextRequest,
    FallbackTextResponse,
    GenerateBothRequest,
    GenerateBothResponse,
    GenerateRequest,
    GenerateResponse,
    MetadataKind,
)
from picmeta.services.generator import MetadataGenerator, get_generator, raise_for_outcome

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generation"])

GeneratorDep = Annotated[MetadataGenerator, Depends(get_generator)]


@router.post("/generate", response_model=GenerateResponse)
async def generate_metadata(
    request: GenerateRequest,
    generator: GeneratorDep,
) -> GenerateResponse:
    """Generate alt text, a title or a filename slug for an image.

    Alt text and title failures are returned as errors with a reason code;
    filename generation always returns a slug.
    """
    logger.info(
        f"[{request.kind.value}] generate called - image: {request.image_path}, "
        f"keywords: '{request.keywords}'"
    )
    outcome = raise_for_outcome(await generator.generate(request.to_generation_request()))
    return GenerateResponse(
        kind=request.kind, result=outcome.text, fallback_used=outcome.fallback_used
    )


@router.post("/generate/both", response_model=GenerateBothResponse)
async def generate_both_metadata(
    request: GenerateBothRequest,
    generator: GeneratorDep,
) -> GenerateBothResponse:
    """Generate alt text and a title for the same image."""
    alt_result, title_result = await generator.generate_both(
        request.image_path, request.keywords, request.provider
    )
    logger.info(f"[GENERATE_BOTH] Alt: '{alt_result}', Title: '{title_result}'")
    return GenerateBothResponse(alt_result=alt_result, title_result=title_result)


@router.post("/generate/bulk", response_model=BulkGenerateResponse)
async def generate_bulk(
    request: BulkGenerateRequest,
    generator: GeneratorDep,
) -> BulkGenerateResponse:
    """Generate metadata for many images; each item succeeds or fails on its own."""
    outcomes = await generator.generate_many(
        [item.to_generation_request() for item in request.items]
    )
    succeeded = sum(1 for outcome in outcomes if outcome.ok)
    logger.info(f"[BULK] {succeeded}/{len(outcomes)} generations succeeded")
    return BulkGenerateResponse(outcomes=outcomes, total=len(outcomes), succeeded=succeeded)


@router.post("/fallback", response_model=FallbackTextResponse)
async def fallback_text(
    request: FallbackTextRequest,
    generator: GeneratorDep,
) -> FallbackTextResponse:
    """Get deterministic fallback text without calling a model."""
    synthesizer = generator.fallback

    if request.kind == MetadataKind.FILENAME:
        if not request.image_path:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="image_path is required for the filename kind",
            )
        text = synthesizer.filename(request.keywords, basename=Path(request.image_path).stem)
    else:
        text = synthesizer.fallback_text(request.kind, request.keywords, request.original_title)

    return FallbackTextResponse(
        kind=request.kind,
        text=text,
        copy_suffix=synthesizer.copy_suffix(request.kind),
    )
