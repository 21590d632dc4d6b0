"""Metadata Generator - orchestrates prompt, provider call, cleanup and fallback."""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import httpx

from picmeta.core.config import Settings, get_settings
from picmeta.core.exceptions import GenerationError, MissingCredentialsError, RefusedError
from picmeta.models.generation import (
    FailureCode,
    GenerationOutcome,
    GenerationRequest,
    MetadataKind,
    OutcomeStatus,
    ProviderName,
    ProviderResponse,
)
from picmeta.models.prompt_config import GenerationConfig
from picmeta.services.extraction import extract_candidate
from picmeta.services.fallback import FallbackSynthesizer
from picmeta.services.mime import detect_mime_type
from picmeta.services.prompts import PromptComposer
from picmeta.services.providers import ProviderCallError, ProviderClient, get_adapter
from picmeta.services.refusal import is_refusal
from picmeta.services.sanitize import (
    check_keyword_context,
    is_valid_filename_slug,
    sanitize,
    strip_wrapping,
)

logger = logging.getLogger(__name__)


def _read_image(path: Path) -> Optional[bytes]:
    """Read an image file, returning None when no regular file exists at ``path``."""
    if not path.is_file():
        return None
    return path.read_bytes()


def raise_for_outcome(outcome: GenerationOutcome) -> GenerationOutcome:
    """Return a successful outcome unchanged, raise for refused or failed ones."""
    if outcome.status == OutcomeStatus.REFUSED:
        raise RefusedError(kind=outcome.kind)
    if outcome.status == OutcomeStatus.FAILED:
        raise GenerationError(outcome.reason, outcome.message or "Generation failed", outcome.kind)
    return outcome


class MetadataGenerator:
    """Generates alt text, titles and filename slugs for images."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        config: Optional[GenerationConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings or get_settings()
        self.config = config or self.settings.generation
        self.transport = transport
        self.composer = PromptComposer(self.config)
        self.fallback = FallbackSynthesizer(self.config, clock=clock)

    def _resolve_provider(self, request: GenerationRequest) -> ProviderName:
        return ProviderName(request.provider or self.settings.ai_provider)

    def _timeout_for(self, kind: MetadataKind) -> float:
        if kind == MetadataKind.FILENAME:
            return self.settings.filename_timeout_seconds
        return self.settings.request_timeout_seconds

    async def generate(self, request: GenerationRequest) -> GenerationOutcome:
        """Generate one metadata value.

        Filename requests always end in success: every failure, refusal or
        out-of-bounds slug is replaced by a synthesized fallback. Alt text and
        title failures are returned as-is.

        Args:
            request: Generation request.

        Returns:
            Exactly one of success, refused or failed.
        """
        outcome = await self._generate_from_model(request)
        if request.kind != MetadataKind.FILENAME or outcome.ok:
            return outcome

        logger.info(
            f"[filename] {outcome.status.value} ({outcome.reason.value if outcome.reason else '-'}), "
            f"using fallback"
        )
        slug = self.fallback.filename(request.keywords, basename=Path(request.image_path).stem)
        return GenerationOutcome.success(
            MetadataKind.FILENAME, slug, provider=outcome.provider, fallback_used=True
        )

    async def _generate_from_model(self, request: GenerationRequest) -> GenerationOutcome:
        kind = request.kind
        tag = f"[{kind.value}]"
        provider = self._resolve_provider(request)
        logger.info(
            f"{tag} Generation start: provider={provider.value}, image={request.image_path}, "
            f"keywords='{request.keywords}'"
        )

        prompt = self.composer.compose(kind, request.keywords)

        try:
            adapter = get_adapter(provider, self.settings, kind)
        except MissingCredentialsError as e:
            logger.error(f"{tag} {e.message}")
            return GenerationOutcome.failed(
                kind, FailureCode.MISSING_DATA, f"{e.message} or image path.", provider
            )

        if not request.image_path:
            logger.error(f"{tag} No image path given")
            return GenerationOutcome.failed(
                kind, FailureCode.MISSING_DATA, "Missing API key or image path.", provider
            )

        image_path = Path(request.image_path)
        try:
            image_bytes = await asyncio.to_thread(_read_image, image_path)
        except OSError as e:
            logger.error(f"{tag} Failed to read image file: {e}")
            return GenerationOutcome.failed(
                kind, FailureCode.IMAGE_ERROR, "Failed to load image file.", provider
            )
        if image_bytes is None:
            logger.error(f"{tag} Image file not found: {request.image_path}")
            return GenerationOutcome.failed(
                kind, FailureCode.MISSING_DATA, "Missing API key or image path.", provider
            )
        if not image_bytes:
            logger.error(f"{tag} Image file is empty: {request.image_path}")
            return GenerationOutcome.failed(
                kind, FailureCode.IMAGE_ERROR, "Failed to load image file.", provider
            )

        mime_type = await asyncio.to_thread(detect_mime_type, str(image_path))
        logger.info(f"{tag} Image processed - MIME: {mime_type}, bytes: {len(image_bytes)}")

        payload = adapter.build_request(prompt, image_bytes, mime_type)
        client = ProviderClient(timeout=self._timeout_for(kind), transport=self.transport)
        try:
            response = ProviderResponse(text=await client.complete(adapter, payload))
        except ProviderCallError as e:
            logger.error(f"{tag} {type(e).__name__}: {e}")
            return GenerationOutcome.failed(kind, FailureCode.API_ERROR, str(e), provider)

        logger.info(f"{tag} Raw AI response: {response.text}")

        if not response.text.strip():
            logger.warning(f"{tag} Empty response from AI API")
            return GenerationOutcome.failed(
                kind, FailureCode.EMPTY_RESPONSE, "Empty response from AI API", provider
            )

        if is_refusal(response.text):
            logger.warning(f"{tag} AI refused to generate content")
            return GenerationOutcome.refused(kind, provider)

        extraction = extract_candidate(strip_wrapping(response.text))
        result = sanitize(kind, extraction.text)
        check_keyword_context(kind, request.keywords, result)

        if kind == MetadataKind.FILENAME and not is_valid_filename_slug(
            result, self.settings.max_filename_length
        ):
            logger.warning(f"{tag} Sanitized result too long or empty: '{result}'")
            return GenerationOutcome.failed(
                kind, FailureCode.EMPTY_RESPONSE, "Sanitized filename too long or empty", provider
            )

        logger.info(f"{tag} Final cleaned result: {result}")
        return GenerationOutcome.success(kind, result, provider=provider)

    async def generate_text(self, request: GenerationRequest) -> str:
        """Generate one metadata value as a plain string.

        Raises:
            RefusedError: If the model refused (alt text and title only).
            GenerationError: If generation failed (alt text and title only).
        """
        outcome = raise_for_outcome(await self.generate(request))
        return outcome.text

    async def generate_both(
        self,
        image_path: str,
        keywords: str = "",
        provider: Optional[ProviderName] = None,
    ) -> Tuple[str, str]:
        """Generate alt text and then a title for the same image.

        Returns:
            Tuple of (alt_text, title).
        """
        alt_text = await self.generate_text(
            GenerationRequest(
                image_path=image_path, kind=MetadataKind.ALT, keywords=keywords, provider=provider
            )
        )
        title = await self.generate_text(
            GenerationRequest(
                image_path=image_path, kind=MetadataKind.TITLE, keywords=keywords, provider=provider
            )
        )
        return alt_text, title

    async def generate_many(self, requests: List[GenerationRequest]) -> List[GenerationOutcome]:
        """Run independent requests concurrently.

        One request's failure never affects another's outcome.
        """
        semaphore = asyncio.Semaphore(max(1, self.settings.max_parallel_requests))

        async def _run(request: GenerationRequest) -> GenerationOutcome:
            async with semaphore:
                return await self.generate(request)

        results = await asyncio.gather(*(_run(r) for r in requests), return_exceptions=True)

        outcomes: List[GenerationOutcome] = []
        for request, result in zip(requests, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, Exception):
                logger.error(f"[{request.kind.value}] Unexpected error: {result!r}")
                outcomes.append(
                    GenerationOutcome.failed(request.kind, FailureCode.API_ERROR, str(result))
                )
            else:
                outcomes.append(result)
        return outcomes


def get_generator() -> MetadataGenerator:
    """Get a generator built from application settings."""
    return MetadataGenerator(get_settings())
