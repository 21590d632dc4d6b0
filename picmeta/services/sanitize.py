"""Output cleanup and validation for generated metadata."""

import logging
import re
import unicodedata
from typing import Optional

from picmeta.models.generation import MetadataKind

logger = logging.getLogger(__name__)

MAX_FILENAME_LENGTH = 80

_FENCE_OPEN = re.compile(r"^```\w*\n?")
_FENCE_CLOSE = re.compile(r"\n?```$")
_IMAGE_EXTENSION = re.compile(r"\.(?:jpg|jpeg|png|gif|webp|bmp)$", re.IGNORECASE)
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def strip_wrapping(text: str) -> str:
    """Strip surrounding whitespace, one layer of double quotes and code fences."""
    content = (text or "").strip()
    if len(content) >= 2 and content.startswith('"') and content.endswith('"'):
        content = content[1:-1].strip()
    content = _FENCE_OPEN.sub("", content)
    content = _FENCE_CLOSE.sub("", content)
    return content.strip()


def strip_image_extension(text: str) -> str:
    """Drop a trailing image file extension echoed by the model."""
    return _IMAGE_EXTENSION.sub("", text)


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphenated, URL-safe slug."""
    normalized = unicodedata.normalize("NFKD", text or "")
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", ascii_text.lower()).strip("-")


def sanitize(kind: MetadataKind, text: str) -> str:
    """Apply the output constraints of a metadata kind.

    Args:
        kind: Metadata kind.
        text: Extracted candidate text.

    Returns:
        Cleaned text; for filenames, a slug without extension.
    """
    content = strip_wrapping(text)
    if MetadataKind(kind) == MetadataKind.FILENAME:
        content = slugify(strip_image_extension(content))
    return content


def is_valid_filename_slug(slug: str, max_length: int = MAX_FILENAME_LENGTH) -> bool:
    """A usable filename slug is non-empty and at most ``max_length`` characters."""
    return bool(slug) and len(slug) <= max_length


def keyword_context_found(keywords: str, text: str) -> Optional[bool]:
    """Check whether any comma-separated keyword appears in the text.

    Returns:
        None when there are no keywords to check.
    """
    tokens = [part.strip() for part in (keywords or "").lower().split(",")]
    tokens = [token for token in tokens if token]
    if not tokens:
        return None
    lowered = (text or "").lower()
    return any(token in lowered for token in tokens)


def check_keyword_context(kind: MetadataKind, keywords: str, text: str) -> Optional[bool]:
    """Log whether alt text reflects the supplied keywords. Never alters the text."""
    if MetadataKind(kind) != MetadataKind.ALT:
        return None
    found = keyword_context_found(keywords, text)
    if found is None:
        return None
    if found:
        logger.info("[alt] Generated content includes provided context")
    else:
        logger.warning("[alt] Generated content may not include provided context")
    return found
