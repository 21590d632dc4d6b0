"""Deterministic, template-based metadata when no usable AI answer exists."""

import logging
import re
from datetime import datetime
from typing import Callable, Dict, List, Optional

from picmeta.models.generation import MetadataKind
from picmeta.models.prompt_config import GenerationConfig
from picmeta.services.sanitize import slugify

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_TEMPLATES: Dict[str, str] = {
    "title_keywords": "{keywords}",
    "title_default": "Image {date}",
    "alt_keywords": "{keywords} image",
    "alt_default": "Descriptive image",
    "alt_with_title": "{title}",
    "filename_keywords": "{keywords}-{date}",
    "filename_default": "{basename}-copy-{datetime}",
}

DEFAULT_COPY_SUFFIXES: Dict[MetadataKind, str] = {
    MetadataKind.TITLE: " (Copy)",
    MetadataKind.ALT: " (Copy)",
    MetadataKind.FILENAME: "-copy",
}

KEYWORD_STOPWORDS = frozenset({"this", "that", "the", "and", "but", "for"})
MAX_KEYWORD_TOKENS = 3

_PLACEHOLDER = re.compile(r"\{(keywords|date|datetime|basename|title)\}")
_NON_WORD = re.compile(r"[^\w]+")
_PUNCTUATION = re.compile(r"[^\w\s]")
_WORD_START = re.compile(r"(^|\s)(\S)")


def render_template(template: str, values: Dict[str, str]) -> str:
    """Substitute placeholders in a single left-to-right pass.

    Substituted values are not scanned again, and placeholders without a
    value are left as they are.
    """

    def _replace(match: re.Match) -> str:
        name = match.group(1)
        if name in values:
            return values[name]
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, template)


def keyword_tokens(keywords: str) -> List[str]:
    """Pick up to three meaningful lowercase words from the keywords."""
    words = _NON_WORD.split((keywords or "").lower())
    usable = [w for w in words if len(w) > 2 and w not in KEYWORD_STOPWORDS]
    return usable[:MAX_KEYWORD_TOKENS]


def _capitalize_words(text: str) -> str:
    return _WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), text)


class FallbackSynthesizer:
    """Builds fallback values from configurable templates."""

    def __init__(
        self,
        config: Optional[GenerationConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config or GenerationConfig()
        self.clock = clock or datetime.now

    def template(self, name: str) -> str:
        """Get the effective fallback template by name (e.g. ``filename_default``)."""
        override = getattr(self.config.fallback, name)
        return override.resolve(DEFAULT_FALLBACK_TEMPLATES[name])

    def copy_suffix(self, kind: MetadataKind) -> str:
        """Get the suffix appended to duplicated titles, alt text and filenames."""
        kind = MetadataKind(kind)
        return self.config.for_kind(kind).copy_suffix.resolve(
            DEFAULT_COPY_SUFFIXES[kind], allow_empty=True
        )

    def filename(self, keywords: str = "", basename: str = "") -> str:
        """Synthesize a filename slug.

        Args:
            keywords: Free-text keywords; up to three usable words are kept.
            basename: Original file name without extension.

        Returns:
            A non-empty slug. It is not checked against the filename length bound.
        """
        now = self.clock()
        values = {
            "date": now.strftime("%Y%m%d"),
            "datetime": now.strftime("%Y%m%d-%H%M%S"),
            "basename": basename,
        }

        tokens = keyword_tokens(keywords)
        if tokens:
            values["keywords"] = "-".join(tokens)
            fallback = render_template(self.template("filename_keywords"), values)
            logger.info(f"[filename] Fallback from keywords: {fallback}")
        else:
            fallback = render_template(self.template("filename_default"), values)
            logger.info(f"[filename] Default fallback: {fallback}")

        slug = slugify(fallback)
        if not slug:
            slug = slugify(f"image-{values['datetime']}")
        return slug

    def fallback_text(
        self,
        kind: MetadataKind,
        keywords: str = "",
        original_title: Optional[str] = None,
    ) -> str:
        """Synthesize alt text or a title without calling a model.

        Not used automatically on provider failure; callers such as image
        duplication invoke it explicitly.
        """
        kind = MetadataKind(kind)
        if kind == MetadataKind.TITLE:
            return self._title_fallback(keywords, original_title)
        if kind == MetadataKind.ALT:
            return self._alt_fallback(keywords, original_title)
        raise ValueError("Use FallbackSynthesizer.filename() for the filename kind")

    def _title_fallback(self, keywords: str, original_title: Optional[str]) -> str:
        if keywords:
            words = _capitalize_words(_PUNCTUATION.sub(" ", keywords).strip())
            fallback = render_template(self.template("title_keywords"), {"keywords": words})
            if len(fallback) > 5:
                logger.info(f"[title] Fallback from keywords: {fallback}")
                return fallback

        if original_title:
            fallback = original_title + self.copy_suffix(MetadataKind.TITLE)
        else:
            fallback = render_template(
                self.template("title_default"),
                {"date": self.clock().strftime("%Y-%m-%d")},
            )
        logger.info(f"[title] Default fallback: {fallback}")
        return fallback

    def _alt_fallback(self, keywords: str, original_title: Optional[str]) -> str:
        if keywords:
            fallback = render_template(
                self.template("alt_keywords"), {"keywords": keywords.strip()}
            )
            logger.info(f"[alt] Fallback from keywords: {fallback}")
            return fallback

        if original_title:
            fallback = render_template(self.template("alt_with_title"), {"title": original_title})
        else:
            fallback = self.template("alt_default")
        logger.info(f"[alt] Default fallback: {fallback}")
        return fallback
