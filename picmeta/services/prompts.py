"""Prompt composition for metadata generation."""

import logging
from typing import Dict, Optional, Tuple

from picmeta.models.generation import MetadataKind, PromptBundle
from picmeta.models.prompt_config import GenerationConfig

logger = logging.getLogger(__name__)


DEFAULT_BASE_PROMPTS: Dict[MetadataKind, str] = {
    MetadataKind.ALT: "Describe this image for alt text in one short sentence.",
    MetadataKind.TITLE: "Suggest a short SEO-friendly title for this image.",
    MetadataKind.FILENAME: "Generate a short, SEO-friendly filename based on this image.",
}

DEFAULT_SYSTEM_MESSAGES: Dict[MetadataKind, str] = {
    MetadataKind.ALT: (
        "You are an accessibility expert. Create concise, descriptive alt text "
        "under 125 characters. Focus on what's meaningful about the image and its "
        "purpose. Be objective and specific."
    ),
    MetadataKind.TITLE: (
        "You are a content writer. Create ONE SEO-friendly, descriptive title that "
        "captures the main subject and context of the image. Do not provide multiple "
        "options or explanations."
    ),
    MetadataKind.FILENAME: (
        "You are a file naming expert. Generate concise, descriptive filenames "
        "without extensions. Use only alphanumeric characters and hyphens."
    ),
}

# (prefix, suffix) wrapped around the keywords
DEFAULT_CONTEXT_TEMPLATES: Dict[MetadataKind, Tuple[str, str]] = {
    MetadataKind.ALT: (
        "Context: This image shows ",
        ". Incorporate this context naturally into your description. ",
    ),
    MetadataKind.TITLE: (
        "Context: This image shows ",
        ". Use this context to create a more specific and relevant title. ",
    ),
    MetadataKind.FILENAME: (
        "Context: ",
        ". Use this context for the filename but keep it concise.",
    ),
}


class PromptComposer:
    """Builds the system message and user prompt for a metadata kind."""

    def __init__(self, config: Optional[GenerationConfig] = None):
        self.config = config or GenerationConfig()

    def system_message(self, kind: MetadataKind) -> str:
        kind = MetadataKind(kind)
        return self.config.for_kind(kind).system_message.resolve(DEFAULT_SYSTEM_MESSAGES[kind])

    def base_prompt(self, kind: MetadataKind) -> str:
        kind = MetadataKind(kind)
        return self.config.for_kind(kind).base_prompt.resolve(DEFAULT_BASE_PROMPTS[kind])

    def context_templates(self, kind: MetadataKind) -> Tuple[str, str]:
        """Get the (prefix, suffix) pair wrapped around keywords."""
        kind = MetadataKind(kind)
        kind_config = self.config.for_kind(kind)
        default_prefix, default_suffix = DEFAULT_CONTEXT_TEMPLATES[kind]
        return (
            kind_config.context_prefix.resolve(default_prefix, allow_empty=True),
            kind_config.context_suffix.resolve(default_suffix, allow_empty=True),
        )

    def user_prompt(self, kind: MetadataKind, keywords: str = "") -> str:
        """Build the user prompt, injecting keyword context when present.

        Args:
            kind: Metadata kind.
            keywords: Free-text keywords; whitespace-only counts as absent.

        Returns:
            ``prefix + keywords + suffix + base_prompt`` or the bare base prompt.
        """
        base = self.base_prompt(kind)
        clean_keywords = (keywords or "").strip()
        if not clean_keywords:
            return base

        prefix, suffix = self.context_templates(kind)
        return prefix + clean_keywords + suffix + base

    def compose(self, kind: MetadataKind, keywords: str = "") -> PromptBundle:
        """Build a fresh prompt bundle for one request."""
        kind = MetadataKind(kind)
        bundle = PromptBundle(
            system_message=self.system_message(kind),
            user_prompt=self.user_prompt(kind, keywords),
        )
        if not (keywords or "").strip():
            logger.debug(f"[{kind.value}] No keywords provided, using base prompt")
        logger.debug(f"[{kind.value}] Prompt preview: {bundle.user_prompt[:200]}")
        return bundle
