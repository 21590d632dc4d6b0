"""Configuration models for prompts and fallback templates.

Every configurable string can be left in ``default`` mode, which always uses
the built-in text, or switched to ``custom`` mode with an override value.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from picmeta.models.generation import MetadataKind


class TextOverride(BaseModel):
    """A string setting toggled between the built-in default and a custom value."""

    mode: Literal["default", "custom"] = Field(default="default")
    value: Optional[str] = Field(default=None, description="Custom text, used in custom mode")

    def resolve(self, default: str, allow_empty: bool = False) -> str:
        """Return the effective text for this setting.

        A custom override without a value resolves to the default. A blank
        value also resolves to the default unless ``allow_empty`` is set, in
        which case it is returned as-is.
        """
        if self.mode == "default" or self.value is None:
            return default
        if not allow_empty and not self.value.strip():
            return default
        return self.value


class KindPromptConfig(BaseModel):
    """Prompt-related overrides for one metadata kind."""

    base_prompt: TextOverride = Field(default_factory=TextOverride)
    system_message: TextOverride = Field(default_factory=TextOverride)
    context_prefix: TextOverride = Field(default_factory=TextOverride)
    context_suffix: TextOverride = Field(default_factory=TextOverride)
    copy_suffix: TextOverride = Field(default_factory=TextOverride)


class FallbackTemplates(BaseModel):
    """Templates used when no usable AI answer exists."""

    title_keywords: TextOverride = Field(default_factory=TextOverride)
    title_default: TextOverride = Field(default_factory=TextOverride)
    alt_keywords: TextOverride = Field(default_factory=TextOverride)
    alt_default: TextOverride = Field(default_factory=TextOverride)
    alt_with_title: TextOverride = Field(default_factory=TextOverride)
    filename_keywords: TextOverride = Field(default_factory=TextOverride)
    filename_default: TextOverride = Field(default_factory=TextOverride)


class GenerationConfig(BaseModel):
    """All text configuration consumed by prompt composition and fallback synthesis."""

    alt: KindPromptConfig = Field(default_factory=KindPromptConfig)
    title: KindPromptConfig = Field(default_factory=KindPromptConfig)
    filename: KindPromptConfig = Field(default_factory=KindPromptConfig)
    fallback: FallbackTemplates = Field(default_factory=FallbackTemplates)

    def for_kind(self, kind: MetadataKind) -> KindPromptConfig:
        """Get the prompt configuration for a metadata kind."""
        return getattr(self, MetadataKind(kind).value)
