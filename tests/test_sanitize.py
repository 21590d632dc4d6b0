"""Tests for output sanitization and validation."""

import logging

import pytest

from picmeta.models.generation import MetadataKind
from picmeta.services.sanitize import (
    check_keyword_context,
    is_valid_filename_slug,
    keyword_context_found,
    sanitize,
    slugify,
    strip_image_extension,
    strip_wrapping,
)


class TestStripWrapping:
    """Tests for strip_wrapping."""

    def test_strips_quotes_and_whitespace(self):
        assert strip_wrapping('  "Sunset over the bay"  ') == "Sunset over the bay"

    def test_strips_only_one_quote_layer(self):
        assert strip_wrapping('""Quoted""') == '"Quoted"'

    def test_unbalanced_quote_is_kept(self):
        assert strip_wrapping('"Sunset over the bay') == '"Sunset over the bay'

    def test_strips_code_fence_with_language(self):
        assert strip_wrapping("```text\nMountain view\n```") == "Mountain view"

    def test_strips_bare_code_fence(self):
        assert strip_wrapping("```\nmountain-view\n```") == "mountain-view"


class TestSlugify:
    """Tests for slugify."""

    def test_basic(self):
        assert slugify("Mountain Sunset, Golden Hour!") == "mountain-sunset-golden-hour"

    def test_collapses_runs_and_trims(self):
        assert slugify("--Red   Car__2024--") == "red-car-2024"

    def test_accents_are_transliterated(self):
        assert slugify("Café Crème") == "cafe-creme"

    def test_empty(self):
        assert slugify("!!!") == ""


class TestSanitize:
    """Tests for sanitize."""

    def test_filename_example(self):
        """Quotes, extension and casing are all normalised for filenames."""
        assert sanitize(MetadataKind.FILENAME, '  "Mountain-Sunset.jpg"  ') == "mountain-sunset"

    @pytest.mark.parametrize("extension", [".jpg", ".JPEG", ".png", ".gif", ".webp", ".Bmp"])
    def test_filename_extensions(self, extension):
        assert sanitize(MetadataKind.FILENAME, f"sunset{extension}") == "sunset"

    def test_filename_idempotent(self):
        """Re-sanitizing a slug yields the same slug."""
        slug = sanitize(MetadataKind.FILENAME, "Golden Hour: Alpine Lake (2024).png")

        assert slug == "golden-hour-alpine-lake-2024"
        assert sanitize(MetadataKind.FILENAME, slug) == slug

    def test_alt_keeps_text(self):
        """Alt text is not slugged."""
        assert sanitize(MetadataKind.ALT, '"A dog running on a beach."') == (
            "A dog running on a beach."
        )

    def test_title_keeps_extension_like_text(self):
        """Extension stripping only applies to filenames."""
        assert sanitize(MetadataKind.TITLE, "Sunset.png") == "Sunset.png"

    def test_strip_image_extension_only_at_end(self):
        assert strip_image_extension("photo.jpg.backup") == "photo.jpg.backup"


class TestFilenameBounds:
    """Tests for is_valid_filename_slug."""

    def test_eighty_characters_accepted(self):
        assert is_valid_filename_slug("a" * 80) is True

    def test_eighty_one_characters_rejected(self):
        assert is_valid_filename_slug("a" * 81) is False

    def test_empty_rejected(self):
        assert is_valid_filename_slug("") is False


class TestKeywordContext:
    """Tests for keyword context validation."""

    def test_found(self):
        assert keyword_context_found("Dentist, office", "A dentist greeting a patient") is True

    def test_not_found(self):
        assert keyword_context_found("cat, kitten", "A dog on a beach") is False

    def test_no_keywords(self):
        assert keyword_context_found(" , ", "A dog on a beach") is None

    def test_warning_logged_for_alt(self, caplog):
        """A missing keyword is reported without changing anything."""
        with caplog.at_level(logging.WARNING, logger="picmeta.services.sanitize"):
            found = check_keyword_context(MetadataKind.ALT, "cat", "A dog on a beach")

        assert found is False
        assert "may not include provided context" in caplog.text

    def test_not_checked_for_title(self):
        assert check_keyword_context(MetadataKind.TITLE, "cat", "A dog on a beach") is None
