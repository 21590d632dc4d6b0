"""Tests for candidate extraction."""

from picmeta.services.extraction import CANDIDATE_RULES, extract_candidate, strip_bold


class TestExtractCandidate:
    """Tests for extract_candidate."""

    def test_rule_count(self):
        """The cascade has eight ordered rules."""
        assert len(CANDIDATE_RULES) == 8

    def test_section_header_bullet(self):
        """A labelled section header takes its first bullet."""
        text = (
            "Here are some options:\n\n"
            "**Short & Sweet:**\n* Golden Peaks at Dusk\n\n"
            "**More Descriptive:**\n* Golden light falling on snowy alpine peaks"
        )

        result = extract_candidate(text)

        assert result.text == "Golden Peaks at Dusk"
        assert result.pattern_index == 1

    def test_intro_with_bold_bullet(self):
        """An introduction followed by bold bullets takes the bold text."""
        text = (
            "Here are three title suggestions:\n"
            "- **Mountain Sunset Glow**\n"
            "- **Alpine Evening**"
        )

        result = extract_candidate(text)

        assert result.text == "Mountain Sunset Glow"
        assert result.pattern_index == 2

    def test_intro_with_plain_bullet(self):
        """An introduction followed by plain bullets takes the first item."""
        text = "Here are some options:\n- Mountain Sunset Glow\n- Alpine Evening"

        result = extract_candidate(text)

        assert result.text == "Mountain Sunset Glow"
        assert result.pattern_index == 3

    def test_numbered_list(self):
        """A numbered list takes the first item."""
        result = extract_candidate("1. Mountain Sunset\n2. Golden Hour View")

        assert result.text == "Mountain Sunset"
        assert result.pattern_index == 4

    def test_numbered_list_with_bold(self):
        """Bold markers are stripped from the chosen item."""
        result = extract_candidate("1. **Mountain Sunset**\n2. **Golden Hour View**")

        assert result.text == "Mountain Sunset"

    def test_bold_bullet_list(self):
        """A bold bullet at line start takes the bold text."""
        result = extract_candidate("* **Mountain Sunset**\n* **Golden Hour View**")

        assert result.text == "Mountain Sunset"
        assert result.pattern_index == 5

    def test_plain_bullet_list(self):
        """A plain bullet list takes the first item."""
        result = extract_candidate("- Mountain Sunset Glow\n- Alpine Evening")

        assert result.text == "Mountain Sunset Glow"
        assert result.pattern_index == 6

    def test_unicode_bullet_list(self):
        """Unicode bullets are recognised."""
        result = extract_candidate("• Mountain Sunset Glow\n• Alpine Evening")

        assert result.text == "Mountain Sunset Glow"

    def test_alternative_marker(self):
        """Text before an 'Alternative' marker is kept."""
        result = extract_candidate("Mountain sunset over the lake\nAlternative: Lake at dusk")

        assert result.text == "Mountain sunset over the lake"
        assert result.pattern_index == 7

    def test_choice_marker(self):
        """Text before a 'Choice N' marker is kept."""
        result = extract_candidate("Golden hour on the peaks\nChoice 2: Alpine dusk")

        assert result.text == "Golden hour on the peaks"
        assert result.pattern_index == 8

    def test_single_sentence_unchanged(self):
        """Plain single-sentence text passes through unchanged."""
        result = extract_candidate("A scenic mountain view at sunset.")

        assert result.text == "A scenic mountain view at sunset."
        assert result.pattern_index is None

    def test_first_of_multiple_sentences(self):
        """With several sentences the first one is used."""
        result = extract_candidate(
            "A red sports car parked on a street. The sun is setting behind it."
        )

        assert result.text == "A red sports car parked on a street."
        assert result.pattern_index is None

    def test_short_candidates_are_skipped(self):
        """Candidates of five characters or fewer do not qualify."""
        text = "1. Hi\n2. Mountain"

        result = extract_candidate(text)

        assert result.text == text
        assert result.pattern_index is None

    def test_short_first_sentence_keeps_original(self):
        """A first sentence of five characters or fewer keeps the original text."""
        text = "Wow. What a view over the mountains"

        assert extract_candidate(text).text == text


class TestStripBold:
    """Tests for strip_bold."""

    def test_removes_markers(self):
        assert strip_bold("**Mountain** at **Dusk**") == "Mountain at Dusk"

    def test_plain_text(self):
        assert strip_bold("  Mountain  ") == "Mountain"
