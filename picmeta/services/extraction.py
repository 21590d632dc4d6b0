"""Isolate a single literal value from a free-form model reply.

Models often answer with several labelled options, bullet or numbered lists,
or a preamble such as "Here are three titles:". The rules below are tried in
order and the first one yielding a usable candidate wins. The order matters:
earlier rules are more specific than later ones.
"""

import logging
import re

from picmeta.models.generation import ExtractionResult

logger = logging.getLogger(__name__)

MIN_CANDIDATE_LENGTH = 5

CANDIDATE_RULES = (
    # 1. Section header followed by a bullet ("**Short & Sweet:**\n* ...")
    re.compile(
        r"\*\*(?:Short & Sweet|More Descriptive|Keyword Focused):\*\*\s*\n\s*\*\s*(.*?)(?=\n|$)",
        re.IGNORECASE | re.DOTALL,
    ),
    # 2. "Here are ... titles:" followed by a bold bullet
    re.compile(
        r"Here are.*?(?:title|option|suggestion)s?.*?:\s*\n\s*[\*\-•]\s*\*\*(.*?)\*\*",
        re.IGNORECASE | re.DOTALL,
    ),
    # 3. "Here are ... titles:" followed by a plain bullet
    re.compile(
        r"Here are.*?(?:title|option|suggestion)s?.*?:\s*\n\s*[\*\-•]\s*(.*?)(?=\n|$)",
        re.IGNORECASE | re.DOTALL,
    ),
    # 4. Numbered list
    re.compile(r"^(?:\d+\.?\s*)(.*?)(?=\n\d+\.|\n[A-Z]|\n-|\n\*|$)", re.DOTALL),
    # 5. Bold bullet at line start
    re.compile(r"^\s*[\*\-•]\s*\*\*(.*?)\*\*(?=\n|$)", re.MULTILINE),
    # 6. Plain bullet list
    re.compile(r"^\s*[•\-\*]\s*(.*?)(?=\n[•\-\*]|\n\d+\.|\n[A-Z]|$)", re.DOTALL),
    # 7. Text before an "Alternative:" / "Or:" style marker
    re.compile(
        r"^(.*?)(?=\n(?:Alternative|Another|Option|Or:|Also:|Additionally:))",
        re.DOTALL,
    ),
    # 8. Text before "Option 2" / "Alternative 2" / "Choice 2"
    re.compile(r"^(.*?)(?=\n(?:Option \d+|Alternative \d+|Choice \d+))", re.DOTALL),
)

_BOLD = re.compile(r"\*\*(.*?)\*\*")
_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")


def strip_bold(text: str) -> str:
    """Remove markdown bold markers, keeping the enclosed text."""
    return _BOLD.sub(r"\1", text).strip()


def extract_candidate(text: str) -> ExtractionResult:
    """Reduce a model reply to exactly one candidate value.

    Args:
        text: Non-refusal, non-empty reply text.

    Returns:
        The chosen candidate and the number of the rule that produced it.
    """
    content = (text or "").strip()

    for index, rule in enumerate(CANDIDATE_RULES, start=1):
        match = rule.search(content)
        if not match:
            continue
        candidate = strip_bold(match.group(1).strip())
        if len(candidate) > MIN_CANDIDATE_LENGTH:
            logger.debug(f"Candidate rule {index} matched, using: {candidate[:100]}")
            return ExtractionResult(text=candidate, pattern_index=index)

    sentences = _SENTENCE_BREAK.split(content)
    if len(sentences) > 1:
        first = sentences[0].strip()
        if len(first) > MIN_CANDIDATE_LENGTH:
            logger.debug(f"Multiple sentences detected, using first: {first[:100]}")
            return ExtractionResult(text=first)

    return ExtractionResult(text=content)
