"""Text Processing Utilities for model response handling.

Whitespace normalization and sentence splitting shared by the response
classifier (summaries) and the merge engine (consensus summaries).
"""

from __future__ import annotations

import re
from typing import Final


# =============================================================================
# Patterns
# =============================================================================

_WHITESPACE_RUN: Final[re.Pattern[str]] = re.compile(r"\s+")

# First run of non-terminator characters closed by a terminator
_FIRST_SENTENCE: Final[re.Pattern[str]] = re.compile(r"[^.!?]+[.!?]")

# Whitespace that directly follows a sentence terminator
_SENTENCE_BOUNDARY: Final[re.Pattern[str]] = re.compile(r"(?<=[.!?])\s+")

ELLIPSIS: Final[str] = "..."


# =============================================================================
# Public API
# =============================================================================


def normalize_whitespace(text: str) -> str:
    """Trim text and collapse every internal whitespace run to one space.

    Examples:
        >>> normalize_whitespace("  The   answer\\n\\nis 42. ")
        'The answer is 42.'
    """
    return _WHITESPACE_RUN.sub(" ", text.strip())


def first_sentence(text: str) -> str | None:
    """Return the first sentence of text, trimmed.

    A sentence is the first run of characters other than ``.``, ``!`` and
    ``?`` that is closed by one of them.

    Returns:
        The sentence, or None when text has no sentence boundary.

    Examples:
        >>> first_sentence("Paris is the capital. It is large.")
        'Paris is the capital.'
        >>> first_sentence("no terminator here") is None
        True
    """
    match = _FIRST_SENTENCE.search(text)
    if match is None:
        return None
    return match.group(0).strip()


def split_sentences(text: str) -> list[str]:
    """Split text on whitespace that follows ``.``, ``!`` or ``?``.

    Empty fragments are dropped and each sentence is trimmed.

    Examples:
        >>> split_sentences("One. Two!  Three? four")
        ['One.', 'Two!', 'Three?', 'four']
    """
    return [part.strip() for part in _SENTENCE_BOUNDARY.split(text) if part.strip()]


def truncate(text: str, limit: int) -> str:
    """Cut text to ``limit`` characters and append an ellipsis marker."""
    return text[:limit].strip() + ELLIPSIS
