"""Response classifier - raw model text → StructuredModelResult.

Turns one raw response into a judgement the merge engine can weigh:

- intent: keyword heuristics (refusal checked first, then clarification)
- summary: whitespace-normalized text, or its first sentence when long
- confidence: base value per intent, nudged by response length

classify() is a pure function of its inputs: no state, no I/O, never raises.
"""

from __future__ import annotations

from typing import Final

from src.core.text_processing import first_sentence, normalize_whitespace, truncate
from src.models.responses import Intent, StructuredModelResult


# =============================================================================
# Constants
# =============================================================================

REFUSAL_KEYWORDS: Final[tuple[str, ...]] = (
    "cannot",
    "can't",
    "sorry",
    "unable",
    "not able",
    "refuse",
    "not allowed",
)

CLARIFICATION_KEYWORDS: Final[tuple[str, ...]] = (
    "clarify",
    "clarification",
    "could you provide",
    "can you provide",
    "please specify",
    "need more information",
    "i'm not sure what you're trying",
)

SUMMARY_MAX_CHARS: Final[int] = 280

BASE_CONFIDENCE: Final[dict[Intent, float]] = {
    Intent.ANSWER: 0.70,
    Intent.CLARIFICATION: 0.55,
    Intent.REFUSAL: 0.45,
    Intent.UNKNOWN: 0.40,
}

LONG_RESPONSE_CHARS: Final[int] = 400
LONG_RESPONSE_BONUS: Final[float] = 0.05
SHORT_RESPONSE_CHARS: Final[int] = 120
SHORT_RESPONSE_PENALTY: Final[float] = 0.10

MIN_CONFIDENCE: Final[float] = 0.20
MAX_CONFIDENCE: Final[float] = 0.95


# =============================================================================
# Classification Functions
# =============================================================================


def classify_intent(text: str) -> Intent:
    """Classify the purpose of a response.

    Refusal keywords win over clarification keywords when both occur.

    Example:
        >>> classify_intent("Sorry, could you clarify?")
        <Intent.REFUSAL: 'refusal'>
    """
    lower = text.lower()

    if any(keyword in lower for keyword in REFUSAL_KEYWORDS):
        return Intent.REFUSAL

    if any(keyword in lower for keyword in CLARIFICATION_KEYWORDS) or (
        "?" in lower and "please" in lower
    ):
        return Intent.CLARIFICATION

    if not lower.strip():
        return Intent.UNKNOWN

    return Intent.ANSWER


def summarize(text: str) -> str:
    """Summarize a response in at most one sentence when it is long.

    Text up to SUMMARY_MAX_CHARS (after whitespace normalization) is
    returned as is. Longer text is cut to its first sentence, or
    truncated with an ellipsis when it has no sentence boundary.
    """
    normalized = normalize_whitespace(text)
    if len(normalized) <= SUMMARY_MAX_CHARS:
        return normalized

    sentence = first_sentence(normalized)
    if sentence:
        return sentence

    return truncate(normalized, SUMMARY_MAX_CHARS)


def estimate_confidence(intent: Intent, text: str) -> float:
    """Estimate confidence from intent and raw length, clamped to [0.20, 0.95]."""
    confidence = BASE_CONFIDENCE[intent]

    if len(text) > LONG_RESPONSE_CHARS:
        confidence += LONG_RESPONSE_BONUS
    elif len(text) < SHORT_RESPONSE_CHARS:
        confidence -= SHORT_RESPONSE_PENALTY

    return min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, confidence))


def classify(model: str, raw: str) -> StructuredModelResult:
    """Build the structured judgement for one model response.

    Args:
        model: Model that produced the response.
        raw: Raw response text.

    Returns:
        StructuredModelResult with summary, intent and confidence.
    """
    intent = classify_intent(raw)

    return StructuredModelResult(
        model=model,
        raw=raw,
        summary=summarize(raw),
        intent=intent,
        confidence=estimate_confidence(intent, raw),
    )
