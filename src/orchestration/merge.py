"""Merge engine - combine structured model results into one MergedResult.

Strategies:
- consensus: confidence-weighted intent vote; the winning intent's
  responses build the summary (deduplicated sentences, at most five).
- cooperative: later responses build on earlier ones, so the chain's
  summaries are concatenated and the last response decides the intent.

Every function here is pure and deterministic: identical inputs give an
identical MergedResult.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from src.core.constants import CONFIDENCE_ROUND_DIGITS
from src.core.text_processing import split_sentences
from src.models.requests import Strategy
from src.models.responses import Intent, MergedResult, StructuredModelResult


# =============================================================================
# Constants
# =============================================================================

# Tie-break order when two intents accumulate equal confidence
INTENT_PRIORITY: Final[dict[Intent, int]] = {
    Intent.ANSWER: 3,
    Intent.CLARIFICATION: 2,
    Intent.REFUSAL: 1,
    Intent.UNKNOWN: 0,
}

MAX_SUMMARY_SENTENCES: Final[int] = 5


# =============================================================================
# Helpers
# =============================================================================


def _mean_confidence(responses: Sequence[StructuredModelResult]) -> float:
    total = sum(r.confidence for r in responses)
    return round(total / max(len(responses), 1), CONFIDENCE_ROUND_DIGITS)


def tally_intents(responses: Sequence[StructuredModelResult]) -> dict[Intent, float]:
    """Sum confidence per intent, keyed in order of first appearance."""
    scores: dict[Intent, float] = {}
    for response in responses:
        scores[response.intent] = scores.get(response.intent, 0.0) + response.confidence
    return scores


def pick_winning_intent(scores: dict[Intent, float]) -> Intent:
    """Return the intent with the highest score, ties broken by INTENT_PRIORITY."""
    if not scores:
        return Intent.ANSWER
    return max(scores, key=lambda intent: (scores[intent], INTENT_PRIORITY[intent]))


def build_consensus_summary(summaries: Sequence[str]) -> str:
    """Join up to five unique sentences taken from summaries in order.

    Sentences are compared case-insensitively. When no sentence is found
    the first summary is returned unchanged.
    """
    if not summaries:
        return ""

    seen: set[str] = set()
    sentences: list[str] = []

    for summary in summaries:
        for sentence in split_sentences(summary):
            key = sentence.lower()
            if key in seen:
                continue
            seen.add(key)
            sentences.append(sentence)
            if len(sentences) == MAX_SUMMARY_SENTENCES:
                return " ".join(sentences)

    if not sentences:
        return summaries[0]

    return " ".join(sentences)


def first_non_empty(outputs: Sequence[str]) -> str:
    """Return the first output with visible text, else the first output.

    Raises:
        ValueError: If outputs is empty.
    """
    if not outputs:
        raise ValueError("No outputs to merge")
    return next((o for o in outputs if o.strip()), outputs[0])


# =============================================================================
# Strategies
# =============================================================================


def merge_consensus(responses: Sequence[StructuredModelResult]) -> MergedResult:
    """Merge by confidence-weighted intent vote."""
    if not responses:
        return MergedResult()

    winning_intent = pick_winning_intent(tally_intents(responses))

    winners = sorted(
        (r for r in responses if r.intent == winning_intent),
        key=lambda r: r.confidence,
        reverse=True,
    )

    summary = build_consensus_summary([w.summary for w in winners])
    if not summary:
        summary = winners[0].summary if winners else ""
    if not summary:
        summary = responses[0].summary

    return MergedResult(
        summary=summary,
        intent=winning_intent,
        confidence=_mean_confidence(winners),
        needs_clarification=winning_intent == Intent.CLARIFICATION,
        supporting_models=[w.model for w in winners],
        responses=list(responses),
    )


def merge_cooperative(responses: Sequence[StructuredModelResult]) -> MergedResult:
    """Merge a sequential chain; the last response decides the intent."""
    if not responses:
        return MergedResult()

    last = responses[-1]
    summary = " ".join(r.summary.strip() for r in responses if r.summary.strip())

    return MergedResult(
        summary=summary or last.summary,
        intent=last.intent,
        confidence=_mean_confidence(responses),
        needs_clarification=last.intent == Intent.CLARIFICATION,
        supporting_models=[r.model for r in responses],
        responses=list(responses),
    )


def merge(
    strategy: Strategy | str,
    responses: Sequence[StructuredModelResult],
) -> MergedResult:
    """Merge responses under the given strategy.

    Args:
        strategy: consensus or cooperative.
        responses: Structured results in request order.

    Returns:
        MergedResult. Empty input gives a zero-value result.
    """
    if Strategy(strategy) == Strategy.COOPERATIVE:
        return merge_cooperative(responses)
    return merge_consensus(responses)
