"""Unit tests for the response classifier.

Tests verify:
- Intent keywords, with refusal checked before clarification
- Summary normalization and long-text handling
- Confidence base values, length adjustments and clamping
"""

import pytest

from src.models.responses import Intent
from src.orchestration.classifier import (
    MAX_CONFIDENCE,
    MIN_CONFIDENCE,
    SUMMARY_MAX_CHARS,
    classify,
    classify_intent,
    estimate_confidence,
    summarize,
)


MEDIUM_TEXT = "x" * 200


# =============================================================================
# Intent
# =============================================================================


class TestClassifyIntent:
    """Test classify_intent()."""

    @pytest.mark.parametrize(
        "text",
        [
            "I cannot help with that.",
            "Sorry, no.",
            "I CAN'T do it",
            "I am unable to comply",
            "I'm not able to answer",
            "I refuse.",
            "That is not allowed here.",
        ],
    )
    def test_refusal_keywords(self, text: str) -> None:
        assert classify_intent(text) == Intent.REFUSAL

    @pytest.mark.parametrize(
        "text",
        [
            "Can you clarify the question",
            "I need clarification",
            "Could you provide an example",
            "Can you provide the file",
            "Please specify the units",
            "I need more information first",
            "I'm not sure what you're trying to do",
        ],
    )
    def test_clarification_keywords(self, text: str) -> None:
        assert classify_intent(text) == Intent.CLARIFICATION

    def test_question_with_please_is_clarification(self) -> None:
        assert classify_intent("Which one? Please tell me.") == Intent.CLARIFICATION

    def test_question_without_please_is_answer(self) -> None:
        assert classify_intent("Why not? The answer is 42.") == Intent.ANSWER

    def test_refusal_beats_clarification(self) -> None:
        assert classify_intent("Sorry, could you clarify?") == Intent.REFUSAL

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_is_unknown(self, text: str) -> None:
        assert classify_intent(text) == Intent.UNKNOWN

    def test_plain_text_is_answer(self) -> None:
        assert classify_intent("Paris is the capital of France.") == Intent.ANSWER


# =============================================================================
# Summary
# =============================================================================


class TestSummarize:
    """Test summarize()."""

    def test_short_text_normalized(self) -> None:
        assert summarize("  The   answer\n is 42. ") == "The answer is 42."

    def test_exactly_limit_kept(self) -> None:
        text = "a" * SUMMARY_MAX_CHARS
        assert summarize(text) == text

    def test_long_text_cut_to_first_sentence(self) -> None:
        text = "First sentence here. " + "More words follow. " * 30
        assert summarize(text) == "First sentence here."

    def test_long_text_without_boundary_truncated(self) -> None:
        text = "word " * 100
        summary = summarize(text)

        assert summary.endswith("...")
        assert len(summary) <= SUMMARY_MAX_CHARS + 3


# =============================================================================
# Confidence
# =============================================================================


class TestEstimateConfidence:
    """Test estimate_confidence()."""

    @pytest.mark.parametrize(
        ("intent", "expected"),
        [
            (Intent.ANSWER, 0.70),
            (Intent.CLARIFICATION, 0.55),
            (Intent.REFUSAL, 0.45),
            (Intent.UNKNOWN, 0.40),
        ],
    )
    def test_base_values_for_medium_length(self, intent: Intent, expected: float) -> None:
        assert estimate_confidence(intent, MEDIUM_TEXT) == pytest.approx(expected)

    def test_long_response_bonus(self) -> None:
        assert estimate_confidence(Intent.ANSWER, "x" * 401) == pytest.approx(0.75)

    def test_short_response_penalty(self) -> None:
        assert estimate_confidence(Intent.ANSWER, "x" * 119) == pytest.approx(0.60)

    def test_boundaries_unadjusted(self) -> None:
        assert estimate_confidence(Intent.ANSWER, "x" * 120) == pytest.approx(0.70)
        assert estimate_confidence(Intent.ANSWER, "x" * 400) == pytest.approx(0.70)

    def test_clamped_to_range(self) -> None:
        for intent in Intent:
            for text in ("", "x" * 200, "x" * 1000):
                value = estimate_confidence(intent, text)
                assert MIN_CONFIDENCE <= value <= MAX_CONFIDENCE


# =============================================================================
# classify()
# =============================================================================


class TestClassify:
    """Test classify()."""

    def test_refusal_result(self) -> None:
        result = classify("m1", "I cannot help with that.")

        assert result.model == "m1"
        assert result.raw == "I cannot help with that."
        assert result.intent == Intent.REFUSAL
        assert result.confidence == pytest.approx(0.35)

    def test_answer_result(self) -> None:
        result = classify("m2", "Sure, here is the answer: 42.")

        assert result.intent == Intent.ANSWER
        assert result.summary == "Sure, here is the answer: 42."
        assert result.confidence == pytest.approx(0.60)

    def test_empty_response_is_unknown(self) -> None:
        result = classify("m3", "")

        assert result.intent == Intent.UNKNOWN
        assert result.summary == ""
        assert result.confidence == pytest.approx(0.30)

    def test_deterministic(self) -> None:
        assert classify("m1", "Same text.") == classify("m1", "Same text.")
