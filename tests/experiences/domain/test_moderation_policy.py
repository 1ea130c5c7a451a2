"""Tests for the moderation policy — auto-approval bar and manual-review triggers."""

import pytest
from experiences.review.policy import (
    FlagReason,
    ModerationDecision,
    contains_strong_negative_language,
    evaluate,
    is_auto_approvable,
    manual_review_reasons,
    requires_manual_review,
)
from experiences.review.review import Review

DETAILED_COMMENT = "The panel asked fair questions about system design and explained the next steps."


def _make_review(**overrides):
    defaults = {
        "interview_id": "int-001",
        "rating": 4,
        "comment": DETAILED_COMMENT,
        "tag_keys": ["WELL_ORGANIZED"],
        "round_type": "Technical",
    }
    defaults.update(overrides)
    return Review.submit(**defaults)


class TestAutoApprovalEligibility:
    def test_complete_review_is_eligible(self):
        assert is_auto_approvable(_make_review()) is True

    def test_no_tags_not_eligible(self):
        assert is_auto_approvable(_make_review(tag_keys=[])) is False

    def test_missing_round_type_not_eligible(self):
        assert is_auto_approvable(_make_review(round_type=None)) is False

    def test_blank_round_type_not_eligible(self):
        assert is_auto_approvable(_make_review(round_type="   ")) is False

    def test_49_char_comment_not_eligible(self):
        assert is_auto_approvable(_make_review(comment="x" * 49)) is False

    def test_50_char_comment_eligible(self):
        assert is_auto_approvable(_make_review(comment="x" * 50)) is True


class TestManualReviewTriggers:
    def test_low_rating_with_initials_flagged(self):
        review = _make_review(rating=2, interviewer_initials="JD")
        assert manual_review_reasons(review) == (FlagReason.LOW_RATING_WITH_INTERVIEWER,)

    def test_rating_one_with_initials_flagged(self):
        assert requires_manual_review(_make_review(rating=1, interviewer_initials="JD")) is True

    def test_rating_three_with_initials_not_flagged(self):
        assert requires_manual_review(_make_review(rating=3, interviewer_initials="JD")) is False

    def test_low_rating_without_initials_not_flagged(self):
        assert requires_manual_review(_make_review(rating=1)) is False

    def test_negative_language_flagged(self):
        review = _make_review(comment="The recruiter was rude to me and the panel never explained anything.")
        assert manual_review_reasons(review) == (FlagReason.STRONG_NEGATIVE_LANGUAGE,)

    def test_both_triggers_reported(self):
        review = _make_review(
            rating=1,
            interviewer_initials="JD",
            comment="the interviewer was hostile from the first minute to the very last question.",
        )
        assert set(manual_review_reasons(review)) == {
            FlagReason.LOW_RATING_WITH_INTERVIEWER,
            FlagReason.STRONG_NEGATIVE_LANGUAGE,
        }


class TestNegativeLanguageDetection:
    @pytest.mark.parametrize(
        "text",
        [
            "it was terrible",
            "RUDE people",
            "constant harassment",
            "racists on the panel",
            "the worst experience",
        ],
    )
    def test_detects_stems_and_inflections(self, text):
        assert contains_strong_negative_language(text) is True

    @pytest.mark.parametrize("text", ["pleasant and quick", "fair questions", ""])
    def test_clean_text_not_detected(self, text):
        assert contains_strong_negative_language(text) is False

    def test_none_not_detected(self):
        assert contains_strong_negative_language(None) is False


class TestEvaluate:
    def test_eligible_and_clean_auto_approves(self):
        verdict = evaluate(_make_review())
        assert verdict.decision == ModerationDecision.AUTO_APPROVE
        assert verdict.approves is True
        assert verdict.reasons == ()

    def test_flagging_wins_over_eligibility(self):
        verdict = evaluate(_make_review(rating=2, interviewer_initials="JD"))
        assert verdict.decision == ModerationDecision.FLAGGED
        assert verdict.eligible is True
        assert verdict.approves is False

    def test_ineligible_and_clean_stays_pending(self):
        verdict = evaluate(_make_review(tag_keys=[]))
        assert verdict.decision == ModerationDecision.PENDING
        assert verdict.eligible is False

    def test_bare_short_review_stays_pending(self):
        review = _make_review(tag_keys=[], round_type=None, comment="short")
        review.apply_moderation_policy()
        assert review.status == "PENDING"
        assert review.approved_at is None

    def test_evaluation_does_not_change_review(self):
        review = _make_review()
        evaluate(review)
        assert review.status == "PENDING"
