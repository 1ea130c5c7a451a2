"""Application tests for insights reads and the unlock gate."""

import json

import pytest
from experiences.insights.aggregation import FullInsights, TeaserInsights
from experiences.insights.queries import get_insights, get_rating_breakdown, get_weighted_rating, unlock_status
from experiences.review.moderation import ModerateReview
from experiences.review.submission import SubmitReview
from protean import current_domain
from protean.exceptions import ObjectNotFoundError

PUBLISHABLE_COMMENT = "Three short rounds, each interviewer knew the role and the offer arrived within a week."


def _submit(interview_id, **overrides):
    defaults = {
        "interview_id": interview_id,
        "rating": 4,
        "comment": PUBLISHABLE_COMMENT,
        "tag_keys": json.dumps(["PROMPT_FEEDBACK", "WELL_ORGANIZED"]),
        "round_type": "Onsite",
    }
    defaults.update(overrides)
    return current_domain.process(SubmitReview(**defaults), asynchronous=False)


def _submit_pending(interview_id, **overrides):
    return _submit(interview_id, tag_keys=None, **overrides)


class TestUnlockGate:
    def test_anonymous_reader_gets_teaser(self, interview_id):
        _submit(interview_id)
        insights = get_insights(interview_id)
        assert isinstance(insights, TeaserInsights)
        assert insights.locked is True
        assert insights.total_reviews == 1
        assert insights.available_insights_count == 2

    def test_reader_without_contribution_gets_teaser(self, interview_id):
        _submit(interview_id, author_id="user-a")
        assert isinstance(get_insights(interview_id, "user-b"), TeaserInsights)

    def test_contributor_gets_full_insights(self, interview_id):
        _submit(interview_id, author_id="user-a")
        insights = get_insights(interview_id, "user-a")
        assert isinstance(insights, FullInsights)
        assert insights.locked is False
        assert insights.company_name == "Acme"
        assert insights.tag_distribution == {"PROMPT_FEEDBACK": 100.0, "WELL_ORGANIZED": 100.0}

    def test_pending_review_does_not_unlock(self, interview_id):
        _submit_pending(interview_id, author_id="user-a")
        assert isinstance(get_insights(interview_id, "user-a"), TeaserInsights)
        assert unlock_status(interview_id, "user-a") == {"interview_id": interview_id, "unlocked": False}

    def test_unlock_status_after_approval(self, interview_id):
        review_id = _submit_pending(interview_id, author_id="user-a")
        current_domain.process(
            ModerateReview(review_id=review_id, moderator_id="mod-001", action="APPROVE"),
            asynchronous=False,
        )
        assert unlock_status(interview_id, "user-a")["unlocked"] is True

    def test_unknown_interview(self):
        with pytest.raises(ObjectNotFoundError):
            get_insights("missing-interview", "user-a")


class TestApprovedOnly:
    def test_pending_and_rejected_reviews_excluded(self, interview_id):
        _submit(interview_id, rating=5, author_id="user-a")
        _submit_pending(interview_id, rating=1)
        rejected = _submit_pending(interview_id, rating=1)
        current_domain.process(
            ModerateReview(review_id=rejected, moderator_id="mod-001", action="REJECT"),
            asynchronous=False,
        )

        insights = get_insights(interview_id, "user-a")
        assert insights.total_reviews == 1
        assert get_rating_breakdown(interview_id) == {"1": 0, "2": 0, "3": 0, "4": 0, "5": 1}
        assert get_weighted_rating(interview_id) == pytest.approx(5.0)

    def test_no_approved_reviews(self, interview_id):
        _submit_pending(interview_id, author_id="user-a")
        assert get_weighted_rating(interview_id) is None

    def test_empty_full_insights(self, interview_id):
        from experiences.contribution.ledger import record_contribution

        record_contribution("user-a", interview_id, "rev-elsewhere")
        insights = get_insights(interview_id, "user-a")
        assert isinstance(insights, FullInsights)
        assert insights.total_reviews == 0
        assert insights.weighted_rating is None


class TestWeightedRatingRead:
    def test_recent_complete_reviews_weigh_equally(self, interview_id):
        _submit(interview_id, rating=5)
        _submit(interview_id, rating=3)
        assert get_weighted_rating(interview_id) == pytest.approx(4.0)

    def test_bare_review_weighs_less_than_complete_one(self, interview_id):
        _submit(interview_id, rating=5)
        bare = _submit_pending(interview_id, rating=2, round_type=None)
        current_domain.process(
            ModerateReview(review_id=bare, moderator_id="mod-001", action="APPROVE"),
            asynchronous=False,
        )
        # Weights 4 and 2; the plain mean would be 3.5
        assert get_weighted_rating(interview_id) == pytest.approx((5 * 4 + 2 * 2) / 6)
