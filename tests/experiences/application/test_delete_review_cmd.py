"""Application tests for DeleteReview command handler."""

import json

import pytest
from experiences.exceptions import InvalidStateError
from experiences.review.deletion import DeleteReview
from experiences.review.moderation import ModerateReview
from experiences.review.review import Review
from experiences.review.submission import SubmitReview
from protean import current_domain
from protean.exceptions import ObjectNotFoundError


def _submit(interview_id, **overrides):
    defaults = {
        "interview_id": interview_id,
        "rating": 3,
        "comment": "Still waiting to hear back.",
        "author_id": "user-del",
    }
    defaults.update(overrides)
    return current_domain.process(SubmitReview(**defaults), asynchronous=False)


def _delete(review_id, caller_id="user-del"):
    current_domain.process(DeleteReview(review_id=review_id, caller_id=caller_id), asynchronous=False)


class TestDeleteReviewCommand:
    def test_pending_review_removed(self, interview_id):
        review_id = _submit(interview_id)
        _delete(review_id)
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Review).get(review_id)

    def test_rejected_review_removed(self, interview_id):
        review_id = _submit(interview_id)
        current_domain.process(
            ModerateReview(review_id=review_id, moderator_id="mod-001", action="REJECT"),
            asynchronous=False,
        )
        _delete(review_id)
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Review).get(review_id)

    def test_approved_review_is_permanent(self, interview_id):
        review_id = _submit(
            interview_id,
            comment="Well run loop with a realistic pairing exercise and quick feedback afterwards.",
            tag_keys=json.dumps(["WELL_ORGANIZED"]),
            round_type="Pairing",
        )
        with pytest.raises(InvalidStateError) as exc:
            _delete(review_id)
        assert "Approved reviews cannot be deleted" in str(exc.value)
        assert current_domain.repository_for(Review).get(review_id) is not None

    def test_guest_review_cannot_be_deleted(self, interview_id):
        review_id = _submit(interview_id, author_id=None)
        with pytest.raises(InvalidStateError):
            _delete(review_id)

    def test_other_user_cannot_delete(self, interview_id):
        review_id = _submit(interview_id)
        with pytest.raises(InvalidStateError):
            _delete(review_id, caller_id="user-other")
        assert current_domain.repository_for(Review).get(review_id) is not None

    def test_unknown_review(self):
        with pytest.raises(ObjectNotFoundError):
            _delete("missing-review")


class TestDeleteRacingApproval:
    def test_approval_after_load_blocks_deletion(self, interview_id):
        from experiences.contribution.ledger import has_unlocked

        review_id = _submit(interview_id)
        repo = current_domain.repository_for(Review)
        stale = repo.get(review_id)

        current_domain.process(
            ModerateReview(review_id=review_id, moderator_id="mod-001", action="APPROVE"),
            asynchronous=False,
        )

        stale.mark_deleted("user-del")
        with pytest.raises(InvalidStateError) as exc:
            repo.delete_unless_approved(stale)
        assert "Approved reviews cannot be deleted" in str(exc.value)

        assert repo.get(review_id).status == "APPROVED"
        assert has_unlocked("user-del", interview_id) is True

    def test_rejection_after_load_still_allows_deletion(self, interview_id):
        review_id = _submit(interview_id)
        repo = current_domain.repository_for(Review)
        stale = repo.get(review_id)

        current_domain.process(
            ModerateReview(review_id=review_id, moderator_id="mod-001", action="REJECT"),
            asynchronous=False,
        )

        stale.mark_deleted("user-del")
        repo.delete_unless_approved(stale)
        with pytest.raises(ObjectNotFoundError):
            repo.get(review_id)
