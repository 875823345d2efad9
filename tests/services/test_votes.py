# mypy: ignore-errors
# tests/services/test_votes.py
"""Tests for the suggestion vote ledger."""

import pytest
from sqlalchemy import func, select

from hublib.core.errors import ConflictError, InvalidInputError, NotFoundError
from hublib.models import SuggestionVote
from hublib.services import votes as votes_module
from hublib.services.votes import (
    VOTE_ADDED,
    VOTE_CHANGED,
    VOTE_REMOVED,
    cast_vote,
    remove_vote,
    tally_votes,
)


def _vote(db, suggestion, user, vote_type, config, cache=None):
    return cast_vote(
        db,
        suggestion_id=suggestion.id,
        user_id=user.id,
        vote_type=vote_type,
        config=config,
        cache=cache,
    )


def _row_count(db, suggestion):
    return db.scalar(
        select(func.count(SuggestionVote.id)).where(SuggestionVote.suggestion_id == suggestion.id)
    )


def test_same_vote_twice_toggles_off(db_session, owner, other_user, make_suggestion, moderation_config):
    """Casting the same vote again retracts it."""
    suggestion = make_suggestion(owner)

    first = _vote(db_session, suggestion, other_user, "upvote", moderation_config)
    second = _vote(db_session, suggestion, other_user, "upvote", moderation_config)

    assert first.action == VOTE_ADDED
    assert first.suggestion.votes_count == 1
    assert second.action == VOTE_REMOVED
    assert second.suggestion.votes_count == 0
    assert second.tally.user_vote is None
    assert _row_count(db_session, suggestion) == 0


def test_opposite_vote_switches_in_place(db_session, owner, other_user, make_suggestion, moderation_config):
    """Switching direction keeps one row and moves the score by two."""
    suggestion = make_suggestion(owner)

    _vote(db_session, suggestion, other_user, "upvote", moderation_config)
    outcome = _vote(db_session, suggestion, other_user, "downvote", moderation_config)

    assert outcome.action == VOTE_CHANGED
    assert outcome.suggestion.votes_count == -1
    assert outcome.tally.total_upvotes == 0
    assert outcome.tally.total_downvotes == 1
    assert _row_count(db_session, suggestion) == 1


def test_votes_count_matches_ledger(db_session, make_user, owner, make_suggestion, moderation_config):
    """votes_count always equals upvotes minus downvotes."""
    suggestion = make_suggestion(owner)
    voters = [make_user() for _ in range(4)]

    for voter, vote_type in zip(voters, ["upvote", "upvote", "downvote", "upvote"]):
        outcome = _vote(db_session, suggestion, voter, vote_type, moderation_config)

    tally = tally_votes(db_session, suggestion.id, voters[2].id)
    assert outcome.suggestion.votes_count == tally.total_upvotes - tally.total_downvotes == 2
    assert tally.user_vote == "downvote"


def test_fifth_upvote_approves(db_session, make_user, owner, make_suggestion, moderation_config):
    """Approval happens on the vote that reaches the threshold."""
    suggestion = make_suggestion(owner)
    voters = [make_user() for _ in range(5)]

    for voter in voters[:4]:
        outcome = _vote(db_session, suggestion, voter, "upvote", moderation_config)
    assert outcome.suggestion.status == "pending"

    outcome = _vote(db_session, suggestion, voters[4], "upvote", moderation_config)
    assert outcome.status_changed is True
    assert outcome.suggestion.status == "approved"
    assert outcome.suggestion.reviewed_by is None


def test_third_downvote_rejects(db_session, make_user, owner, make_suggestion, moderation_config):
    """Three downvotes with no upvotes rejects."""
    suggestion = make_suggestion(owner)

    for voter in [make_user() for _ in range(3)]:
        outcome = _vote(db_session, suggestion, voter, "downvote", moderation_config)

    assert outcome.suggestion.status == "rejected"


def test_downvotes_with_positive_score_stay_pending(db_session, make_user, owner, make_suggestion, moderation_config):
    """Four upvotes outweigh three downvotes."""
    suggestion = make_suggestion(owner)

    for voter in [make_user() for _ in range(4)]:
        _vote(db_session, suggestion, voter, "upvote", moderation_config)
    for voter in [make_user() for _ in range(3)]:
        outcome = _vote(db_session, suggestion, voter, "downvote", moderation_config)

    assert outcome.suggestion.votes_count == 1
    assert outcome.suggestion.status == "pending"


def test_terminal_suggestion_keeps_status(db_session, make_user, owner, make_suggestion, moderation_config):
    """Votes on an approved suggestion update counts but not the status."""
    suggestion = make_suggestion(owner)
    suggestion.status = "approved"
    db_session.commit()

    for voter in [make_user() for _ in range(3)]:
        outcome = _vote(db_session, suggestion, voter, "downvote", moderation_config)

    assert outcome.suggestion.votes_count == -3
    assert outcome.suggestion.status == "approved"
    assert outcome.status_changed is False


def test_cast_vote_invalidates_cache(db_session, owner, other_user, make_suggestion, moderation_config, cache):
    """A committed vote drops the tally and listing cache entries."""
    suggestion = make_suggestion(owner)

    _vote(db_session, suggestion, other_user, "upvote", moderation_config, cache=cache)

    assert f"suggestion:{suggestion.id}:votes" in cache.keys
    assert "suggestions:*" in cache.patterns


def test_cast_vote_rejects_unknown_type(db_session, owner, make_suggestion, moderation_config):
    """Only upvote and downvote are accepted."""
    suggestion = make_suggestion(owner)
    with pytest.raises(InvalidInputError):
        _vote(db_session, suggestion, owner, "sidevote", moderation_config)


def test_cast_vote_unknown_suggestion(db_session, owner, moderation_config):
    """Voting on a missing suggestion is a 404."""
    with pytest.raises(NotFoundError):
        cast_vote(
            db_session,
            suggestion_id=12345,
            user_id=owner.id,
            vote_type="upvote",
            config=moderation_config,
        )


def test_remove_vote_without_vote(db_session, owner, other_user, make_suggestion, moderation_config):
    """Removing a vote that does not exist is a 404."""
    suggestion = make_suggestion(owner)
    with pytest.raises(NotFoundError) as exc_info:
        remove_vote(
            db_session,
            suggestion_id=suggestion.id,
            user_id=other_user.id,
            config=moderation_config,
        )
    assert exc_info.value.code == "VOTE_NOT_FOUND"


def test_remove_vote_recomputes(db_session, owner, other_user, make_suggestion, moderation_config):
    """Removing a downvote restores the score."""
    suggestion = make_suggestion(owner)
    _vote(db_session, suggestion, other_user, "downvote", moderation_config)

    outcome = remove_vote(
        db_session,
        suggestion_id=suggestion.id,
        user_id=other_user.id,
        config=moderation_config,
    )

    assert outcome.action == VOTE_REMOVED
    assert outcome.suggestion.votes_count == 0
    assert _row_count(db_session, suggestion) == 0


def _stale_reads(monkeypatch, stale_calls):
    """Make the first ``stale_calls`` ledger lookups miss an existing vote."""
    real_find_vote = votes_module._find_vote
    calls = []

    def find_vote(db, suggestion_id, user_id):
        calls.append(user_id)
        if len(calls) <= stale_calls:
            return None
        return real_find_vote(db, suggestion_id, user_id)

    monkeypatch.setattr(votes_module, "_find_vote", find_vote)
    return calls


def test_unique_violation_replays_from_fresh_read(
    db_session, monkeypatch, owner, other_user, make_suggestion, moderation_config
):
    """A lost insert race is rolled back and the vote is replayed against the winner's row."""
    suggestion = make_suggestion(owner)
    _vote(db_session, suggestion, other_user, "upvote", moderation_config)
    calls = _stale_reads(monkeypatch, stale_calls=1)

    outcome = cast_vote(
        db_session,
        suggestion_id=suggestion.id,
        user_id=other_user.id,
        vote_type="upvote",
        config=moderation_config,
        max_attempts=2,
    )

    assert len(calls) == 2
    assert outcome.action == VOTE_REMOVED
    assert outcome.suggestion.votes_count == 0
    assert _row_count(db_session, suggestion) == 0


def test_persistent_unique_violation_conflicts(
    db_session, monkeypatch, owner, other_user, make_suggestion, moderation_config
):
    """Running out of attempts surfaces VOTE_CONFLICT and leaves the ledger untouched."""
    suggestion = make_suggestion(owner)
    _vote(db_session, suggestion, other_user, "upvote", moderation_config)
    calls = _stale_reads(monkeypatch, stale_calls=10)

    with pytest.raises(ConflictError) as exc_info:
        cast_vote(
            db_session,
            suggestion_id=suggestion.id,
            user_id=other_user.id,
            vote_type="upvote",
            config=moderation_config,
            max_attempts=2,
        )

    assert exc_info.value.code == "VOTE_CONFLICT"
    assert len(calls) == 2
    assert _row_count(db_session, suggestion) == 1
    db_session.refresh(suggestion)
    assert suggestion.votes_count == 1
