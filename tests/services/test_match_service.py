from datetime import timedelta

import pytest

from gamermatch.models.match import CanonicalPair, UnmatchReason
from gamermatch.models.swipe import SwipeAction
from gamermatch.services.block_service import block_user
from gamermatch.services.match_service import get_match, get_matches, reconcile_matches, unmatch
from gamermatch.services.swipe_service import record_swipe
from gamermatch.utils.errors import NotEligibleError, NotFoundError
from tests.conftest import BASE_CREATED_AT


def _mutual_like(env, a, b):
    record_swipe(env, a, b, "like")
    return record_swipe(env, b, a, "like").match_id


def test_get_matches_returns_partner_profiles(env, pair, add_profile):
    add_profile("carol", created_at=BASE_CREATED_AT + timedelta(days=2))
    _mutual_like(env, "alice", "bob")
    _mutual_like(env, "alice", "carol")

    views = get_matches(env, "alice")

    assert {v.profile.id for v in views} == {"bob", "carol"}
    # Newest match first
    assert views[0].matched_at >= views[1].matched_at
    assert [v.profile.id for v in get_matches(env, "bob")] == ["alice"]


def test_get_matches_hides_undiscoverable_partner(env, pair):
    _mutual_like(env, "alice", "bob")
    bob = env.profiles.get_profile("bob")
    env.profiles.save_profile(bob.model_copy(update={"is_active": False}))

    assert get_matches(env, "alice") == []


def test_unmatch(env, pair):
    match_id = _mutual_like(env, "alice", "bob")

    ended = unmatch(env, "bob", match_id)

    assert ended.is_active is False
    assert ended.unmatch_reason == UnmatchReason.UNMATCH
    assert ended.unmatched_by == "bob"
    assert get_matches(env, "alice") == []
    with pytest.raises(NotEligibleError):
        unmatch(env, "alice", match_id)


def test_unmatch_requires_membership(env, pair, add_profile):
    add_profile("carol")
    match_id = _mutual_like(env, "alice", "bob")
    with pytest.raises(NotFoundError):
        unmatch(env, "carol", match_id)
    with pytest.raises(NotFoundError):
        get_match(env, "alice", "missing")


def test_reconcile_creates_missing_matches_only(env, pair, add_profile):
    add_profile("carol")
    add_profile("dave")
    # Mutual likes written without the match step
    env.swipes.insert_swipe("alice", "bob", SwipeAction.LIKE)
    env.swipes.insert_swipe("bob", "alice", SwipeAction.LIKE)
    env.swipes.insert_swipe("carol", "dave", SwipeAction.LIKE)
    env.swipes.insert_swipe("dave", "carol", SwipeAction.PASS)

    assert reconcile_matches(env) == 1
    assert reconcile_matches(env) == 0
    assert env.matches.get_by_pair(CanonicalPair.of("alice", "bob")).is_active is True
    assert env.matches.count_matches() == 1


def test_reconcile_never_revives_unmatch_or_block(env, pair, add_profile):
    add_profile("carol")
    match_id = _mutual_like(env, "alice", "bob")
    unmatch(env, "alice", match_id)

    env.swipes.insert_swipe("alice", "carol", SwipeAction.LIKE)
    env.swipes.insert_swipe("carol", "alice", SwipeAction.LIKE)
    block_user(env, "carol", "alice")

    assert reconcile_matches(env) == 0
    assert env.matches.get_match(match_id).is_active is False
    assert env.matches.get_by_pair(CanonicalPair.of("alice", "carol")) is None


def test_reconcile_skips_banned_members(env, pair):
    env.swipes.insert_swipe("alice", "bob", SwipeAction.LIKE)
    env.swipes.insert_swipe("bob", "alice", SwipeAction.LIKE)
    bob = env.profiles.get_profile("bob")
    env.profiles.save_profile(bob.model_copy(update={"is_banned": True}))

    assert reconcile_matches(env) == 0
