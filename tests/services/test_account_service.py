from datetime import timedelta

import pytest

from gamermatch.models.match import UnmatchReason
from gamermatch.services.account_service import (
    cancel_account_deletion,
    delete_account,
    export_user_data,
    get_deletion_status,
    request_account_deletion,
)
from gamermatch.services.block_service import block_user
from gamermatch.services.discovery_service import get_discovery_profiles
from gamermatch.services.report_service import report_user
from gamermatch.services.swipe_service import record_swipe
from gamermatch.utils.errors import NotEligibleError, ProfileNotFoundError


def _match(env):
    record_swipe(env, "alice", "bob", "like")
    return record_swipe(env, "bob", "alice", "like").match_id


def test_delete_account_soft_deletes_and_ends_matches(env, pair):
    match_id = _match(env)

    assert delete_account(env, "bob") == 1

    assert env.profiles.get_profile("bob").is_active is False
    match = env.matches.get_match(match_id)
    assert match.unmatch_reason == UnmatchReason.ACCOUNT_DELETED
    assert match.unmatched_by == "bob"
    assert get_discovery_profiles(env, "alice") == []
    with pytest.raises(NotEligibleError):
        record_swipe(env, "bob", "alice", "pass")


def test_delete_unknown_account(env):
    with pytest.raises(ProfileNotFoundError):
        delete_account(env, "ghost")


def test_request_deletion_schedules_grace_period(env, pair):
    request = request_account_deletion(env, "alice")

    assert request.scheduled_deletion_at - request.requested_at == timedelta(days=30)
    assert env.profiles.get_profile("alice").is_active is False

    status = get_deletion_status(env, "alice")
    assert status.has_pending_request is True
    assert status.days_remaining in (29, 30)


def test_repeat_request_returns_existing_schedule(env, pair):
    first = request_account_deletion(env, "alice")
    second = request_account_deletion(env, "alice")
    assert second.scheduled_deletion_at == first.scheduled_deletion_at


def test_cancel_deletion_reactivates_profile_only(env, pair):
    match_id = _match(env)
    request_account_deletion(env, "alice")

    assert cancel_account_deletion(env, "alice") is True

    assert env.profiles.get_profile("alice").is_active is True
    assert env.matches.get_match(match_id).is_active is False
    assert get_deletion_status(env, "alice").has_pending_request is False
    assert cancel_account_deletion(env, "alice") is False


def test_status_without_request(env, pair):
    status = get_deletion_status(env, "alice")
    assert status.has_pending_request is False
    assert status.days_remaining is None


def test_export_user_data(env, pair, add_profile):
    add_profile("carol")
    _match(env)
    record_swipe(env, "alice", "carol", "pass")
    block_user(env, "alice", "carol")
    report_user(env, "alice", "carol", "spam")

    export = export_user_data(env, "alice")

    assert export.user_id == "alice"
    assert export.profile["id"] == "alice"
    assert {s["swiped_id"] for s in export.swipes} == {"bob", "carol"}
    assert len(export.matches) == 1
    assert export.blocks[0]["blocked_id"] == "carol"
    assert export.reports_made[0]["category"] == "spam"


def test_export_unknown_user(env):
    with pytest.raises(ProfileNotFoundError):
        export_user_data(env, "ghost")
