import pytest

from gamermatch.models.match import UnmatchReason
from gamermatch.models.report import ReportStatus
from gamermatch.services.admin_service import (
    ban_user,
    get_admin_stats,
    get_pending_reports,
    get_recent_users,
    is_admin,
    unban_user,
    update_report_status,
)
from gamermatch.services.discovery_service import get_discovery_profiles
from gamermatch.services.report_service import report_user
from gamermatch.services.swipe_service import record_swipe
from gamermatch.utils.errors import AuthenticationError, NotFoundError, ValidationError


@pytest.fixture
def admin(add_profile):
    return add_profile("admin_1")


def test_is_admin_reads_settings():
    assert is_admin("admin_1")
    assert not is_admin("alice")


@pytest.mark.parametrize(
    "call",
    [
        lambda env: get_pending_reports(env, "alice"),
        lambda env: update_report_status(env, "alice", "r1", "resolved"),
        lambda env: ban_user(env, "alice", "bob"),
        lambda env: unban_user(env, "alice", "bob"),
        lambda env: get_admin_stats(env, "alice"),
        lambda env: get_recent_users(env, "alice"),
    ],
)
def test_non_admin_rejected(env, pair, call):
    with pytest.raises(AuthenticationError):
        call(env)


def test_review_report(env, pair, admin):
    report = report_user(env, "alice", "bob", "spam")
    assert [r.id for r in get_pending_reports(env, "admin_1")] == [report.id]

    updated = update_report_status(env, "admin_1", report.id, "resolved", "Warned the user")

    assert updated.status == ReportStatus.RESOLVED
    assert updated.reviewed_by == "admin_1"
    assert updated.reviewed_at is not None
    assert env.reports.get_report(report.id).admin_notes == "Warned the user"
    assert get_pending_reports(env, "admin_1") == []


def test_update_report_errors(env, pair, admin):
    with pytest.raises(NotFoundError):
        update_report_status(env, "admin_1", "missing", "resolved")
    report = report_user(env, "alice", "bob", "spam")
    with pytest.raises(ValidationError):
        update_report_status(env, "admin_1", report.id, "escalated")


def test_ban_hides_profile_and_ends_matches(env, pair, admin):
    record_swipe(env, "alice", "bob", "like")
    match_id = record_swipe(env, "bob", "alice", "like").match_id

    banned = ban_user(env, "admin_1", "bob")

    assert banned.is_banned is True
    match = env.matches.get_match(match_id)
    assert match.is_active is False
    assert match.unmatch_reason == UnmatchReason.BANNED
    assert match.unmatched_by == "admin_1"
    assert "bob" not in [r.profile.id for r in get_discovery_profiles(env, "alice")]


def test_unban_restores_discovery_but_not_matches(env, pair, admin):
    record_swipe(env, "alice", "bob", "like")
    match_id = record_swipe(env, "bob", "alice", "like").match_id
    ban_user(env, "admin_1", "bob")

    unban_user(env, "admin_1", "bob")

    assert env.profiles.get_profile("bob").is_banned is False
    assert env.matches.get_match(match_id).is_active is False


def test_admin_stats(env, pair, admin, add_profile):
    add_profile("carol", is_banned=True)
    record_swipe(env, "alice", "bob", "like")
    record_swipe(env, "bob", "alice", "like")
    report_user(env, "alice", "carol", "fake_profile")

    stats = get_admin_stats(env, "admin_1")

    assert stats.total_users == 4
    assert stats.active_users == 3
    assert stats.banned_users == 1
    assert stats.pending_reports == 1
    assert stats.total_matches == 1
    assert stats.active_matches == 1


def test_recent_users(env, pair, admin):
    assert len(get_recent_users(env, "admin_1", limit=2)) == 2
