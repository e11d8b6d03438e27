from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from gamermatch.models.account import DeletionRequest
from gamermatch.models.match import CanonicalPair, UnmatchReason
from gamermatch.models.report import Report, ReportStatus
from gamermatch.models.swipe import SwipeAction
from gamermatch.repositories import SqlProfileStore
from gamermatch.utils.database import utcnow
from gamermatch.utils.errors import AlreadyBlockedError, DuplicateSwipeError, PersistenceError, ValidationError
from tests.conftest import BASE_CREATED_AT, build_profile


class TestProfileStore:
    def test_add_and_get(self, env):
        env.profiles.add_profile(build_profile("alice"))
        assert env.profiles.get_profile("alice").display_name == "player_alice"
        assert env.profiles.get_profile("missing") is None

    def test_add_existing_raises(self, env):
        env.profiles.add_profile(build_profile("alice"))
        with pytest.raises(ValidationError):
            env.profiles.add_profile(build_profile("alice"))

    def test_save_updates_row(self, env):
        profile = env.profiles.add_profile(build_profile("alice"))
        env.profiles.save_profile(profile.model_copy(update={"is_banned": True}))
        assert env.profiles.get_profile("alice").is_banned is True

    def test_query_profiles_applies_flags_and_exclusions(self, env, add_profile):
        add_profile("alice")
        add_profile("bob", created_at=BASE_CREATED_AT + timedelta(days=1))
        add_profile("banned", is_banned=True)
        add_profile("inactive", is_active=False)
        env.profiles.save_profile(
            build_profile("partial", onboarding_completed=False, platforms=[], favorite_genres=[])
        )

        ids = [p.id for p in env.profiles.query_profiles(exclude_ids=["alice"])]

        assert ids == ["bob"]

    def test_query_profiles_predicate_and_slice(self, env, add_profile):
        for i in range(5):
            add_profile(f"p{i}", created_at=BASE_CREATED_AT + timedelta(hours=i), voice_chat=i % 2 == 0)

        result = env.profiles.query_profiles([], predicate=lambda p: p.voice_chat, limit=2, offset=1)

        # Newest first among p4, p2, p0
        assert [p.id for p in result] == ["p2", "p0"]

    def test_counts_and_recent(self, env, add_profile):
        add_profile("alice")
        add_profile("bob", is_banned=True, created_at=BASE_CREATED_AT + timedelta(days=1))
        assert env.profiles.count_profiles() == 2
        assert env.profiles.count_profiles(is_banned=True) == 1
        assert [p.id for p in env.profiles.list_recent(1)] == ["bob"]

    def test_database_failure_becomes_persistence_error(self):
        failing_session = MagicMock()
        failing_session.get.side_effect = OperationalError("SELECT", {}, Exception("disk I/O error"))
        store = SqlProfileStore(session_factory=lambda: failing_session)

        with pytest.raises(PersistenceError) as exc_info:
            store.get_profile("alice")

        assert exc_info.value.status_code == 503
        failing_session.rollback.assert_called_once()
        failing_session.close.assert_called_once()


class TestSwipeLedger:
    def test_insert_and_exists(self, env, pair):
        env.swipes.insert_swipe("alice", "bob", SwipeAction.LIKE)
        assert env.swipes.exists_swipe("alice", "bob", SwipeAction.LIKE)
        assert not env.swipes.exists_swipe("alice", "bob", SwipeAction.PASS)
        assert not env.swipes.exists_swipe("bob", "alice", SwipeAction.LIKE)

    def test_duplicate_raises_and_keeps_first_decision(self, env, pair):
        env.swipes.insert_swipe("alice", "bob", SwipeAction.LIKE)
        with pytest.raises(DuplicateSwipeError):
            env.swipes.insert_swipe("alice", "bob", SwipeAction.PASS)
        assert env.swipes.exists_swipe("alice", "bob", SwipeAction.LIKE)
        assert len(env.swipes.list_for_user("alice")) == 1

    def test_swiped_ids_and_count_since(self, env, pair, add_profile):
        add_profile("carol")
        env.swipes.insert_swipe("alice", "bob", SwipeAction.LIKE)
        env.swipes.insert_swipe("alice", "carol", SwipeAction.PASS)
        assert env.swipes.swiped_ids("alice") == {"bob", "carol"}
        assert env.swipes.count_since("alice", utcnow() - timedelta(hours=1)) == 2
        assert env.swipes.count_since("alice", utcnow() + timedelta(hours=1)) == 0

    def test_mutual_like_pairs(self, env, pair, add_profile):
        add_profile("carol")
        env.swipes.insert_swipe("bob", "alice", SwipeAction.LIKE)
        env.swipes.insert_swipe("alice", "bob", SwipeAction.LIKE)
        env.swipes.insert_swipe("alice", "carol", SwipeAction.LIKE)
        env.swipes.insert_swipe("carol", "alice", SwipeAction.PASS)

        assert env.swipes.mutual_like_pairs() == [CanonicalPair.of("alice", "bob")]


class TestMatchLedger:
    def test_upsert_is_order_independent(self, env, pair):
        first = env.matches.upsert_match_if_absent(CanonicalPair.of("alice", "bob"))
        second = env.matches.upsert_match_if_absent(CanonicalPair.of("bob", "alice"))

        assert first.created is True
        assert second.created is False
        assert first.match_id == second.match_id
        assert env.matches.count_matches() == 1

    def test_deactivate_and_reactivate(self, env, pair):
        key = CanonicalPair.of("alice", "bob")
        match_id = env.matches.upsert_match_if_absent(key).match_id

        assert env.matches.deactivate_match(key, UnmatchReason.UNMATCH, "alice") is True
        assert env.matches.deactivate_match(key, UnmatchReason.UNMATCH, "alice") is False
        ended = env.matches.get_match(match_id)
        assert ended.is_active is False
        assert ended.unmatch_reason == UnmatchReason.UNMATCH
        assert ended.unmatched_by == "alice"

        # The reconciliation sweep never re-activates
        assert env.matches.upsert_match_if_absent(key, reactivate=False).created is False
        assert env.matches.get_match(match_id).is_active is False

        again = env.matches.upsert_match_if_absent(key)
        assert again.created is True
        assert again.match_id == match_id
        restored = env.matches.get_match(match_id)
        assert restored.is_active is True
        assert restored.unmatch_reason is None

    def test_deactivate_all_for_user(self, env, pair, add_profile):
        add_profile("carol")
        env.matches.upsert_match_if_absent(CanonicalPair.of("alice", "bob"))
        env.matches.upsert_match_if_absent(CanonicalPair.of("alice", "carol"))
        env.matches.upsert_match_if_absent(CanonicalPair.of("bob", "carol"))

        assert env.matches.deactivate_all_for_user("alice", UnmatchReason.BANNED, "admin_1") == 2

        assert [m.pair for m in env.matches.list_active_for_user("bob")] == [CanonicalPair.of("bob", "carol")]
        assert all(m.unmatched_by == "admin_1" for m in env.matches.list_for_user("alice"))
        assert env.matches.count_matches(is_active=True) == 1


class TestBlockLedger:
    def test_block_is_checked_both_ways(self, env, pair):
        env.blocks.create_block("alice", "bob")
        assert env.blocks.is_blocked("alice", "bob")
        assert env.blocks.is_blocked("bob", "alice")
        assert env.blocks.blocked_ids("bob") == {"alice"}

    def test_repeat_block_raises(self, env, pair):
        env.blocks.create_block("alice", "bob")
        with pytest.raises(AlreadyBlockedError):
            env.blocks.create_block("alice", "bob")

    def test_delete_block(self, env, pair):
        env.blocks.create_block("alice", "bob")
        assert env.blocks.delete_block("alice", "bob") is True
        assert env.blocks.delete_block("alice", "bob") is False
        assert not env.blocks.is_blocked("alice", "bob")


class TestReportAndDeletionLedgers:
    def test_report_queue(self, env, pair):
        older = Report(reporter_id="alice", reported_id="bob", category="spam", created_at=utcnow() - timedelta(hours=2))
        newer = Report(reporter_id="alice", reported_id="bob", category="harassment", created_at=utcnow())
        env.reports.add_report(newer)
        env.reports.add_report(older)

        assert [r.id for r in env.reports.list_by_status(ReportStatus.PENDING)] == [older.id, newer.id]
        assert env.reports.count_since("alice", utcnow() - timedelta(hours=1)) == 1

        env.reports.save_report(older.model_copy(update={"status": ReportStatus.DISMISSED}))
        assert env.reports.get_report(older.id).status == ReportStatus.DISMISSED
        assert len(env.reports.list_by_status(ReportStatus.PENDING)) == 1

    def test_deletion_request_upsert(self, env, pair):
        now = utcnow()
        request = DeletionRequest(user_id="alice", requested_at=now, scheduled_deletion_at=now + timedelta(days=30))
        env.deletions.save_request(request)
        env.deletions.save_request(request.model_copy(update={"cancelled_at": now}))

        stored = env.deletions.get_request("alice")
        assert stored.cancelled_at == now
        assert stored.is_pending is False
        assert env.deletions.get_request("bob") is None
