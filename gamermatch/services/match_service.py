"""Match service for GamerMatch."""

from typing import List

import sentry_sdk

from gamermatch.custom_types import Env
from gamermatch.models.match import Match, MatchView, UnmatchReason
from gamermatch.utils.errors import NotEligibleError, NotFoundError
from gamermatch.utils.logging import get_logger

logger = get_logger(__name__)


def get_matches(env: Env, user_id: str) -> List[MatchView]:
    """
    Get a user's active matches, newest first, with each partner's profile.

    Matches whose partner is no longer discoverable are left out.

    Args:
        env (Env): Ledger bundle.
        user_id (str): Profile ID.

    Returns:
        List[MatchView]: Active matches seen from `user_id`.
    """
    matches = env.matches.list_active_for_user(user_id)
    partners = {p.id: p for p in env.profiles.get_profiles(m.pair.other(user_id) for m in matches)}

    views = []
    for match in matches:
        partner = partners.get(match.pair.other(user_id))
        if partner is None or not partner.is_discoverable():
            continue
        views.append(MatchView(match_id=match.id, matched_at=match.matched_at, profile=partner))
    return views


def get_match(env: Env, user_id: str, match_id: str) -> Match:
    match = env.matches.get_match(match_id)
    if match is None or not match.has_member(user_id):
        raise NotFoundError("Match not found", details={"match_id": match_id})
    return match


def unmatch(env: Env, user_id: str, match_id: str) -> Match:
    """
    End an active match on behalf of one of its members.

    Raises:
        NotFoundError: If the match does not exist or `user_id` is not in it.
        NotEligibleError: If the match is already inactive.
    """
    match = get_match(env, user_id, match_id)
    if not match.is_active:
        raise NotEligibleError("This match has already ended", details={"match_id": match_id})

    env.matches.deactivate_match(match.pair, UnmatchReason.UNMATCH, user_id)
    logger.info("Match ended", match_id=match_id, user_id=user_id)
    return env.matches.get_match(match_id) or match


def reconcile_matches(env: Env) -> int:
    """
    Create match rows missing for mutual likes.

    Repairs swipes whose match step failed. Blocked pairs and pairs with a
    member who is no longer discoverable are skipped. Inactive matches are
    never re-activated, so an unmatch or block is not undone.

    Returns:
        int: Number of matches created.
    """
    with sentry_sdk.start_span(op="match.reconcile", name="reconcile_matches") as span:
        created = 0
        for pair in env.swipes.mutual_like_pairs():
            if env.blocks.is_blocked(pair.user1_id, pair.user2_id):
                continue
            members = env.profiles.get_profiles([pair.user1_id, pair.user2_id])
            if len(members) != 2 or not all(p.is_discoverable() for p in members):
                continue
            if env.matches.upsert_match_if_absent(pair, reactivate=False).created:
                created += 1
                logger.info("Missing match repaired", user1_id=pair.user1_id, user2_id=pair.user2_id)
        span.set_data("created", created)
        logger.info("Match reconciliation finished", created=created)
        return created
