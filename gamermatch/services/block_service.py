"""Block service for GamerMatch."""

from typing import List

import sentry_sdk

from gamermatch.custom_types import Env
from gamermatch.models.block import Block, BlockedUser
from gamermatch.models.match import CanonicalPair, UnmatchReason
from gamermatch.utils.errors import AlreadyBlockedError, NotEligibleError, NotFoundError, ProfileNotFoundError
from gamermatch.utils.logging import get_logger

logger = get_logger(__name__)


def block_user(env: Env, blocker_id: str, blocked_id: str) -> Block:
    """
    Block a profile and end any match with it.

    After this returns, neither side appears in the other's discovery list,
    swipes between them are refused, and the match (if any) is inactive with
    reason `block` and the blocker recorded as the actor.

    Args:
        env (Env): Ledger bundle.
        blocker_id (str): Profile doing the blocking.
        blocked_id (str): Profile being blocked.

    Returns:
        Block: The stored block.

    Raises:
        NotEligibleError: On a self-block.
        ProfileNotFoundError: If the blocked profile does not exist.
        AlreadyBlockedError: If this block already exists. The pair's match is
            still ended first, so repeating a block that failed halfway
            finishes it.
    """
    with sentry_sdk.start_span(op="block.create", name=f"{blocker_id} -x {blocked_id}"):
        if blocker_id == blocked_id:
            raise NotEligibleError("You cannot block yourself", details={"blocker_id": blocker_id})
        if env.profiles.get_profile(blocked_id) is None:
            raise ProfileNotFoundError(f"Profile not found: {blocked_id}", details={"profile_id": blocked_id})

        pair = CanonicalPair.of(blocker_id, blocked_id)
        try:
            block = env.blocks.create_block(blocker_id, blocked_id)
        except AlreadyBlockedError:
            if env.matches.deactivate_match(pair, UnmatchReason.BLOCK, blocker_id):
                logger.info("Match ended on repeated block", blocker_id=blocker_id, blocked_id=blocked_id)
            raise
        ended = env.matches.deactivate_match(pair, UnmatchReason.BLOCK, blocker_id)
        logger.info("User blocked", blocker_id=blocker_id, blocked_id=blocked_id, match_ended=ended)
        return block


def unblock_user(env: Env, blocker_id: str, blocked_id: str) -> None:
    """Remove a block. The match it ended stays inactive."""
    if not env.blocks.delete_block(blocker_id, blocked_id):
        raise NotFoundError("Block not found", details={"blocker_id": blocker_id, "blocked_id": blocked_id})
    logger.info("User unblocked", blocker_id=blocker_id, blocked_id=blocked_id)


def get_blocked_users(env: Env, blocker_id: str) -> List[BlockedUser]:
    blocks = env.blocks.list_by_blocker(blocker_id)
    profiles = {p.id: p for p in env.profiles.get_profiles(b.blocked_id for b in blocks)}
    return [
        BlockedUser(
            block_id=block.id,
            blocked_id=block.blocked_id,
            created_at=block.created_at,
            blocked_user=profiles[block.blocked_id],
        )
        for block in blocks
        if block.blocked_id in profiles
    ]
