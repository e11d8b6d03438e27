"""Discovery service for GamerMatch: compatibility scoring and ranked candidate lists."""

from typing import Any, Collection, Dict, Iterable, List, Optional, Union

import sentry_sdk

from gamermatch.config import settings
from gamermatch.custom_types import Env
from gamermatch.models.filters import DiscoveryFilters
from gamermatch.models.outcomes import RankedCandidate
from gamermatch.models.profile import Profile
from gamermatch.services.profile_service import get_profile
from gamermatch.utils.errors import InvalidFilterError, NotEligibleError
from gamermatch.utils.logging import get_logger

logger = get_logger(__name__)


def compatibility_score(viewer: Profile, candidate: Profile) -> int:
    """
    Calculate how well two profiles fit each other.

    Each shared platform and each shared genre adds its weight, a shared
    playstyle adds the playstyle weight once, and equal voice chat preference
    adds the voice chat weight once. Only intersections and equality are used,
    so the score is symmetric and never negative.

    Args:
        viewer (Profile): Profile the list is built for.
        candidate (Profile): Profile being scored.

    Returns:
        int: Compatibility score.
    """
    shared_platforms = set(viewer.platforms) & set(candidate.platforms)
    shared_genres = set(viewer.favorite_genres) & set(candidate.favorite_genres)

    score = settings.PLATFORM_WEIGHT * len(shared_platforms)
    score += settings.GENRE_WEIGHT * len(shared_genres)
    if viewer.playstyle is not None and viewer.playstyle == candidate.playstyle:
        score += settings.PLAYSTYLE_WEIGHT
    if viewer.voice_chat == candidate.voice_chat:
        score += settings.VOICE_CHAT_WEIGHT
    return score


def matches_filters(candidate: Profile, filters: Optional[DiscoveryFilters]) -> bool:
    if filters is None:
        return True
    return filters.matches(candidate)


def rank_candidates(
    viewer: Profile,
    candidates: Iterable[Profile],
    filters: Optional[DiscoveryFilters] = None,
    excluded_ids: Collection[str] = (),
) -> List[RankedCandidate]:
    """
    Score and order candidates for a viewer.

    The viewer, excluded IDs, profiles that are not discoverable and profiles
    failing the filters are dropped. The rest are ordered by score (highest
    first), then newest profile, then ID, so the order is total and the same
    pool always produces the same list.

    Args:
        viewer (Profile): Profile the list is built for.
        candidates (Iterable[Profile]): Candidate pool.
        filters (Optional[DiscoveryFilters]): Caller filters.
        excluded_ids (Collection[str]): IDs already swiped or blocked in either direction.

    Returns:
        List[RankedCandidate]: Candidates with their scores, best first.
    """
    seen = set()
    kept: List[Profile] = []
    for candidate in candidates:
        if candidate.id == viewer.id or candidate.id in excluded_ids or candidate.id in seen:
            continue
        if not candidate.is_discoverable() or not matches_filters(candidate, filters):
            continue
        seen.add(candidate.id)
        kept.append(candidate)

    ranked = [RankedCandidate(profile=c, compatibility_score=compatibility_score(viewer, c)) for c in kept]
    # Stable sorts, least significant key first
    ranked.sort(key=lambda r: r.profile.id)
    ranked.sort(key=lambda r: r.profile.created_at, reverse=True)
    ranked.sort(key=lambda r: r.compatibility_score, reverse=True)
    return ranked


def _check_pagination(limit: Optional[int], offset: int) -> int:
    if limit is None:
        limit = settings.DISCOVERY_PAGE_SIZE
    if limit < 1 or limit > settings.MAX_DISCOVERY_PAGE_SIZE:
        raise InvalidFilterError(
            f"limit must be between 1 and {settings.MAX_DISCOVERY_PAGE_SIZE}",
            details={"limit": limit},
        )
    if offset < 0:
        raise InvalidFilterError("offset cannot be negative", details={"offset": offset})
    return limit


def get_discovery_profiles(
    env: Env,
    viewer_id: str,
    filters: Union[DiscoveryFilters, Dict[str, Any], None] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> List[RankedCandidate]:
    """
    Get one page of ranked discovery candidates for a viewer.

    The whole eligible pool is ranked before slicing, so consecutive pages
    never repeat or skip a profile while the pool is unchanged.

    Args:
        env (Env): Ledger bundle.
        viewer_id (str): Viewer profile ID.
        filters: Parsed filters or the raw filter mapping.
        limit (Optional[int]): Page size, DISCOVERY_PAGE_SIZE by default.
        offset (int): Number of ranked candidates to skip.

    Returns:
        List[RankedCandidate]: The requested page.

    Raises:
        InvalidFilterError: If filters or pagination values are malformed.
        ProfileNotFoundError: If the viewer does not exist.
        NotEligibleError: If the viewer cannot use discovery.
    """
    with sentry_sdk.start_span(op="discovery.get_profiles", name=viewer_id) as span:
        limit = _check_pagination(limit, offset)
        if not isinstance(filters, DiscoveryFilters):
            filters = DiscoveryFilters.parse(filters)
        if filters is not None and filters.is_empty():
            filters = None

        viewer = get_profile(env, viewer_id)
        if not viewer.is_discoverable():
            raise NotEligibleError(
                "Complete your profile to start discovering players",
                details={"viewer_id": viewer_id},
            )

        excluded = {viewer_id} | env.swipes.swiped_ids(viewer_id) | env.blocks.blocked_ids(viewer_id)
        pool = env.profiles.query_profiles(excluded, predicate=filters.matches if filters else None)
        ranked = rank_candidates(viewer, pool, filters, excluded)
        page = ranked[offset : offset + limit]

        span.set_data("pool_size", len(ranked))
        span.set_data("returned", len(page))
        logger.debug(
            "Discovery page built",
            viewer_id=viewer_id,
            pool_size=len(ranked),
            returned=len(page),
            offset=offset,
        )
        return page
