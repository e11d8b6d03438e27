"""Match ledger backed by the `matches` table."""

import uuid
from typing import List, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError

from gamermatch.models.match import CanonicalPair, Match, MatchUpsert, UnmatchReason
from gamermatch.repositories.base import SqlRepository
from gamermatch.utils.database import MatchDB, model_to_dict, utcnow
from gamermatch.utils.errors import PersistenceError
from gamermatch.utils.logging import get_logger

logger = get_logger(__name__)


def _to_model(row: MatchDB) -> Match:
    return Match.model_validate(model_to_dict(row))


class SqlMatchLedger(SqlRepository):
    table = "matches"

    def upsert_match_if_absent(self, pair: CanonicalPair, reactivate: bool = True) -> MatchUpsert:
        """
        Make sure an active match row exists for the pair.

        The insert relies on the (user1_id, user2_id) unique constraint: when
        the other side of a mutual like got there first, the conflict is
        swallowed and the existing row is read back, so concurrent callers all
        end up with the same match ID and none of them sees an error.

        Args:
            pair (CanonicalPair): The canonical pair key.
            reactivate (bool): Re-activate an existing inactive row. The
                reconciliation sweep passes False so it never undoes an unmatch.

        Returns:
            MatchUpsert: `created` is True only for the call that inserted or
            re-activated the row.
        """
        match_id = str(uuid.uuid4())
        try:
            with self.transaction("insert", user1_id=pair.user1_id, user2_id=pair.user2_id) as session:
                session.add(
                    MatchDB(
                        id=match_id,
                        user1_id=pair.user1_id,
                        user2_id=pair.user2_id,
                        matched_at=utcnow(),
                        is_active=True,
                    )
                )
            logger.info("Match created", match_id=match_id, user1_id=pair.user1_id, user2_id=pair.user2_id)
            return MatchUpsert(created=True, match_id=match_id)
        except IntegrityError:
            logger.debug("Match already exists for pair", user1_id=pair.user1_id, user2_id=pair.user2_id)

        existing = self.get_by_pair(pair)
        if existing is None:
            raise PersistenceError(
                "Match insert conflicted but no row exists",
                details={"user1_id": pair.user1_id, "user2_id": pair.user2_id},
            )
        if existing.is_active or not reactivate:
            return MatchUpsert(created=False, match_id=existing.id)

        with self.transaction("update", match_id=existing.id) as session:
            result = session.execute(
                update(MatchDB)
                .execution_options(synchronize_session=False)
                .where(MatchDB.id == existing.id, MatchDB.is_active.is_(False))
                .values(
                    is_active=True,
                    matched_at=utcnow(),
                    unmatched_at=None,
                    unmatched_by=None,
                    unmatch_reason=None,
                )
            )
            reactivated = result.rowcount == 1
        if reactivated:
            logger.info("Match re-activated", match_id=existing.id)
        return MatchUpsert(created=reactivated, match_id=existing.id)

    def deactivate_match(self, pair: CanonicalPair, reason: UnmatchReason, actor_id: Optional[str]) -> bool:
        with self.transaction("update", user1_id=pair.user1_id, user2_id=pair.user2_id) as session:
            result = session.execute(
                update(MatchDB)
                .execution_options(synchronize_session=False)
                .where(
                    MatchDB.user1_id == pair.user1_id,
                    MatchDB.user2_id == pair.user2_id,
                    MatchDB.is_active.is_(True),
                )
                .values(is_active=False, unmatched_at=utcnow(), unmatched_by=actor_id, unmatch_reason=reason.value)
            )
            return result.rowcount > 0

    def deactivate_all_for_user(self, user_id: str, reason: UnmatchReason, actor_id: Optional[str] = None) -> int:
        with self.transaction("update", user_id=user_id) as session:
            result = session.execute(
                update(MatchDB)
                .execution_options(synchronize_session=False)
                .where(
                    or_(MatchDB.user1_id == user_id, MatchDB.user2_id == user_id),
                    MatchDB.is_active.is_(True),
                )
                .values(
                    is_active=False,
                    unmatched_at=utcnow(),
                    unmatched_by=actor_id or user_id,
                    unmatch_reason=reason.value,
                )
            )
            return result.rowcount

    def get_match(self, match_id: str) -> Optional[Match]:
        with self.transaction("select", match_id=match_id) as session:
            row = session.get(MatchDB, match_id)
            return _to_model(row) if row else None

    def get_by_pair(self, pair: CanonicalPair) -> Optional[Match]:
        query = select(MatchDB).where(MatchDB.user1_id == pair.user1_id, MatchDB.user2_id == pair.user2_id)
        with self.transaction("select", user1_id=pair.user1_id, user2_id=pair.user2_id) as session:
            row = session.scalars(query).first()
            return _to_model(row) if row else None

    def list_active_for_user(self, user_id: str) -> List[Match]:
        query = (
            select(MatchDB)
            .where(or_(MatchDB.user1_id == user_id, MatchDB.user2_id == user_id), MatchDB.is_active.is_(True))
            .order_by(MatchDB.matched_at.desc())
        )
        with self.transaction("select", user_id=user_id) as session:
            return [_to_model(row) for row in session.scalars(query).all()]

    def list_for_user(self, user_id: str) -> List[Match]:
        query = (
            select(MatchDB)
            .where(or_(MatchDB.user1_id == user_id, MatchDB.user2_id == user_id))
            .order_by(MatchDB.matched_at.desc())
        )
        with self.transaction("select", user_id=user_id) as session:
            return [_to_model(row) for row in session.scalars(query).all()]

    def count_matches(self, is_active: Optional[bool] = None) -> int:
        query = select(func.count()).select_from(MatchDB)
        if is_active is not None:
            query = query.where(MatchDB.is_active.is_(is_active))
        with self.transaction("count") as session:
            return int(session.scalar(query) or 0)
