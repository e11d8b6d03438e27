"""Swipe ledger backed by the `swipes` table."""

import uuid
from datetime import datetime
from typing import List, Set

from sqlalchemy import and_, exists, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import aliased

from gamermatch.models.match import CanonicalPair
from gamermatch.models.swipe import Swipe, SwipeAction
from gamermatch.repositories.base import SqlRepository
from gamermatch.utils.database import SwipeDB, model_to_dict, utcnow
from gamermatch.utils.errors import DuplicateSwipeError, PersistenceError
from gamermatch.utils.logging import get_logger

logger = get_logger(__name__)


class SqlSwipeLedger(SqlRepository):
    table = "swipes"

    def insert_swipe(self, swiper_id: str, swiped_id: str, action: SwipeAction) -> Swipe:
        """
        Insert one swipe row.

        Raises:
            DuplicateSwipeError: If the ordered pair already has a swipe. Never upserts.
            PersistenceError: If the insert failed for any other reason; no row was written.
        """
        swipe = Swipe(id=str(uuid.uuid4()), swiper_id=swiper_id, swiped_id=swiped_id, action=action, created_at=utcnow())
        try:
            with self.transaction("insert", swiper_id=swiper_id, swiped_id=swiped_id) as session:
                session.add(
                    SwipeDB(
                        id=swipe.id,
                        swiper_id=swiper_id,
                        swiped_id=swiped_id,
                        action=action.value,
                        created_at=swipe.created_at,
                    )
                )
        except IntegrityError as e:
            if self._pair_exists(swiper_id, swiped_id):
                raise DuplicateSwipeError(
                    "Already swiped on this user",
                    details={"swiper_id": swiper_id, "swiped_id": swiped_id},
                ) from e
            raise PersistenceError(
                "Database operation failed: insert on swipes",
                details={"error": str(e), "swiper_id": swiper_id, "swiped_id": swiped_id},
            ) from e
        return swipe

    def _pair_exists(self, swiper_id: str, swiped_id: str) -> bool:
        query = select(exists().where(SwipeDB.swiper_id == swiper_id, SwipeDB.swiped_id == swiped_id))
        with self.transaction("select") as session:
            return bool(session.scalar(query))

    def exists_swipe(self, swiper_id: str, swiped_id: str, action: SwipeAction) -> bool:
        query = select(
            exists().where(
                SwipeDB.swiper_id == swiper_id,
                SwipeDB.swiped_id == swiped_id,
                SwipeDB.action == action.value,
            )
        )
        with self.transaction("select", swiper_id=swiper_id, swiped_id=swiped_id) as session:
            return bool(session.scalar(query))

    def swiped_ids(self, swiper_id: str) -> Set[str]:
        with self.transaction("select", swiper_id=swiper_id) as session:
            return set(session.scalars(select(SwipeDB.swiped_id).where(SwipeDB.swiper_id == swiper_id)).all())

    def count_since(self, swiper_id: str, since: datetime) -> int:
        query = select(func.count()).select_from(SwipeDB).where(
            SwipeDB.swiper_id == swiper_id, SwipeDB.created_at >= since
        )
        with self.transaction("count", swiper_id=swiper_id) as session:
            return int(session.scalar(query) or 0)

    def list_for_user(self, swiper_id: str) -> List[Swipe]:
        query = select(SwipeDB).where(SwipeDB.swiper_id == swiper_id).order_by(SwipeDB.created_at.asc())
        with self.transaction("select", swiper_id=swiper_id) as session:
            return [Swipe.model_validate(model_to_dict(row)) for row in session.scalars(query).all()]

    def mutual_like_pairs(self) -> List[CanonicalPair]:
        """Every pair where both sides liked each other, in canonical order."""
        reverse = aliased(SwipeDB)
        query = (
            select(SwipeDB.swiper_id, SwipeDB.swiped_id)
            .join(
                reverse,
                and_(reverse.swiper_id == SwipeDB.swiped_id, reverse.swiped_id == SwipeDB.swiper_id),
            )
            .where(
                SwipeDB.action == SwipeAction.LIKE.value,
                reverse.action == SwipeAction.LIKE.value,
                SwipeDB.swiper_id < SwipeDB.swiped_id,
            )
        )
        with self.transaction("select") as session:
            return [CanonicalPair(user1_id=a, user2_id=b) for a, b in session.execute(query).all()]
