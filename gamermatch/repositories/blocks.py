"""Block ledger backed by the `blocks` table."""

import uuid
from typing import List, Set

from sqlalchemy import and_, delete, exists, or_, select
from sqlalchemy.exc import IntegrityError

from gamermatch.models.block import Block
from gamermatch.repositories.base import SqlRepository
from gamermatch.utils.database import BlockDB, model_to_dict, utcnow
from gamermatch.utils.errors import AlreadyBlockedError


class SqlBlockLedger(SqlRepository):
    table = "blocks"

    def is_blocked(self, a: str, b: str) -> bool:
        """True if either profile has blocked the other."""
        query = select(
            exists().where(
                or_(
                    and_(BlockDB.blocker_id == a, BlockDB.blocked_id == b),
                    and_(BlockDB.blocker_id == b, BlockDB.blocked_id == a),
                )
            )
        )
        with self.transaction("select", a=a, b=b) as session:
            return bool(session.scalar(query))

    def create_block(self, blocker_id: str, blocked_id: str) -> Block:
        block = Block(id=str(uuid.uuid4()), blocker_id=blocker_id, blocked_id=blocked_id, created_at=utcnow())
        try:
            with self.transaction("insert", blocker_id=blocker_id, blocked_id=blocked_id) as session:
                session.add(BlockDB(**block.model_dump()))
        except IntegrityError as e:
            raise AlreadyBlockedError(
                "User already blocked", details={"blocker_id": blocker_id, "blocked_id": blocked_id}
            ) from e
        return block

    def delete_block(self, blocker_id: str, blocked_id: str) -> bool:
        with self.transaction("delete", blocker_id=blocker_id, blocked_id=blocked_id) as session:
            result = session.execute(
                delete(BlockDB)
                .execution_options(synchronize_session=False)
                .where(BlockDB.blocker_id == blocker_id, BlockDB.blocked_id == blocked_id)
            )
            return result.rowcount > 0

    def blocked_ids(self, user_id: str) -> Set[str]:
        """IDs the user has blocked plus IDs that have blocked the user."""
        with self.transaction("select", user_id=user_id) as session:
            blocked = session.scalars(select(BlockDB.blocked_id).where(BlockDB.blocker_id == user_id)).all()
            blocking = session.scalars(select(BlockDB.blocker_id).where(BlockDB.blocked_id == user_id)).all()
            return set(blocked) | set(blocking)

    def list_by_blocker(self, blocker_id: str) -> List[Block]:
        query = select(BlockDB).where(BlockDB.blocker_id == blocker_id).order_by(BlockDB.created_at.desc())
        with self.transaction("select", blocker_id=blocker_id) as session:
            return [Block.model_validate(model_to_dict(row)) for row in session.scalars(query).all()]
