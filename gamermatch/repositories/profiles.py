"""Profile store backed by the `profiles` table."""

from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from gamermatch.custom_types import ProfilePredicate
from gamermatch.models.profile import Profile
from gamermatch.repositories.base import SqlRepository
from gamermatch.utils.database import ProfileDB, model_to_dict, utcnow
from gamermatch.utils.errors import ValidationError
from gamermatch.utils.logging import get_logger

logger = get_logger(__name__)


def _to_row_values(profile: Profile) -> Dict[str, Any]:
    values = profile.model_dump(mode="json")
    # Keep native date/datetime objects for the Date/DateTime columns
    values["date_of_birth"] = profile.date_of_birth
    values["created_at"] = profile.created_at
    values["updated_at"] = profile.updated_at
    return values


def _to_model(row: ProfileDB) -> Profile:
    return Profile.model_validate(model_to_dict(row))


class SqlProfileStore(SqlRepository):
    table = "profiles"

    def get_profile(self, profile_id: str) -> Optional[Profile]:
        with self.transaction("select", profile_id=profile_id) as session:
            row = session.get(ProfileDB, profile_id)
            return _to_model(row) if row else None

    def get_profiles(self, profile_ids: Iterable[str]) -> List[Profile]:
        ids = list(set(profile_ids))
        if not ids:
            return []
        with self.transaction("select") as session:
            rows = session.scalars(select(ProfileDB).where(ProfileDB.id.in_(ids))).all()
            return [_to_model(row) for row in rows]

    def query_profiles(
        self,
        exclude_ids: Iterable[str],
        predicate: Optional[ProfilePredicate] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Profile]:
        """
        Return discoverable profiles not in `exclude_ids`.

        Status flags and exclusions are applied in SQL. Set-valued filters are
        applied through `predicate` after loading, then the page is sliced, so
        `limit`/`offset` count profiles that passed the predicate.
        """
        excluded = list(set(exclude_ids))
        query = select(ProfileDB).where(
            ProfileDB.is_active.is_(True),
            ProfileDB.is_banned.is_(False),
            ProfileDB.onboarding_completed.is_(True),
        )
        if excluded:
            query = query.where(ProfileDB.id.not_in(excluded))
        query = query.order_by(ProfileDB.created_at.desc(), ProfileDB.id.asc())

        with self.transaction("select", excluded=len(excluded)) as session:
            rows = session.scalars(query).all()
            profiles = [_to_model(row) for row in rows]

        if predicate is not None:
            profiles = [profile for profile in profiles if predicate(profile)]
        end = None if limit is None else offset + limit
        return profiles[offset:end]

    def add_profile(self, profile: Profile) -> Profile:
        try:
            with self.transaction("insert", profile_id=profile.id) as session:
                session.add(ProfileDB(**_to_row_values(profile)))
        except IntegrityError as e:
            logger.warning("Profile already exists", profile_id=profile.id)
            raise ValidationError(f"Profile already exists: {profile.id}", details={"profile_id": profile.id}) from e
        return profile

    def save_profile(self, profile: Profile) -> Profile:
        profile = profile.model_copy(update={"updated_at": utcnow()})
        with self.transaction("update", profile_id=profile.id) as session:
            row = session.get(ProfileDB, profile.id)
            if row is None:
                session.add(ProfileDB(**_to_row_values(profile)))
            else:
                for key, value in _to_row_values(profile).items():
                    setattr(row, key, value)
        return profile

    def list_recent(self, limit: int) -> List[Profile]:
        with self.transaction("select") as session:
            rows = session.scalars(select(ProfileDB).order_by(ProfileDB.created_at.desc()).limit(limit)).all()
            return [_to_model(row) for row in rows]

    def count_profiles(self, is_active: Optional[bool] = None, is_banned: Optional[bool] = None) -> int:
        query = select(func.count()).select_from(ProfileDB)
        if is_active is not None:
            query = query.where(ProfileDB.is_active.is_(is_active))
        if is_banned is not None:
            query = query.where(ProfileDB.is_banned.is_(is_banned))
        with self.transaction("count") as session:
            return int(session.scalar(query) or 0)
