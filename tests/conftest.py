"""pytest configuration and fixtures."""

import os

# Settings are read at import time, so the test environment has to be in place first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["ADMIN_IDS"] = "admin_1,admin_2"
os.environ.pop("REDIS_URL", None)
os.environ.pop("SENTRY_DSN", None)

from datetime import date, datetime, timedelta  # noqa: E402
from typing import Any, Callable, Iterator  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from gamermatch.models.profile import Genre, Platform, Playstyle, Profile, Region  # noqa: E402
from gamermatch.repositories import SqlEnv  # noqa: E402
from gamermatch.utils.cache import RedisClient  # noqa: E402
from gamermatch.utils.database import Base, build_engine  # noqa: E402

BASE_CREATED_AT = datetime(2026, 1, 1, 12, 0, 0)


def build_profile(profile_id: str, **overrides: Any) -> Profile:
    """Build a complete, discoverable profile; any field can be overridden."""
    values: dict = {
        "id": profile_id,
        "display_name": f"player_{profile_id}"[:30],
        "date_of_birth": date(1995, 5, 17),
        "region": Region.EU_WEST,
        "platforms": [Platform.PC],
        "favorite_genres": [Genre.RPG],
        "top_games": ["Elden Ring"],
        "playstyle": Playstyle.CASUAL,
        "voice_chat": True,
        "onboarding_completed": True,
        "created_at": BASE_CREATED_AT,
        "updated_at": BASE_CREATED_AT,
    }
    values.update(overrides)
    return Profile(**values)


@pytest.fixture
def session_factory() -> Iterator[sessionmaker]:
    """Fresh in-memory database per test."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def env(session_factory: sessionmaker) -> SqlEnv:
    return SqlEnv(session_factory)


@pytest.fixture
def add_profile(env: SqlEnv) -> Callable[..., Profile]:
    """Store a profile built with `build_profile` and return it."""

    def _add(profile_id: str, **overrides: Any) -> Profile:
        return env.profiles.add_profile(build_profile(profile_id, **overrides))

    return _add


@pytest.fixture
def pair(add_profile: Callable[..., Profile]) -> tuple:
    """Two compatible, discoverable profiles: alice (older) and bob (newer)."""
    alice = add_profile("alice", created_at=BASE_CREATED_AT)
    bob = add_profile("bob", created_at=BASE_CREATED_AT + timedelta(days=1))
    return alice, bob


@pytest.fixture(autouse=True)
def reset_redis_client() -> Iterator[None]:
    """Keep the Redis singleton from leaking between tests."""
    RedisClient.reset()
    yield
    RedisClient.reset()
