"""Database schema and connection handling for GamerMatch (SQLAlchemy 2.0)."""

from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from gamermatch.utils.errors import DatabaseError
from gamermatch.utils.logging import get_logger

logger = get_logger(__name__)

SessionFactory = Callable[[], Session]


def utcnow() -> datetime:
    """Get current UTC time (naive) to replace datetime.utcnow()."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


class ProfileDB(Base):
    """Profile database model."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    display_name: Mapped[str] = mapped_column(String(30))
    date_of_birth: Mapped[date] = mapped_column(Date)
    pronouns: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    region: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    platforms: Mapped[List[str]] = mapped_column(JSON, default=list)
    favorite_genres: Mapped[List[str]] = mapped_column(JSON, default=list)
    top_games: Mapped[List[str]] = mapped_column(JSON, default=list)
    playstyle: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    voice_chat: Mapped[bool] = mapped_column(Boolean, default=False)
    typical_play_times: Mapped[List[str]] = mapped_column(JSON, default=list)
    photo_urls: Mapped[List[str]] = mapped_column(JSON, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    is_banned: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    onboarding_completed: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class SwipeDB(Base):
    """Swipe database model. One row per ordered (swiper, swiped) pair."""

    __tablename__ = "swipes"
    __table_args__ = (
        UniqueConstraint("swiper_id", "swiped_id", name="uq_swipes_swiper_swiped"),
        CheckConstraint("swiper_id <> swiped_id", name="ck_swipes_no_self_swipe"),
        Index("idx_swipes_swiped_action", "swiped_id", "action"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    swiper_id: Mapped[str] = mapped_column(String(64), ForeignKey("profiles.id"), index=True)
    swiped_id: Mapped[str] = mapped_column(String(64), ForeignKey("profiles.id"))
    action: Mapped[str] = mapped_column(String(10))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)


class MatchDB(Base):
    """Match database model, keyed by the canonical (user1_id < user2_id) pair."""

    __tablename__ = "matches"
    __table_args__ = (
        UniqueConstraint("user1_id", "user2_id", name="uq_matches_pair"),
        CheckConstraint("user1_id < user2_id", name="ck_matches_canonical_order"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user1_id: Mapped[str] = mapped_column(String(64), ForeignKey("profiles.id"), index=True)
    user2_id: Mapped[str] = mapped_column(String(64), ForeignKey("profiles.id"), index=True)
    matched_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    unmatched_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    unmatched_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    unmatch_reason: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)


class BlockDB(Base):
    """Block database model."""

    __tablename__ = "blocks"
    __table_args__ = (UniqueConstraint("blocker_id", "blocked_id", name="uq_blocks_pair"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    blocker_id: Mapped[str] = mapped_column(String(64), ForeignKey("profiles.id"), index=True)
    blocked_id: Mapped[str] = mapped_column(String(64), ForeignKey("profiles.id"), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class ReportDB(Base):
    """Report database model."""

    __tablename__ = "reports"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    reporter_id: Mapped[str] = mapped_column(String(64), ForeignKey("profiles.id"), index=True)
    reported_id: Mapped[str] = mapped_column(String(64), ForeignKey("profiles.id"), index=True)
    category: Mapped[str] = mapped_column(String(30))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="pending", index=True)
    admin_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)


class DeletionRequestDB(Base):
    """Scheduled account deletion. At most one request per user."""

    __tablename__ = "deletion_requests"

    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("profiles.id"), primary_key=True)
    requested_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    scheduled_deletion_at: Mapped[datetime] = mapped_column(DateTime, index=True)
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL.

    `postgres://` URLs are rewritten to `postgresql://`. In-memory SQLite
    databases share one connection so that every session sees the same data.
    """
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)

    if _is_sqlite(database_url):
        kwargs: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)

    return create_engine(database_url, pool_recycle=300, pool_pre_ping=True, echo=echo)


class Database:
    """Singleton database connection manager."""

    _engine: Optional[Engine] = None
    _session_factory: Optional[sessionmaker] = None

    @classmethod
    def get_engine(cls) -> Engine:
        """Get or create the database engine."""
        if cls._engine is None:
            from gamermatch.config import get_settings

            settings = get_settings()
            database_url = settings.DATABASE_URL

            if not database_url:
                raise DatabaseError("DATABASE_URL is not configured")

            try:
                cls._engine = build_engine(database_url, echo=settings.DEBUG and not _is_sqlite(database_url))
                logger.info("Database engine created")
            except Exception as e:
                safe_url = _redact_url(database_url)
                logger.error("Failed to create database engine", error=str(e), url=safe_url)
                raise DatabaseError("Failed to connect to database", details={"error": str(e), "url": safe_url}) from e
        return cls._engine

    @classmethod
    def get_session_factory(cls) -> sessionmaker:
        """Get or create the session factory."""
        if cls._session_factory is None:
            cls._session_factory = sessionmaker(bind=cls.get_engine(), expire_on_commit=False)
        return cls._session_factory

    @classmethod
    def get_session(cls) -> Session:
        """Get a new database session."""
        return cls.get_session_factory()()

    @classmethod
    def create_tables(cls) -> None:
        """Create all database tables."""
        Base.metadata.create_all(cls.get_engine())
        logger.info("Database tables created")

    @classmethod
    def reset(cls) -> None:
        """Dispose of the engine so the next call reads settings again."""
        if cls._engine is not None:
            cls._engine.dispose()
        cls._engine = None
        cls._session_factory = None


def _redact_url(database_url: str) -> str:
    try:
        return make_url(database_url).render_as_string(hide_password=True)
    except ArgumentError:
        return "REDACTED_MALFORMED_URL"


def get_session() -> Session:
    """Get a database session."""
    return Database.get_session()


def init_database() -> None:
    """Initialize the database and create tables."""
    Database.create_tables()


@contextmanager
def session_scope(session_factory: SessionFactory) -> Iterator[Session]:
    """
    Run one unit of work in its own transaction.

    Commits on success; rolls back and re-raises on any error. The session is
    always closed.
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def model_to_dict(row: Any) -> Dict[str, Any]:
    """Convert a SQLAlchemy row object to a plain dictionary of its columns."""
    return {c.name: getattr(row, c.name) for c in row.__table__.columns}
