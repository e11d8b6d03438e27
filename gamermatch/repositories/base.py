"""Shared plumbing for the SQLAlchemy repositories."""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import sentry_sdk
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from gamermatch.utils.database import Database, SessionFactory, session_scope
from gamermatch.utils.errors import PersistenceError
from gamermatch.utils.logging import get_logger

logger = get_logger(__name__)


class SqlRepository:
    """
    Base class for one repository per entity.

    Each public method runs in its own short transaction. Unique-constraint
    violations (`IntegrityError`) are re-raised untouched so the repository can
    translate them into domain errors; every other database failure becomes a
    `PersistenceError`.
    """

    table: str = ""

    def __init__(self, session_factory: Optional[SessionFactory] = None) -> None:
        self._session_factory = session_factory

    @property
    def session_factory(self) -> SessionFactory:
        if self._session_factory is None:
            self._session_factory = Database.get_session_factory()
        return self._session_factory

    @contextmanager
    def transaction(self, operation: str, **context: Any) -> Iterator[Session]:
        with sentry_sdk.start_span(op="db.query", name=f"{operation.upper()} {self.table}") as span:
            span.set_data("table", self.table)
            try:
                with session_scope(self.session_factory) as session:
                    yield session
            except IntegrityError:
                span.set_status("already_exists")
                raise
            except SQLAlchemyError as e:
                span.set_status("internal_error")
                details: Dict[str, Any] = {"error": str(e), **context}
                logger.error(f"Failed to execute {operation} on {self.table}", **details)
                raise PersistenceError(f"Database operation failed: {operation} on {self.table}", details=details) from e
