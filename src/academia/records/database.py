"""Database connection manager for academic records."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.pool import StaticPool

from academia.exceptions import AppError, ConflictError, PersistenceError
from academia.logging import get_logger
from academia.records.models import Base

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Engine

logger = get_logger("records")


class Database:
    """Database connection manager.

    Manages SQLite database connections with WAL mode and foreign keys enabled.
    """

    def __init__(self, db_path: str = "academia.db") -> None:
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Use ":memory:" for in-memory DB.
        """
        self.db_path = db_path
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine:
        """Get or create the database engine."""
        if self._engine is None:
            if self.db_path == ":memory:":
                # Single shared connection so every session sees the same in-memory DB
                self._engine = create_engine(
                    "sqlite:///:memory:",
                    future=True,
                    poolclass=StaticPool,
                    connect_args={"check_same_thread": False},
                )
            else:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
                self._engine = create_engine(
                    f"sqlite:///{self.db_path}",
                    future=True,
                    connect_args={"check_same_thread": False},
                )

            @event.listens_for(self._engine, "connect")
            def set_sqlite_pragma(dbapi_connection: object, _connection_record: object) -> None:
                cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        return self._engine

    @property
    def session_factory(self) -> sessionmaker[Session]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                expire_on_commit=False,
            )
        return self._session_factory

    def create_tables(self) -> None:
        """Create all tables if they don't exist."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop all tables. Use with caution!"""
        Base.metadata.drop_all(self.engine)

    def get_session(self) -> Session:
        """Get a new database session."""
        return self.session_factory()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Provide a session that is rolled back on error and always closed.

        Storage failures are translated into application errors:
        constraint violations and stale versioned updates become
        ConflictError, anything else from SQLAlchemy becomes PersistenceError.
        Application errors raised inside the block propagate unchanged.

        Yields:
            An open SQLAlchemy session. The caller commits.
        """
        session = self.get_session()
        try:
            yield session
        except AppError:
            session.rollback()
            raise
        except IntegrityError as e:
            session.rollback()
            logger.warning("Constraint violation: %s", e.orig)
            raise ConflictError(_describe_integrity_error(e)) from e
        except StaleDataError as e:
            session.rollback()
            raise ConflictError("Record was modified concurrently, please retry") from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.exception("Unexpected storage failure")
            raise PersistenceError("Unexpected storage failure") from e
        finally:
            session.close()

    def close(self) -> None:
        """Close the database connection."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None


def _describe_integrity_error(error: IntegrityError) -> str:
    """Build a readable message from a constraint violation."""
    detail = str(error.orig)
    if "academic_semesters.name, academic_semesters.year" in detail:
        return "Academic semester with this name and year already exists"
    if "semester_registrations.academic_semester_id" in detail:
        return "This academic semester is already registered"
    if "FOREIGN KEY constraint failed" in detail:
        return "Referenced record does not exist"
    return "Record violates a uniqueness constraint"
