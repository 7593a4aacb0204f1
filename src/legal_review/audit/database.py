"""Database connection management for the audit trail."""

import os
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base


DEFAULT_DATABASE_URL = "sqlite:///:memory:"


def get_database_url(database_url: Optional[str] = None) -> str:
    """
    Resolve the audit database URL.

    Args:
        database_url: Explicit URL. Falls back to the
            ``LEGAL_REVIEW_DATABASE_URL`` environment variable, then to an
            in-memory SQLite database.

    Returns:
        SQLAlchemy connection URL string.
    """
    return database_url or os.environ.get("LEGAL_REVIEW_DATABASE_URL", DEFAULT_DATABASE_URL)


class DatabaseManager:
    """
    Database connection manager with connection pooling.

    Handles database connections, session management, and schema
    initialization.
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        pool_size: int = 5,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        """
        Initialize the database manager.

        Args:
            database_url: Connection URL. If None, resolved by get_database_url().
            pool_size: Number of connections to keep in the pool.
            max_overflow: Maximum overflow connections beyond pool_size.
            echo: If True, log all SQL statements.
        """
        self._database_url = get_database_url(database_url)
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._echo = echo

    @property
    def database_url(self) -> str:
        return self._database_url

    @property
    def engine(self) -> Engine:
        """Get or create the database engine."""
        if self._engine is None:
            if self._database_url.startswith("sqlite"):
                kwargs = {"connect_args": {"check_same_thread": False}}
                # An in-memory database only lives as long as its connection
                if ":memory:" in self._database_url or self._database_url == "sqlite://":
                    kwargs["poolclass"] = StaticPool
                self._engine = create_engine(self._database_url, echo=self._echo, **kwargs)
            else:
                self._engine = create_engine(
                    self._database_url,
                    pool_size=self._pool_size,
                    max_overflow=self._max_overflow,
                    echo=self._echo,
                    pool_pre_ping=True,
                )
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
            )
        return self._session_factory

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Get a database session with automatic commit/rollback.

        Yields:
            SQLAlchemy Session object.

        Example:
            with db_manager.get_session() as session:
                session.add(some_object)
        """
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_database(self) -> None:
        """Create all tables defined in the models."""
        Base.metadata.create_all(self.engine)

    def close(self) -> None:
        """Close the database engine and release all connections."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
