"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 for the Books API.

Persistence Pool
================
The Database object owns a single SQLAlchemy Engine. The engine keeps a
bounded pool of live connections:
- pool_size: Number of connections to keep open permanently
- max_overflow: How many extra connections can be opened under load
- pool_timeout: How long a request waits for a free connection
- pool_pre_ping: Test connection health before handing it out

There is no module-level engine. main.create_app() builds one Database at
startup, stores it on app.state and handlers receive it through the
DatabaseDep dependency.

Session Management Pattern
==========================
We use one short "lease" per request:
1. Check a connection out of the pool (a new Session)
2. Run exactly one statement
3. Commit on success, rollback on failure
4. Close the session, returning the connection to the pool

SQLAlchemy's Session API is blocking, so Database.run() executes the lease
on a worker thread and the event loop keeps accepting connections while a
query is in flight.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from app.errors import InternalError

if TYPE_CHECKING:
    from app.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

        class Book(Base):
            __tablename__ = "books"
            ...
    """
    pass


# =============================================================================
# Database
# =============================================================================
class Database:
    """
    Connection pool plus session factory for one database.

    Usage:
        database = Database.from_settings(get_settings())
        database.ping()

        with database.lease() as session:
            session.execute(...)

        # From async code (route handlers)
        book = await database.run(get_book, book_id)
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        # expire_on_commit=False keeps returned rows readable after the
        # lease closes, when the response is serialized.
        self._session_factory = sessionmaker(
            bind=engine,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "Database":
        """
        Create the engine from application settings.

        No connection is opened here; call ping() to verify the database
        is reachable.

        Raises:
            sqlalchemy.exc.ArgumentError: If database_url cannot be parsed
        """
        engine = create_engine(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_pre_ping=True,
            echo=settings.debug,
        )
        logger.info(
            f"Database pool configured (pool_size={settings.db_pool_size}, "
            f"max_overflow={settings.db_max_overflow})"
        )
        return cls(engine)

    # -------------------------------------------------------------------------
    # Connection Leases
    # -------------------------------------------------------------------------
    @contextmanager
    def lease(self) -> Iterator[Session]:
        """
        Lease a pooled connection for one unit of work.

        The session commits when the block exits normally and rolls back
        when it raises. It is always closed, which returns the connection
        to the pool.
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    async def run(self, operation: Callable[..., T], *args: Any) -> T:
        """
        Run operation(session, *args) inside a lease on a worker thread.

        Storage failures (pool timeout, lost connection, SQL errors) are
        logged and re-raised as InternalError. Any other exception, such
        as NotFoundError, propagates unchanged.
        """
        return await run_in_threadpool(self._run_leased, operation, *args)

    def _run_leased(self, operation: Callable[..., T], *args: Any) -> T:
        try:
            with self.lease() as session:
                return operation(session, *args)
        except SQLAlchemyError as exc:
            logger.error(
                f"Database error in {operation.__name__} args={args}: {exc}",
                exc_info=True,
            )
            raise InternalError() from exc

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------
    def ping(self) -> None:
        """
        Run SELECT 1 on a pooled connection.

        Raises:
            sqlalchemy.exc.SQLAlchemyError: If the database is unreachable
        """
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def is_healthy(self) -> bool:
        """ping() as a boolean, for the health check endpoint."""
        try:
            self.ping()
        except SQLAlchemyError as exc:
            logger.warning(f"Database health check failed: {exc}")
            return False
        return True

    # -------------------------------------------------------------------------
    # Utility Functions
    # -------------------------------------------------------------------------
    def create_tables(self) -> None:
        """
        Create all tables that don't exist yet.

        Development and test helper; it doesn't track schema changes.
        """
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self) -> None:
        """Drop all tables. Deletes all data!"""
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
