"""
pytest Fixtures for Books API Tests

FIXTURE SCOPES:
- function (default): New instance per test function

Every test gets its own in-memory SQLite database, so tests never see
each other's rows.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app.
# app.main reads settings at import time and DATABASE_URL is required.
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from app.config import Settings
from app.database import Database
from app.main import create_app
from app.models import Book

# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# We use SQLite in-memory for tests because:
# - Fast: No disk I/O, runs in memory
# - Isolated: Each test starts fresh
# - Simple: No external database needed
#
# StaticPool keeps the single connection alive for the whole test.
# Without it, the in-memory database would disappear between connections.
# check_same_thread=False is needed because queries run on worker threads.


@pytest.fixture
def database() -> Generator[Database, None, None]:
    """Create a Database backed by a fresh in-memory SQLite engine."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database = Database(engine)
    database.create_tables()

    yield database

    database.drop_tables()
    database.dispose()


@pytest.fixture
def db_session(database: Database) -> Generator[Session, None, None]:
    """A leased session; committed when the test finishes without error."""
    with database.lease() as session:
        yield session


@pytest.fixture
def test_settings() -> Settings:
    return Settings(database_url="sqlite://", _env_file=None)


@pytest.fixture
def client(
    database: Database,
    test_settings: Settings,
) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    The database is passed to create_app(), the same way main.py wires
    the real one at startup.
    """
    app = create_app(test_settings, database=database)

    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_book(database: Database) -> Book:
    """Create a sample book for testing."""
    with database.lease() as session:
        book = Book(name="Dune", author="Frank Herbert")
        session.add(book)
        session.flush()
    return book


@pytest.fixture
def many_books(database: Database) -> int:
    """Insert more books than a single list response may contain."""
    count = 120
    with database.lease() as session:
        session.add_all(
            Book(name=f"Test Book {i + 1}", author=f"Author {i % 7}")
            for i in range(count)
        )
    return count
