"""
Tests for the Database pool wrapper.

Covers:
- Connection leases (commit, rollback, release)
- Database.run() offload and error mapping
- Startup behavior when the database is unreachable
"""

import threading
from unittest.mock import MagicMock, patch

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, func, select
from sqlalchemy.exc import OperationalError, SQLAlchemyError, TimeoutError as PoolTimeoutError

from app.config import Settings
from app.database import Database
from app.errors import APIError, InternalError, NotFoundError
from app.main import create_app
from app.models import Book


def count_books(database: Database) -> int:
    with database.lease() as session:
        return session.execute(select(func.count()).select_from(Book)).scalar_one()


class TestLease:

    def test_lease_commits_on_success(self, database):
        with database.lease() as session:
            session.add(Book(name="Dune", author="Frank Herbert"))

        assert count_books(database) == 1

    def test_lease_rolls_back_on_error(self, database):
        with pytest.raises(RuntimeError):
            with database.lease() as session:
                session.add(Book(name="Dune", author="Frank Herbert"))
                session.flush()
                raise RuntimeError("boom")

        assert count_books(database) == 0

    def test_lease_always_closes_session(self, database):
        session_mock = MagicMock()
        database._session_factory = MagicMock(return_value=session_mock)

        with pytest.raises(ValueError):
            with database.lease():
                raise ValueError("boom")

        session_mock.rollback.assert_called_once()
        session_mock.commit.assert_not_called()
        session_mock.close.assert_called_once()


class TestRun:

    @pytest.mark.asyncio
    async def test_run_returns_result(self, database):
        def add_book(session, name):
            book = Book(name=name, author="Anonymous")
            session.add(book)
            session.flush()
            return book.id

        book_id = await database.run(add_book, "Beowulf")

        assert isinstance(book_id, int)
        assert count_books(database) == 1

    @pytest.mark.asyncio
    async def test_run_uses_worker_thread(self, database):
        """The operation must not run on the event loop thread."""
        loop_thread = threading.get_ident()

        def current_thread(session):
            return threading.get_ident()

        worker_thread = await database.run(current_thread)

        assert worker_thread != loop_thread

    @pytest.mark.asyncio
    async def test_run_maps_storage_errors(self, database):
        def broken(session):
            raise OperationalError("SELECT 1", {}, Exception("connection lost"))

        with pytest.raises(InternalError):
            await database.run(broken)

    @pytest.mark.asyncio
    async def test_run_maps_pool_timeout(self, database):
        def exhausted(session):
            raise PoolTimeoutError("QueuePool limit reached")

        with pytest.raises(InternalError):
            await database.run(exhausted)

    @pytest.mark.asyncio
    async def test_run_propagates_not_found(self, database):
        def missing(session):
            raise NotFoundError()

        with pytest.raises(NotFoundError):
            await database.run(missing)


class TestStorageFailures:
    """Storage failures reach the client as a generic 500."""

    def test_storage_errors_converted_inside_run(self, client):
        """Handlers only ever see InternalError, never SQLAlchemyError."""
        assert SQLAlchemyError not in client.app.exception_handlers
        assert issubclass(InternalError, APIError)
        assert APIError in client.app.exception_handlers

    def test_get_book_database_error(self, client, database):
        failing_factory = MagicMock(
            side_effect=OperationalError("SELECT", {}, Exception("db down"))
        )
        database._session_factory = failing_factory

        response = client.get("/api/book/1")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"detail": "An internal error occurred."}

    def test_list_books_database_error(self, client):
        def list_books(session):
            raise OperationalError("SELECT", {}, Exception("db down"))

        with patch("app.services.books.list_books", new=list_books):
            response = client.get("/api/books")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert "db down" not in response.text


class TestStartup:

    def test_from_settings_file_database(self, tmp_path):
        settings = Settings(
            database_url=f"sqlite:///{tmp_path / 'books.db'}",
            _env_file=None,
        )
        database = Database.from_settings(settings)

        database.ping()
        assert database.is_healthy()
        database.dispose()

    def test_startup_fails_when_database_unreachable(self, test_settings):
        # A directory that doesn't exist can't hold a SQLite file
        engine = create_engine("sqlite:////nonexistent-dir/books.db")
        app = create_app(test_settings, database=Database(engine))

        with pytest.raises(OperationalError):
            with TestClient(app):
                pass

    def test_is_healthy_false_when_unreachable(self):
        database = Database(create_engine("sqlite:////nonexistent-dir/books.db"))

        assert database.is_healthy() is False
