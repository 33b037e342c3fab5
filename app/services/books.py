"""
Book Queries

One function per CRUD operation. Each takes a Session leased from the
pool and executes exactly one SQL statement:

    list_books   SELECT ... LIMIT 100
    get_book     SELECT ... WHERE id = :id
    create_book  INSERT ... RETURNING *
    update_book  UPDATE ... WHERE id = :id RETURNING *
    delete_book  DELETE ... WHERE id = :id

Missing rows raise NotFoundError. Storage errors propagate as
SQLAlchemyError; Database.run() turns them into InternalError.

These functions are blocking. Route handlers call them through
Database.run(), which executes them on a worker thread.
"""

import logging
from collections.abc import Sequence

from sqlalchemy import delete, insert, select, update
from sqlalchemy.orm import Session

from app.errors import NotFoundError
from app.models import Book
from app.schemas import BookCreate, BookUpdate

logger = logging.getLogger(__name__)

# Fixed page size; the API has no pagination parameters.
BOOK_LIST_LIMIT = 100


def list_books(db: Session, limit: int = BOOK_LIST_LIMIT) -> Sequence[Book]:
    """
    Return up to `limit` books in storage order.

    The limit is clamped to BOOK_LIST_LIMIT. An empty table yields an
    empty list.
    """
    limit = min(limit, BOOK_LIST_LIMIT)
    stmt = select(Book).limit(limit)
    return db.execute(stmt).scalars().all()


def get_book(db: Session, book_id: int) -> Book:
    """
    Get a book by ID.

    Raises:
        NotFoundError: If no book has this ID
    """
    stmt = select(Book).where(Book.id == book_id)
    book = db.execute(stmt).scalar_one_or_none()
    if book is None:
        logger.warning(f"Book ID: {book_id} not found in DB")
        raise NotFoundError()
    return book


def create_book(db: Session, book_data: BookCreate) -> Book:
    """Insert a new book and return the stored row with its new ID."""
    stmt = (
        insert(Book)
        .values(name=book_data.name, author=book_data.author)
        .returning(Book)
    )
    book = db.execute(stmt).scalar_one()
    logger.info(f"Created book ID: {book.id}")
    return book


def update_book(db: Session, book_id: int, book_data: BookUpdate) -> Book:
    """
    Replace name and author of an existing book.

    The ID is never changed. Zero affected rows means the book doesn't
    exist.

    Raises:
        NotFoundError: If no book has this ID
    """
    stmt = (
        update(Book)
        .where(Book.id == book_id)
        .values(name=book_data.name, author=book_data.author)
        .returning(Book)
        .execution_options(synchronize_session=False)
    )
    book = db.execute(stmt).scalar_one_or_none()
    if book is None:
        logger.warning(f"Book ID: {book_id} not found in DB, nothing updated")
        raise NotFoundError()
    return book


def delete_book(db: Session, book_id: int) -> int:
    """
    Delete a book and return the number of rows removed.

    Raises:
        NotFoundError: If no book has this ID
    """
    stmt = (
        delete(Book)
        .where(Book.id == book_id)
        .execution_options(synchronize_session=False)
    )
    deleted = db.execute(stmt).rowcount
    if deleted == 0:
        logger.warning(f"Book ID: {book_id} not found in DB, nothing deleted")
        raise NotFoundError()
    logger.info(f"Deleted book ID: {book_id}")
    return deleted
