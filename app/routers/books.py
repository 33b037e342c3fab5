"""
Books Router

CRUD endpoints for books.

    GET    /api/books          list (at most 100 rows)
    GET    /api/book/{id}      get one
    POST   /api/book           create
    PUT    /api/book/{id}      replace name/author
    DELETE /api/book/{id}      delete, returns affected row count

Every handler runs exactly one query through Database.run(), which leases
a pooled connection on a worker thread. NotFoundError, InternalError and
request validation failures are turned into responses by the exception
handlers registered in app.main.
"""

from typing import List

from fastapi import APIRouter

from app.dependencies import BookId, DatabaseDep
from app.schemas import BookCreate, BookResponse, BookUpdate
from app.services import books as book_queries

router = APIRouter(
    tags=["Books"],
    responses={
        400: {"description": "Invalid book ID or request body"},
        500: {"description": "Database unavailable"},
    },
)


@router.get(
    "/books",
    response_model=List[BookResponse],
    summary="List books",
    description="Get up to 100 books in storage order.",
)
async def list_books(database: DatabaseDep) -> List[BookResponse]:
    """List books. An empty table returns an empty list."""
    books = await database.run(book_queries.list_books)
    return [BookResponse.model_validate(book) for book in books]


@router.get(
    "/book/{book_id}",
    response_model=BookResponse,
    summary="Get a book by ID",
    responses={404: {"description": "Book not found"}},
)
async def get_book(book_id: BookId, database: DatabaseDep) -> BookResponse:
    """
    Get a single book by its ID.

    Raises:
        NotFoundError: 404 if book not found
    """
    book = await database.run(book_queries.get_book, book_id)
    return BookResponse.model_validate(book)


@router.post(
    "/book",
    response_model=BookResponse,
    summary="Create a new book",
    description="Create a book and return it with its assigned ID.",
)
async def create_book(book_data: BookCreate, database: DatabaseDep) -> BookResponse:
    """Create a new book."""
    book = await database.run(book_queries.create_book, book_data)
    return BookResponse.model_validate(book)


@router.put(
    "/book/{book_id}",
    response_model=BookResponse,
    summary="Update a book",
    description="Replace the name and author of an existing book.",
    responses={404: {"description": "Book not found"}},
)
async def update_book(
    book_id: BookId,
    book_data: BookUpdate,
    database: DatabaseDep,
) -> BookResponse:
    """
    Update an existing book.

    The ID is taken from the path and never changes.

    Raises:
        NotFoundError: 404 if book not found
    """
    book = await database.run(book_queries.update_book, book_id, book_data)
    return BookResponse.model_validate(book)


@router.delete(
    "/book/{book_id}",
    response_model=int,
    summary="Delete a book",
    description="Permanently delete a book. Returns the number of deleted rows.",
    responses={404: {"description": "Book not found"}},
)
async def delete_book(book_id: BookId, database: DatabaseDep) -> int:
    """
    Delete a book.

    Raises:
        NotFoundError: 404 if book not found
    """
    return await database.run(book_queries.delete_book, book_id)
