"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.

Instead of writing:
    async def get_book(request: Request, book_id: int = Path(...)):
        database = request.app.state.database

You can write:
    async def get_book(database: DatabaseDep, book_id: BookId):
"""

from typing import Annotated

from fastapi import Depends, Path, Request

from app.database import Database

# Range of a 32-bit signed integer (the books.id column type)
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def get_database(request: Request) -> Database:
    """
    Return the Database created at startup.

    create_app() stores it on app.state; nothing else holds a reference,
    so tests can inject their own Database through create_app(database=...).
    """
    return request.app.state.database


DatabaseDep = Annotated[Database, Depends(get_database)]

# Non-numeric ("abc"), fractional ("3.5") and out-of-range ids fail
# validation before any query runs and are answered with 400.
BookId = Annotated[
    int,
    Path(
        ge=INT32_MIN,
        le=INT32_MAX,
        description="Book ID (32-bit integer)",
        examples=[1, 42],
    ),
]
