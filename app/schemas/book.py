"""
Book Pydantic Schemas

Request payloads never carry an id: it is assigned by the database on
create and taken from the URL path on update/delete. Unknown keys in a
request body (including "id") are ignored.

name and author are stored exactly as sent. Only missing fields, null
values and non-string types are rejected.
"""

from pydantic import BaseModel, ConfigDict, Field


class BookBase(BaseModel):
    """Base schema with shared book fields."""

    name: str = Field(
        ...,
        description="Book title",
        examples=["Dune", "1984"],
    )

    author: str = Field(
        ...,
        description="Author name",
        examples=["Frank Herbert", "George Orwell"],
    )


class BookCreate(BookBase):
    """
    Schema for creating a new book.

    Example request body:
    {
        "name": "Dune",
        "author": "Frank Herbert"
    }
    """


class BookUpdate(BookBase):
    """
    Schema for updating an existing book.

    PUT replaces both fields, so both are required.
    """


class BookResponse(BaseModel):
    """
    Schema for book responses.

    Built from stored rows, so it accepts any text the table holds.
    """

    id: int = Field(..., description="Unique identifier")
    name: str = Field(..., description="Book title")
    author: str = Field(..., description="Author name")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Dune",
                "author": "Frank Herbert",
            }
        },
    )
