"""
Book Model

The single persisted entity of the Books API.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Book(Base):
    """
    Book model representing books in the library.

    Table: books

    Fields:
    - id: Generated by the database, never changed afterwards
    - name: Book title (required)
    - author: Author name (required)

    Example:
        book = Book(name="Dune", author="Frank Herbert")
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(
        String,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String,
        nullable=False,
        comment="Author name"
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, name='{self.name}', author='{self.author}')"
