#!/usr/bin/env python3
"""
Database Seed Script

Creates the books table (if missing) and fills it with sample books for
local development.

USAGE:
    # From the project root, with DATABASE_URL set
    python scripts/seed_data.py

    # Keep existing rows
    python scripts/seed_data.py --keep
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import Database
from app.models import Book

BOOKS_DATA = [
    {"name": "1984", "author": "George Orwell"},
    {"name": "Animal Farm", "author": "George Orwell"},
    {"name": "Pride and Prejudice", "author": "Jane Austen"},
    {"name": "The Old Man and the Sea", "author": "Ernest Hemingway"},
    {"name": "Murder on the Orient Express", "author": "Agatha Christie"},
    {"name": "Foundation", "author": "Isaac Asimov"},
    {"name": "The Hobbit", "author": "J.R.R. Tolkien"},
    {"name": "Dune", "author": "Frank Herbert"},
]


def clear_data(db: Session) -> None:
    """Delete every book."""
    print("Clearing existing data...")
    db.execute(delete(Book))
    print("Data cleared.")


def create_books(db: Session) -> list[Book]:
    """Insert the sample books."""
    print("Creating books...")
    books = [Book(**data) for data in BOOKS_DATA]
    db.add_all(books)
    db.flush()
    print(f"Created {len(books)} books.")
    return books


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    settings = get_settings()
    database = Database.from_settings(settings)

    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    database.create_tables()

    try:
        with database.lease() as db:
            if clear_existing:
                clear_data(db)
            books = create_books(db)
    finally:
        database.dispose()

    print("=" * 60)
    print("Database seeding completed successfully!")
    print("=" * 60)
    print(f"\nBooks: {len(books)}")
    print(f"\nYou can now access the API at http://{settings.host}:{settings.port}/api/books")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the books table")
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Keep existing rows instead of clearing the table first",
    )
    args = parser.parse_args()
    seed_database(clear_existing=not args.keep)
