"""
Test Suite for Books API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_books.py: Tests for /api/books and /api/book endpoints
- test_book_queries.py: Tests for the query layer against a Session
- test_database.py: Tests for connection leases and error mapping
- test_config.py: Tests for settings loading and validation

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_books.py

    # Run with verbose output
    pytest -v
"""
