"""
Pydantic Schemas Package

This package contains Pydantic models for request/response validation.

Schema Naming Convention:
- XxxBase: Shared fields between create/update
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields accepted when updating a record
- XxxResponse: Fields returned in API responses
"""

from app.schemas.book import (
    BookBase,
    BookCreate,
    BookResponse,
    BookUpdate,
)

__all__ = [
    "BookBase",
    "BookCreate",
    "BookUpdate",
    "BookResponse",
]
