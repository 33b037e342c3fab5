"""
API Error Types

Every failure a request can hit is converted into one of three errors.
The exception handlers in app.main turn them into JSON responses of the
form {"detail": "..."} with the matching status code.

- ValidationError: malformed path parameter or request body (400)
- NotFoundError: no book row matches the given id (404)
- InternalError: pool, connection or storage failure (500)

The detail message is generic on purpose: server-side logs carry the
operation and id, the client only sees the status and a short message.
"""

from fastapi import status


class APIError(Exception):
    """Base class for errors that map directly onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "An internal error occurred."

    def __init__(self, detail: str | None = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class ValidationError(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid request parameters."


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Book not found."


class InternalError(APIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "An internal error occurred."
