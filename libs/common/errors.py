"""Error taxonomy shared by the store and loyalty services.

Each error is an ``HTTPException`` so routers and service functions can raise
them directly and FastAPI renders ``{"detail": ...}`` with the right status.
"""

from typing import Optional

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """Missing or malformed input. Raised before any write is attempted."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class PersistenceError(HTTPException):
    """A database write failed inside an atomic unit.

    ``step`` names the failing step for server-side diagnostics; the client
    only sees the generic detail.
    """

    def __init__(self, step: str, detail: Optional[str] = None):
        self.step = step
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail or f"Database error ({step})",
        )


class PoolExhaustedError(HTTPException):
    """No database slot could be obtained within the configured limits."""

    def __init__(self, detail: str = "Service busy, please retry shortly"):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            headers={"Retry-After": "1"},
        )
