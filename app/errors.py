"""
Catalog error taxonomy.

Raised by the pricing engine and the record handlers; translated into the
`{"success": false, "message": ...}` envelope by the exception handlers
registered in app.main. Every error is terminal for the request — nothing
is retried and nothing has been written when one of these is raised.
"""

from typing import Optional


class CatalogError(Exception):
    """Base class. `status_code` is the HTTP status the error maps to."""

    status_code: int = 500

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def __repr__(self) -> str:
        return f"<{type(self).__name__} message={self.message!r} field={self.field!r}>"


class ValidationError(CatalogError):
    """Bad input shape or an invariant violation on the merged candidate."""

    status_code = 400


class NotFoundError(CatalogError):
    """Target record, parent or owner does not exist."""

    status_code = 404


class ConflictError(CatalogError):
    """Uniqueness violation (duplicate name within its scope)."""

    status_code = 400


class InternalError(CatalogError):
    """Unexpected storage or runtime failure. The message is never detailed."""

    status_code = 500

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)
