# core/errors.py

from typing import Optional
from fastapi import HTTPException


# ============================================================
# ACCESS ERROR TAXONOMY
# ============================================================
class AccessError(Exception):
    """Base class for every error raised by the access core."""


class NotAuthenticated(AccessError):
    """No signed-in principal. Surfaced as a redirect, never as a banner."""

    def __init__(self, message: str = "No authenticated principal"):
        super().__init__(message)


class BackendError(AccessError):
    """
    Transport or query failure talking to Supabase.
    Resolvers catch it and fail closed; it never escapes as a success.
    """

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation}: {detail}")


class RoleFetchFailed(BackendError):
    pass


class ApprovalFetchFailed(BackendError):
    pass


class SignInRequired(AccessError):
    """
    Raised by route-level gates for anonymous visitors.
    main.py turns it into a redirect to the sign-in page.
    """

    def __init__(self, redirect_to: str, requested_location: Optional[str] = None):
        self.redirect_to = redirect_to
        self.requested_location = requested_location
        super().__init__(f"Sign-in required (next={requested_location})")


# ============================================================
# SUPABASE ERROR HELPERS
# ============================================================
def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1 — Supabase Auth / GoTrue / PostgREST errors carry .message
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2 — Supabase errors with args (common)
    if error.args:
        return str(error.args[0])

    # Case 3 — Plain string fallback
    return str(error) or error.__class__.__name__


def handle_supabase_error(error: Exception, operation: str = "Database operation", status_code: int = 500) -> HTTPException:
    """
    Handle Supabase errors with consistent formatting.
    Returns HTTPException (doesn't raise) so caller can customize or re-raise.

    Args:
        error: The exception that occurred
        operation: Description of what operation failed (e.g., "Approve member")
        status_code: HTTP status code (default 500)

    Returns:
        HTTPException with standardized error message
    """
    from core.logging_config import logger

    if isinstance(error, BackendError):
        error_detail = error.detail
    else:
        error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    # Provide user-friendly messages for common errors
    error_lower = error_detail.lower()
    if "duplicate" in error_lower or "unique" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Record already exists")
    elif "foreign key" in error_lower or "violates foreign key" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Invalid reference")
    elif "not found" in error_lower or "does not exist" in error_lower:
        return HTTPException(status_code=404, detail=f"{operation}: Resource not found")
    else:
        return HTTPException(status_code=status_code, detail=f"{operation} failed")
