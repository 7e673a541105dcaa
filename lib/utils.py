# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from typing import Any


# =============================================================================
# Path Utilities
# =============================================================================

def join_paths(*parts: Any) -> str:
    """
    Join path or URL segments with a single slash between them.

    Empty and None segments are skipped. A leading slash on the first
    segment is kept, inner duplicate slashes are collapsed, and a scheme
    such as "https://" on the first segment survives untouched.

    Example:
        join_paths("/users/", 123)                    # "/users/123"
        join_paths("", "", 42)                        # "42"
        join_paths("https://api.test", "/items", "")  # "https://api.test/items"
    """
    pieces = [str(p) for p in parts if p is not None and str(p) != ""]
    if not pieces:
        return ""

    lead = "/" if pieces[0].startswith("/") else ""
    segments = [piece.strip("/") for piece in pieces]
    return lead + "/".join(s for s in segments if s)


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging

    Example:
        class MyServiceError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="MY_SERVICE_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging or serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
