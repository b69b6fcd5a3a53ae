"""Custom exceptions for the BlendRec API.

Defines specific exception types for better error handling and reporting.
"""

from typing import Any, Dict, Optional, Sequence


class BlendRecException(Exception):
    """Base exception for BlendRec errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code for API responses
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Error body returned to API clients."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }


class DataNotFoundError(BlendRecException):
    """Raised when catalog or interaction snapshots cannot be found."""

    def __init__(self, data_dir: str, details: Optional[Dict[str, Any]] = None):
        message = (
            f"Data not found at '{data_dir}'. "
            "Expected catalog.csv and interactions.csv."
        )
        super().__init__(
            message=message,
            status_code=503,
            details=details or {"data_dir": data_dir},
        )


class DataLoadError(BlendRecException):
    """Raised when snapshot files exist but fail to load."""

    def __init__(self, data_dir: str, error: Exception):
        message = f"Failed to load data from '{data_dir}': {str(error)}"
        super().__init__(
            message=message,
            status_code=500,
            details={
                "data_dir": data_dir,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )


class InvalidModeError(BlendRecException):
    """Raised when an unknown recommendation mode is requested."""

    def __init__(self, mode: str, allowed: Sequence[str]):
        message = f"Unknown recommendation mode '{mode}'. Expected one of: {', '.join(allowed)}"
        super().__init__(
            message=message,
            status_code=400,
            details={"mode": mode, "allowed": list(allowed)},
        )


class RecommendationError(BlendRecException):
    """Raised when recommendation generation fails."""

    def __init__(self, user_id: str, error: Exception):
        message = f"Failed to generate recommendations for user {user_id}: {str(error)}"
        super().__init__(
            message=message,
            status_code=500,
            details={
                "user_id": user_id,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )
