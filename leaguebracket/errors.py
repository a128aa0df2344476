"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when tournament setup or a match result fails validation."""

    def __init__(self, message="Validation failed.", errors=None):
        """Initialize the error with optional per-field errors."""
        super().__init__(message, 400)
        self.errors = errors or {}


class UnsupportedFormatError(AppError):
    """Raised for tournament formats that are not implemented."""

    def __init__(self, message="Tournament format not yet implemented."):
        """Initialize the error."""
        super().__init__(message, 501)


class NotFoundError(AppError):
    """Raised when a tournament, match or team is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)
