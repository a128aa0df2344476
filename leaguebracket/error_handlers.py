from flask import Blueprint, current_app, jsonify
from google.api_core.exceptions import GoogleAPICallError

from .errors import AppError, NotFoundError, UnsupportedFormatError, ValidationError

error_handlers_bp = Blueprint("error_handlers", __name__)


def _error_response(message, status_code, **extra):
    payload = {"status": "error", "message": message}
    payload.update(extra)
    return jsonify(payload), status_code


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors, including per-field form errors."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    if error.errors:
        return _error_response(error.message, error.status_code, errors=error.errors)
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(UnsupportedFormatError)
def handle_unsupported_format_error(error):
    """Handles requests for tournament formats that do not exist yet."""
    current_app.logger.warning(f"Unsupported Format: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles not found errors."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors."""
    current_app.logger.error(f"Application Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return _error_response("Page Not Found", 404)


@error_handlers_bp.app_errorhandler(405)
def handle_405(e):
    """Handles requests with a method the route does not accept."""
    return _error_response("Method Not Allowed", 405)


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return _error_response("An unexpected error occurred.", 500)


@error_handlers_bp.app_errorhandler(GoogleAPICallError)
def handle_db_error(e):
    """Handles Firestore errors."""
    current_app.logger.error(f"Database Error: {e}")
    # Avoid exposing raw database error details to the user
    return _error_response("A database error occurred. Please try again later.", 503)
