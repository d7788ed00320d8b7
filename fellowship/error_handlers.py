from flask import Blueprint, current_app, jsonify
from flask_wtf.csrf import CSRFError

from .errors import AppError

error_handlers_bp = Blueprint("error_handlers", __name__)


def _error_response(code, message, status_code):
    return jsonify({"error": code, "message": message}), status_code


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles application errors, including every domain-specific subclass."""
    if error.status_code >= 500:
        current_app.logger.error(f"Application Error: {error.message}")
    else:
        current_app.logger.warning(f"{error.code}: {error.message}")
    return _error_response(error.code, error.message, error.status_code)


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """
    Handles CSRF errors, which usually indicate a session timeout or a
    request that did not carry the session's CSRF token.
    """
    current_app.logger.warning(f"CSRF Error: {e.description}")
    return _error_response("CSRFError", e.description, 400)


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return _error_response("NotFound", "Route not found.", 404)


@error_handlers_bp.app_errorhandler(405)
def handle_405(e):
    """Handles requests made with an unsupported method."""
    return _error_response("MethodNotAllowed", "Method not allowed.", 405)


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return _error_response("Internal", "An unexpected error occurred.", 500)
