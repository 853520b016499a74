from flask import Blueprint, current_app, jsonify

from .errors import AppError, InternalError, NotFoundError, ValidationError

error_handlers_bp = Blueprint("error_handlers", __name__)


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles every application error by rendering its JSON body."""
    if error.status_code >= 500:
        current_app.logger.error(f"Application Error: {error.message}")
    else:
        current_app.logger.warning(
            f"{type(error).__name__} ({error.status_code}): {error.message}"
        )
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(400)
def handle_400(e):
    """Handles malformed requests rejected by werkzeug itself."""
    return handle_app_error(ValidationError("Invalid JSON format in request body."))


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return jsonify(NotFoundError("Not found.").to_dict()), 404


@error_handlers_bp.app_errorhandler(405)
def handle_405(e):
    """Handles requests using anything but the allowed method."""
    body = ValidationError("Method not allowed.").to_dict()
    return jsonify(body), 405


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    original = getattr(e, "original_exception", None) or e
    current_app.logger.error(f"Internal Server Error: {original}")
    return jsonify(InternalError(f"Error: {original}").to_dict()), 500
