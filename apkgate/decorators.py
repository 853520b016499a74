"""Decorators shared by the API blueprints."""

from functools import wraps

from flask import current_app

from .errors import AppError, InternalError


def json_endpoint(f):
    """Map any collaborator failure escaping a view onto ``InternalError``.

    ``AppError`` subclasses pass through untouched so the error handlers can
    render them with their own status code.
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except AppError:
            raise
        except Exception as e:
            current_app.logger.exception(f"Error in {f.__name__}: {e}")
            raise InternalError(f"Error: {e}") from e

    return decorated_function
