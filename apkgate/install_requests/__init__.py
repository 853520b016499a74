"""The install_requests blueprint."""

from flask import Blueprint

bp = Blueprint("install_requests", __name__, url_prefix="/api")

from . import routes  # noqa: E402

__all__ = ["routes"]
