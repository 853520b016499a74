"""Initialize the Flask app and its extensions."""

import logging

import firebase_admin
from firebase_admin import credentials
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Settings
from .extensions import notifier


def init_firebase(settings):
    """Initialize (or reuse) the default Firebase app from explicit settings."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    cred = credentials.Certificate(settings.service_account)
    return firebase_admin.initialize_app(cred, {"projectId": settings.project_id})


def create_app(test_config=None, settings=None):
    """Create and configure an instance of the Flask application.

    Outside of testing, ``settings`` defaults to ``Settings.from_env()``, which
    raises ``ConfigurationError`` when the service-account key is missing or
    malformed, so a misconfigured process never serves a request.
    """
    app = Flask(__name__, instance_relative_config=True)
    if test_config:
        app.config.update(test_config)

    firebase_app = None
    if not app.config.get("TESTING"):
        if settings is None:
            settings = Settings.from_env()
        app.config.update(
            SECRET_KEY=settings.secret_key,
            APP_VERSION=settings.app_version,
        )
        app.logger.setLevel(getattr(logging, settings.log_level, logging.INFO))
        firebase_app = init_firebase(settings)
        app.logger.info(f"Firebase initialized for project {settings.project_id}")

    # Initialize extensions
    notifier.init_app(app, firebase_app)

    # Register blueprints
    from . import auth as auth_bp

    app.register_blueprint(auth_bp.bp)

    from . import user as user_bp

    app.register_blueprint(user_bp.bp)

    from . import group as group_bp

    app.register_blueprint(group_bp.bp)

    from . import install_requests as install_requests_bp

    app.register_blueprint(install_requests_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
