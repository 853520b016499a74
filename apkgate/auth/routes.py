"""Routes for the auth blueprint."""

from firebase_admin import firestore
from flask import current_app, jsonify

from apkgate.decorators import json_endpoint
from apkgate.errors import NotFoundError, ValidationError
from apkgate.utils import load_form, mask_email

from . import bp
from .forms import LoginForm, RegisterForm
from .services import (
    EmailAlreadyRegistered,
    InvalidCredentials,
    UserNotFound,
    authenticate_user,
    register_user,
)


@bp.route("/RegisterUser", methods=["POST"])
@json_endpoint
def register():
    """Register a leader or member account."""
    current_app.logger.info("RegisterUser function triggered.")
    form = load_form(RegisterForm)
    email = form.email.data
    db = firestore.client()

    try:
        user_id = register_user(db, email, form.password.data, form.role.data)
    except EmailAlreadyRegistered as e:
        current_app.logger.info(f"Email already registered: {mask_email(email)}")
        raise ValidationError(str(e)) from e

    current_app.logger.info(f"User {user_id} registered as {form.role.data}.")
    return jsonify({"success": True, "message": "User registered successfully"})


@bp.route("/LoginUser", methods=["POST"])
@json_endpoint
def login():
    """Check a login attempt against the stored account."""
    current_app.logger.info("LoginUser function triggered.")
    form = load_form(LoginForm)
    email = form.email.data
    db = firestore.client()

    try:
        user_id = authenticate_user(db, email, form.password.data)
    except UserNotFound as e:
        current_app.logger.info(f"Login for unknown email {mask_email(email)}")
        raise NotFoundError(str(e)) from e
    except InvalidCredentials as e:
        raise ValidationError(str(e)) from e

    current_app.logger.info(f"User {user_id} logged in.")
    return jsonify({"success": True, "message": "Login successful", "userId": user_id})
