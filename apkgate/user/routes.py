"""Routes for the user blueprint."""

from firebase_admin import firestore
from flask import jsonify

from apkgate.decorators import json_endpoint
from apkgate.errors import NotFoundError
from apkgate.utils import load_form

from . import bp
from .forms import UserIdForm
from .services import get_user_by_id


@bp.route("/FetchUserEmail", methods=["POST"])
@json_endpoint
def fetch_user_email():
    """Return the email address registered for a user id."""
    form = load_form(UserIdForm)
    user_id = form.userId.data
    db = firestore.client()

    user = get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError(f"User with userId {user_id} not found.")

    email = user.get("email")
    if not email:
        raise NotFoundError(f"Email not found for userId {user_id}.")

    return jsonify({"email": email})
