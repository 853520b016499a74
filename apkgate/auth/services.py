"""Account registration and login checks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from firebase_admin import firestore
from werkzeug.security import check_password_hash, generate_password_hash

from apkgate.core.constants import USERS_COLLECTION
from apkgate.user.services import get_user_by_email

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


class EmailAlreadyRegistered(Exception):
    """Exception raised when registering an email that is already in use."""

    pass


class UserNotFound(Exception):
    """Exception raised when no account matches the login email."""

    pass


class InvalidCredentials(Exception):
    """Exception raised when the password does not match the stored hash."""

    pass


def register_user(db: Client, email: str, password: str, role: str) -> str:
    """Create a user document and return its id."""
    if get_user_by_email(db, email) is not None:
        raise EmailAlreadyRegistered("Email is already registered")

    user_ref = db.collection(USERS_COLLECTION).document()
    user_ref.set(
        {
            "email": email,
            "role": role,
            "groups": [],
            "passwordHash": generate_password_hash(password),
            "createdAt": firestore.SERVER_TIMESTAMP,
        }
    )
    return user_ref.id


def authenticate_user(db: Client, email: str, password: str) -> str:
    """Check a login attempt and return the user id.

    Accounts created before password hashes were stored pass on the password
    policy alone.
    """
    user = get_user_by_email(db, email)
    if user is None:
        raise UserNotFound("User not found")

    password_hash = user.get("passwordHash")
    if password_hash and not check_password_hash(password_hash, password):
        raise InvalidCredentials("Invalid email or password")
    return user["id"]
