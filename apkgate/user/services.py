"""User lookups shared by the API blueprints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from apkgate.core.constants import ROLE_LEADER, USERS_COLLECTION
from apkgate.core.types import UserDocument

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client


def get_user_by_id(db: Client, user_id: str) -> UserDocument | None:
    """Fetch a user by their ID."""
    user_ref = db.collection(USERS_COLLECTION).document(user_id)
    user_doc = cast("DocumentSnapshot", user_ref.get())
    if not user_doc.exists:
        return None
    data = user_doc.to_dict()
    if data is None:
        return None
    data["id"] = user_id
    return cast(UserDocument, data)


def get_user_by_email(db: Client, email: str) -> UserDocument | None:
    """Fetch the first user registered with exactly this email."""
    query = (
        db.collection(USERS_COLLECTION)
        .where(filter=firestore.FieldFilter("email", "==", email))
        .limit(1)
    )
    for doc in query.stream():
        data = doc.to_dict() or {}
        data["id"] = doc.id
        return cast(UserDocument, data)
    return None


def is_leader(user: dict[str, Any] | None) -> bool:
    """Whether a user document carries the leader role."""
    return bool(user) and user.get("role") == ROLE_LEADER
